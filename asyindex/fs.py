
import os
import stat
import errno
import asyncio
import functools
import posixpath


class EntryStat:
	"""The part of a stat result the listing cares about"""
	def __init__(self, size:int = 0, mtime:float = None, is_directory:bool = False):
		self.size = size
		self.mtime = mtime
		self.is_directory = is_directory

	def is_dir(self):
		return self.is_directory

	@staticmethod
	def from_os_stat(st:os.stat_result):
		return EntryStat(
			size = st.st_size,
			mtime = st.st_mtime,
			is_directory = stat.S_ISDIR(st.st_mode),
		)

	def __repr__(self):
		return 'EntryStat(size=%s, mtime=%s, is_directory=%s)' % (self.size, self.mtime, self.is_directory)


class FileSystem:
	"""
	Capability the index depends on for every filesystem access.
	Implementations raise OSError subclasses with a proper errno.
	"""
	pathmod = os.path

	async def stat(self, path:str) -> EntryStat:
		raise NotImplementedError()

	async def readdir(self, path:str):
		raise NotImplementedError()

	async def read_file(self, path:str) -> bytes:
		raise NotImplementedError()


class LocalFileSystem(FileSystem):
	"""Host filesystem; blocking calls run in the loop's executor"""
	pathmod = os.path

	def __init__(self, executor = None):
		self.executor = executor

	async def _run(self, func, *args):
		loop = asyncio.get_running_loop()
		return await loop.run_in_executor(self.executor, functools.partial(func, *args))

	async def stat(self, path:str) -> EntryStat:
		st = await self._run(os.stat, path)
		return EntryStat.from_os_stat(st)

	async def readdir(self, path:str):
		return await self._run(LocalFileSystem._list_names, path)

	async def read_file(self, path:str) -> bytes:
		return await self._run(LocalFileSystem._read_bytes, path)

	@staticmethod
	def _list_names(path:str):
		# names that are not valid utf-8 are decoded lossily
		return [name.decode('utf-8', 'replace') for name in os.listdir(os.fsencode(path))]

	@staticmethod
	def _read_bytes(path:str):
		with open(path, 'rb') as f:
			return f.read()


class MemoryFileSystem(FileSystem):
	"""
	Virtual posix tree held in memory.

	The tree is a nested dict: a dict value is a directory, a str/bytes value
	is a file. Paths are absolute posix paths, '/' being the top of the tree.

	    fs = MemoryFileSystem({'docs': {'notes.txt': 'hello', 'img': {}}})
	"""
	pathmod = posixpath
	name_max = 255

	def __init__(self, tree:dict = None, mtime:float = None):
		self.tree = tree if tree is not None else {}
		self.mtime = mtime if mtime is not None else 0.0

	def _lookup(self, path:str):
		if not path.startswith('/'):
			raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)

		node = self.tree
		for part in posixpath.normpath(path).split('/'):
			if part == '':
				continue
			if len(part) > self.name_max:
				raise OSError(errno.ENAMETOOLONG, os.strerror(errno.ENAMETOOLONG), path)
			if not isinstance(node, dict):
				raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
			if part not in node:
				raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
			node = node[part]
		return node

	async def stat(self, path:str) -> EntryStat:
		node = self._lookup(path)
		if isinstance(node, dict):
			return EntryStat(size = 0, mtime = self.mtime, is_directory = True)
		return EntryStat(size = len(MemoryFileSystem._to_bytes(node)), mtime = self.mtime)

	async def readdir(self, path:str):
		node = self._lookup(path)
		if not isinstance(node, dict):
			raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
		return list(node.keys())

	async def read_file(self, path:str) -> bytes:
		node = self._lookup(path)
		if isinstance(node, dict):
			raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
		return MemoryFileSystem._to_bytes(node)

	@staticmethod
	def _to_bytes(data):
		if isinstance(data, str):
			return data.encode('utf-8')
		return data
