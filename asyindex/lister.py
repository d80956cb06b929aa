
import errno

from asyindex import logger
from asyindex.errors import URITooLong, InternalError
from asyindex.fs import FileSystem


def remove_hidden(files):
	"""Drops "hidden" files, aka names beginning with a '.'"""
	return [f for f in files if not f.startswith('.')]


class DirectoryLister:
	"""
	Enumerates a resolved directory.

	list() returns None when the path is missing or is not a directory, the
	request then belongs to whatever handler comes next.
	"""
	def __init__(self, filesystem:FileSystem, hidden:bool = False, filter = None):
		self.filesystem = filesystem
		self.hidden = hidden
		self.filter = filter

	async def is_directory(self, path:str) -> bool:
		logger.debug('stat "%s"' % path)
		try:
			st = await self.filesystem.stat(path)
		except FileNotFoundError:
			return False
		except OSError as e:
			if e.errno == errno.ENOENT:
				return False
			if e.errno == errno.ENAMETOOLONG:
				raise URITooLong('URI Too Long: %s' % e, innerexception = e)
			raise InternalError.from_exception(e)
		return st.is_dir()

	async def list(self, path:str):
		if await self.is_directory(path) is False:
			return None

		logger.debug('readdir "%s"' % path)
		try:
			files = list(await self.filesystem.readdir(path))
		except OSError as e:
			raise InternalError.from_exception(e)

		if not self.hidden:
			files = remove_hidden(files)

		if self.filter is not None:
			candidates = files
			files = [name for index, name in enumerate(candidates) if self.filter(name, index, candidates, path)]

		files.sort()
		return files
