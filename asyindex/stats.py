
import errno
import asyncio

from asyindex import logger
from asyindex.errors import InternalError
from asyindex.fs import FileSystem


class StatAggregator:
	"""
	Stats every entry of a directory with at most `concurrency` lookups in
	flight. Results are positional: result[i] belongs to names[i].
	"""
	def __init__(self, filesystem:FileSystem, concurrency:int = 10):
		if concurrency < 1:
			raise ValueError('concurrency must be at least 1')
		self.filesystem = filesystem
		self.concurrency = concurrency

	async def __stat_one(self, sem:asyncio.Semaphore, path:str):
		async with sem:
			try:
				return await self.filesystem.stat(path)
			except OSError as e:
				# vanished between readdir and stat
				if isinstance(e, FileNotFoundError) or e.errno == errno.ENOENT:
					return None
				raise

	async def stat_all(self, directory:str, names):
		sem = asyncio.Semaphore(self.concurrency)
		join = self.filesystem.pathmod.join
		tasks = [asyncio.create_task(self.__stat_one(sem, join(directory, name))) for name in names]
		if len(tasks) == 0:
			return []

		try:
			return list(await asyncio.gather(*tasks))
		except OSError as e:
			logger.debug('stat aggregation for "%s" failed: %s' % (directory, e))
			raise InternalError.from_exception(e)
		finally:
			for task in tasks:
				if not task.done():
					task.cancel()
