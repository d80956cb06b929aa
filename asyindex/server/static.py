
import mimetypes

from asyindex import logger
from asyindex.errors import InternalError
from asyindex.fs import FileSystem, LocalFileSystem
from asyindex.protocol.http import HTTPRequest, HTTPResponse
from asyindex.resolver import PathResolver


class StaticFiles:
	"""Serves regular files below `root`, defers everything else"""
	def __init__(self, root:str, fs:FileSystem = None):
		self.filesystem = fs if fs is not None else LocalFileSystem()
		self.resolver = PathResolver(root, self.filesystem.pathmod)

	def get_mime_type(self, path:str):
		mime_type, _ = mimetypes.guess_type(path)
		return mime_type or 'application/octet-stream'

	async def __call__(self, request:HTTPRequest):
		if request.method not in ('GET', 'HEAD'):
			return None

		resolved = self.resolver.resolve(request.pathname())
		try:
			st = await self.filesystem.stat(resolved.path)
		except FileNotFoundError:
			return None
		except OSError as e:
			raise InternalError.from_exception(e)

		if st.is_dir():
			return None

		logger.debug('serving file "%s"' % resolved.path)
		try:
			data = await self.filesystem.read_file(resolved.path)
		except OSError as e:
			raise InternalError.from_exception(e)

		mime_type = self.get_mime_type(resolved.path)
		headers = [
			('X-Content-Type-Options', 'nosniff'),
			('Content-Type', mime_type),
			('Content-Length', str(len(data))),
		]
		return HTTPResponse(200, headers, data)
