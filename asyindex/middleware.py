
from asyindex import logger
from asyindex.errors import IndexHTTPError, InternalError
from asyindex.fs import FileSystem, LocalFileSystem
from asyindex.icons import IconCache, default_icon_cache
from asyindex.lister import DirectoryLister
from asyindex.negotiator import RepresentationTable
from asyindex.protocol.http import HTTPRequest, HTTPResponse
from asyindex.render import RenderContext, builtin_representations, DEFAULT_STYLESHEET, DEFAULT_TEMPLATE
from asyindex.resolver import PathResolver, decode_path

ALLOWED_METHODS = 'GET, HEAD, OPTIONS'
VIEWS = ('tiles', 'details')


class IndexConfig:
	"""Options of one ServeIndex instance, frozen after construction"""
	def __init__(self, root:str, filter = None, hidden:bool = False, icons:bool = False, stylesheet:str = None,
			template = None, view:str = 'tiles', fs:FileSystem = None, handlers:dict = None, icon_cache:IconCache = None):
		if not root:
			raise TypeError('serve_index() root path required')
		if view not in VIEWS:
			raise ValueError('Unknown view %r, expected one of %s' % (view, ', '.join(VIEWS)))
		if filter is not None and not callable(filter):
			raise TypeError('filter must be callable')

		filesystem = fs if fs is not None else LocalFileSystem()
		resolver = PathResolver(root, filesystem.pathmod)

		self.__dict__['filesystem'] = filesystem
		self.__dict__['root'] = resolver.root
		self.__dict__['filter'] = filter
		self.__dict__['hidden'] = bool(hidden)
		self.__dict__['icons'] = bool(icons)
		self.__dict__['stylesheet'] = stylesheet or DEFAULT_STYLESHEET
		self.__dict__['template'] = template or DEFAULT_TEMPLATE
		self.__dict__['view'] = view
		self.__dict__['handlers'] = dict(handlers or {})
		self.__dict__['icon_cache'] = icon_cache if icon_cache is not None else default_icon_cache

	def __setattr__(self, name, value):
		raise AttributeError('IndexConfig is immutable')

	def __delattr__(self, name):
		raise AttributeError('IndexConfig is immutable')

	def __repr__(self):
		return 'IndexConfig(root=%r, hidden=%s, icons=%s, view=%r)' % (self.root, self.hidden, self.icons, self.view)


class ServeIndex:
	"""
	Directory listing middleware.

	handle() returns the listing response for directories, or None when the
	request is not for a directory under the root (missing path, regular
	file) so the next handler can take it. Faults are raised as
	IndexHTTPError subclasses.

	    index = ServeIndex('/srv/www', icons = True, view = 'details')
	    response = await index.handle(request)
	"""
	def __init__(self, root:str, **options):
		self.config = IndexConfig(root, **options)
		self.resolver = PathResolver(self.config.root, self.config.filesystem.pathmod)
		self.lister = DirectoryLister(self.config.filesystem, self.config.hidden, self.config.filter)
		self.representations = RepresentationTable(builtin_representations(), self.config.handlers)

	async def __call__(self, request:HTTPRequest):
		return await self.handle(request)

	def method_response(self, request:HTTPRequest):
		if request.method in ('GET', 'HEAD'):
			return None
		status = 200 if request.method == 'OPTIONS' else 405
		return HTTPResponse.empty(status, [('Allow', ALLOWED_METHODS)])

	async def handle(self, request:HTTPRequest):
		response = self.method_response(request)
		if response is not None:
			return response

		resolved = self.resolver.resolve(request.pathname())
		original_dir = decode_path(request.original_pathname())

		files = await self.lister.list(resolved.path)
		if files is None:
			return None

		mediatype, handler = self.representations.select(request.get_header('Accept'))
		logger.debug('listing "%s" as %s' % (resolved.path, mediatype))

		context = RenderContext(
			request,
			files,
			original_dir,
			resolved.show_up,
			self.config.icons,
			resolved.path,
			self.config.view,
			self.config.template,
			self.config.stylesheet,
			self.config.filesystem,
			icon_cache = self.config.icon_cache,
		)
		try:
			body = await handler.render(context)
		except IndexHTTPError:
			raise
		except Exception as e:
			logger.exception('render')
			raise InternalError.from_exception(e)

		if isinstance(body, str):
			body = body.encode('utf-8')
		return HTTPResponse.with_body(mediatype, body)


def serve_index(root:str, **options) -> ServeIndex:
	return ServeIndex(root, **options)
