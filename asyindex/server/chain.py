
from asyindex import logger
from asyindex.errors import IndexHTTPError, InternalError, NotFound
from asyindex.protocol.http import HTTPRequest, HTTPResponse


def error_response(err:IndexHTTPError):
	body = ('%s\n' % err.message).encode('utf-8')
	return HTTPResponse.with_body('text/plain', body, status = err.status)


class Mount:
	"""
	Runs `handler` for requests below `prefix`, with the prefix stripped from
	the target. The original target stays available for link building.
	"""
	def __init__(self, prefix:str, handler):
		self.prefix = '/' + prefix.strip('/')
		self.handler = handler

	def strip(self, target:str):
		if self.prefix == '/':
			return target
		path, sep, query = target.partition('?')
		if path == self.prefix:
			path = '/'
		elif path.startswith(self.prefix + '/'):
			path = path[len(self.prefix):]
		else:
			return None
		return path + sep + query

	async def __call__(self, request:HTTPRequest):
		target = self.strip(request.target)
		if target is None:
			return None
		return await self.handler(request.derive(target))


class HandlerChain:
	"""
	Offers a request to each handler in turn. A handler answers with a
	response or defers with None; when all defer the answer is 404.
	"""
	def __init__(self, handlers = None):
		self.handlers = list(handlers or [])

	def add(self, handler):
		self.handlers.append(handler)
		return self

	async def dispatch(self, request:HTTPRequest) -> HTTPResponse:
		try:
			for handler in self.handlers:
				response = await handler(request)
				if response is not None:
					return response
			raise NotFound('Cannot %s %s' % (request.method, request.pathname()))

		except IndexHTTPError as e:
			if e.status >= 500:
				logger.error('%s %s failed: %s' % (request.method, request.target, e.message))
			else:
				logger.debug('%s %s -> %s %s' % (request.method, request.target, e.status, e.message))
			return error_response(e)

		except Exception as e:
			logger.exception('%s %s' % (request.method, request.target))
			return error_response(InternalError.from_exception(e))
