
class IndexHTTPError(Exception):
	"""Fault that terminates a request with a specific HTTP status"""
	status = 500
	default_message = 'Internal Server Error'

	def __init__(self, message:str = None, innerexception:Exception = None):
		self.innerexception = innerexception
		self.message = message if message is not None else self.default_message
		super().__init__(self.message)

	def __repr__(self):
		return '%s(status=%s, message=%r)' % (self.__class__.__name__, self.status, self.message)

class BadRequest(IndexHTTPError):
	status = 400
	default_message = 'Bad Request'

class Forbidden(IndexHTTPError):
	status = 403
	default_message = 'Forbidden'

class NotFound(IndexHTTPError):
	status = 404
	default_message = 'Not Found'

class NotAcceptable(IndexHTTPError):
	status = 406
	default_message = 'Not Acceptable'

class URITooLong(IndexHTTPError):
	status = 414
	default_message = 'URI Too Long'

class InternalError(IndexHTTPError):
	status = 500
	default_message = 'Internal Server Error'

	@staticmethod
	def from_exception(exc:Exception):
		"""Wraps a backend fault, keeping its diagnostic text"""
		return InternalError('%s: %s' % (exc.__class__.__name__, exc), innerexception = exc)
