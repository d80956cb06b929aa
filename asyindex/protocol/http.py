import urllib.parse

import h11


class HTTPRequest:
	def __init__(self, method:str = 'GET', target:str = '/', headers:dict = None, original_target:str = None, data:bytes = None):
		self.method = method
		self.target = target
		self.original_target = original_target if original_target is not None else target
		self.version = '1.1'
		self.headers = {}
		self.headers_upper = {}
		self.data = data
		for key in (headers or {}):
			self.set_header(key, headers[key])

	def __str__(self):
		t = '%s %s HTTP/%s\r\n' % (self.method, self.target, self.version)
		for x in self.headers:
			t += '%s: %s\r\n' % (x, self.headers[x])
		t += '\r\n'
		if self.data is not None:
			t += '<DATA AVAILABLE>'
		return t

	def set_header(self, key:str, value:str):
		self.headers[key] = value
		self.headers_upper[key.upper()] = value

	def get_header(self, key:str, default = None):
		return self.headers_upper.get(key.upper(), default)

	def pathname(self) -> str:
		return urllib.parse.urlsplit(self.target).path

	def original_pathname(self) -> str:
		return urllib.parse.urlsplit(self.original_target).path

	def derive(self, target:str):
		"""Copy of the request pointing at `target`, the original target is kept"""
		req = HTTPRequest(self.method, target, original_target = self.original_target, data = self.data)
		req.version = self.version
		req.headers = dict(self.headers)
		req.headers_upper = dict(self.headers_upper)
		return req

	@staticmethod
	def from_h11(event:h11.Request, data:bytes = None):
		req = HTTPRequest()
		req.method = event.method.decode('ascii')
		req.target = event.target.decode('ascii', errors = 'replace')
		req.original_target = req.target
		req.version = event.http_version.decode('ascii')
		req.data = data
		for key_raw, value_raw in event.headers:
			key = key_raw.decode('latin-1')
			value = value_raw.decode('latin-1')
			# repeated headers are folded into a comma separated list
			if key.upper() in req.headers_upper:
				value = req.headers_upper[key.upper()] + ', ' + value
			req.set_header(key, value)
		return req


class HTTPResponse:
	def __init__(self, status:int = 200, headers = None, body:bytes = b''):
		self.status = status
		self.headers = list(headers or [])
		self.body = body

	def __repr__(self):
		return 'HTTPResponse(status=%s, headers=%r, body=%d bytes)' % (self.status, self.headers, len(self.body))

	def get_header(self, key:str, default = None):
		for hkey, hvalue in self.headers:
			if hkey.upper() == key.upper():
				return hvalue
		return default

	@staticmethod
	def with_body(content_type:str, body:bytes, status:int = 200):
		return HTTPResponse(status, [
			# security header for content sniffing
			('X-Content-Type-Options', 'nosniff'),
			('Content-Type', '%s; charset=utf-8' % content_type),
			('Content-Length', str(len(body))),
		], body)

	@staticmethod
	def empty(status:int, headers = None):
		headers = list(headers or [])
		headers.append(('Content-Length', '0'))
		return HTTPResponse(status, headers, b'')

	def to_h11(self, extra_headers = None, head_only:bool = False):
		headers = list(extra_headers or [])
		headers.extend(self.headers)
		yield h11.Response(status_code = self.status, headers = headers)
		if len(self.body) > 0 and head_only is False:
			yield h11.Data(data = self.body)
		yield h11.EndOfMessage()
