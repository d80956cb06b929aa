
import os
import urllib.parse

from asyindex import logger
from asyindex.errors import BadRequest, Forbidden


class ResolvedPath:
	def __init__(self, path:str, show_up:bool):
		self.path = path
		self.show_up = show_up

	def __repr__(self):
		return 'ResolvedPath(path=%r, show_up=%s)' % (self.path, self.show_up)


def decode_path(raw_path:str) -> str:
	"""Percent-decodes a request path. Undecodable input is a client fault."""
	try:
		return urllib.parse.unquote(raw_path, encoding = 'utf-8', errors = 'strict')
	except UnicodeDecodeError as e:
		raise BadRequest('Failed to decode path %r' % raw_path, innerexception = e)


class PathResolver:
	"""
	Maps request paths onto a fixed root directory.

	The root is stored absolute, normalized and with a trailing separator so
	that containment can be tested as a plain string prefix.
	"""
	def __init__(self, root:str, pathmod = os.path):
		if not root:
			raise TypeError('root path required')
		self.pathmod = pathmod
		self.root_dir = pathmod.normpath(pathmod.abspath(root))
		self.root = self.root_dir
		if self.root.endswith(pathmod.sep) is False:
			self.root += pathmod.sep

	def join(self, decoded:str) -> str:
		# an absolute request path must not replace the root
		relative = decoded.lstrip('/' + self.pathmod.sep)
		return self.pathmod.normpath(self.pathmod.join(self.root, relative))

	def is_inside(self, path:str) -> bool:
		return (path + self.pathmod.sep)[:len(self.root)] == self.root

	def resolve(self, raw_path:str) -> ResolvedPath:
		path = self.join(decode_path(raw_path))

		if '\0' in path:
			raise BadRequest('Null byte in request path')

		if self.is_inside(path) is False:
			logger.warning('malicious path "%s"' % path)
			raise Forbidden()

		show_up = self.pathmod.normpath(self.pathmod.abspath(path)) != self.root_dir
		return ResolvedPath(path, show_up)
