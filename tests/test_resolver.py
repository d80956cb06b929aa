import posixpath
import unittest

from asyindex.errors import BadRequest, Forbidden
from asyindex.resolver import PathResolver, decode_path


class PathResolverTests(unittest.TestCase):
	def setUp(self):
		self.resolver = PathResolver('/srv/www', posixpath)

	def test_root_is_normalized_with_trailing_separator(self):
		self.assertEqual(self.resolver.root, '/srv/www/')
		self.assertEqual(PathResolver('/srv/www/../www//', posixpath).root, '/srv/www/')
		self.assertEqual(PathResolver('/', posixpath).root, '/')

	def test_root_is_required(self):
		with self.assertRaises(TypeError):
			PathResolver('', posixpath)

	def test_traversal_is_rejected_regardless_of_depth(self):
		attempts = [
			'/../../etc/passwd',
			'/..',
			'/docs/../../etc',
			'/%2e%2e/%2e%2e/etc/passwd',
			'/' + '../' * 25 + 'etc/passwd',
			'/../www2',
		]
		for raw in attempts:
			with self.subTest(raw=raw):
				with self.assertRaises(Forbidden):
					self.resolver.resolve(raw)

	def test_dot_segments_inside_root_are_allowed(self):
		resolved = self.resolver.resolve('/docs/./img/../')
		self.assertEqual(resolved.path, '/srv/www/docs')
		self.assertTrue(resolved.show_up)

	def test_show_up_is_false_exactly_at_root(self):
		self.assertFalse(self.resolver.resolve('/').show_up)
		self.assertFalse(self.resolver.resolve('').show_up)
		self.assertFalse(self.resolver.resolve('/docs/..').show_up)
		self.assertTrue(self.resolver.resolve('/docs/').show_up)

	def test_percent_encoded_names_are_decoded(self):
		resolved = self.resolver.resolve('/my%20docs/')
		self.assertEqual(resolved.path, '/srv/www/my docs')

	def test_null_byte_is_bad_request(self):
		with self.assertRaises(BadRequest):
			self.resolver.resolve('/docs%00/')

	def test_invalid_utf8_is_bad_request(self):
		with self.assertRaises(BadRequest):
			decode_path('/%ff%fe/')
		with self.assertRaises(BadRequest):
			self.resolver.resolve('/%ff/')

	def test_filesystem_root(self):
		resolver = PathResolver('/', posixpath)
		self.assertFalse(resolver.resolve('/').show_up)
		resolved = resolver.resolve('/etc/../tmp')
		self.assertEqual(resolved.path, '/tmp')
		self.assertTrue(resolved.show_up)


if __name__ == '__main__':
	unittest.main()
