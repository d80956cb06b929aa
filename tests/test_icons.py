import base64
import mimetypes
import unittest

from asyindex.fs import MemoryFileSystem
from asyindex.icons import IconCache, IconClassifier, IconRecord


class CountingFileSystem(MemoryFileSystem):
	def __init__(self, tree):
		super().__init__(tree)
		self.reads = 0

	async def read_file(self, path):
		self.reads += 1
		return await super().read_file(path)


class IconClassifierTests(unittest.TestCase):
	def setUp(self):
		mimetypes.add_type('application/vnd.asyindex-test+json', '.aitj')
		self.classifier = IconClassifier()

	def test_extension_match(self):
		self.assertEqual(self.classifier.lookup('main.py'), IconRecord('icon-py', 'page_white_code.svg'))

	def test_mime_type_match(self):
		self.assertEqual(self.classifier.lookup('data.json'), IconRecord('icon-application-json', 'page_white_code.svg'))
		self.assertEqual(self.classifier.lookup('archive.zip'), IconRecord('icon-application-zip', 'box.svg'))

	def test_mime_suffix_match(self):
		self.assertEqual(self.classifier.lookup('thing.aitj'), IconRecord('icon-json', 'page_white_code.svg'))

	def test_top_level_type_match(self):
		self.assertEqual(self.classifier.lookup('photo.png'), IconRecord('icon-image', 'image.svg'))
		self.assertEqual(self.classifier.lookup('notes.txt'), IconRecord('icon-text', 'page_white_text.svg'))

	def test_default(self):
		self.assertEqual(self.classifier.lookup('Makefile'), IconRecord('icon-default', 'page_white.svg'))
		self.assertEqual(self.classifier.lookup('blob.qqqzz'), IconRecord('icon-default', 'page_white.svg'))

	def test_directory_icon(self):
		self.assertEqual(self.classifier.directory_icon(), IconRecord('icon-directory', 'folder.svg'))


class IconCacheTests(unittest.IsolatedAsyncioTestCase):
	async def test_assets_are_loaded_once(self):
		fs = CountingFileSystem({'icons': {'folder.svg': '<svg/>'}})
		cache = IconCache('/icons', fs)

		first = await cache.get_or_load('folder.svg')
		second = await cache.get_or_load('folder.svg')

		self.assertEqual(first, base64.b64encode(b'<svg/>').decode('ascii'))
		self.assertEqual(first, second)
		self.assertEqual(fs.reads, 1)

	async def test_missing_asset_raises(self):
		cache = IconCache('/icons', MemoryFileSystem({'icons': {}}))
		with self.assertRaises(FileNotFoundError):
			await cache.get_or_load('nope.svg')
		self.assertNotIn('nope.svg', cache.cache)

	async def test_packaged_assets(self):
		cache = IconCache()
		classifier = IconClassifier()
		for name in set(classifier.icons.values()):
			encoded = await cache.get_or_load(name)
			self.assertTrue(base64.b64decode(encoded).startswith(b'<svg'))
		self.assertTrue(cache.data_uri('folder.svg', 'AAAA').startswith('data:image/svg+xml;base64,'))


if __name__ == '__main__':
	unittest.main()
