import errno
import os
import tempfile
import unittest

from asyindex.errors import InternalError, URITooLong
from asyindex.fs import LocalFileSystem, MemoryFileSystem
from asyindex.lister import DirectoryLister, remove_hidden


class BrokenFileSystem(MemoryFileSystem):
	def __init__(self, tree, stat_error=None, readdir_error=None):
		super().__init__(tree)
		self.stat_error = stat_error
		self.readdir_error = readdir_error

	async def stat(self, path):
		if self.stat_error is not None:
			raise self.stat_error
		return await super().stat(path)

	async def readdir(self, path):
		if self.readdir_error is not None:
			raise self.readdir_error
		return await super().readdir(path)


class DirectoryListerTests(unittest.IsolatedAsyncioTestCase):
	def setUp(self):
		self.fs = MemoryFileSystem({
			'docs': {
				'.secret': 'x',
				'notes.txt': 'hello',
				'img': {},
				'B.md': 'b',
			},
			'readme.txt': 'readme',
		})

	def test_remove_hidden(self):
		self.assertEqual(remove_hidden(['.a', 'b', '..c', 'd.']), ['b', 'd.'])

	async def test_hidden_files_are_dropped_by_default(self):
		files = await DirectoryLister(self.fs).list('/docs')
		self.assertEqual(files, ['B.md', 'img', 'notes.txt'])
		self.assertFalse(any(name.startswith('.') for name in files))

	async def test_hidden_files_are_listed_when_enabled(self):
		files = await DirectoryLister(self.fs, hidden=True).list('/docs')
		self.assertEqual(files, ['.secret', 'B.md', 'img', 'notes.txt'])

	async def test_filter_receives_name_index_list_and_directory(self):
		calls = []

		def only_text(name, index, candidates, directory):
			calls.append((name, index, list(candidates), directory))
			return name.endswith('.txt')

		files = await DirectoryLister(self.fs, filter=only_text).list('/docs')
		self.assertEqual(files, ['notes.txt'])
		self.assertEqual(len(calls), 3)
		for name, index, candidates, directory in calls:
			self.assertEqual(candidates[index], name)
			self.assertEqual(directory, '/docs')
			self.assertNotIn('.secret', candidates)

	async def test_missing_path_defers(self):
		self.assertIsNone(await DirectoryLister(self.fs).list('/nothing'))

	async def test_regular_file_defers(self):
		self.assertIsNone(await DirectoryLister(self.fs).list('/readme.txt'))

	async def test_name_too_long(self):
		with self.assertRaises(URITooLong):
			await DirectoryLister(self.fs).list('/' + 'a' * 300)

	async def test_unexpected_stat_error_keeps_diagnostic(self):
		err = PermissionError(errno.EACCES, 'Permission denied', '/docs')
		fs = BrokenFileSystem(self.fs.tree, stat_error=err)
		with self.assertRaises(InternalError) as ctx:
			await DirectoryLister(fs).list('/docs')
		self.assertIs(ctx.exception.innerexception, err)
		self.assertIn('Permission denied', ctx.exception.message)

	async def test_readdir_failure_is_fatal(self):
		fs = BrokenFileSystem(self.fs.tree, readdir_error=OSError(errno.EIO, 'I/O error'))
		with self.assertRaises(InternalError):
			await DirectoryLister(fs).list('/docs')

	async def test_local_filesystem(self):
		with tempfile.TemporaryDirectory() as tmp:
			for name in ['b.txt', '.hidden', 'a.txt']:
				with open(os.path.join(tmp, name), 'w') as f:
					f.write(name)
			os.mkdir(os.path.join(tmp, 'sub'))

			files = await DirectoryLister(LocalFileSystem()).list(tmp)
			self.assertEqual(files, ['a.txt', 'b.txt', 'sub'])
			self.assertIsNone(await DirectoryLister(LocalFileSystem()).list(os.path.join(tmp, 'a.txt')))
			self.assertIsNone(await DirectoryLister(LocalFileSystem()).list(os.path.join(tmp, 'missing')))


if __name__ == '__main__':
	unittest.main()
