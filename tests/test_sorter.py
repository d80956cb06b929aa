import unittest

from asyindex.fs import EntryStat
from asyindex.sorter import Entry, sort_entries


def d(name):
	return Entry(name, EntryStat(is_directory=True))

def f(name, size=1):
	return Entry(name, EntryStat(size=size))


class SorterTests(unittest.TestCase):
	def test_parent_then_directories_then_files(self):
		entries = [f('b.txt'), d('c'), f('Z.txt'), d('..'), d('A'), f('a.txt')]
		names = [e.name for e in sort_entries(entries)]
		self.assertEqual(names, ['..', 'A', 'c', 'a.txt', 'b.txt', 'Z.txt'])

	def test_missing_metadata_sorts_as_file(self):
		entries = [Entry('vanished', None), d('zdir'), f('afile')]
		names = [e.name for e in sort_entries(entries)]
		self.assertEqual(names, ['zdir', 'afile', 'vanished'])

	def test_parent_without_metadata_still_first(self):
		entries = [d('a'), Entry('..', None)]
		self.assertEqual([e.name for e in sort_entries(entries)], ['..', 'a'])

	def test_case_insensitive_ties_keep_input_order(self):
		first = f('README', size=1)
		second = f('readme', size=2)
		self.assertEqual(sort_entries([first, second]), [first, second])
		self.assertEqual(sort_entries([second, first]), [second, first])

	def test_accented_names_sort_with_their_base_letter(self):
		entries = [f('zebra.txt'), f('\u00c9clair.txt'), f('apple.txt'), f('_notes.txt'), f('eclair.txt')]
		names = [e.name for e in sort_entries(entries)]
		self.assertEqual(names, ['_notes.txt', 'apple.txt', 'eclair.txt', '\u00c9clair.txt', 'zebra.txt'])

	def test_input_is_not_modified(self):
		entries = [f('b'), f('a')]
		sort_entries(entries)
		self.assertEqual([e.name for e in entries], ['b', 'a'])


if __name__ == '__main__':
	unittest.main()
