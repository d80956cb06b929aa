
import locale
import unicodedata

from asyindex.fs import EntryStat


class Entry:
	def __init__(self, name:str, stat:EntryStat = None):
		self.name = name
		self.stat = stat

	def is_dir(self):
		return self.stat is not None and self.stat.is_dir()

	def __repr__(self):
		return 'Entry(%r, %r)' % (self.name, self.stat)


def collation_key(name:str):
	"""
	Case-insensitive key where accented letters sort with their base letter.
	Accents only break ties. Both levels go through the process' LC_COLLATE.
	"""
	folded = unicodedata.normalize('NFKD', name.casefold())
	base = ''.join(c for c in folded if not unicodedata.combining(c))
	return (locale.strxfrm(base), locale.strxfrm(folded))

def entry_sort_key(entry:Entry):
	# '..' first, then directories, then files
	if entry.name == '..':
		return (0, 0, ('', ''))
	return (1, 0 if entry.is_dir() else 1, collation_key(entry.name))

def sort_entries(entries):
	"""Stable sort, entries comparing equal keep their relative order"""
	return sorted(entries, key = entry_sort_key)
