
import os
import base64
import mimetypes

from asyindex import logger
from asyindex.fs import FileSystem, LocalFileSystem

ICON_DIRECTORY = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'public', 'icons')

ICONS = {
	# base icons
	'default': 'page_white.svg',
	'folder': 'folder.svg',

	# generic mime type icons
	'font': 'font.svg',
	'image': 'image.svg',
	'text': 'page_white_text.svg',
	'video': 'film.svg',

	# generic mime suffix icons
	'+json': 'page_white_code.svg',
	'+xml': 'page_white_code.svg',
	'+zip': 'box.svg',

	# specific mime type icons
	'application/javascript': 'page_white_code_red.svg',
	'text/javascript': 'page_white_code_red.svg',
	'application/json': 'page_white_code.svg',
	'application/msword': 'page_white_word.svg',
	'application/pdf': 'page_white_acrobat.svg',
	'application/postscript': 'page_white_vector.svg',
	'application/rtf': 'page_white_word.svg',
	'application/vnd.ms-excel': 'page_white_excel.svg',
	'application/vnd.ms-powerpoint': 'page_white_powerpoint.svg',
	'application/vnd.oasis.opendocument.presentation': 'page_white_powerpoint.svg',
	'application/vnd.oasis.opendocument.spreadsheet': 'page_white_excel.svg',
	'application/vnd.oasis.opendocument.text': 'page_white_word.svg',
	'application/x-7z-compressed': 'box.svg',
	'application/x-sh': 'application_xp_terminal.svg',
	'application/x-msaccess': 'page_white_database.svg',
	'application/x-shockwave-flash': 'page_white_flash.svg',
	'application/x-sql': 'page_white_database.svg',
	'application/x-tar': 'box.svg',
	'application/x-xz': 'box.svg',
	'application/xml': 'page_white_code.svg',
	'application/zip': 'box.svg',
	'image/svg+xml': 'page_white_vector.svg',
	'text/css': 'page_white_code.svg',
	'text/html': 'page_white_code.svg',
	'text/less': 'page_white_code.svg',

	# other, extension-specific icons
	'.accdb': 'page_white_database.svg',
	'.apk': 'box.svg',
	'.app': 'application_xp.svg',
	'.as': 'page_white_actionscript.svg',
	'.asp': 'page_white_code.svg',
	'.aspx': 'page_white_code.svg',
	'.bat': 'application_xp_terminal.svg',
	'.bz2': 'box.svg',
	'.c': 'page_white_c.svg',
	'.cab': 'box.svg',
	'.cfm': 'page_white_coldfusion.svg',
	'.clj': 'page_white_code.svg',
	'.cc': 'page_white_cplusplus.svg',
	'.cgi': 'application_xp_terminal.svg',
	'.cpp': 'page_white_cplusplus.svg',
	'.cs': 'page_white_csharp.svg',
	'.db': 'page_white_database.svg',
	'.dbf': 'page_white_database.svg',
	'.deb': 'box.svg',
	'.dll': 'page_white_gear.svg',
	'.dmg': 'drive.svg',
	'.docx': 'page_white_word.svg',
	'.erb': 'page_white_ruby.svg',
	'.exe': 'application_xp.svg',
	'.fnt': 'font.svg',
	'.gam': 'controller.svg',
	'.gz': 'box.svg',
	'.h': 'page_white_h.svg',
	'.ini': 'page_white_gear.svg',
	'.iso': 'cd.svg',
	'.jar': 'box.svg',
	'.java': 'page_white_cup.svg',
	'.jsp': 'page_white_cup.svg',
	'.lua': 'page_white_code.svg',
	'.lz': 'box.svg',
	'.lzma': 'box.svg',
	'.m': 'page_white_code.svg',
	'.map': 'map.svg',
	'.msi': 'box.svg',
	'.mv4': 'film.svg',
	'.pdb': 'page_white_database.svg',
	'.php': 'page_white_php.svg',
	'.pl': 'page_white_code.svg',
	'.pkg': 'box.svg',
	'.pptx': 'page_white_powerpoint.svg',
	'.psd': 'page_white_picture.svg',
	'.py': 'page_white_code.svg',
	'.rar': 'box.svg',
	'.rb': 'page_white_ruby.svg',
	'.rm': 'film.svg',
	'.rom': 'controller.svg',
	'.rpm': 'box.svg',
	'.sass': 'page_white_code.svg',
	'.sav': 'controller.svg',
	'.scss': 'page_white_code.svg',
	'.srt': 'page_white_text.svg',
	'.tbz2': 'box.svg',
	'.tgz': 'box.svg',
	'.tlz': 'box.svg',
	'.vb': 'page_white_code.svg',
	'.vbs': 'page_white_code.svg',
	'.xcf': 'page_white_picture.svg',
	'.xlsx': 'page_white_excel.svg',
	'.yaws': 'page_white_code.svg',
}


class IconRecord:
	def __init__(self, class_name:str, file_name:str):
		self.class_name = class_name
		self.file_name = file_name

	def __eq__(self, other):
		if not isinstance(other, IconRecord):
			return NotImplemented
		return self.class_name == other.class_name and self.file_name == other.file_name

	def __hash__(self):
		return hash((self.class_name, self.file_name))

	def __repr__(self):
		return 'IconRecord(%r, %r)' % (self.class_name, self.file_name)


class IconClassifier:
	"""
	Picks an icon for a file name. Tried in order: extension, mime type,
	mime suffix (the part after '+'), top level mime type, default.
	"""
	def __init__(self, icons:dict = None, pathmod = os.path):
		self.icons = icons if icons is not None else ICONS
		self.pathmod = pathmod

	def directory_icon(self) -> IconRecord:
		return IconRecord('icon-directory', self.icons['folder'])

	def default_icon(self) -> IconRecord:
		return IconRecord('icon-default', self.icons['default'])

	def lookup(self, filename:str) -> IconRecord:
		ext = self.pathmod.splitext(filename)[1]

		if ext in self.icons:
			return IconRecord('icon-' + ext[1:], self.icons[ext])

		mimetype = mimetypes.guess_type('file' + ext, strict = False)[0] if ext else None
		if mimetype is None:
			return self.default_icon()

		if mimetype in self.icons:
			return IconRecord('icon-' + mimetype.replace('/', '-'), self.icons[mimetype])

		suffix = mimetype.partition('+')[2]
		if suffix and '+' + suffix in self.icons:
			return IconRecord('icon-' + suffix, self.icons['+' + suffix])

		mtype = mimetype.partition('/')[0]
		if mtype in self.icons:
			return IconRecord('icon-' + mtype, self.icons[mtype])

		return self.default_icon()


class IconCache:
	"""
	Read-through cache of base64 encoded icon assets, keyed by asset name.
	Entries are written once and never evicted.
	"""
	def __init__(self, directory:str = ICON_DIRECTORY, filesystem:FileSystem = None):
		self.directory = directory
		self.filesystem = filesystem if filesystem is not None else LocalFileSystem()
		self.cache = {}

	async def get_or_load(self, name:str) -> str:
		if name in self.cache:
			return self.cache[name]
		logger.debug('loading icon "%s"' % name)
		data = await self.filesystem.read_file(os.path.join(self.directory, name))
		# concurrent loads of the same asset produce the same value
		return self.cache.setdefault(name, base64.b64encode(data).decode('ascii'))

	def data_uri(self, name:str, encoded:str) -> str:
		mimetype = mimetypes.guess_type(name)[0] or 'application/octet-stream'
		return 'data:%s;base64,%s' % (mimetype, encoded)

default_icon_cache = IconCache()
