
import os
import re
import html
import json
import inspect
import datetime
import posixpath
import urllib.parse

from asyindex import logger
from asyindex.errors import InternalError
from asyindex.fs import FileSystem, LocalFileSystem
from asyindex.icons import IconClassifier, IconCache, default_icon_cache
from asyindex.sorter import Entry, sort_entries
from asyindex.stats import StatAggregator

PUBLIC_DIRECTORY = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'public')
DEFAULT_TEMPLATE = os.path.join(PUBLIC_DIRECTORY, 'directory.html')
DEFAULT_STYLESHEET = os.path.join(PUBLIC_DIRECTORY, 'style.css')

PLACEHOLDER_RE = re.compile(r'\{(style|files|directory|linked-path)\}')


def escape_html(value) -> str:
	return html.escape(str(value), quote = True)

def encode_uri_component(value:str) -> str:
	return urllib.parse.quote(value, safe = "!~*'()")

def format_mtime(mtime:float) -> str:
	# locale date and time
	return datetime.datetime.fromtimestamp(mtime).strftime('%x %X')


class RenderContext:
	"""Everything a representation handler gets to see about one request"""
	def __init__(self, request, files, directory:str, show_up:bool, display_icons:bool, path:str,
			view:str, template, stylesheet:str, filesystem:FileSystem, icon_cache:IconCache = None,
			assets:FileSystem = None):
		self.request = request
		self.files = files
		self.directory = directory
		self.show_up = show_up
		self.display_icons = display_icons
		self.path = path
		self.view = view
		self.template = template
		self.stylesheet = stylesheet
		self.filesystem = filesystem
		self.icon_cache = icon_cache if icon_cache is not None else default_icon_cache
		self.assets = assets if assets is not None else LocalFileSystem()


def html_path(directory:str) -> str:
	"""Breadcrumb, every non-empty segment links to its cumulative path"""
	parts = directory.split('/')
	crumb = [''] * len(parts)

	for i, part in enumerate(parts):
		if part:
			parts[i] = encode_uri_component(part)
			crumb[i] = '<a href="%s">%s</a>' % (escape_html('/'.join(parts[:i + 1])), escape_html(part))

	return ' / '.join(crumb)

def entry_href(directory:str, name:str) -> str:
	path = [encode_uri_component(c) for c in directory.split('/')]
	path.append(encode_uri_component(name))
	href = re.sub('/+', '/', '/'.join(path))
	return posixpath.normpath(href)

def entry_classes(entry:Entry, use_icons:bool, classifier:IconClassifier):
	if not use_icons:
		return []
	if entry.is_dir():
		return ['icon', 'icon-directory']

	classes = ['icon']
	ext = classifier.pathmod.splitext(entry.name)[1]
	if ext:
		classes.append('icon-' + ext[1:])
	icon = classifier.lookup(entry.name)
	if icon.class_name not in classes:
		classes.append(icon.class_name)
	return classes

def html_file_list(entries, directory:str, use_icons:bool, view:str, classifier:IconClassifier) -> str:
	out = '<ul id="files" class="view-%s">' % escape_html(view)
	if view == 'details':
		out += '<li class="header">' \
			'<span class="name">Name</span>' \
			'<span class="size">Size</span>' \
			'<span class="date">Modified</span>' \
			'</li>'

	items = []
	for entry in entries:
		is_dir = entry.is_dir()
		date = ''
		if entry.stat is not None and entry.stat.mtime is not None and entry.name != '..':
			date = format_mtime(entry.stat.mtime)
		size = ''
		if entry.stat is not None and not is_dir:
			size = entry.stat.size

		items.append(
			'<li><a href="%s" class="%s" title="%s">'
			'<span class="name">%s</span>'
			'<span class="size">%s</span>'
			'<span class="date">%s</span>'
			'</a></li>' % (
				escape_html(entry_href(directory, entry.name)),
				escape_html(' '.join(entry_classes(entry, use_icons, classifier))),
				escape_html(entry.name),
				escape_html(entry.name),
				escape_html(size),
				escape_html(date),
			)
		)

	out += '\n'.join(items)
	out += '</ul>'
	return out

async def icon_style(entries, use_icons:bool, classifier:IconClassifier, icon_cache:IconCache) -> str:
	"""One CSS rule per icon asset, listing every selector that uses it"""
	if not use_icons:
		return ''

	assets = []
	selectors = {}
	for entry in entries:
		icon = classifier.directory_icon() if entry.is_dir() else classifier.lookup(entry.name)
		selector = '#files .%s .name' % icon.class_name
		if icon.file_name not in selectors:
			selectors[icon.file_name] = []
			assets.append(icon.file_name)
		if selector not in selectors[icon.file_name]:
			selectors[icon.file_name].append(selector)

	style = ''
	for name in assets:
		try:
			encoded = await icon_cache.get_or_load(name)
		except OSError as e:
			raise InternalError.from_exception(e)
		rule = 'background-image: url(%s);' % icon_cache.data_uri(name, encoded)
		style += ',\n'.join(selectors[name]) + ' {\n  ' + rule + '\n}\n'
	return style


class TemplateRenderer:
	"""Fills the four placeholders of an html template file"""
	def __init__(self, template:str, assets:FileSystem, classifier:IconClassifier, icon_cache:IconCache):
		self.template = template
		self.assets = assets
		self.classifier = classifier
		self.icon_cache = icon_cache

	async def __call__(self, locals:dict) -> str:
		try:
			template = (await self.assets.read_file(self.template)).decode('utf-8')
		except OSError as e:
			raise InternalError.from_exception(e)

		values = {
			'style': locals['style'] + await icon_style(locals['file_list'], locals['display_icons'], self.classifier, self.icon_cache),
			'files': html_file_list(locals['file_list'], locals['directory'], locals['display_icons'], locals['view_name'], self.classifier),
			'directory': escape_html(locals['directory']),
			'linked-path': html_path(locals['directory']),
		}
		# single pass, inserted text is never scanned for placeholders
		return PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)


class HTMLRepresentation:
	def __init__(self, classifier:IconClassifier = None, concurrency:int = 10):
		self.classifier = classifier if classifier is not None else IconClassifier()
		self.concurrency = concurrency

	def create_render(self, context:RenderContext):
		if callable(context.template):
			return context.template
		classifier = IconClassifier(self.classifier.icons, context.filesystem.pathmod)
		return TemplateRenderer(context.template, context.assets, classifier, context.icon_cache)

	async def render(self, context:RenderContext) -> bytes:
		render = self.create_render(context)
		files = list(context.files)
		if context.show_up:
			files.insert(0, '..')

		stats = await StatAggregator(context.filesystem, self.concurrency).stat_all(context.path, files)
		file_list = sort_entries([Entry(name, st) for name, st in zip(files, stats)])

		logger.debug('reading stylesheet "%s"' % context.stylesheet)
		try:
			style = (await context.assets.read_file(context.stylesheet)).decode('utf-8')
		except OSError as e:
			raise InternalError.from_exception(e)

		locals = {
			'directory': context.directory,
			'display_icons': bool(context.display_icons),
			'file_list': file_list,
			'path': context.path,
			'style': style,
			'view_name': context.view,
		}
		body = render(locals)
		if inspect.isawaitable(body):
			body = await body
		return body.encode('utf-8')


class PlainRepresentation:
	async def render(self, context:RenderContext) -> bytes:
		return ('\n'.join(context.files) + '\n').encode('utf-8')


class JSONRepresentation:
	async def render(self, context:RenderContext) -> bytes:
		return json.dumps(list(context.files), ensure_ascii = False, separators = (',', ':')).encode('utf-8')


def builtin_representations():
	return {
		'html': HTMLRepresentation(),
		'plain': PlainRepresentation(),
		'json': JSONRepresentation(),
	}
