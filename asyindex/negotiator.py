
import inspect

from asyindex.errors import NotAcceptable

# preference order when the client does not distinguish
MEDIA_TYPES = [
	'text/html',
	'text/plain',
	'application/json',
]

MEDIA_TYPE_NAMES = {
	'text/html': 'html',
	'text/plain': 'plain',
	'application/json': 'json',
}


class MediaRange:
	def __init__(self, type:str, subtype:str, q:float = 1.0, params:dict = None, index:int = 0):
		self.type = type
		self.subtype = subtype
		self.q = q
		self.params = params if params is not None else {}
		self.index = index

	def specificity(self, mediatype:str, params:dict = None):
		"""Returns how specifically this range matches `mediatype`, or -1"""
		mtype, _, msubtype = mediatype.partition('/')
		s = 0
		if self.type.lower() == mtype.lower():
			s |= 4
		elif self.type != '*':
			return -1

		if self.subtype.lower() == msubtype.lower():
			s |= 2
		elif self.subtype != '*':
			return -1

		if len(self.params) > 0:
			params = params if params is not None else {}
			for key in self.params:
				if self.params[key].lower() != params.get(key, '').lower():
					return -1
			s |= 1
		return s

	def __repr__(self):
		return 'MediaRange(%s/%s, q=%s)' % (self.type, self.subtype, self.q)


def parse_accept(header:str):
	"""Parses an Accept header into MediaRange objects, in header order"""
	# a missing header accepts anything, an empty one accepts nothing
	if header is None:
		header = '*/*'

	ranges = []
	for part in split_quoted(header, ','):
		part = part.strip()
		if part == '':
			continue
		fields = split_quoted(part, ';')
		fulltype = fields[0].strip()
		if '/' not in fulltype:
			continue
		mtype, _, subtype = fulltype.partition('/')
		q = 1.0
		params = {}
		for field in fields[1:]:
			key, sep, value = field.partition('=')
			if sep == '':
				continue
			key = key.strip().lower()
			value = value.strip()
			if len(value) > 1 and value[0] == '"' and value[-1] == '"':
				value = value[1:-1]
			if key == 'q':
				try:
					q = float(value)
				except ValueError:
					q = 0.0
				break
			params[key] = value
		ranges.append(MediaRange(mtype.strip(), subtype.strip(), q, params, len(ranges)))
	return ranges

def split_quoted(text:str, sep:str):
	parts = []
	current = ''
	quoted = False
	for c in text:
		if c == '"':
			quoted = not quoted
		if c == sep and quoted is False:
			parts.append(current)
			current = ''
			continue
		current += c
	parts.append(current)
	return parts

def preferred_media_types(header:str, provided):
	"""
	Orders `provided` by client preference, dropping unacceptable ones.
	Ties go by quality, then specificity, then header order, then the order
	of `provided`.
	"""
	accepted = parse_accept(header)
	candidates = []
	for pidx, mediatype in enumerate(provided):
		best = None
		for mrange in accepted:
			s = mrange.specificity(mediatype)
			if s < 0:
				continue
			prio = (s, mrange.q, -mrange.index)
			if best is None or prio[:2] > best[:2]:
				best = prio
		if best is None or best[1] <= 0:
			continue
		candidates.append((-best[1], -best[0], -best[2], pidx, mediatype))

	candidates.sort()
	return [c[-1] for c in candidates]

def negotiate(header:str, provided = MEDIA_TYPES):
	preferred = preferred_media_types(header, provided)
	if len(preferred) == 0:
		raise NotAcceptable()
	return preferred[0]


class CallableRepresentation:
	def __init__(self, func):
		self.func = func

	async def render(self, context):
		res = self.func(context)
		if inspect.isawaitable(res):
			res = await res
		return res

def as_representation(handler):
	if hasattr(handler, 'render'):
		return handler
	if callable(handler):
		return CallableRepresentation(handler)
	raise TypeError('Handler must have a render(context) method or be callable')

# process-wide overrides, keyed by representation name
handlers = {}

def register_handler(name:str, handler):
	if name not in MEDIA_TYPE_NAMES.values():
		raise ValueError('Unknown representation %r' % name)
	handlers[name] = as_representation(handler)

def unregister_handler(name:str):
	handlers.pop(name, None)


class RepresentationTable:
	"""
	Maps representation names to handlers exposing render(context) -> bytes.
	Lookup order: instance overrides, process-wide overrides, built-ins.
	"""
	def __init__(self, builtins:dict, overrides:dict = None):
		self.builtins = dict(builtins)
		self.overrides = {}
		for name in (overrides or {}):
			if name not in MEDIA_TYPE_NAMES.values():
				raise ValueError('Unknown representation %r' % name)
			self.overrides[name] = as_representation(overrides[name])

	def get(self, name:str):
		if name in self.overrides:
			return self.overrides[name]
		if name in handlers:
			return handlers[name]
		return self.builtins[name]

	def select(self, accept_header:str):
		"""Returns (media type, handler) for the client's Accept header"""
		mediatype = negotiate(accept_header, MEDIA_TYPES)
		return mediatype, self.get(MEDIA_TYPE_NAMES[mediatype])
