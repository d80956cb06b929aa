import unittest

from asyindex import negotiator
from asyindex.errors import NotAcceptable
from asyindex.negotiator import (MEDIA_TYPES, RepresentationTable, negotiate, parse_accept,
	preferred_media_types, register_handler, unregister_handler)


class Named:
	def __init__(self, name):
		self.name = name

	async def render(self, context):
		return self.name.encode()


class NegotiationTests(unittest.TestCase):
	def test_no_preference_picks_html(self):
		self.assertEqual(negotiate(None), 'text/html')
		self.assertEqual(negotiate('*/*'), 'text/html')

	def test_empty_header_accepts_nothing(self):
		self.assertEqual(parse_accept(''), [])
		self.assertEqual(parse_accept('  '), [])
		with self.assertRaises(NotAcceptable):
			negotiate('')

	def test_exact_types(self):
		self.assertEqual(negotiate('application/json'), 'application/json')
		self.assertEqual(negotiate('text/plain'), 'text/plain')

	def test_wildcard_subtype_follows_provided_order(self):
		self.assertEqual(negotiate('text/*'), 'text/html')

	def test_quality_values(self):
		self.assertEqual(negotiate('text/html;q=0.5, text/plain'), 'text/plain')
		self.assertEqual(negotiate('*/*;q=0.1, application/json'), 'application/json')
		self.assertEqual(negotiate('text/html;q=0, */*'), 'text/plain')

	def test_specific_range_overrides_wildcard(self):
		self.assertEqual(
			preferred_media_types('text/*;q=0.5, application/json', MEDIA_TYPES),
			['application/json', 'text/html', 'text/plain'],
		)

	def test_browser_header(self):
		header = 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8'
		self.assertEqual(negotiate(header), 'text/html')

	def test_nothing_acceptable(self):
		with self.assertRaises(NotAcceptable):
			negotiate('image/png')
		with self.assertRaises(NotAcceptable):
			negotiate('*/*;q=0')

	def test_parse_accept(self):
		ranges = parse_accept('text/html;level=1;q=0.7, application/json, bogus')
		self.assertEqual(len(ranges), 2)
		self.assertEqual((ranges[0].type, ranges[0].subtype, ranges[0].q), ('text', 'html', 0.7))
		self.assertEqual(ranges[0].params, {'level': '1'})
		self.assertEqual(ranges[1].q, 1.0)


class RepresentationTableTests(unittest.TestCase):
	def setUp(self):
		self.builtins = {'html': Named('html'), 'plain': Named('plain'), 'json': Named('json')}

	def tearDown(self):
		for name in ('html', 'plain', 'json'):
			unregister_handler(name)

	def test_select_uses_builtin(self):
		table = RepresentationTable(self.builtins)
		mediatype, handler = table.select('application/json')
		self.assertEqual(mediatype, 'application/json')
		self.assertIs(handler, self.builtins['json'])

	def test_global_override_takes_precedence(self):
		override = Named('global')
		register_handler('json', override)
		table = RepresentationTable(self.builtins)
		self.assertIs(table.get('json'), override)
		self.assertIs(table.get('html'), self.builtins['html'])
		unregister_handler('json')
		self.assertIs(table.get('json'), self.builtins['json'])

	def test_instance_override_beats_global(self):
		register_handler('plain', Named('global'))
		local = Named('local')
		table = RepresentationTable(self.builtins, {'plain': local})
		self.assertIs(table.get('plain'), local)

	def test_callables_are_wrapped(self):
		register_handler('html', lambda context: b'x')
		self.assertTrue(hasattr(negotiator.handlers['html'], 'render'))

	def test_unknown_representation(self):
		with self.assertRaises(ValueError):
			register_handler('xml', Named('xml'))
		with self.assertRaises(ValueError):
			RepresentationTable(self.builtins, {'xml': Named('xml')})


if __name__ == '__main__':
	unittest.main()
