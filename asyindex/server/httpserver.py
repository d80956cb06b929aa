import asyncio
import datetime
import email.utils
from itertools import count

import h11

from asyindex import logger
from asyindex._version import __version__
from asyindex.protocol.http import HTTPRequest
from asyindex.server.chain import HandlerChain


def format_date_time(dt = None):
	"""Generate a RFC 7231 / RFC 9110 IMF-fixdate string"""
	if dt is None:
		dt = datetime.datetime.now(datetime.timezone.utc)
	return email.utils.format_datetime(dt, usegmt=True)


class HTTPConnectionWrapper:
	_next_id = count()

	def __init__(self, client_id, reader:asyncio.StreamReader, writer:asyncio.StreamWriter, log_callback = None):
		self.log_callback = log_callback
		self.client_id = client_id
		self.MAX_RECV = 2**16
		self.reader = reader
		self.writer = writer
		self.conn = h11.Connection(h11.SERVER)
		# Our Server: header
		self.ident = " ".join(
			[f"asyindex/{__version__}", h11.PRODUCT_ID]
		).encode("ascii")
		self._obj_id = next(HTTPConnectionWrapper._next_id)

	async def debug(self, *args):
		msg = [str(x) for x in args]
		msg = ' '.join(msg)
		if self.log_callback is not None:
			await self.log_callback(msg)

	async def send(self, event):
		# ConnectionClosed is never sent from here
		assert type(event) is not h11.ConnectionClosed
		data = self.conn.send(event)
		try:
			self.writer.write(data)
			await self.writer.drain()
		except BaseException:
			self.conn.send_failed()
			raise

	async def _read_from_peer(self):
		if self.conn.they_are_waiting_for_100_continue:
			await self.debug("Sending 100 Continue")
			go_ahead = h11.InformationalResponse(
				status_code=100, headers=self.basic_headers()
			)
			await self.send(go_ahead)
		try:
			data = await self.reader.read(self.MAX_RECV)
			await self.debug('[%s] DATA: %d bytes' % (self.client_id, len(data)))
		except Exception as exc:
			await self.debug('Error reading from peer:', exc)
			# They've stopped listening. Not much we can do about it here.
			data = b""
		self.conn.receive_data(data)

	async def next_event(self):
		while True:
			event = self.conn.next_event()
			await self.debug('[%s] Event: %s' % (self.client_id, event))
			if event is h11.NEED_DATA:
				await self._read_from_peer()
				continue
			return event

	async def read_request_body(self):
		chunks = []
		while True:
			event = await self.next_event()
			if type(event) is h11.Data:
				chunks.append(event.data)
				continue
			if type(event) is h11.EndOfMessage:
				return b''.join(chunks)
			raise h11.RemoteProtocolError('Unexpected event while reading body: %s' % type(event).__name__)

	async def shutdown_and_clean_up(self):
		try:
			self.writer.close()
			await self.writer.wait_closed()
		except Exception as exc:
			await self.debug('[%s] Error while closing: %s' % (self.client_id, exc))

	def basic_headers(self):
		# HTTP requires these headers in all responses
		return [
			("Date", format_date_time().encode("ascii")),
			("Server", self.ident),
		]


class HTTPServer:
	"""
	asyncio + h11 server feeding every request to a HandlerChain.

	    chain = HandlerChain([ServeIndex('/srv/www'), StaticFiles('/srv/www')])
	    server = HTTPServer(chain, '127.0.0.1', 8080)
	    await server.serve()
	"""
	def __init__(self, chain:HandlerChain, listen_ip:str = '127.0.0.1', listen_port:int = 8080, ssl_ctx = None, log_callback = None):
		self.log_callback = log_callback
		self.chain = chain
		self.listen_ip = listen_ip
		self.listen_port = listen_port
		self.ssl_ctx = ssl_ctx

		self.id_counter = 0
		self.server = None
		self.started_evt = asyncio.Event()

	async def debug(self, *args):
		msg = [str(x) for x in args]
		msg = ' '.join(msg)
		if self.log_callback is not None:
			await self.log_callback(msg)

	async def __aenter__(self):
		await self.start()
		return self

	async def __aexit__(self, exc_type, exc, tb):
		await self.terminate()

	def get_port(self):
		"""The bound port, useful after listening on port 0"""
		if self.server is None or len(self.server.sockets) == 0:
			return self.listen_port
		return self.server.sockets[0].getsockname()[1]

	async def terminate(self):
		if self.server is not None:
			self.server.close()
			await self.server.wait_closed()
			self.server = None

	async def _process_request(self, wrapper:HTTPConnectionWrapper, event:h11.Request):
		body = await wrapper.read_request_body()
		request = HTTPRequest.from_h11(event, body)
		response = await self.chain.dispatch(request)
		logger.info('%s "%s %s" %s' % (wrapper.client_id, request.method, request.target, response.status))
		head_only = request.method == 'HEAD'
		for out in response.to_h11(wrapper.basic_headers(), head_only = head_only):
			await wrapper.send(out)

	async def handle_client(self, reader:asyncio.StreamReader, writer:asyncio.StreamWriter):
		client_id = self.id_counter
		self.id_counter += 1
		wrapper = HTTPConnectionWrapper(client_id, reader, writer, log_callback = self.log_callback)
		await self.debug('Server: New client connected with id %s' % client_id)
		try:
			while True:
				if wrapper.conn.states == {h11.CLIENT: h11.DONE, h11.SERVER: h11.DONE}:
					wrapper.conn.start_next_cycle()
					continue

				if wrapper.conn.states != {h11.CLIENT: h11.IDLE, h11.SERVER: h11.IDLE}:
					await self.debug('[%s] Server: Connection state not idle %s' % (client_id, wrapper.conn.states))
					break

				event = await wrapper.next_event()
				if type(event) is h11.Request:
					await self._process_request(wrapper, event)
					continue
				if type(event) is h11.ConnectionClosed:
					break
				await self.debug('[%s] Server: unknown event type %s' % (client_id, type(event)))
				break

		except h11.RemoteProtocolError as e:
			logger.debug('[%s] Protocol error: %s' % (client_id, e))
			if wrapper.conn.our_state in (h11.IDLE, h11.SEND_RESPONSE):
				try:
					response = h11.Response(status_code = e.error_status_hint, headers = wrapper.basic_headers() + [('Content-Length', '0')])
					await wrapper.send(response)
					await wrapper.send(h11.EndOfMessage())
				except Exception as exc:
					await self.debug('[%s] Failed to send error response: %s' % (client_id, exc))
		except Exception:
			logger.exception('handle_client')
		finally:
			await wrapper.shutdown_and_clean_up()

	async def start(self):
		self.server = await asyncio.start_server(self.handle_client, self.listen_ip, self.listen_port, ssl = self.ssl_ctx)
		self.started_evt.set()
		logger.info('Listening on %s:%s' % (self.listen_ip, self.get_port()))
		return self.server

	async def serve(self):
		if self.server is None:
			await self.start()
		async with self.server:
			await self.server.serve_forever()
