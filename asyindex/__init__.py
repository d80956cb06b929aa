
import logging

logger = logging.getLogger('asyindex')
handler = logging.StreamHandler()
formatter = logging.Formatter(
        '%(asctime)s %(name)-12s %(levelname)-8s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)

from asyindex._version import __version__
from asyindex.middleware import ServeIndex, serve_index
from asyindex.negotiator import register_handler, unregister_handler

__all__ = ['logger', 'ServeIndex', 'serve_index', 'register_handler', 'unregister_handler', '__version__']
