#!/usr/bin/env python3
"""
Directory Index Server Example

Serves browsable directory listings (HTML, plain text or JSON, depending on
the client's Accept header) for a directory tree. Regular files are served
as-is unless --no-static is given.

Usage:
    asyindex-serve [directory] [--host HOST] [--port PORT]

Example:
    asyindex-serve ./public --icons --view details --port 8080
"""

import asyncio
import locale
import logging
import os
import sys
import argparse

from asyindex import logger, ServeIndex
from asyindex._version import __version__
from asyindex.server.chain import HandlerChain, Mount
from asyindex.server.httpserver import HTTPServer
from asyindex.server.static import StaticFiles


def build_chain(directory, hidden=False, icons=False, view='tiles', template=None, stylesheet=None,
                static=True, mount='/'):
    """
    Build the handler chain: directory index first, static files second.

    Args:
        directory (str): Directory to serve
        hidden (bool): List dotfiles
        icons (bool): Show file type icons
        view (str): 'tiles' or 'details'
        template (str): Path of a custom html template
        stylesheet (str): Path of a custom stylesheet
        static (bool): Serve regular files after the index defers
        mount (str): URL prefix to serve under
    """
    index = ServeIndex(
        directory,
        hidden=hidden,
        icons=icons,
        view=view,
        template=template,
        stylesheet=stylesheet,
    )
    handlers = [index]
    if static:
        handlers.append(StaticFiles(directory))

    chain = HandlerChain()
    for handler in handlers:
        chain.add(Mount(mount, handler) if mount not in (None, '', '/') else handler)
    return chain


async def run_index_server(directory, host='127.0.0.1', port=8080, ssl_ctx=None, debug=False, **kwargs):
    """
    Run the index server until cancelled.

    Args:
        directory (str): Directory to serve
        host (str): Host to bind to
        port (int): Port to bind to
        ssl_ctx: Optional server SSL context
        debug (bool): Enable per-connection debug tracing
    """
    log_callback = None
    if debug:
        async def log_callback(msg):
            logger.debug('[INDEX-SERVER] %s' % msg)

    chain = build_chain(directory, **kwargs)
    server = HTTPServer(chain, host, port, ssl_ctx=ssl_ctx, log_callback=log_callback)
    try:
        await server.serve()
    finally:
        await server.terminate()


def main():
    parser = argparse.ArgumentParser(
        description='Asyindex - browsable directory listings over HTTP',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s                                  # Serve the current directory on 127.0.0.1:8080
  %(prog)s /srv/www --host 0.0.0.0          # Bind to all interfaces
  %(prog)s /srv/www --icons --view details  # Detailed listing with icons
  %(prog)s /srv/www --mount /files          # Serve under /files
  %(prog)s /srv/www --ssl                   # HTTPS with a throwaway certificate
        ''')

    parser.add_argument('directory', nargs='?', default='.', help='Directory to serve (default: current directory)')
    parser.add_argument('--host', '-H', default='127.0.0.1', help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--port', '-p', type=int, default=8080, help='Port to bind to (default: 8080)')
    parser.add_argument('--hidden', action='store_true', help='List hidden (dot) files')
    parser.add_argument('--icons', action='store_true', help='Show file type icons')
    parser.add_argument('--view', choices=['tiles', 'details'], default='tiles', help='Listing layout (default: tiles)')
    parser.add_argument('--template', help='Custom html template file')
    parser.add_argument('--stylesheet', help='Custom stylesheet file')
    parser.add_argument('--mount', default='/', help='URL prefix to serve under (default: /)')
    parser.add_argument('--no-static', action='store_true', help='Do not serve regular files, listings only')
    parser.add_argument('--ssl', action='store_true', help='Enable HTTPS')
    parser.add_argument('--certfile', help='Certificate file for HTTPS (default: generate a self-signed one)')
    parser.add_argument('--keyfile', help='Private key file for --certfile')
    parser.add_argument('--debug', '-d', action='store_true', help='Enable debug logging')
    parser.add_argument('--version', '-v', action='version', version='asyindex %s' % __version__)

    args = parser.parse_args()

    if not os.path.isdir(args.directory):
        print(f"Error: '{args.directory}' is not a directory")
        sys.exit(1)

    if args.port < 0 or args.port > 65535:
        print(f"Error: Port must be between 0 and 65535, got {args.port}")
        sys.exit(1)

    if args.debug:
        logger.setLevel(logging.DEBUG)

    # listing order follows the environment's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, '')
    except locale.Error as e:
        logger.debug('Falling back to C collation: %s' % e)

    ssl_ctx = None
    if args.ssl or args.certfile:
        from asyindex.certs import create_server_ssl_context
        ssl_ctx = create_server_ssl_context(args.certfile, args.keyfile, hosts=['localhost', args.host])

    scheme = 'https' if ssl_ctx is not None else 'http'
    print("Asyindex Server")
    print("=" * 50)
    print(f"Directory: {os.path.abspath(args.directory)}")
    print(f"Address: {scheme}://{args.host}:{args.port}{'/' + args.mount.strip('/')}")
    print(f"View: {args.view}, icons: {args.icons}, hidden: {args.hidden}")
    print("=" * 50)

    try:
        asyncio.run(run_index_server(
            args.directory,
            args.host,
            args.port,
            ssl_ctx=ssl_ctx,
            debug=args.debug,
            hidden=args.hidden,
            icons=args.icons,
            view=args.view,
            template=args.template,
            stylesheet=args.stylesheet,
            static=not args.no_static,
            mount=args.mount,
        ))
    except KeyboardInterrupt:
        print("\nServer stopped by user")


if __name__ == '__main__':
    main()
