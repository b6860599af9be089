#
# xrpc - Copyright (C) xrpc contributors.
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
#


"""The ``xrpc.server`` module contains a `PEP-3333
<http://www.python.org/dev/peps/pep-3333>`_ compliant XML-RPC server.

>>> from xrpc.server import Server
>>> server = Server()
>>> def add(error, params, callback):
...     callback(None, params[0] + params[1])
...
>>> server.on('add', add)
>>> server.listen('127.0.0.1', 9090)
>>> server.serve_forever()

The server instance is a wsgi callable, so it can be mounted in any wsgi
container as well.
"""

import logging
logger = logging.getLogger(__name__)

from email.message import Message
from wsgiref.simple_server import make_server
from wsgiref.simple_server import WSGIRequestHandler

from xrpc.const import BLOCK_LENGTH
from xrpc.const import MAX_CONTENT_LENGTH
from xrpc.const import FAULT_PARSE_ERROR
from xrpc.const import FAULT_INVALID_REQUEST
from xrpc.const import FAULT_APPLICATION_ERROR
from xrpc.const import ansi_color
from xrpc.const.http import HTTP_200
from xrpc.const.http import HTTP_404
from xrpc.const.http import HTTP_405
from xrpc.const.http import HTTP_413
from xrpc.deserializer import Deserializer
from xrpc.error import Fault
from xrpc.error import InvalidMessageError
from xrpc.error import XmlSyntaxError
from xrpc.evmgr import EventManager
from xrpc.serializer import serialize_fault
from xrpc.serializer import serialize_method_response


class _LoggingRequestHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class Server(object):
    """Dispatches XML-RPC method calls to handlers registered with
    :meth:`on`.

    A handler is called as ``handler(error, params, callback)`` where
    ``error`` is always None and ``params`` is the list of decoded
    parameters. It must reply by calling ``callback(error, value)``: when
    ``error`` is not None, it is sent back as a fault, otherwise ``value`` is
    sent back as the method response. Errors that are not
    :class:`xrpc.error.Fault` instances are sent with the
    ``FAULT_APPLICATION_ERROR`` code.

    Supported events, see :attr:`event_manager`:
        * ``NotFound``
            Called with ``(method_name, params)`` when there's no handler for
            the requested method. The http response is a 404.

        * ``method_exception``
            Called with ``(method_name, exception)`` when a handler raises.

    :param encoding: The encoding of incoming documents when the request does
        not declare a charset.
    :param max_content_length: Requests larger than this are rejected.
    :param block_length: Number of bytes read from the request at a time.
    """

    def __init__(self, encoding=None, max_content_length=MAX_CONTENT_LENGTH,
                                                    block_length=BLOCK_LENGTH):
        self.encoding = encoding
        self.max_content_length = max_content_length
        self.block_length = block_length

        self.methods = EventManager(self)
        self.event_manager = EventManager(self)
        self.httpd = None
        self._serving = False

    def on(self, method_name, handler):
        """Registers a handler for the given method name."""

        self.methods.add_listener(method_name, handler)

    #
    # Wsgi interface
    #

    def __call__(self, req_env, start_response):
        if req_env.get('REQUEST_METHOD', 'POST') != 'POST':
            return self._respond(start_response, HTTP_405, b'',
                                                          [('Allow', 'POST')])

        length = self._get_content_length(req_env)
        if length > self.max_content_length:
            logger.error("Request too long: %d bytes", length)
            return self._respond(start_response, HTTP_413, b'')

        charset = self._get_charset(req_env) or self.encoding

        try:
            deserializer = Deserializer(charset)

        except LookupError as e:
            logger.error("Unknown request charset %r", charset)
            fault = Fault(FAULT_PARSE_ERROR, str(e))
            return self._respond_xml(start_response, serialize_fault(fault))

        result = []
        deserializer.deserialize_method_call(
                            self._wsgi_input_to_iterable(req_env, length),
                            lambda *args: result.append(args))

        error, method_name, params = result[0]
        if error is not None:
            logger.error("%sCould not decode request:%s %s",
                          ansi_color.LIGHT_RED, ansi_color.END_COLOR, error)

            if isinstance(error, XmlSyntaxError):
                code = FAULT_PARSE_ERROR
            elif isinstance(error, InvalidMessageError):
                code = FAULT_INVALID_REQUEST
            else:
                code = FAULT_PARSE_ERROR

            return self._respond_xml(start_response,
                                       serialize_fault(Fault(code, str(error))))

        if not self.methods.has_listener(method_name):
            logger.info("Method %r not found", method_name)
            self.event_manager.fire_event('NotFound', method_name, params)
            return self._respond(start_response, HTTP_404, b'')

        return self._respond_xml(start_response,
                                         self.dispatch(method_name, params))

    def dispatch(self, method_name, params):
        """Runs the handlers of the given method and returns the serialized
        response."""

        replies = []

        def _callback(error, value=None):
            replies.append((error, value))

        try:
            self.methods.fire_event(method_name, None, params, _callback)

        except Exception as e:
            logger.exception(e)
            self.event_manager.fire_event('method_exception', method_name, e)
            replies.insert(0, (e, None))

        if len(replies) == 0:
            logger.error("Handler of %r did not reply", method_name)
            replies.append((Fault(FAULT_APPLICATION_ERROR,
                                   "Method handler did not reply"), None))

        error, value = replies[0]
        if error is None:
            return serialize_method_response(value)

        if isinstance(error, Fault) or isinstance(error, dict):
            return serialize_fault(error)

        return serialize_fault(Fault(FAULT_APPLICATION_ERROR, str(error)))

    def _respond_xml(self, start_response, xml):
        return self._respond(start_response, HTTP_200, xml.encode('utf8'),
                                        [('Content-Type', 'text/xml')])

    def _respond(self, start_response, status, body, headers=()):
        headers = list(headers)
        headers.append(('Content-Length', str(len(body))))
        start_response(status, headers)
        return [body]

    @staticmethod
    def _get_charset(req_env):
        content_type = req_env.get('CONTENT_TYPE')
        if not content_type:
            return None

        msg = Message()
        msg['Content-Type'] = content_type
        return msg.get_content_charset()

    def _get_content_length(self, req_env):
        length = str(req_env.get('CONTENT_LENGTH', self.max_content_length))
        if len(length) == 0:
            return 0

        return int(length)

    def _wsgi_input_to_iterable(self, req_env, length):
        istream = req_env.get('wsgi.input')

        bytes_read = 0
        while bytes_read < length:
            bytes_to_read = min(self.block_length, length - bytes_read)

            data = istream.read(bytes_to_read)
            if data is None or len(data) == 0:
                break

            bytes_read += len(data)

            yield data

    #
    # Standalone operation
    #

    def listen(self, host='127.0.0.1', port=0):
        """Binds a ``wsgiref`` http server to the given address and returns it.
        Pass port 0 to get a free port, then read it from :attr:`port`."""

        self.httpd = make_server(host, port, self,
                                          handler_class=_LoggingRequestHandler)
        logger.info("Listening on http://%s:%d", host, self.port)
        return self.httpd

    @property
    def port(self):
        return self.httpd.server_port

    def serve_forever(self):
        self._serving = True
        try:
            self.httpd.serve_forever()
        finally:
            self._serving = False

    def close(self):
        """Stops serving and releases the listening socket."""

        if self.httpd is not None:
            if self._serving:
                self.httpd.shutdown()
            self.httpd.server_close()
            self.httpd = None
