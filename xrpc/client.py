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

"""The ``xrpc.client`` module contains the http client that makes XML-RPC
method calls.

>>> from xrpc.client import Client
>>> client = Client('http://localhost:9090/RPC2')
>>> client.call('add', 2, 3)
5
"""

import logging
logger = logging.getLogger(__name__)

from base64 import b64encode
from http.client import HTTPConnection
from http.client import HTTPSConnection
from urllib.parse import urlsplit

from xrpc.const import BLOCK_LENGTH
from xrpc.const import DEFAULT_HEADERS
from xrpc.cookies import Cookies
from xrpc.deserializer import Deserializer
from xrpc.error import NotFoundError
from xrpc.error import StreamError
from xrpc.error import CookiesNotEnabledError
from xrpc.serializer import serialize_method_call


class HeadersProcessors(object):
    """Runs the header hooks of every registered processor, in order."""

    def __init__(self):
        self.processors = []

    def compose_request(self, headers):
        for p in self.processors:
            p.compose_request(headers)

    def parse_response(self, headers):
        for p in self.processors:
            p.parse_response(headers)


class Client(object):
    """Makes XML-RPC method calls over http.

    :param options: Either a url string like ``'http://localhost:9090/RPC2'``
        or a dict with the following keys, all optional:

        * ``host``, ``port``, ``path``: Where to send the requests.
        * ``url``: May be used instead of the host/port/path triple.
        * ``cookies``: When True, cookies set by the server are stored and
          sent back with the following calls. See :meth:`get_cookie` and
          :meth:`set_cookie`.
        * ``headers``: A dict of extra http headers.
        * ``basic_auth``: A dict with ``user`` and ``pass`` keys.
        * ``method``: The http method. Default: ``POST``
        * ``encoding``: The encoding of outgoing documents. Default: utf-8
        * ``response_encoding``: The encoding of incoming documents.
    :param is_secure: Use https instead of http.
    """

    def __init__(self, options, is_secure=False):
        if isinstance(options, str):
            options = {'url': options}

        self.options = {
            'host': options.get('host') or 'localhost',
            'port': options.get('port'),
            'path': options.get('path') or '/',
            'method': options.get('method') or 'POST',
            'encoding': options.get('encoding'),
            'response_encoding': options.get('response_encoding'),
            'headers': dict(options.get('headers') or {}),
        }

        url = options.get('url')
        if url is not None:
            parts = urlsplit(url)
            self.options['host'] = parts.hostname
            self.options['path'] = parts.path or '/'
            if parts.port is not None:
                self.options['port'] = parts.port
            if parts.scheme == 'https':
                is_secure = True

        headers = self.options['headers']
        basic_auth = options.get('basic_auth')
        if headers.get('Authorization') is None and basic_auth is not None \
                        and basic_auth.get('user') and basic_auth.get('pass'):
            credentials = '%s:%s' % (basic_auth['user'], basic_auth['pass'])
            credentials = b64encode(credentials.encode('utf8'))
            headers['Authorization'] = 'Basic %s' % credentials.decode('ascii')

        for k, v in DEFAULT_HEADERS:
            if not headers.get(k):
                headers[k] = v

        self.is_secure = is_secure
        self.headers_processors = HeadersProcessors()

        self.cookies = None
        if options.get('cookies'):
            self.cookies = Cookies()
            self.headers_processors.processors.insert(0, self.cookies)

    def create_connection(self):
        if self.is_secure:
            return HTTPSConnection(self.options['host'], self.options['port'])
        return HTTPConnection(self.options['host'], self.options['port'])

    def method_call(self, method, params, callback):
        """Makes an XML-RPC call to the server.

        :param method: The method name.
        :param params: A sequence of values to send in the call.
        :param callback: Called as ``callback(error, value)`` once the call
            completes. Errors coming from the http exchange or the response
            document carry ``request``, ``response`` and ``body``
            attributes.
        """

        options = self.options
        encoding = options['encoding']

        xml = serialize_method_call(method, params, encoding)

        try:
            body = xml.encode(encoding or 'utf8')
            deserializer = Deserializer(options['response_encoding'])

        except LookupError as e:
            logger.error("Unknown encoding: %r", e)
            callback(e, None)
            return

        headers = dict(options['headers'])
        headers['Content-Length'] = str(len(body))
        if encoding is not None and headers.get('Content-Type') == 'text/xml':
            headers['Content-Type'] = 'text/xml; charset=%s' % encoding
        self.headers_processors.compose_request(headers)

        request = (options['method'], options['path'], headers)
        conn = self.create_connection()

        try:
            try:
                conn.request(options['method'], options['path'], body, headers)
                response = conn.getresponse()

            except OSError as e:
                logger.error("%s %s failed: %r", options['method'],
                                                         options['path'], e)
                callback(e, None)
                return

            chunks = []

            def _enrich(err):
                err.request = request
                err.response = response
                err.body = b''.join(chunks)
                return err

            if response.status == 404:
                chunks.append(response.read())
                callback(_enrich(NotFoundError('Not Found')), None)
                return

            self.headers_processors.parse_response(response.msg)

            def _read():
                while True:
                    chunk = response.read1(BLOCK_LENGTH)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    yield chunk

            def _cb(error, value):
                if error is not None:
                    if not isinstance(error, StreamError):
                        chunks.append(response.read())
                    error = _enrich(error)
                callback(error, value)

            deserializer.deserialize_method_response(_read(), _cb)

        finally:
            conn.close()

    def call(self, method, *params):
        """Makes an XML-RPC call and returns the value of the response. Errors,
        including remote faults, are raised."""

        retval = []
        def _cb(error, value):
            retval.append((error, value))

        self.method_call(method, params, _cb)

        error, value = retval[0]
        if error is not None:
            raise error

        return value

    def get_cookie(self, name):
        """Returns the latest value of the cookie with the given name that was
        received from the server in a ``Set-Cookie`` header, or None."""

        if self.cookies is None:
            raise CookiesNotEnabledError()

        return self.cookies.get(name)

    def set_cookie(self, name, value):
        """Sets the cookie to be sent with the next call. Returns the client
        itself, so calls can be chained:

        >>> client.set_cookie('login', 'alex').set_cookie('password', '123')
        """

        if self.cookies is None:
            raise CookiesNotEnabledError()

        self.cookies.set(name, value)
        return self
