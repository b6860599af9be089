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

"""The ``xrpc.deserializer`` module decodes XML-RPC documents incrementally.

A :class:`Deserializer` is driven by an lxml feed parser: it receives the
start/end/data events of the document as the chunks arrive and rebuilds the
values bottom-up on a stack. Every ``<array>`` and ``<struct>`` start tag saves
the current stack depth as a mark; when the compound is closed, the values
above its mark are folded into a single list or dict.

A Deserializer instance decodes exactly one message.
"""

import logging
logger = logging.getLogger(__name__)

import re
import codecs

from base64 import b64decode

from lxml import etree
from lxml.etree import XMLSyntaxError

from xrpc.const import BLOCK_LENGTH
from xrpc.const import DEFAULT_ENCODING
from xrpc.const import ansi_color
from xrpc.date_formatter import date_formatter
from xrpc.error import Fault
from xrpc.error import StreamError
from xrpc.error import UnknownTagError
from xrpc.error import ValidationError
from xrpc.error import XmlSyntaxError
from xrpc.error import InvalidMessageError


_int_re = re.compile(r'\s*[+-]?\d+\s*$')
_i8_re = re.compile(r'-?\d+$')
_double_re = re.compile(r'\s*[+-]?((\d+\.?\d*|\.\d+)([eE][+-]?\d+)?'
                                           r'|inf|infinity|nan)\s*$', re.I)
_declaration_re = re.compile(r'^\s*<\?xml\s[^>]*\?>')

METHOD_CALL = 'methodcall'
METHOD_RESPONSE = 'methodresponse'

PARAMS = 'params'
FAULT = 'fault'


def _iter_chunks(stream):
    if isinstance(stream, (bytes, bytearray, str)):
        yield stream

    elif hasattr(stream, 'read'):
        while True:
            chunk = stream.read(BLOCK_LENGTH)
            if not chunk:
                break
            yield chunk

    else:
        for chunk in stream:
            yield chunk


class _ParserTarget(object):
    """Forwards the events of the lxml feed parser to a Deserializer."""

    def __init__(self, deserializer):
        self.deserializer = deserializer

    def start(self, tag, attrib):
        self.deserializer.on_opentag(tag)

    def end(self, tag):
        self.deserializer.on_closetag(tag)

    def data(self, text):
        self.deserializer.on_text(text)

    def close(self):
        # the document is complete only once XMLParser.close() returns
        pass


class Deserializer(object):
    """Decodes one XML-RPC method call or method response.

    The document can be handed over in one go with
    :meth:`deserialize_method_call` / :meth:`deserialize_method_response`,
    which accept a byte string, a text string, a file-like object or an
    iterable of chunks. Transports that receive data piecemeal call
    :meth:`start_method_call` / :meth:`start_method_response` first and then
    push the chunks with :meth:`feed` and :meth:`close`.

    The callback is called exactly once. For method calls it receives
    ``(error, method_name, params)``, for method responses ``(error, value)``.
    When ``error`` is not None, the other arguments are None.

    :param encoding: The text encoding of incoming byte chunks.
    """

    def __init__(self, encoding=None):
        if encoding is None:
            encoding = DEFAULT_ENCODING

        self.encoding = encoding
        self.type = None
        self.response_type = None
        self.method_name = None
        self.stack = []
        self.marks = []
        self.data = []
        self.value = False
        self.callback = None
        self.error = None

        self._reported = False
        self._text_decoder = codecs.getincrementaldecoder(encoding)()
        self._head = ''
        self._head_done = False

        # the incoming text is always re-encoded as utf-8 before it's passed
        # to the parser and the xml declaration is dropped, so the encoding it
        # names never reaches libxml2.
        self.parser = etree.XMLParser(target=_ParserTarget(self),
                encoding='utf-8', resolve_entities=False, no_network=True)

        self.handlers = {
            'boolean': self.end_boolean,
            'int': self.end_int,
            'i4': self.end_int,
            'i8': self.end_i8,
            'double': self.end_double,
            'string': self.end_string,
            'name': self.end_string,
            'array': self.end_array,
            'struct': self.end_struct,
            'base64': self.end_base64,
            'datetime.iso8601': self.end_datetime,
            'nil': self.end_nil,
            'value': self.end_value,
            'params': self.end_params,
            'fault': self.end_fault,
            'methodresponse': self.end_method_response,
            'methodname': self.end_method_name,
            'methodcall': self.end_method_call,
            'data': None,
            'param': None,
            'member': None,
        }

    #
    # Public interface
    #

    def deserialize_method_response(self, stream, callback):
        self.start_method_response(callback)
        self.pump(stream)

    def deserialize_method_call(self, stream, callback):
        self.start_method_call(callback)
        self.pump(stream)

    def start_method_response(self, callback):
        def _cb(error, result=None):
            if error is not None:
                callback(error, None)

            elif len(result) > 1:
                callback(InvalidMessageError(
                                   'Response has more than one param'), None)

            elif self.type != METHOD_RESPONSE:
                callback(InvalidMessageError('Not a method response'), None)

            elif self.response_type is None:
                callback(InvalidMessageError('Invalid method response'), None)

            else:
                retval = result[0] if len(result) > 0 else None
                if logger.level == logging.DEBUG:
                    logger.debug("%sResponse:%s %r", ansi_color.LIGHT_RED,
                                                 ansi_color.END_COLOR, retval)
                callback(None, retval)

        self.callback = _cb

    def start_method_call(self, callback):
        def _cb(error, result=None):
            if error is not None:
                callback(error, None, None)

            elif self.type != METHOD_CALL:
                callback(InvalidMessageError('Not a method call'), None, None)

            elif not self.method_name:
                callback(InvalidMessageError(
                    'Method call did not contain a method name'), None, None)

            else:
                if logger.level == logging.DEBUG:
                    logger.debug("%sMethod call:%s %s%r",
                                   ansi_color.LIGHT_GREEN, ansi_color.END_COLOR,
                                   self.method_name, tuple(result))
                callback(None, self.method_name, result)

        self.callback = _cb

    def pump(self, stream):
        """Feeds every chunk of the given stream and closes the parser. Stops
        as soon as an error is reported."""

        chunks = _iter_chunks(stream)
        while self.error is None:
            try:
                chunk = next(chunks)

            except StopIteration:
                self.close()
                break

            except Exception as e:
                self.on_error(StreamError(e))
                break

            self.feed(chunk)

    def feed(self, chunk):
        if self.error is not None:
            return

        try:
            if isinstance(chunk, str):
                text = chunk
            else:
                text = self._text_decoder.decode(chunk)

            text = self._strip_declaration(text)
            if len(text) > 0:
                self.parser.feed(text.encode('utf-8'))

        except (XMLSyntaxError, UnicodeDecodeError) as e:
            self.on_error(XmlSyntaxError(e))

    def close(self):
        if self.error is not None:
            return

        try:
            text = self._text_decoder.decode(b'', True)
            text = self._strip_declaration(text, final=True)
            if len(text) > 0:
                self.parser.feed(text.encode('utf-8'))

            self.parser.close()

        except (XMLSyntaxError, UnicodeDecodeError) as e:
            self.on_error(XmlSyntaxError(e))
            return

        self.on_done()

    def _strip_declaration(self, text, final=False):
        if self._head_done:
            return text

        # hold the text back until the end of the declaration has arrived
        text = self._head + text
        if not ('>' in text or final):
            self._head = text
            return ''

        self._head = ''
        self._head_done = True
        return _declaration_re.sub('', text, count=1)

    def on_done(self):
        if self.error is not None:
            return

        if self.type is None or len(self.marks) > 0:
            self._report(InvalidMessageError('Invalid XML-RPC message'))

        elif self.response_type == FAULT:
            self._report(self._create_fault())

        else:
            self._report(None, self.stack)

    def on_error(self, error):
        """Latches the first error and reports it. Later errors are ignored."""

        if self.error is None:
            if isinstance(error, str):
                error = InvalidMessageError(error)

            self.error = error
            logger.debug("Deserialization error: %r", error)
            self._report(error)

    def push(self, value):
        self.stack.append(value)

    def _report(self, error, result=None):
        if self._reported or self.callback is None:
            return

        self._reported = True
        self.callback(error, result)

    def _create_fault(self):
        if len(self.stack) != 1 or not isinstance(self.stack[0], dict):
            return InvalidMessageError('Invalid fault')

        fault = self.stack[0]
        if not ('faultCode' in fault and 'faultString' in fault):
            return InvalidMessageError(
                        'Fault struct must contain faultCode and faultString')

        return Fault.from_dict(fault)

    #
    # Parser events
    #

    def on_opentag(self, tag):
        if self.error is not None:
            return

        tag = tag.lower()
        if tag == 'array' or tag == 'struct':
            self.marks.append(len(self.stack))

        self.data = []
        self.value = (tag == 'value')

    def on_text(self, text):
        if self.error is None:
            self.data.append(text)

    def on_closetag(self, tag):
        if self.error is not None:
            return

        data = ''.join(self.data)

        try:
            tag = tag.lower()
            if not (tag in self.handlers):
                raise UnknownTagError(tag)

            handler = self.handlers[tag]
            if handler is not None:
                handler(data)

        except Exception as e:
            self.on_error(e)

    #
    # Tag handlers
    #

    def end_nil(self, data):
        self.push(None)
        self.value = False

    def end_boolean(self, data):
        if data == '1':
            self.push(True)
        elif data == '0':
            self.push(False)
        else:
            raise ValidationError(data, "Illegal boolean value %r")

        self.value = False

    def end_int(self, data):
        if _int_re.match(data) is None:
            raise ValidationError(data, "Expected an integer but got %r")

        self.push(int(data))
        self.value = False

    def end_i8(self, data):
        if _i8_re.match(data) is None:
            raise ValidationError(data,
                                     "Expected integer (I8) value but got %r")

        self.end_string(data)

    def end_double(self, data):
        if _double_re.match(data) is None:
            raise ValidationError(data, "Expected a double but got %r")

        self.push(float(data))
        self.value = False

    def end_string(self, data):
        self.push(data)
        self.value = False

    def end_array(self, data):
        mark = self.marks.pop()
        items = self.stack[mark:]
        del self.stack[mark:]

        self.push(items)
        self.value = False

    def end_struct(self, data):
        mark = self.marks.pop()
        items = self.stack[mark:]
        del self.stack[mark:]

        if len(items) % 2 != 0:
            raise InvalidMessageError('Struct member without a value')

        self.push(dict(zip(items[0::2], items[1::2])))
        self.value = False

    def end_base64(self, data):
        try:
            self.push(b64decode(data.encode('ascii')))
        except ValueError:
            raise ValidationError(data, "Expected base64 data but got %r")

        self.value = False

    def end_datetime(self, data):
        self.push(date_formatter.decode(data))
        self.value = False

    def end_value(self, data):
        # a <value> without a type tag holds a string
        if self.value:
            self.end_string(data)

    def end_params(self, data):
        self.response_type = PARAMS

    def end_fault(self, data):
        self.response_type = FAULT

    def end_method_response(self, data):
        self.type = METHOD_RESPONSE

    def end_method_name(self, data):
        self.method_name = data

    def end_method_call(self, data):
        self.type = METHOD_CALL


def parse_method_response(stream, encoding=None):
    """Decodes a method response and returns its value. Errors, including
    remote faults, are raised."""

    retval = []

    def _cb(error, value):
        retval.append((error, value))

    Deserializer(encoding).deserialize_method_response(stream, _cb)

    error, value = retval[0]
    if error is not None:
        raise error

    return value


def parse_method_call(stream, encoding=None):
    """Decodes a method call and returns a ``(method_name, params)`` tuple.
    Errors are raised."""

    retval = []

    def _cb(error, method_name, params):
        retval.append((error, method_name, params))

    Deserializer(encoding).deserialize_method_call(stream, _cb)

    error, method_name, params = retval[0]
    if error is not None:
        raise error

    return method_name, params
