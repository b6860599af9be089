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

"""The ``xrpc.serializer`` module renders python values as XML-RPC documents.

The value tree is walked with an explicit stack of frames instead of
recursion, so arbitrarily deep structures can be serialized. A frame without
an ``index`` is fresh: a ``<value>`` element is created for it and its value is
classified. Arrays and structs turn into compound frames that push one child
frame per element and are popped once exhausted.

All functions here are pure; they perform no I/O and keep no state.
"""

import logging
logger = logging.getLogger(__name__)

from base64 import b64encode

from lxml import etree

from xrpc.const import XML_VERSION
from xrpc.const import INT32_MIN
from xrpc.const import INT32_MAX
from xrpc.const import INT64_MIN
from xrpc.const import INT64_MAX
from xrpc.const import ansi_color
from xrpc.date_formatter import date_formatter
from xrpc.error import Fault
from xrpc.model import get_kind
from xrpc.model import NIL
from xrpc.model import BOOLEAN
from xrpc.model import NUMBER
from xrpc.model import STRING
from xrpc.model import DATETIME
from xrpc.model import BINARY
from xrpc.model import ARRAY
from xrpc.model import STRUCT
from xrpc.model import CUSTOM
from xrpc.model import ABSENT


def append_nil(value, parent):
    etree.SubElement(parent, 'nil')


def append_boolean(value, parent):
    etree.SubElement(parent, 'boolean').text = '1' if value else '0'


def append_string(value, parent):
    """Empty strings become ``<string/>``. Strings with markup characters are
    wrapped in a CDATA section unless they contain the ``]]>`` sequence, in
    which case they're escaped like every other string."""

    elt = etree.SubElement(parent, 'string')
    if len(value) == 0:
        return

    if ('<' in value or '&' in value) and not (']]>' in value):
        elt.text = etree.CDATA(value)
    else:
        elt.text = value


def append_number(value, parent):
    """Numbers without a fractional part go out as ``<int>``, or as ``<i8>``
    when they don't fit in 32 bits. Everything else is a ``<double>``."""

    if value % 1 == 0:
        retval = int(value)

        if INT32_MIN <= retval <= INT32_MAX:
            etree.SubElement(parent, 'int').text = str(retval)
            return

        if INT64_MIN <= retval <= INT64_MAX:
            etree.SubElement(parent, 'i8').text = str(retval)
            return

        if isinstance(value, int):
            raise OverflowError("int exceeds XML-RPC limits: %d" % value)

    etree.SubElement(parent, 'double').text = str(value)


def append_datetime(value, parent):
    etree.SubElement(parent, 'dateTime.iso8601').text = \
                                                   date_formatter.encode(value)


def append_binary(value, parent):
    etree.SubElement(parent, 'base64').text = \
                                        b64encode(bytes(value)).decode('ascii')


def append_custom(value, parent):
    value.serialize(parent)


def append_absent(value, parent):
    logger.warning("Values of type %r have no XML-RPC representation, "
                        "serializing an empty value instead.", type(value))


_append_handlers = {
    NIL: append_nil,
    BOOLEAN: append_boolean,
    NUMBER: append_number,
    STRING: append_string,
    DATETIME: append_datetime,
    BINARY: append_binary,
    CUSTOM: append_custom,
    ABSENT: append_absent,
}


class _Frame(object):
    __slots__ = ('value', 'parent', 'keys', 'index')

    def __init__(self, value, parent):
        self.value = value
        self.parent = parent
        self.keys = None
        self.index = None


def _next_frame(frame):
    if frame.keys is not None:
        if frame.index < len(frame.keys):
            key = frame.keys[frame.index]
            frame.index += 1

            if not isinstance(key, str):
                raise TypeError("struct keys must be strings, not %r" % (key,))

            member = etree.SubElement(frame.parent, 'member')
            etree.SubElement(member, 'name').text = key
            return _Frame(frame.value[key], member)

    elif frame.index < len(frame.value):
        retval = _Frame(frame.value[frame.index], frame.parent)
        frame.index += 1
        return retval

    return None


def serialize_value(value, parent):
    """Appends the ``<value>`` element for the given value under ``parent``."""

    stack = [_Frame(value, parent)]
    open_ids = set()

    while len(stack) > 0:
        frame = stack[-1]

        if frame.index is not None:
            child = _next_frame(frame)
            if child is None:
                open_ids.discard(id(frame.value))
                stack.pop()
            else:
                stack.append(child)
            continue

        elt = etree.SubElement(frame.parent, 'value')
        kind = get_kind(frame.value)

        if kind is ARRAY or kind is STRUCT:
            if id(frame.value) in open_ids:
                raise TypeError("cannot serialize recursive structure %r" %
                                                        type(frame.value))
            open_ids.add(id(frame.value))

            if kind is ARRAY:
                frame.parent = etree.SubElement(
                                     etree.SubElement(elt, 'array'), 'data')
            else:
                frame.parent = etree.SubElement(elt, 'struct')
                frame.keys = list(frame.value.keys())

            frame.index = 0

        else:
            stack.pop()
            _append_handlers[kind](frame.value, elt)


def _to_string(root, encoding=None, header="Document"):
    if encoding is None:
        decl = '<?xml version="%s"?>' % XML_VERSION
    else:
        decl = '<?xml version="%s" encoding="%s"?>' % (XML_VERSION, encoding)

    retval = decl + etree.tostring(root, encoding='unicode')

    if logger.level == logging.DEBUG:
        logger.debug("%s%s%s %s", ansi_color.LIGHT_GREEN, header,
                                                  ansi_color.END_COLOR, retval)

    return retval


def serialize_method_call(method, params=None, encoding=None):
    """Creates the xml for an XML-RPC method call.

    :param method: The method name.
    :param params: A sequence of values to pass in the call.
    :param encoding: When given, it's written to the xml declaration.
    :return: The document as a ``str``, with the ``<?xml ...?>`` declaration.
    """

    if params is None:
        params = []

    root = etree.Element('methodCall')
    etree.SubElement(root, 'methodName').text = method
    params_elt = etree.SubElement(root, 'params')

    for param in params:
        serialize_value(param, etree.SubElement(params_elt, 'param'))

    return _to_string(root, encoding, "Method call:")


def serialize_method_response(value):
    """Creates the xml for an XML-RPC method response carrying the given
    value."""

    root = etree.Element('methodResponse')
    param = etree.SubElement(etree.SubElement(root, 'params'), 'param')

    serialize_value(value, param)

    return _to_string(root, header="Method response:")


def serialize_fault(fault):
    """Creates the xml for an XML-RPC fault response.

    :param fault: A :class:`xrpc.error.Fault` instance, or a dict with
        ``faultCode`` and ``faultString`` keys.
    """

    if isinstance(fault, Fault):
        fault = fault.to_dict()

    root = etree.Element('methodResponse')

    serialize_value(fault, etree.SubElement(root, 'fault'))

    return _to_string(root, header="Fault:")
