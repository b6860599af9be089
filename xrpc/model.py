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

"""The ``xrpc.model`` module defines the value kinds the codec knows about
and the extension point for values that bring their own wire tags.

Python natives map to XML-RPC types as follows:

    ==================  =====================
    python              xml-rpc
    ==================  =====================
    None                nil
    bool                boolean
    int, float          int, i8, double
    str                 string
    datetime, date      dateTime.iso8601
    bytes, bytearray    base64
    list, tuple         array
    dict                struct
    ==================  =====================

Anything else serializes as an empty ``<value/>``.
"""

import datetime
import decimal

from collections.abc import Mapping
from collections.abc import Sequence

from lxml import etree

from xrpc.util.cdict import cdict


NIL = 'nil'
BOOLEAN = 'boolean'
NUMBER = 'number'
STRING = 'string'
DATETIME = 'dateTime.iso8601'
BINARY = 'base64'
ARRAY = 'array'
STRUCT = 'struct'
CUSTOM = 'custom'
ABSENT = 'absent'
"""Value kinds. ``ABSENT`` covers values that have no wire representation."""


_kinds = cdict({
    type(None): NIL,
    bool: BOOLEAN,
    int: NUMBER,
    float: NUMBER,
    decimal.Decimal: NUMBER,
    str: STRING,
    datetime.date: DATETIME,
    bytes: BINARY,
    bytearray: BINARY,
    list: ARRAY,
    tuple: ARRAY,
    dict: STRUCT,
    object: ABSENT,
})


def is_custom_type(value):
    """Returns True when the given value can serialize itself, ie. it has a
    ``tag_name`` and a callable ``serialize``."""

    return getattr(value, 'tag_name', None) is not None and \
                                   callable(getattr(value, 'serialize', None))


def get_kind(value):
    """Returns the kind of the given value as one of the constants in this
    module."""

    if is_custom_type(value):
        return CUSTOM

    retval = _kinds[type(value)]
    if retval is not ABSENT:
        return retval

    # abstract base classes are not in the mro so cdict can't see them.
    if isinstance(value, Mapping):
        return STRUCT

    if isinstance(value, Sequence):
        return ARRAY

    return ABSENT


class CustomType(object):
    """Base class for values that are serialized under a user-defined tag.

    The default implementation writes ``<tag_name>str(raw)</tag_name>`` inside
    the ``<value>`` element. Subclasses set ``tag_name`` and override
    :meth:`serialize` when they need more elaborate markup. Note that the
    serializer does not check for this class; any object with a ``tag_name``
    and a ``serialize`` method is accepted.

    >>> class Key(CustomType):
    ...     tag_name = 'key'
    ...
    >>> serialize_method_response(Key('abc'))
    '<?xml version="1.0"?><methodResponse>...<value><key>abc</key></value>...'
    """

    tag_name = 'customType'

    def __init__(self, raw):
        self.raw = raw

    def serialize(self, parent):
        """Appends the markup for this value under the given ``<value>``
        element and returns the new child element."""

        elt = etree.SubElement(parent, self.tag_name)
        elt.text = str(self.raw)
        return elt

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.raw)
