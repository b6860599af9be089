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

"""The ``xrpc.const`` package contains miscellanous constant values needed
in various parts of xrpc."""


XML_VERSION = '1.0'
"""Version string written to the xml declaration of every outgoing
document."""

DEFAULT_ENCODING = 'utf8'
"""Text encoding used by the deserializer when none is given."""

BLOCK_LENGTH = 8 * 1024
"""Number of bytes read from an input stream at a time."""

MAX_CONTENT_LENGTH = 2 * 1024 * 1024
"""Maximum size of a request body accepted by :class:`xrpc.server.Server`."""

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
"""Range of the ``<int>``/``<i4>`` tags."""

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1
"""Range of the ``<i8>`` tag."""

DEFAULT_HEADERS = (
    ('User-Agent', 'Python xrpc Client'),
    ('Content-Type', 'text/xml'),
    ('Accept', 'text/xml'),
    ('Accept-Charset', 'UTF8'),
    ('Connection', 'Keep-Alive'),
)
"""Headers sent by :class:`xrpc.client.Client` unless overridden."""

FAULT_PARSE_ERROR = -32700
"""Fault code returned when a request could not be decoded."""

FAULT_INVALID_REQUEST = -32600
"""Fault code returned when a request is not a method call."""

FAULT_APPLICATION_ERROR = -32500
"""Fault code returned when a method handler raises."""
