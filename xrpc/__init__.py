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

__version__ = '0.9.0'

from xrpc.error import XmlRpcError
from xrpc.error import Fault
from xrpc.error import DeserializationError
from xrpc.error import XmlSyntaxError
from xrpc.error import InvalidMessageError
from xrpc.error import UnknownTagError
from xrpc.error import ValidationError

from xrpc.model import CustomType
from xrpc.model import is_custom_type

from xrpc.date_formatter import DateFormatter
from xrpc.date_formatter import date_formatter

from xrpc.serializer import serialize_method_call
from xrpc.serializer import serialize_method_response
from xrpc.serializer import serialize_fault

from xrpc.deserializer import Deserializer
from xrpc.deserializer import parse_method_call
from xrpc.deserializer import parse_method_response

from xrpc.client import Client
from xrpc.server import Server
