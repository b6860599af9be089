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


"""The ``xrpc.error`` module contains the exceptions the codec, the client and
the server report. All of them derive from :class:`XmlRpcError`.
"""


class XmlRpcError(Exception):
    """Base class for every error raised or reported by xrpc."""


class Fault(XmlRpcError):
    """A remote fault, ie. a well-formed ``<fault>`` response.

    It is an application-level error, not a protocol failure. Raise it from a
    server method handler (or pass it to the handler's callback) to have it
    sent back to the caller as a fault response.

    :param faultCode: The integer fault code.
    :param faultString: The human-readable explanation of the fault.
    """

    def __init__(self, faultCode=0, faultString=""):
        self.faultCode = faultCode
        self.faultString = faultString

        if faultString:
            msg = "XML-RPC fault: %s" % faultString
        else:
            msg = "XML-RPC fault"

        super(Fault, self).__init__(msg)

    @property
    def code(self):
        return self.faultCode

    def __repr__(self):
        return "%s(%r: %r)" % (self.__class__.__name__, self.faultCode,
                                                               self.faultString)

    def to_dict(self):
        """Returns the struct that represents this fault on the wire."""

        return {
            'faultCode': self.faultCode,
            'faultString': self.faultString,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(d.get('faultCode', 0), d.get('faultString', ""))


class DeserializationError(XmlRpcError):
    """Base class for errors found while decoding an incoming document."""


class XmlSyntaxError(DeserializationError):
    """Raised when the xml tokenizer rejects the document. The message is the
    tokenizer's own diagnostic."""

    def __init__(self, error):
        super(XmlSyntaxError, self).__init__(str(error))
        self.error = error


class InvalidMessageError(DeserializationError):
    """Raised when the document is well-formed xml but not a valid XML-RPC
    message."""

    def __init__(self, msg="Invalid XML-RPC message"):
        super(InvalidMessageError, self).__init__(msg)


class UnknownTagError(InvalidMessageError):
    """Raised when the document contains an element that's not part of the
    XML-RPC grammar."""

    def __init__(self, tag):
        super(UnknownTagError, self).__init__("Unknown XML-RPC tag %r" % tag)
        self.tag = tag


class ValidationError(DeserializationError):
    """Raised when the text of a value element does not adhere to its type."""

    def __init__(self, obj, custom_msg='The value %r could not be validated.'):
        try:
            msg = custom_msg % (obj,)
        except TypeError:
            msg = custom_msg

        super(ValidationError, self).__init__(msg)
        self.value = obj


class StreamError(XmlRpcError):
    """Raised when the input stream fails while it's being read."""

    def __init__(self, error):
        super(StreamError, self).__init__(str(error))
        self.error = error


class NotFoundError(XmlRpcError):
    """Raised when the remote end answers with HTTP 404."""

    def __init__(self, msg="Not Found"):
        super(NotFoundError, self).__init__(msg)


class CookiesNotEnabledError(XmlRpcError):
    """Raised when the cookie api of a client without cookie support is
    used."""

    def __init__(self, msg="Cookies support is not turned on for this client "
                                                                   "instance"):
        super(CookiesNotEnabledError, self).__init__(msg)
