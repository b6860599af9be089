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

"""The ``xrpc.cookies`` module contains the cookie jar the http client uses to
remember the cookies the server sets and to send them back with the following
calls."""

import logging
logger = logging.getLogger(__name__)

import datetime

from email.utils import parsedate_to_datetime

import pytz


class Cookie(object):
    def __init__(self, value, expires=None, secure=False, new=False):
        self.value = value
        self.expires = expires
        self.secure = secure
        self.new = new

    def is_expired(self, now=None):
        if self.expires is None:
            return False

        if now is None:
            now = datetime.datetime.now(pytz.utc)

        expires = self.expires
        if expires.tzinfo is None:
            expires = expires.astimezone(pytz.utc)

        return now > expires


class Cookies(object):
    """A name to :class:`Cookie` mapping. Expired cookies are dropped as soon
    as they're looked at."""

    def __init__(self):
        self.cookies = {}

    def get(self, name):
        """Returns the value of the cookie with the given name, or None when
        it's missing or expired."""

        if self._check_not_expired(name) and name in self.cookies:
            return self.cookies[name].value

        return None

    def set(self, name, value, expires=None, secure=False, new=False):
        """Sets the value of the cookie with the given name.

        :param expires: An optional datetime after which the cookie vanishes.
        :param secure: Whether the cookie is secure. Stored, not enforced.
        """

        self.cookies[name] = Cookie(value, expires, secure, new)

    def get_expiration_date(self, name):
        cookie = self.cookies.get(name)
        if cookie is None:
            return None

        return cookie.expires

    def _check_not_expired(self, name):
        cookie = self.cookies.get(name)
        if cookie is not None and cookie.is_expired():
            del self.cookies[name]
            return False

        return True

    def parse_response(self, headers):
        """Stores the cookies from the ``Set-Cookie`` headers of a response.

        :param headers: An ``http.client.HTTPMessage`` or any object with a
            ``get_all`` method, or a dict mapping header names to a string or
            a list of strings.
        """

        if hasattr(headers, 'get_all'):
            set_cookies = headers.get_all('Set-Cookie') or []

        else:
            set_cookies = None
            for k, v in headers.items():
                if k.lower() == 'set-cookie':
                    set_cookies = v
                    break

            if set_cookies is None:
                set_cookies = []
            elif isinstance(set_cookies, str):
                set_cookies = [set_cookies]

        for cookie in set_cookies:
            params = cookie.split(';')
            pair = params.pop(0).split('=', 1)
            if len(pair) != 2:
                logger.debug("Ignoring malformed cookie %r", cookie)
                continue

            expires = None
            for param in params:
                param = param.strip()
                if param.lower().startswith('expires'):
                    date = param.partition('=')[2].strip()
                    try:
                        expires = parsedate_to_datetime(date)
                    except (TypeError, ValueError):
                        logger.debug("Ignoring malformed expiry date %r", date)

            self.set(pair[0].strip(), pair[1].strip(), expires=expires)

    def compose_request(self, headers):
        """Adds the ``Cookie`` header to the given headers dict. Does nothing
        when there are no unexpired cookies."""

        cookie = str(self)
        if len(cookie) > 0:
            headers['Cookie'] = cookie

    def __str__(self):
        return ';'.join(['%s=%s' % (name, self.cookies[name].value)
                         for name in list(self.cookies)
                                          if self._check_not_expired(name)])
