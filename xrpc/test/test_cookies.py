#!/usr/bin/env python
# encoding: utf-8
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

import datetime
import unittest

import pytz

from xrpc.cookies import Cookies


def _now():
    return datetime.datetime.now(pytz.utc)


class TestSetGet(unittest.TestCase):
    def test_value_only(self):
        cookies = Cookies()
        cookies.set('a', 'b')

        assert cookies.get('a') == 'b'

    def test_missing(self):
        assert Cookies().get('c') is None

    def test_expires_in_future(self):
        cookies = Cookies()
        cookies.set('a', 'b', expires=_now() + datetime.timedelta(days=5 * 365))

        assert cookies.get('a') == 'b'

    def test_expires_in_past(self):
        cookies = Cookies()
        cookies.set('a', 'b', expires=_now() - datetime.timedelta(days=1))

        assert cookies.get('a') is None
        assert not ('a' in cookies.cookies)

    def test_naive_expiry(self):
        cookies = Cookies()
        cookies.set('a', 'b', expires=datetime.datetime.now() +
                                                    datetime.timedelta(days=1))

        assert cookies.get('a') == 'b'


class TestParseResponse(unittest.TestCase):
    def test_no_cookies(self):
        cookies = Cookies()
        cookies.parse_response({})
        cookies.parse_response({'set-cookie': []})

        assert cookies.cookies == {}

    def test_without_expiration_date(self):
        cookies = Cookies()
        cookies.parse_response({'set-cookie': [' name=value ']})

        assert cookies.get('name') == 'value'
        assert cookies.get_expiration_date('name') is None

    def test_with_expiration_date(self):
        cookies = Cookies()
        cookies.parse_response({'Set-Cookie':
                        ' name=value ;Expires=Wed, 01 Jan 2070 00:00:01 GMT '})

        assert cookies.get('name') == 'value'
        assert cookies.get_expiration_date('name') == \
                    datetime.datetime(2070, 1, 1, 0, 0, 1, tzinfo=pytz.utc)

    def test_with_other_fields(self):
        cookies = Cookies()
        cookies.parse_response({'set-cookie': [' name=value ;some=thing;'
                    'Expires=Wed, 01 Jan 2070 00:00:01 GMT ;any=thing ']})

        assert cookies.get('name') == 'value'
        assert cookies.get_expiration_date('name') == \
                    datetime.datetime(2070, 1, 1, 0, 0, 1, tzinfo=pytz.utc)

    def test_several_cookies(self):
        cookies = Cookies()
        cookies.parse_response({'set-cookie': ['name1=value1', 'name2=value2']})

        assert cookies.get('name1') == 'value1'
        assert cookies.get('name2') == 'value2'

    def test_expired_cookie(self):
        cookies = Cookies()
        cookies.parse_response({'set-cookie':
                    ['name=value; Expires=Thu, 01 Jan 1970 00:00:01 GMT']})

        assert cookies.get('name') is None

    def test_malformed(self):
        cookies = Cookies()
        cookies.parse_response({'set-cookie': ['novalue', 'a=b; Expires=soon']})

        assert cookies.get('novalue') is None
        assert cookies.get('a') == 'b'
        assert cookies.get_expiration_date('a') is None

    def test_http_message(self):
        from email.message import Message

        headers = Message()
        headers['Set-Cookie'] = 'a=1'
        headers['Set-Cookie'] = 'b=2'

        cookies = Cookies()
        cookies.parse_response(headers)

        assert str(cookies) == 'a=1;b=2'


class TestComposeRequest(unittest.TestCase):
    def test_no_cookies(self):
        headers = {}
        Cookies().compose_request(headers)

        assert headers == {}

    def test_cookies(self):
        cookies = Cookies()
        cookies.set('a', 'b')
        cookies.set('c', 'd')

        headers = {}
        cookies.compose_request(headers)

        assert headers == {'Cookie': 'a=b;c=d'}

    def test_expired_cookies_are_skipped(self):
        cookies = Cookies()
        cookies.set('a', 'b', expires=_now() - datetime.timedelta(days=1))
        cookies.set('c', 'd')

        assert str(cookies) == 'c=d'

    def test_only_expired_cookies(self):
        cookies = Cookies()
        cookies.set('a', 'b', expires=_now() - datetime.timedelta(days=1))

        headers = {}
        cookies.compose_request(headers)

        assert headers == {}


if __name__ == '__main__':
    unittest.main()
