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

import logging
logging.basicConfig(level=logging.DEBUG)

import datetime
import decimal
import unittest

from lxml import etree

from xrpc import CustomType
from xrpc.error import Fault
from xrpc.serializer import serialize_fault
from xrpc.serializer import serialize_method_call
from xrpc.serializer import serialize_method_response


DECL = '<?xml version="1.0"?>'


def _call(*values):
    return DECL + '<methodCall><methodName>testMethod</methodName><params>' + \
        ''.join(['<param>%s</param>' % v for v in values]) + \
        '</params></methodCall>'


def _response(value):
    return DECL + '<methodResponse><params><param>%s</param></params>' \
                  '</methodResponse>' % value


class TestSerializeMethodCall(unittest.TestCase):
    def test_boolean_true(self):
        assert serialize_method_call('testMethod', [True]) == \
                             _call('<value><boolean>1</boolean></value>')

    def test_boolean_false(self):
        assert serialize_method_call('testMethod', [False]) == \
                             _call('<value><boolean>0</boolean></value>')

    def test_datetime(self):
        value = datetime.datetime(2012, 6, 7, 11, 35, 10)
        assert serialize_method_call('testMethod', [value]) == _call(
            '<value><dateTime.iso8601>20120607T11:35:10</dateTime.iso8601>'
            '</value>')

    def test_date(self):
        value = datetime.date(2012, 6, 7)
        assert serialize_method_call('testMethod', [value]) == _call(
            '<value><dateTime.iso8601>20120607T00:00:00</dateTime.iso8601>'
            '</value>')

    def test_base64(self):
        assert serialize_method_call('testMethod', [b'testing']) == \
                        _call('<value><base64>dGVzdGluZw==</base64></value>')

    def test_bytearray(self):
        assert serialize_method_call('testMethod', [bytearray(b'testing')]) \
                    == _call('<value><base64>dGVzdGluZw==</base64></value>')

    def test_double_positive(self):
        assert serialize_method_call('testMethod', [17.5]) == \
                                _call('<value><double>17.5</double></value>')

    def test_double_negative(self):
        assert serialize_method_call('testMethod', [-32.7777]) == \
                            _call('<value><double>-32.7777</double></value>')

    def test_decimal(self):
        assert serialize_method_call('testMethod', [decimal.Decimal('1.25')]) \
                         == _call('<value><double>1.25</double></value>')

    def test_int(self):
        assert serialize_method_call('testMethod', [17]) == \
                                      _call('<value><int>17</int></value>')
        assert serialize_method_call('testMethod', [-32]) == \
                                     _call('<value><int>-32</int></value>')
        assert serialize_method_call('testMethod', [0]) == \
                                       _call('<value><int>0</int></value>')

    def test_integral_double_is_int(self):
        assert serialize_method_call('testMethod', [4.0]) == \
                                        _call('<value><int>4</int></value>')

    def test_i8(self):
        assert serialize_method_call('testMethod', [2 ** 40]) == \
                        _call('<value><i8>1099511627776</i8></value>')
        assert serialize_method_call('testMethod', [-2 ** 31 - 1]) == \
                        _call('<value><i8>-2147483649</i8></value>')

    def test_int_overflow(self):
        self.assertRaises(OverflowError, serialize_method_call, 'testMethod',
                                                                   [2 ** 64])

    def test_huge_integral_double(self):
        assert serialize_method_call('testMethod', [1e300]) == \
                                _call('<value><double>1e+300</double></value>')

    def test_nil(self):
        assert serialize_method_call('testMethod', [None]) == \
                                            _call('<value><nil/></value>')

    def test_string(self):
        assert serialize_method_call('testMethod', ['testString']) == \
                         _call('<value><string>testString</string></value>')

    def test_string_cdata(self):
        value = '<html><body>Congrats</body></html>'
        assert serialize_method_call('testMethod', [value]) == _call(
                '<value><string><![CDATA[%s]]></string></value>' % value)

    def test_string_multiline_cdata(self):
        value = '<html>\n<head><title>Go testing!</title></head>\n' \
                '<body>Congrats</body>\n</html>'
        assert serialize_method_call('testMethod', [value]) == _call(
                '<value><string><![CDATA[%s]]></string></value>' % value)

    def test_string_ampersand_cdata(self):
        assert serialize_method_call('testMethod', ['fish & chips']) == _call(
               '<value><string><![CDATA[fish & chips]]></string></value>')

    def test_string_cdata_terminator(self):
        xml = serialize_method_call('testMethod', ['a < b ]]> c'])

        assert not ('CDATA' in xml)
        elt = etree.fromstring(xml.encode('utf8'))
        assert elt.findtext('params/param/value/string') == 'a < b ]]> c'

    def test_string_empty(self):
        assert serialize_method_call('testMethod', ['']) == \
                                    _call('<value><string/></value>')

    def test_string_emoji(self):
        value = b'\xf0\x9f\x98\x81'.decode('utf8')
        assert serialize_method_call('testMethod', [value]) == \
                         _call('<value><string>%s</string></value>' % value)

    def test_unsupported(self):
        assert serialize_method_call('testMethod', [object()]) == \
                                                      _call('<value/>')

    def test_no_params(self):
        assert serialize_method_call('testMethod') == DECL + \
            '<methodCall><methodName>testMethod</methodName><params/>' \
            '</methodCall>'

    def test_encoding(self):
        xml = serialize_method_call('testMethod', [], 'utf-8')
        assert xml.startswith('<?xml version="1.0" encoding="utf-8"?>')

    def test_array(self):
        assert serialize_method_call('testMethod', [[1, 'a']]) == _call(
            '<value><array><data>'
                '<value><int>1</int></value>'
                '<value><string>a</string></value>'
            '</data></array></value>')

    def test_tuple(self):
        assert serialize_method_call('testMethod', [(True,)]) == _call(
            '<value><array><data>'
                '<value><boolean>1</boolean></value>'
            '</data></array></value>')

    def test_empty_array(self):
        assert serialize_method_call('testMethod', [[]]) == \
                        _call('<value><array><data/></array></value>')

    def test_empty_struct(self):
        assert serialize_method_call('testMethod', [{}]) == \
                                 _call('<value><struct/></value>')

    def test_nested_struct(self):
        value = {'stringName': 'string1', 'objectName': {'intName': 4}}
        assert serialize_method_call('testMethod', [value]) == _call(
            '<value><struct>'
                '<member><name>stringName</name>'
                    '<value><string>string1</string></value></member>'
                '<member><name>objectName</name>'
                    '<value><struct>'
                        '<member><name>intName</name>'
                            '<value><int>4</int></value></member>'
                    '</struct></value></member>'
            '</struct></value>')

    def test_struct_of_arrays(self):
        value = {'a': [1, [2]], 'b': []}
        assert serialize_method_call('testMethod', [value]) == _call(
            '<value><struct>'
                '<member><name>a</name><value><array><data>'
                    '<value><int>1</int></value>'
                    '<value><array><data>'
                        '<value><int>2</int></value>'
                    '</data></array></value>'
                '</data></array></value></member>'
                '<member><name>b</name>'
                    '<value><array><data/></array></value></member>'
            '</struct></value>')

    def test_struct_key_must_be_string(self):
        self.assertRaises(TypeError, serialize_method_call, 'testMethod',
                                                                  [{1: 'a'}])

    def test_recursive_structure(self):
        value = []
        value.append(value)

        self.assertRaises(TypeError, serialize_method_call, 'testMethod',
                                                                     [value])

    def test_same_object_twice_is_not_recursion(self):
        shared = [1]
        xml = serialize_method_call('testMethod', [[shared, shared]])

        assert xml.count('<int>1</int>') == 2

    def test_deep_nesting(self):
        depth = 1500

        value = 'leaf'
        for _ in range(depth):
            value = [value]

        xml = serialize_method_call('testMethod', [value])

        assert xml.count('<array>') == depth
        assert '<string>leaf</string>' in xml

    def test_custom_type(self):
        value = CustomType('testCustomType')
        assert serialize_method_call('testMethod', [value]) == \
            _call('<value><customType>testCustomType</customType></value>')

    def test_custom_type_subclass(self):
        class ExtendedCustomType(CustomType):
            tag_name = 'extendedCustomType'

        value = ExtendedCustomType('testCustomType')
        assert serialize_method_call('testMethod', [value]) == _call(
                        '<value><extendedCustomType>testCustomType'
                        '</extendedCustomType></value>')

    def test_custom_type_capability(self):
        class Point(object):
            tag_name = 'point'

            def __init__(self, x, y):
                self.x = x
                self.y = y

            def serialize(self, parent):
                elt = etree.SubElement(parent, self.tag_name)
                elt.set('x', str(self.x))
                elt.set('y', str(self.y))

        assert serialize_method_call('testMethod', [Point(1, 2)]) == \
                               _call('<value><point x="1" y="2"/></value>')


class TestSerializeMethodResponse(unittest.TestCase):
    def test_string(self):
        assert serialize_method_response('s') == \
                            _response('<value><string>s</string></value>')

    def test_nested_struct(self):
        value = {'stringName': 'string1', 'objectName': {'intName': 4}}
        assert serialize_method_response(value) == _response(
            '<value><struct>'
                '<member><name>stringName</name>'
                    '<value><string>string1</string></value></member>'
                '<member><name>objectName</name>'
                    '<value><struct>'
                        '<member><name>intName</name>'
                            '<value><int>4</int></value></member>'
                    '</struct></value></member>'
            '</struct></value>')


class TestSerializeFault(unittest.TestCase):
    FAULT_XML = DECL + '<methodResponse><fault><value><struct>' \
        '<member><name>faultCode</name><value><int>4</int></value></member>' \
        '<member><name>faultString</name>' \
            '<value><string>Too many parameters.</string></value></member>' \
        '</struct></value></fault></methodResponse>'

    def test_dict(self):
        value = {'faultCode': 4, 'faultString': 'Too many parameters.'}
        assert serialize_fault(value) == self.FAULT_XML

    def test_fault_instance(self):
        assert serialize_fault(Fault(4, 'Too many parameters.')) == \
                                                               self.FAULT_XML


if __name__ == '__main__':
    unittest.main()
