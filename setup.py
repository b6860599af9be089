#!/usr/bin/env python
#encoding: utf8

import io
import os
import re

from setuptools import setup
from setuptools import find_packages


with io.open(os.path.join(os.path.dirname(__file__), 'xrpc', '__init__.py'),
                                                                   'r') as v:
    VERSION = re.match(r".*__version__ = '(.*?)'", v.read(), re.S).group(1)

SHORT_DESC = "An XML-RPC codec with a streaming deserializer, plus a small " \
             "http client and wsgi server."

LONG_DESC = """xrpc encodes python values into XML-RPC method calls, method
responses and faults, and decodes them back incrementally as the bytes arrive
from the wire. The deserializer never needs the whole document in memory and
the serializer handles arbitrarily deep structures without recursion.
"""

try:
    os.stat('CHANGELOG.rst')
    with io.open('CHANGELOG.rst', 'rb') as f:
        LONG_DESC += u"\n\n" + f.read().decode('utf8')
except OSError:
    pass


setup(
    name='xrpc',
    packages=find_packages(include=['xrpc', 'xrpc.*']),

    version=VERSION,
    description=SHORT_DESC,
    long_description=LONG_DESC,
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Operating System :: OS Independent',
        'Natural Language :: English',
        'Intended Audience :: Developers',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
    ],
    keywords='xml-rpc xmlrpc rpc xml wsgi http codec',
    license='LGPL-2.1',
    zip_safe=False,
    python_requires='>=3.6',
    install_requires=[
      'lxml',
      'pytz',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
        ],
    },
)
