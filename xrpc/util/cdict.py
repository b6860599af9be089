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

"""cdict (ClassDict) is a dict that falls back to the entries for the base
classes of a key when there's no entry for the key itself. The result of the
fallback lookup is cached under the original key.

>>> from xrpc.util.cdict import cdict
>>> class A(object):
...     pass
...
>>> class B(A):
...     pass
...
>>> d = cdict({A: "fun", object: "base"})
>>> d[B]
'fun'
>>> d[int]
'base'
"""


class cdict(dict):
    def __getitem__(self, cls):
        try:
            return dict.__getitem__(self, cls)

        except KeyError:
            if not isinstance(cls, type):
                cls = cls.__class__

            for b in cls.__mro__[1:]:
                if dict.__contains__(self, b):
                    retval = dict.__getitem__(self, b)
                    self[cls] = retval
                    return retval

            raise

    def get(self, k, d=None):
        try:
            return self[k]

        except KeyError:
            return d
