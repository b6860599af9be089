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

"""Colour markers for the message dumps the codec writes at DEBUG level.
They are empty strings until :func:`enable_color` is called.
"""

LIGHT_GREEN = ""
LIGHT_RED = ""
END_COLOR = ""


def enable_color():
    global LIGHT_GREEN, LIGHT_RED, END_COLOR

    LIGHT_GREEN = "\033[1;32m"
    LIGHT_RED = "\033[1;31m"
    END_COLOR = "\033[0m"


def disable_color():
    global LIGHT_GREEN, LIGHT_RED, END_COLOR

    LIGHT_GREEN = ""
    LIGHT_RED = ""
    END_COLOR = ""
