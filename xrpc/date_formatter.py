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

"""The ``xrpc.date_formatter`` module converts between datetime objects and the
ISO 8601 flavour used by the ``<dateTime.iso8601>`` tag.

Decoding is lenient: date and time separators are optional, and so are the
minutes, seconds, fractional seconds and zone parts of the time. Missing
components default to zero. A string with a zone designator decodes to an
aware datetime; a string without one decodes to a naive datetime that
represents local time, which is how Python denotes a local wall clock time.

Encoding is controlled by the options of the :class:`DateFormatter` instance.
The defaults produce the conventional XML-RPC form, eg.
``20120607T11:35:10``.
"""

import re
import datetime

import pytz

from pytz import FixedOffset

from xrpc.error import ValidationError


DATE_PATTERN = r'(?P<year>\d{4})-?(?P<month>\d{2})-?(?P<day>\d{2})'
TIME_PATTERN = r'(?P<hr>\d{2})(?::?(?P<min>\d{2}))?(?::?(?P<sec>\d{2}))?' \
               r'(?:\.(?P<sec_frac>\d+))?'
OFFSET_PATTERN = r'(?P<tz>Z|(?P<tz_sign>[+-])(?P<tz_hr>\d{2})' \
                 r'(?::?(?P<tz_min>\d{2}))?)'
ISO8601_PATTERN = DATE_PATTERN + '(?:T' + TIME_PATTERN + OFFSET_PATTERN + '?)?$'


class DateFormatter(object):
    """Decodes ISO 8601 strings to datetime objects and encodes datetime
    objects to ISO 8601 strings.

    :param colons: Separate the time fields with colons. Default: True
    :param hyphens: Separate the date fields with hyphens. Default: False
    :param local: Render local time instead of UTC. Default: True
    :param ms: Render milliseconds. Default: False
    :param offset: Render the utc offset of local time. Only has an effect
        when ``local`` is set. Default: False
    """

    DEFAULT_OPTIONS = {
        'colons': True,
        'hyphens': False,
        'local': True,
        'ms': False,
        'offset': False,
    }

    _iso8601_re = re.compile(ISO8601_PATTERN)

    def __init__(self, **opts):
        self.options = None
        self.set_opts(**opts)

    def set_opts(self, **opts):
        """Sets options for encoding. Options that are not passed are reset
        to their defaults, so calling this without arguments restores the
        default configuration."""

        for k in opts:
            if not (k in self.DEFAULT_OPTIONS):
                raise ValueError(k)

        self.options = dict(self.DEFAULT_OPTIONS)
        self.options.update(opts)

    def decode(self, string):
        match = self._iso8601_re.match(string.strip())
        if match is None:
            raise ValidationError(string,
                                 "Expected a ISO8601 date time but got %r")

        fields = match.groupdict()

        usecond = fields['sec_frac']
        if usecond is None:
            usecond = 0
        else:
            # we only get the most significant 6 digits because that's what
            # datetime can handle.
            usecond = min(999999, int(round(float('0.' + usecond) * 1e6)))

        try:
            tz = fields['tz']
            if tz is None:
                tzinfo = None
            elif tz == 'Z':
                tzinfo = pytz.utc
            else:
                minutes = int(fields['tz_hr']) * 60 + \
                                                   int(fields['tz_min'] or 0)
                if fields['tz_sign'] == '-':
                    minutes = -minutes
                tzinfo = FixedOffset(minutes)

            return datetime.datetime(
                int(fields['year']),
                int(fields['month']),
                int(fields['day']),
                int(fields['hr'] or 0),
                int(fields['min'] or 0),
                int(fields['sec'] or 0),
                usecond, tzinfo)

        except ValueError:
            raise ValidationError(string,
                                 "Expected a ISO8601 date time but got %r")

    def encode(self, value):
        if not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())

        local = self.options['local']
        if local:
            # naive values are taken to be in local time already.
            if value.tzinfo is not None:
                value = value.astimezone()
        else:
            value = value.astimezone(pytz.utc)

        date_sep = '-' if self.options['hyphens'] else ''
        time_sep = ':' if self.options['colons'] else ''

        retval = ''.join((
            date_sep.join(('%04d' % value.year, '%02d' % value.month,
                                                         '%02d' % value.day)),
            'T',
            time_sep.join(('%02d' % value.hour, '%02d' % value.minute,
                                                      '%02d' % value.second)),
        ))

        if self.options['ms']:
            retval += '.%03d' % (value.microsecond // 1000)

        if not local:
            retval += 'Z'
        elif self.options['offset']:
            retval += self.format_offset(value)

        return retval

    @staticmethod
    def format_offset(value=None):
        """Returns the utc offset of the local time zone at the given instant
        (now, by default) as ``Z`` or ``[+-]HH:MM``."""

        if value is None:
            value = datetime.datetime.now()

        if value.tzinfo is None:
            value = value.astimezone()

        minutes = int(value.utcoffset().total_seconds()) // 60
        if minutes == 0:
            return 'Z'

        sign = '-' if minutes < 0 else '+'
        return '%s%02d:%02d' % (sign, abs(minutes) // 60, abs(minutes) % 60)


date_formatter = DateFormatter()
"""The instance shared by the serializer and the deserializer."""
