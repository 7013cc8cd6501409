# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    KEYPATH - Parse and expand key paths with a range of child indexes
#    © 2024 - 1200 Web Development <http://1200wd.com/>
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Affero General Public License as
#    published by the Free Software Foundation, either version 3 of the
#    License, or (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU Affero General Public License for more details.
#
#    You should have received a copy of the GNU Affero General Public License
#    along with this program.  If not, see <http://www.gnu.org/licenses/>.
#

from bitcointool.main import *

_logger = logging.getLogger(__name__)

RANGE_OPEN = '[('
RANGE_CLOSE = '])'
RANGE_SEPARATOR = '-'
DIGITS = '0123456789'


class ParserState(enum.Enum):
    SEARCHING = 1
    READING_FROM = 2
    READING_TO = 3
    DONE = 4
    INVALID = 5


class RangeSpec(object):
    """
    Location and bounds of a range marker in a key path.

    :param prefix_end: Position of the opening bracket
    :type prefix_end: int
    :param range_start: Position of the first digit of the lower bound
    :type range_start: int
    :param range_end: Position directly after the closing bracket
    :type range_end: int
    :param first: Lower bound, inclusive
    :type first: int
    :param last: Upper bound, inclusive
    :type last: int
    """

    def __init__(self, prefix_end, range_start, range_end, first, last):
        self.prefix_end = prefix_end
        self.range_start = range_start
        self.range_end = range_end
        self.first = first
        self.last = last

    def __repr__(self):
        return "<RangeSpec(%d-%d, position=%d:%d)>" % (self.first, self.last, self.prefix_end, self.range_end)

    def __eq__(self, other):
        return isinstance(other, RangeSpec) and \
            (self.prefix_end, self.range_start, self.range_end, self.first, self.last) == \
            (other.prefix_end, other.range_start, other.range_end, other.first, other.last)

    def __len__(self):
        return self.last - self.first + 1


def _bound(digits):
    # An empty bound counts as zero
    return int(digits) if digits else 0


def parse(path, max_length=None, max_digits=KEYPATH_RANGE_MAX_DIGITS):
    """
    Find the first range marker in a key path, i.e. m/0'/[1-3]/2'

    A range is a '[' or '(' followed by the lower bound, a '-', the upper bound and a ']' or ')'. Only the first
    marker is used and scanning stops at the first closing bracket. Returns None when no valid range is found:
    an unterminated range, a non-digit between the brackets, a bound with more than max_digits digits or a lower
    bound greater than the upper bound.

    >>> parse("m/0'/[1-3]/2'")
    <RangeSpec(1-3, position=5:10)>
    >>> parse("m/0'/1") is None
    True

    :param path: Key path
    :type path: str
    :param max_length: Maximum number of characters to scan, default is KEYPATH_MAX_LENGTH from config
    :type max_length: int
    :param max_digits: Maximum number of digits of each bound
    :type max_digits: int

    :return RangeSpec, None:
    """
    if max_length is None:
        max_length = KEYPATH_MAX_LENGTH
    state = ParserState.SEARCHING
    prefix_end = range_start = to_start = None
    first = last = None

    for pos, ch in enumerate(path[:max_length + 1]):
        if state == ParserState.SEARCHING:
            if ch in RANGE_OPEN:
                prefix_end = pos
                range_start = pos + 1
                state = ParserState.READING_FROM
        elif state == ParserState.READING_FROM:
            if ch == RANGE_SEPARATOR:
                digits = path[range_start:pos]
                if len(digits) > max_digits:
                    _logger.info("Lower bound of range in key path has more than %d digits" % max_digits)
                    return None
                first = _bound(digits)
                to_start = pos + 1
                state = ParserState.READING_TO
            elif ch not in DIGITS:
                state = ParserState.INVALID
        elif state == ParserState.READING_TO:
            if ch in RANGE_CLOSE:
                digits = path[to_start:pos]
                if len(digits) > max_digits:
                    _logger.info("Upper bound of range in key path has more than %d digits" % max_digits)
                    return None
                last = _bound(digits)
                state = ParserState.DONE
                spec = RangeSpec(prefix_end, range_start, pos + 1, first, last)
                break
            elif ch not in DIGITS:
                state = ParserState.INVALID
        if state == ParserState.INVALID:
            break

    if state != ParserState.DONE:
        return None
    if first > last:
        _logger.info("Range in key path ignored, lower bound %d is greater than upper bound %d" % (first, last))
        return None
    return spec


class KeyPathRange(object):
    """
    Lazy, restartable sequence of key paths. With a range each path has the bracketed range replaced by one index
    number, in ascending order. Without a range the sequence only contains the original path.

    >>> list(KeyPathRange("m/0'/[1-3]/2'"))
    ["m/0'/1/2'", "m/0'/2/2'", "m/0'/3/2'"]
    """

    def __init__(self, path, spec=None):
        self.path = path
        self.spec = spec if spec is not None else parse(path)

    def __repr__(self):
        return "<KeyPathRange(%s, %d paths)>" % (self.path, len(self))

    def __len__(self):
        return len(self.spec) if self.spec else 1

    def __iter__(self):
        if not self.spec:
            yield self.path
            return
        prefix = self.path[:self.spec.prefix_end]
        suffix = self.path[self.spec.range_end:]
        for i in range(self.spec.first, self.spec.last + 1):
            yield "%s%d%s" % (prefix, i, suffix)


def expand(path, spec=None):
    """
    Expand key path with optional range in a sequence of key paths, see :class:`KeyPathRange`

    :param path: Key path
    :type path: str
    :param spec: Range specification, if omitted the path is parsed with :func:`parse`
    :type spec: RangeSpec, None

    :return KeyPathRange:
    """
    return KeyPathRange(path, spec)
