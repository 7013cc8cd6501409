# -*- coding: utf-8 -*-
#
#    BitcoinTool - Key derivation and transaction signing tool
#    Unit Tests for Key path range parsing and expansion
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

import unittest

from bitcointool.keypath import *


class TestKeyPathParse(unittest.TestCase):

    def test_keypath_parse_range(self):
        spec = parse("m/0'/[1-3]/2'")
        self.assertEqual(RangeSpec(5, 6, 10, 1, 3), spec)
        self.assertEqual(3, len(spec))

    def test_keypath_parse_no_range(self):
        self.assertIsNone(parse("m/0'/1"))
        self.assertIsNone(parse(""))

    def test_keypath_parse_round_brackets(self):
        self.assertEqual(RangeSpec(2, 3, 9, 10, 12), parse("m/(10-12)"))

    def test_keypath_parse_mixed_brackets(self):
        self.assertEqual(RangeSpec(2, 3, 7, 1, 3), parse("m/(1-3]"))
        self.assertEqual(RangeSpec(2, 3, 7, 1, 3), parse("m/[1-3)"))

    def test_keypath_parse_unterminated(self):
        self.assertIsNone(parse("m/[1-3"))
        self.assertIsNone(parse("m/[1"))
        self.assertIsNone(parse("m/["))

    def test_keypath_parse_non_digit(self):
        self.assertIsNone(parse("m/[a-3]"))
        self.assertIsNone(parse("m/[1-3h]"))
        self.assertIsNone(parse("m/[1-2-3]"))
        self.assertIsNone(parse("m/[ 1-3]"))

    def test_keypath_parse_reversed(self):
        self.assertIsNone(parse("m/[3-1]"))

    def test_keypath_parse_empty_bounds(self):
        self.assertEqual(RangeSpec(2, 3, 6, 0, 3), parse("m/[-3]"))
        self.assertEqual(RangeSpec(2, 3, 5, 0, 0), parse("m/[-]"))
        self.assertIsNone(parse("m/[2-]"))

    def test_keypath_parse_max_digits(self):
        self.assertEqual(RangeSpec(2, 3, 21, 12345678, 12345679), parse("m/[12345678-12345679]"))
        self.assertIsNone(parse("m/[123456789-123456790]"))
        self.assertIsNone(parse("m/[1-123456789]"))
        self.assertEqual(RangeSpec(2, 3, 9, 1, 123), parse("m/[1-123]", max_digits=3))
        self.assertIsNone(parse("m/[1-1234]", max_digits=3))

    def test_keypath_parse_first_range_only(self):
        self.assertEqual(RangeSpec(2, 3, 7, 1, 2), parse("m/[1-2]/[3-4]"))

    def test_keypath_parse_ignore_after_close(self):
        self.assertEqual(RangeSpec(2, 3, 7, 1, 2), parse("m/[1-2]/x]"))

    def test_keypath_parse_max_length(self):
        self.assertIsNone(parse("m/[1-3]", max_length=5))
        self.assertEqual(RangeSpec(2, 3, 7, 1, 3), parse("m/[1-3]", max_length=6))
        self.assertIsNone(parse("m/" + "0/" * 600 + "[1-3]"))


class TestKeyPathExpand(unittest.TestCase):

    def test_keypath_expand_range(self):
        self.assertEqual(["m/0'/1/2'", "m/0'/2/2'", "m/0'/3/2'"], list(expand("m/0'/[1-3]/2'")))

    def test_keypath_expand_suffix_range(self):
        self.assertEqual(["m/1h/5", "m/1h/6"], list(expand("m/1h/(5-6)")))

    def test_keypath_expand_single(self):
        self.assertEqual(["m/44'/0'/0'/0/7"], list(expand("m/44'/0'/0'/0/[7-7]")))

    def test_keypath_expand_degraded(self):
        for path in ["m/0'/1", "m/[3-1]", "m/[1-3", "m/[a-3]", "m/[123456789-123456790]"]:
            self.assertEqual([path], list(expand(path)))

    def test_keypath_expand_restartable(self):
        paths = expand("m/[0-2]")
        self.assertEqual(3, len(paths))
        self.assertEqual(list(paths), list(paths))

    def test_keypath_expand_lazy(self):
        paths = iter(expand("m/[0-99999999]"))
        self.assertEqual("m/0", next(paths))
        self.assertEqual("m/1", next(paths))
        self.assertEqual(100000000, len(expand("m/[0-99999999]")))

    def test_keypath_expand_with_spec(self):
        self.assertEqual(["x5y"], list(expand("x[1-2]y", RangeSpec(1, 2, 6, 5, 5))))

    def test_keypath_expand_does_not_change_path(self):
        path = "m/[1-2]"
        r = expand(path)
        list(r)
        self.assertEqual(path, r.path)


if __name__ == '__main__':
    unittest.main()
