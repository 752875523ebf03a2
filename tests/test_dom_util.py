# -*- coding: utf-8 -*-
#
# This file is part of `yamltree`, a library for format-preserving YAML editing
#
# Copyright © 2019-2022 by Wilbert Berendsen <info@wilbertberendsen.nl>
#
# This module is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This module is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
Test the dom.util module.
"""

### find yamltree
import sys
sys.path.insert(0, '.')

from yamltree.dom import util


def test_main():
    doc = util.document("ab\n  cd\r\nef")
    assert util.line_start(doc, 6) == 3
    assert util.column(doc, 6) == 3
    assert util.line_end(doc, 4) == 7
    assert util.at_line_start(doc, 5)
    assert not util.at_line_start(doc, 6)
    assert util.content_end(util.document("a:   # x"), 5) == 2
    assert util.line_end_of("ab\r\ncd", 0) == 2


def test_scalars():
    assert util.resolves_to_string('hello')
    assert not util.resolves_to_string('yes')
    assert not util.resolves_to_string('12')
    assert not util.resolves_to_string('~')
    assert util.plain_allowed('a b')
    assert not util.plain_allowed('a: b')
    assert not util.plain_allowed('a, b', True)
    assert util.plain_allowed('a, b')
    assert util.quoted("it's") == "'it''s'"
    assert util.quoted("two\nlines") == '"two\\nlines"'
    assert util.key_text('key') == 'key'
    assert util.key_text('') == "''"
    assert util.key_text('a: b') == "'a: b'"
    assert util.scalar_data_text(None) == 'null'
    assert util.scalar_data_text(True) == 'true'
    assert util.scalar_data_text(1.5) == '1.5'
    assert util.tag_text('tag:yaml.org,2002:str') == '!!str'
    assert util.tag_text('!local') == '!local'
    assert util.tag_text('tag:example.com,2000:x') == '!<tag:example.com,2000:x>'


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
