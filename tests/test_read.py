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
Test reading YAML text into a tree.
"""

import pytest

### find yamltree
import sys
sys.path.insert(0, '.')

from yamltree.datatypes import TextSpan
from yamltree.dom import comments, element, read
from yamltree.dom.element import Bool, Float, Integer, Null, String
from yamltree.exceptions import ParseError


def test_main():
    text = "name: value\ncount: 3\nitems:\n  - one\n  - 2.5\n"
    tree = read.parse(text)
    assert tree.source == text
    root = tree.root
    assert root.is_mapping()
    assert root.keys() == ['name', 'count', 'items']
    name = tree.get('name')
    assert name.value == String('value')
    assert name.origin == TextSpan(6, 11)
    assert name.key_span == TextSpan(0, 4)
    assert text[name.span.start:name.span.end] == 'value'
    assert tree.get('count').value == Integer(3)
    items = tree.get('items')
    assert items.is_sequence()
    assert not items.flow
    assert [n.value for n in items] == [String('one'), Float(2.5)]
    assert text[items[0].entry:items[0].origin.end] == '- one'
    assert tree.path(items[1]) == ['items', 1]
    assert tree.data() == {'name': 'value', 'count': 3, 'items': ['one', 2.5]}
    assert not any(n.modified or n.dirty for n in root.subtree())


def test_scalars():
    tree = read.parse("a: ~\nb: yes\nc: 0x10\nd: .inf\ne: '12'\nf: \"x\"\ng:\n")
    assert tree.get('a').value == Null()
    assert tree.get('b').value == Bool(True)
    assert tree.get('c').value == Integer(16)
    assert tree.get('d').value == Float(float('inf'))
    assert tree.get('e').value == String('12')
    assert tree.get('e').value.quote == "'"
    assert tree.get('f').value.quote == '"'
    g = tree.get('g')
    assert g.value == Null()
    assert g.origin.start == g.origin.end


def test_tags():
    tree = read.parse("a: !!str 12\nb: !custom x\n")
    a = tree.get('a')
    assert a.value == String('12')
    assert a.tag == 'tag:yaml.org,2002:str'
    assert tree.get('b').tag == '!custom'


def test_block_scalars():
    text = "lit: |\n  one\n  two\n\nfold: >-\n  a\n  b\nkeep: |+\n  x\n\n"
    tree = read.parse(text)
    lit = tree.get('lit')
    assert lit.value == String('one\ntwo\n', element.LITERAL)
    assert lit.value.chomp == ''
    # the span does not include the trailing empty lines
    assert text[lit.origin.start:lit.origin.end] == '|\n  one\n  two'
    fold = tree.get('fold')
    assert fold.style == element.FOLDED
    assert fold.value.text == 'a b'
    assert fold.value.chomp == '-'
    keep = tree.get('keep')
    assert keep.value.chomp == '+'
    assert keep.value.text == 'x\n\n'
    # with keep chomping the empty lines belong to the value
    assert text[keep.origin.start:keep.origin.end] == '|+\n  x\n'


def test_flow():
    text = "a: {x: 1, y: [1, 2]}\n"
    tree = read.parse(text)
    a = tree.get('a')
    assert a.flow
    assert text[a.origin.start:a.origin.end] == '{x: 1, y: [1, 2]}'
    y = tree.get('a', 'y')
    assert y.flow
    assert text[y.origin.start:y.origin.end] == '[1, 2]'


def test_anchors():
    tree = read.parse("base: &b\n  x: 1\nother: *b\nlost: *missing\n")
    base = tree.get('base')
    assert base.anchor == 'b'
    assert tree.anchors.resolve('b') is base
    other = tree.get('other')
    assert other.is_alias()
    assert not other.dangling
    assert tree.resolve(other) is base
    lost = tree.get('lost')
    assert lost.dangling
    assert tree.anchors.dangling() == [lost]
    assert tree.resolve(lost) is None
    assert tree.data() == {'base': {'x': 1}, 'other': {'x': 1}, 'lost': element.Alias('missing')}


def test_comments():
    text = (
        "# about a\n"
        "a: 1  # one\n"
        "b:\n"
        "  - x\n"
        "  # below x\n"
        "\n"
        "# the end\n"
    )
    tree = read.parse(text)
    store = tree.comments
    a = tree.get('a')
    assert store.comments_for(a, comments.ABOVE)[0].text == 'about a'
    line = store.comments_for(a, comments.LINE)[0]
    assert line.text == 'one'
    assert text[line.span.start:line.span.end] == '# one'
    x = tree.get('b', 0)
    assert store.comments_for(x, comments.BELOW)[0].text == 'below x'
    end = store.end_of_block(tree.root)
    assert store.comments_for(end)[0] == comments.Comment(
        comments.STANDALONE, 'the end', TextSpan(text.index('# the end'), len(text) - 1))


def test_empty():
    tree = read.parse("")
    assert tree.root.value == Null()
    tree = read.parse("# only a comment\n")
    assert tree.root.value == Null()
    assert tree.comments.comments_for(tree.root)[0].text == 'only a comment'


def test_bytes():
    tree = read.parse("a: é\n".encode('utf-8'))
    assert tree.get('a').value == String('é')
    with pytest.raises(ParseError):
        read.parse(b'a: \xff\n')


@pytest.mark.parametrize('text', [
    "a: [1, 2\n",
    "a: 1\na: 2\n",
    "a: 1\n---\nb: 2\n",
    "? [a]\n: 1\n",
    "a: &x 1\nb: &x 2\n",
    "&k a: 1\n",
    "a: !!int xyz\n",
    "a: b: c\n",
])
def test_errors(text):
    with pytest.raises(ParseError):
        read.parse(text)


def test_error_position():
    with pytest.raises(ParseError) as info:
        read.parse("a: 1\nb: [1, 2\nc: 3\n")
    assert info.value.line is not None
    assert info.value.line >= 2
    assert info.value.column >= 1
    assert "line" in str(info.value)


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
