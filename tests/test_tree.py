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
Test the mutation methods of the Tree.
"""

import pytest

### find yamltree
import sys
sys.path.insert(0, '.')

import yamltree
from yamltree.dom import comments, element
from yamltree.dom.element import Alias, Integer, String, build
from yamltree.dom.tree import Tree
from yamltree.exceptions import AnchorIntegrityError, EditConstraintViolation


def test_main():
    tree = yamltree.load("name: old\nitems: [1, 2]\n")
    name = tree.get('name')
    tree.set_value(name, 'new')
    assert name.value == String('new')
    assert name.modified
    assert name.span is None
    assert tree.root.dirty
    assert tree.get('items').span is not None

    new = tree.insert_child(tree.root, 'extra', {'a': True})
    assert new.key == 'extra'
    assert new.parent is tree.root
    assert tree.root.keys() == ['name', 'items', 'extra']
    tree.insert_child(tree.get('items'), 0, 0)
    assert tree.data() == {'name': 'new', 'items': [0, 1, 2], 'extra': {'a': True}}

    tree.delete(tree.get('items', 1))
    assert tree.data()['items'] == [0, 2]
    tree.rename_key(tree.root, 'extra', 'more')
    assert tree.root.keys() == ['name', 'items', 'more']
    assert tree.root.reshaped()


def test_set_value_keeps_style():
    tree = yamltree.load("desc: |\n  hi\n")
    desc = tree.get('desc')
    tree.set_value(desc, 'bye')
    assert desc.style == element.LITERAL
    assert desc.value.text == 'bye\n'
    tree.set_value(desc, String('plain'))
    assert desc.style == element.PLAIN


def test_set_value_container():
    tree = yamltree.load("a: [1, 2]\nb: 3\n")
    a = tree.get('a')
    tree.set_value(a, {'x': 1})
    assert a.is_mapping()
    assert a.key == 'a'
    assert tree.get('a', 'x').value == Integer(1)
    tree.set_value(a, 5)
    assert len(a) == 0
    assert tree.data() == {'a': 5, 'b': 3}


def test_alias_immutable():
    tree = yamltree.load("a: &x 1\nb: *x\n")
    with pytest.raises(EditConstraintViolation):
        tree.set_value(tree.get('b'), 2)
    assert tree.get('b').is_alias()
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.get('b'), 0, 1)
    # an anchored node can't become an alias
    with pytest.raises(EditConstraintViolation):
        tree.set_value(tree.get('a'), Alias('x'))


def test_anchor_delete_protection():
    tree = yamltree.load("a: &x 1\nb: *x\nc: 3\n")
    with pytest.raises(AnchorIntegrityError):
        tree.delete(tree.get('a'))
    assert tree.root.keys() == ['a', 'b', 'c']
    assert not tree.root.dirty
    # after removing the alias the anchor can go
    tree.delete(tree.get('b'))
    tree.delete(tree.get('a'))
    assert 'x' not in tree.anchors
    assert tree.data() == {'c': 3}


def test_anchor_protection_set_value():
    tree = yamltree.load("base:\n  inner: &i 1\nuse: *i\n")
    with pytest.raises(AnchorIntegrityError):
        tree.set_value(tree.get('base'), 2)
    assert tree.get('base', 'inner').value == Integer(1)


def test_duplicate_anchor():
    tree = yamltree.load("a: &x 1\n")
    node = build(2)
    node.anchor = 'x'
    with pytest.raises(AnchorIntegrityError):
        tree.insert_child(tree.root, 'b', node)
    assert tree.root.keys() == ['a']


def test_new_alias():
    tree = yamltree.load("a: &x 1\n")
    b = tree.insert_child(tree.root, 'b', Alias('x'))
    assert not b.dangling
    assert tree.data() == {'a': 1, 'b': 1}
    c = tree.insert_child(tree.root, 'c', Alias('nothing'))
    assert c.dangling


def test_recursive_alias():
    tree = yamltree.load("a: &x\n  b: 1\n")
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.get('a'), 'self', Alias('x'))


def test_insert_errors():
    tree = yamltree.load("a: 1\nl: [1]\n")
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.root, 'a', 2)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.get('a'), 0, 2)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.get('l'), 5, 2)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.get('l'), 'key', 2)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.root, 0, 2)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.root, 'm', element.MultiDoc())
    tree.insert_child(tree.root, 0, 2, key='first')
    assert tree.root.keys() == ['first', 'a', 'l']
    tree.insert_child(tree.get('l'), -1, 0)
    assert tree.data()['l'] == [0, 1]


def test_delete_errors():
    tree = yamltree.load("a: 1\n")
    with pytest.raises(EditConstraintViolation):
        tree.delete(tree.root)
    other = yamltree.load("a: 1\n")
    with pytest.raises(EditConstraintViolation):
        tree.delete(other.get('a'))


def test_rename_key():
    tree = yamltree.load("a: 1\nb: 2\n")
    with pytest.raises(EditConstraintViolation):
        tree.rename_key(tree.root, 'a', 'b')
    with pytest.raises(EditConstraintViolation):
        tree.rename_key(tree.root, 'z', 'y')
    with pytest.raises(EditConstraintViolation):
        tree.rename_key(tree.get('a'), 'a', 'y')
    tree.rename_key(tree.root, 'a', 'a')
    assert not tree.root.dirty
    tree.rename_key(tree.root, 'a', 'c')
    assert tree.get('c').value == Integer(1)
    assert tree.get('c').origin_key == 'a'


def test_comments():
    tree = yamltree.load("a: 1  # one\n")
    a = tree.get('a')
    c = tree.attach_comment(a, comments.ABOVE, 'above a')
    assert c.text == 'above a'
    assert tree.comments.comments_for(a, comments.ABOVE) == (c,)
    removed = tree.detach_comment(a, comments.LINE)
    assert [r.text for r in removed] == ['one']
    end = tree.end_of_block(tree.root)
    tree.attach_comment(end, comments.STANDALONE, 'end')
    with pytest.raises(EditConstraintViolation):
        tree.attach_comment(yamltree.load("b: 2\n").root, comments.ABOVE, 'x')


def test_deleted_comments():
    tree = yamltree.load("a: 1\n# about b\nb: 2  # two\n")
    b = tree.get('b')
    assert len(tree.comments.comments_for(b)) == 2
    tree.delete(b)
    assert tree.comments.comments_for(b) == ()


def test_built_tree():
    tree = Tree(build({'a': [1, 2]}))
    assert tree.source == ""
    assert tree.path(tree.get('a', 1)) == ['a', 1]
    tree.set_value(tree.get('a', 0), 'x')
    assert tree.data() == {'a': ['x', 2]}


def test_save():
    tree = yamltree.load("a: 1\n")
    tree.insert_child(tree.root, 'b', [1, 2])
    text = tree.save()
    assert text == "a: 1\nb:\n  - 1\n  - 2\n"
    assert tree.source == text
    assert not any(n.modified or n.dirty for n in tree.root.subtree())
    assert tree.get('b', 1).origin is not None
    assert tree.serialize() == text


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
