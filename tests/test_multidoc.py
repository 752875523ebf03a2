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
Test text with multiple documents.
"""

import pytest

### find yamltree
import sys
sys.path.insert(0, '.')

import yamltree
from yamltree.dom import element, multidoc
from yamltree.dom.multidoc import MultiDocTree
from yamltree.dom.tree import Tree
from yamltree.exceptions import EditConstraintViolation, ParseError


def test_main():
    text = "---\na: 1\n---\nb: 2\n"
    tree = yamltree.load(text)
    assert isinstance(tree, MultiDocTree)
    assert len(tree.documents) == 2
    assert isinstance(tree.root.value, element.MultiDoc)
    assert tree.root[1] is tree.documents[1].root
    assert tree.data() == [{'a': 1}, {'b': 2}]
    assert tree.serialize() == text

    tree.set_value(tree.get(1, 'b'), 3)
    assert tree.serialize() == "---\na: 1\n---\nb: 3\n"


def test_split():
    assert multidoc.split("a: 1\n") == ["a: 1\n"]
    assert multidoc.split("# c\n%YAML 1.1\n---\na: 1\n") == ["# c\n%YAML 1.1\n---\na: 1\n"]
    assert multidoc.split("a: 1\n---\nb: 2\n") == ["a: 1\n", "---\nb: 2\n"]
    assert multidoc.split("a: ---\n--- x\n") == ["a: ---\n", "--- x\n"]


def test_single():
    tree = yamltree.load("---\na: 1\n")
    assert isinstance(tree, Tree)
    assert tree.serialize() == "---\na: 1\n"


def test_documents():
    tree = yamltree.load("a: 1\n---\nb: 2\n")
    doc = tree.insert_child(tree.root, 2, {'c': 3})
    assert tree.document_of(doc) is tree.documents[2]
    assert tree.serialize() == "a: 1\n---\nb: 2\n---\nc: 3\n"
    tree.delete(tree.root[0])
    assert tree.serialize() == "---\nb: 2\n---\nc: 3\n"
    assert len(tree.root) == 2


def test_marker_added():
    tree = yamltree.load("a: 1\n---\nb: 2\n")
    tree.insert_child(tree.root, 0, 'first')
    assert tree.serialize() == "---\nfirst\n---\na: 1\n---\nb: 2\n"


def test_delegation():
    tree = yamltree.load("a: 1\n---\nb: 2\n")
    b = tree.get(1, 'b')
    tree.insert_child(tree.get(1), 'c', 4)
    tree.rename_key(tree.get(0), 'a', 'x')
    tree.attach_comment(b, 'line', 'bee')
    assert tree.serialize() == "x: 1\n---\nb: 2  # bee\nc: 4\n"
    assert tree.detach_comment(b)[0].text == 'bee'
    assert len(tree.plan()) == 2
    assert tree.documents[1].path(b) == ['b']


def test_errors():
    tree = yamltree.load("a: 1\n---\nb: 2\n")
    with pytest.raises(EditConstraintViolation):
        tree.set_value(tree.root, 1)
    with pytest.raises(EditConstraintViolation):
        tree.delete(tree.root)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.root, 'key', 1)
    with pytest.raises(EditConstraintViolation):
        tree.insert_child(tree.root, 5, 1)
    with pytest.raises(EditConstraintViolation):
        tree.document_of(yamltree.load("c: 3\n").root)


def test_parse_error_line():
    with pytest.raises(ParseError) as info:
        yamltree.load("a: 1\n---\nb: 2\n---\nc: [1\n")
    assert info.value.line >= 5


def test_save():
    tree = yamltree.load("a: 1\n---\nb: 2\n")
    tree.set_value(tree.get(0, 'a'), 5)
    text = tree.save()
    assert text == "a: 5\n---\nb: 2\n"
    assert tree.documents[0].source == "a: 5\n"
    assert not tree.get(0, 'a').modified
    assert tree.serialize() == text


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
