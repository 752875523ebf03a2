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
Test the anchor registry.
"""

import pytest

### find yamltree
import sys
sys.path.insert(0, '.')

from yamltree.dom import element
from yamltree.dom.anchors import AnchorRegistry
from yamltree.dom.element import Alias, Node, build
from yamltree.exceptions import AnchorIntegrityError


def test_main():
    reg = AnchorRegistry()
    target = build({'x': 1})
    alias = Node(Alias('a'))
    reg.register_alias('a', alias)
    assert alias.dangling
    assert reg.dangling() == [alias]
    reg.register_anchor('a', target)
    assert not alias.dangling
    assert 'a' in reg
    assert reg.resolve('a') is target
    assert reg.references('a') == 1
    assert reg.aliases_of('a') == [alias]
    assert reg.anchor_names() == ['a']
    with pytest.raises(AnchorIntegrityError):
        reg.register_anchor('a', build(1))
    # registering the same node again is harmless
    reg.register_anchor('a', target)


def test_subtree():
    root = build({'base': {'x': 1}, 'use': Alias('b'), 'more': [Alias('b')]})
    root.child('base').anchor = 'b'
    reg = AnchorRegistry()
    reg.rebuild(root)
    assert reg.references('b') == 2
    assert not reg.can_delete(root.child('base'))
    assert reg.can_delete(root.child('use'))
    # an anchor used only inside the node itself
    assert reg.can_delete(root)
    reg.unregister_subtree(root.child('base'))
    assert 'b' not in reg
    assert all(n.dangling for n in reg.aliases_of('b'))
    assert len(reg.dangling()) == 2
    reg.register_subtree(root.child('base'))
    assert not reg.dangling()


def test_reconcile():
    # a stale dangling flag is corrected
    reg = AnchorRegistry()
    alias = Node(Alias('later'))
    reg.register_alias('later', alias)
    reg.register_anchor('later', build(1))
    alias.dangling = True
    reg.reconcile()
    assert not alias.dangling
    assert isinstance(alias.value, element.Alias)


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
