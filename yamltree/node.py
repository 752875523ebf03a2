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
This module defines a :class:`Node` class, to build simple tree structures
based on Python lists.

The YAML document model in :mod:`yamltree.dom` builds upon it: every mapping,
sequence and scalar in a document is a Node, and the entries of a mapping or
sequence are its children.

"""

import itertools
import weakref


_NO_PARENT = lambda: None


class Node(list):
    """Node implements a simple tree type, based on Python :class:`list`.

    A node can have child nodes and a :attr:`parent`. The parent is referred to
    with a weak reference, so a node tree does not contain circular references.
    (Keep a reference to the root node of a tree, otherwise it is garbage
    collected.)

    Adding nodes with :meth:`append`, :meth:`extend` or :meth:`insert` sets
    their parent; removing them using :meth:`remove` or :meth:`take` unsets it.

    A node always evaluates to True, even if there are no children. Nodes
    compare by identity, so ``node in parent`` and ``parent.index(node)`` never
    confuse two nodes that look the same.

    """

    __slots__ = ('__weakref__', '_parent')

    def __init__(self, *children):
        self._parent = _NO_PARENT
        if children:
            self.extend(children)

    def __repr__(self):
        c = "child" if len(self) == 1 else "children"
        return '<{} ({} {})>'.format(type(self).__name__, len(self), c)

    def __bool__(self):
        return True

    __hash__ = object.__hash__

    def __eq__(self, other):
        return self is other

    def __ne__(self, other):
        return self is not other

    @property
    def parent(self):
        """The parent Node or None."""
        return self._parent()

    def append(self, node):
        """Append a child node."""
        node._parent = weakref.ref(self)
        list.append(self, node)

    def extend(self, nodes):
        """Append child nodes."""
        index = len(self)
        list.extend(self, nodes)
        for node in self[index:]:
            node._parent = weakref.ref(self)

    def insert(self, index, node):
        """Insert a child node at the index."""
        node._parent = weakref.ref(self)
        list.insert(self, index, node)

    def remove(self, node):
        """Remove the child node and unset its parent."""
        del self[self.index(node)]
        node._parent = _NO_PARENT

    def take(self, start=0, end=None):
        """Remove and return the list of children from start to end.

        The parent of the taken nodes is unset.

        """
        k = slice(start, end)
        nodes = self[k]
        del self[k]
        for node in nodes:
            node._parent = _NO_PARENT
        return nodes

    def is_descendant_of(self, node):
        """Return True if ``node`` is one of our ancestors."""
        return any(n is node for n in self.ancestors())

    def ancestors(self):
        """Yield the parent, then the parent's parent, etcetera."""
        n = self.parent
        while n is not None:
            yield n
            n = n.parent

    def ancestors_with_index(self):
        """Yield the ancestors and the index of the previous node in each."""
        n = self
        for p in self.ancestors():
            yield p, p.index(n)
            n = p

    def descendants(self):
        """Yield all descendants of this node, in document order."""
        stack = [iter(self)]
        while stack:
            for n in stack[-1]:
                yield n
                if len(n):
                    stack.append(iter(n))
                    break
            else:
                stack.pop()

    def subtree(self):
        """Yield this node and all its descendants, in document order."""
        return itertools.chain((self,), self.descendants())

    def dump(self, file=None, _prefix=''):
        """Print the node and its descendants as an indented tree."""
        print(repr(self), file=file)
        for n in self:
            last = n is self[-1]
            print(_prefix + (' ╰╴' if last else ' ├╴'), end='', file=file)
            n.dump(file, _prefix + ('   ' if last else ' │ '))
