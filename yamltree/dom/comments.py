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
The comment store: comments associated with the nodes of a tree.

Every comment has a position relative to the node it belongs to:

* :data:`ABOVE`: on its own line, directly before the node,
* :data:`LINE`: after the node, on the same line,
* :data:`BELOW`: on its own line, directly after the node,
* :data:`STANDALONE`: separated from the node by a blank line.

ABOVE and LINE comments are exact, they always belong to a node. BELOW and
STANDALONE comments are best-effort associations with the nearest preceding
node. They can also be attached to the :class:`EndOfBlock` marker of a
container, which stands for the end of the container's contents.

Comment text is stored without the leading ``#`` and surrounding whitespace.

"""

import collections

from ..exceptions import EditConstraintViolation


ABOVE = "above"
LINE = "line"
BELOW = "below"
STANDALONE = "standalone"

POSITIONS = (ABOVE, LINE, BELOW, STANDALONE)


#: A Comment. The span is the TextSpan of the comment in the source text,
#: or None for comments that were attached later.
Comment = collections.namedtuple("Comment", "position text span", defaults=(None,))


class EndOfBlock:
    """Marks the end of the contents of a container node.

    Get the marker for a container using :meth:`CommentStore.end_of_block`.

    """
    __slots__ = ('container',)

    def __init__(self, container):
        self.container = container

    def __repr__(self):
        return '<EndOfBlock of {!r}>'.format(self.container)


class CommentStore:
    """Holds the comments of all nodes of a tree.

    The store remembers which comments a node had when the text was read, so
    that only changed comments need to be written back. The :attr:`changed`
    set contains the nodes (and EndOfBlock markers) whose comments differ from
    the comments they were read with.

    """
    def __init__(self):
        self._comments = {}
        self._original = {}
        self._ends = {}
        self.changed = set()

    def __len__(self):
        """Return the number of nodes (and markers) having comments."""
        return len(self._comments)

    def __iter__(self):
        """Iterate over the nodes (and markers) having comments."""
        return iter(self._comments)

    def end_of_block(self, container):
        """Return the :class:`EndOfBlock` marker for the container node."""
        if not container.value.container:
            raise EditConstraintViolation("only containers have an end of block")
        try:
            return self._ends[container]
        except KeyError:
            marker = self._ends[container] = EndOfBlock(container)
            return marker

    def record(self, node, comment):
        """Add a comment found while reading the text."""
        self._comments.setdefault(node, []).append(comment)
        self._original[node] = tuple(self._comments[node])

    def attach(self, node, position, text):
        """Attach a new comment to the node (or EndOfBlock marker).

        ABOVE and LINE comments can't be attached to an EndOfBlock marker.
        Returns the new :class:`Comment`.

        """
        if position not in POSITIONS:
            raise EditConstraintViolation("unknown comment position: {!r}".format(position))
        if isinstance(node, EndOfBlock) and position in (ABOVE, LINE):
            raise EditConstraintViolation("{} comments must be attached to a node".format(position))
        if '\n' in text or '\r' in text:
            raise EditConstraintViolation("comment text must fit on one line")
        text = text.strip()
        if text.startswith('#'):
            text = text[1:].lstrip()
        comment = Comment(position, text)
        self._comments.setdefault(node, []).append(comment)
        self._update(node)
        return comment

    def detach(self, node, position=None):
        """Remove the comments of the node (or EndOfBlock marker).

        If ``position`` is given, only comments at that position are removed.
        Returns the list of removed comments.

        """
        comments = self._comments.get(node, [])
        removed = [c for c in comments if position is None or c.position == position]
        kept = [c for c in comments if position is not None and c.position != position]
        if kept:
            self._comments[node] = kept
        else:
            self._comments.pop(node, None)
        if removed:
            self._update(node)
        return removed

    def comments_for(self, node, position=None):
        """Return the tuple of comments of the node (or EndOfBlock marker),
        optionally only those at ``position``."""
        comments = self._comments.get(node, ())
        return tuple(c for c in comments if position is None or c.position == position)

    def original(self, node):
        """Return the tuple of comments the node had when it was read."""
        return self._original.get(node, ())

    def forget(self, node):
        """Remove all comments of the node and its descendants, e.g. when
        the node is removed from the tree."""
        for n in node.subtree():
            for key in (n, self._ends.pop(n, None)):
                if key is not None:
                    self._comments.pop(key, None)
                    self._original.pop(key, None)
                    self.changed.discard(key)

    def adopt(self, other):
        """Take over the contents of the other store."""
        self._comments = other._comments
        self._original = other._original
        self._ends = other._ends
        self.changed = other.changed

    def _update(self, node):
        """Update the changed state of the node."""
        if tuple(self._comments.get(node, ())) != self._original.get(node, ()):
            self.changed.add(node)
        else:
            self.changed.discard(node)
