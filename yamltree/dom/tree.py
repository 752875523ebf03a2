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
The Tree: a YAML document that can be edited and written back.

A Tree holds the root :class:`~.element.Node`, the
:class:`~.anchors.AnchorRegistry`, the :class:`~.comments.CommentStore` and
the source text the tree was read from. All changes should be made using the
mutation methods of the Tree, which keep the registry and the comments up to
date, and mark changed nodes so that only they are written anew.

Every mutation method first checks whether the change is allowed, and only
then changes the tree; a rejected change leaves the tree untouched.

Example::

    >>> import yamltree
    >>> tree = yamltree.load("name: old  # the name\\nitems: [1, 2]\\n")
    >>> tree.set_value(tree.get('name'), 'new')
    >>> tree.insert_child(tree.root, 'extra', {'a': True})
    <Node 'extra': Mapping (1 child)>
    >>> print(tree.serialize(), end='')
    name: new  # the name
    items: [1, 2]
    extra:
      a: true

"""

import logging

from ..datatypes import Formatting
from ..exceptions import AnchorIntegrityError, EditConstraintViolation
from .anchors import AnchorRegistry
from .comments import CommentStore, EndOfBlock
from . import element, write


logger = logging.getLogger(__name__)


class Tree:
    """A YAML document tree.

    Normally you get a Tree by calling :func:`yamltree.load` or
    :func:`.read.parse`. It can also be created from a Node, e.g. one made
    with :func:`.element.build`.

    """
    def __init__(self, root, source="", anchors=None, comments=None):
        self.root = root
        self.source = source
        if anchors is None:
            anchors = AnchorRegistry()
            anchors.rebuild(root)
        self.anchors = anchors
        self.comments = CommentStore() if comments is None else comments

    def __repr__(self):
        return '<{} {!r}>'.format(type(self).__name__, self.root)

    def __contains__(self, node):
        """Return True if the node is part of this tree."""
        return node is self.root or node.is_descendant_of(self.root)

    def get(self, *path):
        """Return the node at the path of keys and indices.

        Raises KeyError or IndexError if the path does not exist.

        """
        node = self.root
        for step in path:
            if node.is_mapping():
                child = node.child(step)
                if child is None:
                    raise KeyError(step)
                node = child
            elif node.value.container:
                node = node[step]
            else:
                raise KeyError(step)
        return node

    def path(self, node):
        """Return the path of keys and indices leading to the node."""
        self.check_member(node)
        path = []
        if node is not self.root:
            for parent, index in node.ancestors_with_index():
                path.append(parent[index].key if parent.is_mapping() else index)
                if parent is self.root:
                    break
        return path[::-1]

    def resolve(self, node):
        """Return the node an alias refers to, or the node itself.

        Returns None for a dangling alias.

        """
        seen = set()
        while node is not None and node.is_alias():
            if node in seen:
                return None
            seen.add(node)
            node = self.anchors.resolve(node.value.name)
        return node

    def data(self, node=None):
        """Return the Python data of the node (by default the root).

        Aliases are resolved; a dangling alias yields its :class:`~.element.Alias`
        value.

        """
        return self._data(self.root if node is None else node, ())

    def _data(self, node, active):
        if node.is_alias():
            target = self.anchors.resolve(node.value.name)
            if target is None or target in active:
                return node.value
            return self._data(target, active)
        active = active + (node,)
        if isinstance(node.value, element.Scalar):
            return node.value.data()
        elif node.is_mapping():
            return {n.key: self._data(n, active) for n in node}
        elif node.value.container:
            return [self._data(n, active) for n in node]
        raise TypeError("unknown value: {!r}".format(node.value))

    def check_member(self, node):
        """Raise EditConstraintViolation if the node is not in this tree."""
        if node not in self:
            raise EditConstraintViolation("node is not part of this tree")

    def _mark_dirty(self, node):
        """Mark all ancestors of the node dirty."""
        for n in node.ancestors():
            n.dirty = True

    def _check_new(self, new):
        """Check whether the new (detached) nodes can be added to the tree."""
        names = set()
        for n in new.subtree():
            if isinstance(n.value, element.MultiDoc):
                raise EditConstraintViolation("a MultiDoc can only be the root of a tree")
            if n.anchor:
                if n.anchor in names or n.anchor in self.anchors:
                    raise AnchorIntegrityError("duplicate anchor: &{}".format(n.anchor))
                names.add(n.anchor)

    def _check_recursion(self, new, parent):
        """Raise EditConstraintViolation if an alias in the new nodes would
        refer to the parent or one of its ancestors."""
        for n in new.subtree():
            if n.is_alias():
                target = self.anchors.resolve(n.value.name)
                if target is not None and (target is parent or parent.is_descendant_of(target)):
                    raise EditConstraintViolation("alias *{} would contain itself".format(n.value.name))

    def _check_external_refs(self, nodes):
        """Raise AnchorIntegrityError if any of the nodes (with their
        descendants) defines an anchor that is used outside them."""
        inside = set()
        for node in nodes:
            inside.update(node.subtree())
        for n in inside:
            if n.anchor and self.anchors.resolve(n.anchor) is n:
                for alias in self.anchors.aliases_of(n.anchor):
                    if alias not in inside:
                        raise AnchorIntegrityError(
                            "anchor &{} is still referred to by an alias".format(n.anchor))

    def set_value(self, node, value):
        """Set the value of the node.

        The value can be a :class:`~.element.Value`, or Python data that is
        converted using :func:`~.element.build`. A ``str`` given for a node
        holding a :class:`~.element.String` keeps that string's style, so a
        literal string stays literal. Setting a container value replaces all
        children of the node.

        The node keeps its key, anchor and tag. Raises
        :class:`~yamltree.exceptions.EditConstraintViolation` if the node is
        an alias or the value a MultiDoc, and
        :class:`~yamltree.exceptions.AnchorIntegrityError` if an anchor in
        the replaced children is still in use.

        """
        self.check_member(node)
        if node.is_alias():
            raise EditConstraintViolation("the value of an alias can't be changed")
        if isinstance(node.value, element.MultiDoc):
            raise EditConstraintViolation("the value of a MultiDoc root can't be changed")
        if isinstance(value, str) and isinstance(node.value, element.String):
            value = node.value.restyled(value)
        new = element.build(value)
        if new.is_alias():
            if node.anchor:
                raise EditConstraintViolation("an anchored node can't become an alias")
        if new.anchor and node.anchor:
            raise EditConstraintViolation("the node already has an anchor")
        self._check_new(new)
        self._check_recursion(new, node)
        self._check_external_refs(list(node))

        for child in node:
            self.anchors.unregister_subtree(child)
            self.comments.forget(child)
        node.take()
        if not new.value.container and node.value.container:
            self.comments.detach(self.comments.end_of_block(node))
        node.value = new.value
        node.extend(new.take())
        if new.anchor:
            node.anchor = new.anchor
        if new.tag and not node.tag:
            node.tag = new.tag
        node.modified = True
        node.dirty = False
        self.anchors.register_subtree(node)
        self._mark_dirty(node)
        logger.debug("set value of %r", node)

    def insert_child(self, parent, index_or_key, value, key=None):
        """Insert a new child in the parent container and return it.

        For a sequence, ``index_or_key`` is the index to insert at. For a
        mapping, it is either the new key, in which case the child is
        appended, or an index, and then ``key`` must be given.

        The value can be a :class:`~.element.Value`, a detached Node, or
        Python data. A detached Node that was read from text is inserted as
        a copy, see :func:`~.element.build`. Raises
        :class:`~yamltree.exceptions.EditConstraintViolation` for scalar and
        alias parents, duplicate keys and invalid indices.

        """
        self.check_member(parent)
        if not parent.value.container:
            raise EditConstraintViolation("can't insert a child in {!r}".format(parent))
        if isinstance(parent.value, element.MultiDoc):
            raise EditConstraintViolation("use the multi-document tree to insert documents")
        if parent.is_mapping():
            if isinstance(index_or_key, str):
                index, key = len(parent), index_or_key
            elif isinstance(index_or_key, int) and not isinstance(index_or_key, bool):
                index = index_or_key
                if not isinstance(key, str):
                    raise EditConstraintViolation("a key is needed to insert in a mapping")
            else:
                raise EditConstraintViolation("invalid key: {!r}".format(index_or_key))
            if parent.child(key) is not None:
                raise EditConstraintViolation("duplicate key: {!r}".format(key))
        else:
            if not isinstance(index_or_key, int) or isinstance(index_or_key, bool):
                raise EditConstraintViolation("a sequence needs an index, not {!r}".format(index_or_key))
            index = index_or_key
            key = None
        if not -len(parent) <= index <= len(parent):
            raise EditConstraintViolation("index out of range: {}".format(index))
        if index < 0:
            index += len(parent)
        new = element.build(value)
        self._check_new(new)
        self._check_recursion(new, parent)
        new.key = key
        new.modified = True
        parent.insert(index, new)
        self.anchors.register_subtree(new)
        self._mark_dirty(new)
        logger.debug("inserted %r", new)
        return new

    def delete(self, node):
        """Remove the node from the tree.

        Raises :class:`~yamltree.exceptions.EditConstraintViolation` for the
        root node, and :class:`~yamltree.exceptions.AnchorIntegrityError`
        if the node defines an anchor that is used elsewhere.

        """
        self.check_member(node)
        if node is self.root:
            raise EditConstraintViolation("the root node can't be deleted")
        if not self.anchors.can_delete(node):
            raise AnchorIntegrityError("{!r} defines an anchor that is still referred to".format(node))
        parent = node.parent
        self._mark_dirty(node)
        parent.remove(node)
        self.anchors.unregister_subtree(node)
        self.comments.forget(node)
        logger.debug("deleted %r", node)

    def rename_key(self, parent, old_key, new_key):
        """Rename a key in a mapping.

        Raises :class:`~yamltree.exceptions.EditConstraintViolation` if the
        old key does not exist or the new key already does.

        """
        self.check_member(parent)
        if not parent.is_mapping():
            raise EditConstraintViolation("{!r} is not a mapping".format(parent))
        if not isinstance(new_key, str):
            raise EditConstraintViolation("mapping keys must be strings, not {!r}".format(new_key))
        node = parent.child(old_key)
        if node is None:
            raise EditConstraintViolation("unknown key: {!r}".format(old_key))
        if new_key == old_key:
            return
        if parent.child(new_key) is not None:
            raise EditConstraintViolation("duplicate key: {!r}".format(new_key))
        node.key = new_key
        self._mark_dirty(node)
        logger.debug("renamed %r to %r", old_key, new_key)

    def attach_comment(self, node, position, text):
        """Attach a comment to the node (or the EndOfBlock marker of a
        container) in this tree. Returns the new Comment."""
        self.check_member(node.container if isinstance(node, EndOfBlock) else node)
        return self.comments.attach(node, position, text)

    def detach_comment(self, node, position=None):
        """Remove comments from the node (or EndOfBlock marker); returns the
        list of removed comments."""
        self.check_member(node.container if isinstance(node, EndOfBlock) else node)
        return self.comments.detach(node, position)

    def end_of_block(self, node):
        """Return the EndOfBlock marker of a container node in this tree."""
        self.check_member(node)
        return self.comments.end_of_block(node)

    def plan(self, formatting=None):
        """Return the :class:`~.write.Plan` the serializer would follow."""
        return write.plan(self, formatting or Formatting())

    def serialize(self, formatting=None, validate=True):
        """Return the tree as YAML text. See :func:`.write.serialize`."""
        return write.serialize(self, formatting, validate)

    def save(self, formatting=None):
        """Serialize the tree, and then read the tree anew from the text.

        After saving, all nodes are unmodified again, and have their layout
        in the new text. Note that the nodes are new objects. Returns the
        text.

        """
        text = write.serialize(self, formatting, validate=False)
        self.rebase(write.reparse(text))
        return text

    def rebase(self, other):
        """Take over root, source, anchors and comments from the other Tree."""
        self.root = other.root
        self.source = other.source
        self.anchors.rebuild(self.root)
        self.comments.adopt(other.comments)
