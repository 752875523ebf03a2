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
Text with more than one YAML document.

The text is split in pieces on the lines that start with a ``---`` document
marker; every piece is read as a separate :class:`~.tree.Tree`, with its own
anchors and comments. A :class:`MultiDocTree` combines the documents under a
root node with a :class:`~.element.MultiDoc` value.

When writing, every document keeps its own text, including its marker.
A new document, and a document without marker that is not the first one
anymore, get a ``---`` marker.

"""

import logging
import re

from ..datatypes import Formatting
from ..exceptions import EditConstraintViolation, ParseError, SerializeValidationError
from .comments import EndOfBlock
from . import element, read, tree, util


logger = logging.getLogger(__name__)


_MARKER_RE = re.compile(r'^---(?=[ \t\r\n]|$)', re.M)
_PREAMBLE_RE = re.compile(r'(?:[ \t]*(?:[#%].*)?(?:\r?\n|$))*\Z')


def split(text):
    """Split the text in pieces, one for every document.

    Every piece except the first starts with a document marker. Comment and
    directive lines before the first marker belong to the first document.

    """
    starts = [m.start() for m in _MARKER_RE.finditer(text)]
    if not starts:
        return [text]
    ends = starts[1:] + [len(text)]
    pieces = [text[start:end] for start, end in zip(starts, ends)]
    preamble = text[:starts[0]]
    if _PREAMBLE_RE.match(preamble):
        pieces[0] = preamble + pieces[0]
    else:
        pieces.insert(0, preamble)
    return pieces


def documents(text):
    """Return a list of Trees, one for every document in the text.

    A ParseError mentions the line number in the full text.

    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError("the text is not valid UTF-8: {}".format(e.reason)) from e
    result = []
    line = 0
    for piece in split(text):
        try:
            result.append(read.parse(piece))
        except ParseError as e:
            if e.line is None:
                raise
            raise ParseError(e.message, e.line + line, e.column) from e
        line += piece.count('\n')
    return result


def load(text):
    """Read the text and return a :class:`~.tree.Tree` if it contains at most
    one document, or a :class:`MultiDocTree` otherwise."""
    docs = documents(text)
    if len(docs) == 1:
        return docs[0]
    return MultiDocTree(docs)


class MultiDocTree:
    """A sequence of documents.

    The :attr:`root` is a node with a :class:`~.element.MultiDoc` value, whose
    children are the root nodes of the :attr:`documents`. The mutation methods
    are the same as those of :class:`~.tree.Tree`; they are delegated to the
    document a node belongs to. Inserting a child in the root node adds a
    document, and deleting a child of the root removes a document.

    """
    def __init__(self, documents):
        self._set(documents)

    def _set(self, documents):
        self.documents = list(documents)
        self.root = element.Node(element.MultiDoc(), *(d.root for d in self.documents))

    def __repr__(self):
        n = len(self.documents)
        return '<{} ({} document{})>'.format(type(self).__name__, n, '' if n == 1 else 's')

    def __contains__(self, node):
        """Return True if the node is part of this tree."""
        return node is self.root or node.is_descendant_of(self.root)

    def document_of(self, node):
        """Return the :class:`~.tree.Tree` the node belongs to.

        Raises :class:`~yamltree.exceptions.EditConstraintViolation` for the
        root node and for nodes that are not in this tree.

        """
        if isinstance(node, EndOfBlock):
            node = node.container
        for d in self.documents:
            if node in d:
                return d
        if node is self.root:
            raise EditConstraintViolation("the MultiDoc root belongs to no document")
        raise EditConstraintViolation("node is not part of this tree")

    def get(self, index, *path):
        """Return the node at the path in document ``index``."""
        return self.documents[index].get(*path)

    def data(self):
        """Return the list of the Python data of all documents."""
        return [d.data() for d in self.documents]

    def set_value(self, node, value):
        """Set the value of a node, see :meth:`.tree.Tree.set_value`."""
        if node is self.root:
            raise EditConstraintViolation("the value of a MultiDoc root can't be changed")
        self.document_of(node).set_value(node, value)

    def insert_child(self, parent, index_or_key, value, key=None):
        """Insert a child node, see :meth:`.tree.Tree.insert_child`.

        If the parent is the root, a new document is inserted at the index,
        and its root node returned.

        """
        if parent is not self.root:
            return self.document_of(parent).insert_child(parent, index_or_key, value, key)
        if not isinstance(index_or_key, int) or isinstance(index_or_key, bool):
            raise EditConstraintViolation("a document needs an index, not {!r}".format(index_or_key))
        index = index_or_key
        if not -len(self.documents) <= index <= len(self.documents):
            raise EditConstraintViolation("index out of range: {}".format(index))
        if index < 0:
            index += len(self.documents)
        node = element.build(value)
        if any(isinstance(n.value, element.MultiDoc) for n in node.subtree()):
            raise EditConstraintViolation("a MultiDoc can only be the root of a tree")
        d = tree.Tree(node)
        self.documents.insert(index, d)
        self.root.insert(index, node)
        self.root.dirty = True
        logger.debug("inserted document %d", index)
        return node

    def delete(self, node):
        """Delete a node, see :meth:`.tree.Tree.delete`.

        If the node is the root of a document, the document is removed.

        """
        if node is self.root:
            raise EditConstraintViolation("the root node can't be deleted")
        d = self.document_of(node)
        if node is not d.root:
            return d.delete(node)
        self.documents.remove(d)
        self.root.remove(node)
        self.root.dirty = True
        logger.debug("deleted a document")

    def rename_key(self, parent, old_key, new_key):
        """Rename a key, see :meth:`.tree.Tree.rename_key`."""
        self.document_of(parent).rename_key(parent, old_key, new_key)

    def attach_comment(self, node, position, text):
        """Attach a comment, see :meth:`.tree.Tree.attach_comment`."""
        return self.document_of(node).attach_comment(node, position, text)

    def detach_comment(self, node, position=None):
        """Detach comments, see :meth:`.tree.Tree.detach_comment`."""
        return self.document_of(node).detach_comment(node, position)

    def plan(self, formatting=None):
        """Return the list of :class:`~.write.Plan` tuples of all documents."""
        return [d.plan(formatting) for d in self.documents]

    def serialize(self, formatting=None, validate=True):
        """Return the text of all documents.

        If ``validate`` is True (the default), the text is read again and
        :class:`~yamltree.exceptions.SerializeValidationError` is raised if
        that fails.

        """
        formatting = formatting or Formatting()
        newline = util.newline(''.join(d.source for d in self.documents))
        pieces = []
        for i, d in enumerate(self.documents):
            text = d.serialize(formatting, validate=False)
            if not d.source:
                text = text.replace('\n', newline)
            if i and not _MARKER_RE.search(text) or not d.source:
                text = '---' + newline + text
            if pieces and not pieces[-1].endswith('\n'):
                pieces[-1] += newline
            pieces.append(text)
        text = ''.join(pieces)
        if validate:
            try:
                documents(text)
            except ParseError as e:
                raise SerializeValidationError("the written text is invalid: {}".format(e)) from e
        return text

    def save(self, formatting=None):
        """Serialize all documents and read them again; returns the text."""
        text = self.serialize(formatting, validate=False)
        try:
            docs = documents(text)
        except ParseError as e:
            raise SerializeValidationError("the written text is invalid: {}".format(e)) from e
        self._set(docs)
        return text
