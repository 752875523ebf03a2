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
Write a tree back to YAML text, preserving the layout of everything that
was not changed.

Every node gets a tier, which determines how it is written:

:data:`VERBATIM`
    unchanged; the original text is kept.
:data:`PATCH`
    a descendant changed, but not the children; the children are handled
    one by one.
:data:`SPLICE`
    children were added, removed or renamed; those entries are inserted,
    removed or rewritten, all other text is kept.
:data:`REPLACE`
    the node's value was set (or it can't be spliced); the value is written
    anew in place of the original value.
:data:`INLINE`
    an alias whose anchor is dropped; it is replaced with a copy of the
    anchored value.
:data:`FALLBACK`
    the children changed in a section containing anchors or aliases; the
    section is written anew, with all aliases replaced with copies of their
    values and without anchors. Every other alias referring to a dropped
    anchor gets the INLINE tier.
:data:`FRESH`
    the node was not read from text, or layout is not preserved; the node
    is written anew.

The changes are computed as (pos, end, text) edits on the source text and
applied to a :class:`parce.document.Document`. Finally the text is read again
to be sure it is valid.

Example::

    >>> import yamltree
    >>> tree = yamltree.load("base: &b {x: 1}\\nchild: *b\\n")
    >>> tree.delete(tree.get('base', 'x'))
    >>> tree.plan().tiers[tree.get('base')]
    'fallback'
    >>> tree.serialize()
    'base: {}\\nchild: {}\\n'

"""

import collections
import logging

import parce.document

from ..datatypes import Formatting, TextSpan
from ..exceptions import ParseError, SerializeValidationError
from . import comments, element, emit, read, util


logger = logging.getLogger(__name__)


VERBATIM = "verbatim"
PATCH = "patch"
SPLICE = "splice"
REPLACE = "replace"
INLINE = "inline"
FALLBACK = "fallback"
FRESH = "fresh"

#: The tiers that write the node's value anew.
REGENERATED = (REPLACE, INLINE, FALLBACK)


class Plan(collections.namedtuple("Plan", "tiers sections dissolved")):
    """The way a tree will be written.

    ``tiers`` maps the visited nodes to their tier, ``sections`` is the list
    of nodes that get the FALLBACK tier, and ``dissolved`` the set of anchor
    names that are dropped.

    """
    __slots__ = ()

    @property
    def lossy(self):
        """True if anchors are dropped."""
        return bool(self.dissolved)


def tier(node, preserve=True, dissolved=frozenset()):
    """Return the tier for writing the node.

    This only looks at the node's state. ``dissolved`` is the set of anchor
    names that will be dropped.

    """
    if not preserve or node.origin is None:
        return FRESH
    elif node.modified:
        return REPLACE
    elif node.is_alias():
        return INLINE if node.value.name in dissolved else VERBATIM
    elif not node.dirty:
        if dissolved and any(n.is_alias() and n.value.name in dissolved
                             for n in node.descendants()):
            return PATCH
        return VERBATIM
    elif not node.reshaped():
        return PATCH
    elif any(n.anchor or n.is_alias() for n in node.subtree()):
        return FALLBACK
    elif node.flow or not in_order(node):
        return REPLACE
    return SPLICE


def in_order(node):
    """Return True if the children that were read are still there in their
    original order."""
    kept = [n for n in node if n in node.shape]
    return bool(kept) and kept == [n for n in node.shape if n in kept]


def plan(tree, formatting=None):
    """Return the :class:`Plan` for writing the tree."""
    formatting = formatting or Formatting()
    preserve = formatting.preserve
    doc = util.document(tree.source)

    # nodes with changed comments, and their ancestors
    changed, noted = set(), set()
    for n in tree.comments.changed:
        if isinstance(n, comments.EndOfBlock):
            n = n.container
        changed.add(n)
        noted.add(n)
        noted.update(n.ancestors())

    def visit(node, dissolved, tiers):
        t = tier(node, preserve, dissolved)
        if t == SPLICE and not splice_possible(doc, node):
            t = REPLACE
        elif (t in (VERBATIM, PATCH) and node.flow
              and any(n in changed for n in node.descendants())):
            # comments can't be added inside flow style
            t = REPLACE
        tiers[node] = t
        if t in (PATCH, SPLICE) or (t == VERBATIM and node in noted):
            for child in node:
                visit(child, dissolved, tiers)

    tiers = {}
    visit(tree.root, frozenset(), tiers)
    sections = [node for node, t in tiers.items() if t == FALLBACK]
    dissolved = frozenset(n.anchor for s in sections for n in s.subtree() if n.anchor)
    if dissolved:
        tiers = {}
        visit(tree.root, dissolved, tiers)
    return Plan(tiers, sections, dissolved)


def splice_possible(doc, node):
    """Return False if the first entry of the container, which was removed,
    started in the middle of a line, like the first key in ``- a: 1``."""
    first = node.shape[0]
    return any(n is first for n in node) or util.at_line_start(doc, first.entry)


def serialize(tree, formatting=None, validate=True):
    """Return the tree as YAML text.

    If ``validate`` is True (the default), the text is read again and
    :class:`~yamltree.exceptions.SerializeValidationError` is raised if
    that fails. The tree is not changed.

    """
    formatting = formatting or Formatting()
    p = plan(tree, formatting)
    if p.lossy:
        logger.warning("structural fallback drops anchors: %s", ", ".join(sorted(p.dissolved)))
    text = Writer(tree, formatting, p).text()
    if validate:
        reparse(text)
    return text


def reparse(text):
    """Read the text written by the serializer and return the Tree.

    Raises :class:`~yamltree.exceptions.SerializeValidationError` if the
    text can't be read.

    """
    try:
        return read.parse(text)
    except ParseError as e:
        raise SerializeValidationError("the written text is invalid: {}".format(e)) from e


class Writer:
    """Computes the edits to turn the source text into the text for the
    tree."""
    def __init__(self, tree, formatting, plan):
        self.tree = tree
        self.source = tree.source
        self.comments = tree.comments
        self.formatting = formatting
        self.plan = plan
        self.doc = util.document(self.source)
        self.newline = util.newline(self.source)
        self.markers = {}
        self.noted = set()
        for node in self.comments.changed:
            if isinstance(node, comments.EndOfBlock):
                self.markers[node.container] = node
                node = node.container
            self.noted.add(node)
            self.noted.update(node.ancestors())

    def emitter(self, window=None, dissolved=None):
        """Return an :class:`~.emit.Emitter`."""
        if dissolved is None:
            dissolved = self.plan.dissolved
        return emit.Emitter(self.source, self.tree.anchors, self.comments,
            self.formatting.indent_width, dissolved, window)

    def text(self):
        """Return the new text."""
        root = self.tree.root
        if self.plan.tiers.get(root) == FRESH:
            text = self.emitter().document(root)
            return text + '\n' if text else text
        doc = parce.document.Document(self.source)
        n = 0
        try:
            with doc:
                for pos, end, text in self.edits(root):
                    if self.newline != '\n':
                        # written text only contains LF line breaks
                        text = text.replace('\n', self.newline)
                    doc[pos:end] = text
                    n += 1
        except RuntimeError as e:
            raise SerializeValidationError("conflicting changes: {}".format(e)) from e
        logger.debug("applied %d edits", n)
        text = doc.text()
        if not self.source and text and not text.endswith('\n'):
            text += '\n'
        return text

    def column(self, pos):
        return util.column(self.doc, pos)

    def context(self, node):
        """Return the context name for emitting the value of the node."""
        if node is self.tree.root:
            return 'root'
        parent = node.parent
        if parent is None:
            return 'root'
        elif parent.flow:
            return 'flow'
        return 'map' if parent.is_mapping() else 'seq'

    def value_range(self, node):
        """Return the TextSpan of the original text the value of a
        regenerated node replaces."""
        start = node.origin.start
        if node.slot is not None and self.context(node) != 'flow':
            start = node.slot
        end = node.origin.end
        # the comments of the original children are written anew
        for child in node.shape:
            end = max(end, child.extent)
        return TextSpan(start, end)

    def edits(self, node):
        """Yield the (pos, end, text) edits for the node and its descendants."""
        t = self.plan.tiers.get(node, VERBATIM)
        window = self.value_range(node) if t in REGENERATED else None
        yield from self.comment_edits(node, window, True)

        # renamed key
        if node.key_span and node.key != node.origin_key:
            yield node.key_span.start, node.key_span.end, util.key_text(node.key)

        if t in REGENERATED:
            yield from self.replace(node, t, window)
        elif t == SPLICE:
            yield from self.splice(node)
        elif t == PATCH or node in self.noted:
            for child in node:
                yield from self.edits(child)

        marker = self.markers.get(node)
        if marker is not None:
            yield from self.marker_edits(node, marker, window)
        yield from self.comment_edits(node, window, False)

    def replace(self, node, t, window):
        """Yield the edit writing the value of the node anew."""
        context = self.context(node)
        if context == 'root':
            column = self.column(node.origin.start)
        else:
            column = self.column(node.entry)
        drop = t == FALLBACK
        text = self.emitter(window).value(node, column, context, drop)
        if context == 'root' and window.start == window.end:
            # an empty document
            if not util.at_line_start(self.doc, window.start):
                text = '\n' + text
            if window.end == len(self.source):
                text += '\n'
        logger.debug("%s %r", t, node)
        yield window.start, window.end, text

    def splice(self, node):
        """Yield the edits inserting and removing entries of a container."""
        original = node.shape
        kept = [n for n in node if any(n is o for o in original)]
        column = self.column(original[0].entry)
        pad = ' ' * column
        emitter = self.emitter(TextSpan(0, 0))
        mapping = node.is_mapping()

        def entry(n):
            return emitter.entry(n, column, mapping)

        # new entries before the first kept entry
        first = kept[0]
        index = node.index(first)
        removed = original[:[i for i, o in enumerate(original) if o is first][0]]
        anchor = removed[0].lead if removed else first.lead
        new = node[:index]
        if new:
            if util.at_line_start(self.doc, anchor):
                text = ''.join(pad + entry(n) + '\n' for n in new)
            else:
                text = ''.join(entry(n) + '\n' + pad for n in new)
            yield anchor, anchor, text
        if removed:
            yield removed[0].lead, first.lead, ''

        positions = [i for i, o in enumerate(original) if any(o is k for k in kept)]
        for i, child in enumerate(kept):
            yield from self.edits(child)
            following = kept[i+1] if i + 1 < len(kept) else None
            end = node.index(following) if following else len(node)
            new = node[node.index(child)+1:end]
            if new:
                yield child.extent, child.extent, ''.join('\n' + pad + entry(n) for n in new)
            removed = original[positions[i]+1:positions[i+1] if following else None]
            if removed:
                if following:
                    yield removed[0].lead, following.lead, ''
                else:
                    yield child.extent, removed[-1].extent, ''
        logger.debug("spliced %r", node)

    def comment_edits(self, node, window, before):
        """Yield the edits for comments that were added to or removed from the
        node.

        If ``before`` is True, yields the removals and the ABOVE and LINE
        additions, otherwise the BELOW and STANDALONE additions.

        """
        if node not in self.comments.changed:
            return
        current = self.comments.comments_for(node)
        if before:
            for c in self.comments.original(node):
                if c not in current and not (window and window.start <= c.span.start < window.end):
                    yield self.removal(c)
            for c in current:
                if c.span is None:
                    if c.position == comments.ABOVE:
                        pos = node.entry
                        start = util.line_start(self.doc, pos)
                        yield start, start, ' ' * self.column(pos) + emit.comment_text(c) + '\n'
                    elif c.position == comments.LINE and window is None:
                        pos = self.line_comment_position(node)
                        if pos is None:
                            start = util.line_start(self.doc, node.entry)
                            yield start, start, emit.comment_text(c) + '\n'
                        else:
                            yield pos, pos, '  ' + emit.comment_text(c)
        else:
            yield from self.additions(node.extent, current, self.column(node.entry))

    def additions(self, pos, current, column):
        """Yield the insertions at pos of new BELOW and STANDALONE comments."""
        pad = ' ' * column
        for c in current:
            if c.span is None:
                if c.position == comments.BELOW:
                    yield pos, pos, '\n' + pad + emit.comment_text(c)
                elif c.position == comments.STANDALONE:
                    yield pos, pos, '\n\n' + pad + emit.comment_text(c)

    def marker_edits(self, node, marker, window):
        """Yield the edits for the comments at the end of a container."""
        current = self.comments.comments_for(marker)
        for c in self.comments.original(marker):
            if c not in current and not (window and window.start <= c.span.start < window.end):
                yield self.removal(c)
        if window is None:
            if node.shape:
                column = self.column(node.shape[0].entry)
            else:
                column = self.column(node.entry) + self.formatting.indent_width
            yield from self.additions(node.extent, current, column)

    def line_comment_position(self, node):
        """Return the position to add a LINE comment, or None if it should
        be put on a line of its own."""
        v = node.value
        if v.container and not node.flow and len(node.shape):
            if node.slot is None:
                return None
            pos = util.line_end(self.doc, node.slot)
            for c in self.comments.original(node):
                if c.position == comments.LINE and c.span.start < pos:
                    pos = max(pos, c.span.end)
            return pos
        elif getattr(v, 'style', element.PLAIN) != element.PLAIN:
            return util.line_end(self.doc, node.origin.start)
        return node.origin.end

    def removal(self, comment):
        """Return the edit removing a comment from the source text."""
        doc, span = self.doc, comment.span
        if comment.position == comments.LINE:
            return util.content_end(doc, span.start), span.end, ''
        start = util.line_start(doc, span.start)
        if comment.position == comments.ABOVE or start == 0:
            return start, min(doc.find_end_of_block(span.start) + 1, len(self.source)), ''
        # remove the line break before the comment
        start -= 1
        if start and self.source[start-1] == '\r':
            start -= 1
        return start, span.end, ''
