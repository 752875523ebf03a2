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
Write nodes as new YAML text.

The :class:`Emitter` is used for everything that can't be copied from the
source text: new nodes, nodes whose value was set, and sections that need to
be written anew. Scalars that were not changed are copied from the source
text if they fit on one line.

All methods return text that starts at the current position on a line, and
where every following line is fully indented. The text never ends with a
newline.

"""

from ..exceptions import SerializeValidationError
from . import comments, element, util


class Emitter:
    """Writes nodes as YAML text.

    ``source`` is the text the nodes were read from, ``anchors`` and
    ``comments`` are the registry and store of the tree. Anchors whose name
    is in ``dissolved`` are not written, and aliases referring to them are
    replaced with a copy of the anchored value.

    If ``window`` is given (a TextSpan), comments read from the source are
    only written if they were inside the window, because all other comments
    are still present in the text around the written part.

    """
    def __init__(self, source, anchors, comments_, indent_width=2,
                 dissolved=frozenset(), window=None):
        self.source = source
        self.anchors = anchors
        self.comments = comments_
        self.indent_width = indent_width
        self.dissolved = dissolved
        self.window = window
        self._active = []

    def keep(self, comment):
        """Return True if the comment should be written."""
        span = comment.span
        return (span is None or self.window is None
                or self.window.start <= span.start < self.window.end)

    def comments_of(self, node, position, quiet=False):
        """Return the comments to write for the node at the position."""
        if quiet:
            return ()
        return tuple(c for c in self.comments.comments_for(node, position) if self.keep(c))

    def has_comments(self, node, quiet=False):
        """Return True if comments inside the container node need to be
        written."""
        if quiet:
            return False
        if any(map(self.keep, self.comments.comments_for(self.comments.end_of_block(node)))):
            return True
        for n in node.descendants():
            if any(map(self.keep, self.comments.comments_for(n))):
                return True
            if n.value.container and any(map(self.keep,
                    self.comments.comments_for(self.comments.end_of_block(n)))):
                return True
        return False

    def line_comment(self, node, quiet=False):
        """Return the text of the LINE comment(s) of the node, or ''."""
        found = self.comments_of(node, comments.LINE, quiet)
        if found:
            return '  ' + ' '.join(comment_text(c) for c in found)
        return ''

    def props(self, node, drop=False):
        """Return the anchor and tag of the node as text, or ''."""
        props = []
        if node.anchor and not drop and node.anchor not in self.dissolved:
            props.append('&' + node.anchor)
        if node.tag:
            props.append(util.tag_text(node.tag))
        return ' '.join(props)

    def document(self, root):
        """Return the text for a complete document."""
        text = ''.join(comment_text(c) + '\n' for c in self.comments_of(root, comments.ABOVE))
        text += self.value(root, 0, 'root')
        return text + self.after(root, 0)

    def value(self, node, column, context, drop=False, quiet=False, line=''):
        """Return the text for the value of the node.

        The ``column`` is the column of the entry the value belongs to, and
        ``context`` is 'map' or 'seq' for a value following a key or a
        sequence indicator, 'flow' inside a flow collection, and 'root'
        for the value of a whole document. For 'map' and 'seq' the text
        starts with a space or a newline.

        If ``drop`` is True, anchors are not written and aliases are
        replaced with the value they refer to. If ``quiet`` is True, no
        comments are written.

        """
        if context != 'flow':
            line = self.line_comment(node, quiet) or line
        else:
            line = ''
        v = node.value
        if isinstance(v, element.Alias):
            target = self.anchors.resolve(v.name)
            if target is not None and (drop or v.name in self.dissolved):
                if target in self._active:
                    raise SerializeValidationError("alias *{} contains itself".format(v.name))
                self._active.append(target)
                try:
                    return self.value(target, column, context, True, True, line)
                finally:
                    self._active.pop()
            return with_line_comment(self.inline('', '*' + v.name, context), line)
        props = self.props(node, drop)
        if isinstance(v, element.Container):
            if (context == 'flow' or not len(node)
                    or (node.flow and not self.has_comments(node, quiet))):
                return self.inline(props, self.flow(node, drop), context) + line
            return self.block(node, column, context, props, line, drop, quiet)
        elif isinstance(v, element.Scalar):
            text = self.reused(node, context == 'flow', drop)
            if text is None:
                text = self.inline(props, self.scalar(node, column, context == 'flow'), context)
            elif text and context in ('map', 'seq'):
                text = ' ' + text
            return with_line_comment(text, line)
        raise TypeError("unknown value: {!r}".format(v))

    def inline(self, props, text, context):
        """Return props and text joined, with a leading space in the 'map'
        and 'seq' contexts."""
        if props:
            text = props + ' ' + text if text else props
        if context in ('map', 'seq') and text:
            text = ' ' + text
        return text

    def block(self, node, column, context, props, line, drop, quiet):
        """Return the text for a block mapping or sequence."""
        if context == 'seq' and not props and not line:
            # compact notation: "- a: 1"
            return ' ' + self.entries(node, column + 2, drop, quiet)
        elif context == 'root':
            head = (props + line).strip()
            if not head and not column:
                return self.entries(node, 0, drop, quiet)
            return head + '\n' + self.entries(node, 0, drop, quiet)
        elif context == 'seq':
            inner = column + 2
        else:
            inner = column + self.indent_width
        head = ' ' + props if props else ''
        return head + line + '\n' + ' ' * inner + self.entries(node, inner, drop, quiet)

    def entries(self, node, column, drop=False, quiet=False):
        """Return the text for all entries of a block container, the first
        one starting at the current position."""
        mapping = node.is_mapping()
        pad = '\n' + ' ' * column
        text = pad.join(self.entry(child, column, mapping, drop, quiet) for child in node)
        if not quiet:
            text += self.after(self.comments.end_of_block(node), column)
        return text

    def entry(self, node, column, mapping, drop=False, quiet=False):
        """Return the text for one entry of a block container, including its
        comments."""
        pad = ' ' * column
        text = ''.join(comment_text(c) + '\n' + pad
                       for c in self.comments_of(node, comments.ABOVE, quiet))
        if mapping:
            text += self.key(node) + ':' + self.value(node, column, 'map', drop, quiet)
        else:
            text += '-' + self.value(node, column, 'seq', drop, quiet)
        if not quiet:
            text += self.after(node, column)
        return text

    def after(self, node, column):
        """Return the BELOW and STANDALONE comments of a node or EndOfBlock
        marker."""
        text = []
        pad = ' ' * column
        for c in self.comments.comments_for(node):
            if self.keep(c):
                if c.position == comments.BELOW:
                    text.append('\n' + pad + comment_text(c))
                elif c.position == comments.STANDALONE:
                    text.append('\n\n' + pad + comment_text(c))
        return ''.join(text)

    def key(self, node, flow=False):
        """Return the text for the key of the node."""
        if (not flow and node.key_span and node.key == node.origin_key
                and '\n' not in self.source[node.key_span.start:node.key_span.end]):
            return self.source[node.key_span.start:node.key_span.end]
        return util.key_text(node.key, flow)

    def flow(self, node, drop=False):
        """Return a mapping or sequence in flow style."""
        if node.is_mapping():
            items = (self.key(n, True) + ': ' + self.value(n, 0, 'flow', drop, True) for n in node)
            return '{' + ', '.join(items) + '}'
        items = (self.value(n, 0, 'flow', drop, True) for n in node)
        return '[' + ', '.join(items) + ']'

    def reused(self, node, flow=False, drop=False):
        """Return the source text of an unchanged single-line scalar, or None.

        The text includes anchor and tag. An empty null value yields ''.

        """
        if node.modified or node.origin is None or not self.source:
            return None
        if node.anchor and (drop or node.anchor in self.dissolved):
            return None
        text = self.source[node.origin.start:node.origin.end]
        if '\n' in text or '\r' in text:
            return None
        v = node.value
        if not text:
            return None if flow else ''
        if (flow and isinstance(v, element.String) and v.style == element.PLAIN
                and not v.quote and not util.plain_allowed(v.text, True)):
            return None
        return text

    def scalar(self, node, column, flow=False):
        """Return the text for a scalar value."""
        v = node.value
        if isinstance(v, element.String):
            return self.string(v, column, flow)
        return util.scalar_data_text(v.data())

    def string(self, s, column, flow=False):
        """Return the text for a String."""
        text = s.text
        if s.style != element.PLAIN and not flow:
            block = self.block_string(s, column)
            if block is not None:
                return block
        if s.quote == '"':
            return util.double_quoted(text)
        elif s.quote == "'":
            return util.quoted(text)
        elif util.plain_allowed(text, flow) and util.resolves_to_string(text):
            return text
        return util.quoted(text)

    def block_string(self, s, column):
        """Return the text for a literal or folded String, or None if the
        text can't be written that way."""
        text = s.text
        if (not util.analyze(text).allow_block or text[:1] in (' ', '\n')
                or any(c in util.SPECIAL_BREAKS for c in text)):
            return None
        body = text[:-1] if text.endswith('\n') else text
        lines = body.split('\n')
        style = s.style
        if style == element.FOLDED and any(l[:1] in (' ', '\t') for l in lines):
            style = element.LITERAL
        if text.endswith('\n\n') or (s.chomp == '+' and text.endswith('\n')):
            chomp = '+'
        elif text.endswith('\n'):
            chomp = ''
        else:
            chomp = '-'
        if style == element.FOLDED:
            # a single newline is written as an empty line
            last = max(i for i, l in enumerate(lines) if l)
            folded = []
            for i, l in enumerate(lines):
                folded.append(l)
                if l and i < last:
                    folded.append('')
            lines = folded
        pad = ' ' * (column + self.indent_width)
        indicator = ('|' if style == element.LITERAL else '>') + chomp
        return indicator + ''.join('\n' + pad + l if l else '\n' for l in lines)


def comment_text(comment):
    """Return the text of a comment as written: ``# text``."""
    return '# ' + comment.text if comment.text else '#'


def with_line_comment(text, line):
    """Return the text with the line comment appended to its first line."""
    if not line:
        return text
    i = text.find('\n')
    if i == -1:
        return text + line
    return text[:i] + line + text[i:]
