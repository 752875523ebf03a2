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
Read YAML text into a :class:`~.tree.Tree`.

The text is decoded by PyYAML's scanner and parser. All tokens the parser
consumes are recorded, so that for every node the exact position in the text
is known: the node's :attr:`~.element.Node.origin` (including anchor and tag,
and the indicator and body of a literal or folded string), the position of
its key, and the position of the ``:`` or ``-`` indicator that owns it.

Comments are not reported by PyYAML; they are found in the text between the
recorded tokens, and attributed to the nodes, see :mod:`.comments`.

Example::

    >>> from yamltree.dom import read
    >>> tree = read.parse("a: 1  # one\\nb: [x, y]\\n")
    >>> tree.root.dump()
    <Node Mapping (2 children)>
     ├╴<Node 'a': Integer(1)>
     ╰╴<Node 'b': Sequence (2 children)>
        ├╴<Node String('x')>
        ╰╴<Node String('y')>
    >>> tree.comments.comments_for(tree.root[0])
    (Comment(position='line', text='one', span=TextSpan(start=6, end=11)),)

"""

import collections
import logging

import yaml
import yaml.nodes
import yaml.reader
import yaml.scanner
import yaml.parser
import yaml.constructor
import yaml.resolver
import yaml.tokens

from ..datatypes import TextSpan
from ..exceptions import ParseError
from . import anchors, comments, element, tree, util


logger = logging.getLogger(__name__)


STR_TAG = 'tag:yaml.org,2002:str'


class _EventReader(
        yaml.reader.Reader,
        yaml.scanner.Scanner,
        yaml.parser.Parser,
        yaml.constructor.SafeConstructor,
        yaml.resolver.Resolver):
    """Yields parser events and records every token the parser consumes."""
    def __init__(self, text):
        yaml.reader.Reader.__init__(self, text)
        yaml.scanner.Scanner.__init__(self)
        yaml.parser.Parser.__init__(self)
        yaml.constructor.SafeConstructor.__init__(self)
        yaml.resolver.Resolver.__init__(self)
        self.recorded = []

    def get_token(self):
        token = super().get_token()
        self.recorded.append(token)
        return token


class _Frame:
    """An open mapping or sequence while building the tree."""
    __slots__ = ('node', 'key', 'key_span', 'key_entry', 'key_mark', 'keys')

    def __init__(self, node):
        self.node = node
        self.key = None
        self.key_span = None
        self.key_entry = None
        self.key_mark = 0
        self.keys = set()


def _position(mark):
    """Return the (line, column) tuple for a PyYAML mark, starting with 1."""
    if mark is None:
        return None, None
    return mark.line + 1, mark.column + 1


def parse(text):
    """Read the text, which should contain at most one YAML document, and
    return a :class:`~.tree.Tree`.

    The text may also be a bytes object, which must be UTF-8 encoded. Raises
    :class:`~yamltree.exceptions.ParseError` if the text can't be read. Use
    :func:`yamltree.load` for text that may contain multiple documents.

    """
    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError("the text is not valid UTF-8: {}".format(e.reason)) from e
    try:
        return Builder(text).build()
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        message = e.problem or e.context or "invalid YAML"
        if e.context and e.problem:
            message = "{} {}".format(e.context, e.problem)
        raise ParseError(message, *_position(mark)) from e
    except yaml.YAMLError as e:
        raise ParseError(str(e)) from e


class Builder:
    """Builds the tree, the anchor registry and the comment store from the
    events and the recorded tokens of the reader."""
    def __init__(self, text):
        self.text = text
        self.reader = _EventReader(text)
        self.anchors = anchors.AnchorRegistry()
        self.comments = comments.CommentStore()
        self.root = None
        self.stack = []
        self.header_comments = []

    def build(self):
        """Read all events and return the Tree."""
        reader = self.reader
        documents = 0
        while True:
            mark = len(reader.recorded)
            event = reader.get_event()
            if isinstance(event, yaml.StreamEndEvent):
                break
            elif isinstance(event, yaml.DocumentStartEvent):
                documents += 1
                if documents > 1:
                    raise ParseError("the text contains more than one document",
                                     *_position(event.start_mark))
            elif isinstance(event, (yaml.SequenceEndEvent, yaml.MappingEndEvent)):
                self.close(event)
            elif self.expects_key():
                if not isinstance(event, yaml.ScalarEvent):
                    raise ParseError("only plain or quoted scalars can be used as mapping key",
                                     *_position(event.start_mark))
                self.key(event, mark)
            elif isinstance(event, yaml.AliasEvent):
                node = element.Node(element.Alias(event.anchor))
                self.add(node, event, mark)
                self.anchors.register_alias(event.anchor, node)
            elif isinstance(event, yaml.ScalarEvent):
                self.add(self.scalar(event, mark), event, mark)
            elif isinstance(event, (yaml.SequenceStartEvent, yaml.MappingStartEvent)):
                value = element.Sequence() if isinstance(event, yaml.SequenceStartEvent) else element.Mapping()
                node = element.Node(value)
                node.flow = bool(event.flow_style)
                self.add(node, event, mark)
                self.stack.append(_Frame(node))

        root = self.root
        if root is None:
            root = self.root = element.Node(element.Null())
            root.origin = TextSpan(len(self.text), len(self.text))
            root.entry = len(self.text)
        self.anchors.reconcile()
        doc = util.document(self.text)
        self.attribute_comments(doc)
        self.layout(doc, root)
        logger.debug("parsed %d nodes, %d anchors, %d aliases (%d dangling), %d comments",
            sum(1 for n in root.subtree()), len(self.anchors.anchor_names()),
            sum(1 for n in root.subtree() if n.is_alias()), len(self.anchors.dangling()),
            sum(len(self.comments.comments_for(n)) for n in self.comments))
        return tree.Tree(root, self.text, self.anchors, self.comments)

    def expects_key(self):
        """Return True if the next scalar is a mapping key."""
        return bool(self.stack) and self.stack[-1].node.is_mapping() and self.stack[-1].key is None

    def key(self, event, mark):
        """Handle a mapping key."""
        frame = self.stack[-1]
        if event.anchor:
            raise ParseError("anchors on mapping keys are not supported",
                             *_position(event.start_mark))
        if event.value in frame.keys:
            raise ParseError("duplicate key: {!r}".format(event.value),
                             *_position(event.start_mark))
        frame.keys.add(event.value)
        frame.key = event.value
        frame.key_span = TextSpan(event.start_mark.index, event.end_mark.index)
        frame.key_entry = event.start_mark.index
        for token in self.reader.recorded[mark:]:
            # explicit key ("? key")
            if isinstance(token, yaml.tokens.KeyToken) and token.start_mark.index < token.end_mark.index:
                frame.key_entry = token.start_mark.index
                break
        frame.key_mark = len(self.reader.recorded)

    def add(self, node, event, mark):
        """Add the node to the current container (or make it the root)."""
        if getattr(event, 'anchor', None) and not isinstance(event, yaml.AliasEvent):
            if event.anchor in self.anchors:
                raise ParseError("duplicate anchor: &{}".format(event.anchor),
                                 *_position(event.start_mark))
            node.anchor = event.anchor
            self.anchors.register_anchor(event.anchor, node)
        start = event.start_mark.index
        if isinstance(event, yaml.CollectionStartEvent):
            end = start
        elif isinstance(event, yaml.ScalarEvent) and event.style in ('|', '>'):
            keep = getattr(node.value, 'chomp', None) == '+'
            end = self.block_scalar_end(start, event.end_mark.index, keep)
        else:
            end = event.end_mark.index
        node.origin = TextSpan(start, end)
        if not self.stack:
            node.entry = start
            self.root = node
            return
        frame = self.stack[-1]
        parent = frame.node
        recorded = self.reader.recorded
        if parent.is_mapping():
            node.key = node.origin_key = frame.key
            node.key_span = frame.key_span
            node.entry = frame.key_entry
            for token in recorded[frame.key_mark:]:
                if isinstance(token, yaml.tokens.ValueToken):
                    node.slot = token.end_mark.index
                    break
            else:
                node.slot = frame.key_span.end
                if start == end:
                    node.origin = TextSpan(node.slot, node.slot)
            frame.key = None
        elif parent.flow:
            node.entry = start
        else:
            for token in reversed(recorded):
                if isinstance(token, yaml.tokens.BlockEntryToken):
                    node.entry = token.start_mark.index
                    node.slot = token.end_mark.index
                    break
        parent.append(node)

    def close(self, event):
        """Handle the end of a sequence or mapping."""
        node = self.stack.pop().node
        if node.flow:
            end = event.end_mark.index
            if self.text[end-1:end] not in ('}', ']'):
                end = node[-1].origin.end if len(node) else node.origin.start
        else:
            end = node[-1].origin.end if len(node) else node.origin.start
        node.origin = TextSpan(node.origin.start, end)
        node.shape = tuple(node)

    def scalar(self, event, mark):
        """Return a new Node for the scalar event."""
        explicit = event.tag not in (None, '!')
        if explicit:
            resolved = event.tag
        elif event.tag == '!':
            resolved = STR_TAG
        else:
            resolved = self.reader.resolve(yaml.nodes.ScalarNode, event.value, event.implicit)
        if resolved in util.NON_STRING_TAGS:
            try:
                data = self.reader.yaml_constructors[resolved](
                    self.reader, yaml.nodes.ScalarNode(resolved, event.value))
            except (ValueError, KeyError, TypeError) as e:
                raise ParseError("invalid value for {}: {!r}".format(
                    util.tag_text(resolved), event.value), *_position(event.start_mark)) from e
            if data is None:
                value = element.Null()
            elif isinstance(data, bool):
                value = element.Bool(data)
            elif isinstance(data, int):
                value = element.Integer(data)
            else:
                value = element.Float(data)
        elif event.style in ('|', '>'):
            token = self.scalar_token(mark)
            start = token.start_mark.index
            header_end = util.line_end_of(self.text, start)
            indicators = self.text[start+1:header_end].split('#')[0]
            chomp = '+' if '+' in indicators else '-' if '-' in indicators else ''
            comment = self.text.find('#', start, header_end)
            if comment != -1:
                self.header_comments.append(TextSpan(comment, header_end))
            style = element.LITERAL if event.style == '|' else element.FOLDED
            value = element.String(event.value, style, chomp=chomp)
        else:
            value = element.String(event.value, quote=event.style or None)
        node = element.Node(value, tag=event.tag if explicit else None)
        return node

    def scalar_token(self, mark):
        """Return the ScalarToken consumed for the current event."""
        for token in self.reader.recorded[mark:]:
            if isinstance(token, yaml.tokens.ScalarToken):
                return token

    def block_scalar_end(self, start, end, keep=False):
        """Return the end of a literal or folded scalar, without the
        trailing empty lines.

        If ``keep`` is True (the "+" chomping indicator), the empty lines
        belong to the value, and only the last line break is left out.

        """
        text = self.text
        if keep:
            if text[end-1:end] == '\n' and end - 1 > start:
                end -= 1
            if text[end-1:end] == '\r' and end - 1 > start:
                end -= 1
            return end
        while True:
            newline = text.rfind('\n', start, end)
            if newline == -1 or text[newline+1:end].strip():
                break
            end = newline
        while end > start and text[end-1] == '\r':
            end -= 1
        return end

    def comment_spans(self):
        """Yield the TextSpans of all comments, in text order."""
        text = self.text
        spans = sorted((t.start_mark.index, t.end_mark.index) for t in self.reader.recorded)
        spans.append((len(text), len(text)))
        found = list(self.header_comments)
        pos = 0
        for start, end in spans:
            if start > pos:
                i = text.find('#', pos, start)
                while i != -1:
                    e = util.line_end_of(text, i)
                    found.append(TextSpan(i, e))
                    i = text.find('#', e, start)
            pos = max(pos, end)
        return sorted(found)

    def attribute_comments(self, doc):
        """Find all comments and add them to the comment store."""
        text = self.text
        root = self.root
        depth = {}
        nodes = []
        for n in root.subtree():
            depth[n] = 0 if n is root else depth[n.parent] + 1
            nodes.append(n)

        ends = collections.defaultdict(list)
        entries = collections.defaultdict(list)
        indicator_lines = collections.defaultdict(list)
        for n in nodes:
            ends[util.line_start(doc, n.origin.end)].append(n)
            entries[n.entry].append(n)
            for p in {n.entry, n.slot}:
                if p is not None:
                    indicator_lines[util.line_start(doc, p)].append(n)

        def deepest(candidates):
            return max(candidates, key=lambda n: depth[n])

        def by_column(line, col):
            """Return the node ending on the line that a comment at column
            col belongs to."""
            candidates = sorted(ends[line], key=lambda n: depth[n], reverse=True)
            for n in candidates:
                if util.column(doc, n.entry) <= col:
                    return n
            return candidates[-1]

        own_line = []
        for span in self.comment_spans():
            comment = comments.Comment(None, text[span.start+1:span.end].strip(), span)
            if util.at_line_start(doc, span.start):
                own_line.append(comment)
                continue
            # a comment after content on the same line
            line = util.line_start(doc, span.start)
            before = [n for n in ends[line] if n.origin.end <= span.start]
            if before:
                owner = max(before, key=lambda n: (n.origin.end, depth[n]))
            else:
                after = [n for n in indicator_lines[line] if n.origin.start > span.start]
                if after:
                    owner = deepest(after)
                else:
                    around = [n for n in nodes if n.origin.start < span.start < n.origin.end]
                    owner = deepest(around) if around else root
            self.comments.record(owner, comment._replace(position=comments.LINE))

        # group comments on consecutive lines
        groups = []
        for comment in own_line:
            if groups:
                last = groups[-1][-1]
                if doc.find_end_of_block(last.span.start) + 1 == util.line_start(doc, comment.span.start):
                    groups[-1].append(comment)
                    continue
            groups.append([comment])

        for group in groups:
            first = util.line_start(doc, group[0].span.start)
            col = util.column(doc, group[0].span.start)
            owner = position = None
            # the line after the group
            after = doc.find_end_of_block(group[-1].span.start) + 1
            following = after < len(text) and text[after:doc.find_end_of_block(after)].strip()
            if following:
                line = text[after:doc.find_end_of_block(after)]
                p = after + len(line) - len(line.lstrip(' \t'))
                if entries[p]:
                    owner, position = deepest(entries[p]), comments.ABOVE
            if owner is None and first > 0:
                previous = util.line_start(doc, first - 1)
                if text[previous:first].strip() and ends[previous]:
                    owner, position = by_column(previous, col), comments.BELOW
            if owner is None:
                preceding = [n for n in nodes if n.origin.end <= first and n.origin.start < n.origin.end]
                trailing = not any(n.origin.start > first for n in nodes if n.origin.start < n.origin.end)
                if not preceding:
                    owner, position = root, comments.ABOVE
                elif trailing and root.value.container:
                    owner, position = self.comments.end_of_block(root), comments.STANDALONE
                else:
                    last_end = max(n.origin.end for n in preceding)
                    owner, position = by_column(util.line_start(doc, last_end), col), comments.STANDALONE
            for comment in group:
                self.comments.record(owner, comment._replace(position=position))

    def layout(self, doc, node):
        """Compute the lead and extent of the node and its descendants."""
        extent = node.origin.end
        for c in self.comments.comments_for(node):
            extent = max(extent, c.span.end)
        for child in node:
            extent = max(extent, self.layout(doc, child))
        if node.value.container:
            for c in self.comments.comments_for(self.comments.end_of_block(node)):
                extent = max(extent, c.span.end)
        node.extent = extent
        lead = node.entry
        if util.at_line_start(doc, lead):
            lead = util.line_start(doc, lead)
        for c in self.comments.comments_for(node, comments.ABOVE):
            lead = min(lead, util.line_start(doc, c.span.start))
        node.lead = lead
        return extent
