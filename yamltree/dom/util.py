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
Utility functions for use with the YAML DOM.

The line helpers take a :class:`parce.document.Document` holding the source
text, and use its block (line) lookup. The quoting helpers decide how a
string can be written, using the scalar analysis of PyYAML's emitter.

"""

import io

import parce.document
import yaml.emitter
import yaml.nodes
import yaml.representer
import yaml.resolver


_emitter = yaml.emitter.Emitter(io.StringIO(), allow_unicode=True)
_representer = yaml.representer.SafeRepresenter()
_resolver = yaml.resolver.Resolver()

#: Tags a plain scalar may not resolve to if it must be read back as a string.
NON_STRING_TAGS = frozenset((
    'tag:yaml.org,2002:null',
    'tag:yaml.org,2002:bool',
    'tag:yaml.org,2002:int',
    'tag:yaml.org,2002:float',
))

#: Line breaks that only a double-quoted scalar can contain.
SPECIAL_BREAKS = '\r\x85\u2028\u2029'


def document(text):
    """Return a :class:`parce.document.Document` with the text."""
    return parce.document.Document(text)


def line_start(doc, pos):
    """Return the position of the start of the line ``pos`` is in."""
    return doc.find_start_of_block(pos)


def line_end(doc, pos):
    """Return the position of the end of the line ``pos`` is in, before
    the line break."""
    end = doc.find_end_of_block(pos)
    if end > pos and doc[end-1:end] == '\r':
        end -= 1
    return end


def column(doc, pos):
    """Return the column of ``pos`` in its line."""
    return pos - doc.find_start_of_block(pos)


def at_line_start(doc, pos):
    """Return True if only whitespace precedes ``pos`` on its line."""
    start = doc.find_start_of_block(pos)
    return not doc[start:pos].strip()


def content_end(doc, pos):
    """Return ``pos``, moved back over spaces and tabs."""
    start = doc.find_start_of_block(pos)
    while pos > start and doc[pos-1:pos] in (' ', '\t'):
        pos -= 1
    return pos


def resolves_to_string(text):
    """Return True if ``text`` written as a plain scalar would be read back
    as a string."""
    tag = _resolver.resolve(yaml.nodes.ScalarNode, text, (True, False))
    return tag not in NON_STRING_TAGS


def analyze(text):
    """Return PyYAML's ScalarAnalysis for the text."""
    return _emitter.analyze_scalar(text)


def plain_allowed(text, flow=False):
    """Return True if the text can be written as a single-line plain scalar."""
    a = analyze(text)
    if a.empty or a.multiline:
        return False
    return a.allow_flow_plain if flow else a.allow_block_plain


def single_quoted(text):
    """Return the text as a single-quoted scalar."""
    return "'" + text.replace("'", "''") + "'"


def double_quoted(text):
    """Return the text as a double-quoted scalar, on one line."""
    escapes = yaml.emitter.Emitter.ESCAPE_REPLACEMENTS
    chunks = ['"']
    for ch in text:
        if ch in escapes:
            chunks.append('\\' + escapes[ch])
        elif ('\x20' <= ch <= '\x7E' or '\xA0' <= ch <= '\uD7FF'
              or '\uE000' <= ch <= '\uFFFD' or '\U00010000' <= ch < '\U0010ffff') \
              and ch != '\uFEFF':
            chunks.append(ch)
        elif ch <= '\xFF':
            chunks.append('\\x{:02X}'.format(ord(ch)))
        elif ch <= '\uFFFF':
            chunks.append('\\u{:04X}'.format(ord(ch)))
        else:
            chunks.append('\\U{:08X}'.format(ord(ch)))
    chunks.append('"')
    return ''.join(chunks)


def quoted(text, quote=None):
    """Return the text quoted, preferring the ``quote`` character if given.

    Single quotes are only used for text that fits on one line.

    """
    a = analyze(text)
    if quote != '"' and a.allow_single_quoted and not a.multiline:
        return single_quoted(text)
    return double_quoted(text)


def key_text(key, flow=False):
    """Return the text for a mapping key."""
    if plain_allowed(key, flow):
        return key
    return quoted(key)


def scalar_data_text(data):
    """Return the text for a None, bool, int or float value, the way PyYAML
    represents it."""
    if data is None:
        return _representer.represent_none(data).value
    elif isinstance(data, bool):
        return _representer.represent_bool(data).value
    elif isinstance(data, int):
        return _representer.represent_int(data).value
    return _representer.represent_float(data).value


def tag_text(tag):
    """Return the text for an explicit tag, using the ``!!`` shorthand for
    the standard tags."""
    if tag.startswith('tag:yaml.org,2002:'):
        return '!!' + tag[18:]
    elif tag.startswith('!'):
        return tag
    return '!<{}>'.format(tag)


def newline(text):
    """Return the line break used in the text, CRLF if its first line ends
    with it, otherwise LF."""
    end = text.find('\n')
    return '\r\n' if end > 0 and text[end-1] == '\r' else '\n'


def line_end_of(text, pos):
    """Return the end of the line ``pos`` is in, before the line break, for
    a plain string."""
    end = text.find('\n', pos)
    if end == -1:
        end = len(text)
    if end > pos and text[end-1] == '\r':
        end -= 1
    return end
