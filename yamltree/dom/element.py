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
This module defines the values a YAML document consists of, and the
:class:`Node` that carries them.

A Node holds exactly one :class:`Value`. Scalar values are :class:`Null`,
:class:`Bool`, :class:`Integer`, :class:`Float` and :class:`String`; an
:class:`Alias` refers to an anchor by name. The container values
:class:`Sequence`, :class:`Mapping` and :class:`MultiDoc` carry no data
themselves: the entries of a container are the child nodes of its Node, and
the children of a Mapping each carry their :attr:`~Node.key`.

A Node that was read from text knows where it came from: its
:attr:`~Node.origin`. As long as neither the node itself nor any of its
descendants is changed, the :attr:`~Node.span` property returns the origin and
the node can be written back by copying the original text.

Use :func:`build` to create new nodes from Python data::

    >>> from yamltree.dom.element import build
    >>> node = build({'name': 'value', 'list': [1, 2.5, None]})
    >>> node.dump()
    <Node Mapping (2 children)>
     ├╴<Node 'name': String('value')>
     ╰╴<Node 'list': Sequence (3 children)>
        ├╴<Node Integer(1)>
        ├╴<Node Float(2.5)>
        ╰╴<Node Null()>

"""

import reprlib

from .. import node
from ..exceptions import EditConstraintViolation


#: String styles; the style is part of a String's identity.
PLAIN = "plain"
LITERAL = "literal"
FOLDED = "folded"

STYLES = (PLAIN, LITERAL, FOLDED)


class Value:
    """Base class for all values a :class:`Node` can hold.

    Values are immutable and compare equal when they have the same type and
    the same contents.

    """
    __slots__ = ()

    #: True for values that have child nodes.
    container = False

    def _identity(self):
        """Implement to return a tuple of the contents that define equality."""
        return ()

    def __eq__(self, other):
        if isinstance(other, Value):
            return type(self) is type(other) and self._identity() == other._identity()
        return NotImplemented

    def __ne__(self, other):
        if isinstance(other, Value):
            return not self == other
        return NotImplemented

    def __hash__(self):
        return hash((type(self), self._identity()))

    def __repr__(self):
        return '{}({})'.format(type(self).__name__,
            ', '.join(reprlib.repr(v) for v in self._identity()))


class Scalar(Value):
    """Base class for values that have Python data."""
    __slots__ = ()

    def data(self):
        """Return the Python value."""
        raise NotImplementedError


class Null(Scalar):
    """The null value."""
    __slots__ = ()

    def data(self):
        return None


class Bool(Scalar):
    """A boolean value."""
    __slots__ = ('value',)

    def __init__(self, value):
        self.value = bool(value)

    def _identity(self):
        return (self.value,)

    def data(self):
        return self.value


class Integer(Scalar):
    """An integer value."""
    __slots__ = ('value',)

    def __init__(self, value):
        self.value = int(value)

    def _identity(self):
        return (self.value,)

    def data(self):
        return self.value


class Float(Scalar):
    """A floating point value.

    Two Float values containing NaN compare equal.

    """
    __slots__ = ('value',)

    def __init__(self, value):
        self.value = float(value)

    def _identity(self):
        return (repr(self.value),)

    def __repr__(self):
        return 'Float({!r})'.format(self.value)

    def data(self):
        return self.value


class String(Scalar):
    """A text string.

    The ``style`` is :data:`PLAIN`, :data:`LITERAL` (``|``) or :data:`FOLDED`
    (``>``), and is part of the value: ``String('a', LITERAL)`` is not equal
    to ``String('a')``.

    The ``quote`` and ``chomp`` attributes are hints used when the string is
    written: ``quote`` is ``"'"`` or ``'"'`` if the string was quoted, and
    ``chomp`` is the chomping indicator of a literal or folded string (``""``,
    ``"-"`` or ``"+"``). They do not take part in comparisons.

    """
    __slots__ = ('text', 'style', 'quote', 'chomp')

    def __init__(self, text, style=PLAIN, quote=None, chomp=None):
        if style not in STYLES:
            raise ValueError("unknown string style: {!r}".format(style))
        self.text = text
        self.style = style
        self.quote = quote
        self.chomp = chomp

    def _identity(self):
        return (self.text, self.style)

    def __repr__(self):
        if self.style == PLAIN:
            return 'String({})'.format(reprlib.repr(self.text))
        return 'String({}, {})'.format(reprlib.repr(self.text), self.style)

    def data(self):
        return self.text

    def restyled(self, text):
        """Return a new String with the text replaced, keeping style and hints.

        A literal or folded string with the default (clip) chomping always
        ends with a newline, so it is added if the text has none.

        """
        if self.style != PLAIN and self.chomp == '' and text and not text.endswith('\n'):
            text += '\n'
        return type(self)(text, self.style, self.quote, self.chomp)


class Alias(Value):
    """A reference to the node carrying the anchor ``name``.

    An alias never holds a value itself; it is resolved through the
    :class:`~.anchors.AnchorRegistry` of the tree.

    """
    __slots__ = ('name',)

    def __init__(self, name):
        self.name = name

    def _identity(self):
        return (self.name,)


class Container(Value):
    """Base class for values whose contents are the child nodes."""
    __slots__ = ()
    container = True


class Sequence(Container):
    """An ordered list of nodes."""
    __slots__ = ()


class Mapping(Container):
    """An ordered list of nodes, each with a unique key."""
    __slots__ = ()


class MultiDoc(Container):
    """A list of documents, only allowed as the root of a tree."""
    __slots__ = ()


class Node(node.Node):
    """A node in a YAML document tree.

    The ``value`` is a :class:`Value` instance. Child nodes of a
    :class:`Mapping` have a :attr:`key`. The :attr:`anchor` is the name of an
    anchor defined on this node, and :attr:`tag` an explicit tag, which is
    preserved but has no meaning for the tree.

    Nodes created by :func:`build` or by the mutation methods of a
    :class:`~.tree.Tree` have the :attr:`modified` flag set, and no
    :attr:`origin`. Nodes read from text have their origin set, and a few more
    attributes that describe their layout in the source text, which are
    used when writing back a modified tree.

    """
    __slots__ = (
        'value',        # the Value
        'key',          # the key in the parent mapping
        'anchor',       # anchor name or None
        'tag',          # explicit tag or None
        'modified',     # True if the value was set or the node is new
        'dirty',        # True if a descendant was changed
        'dangling',     # True for an alias whose anchor can't be found
        'origin',       # TextSpan in the source text, never cleared
        'origin_key',   # the key at the time the node was read
        'key_span',     # TextSpan of the key in the source text
        'entry',        # position where the entry (key, "-" or node) starts
        'slot',         # position after the ":" or "-" indicator
        'lead',         # start of the lines owned by this entry
        'extent',       # end of the text owned by this entry, incl. comments
        'flow',         # True if this container was written in flow style
        'shape',        # tuple of the children as they were read
    )

    def __init__(self, value, *children, key=None, anchor=None, tag=None):
        super().__init__(*children)
        self.value = value
        self.key = key
        self.anchor = anchor
        self.tag = tag
        self.modified = False
        self.dirty = False
        self.dangling = False
        self.origin = None
        self.origin_key = None
        self.key_span = None
        self.entry = None
        self.slot = None
        self.lead = None
        self.extent = None
        self.flow = False
        self.shape = ()

    def __repr__(self):
        fields = [type(self).__name__]
        if self.key is not None:
            fields.append(reprlib.repr(self.key) + ':')
        if self.anchor:
            fields.append('&' + self.anchor)
        if self.value.container:
            c = "child" if len(self) == 1 else "children"
            fields.append('{} ({} {})'.format(type(self.value).__name__, len(self), c))
        else:
            fields.append(repr(self.value))
        if self.dangling:
            fields.append('(dangling)')
        return '<{}>'.format(' '.join(fields))

    @property
    def span(self):
        """The :class:`~yamltree.datatypes.TextSpan` this node occupies in
        the source text, or None.

        This is None for new nodes, and also as soon as the node or any of its
        descendants has been changed.

        """
        if self.modified or self.dirty:
            return None
        return self.origin

    @property
    def style(self):
        """The style of a :class:`String` value, or None for other values.

        Use this when changing the text of a string, so that a literal or
        folded string does not silently become a plain one.

        """
        if isinstance(self.value, String):
            return self.value.style

    def is_alias(self):
        """Return True if this node is an alias."""
        return isinstance(self.value, Alias)

    def is_mapping(self):
        """Return True if this node is a mapping."""
        return isinstance(self.value, Mapping)

    def is_sequence(self):
        """Return True if this node is a sequence."""
        return isinstance(self.value, Sequence)

    def keys(self):
        """Return the list of keys of a mapping node."""
        return [n.key for n in self]

    def child(self, key):
        """Return the child with the specified key, or None."""
        for n in self:
            if n.key == key:
                return n

    def reshaped(self):
        """Return True if the children (or the keys) differ from how they
        were read.

        Always False for nodes that were not read from text.

        """
        if self.origin is None or not self.value.container:
            return False
        return tuple(self) != self.shape or any(n.key != n.origin_key for n in self)

    def equals(self, other):
        """Return True if the other node has an equal value, key, anchor and
        tag, and all children are equal as well."""
        return (self.value == other.value and self.key == other.key
                and self.anchor == other.anchor and self.tag == other.tag
                and len(self) == len(other)
                and all(a.equals(b) for a, b in zip(self, other)))

    def copy(self):
        """Return a new, modified node with the same value, key, anchor and
        tag, and copies of all the children. The layout is not copied."""
        copy = type(self)(self.value, *(n.copy() for n in self),
                          key=self.key, anchor=self.anchor, tag=self.tag)
        copy.modified = True
        copy.flow = self.flow
        return copy


def build(data, key=None):
    """Return a new :class:`Node` for the Python data.

    None, bool, int, float and str are converted to the respective
    :class:`Scalar` value; a list or tuple becomes a Sequence and a dict a
    Mapping, where all dictionary keys must be strings. A :class:`Value`
    instance is used as is (containers become empty). A :class:`Node` that
    has no parent is returned unchanged, unless it or one of its descendants
    was read from text: then a copy is returned, because its layout refers
    to a source text it is no longer part of.

    All newly created nodes have the :attr:`~Node.modified` flag set. Raises
    :class:`~yamltree.exceptions.EditConstraintViolation` for
    :class:`MultiDoc` values and non-string mapping keys, and
    :class:`TypeError` for other data types.

    """
    if isinstance(data, Node):
        if data.parent is not None:
            raise EditConstraintViolation("node is already part of a tree")
        if any(n.origin is not None for n in data.subtree()):
            data = data.copy()
        if key is not None:
            data.key = key
        return data
    if isinstance(data, MultiDoc):
        raise EditConstraintViolation("a MultiDoc can only be the root of a tree")
    if isinstance(data, Value):
        n = Node(data, key=key)
    elif data is None:
        n = Node(Null(), key=key)
    elif isinstance(data, bool):
        n = Node(Bool(data), key=key)
    elif isinstance(data, int):
        n = Node(Integer(data), key=key)
    elif isinstance(data, float):
        n = Node(Float(data), key=key)
    elif isinstance(data, str):
        n = Node(String(data), key=key)
    elif isinstance(data, (list, tuple)):
        n = Node(Sequence(), *(build(item) for item in data), key=key)
    elif isinstance(data, dict):
        for k in data:
            if not isinstance(k, str):
                raise EditConstraintViolation("mapping keys must be strings, not {!r}".format(k))
        n = Node(Mapping(), *(build(v, k) for k, v in data.items()), key=key)
    else:
        raise TypeError("can't convert {} to a YAML value".format(type(data).__name__))
    n.modified = True
    return n
