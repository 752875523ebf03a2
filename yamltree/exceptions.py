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
Exceptions raised by yamltree.

Every rejected operation raises a subclass of :class:`YamlTreeError`, so an
editing application can show a specific message to the user.

"""


class YamlTreeError(Exception):
    """Base class for all yamltree errors."""


class ParseError(YamlTreeError):
    """Raised when source text can't be read.

    The ``line`` and ``column`` attributes (starting with 1) point to the
    problem, if known.

    """
    def __init__(self, message, line=None, column=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        if self.line is None:
            return self.message
        return "{} (line {}, column {})".format(self.message, self.line, self.column)


class AnchorIntegrityError(YamlTreeError):
    """Raised when an anchor name is defined twice, or when a node would
    be removed whose anchor is still referred to by an alias."""


class EditConstraintViolation(YamlTreeError):
    """Raised when a mutation is not allowed, e.g. changing the value of an
    alias, or adding a key that already exists."""


class SerializeValidationError(YamlTreeError):
    """Raised when text written back from a tree can't be read again."""
