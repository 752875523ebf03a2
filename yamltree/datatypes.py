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
Some small generic datatypes used by yamltree.

Too small to justify separate modules but too generic to be added to some
module where they are actually used.

"""

import collections


#: A TextSpan is a range of characters in the source text a node was read
#: from. See :attr:`.dom.element.Node.span`.
TextSpan = collections.namedtuple("TextSpan", "start end")
TextSpan.start.__doc__ = "The position of the first character in the source text."
TextSpan.end.__doc__ = "The position after the last character in the source text."


#: Formatting describes how text is written back.
#: See :func:`.dom.write.serialize`.
Formatting = collections.namedtuple("Formatting", "indent_width preserve", defaults=(2, True))
Formatting.indent_width.__doc__ = "The indent for newly written block content (default 2)."
Formatting.preserve.__doc__ = ("If True (the default), unmodified parts of a document "
                               "are written back exactly as they were read.")
