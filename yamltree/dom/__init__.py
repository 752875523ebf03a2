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
This package defines a document model for YAML text that can be edited and
written back without losing the layout of the parts that were not changed.

The model is a simple tree of :class:`~.element.Node` objects, each holding a
:class:`~.element.Value`. It is used in two ways:

1. Building a YAML document from scratch, using :func:`.element.build` and
   a :class:`~.tree.Tree`, which is then written using the default layout.

2. Reading an existing YAML document with :func:`.read.parse`. Every node
   remembers where it came from in the source text, together with the
   comments around it, so modifications can be written back without
   touching other parts of the text.

"""
