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
The AnchorRegistry keeps track of anchors and the aliases referring to them.

Every anchor name is defined by exactly one node. Alias nodes are registered
with the name they refer to; an alias whose anchor can't be found is flagged
as :attr:`~.element.Node.dangling`, which is not an error: the alias is kept
and written back as it was.

"""

import logging

from ..exceptions import AnchorIntegrityError
from . import element


logger = logging.getLogger(__name__)


class AnchorRegistry:
    """Maps anchor names to the nodes defining them, and alias nodes to the
    names they refer to."""
    def __init__(self):
        self._anchors = {}
        self._aliases = {}

    def __repr__(self):
        return '<{} ({} anchors, {} aliases)>'.format(
            type(self).__name__, len(self._anchors), len(self._aliases))

    def __contains__(self, name):
        """Return True if an anchor with the name is defined."""
        return name in self._anchors

    def resolve(self, name):
        """Return the node defining the anchor ``name``, or None."""
        return self._anchors.get(name)

    def register_anchor(self, name, node):
        """Register the node as defining anchor ``name``.

        Raises :class:`~yamltree.exceptions.AnchorIntegrityError` if another
        node already defines that name. Aliases referring to the name are not
        dangling anymore.

        """
        other = self._anchors.get(name)
        if other is not None and other is not node:
            raise AnchorIntegrityError("duplicate anchor: &{}".format(name))
        self._anchors[name] = node
        for alias in self.aliases_of(name):
            alias.dangling = False

    def register_alias(self, name, node):
        """Register the alias node as referring to anchor ``name``.

        The alias is flagged dangling if the anchor is not (yet) defined.

        """
        self._aliases[node] = name
        node.dangling = name not in self._anchors

    def references(self, name):
        """Return the number of aliases referring to anchor ``name``."""
        return sum(1 for n in self._aliases.values() if n == name)

    def aliases_of(self, name):
        """Return the list of alias nodes referring to anchor ``name``."""
        return [node for node, n in self._aliases.items() if n == name]

    def anchor_names(self):
        """Return the list of defined anchor names."""
        return list(self._anchors)

    def dangling(self):
        """Return the list of alias nodes whose anchor can't be found."""
        return [node for node in self._aliases if node.dangling]

    def can_delete(self, node):
        """Return True if the node can be removed.

        This is not the case when the node or any of its descendants defines
        an anchor that is referred to by an alias outside the node.

        """
        inside = set(node.subtree())
        for n in inside:
            if n.anchor and self._anchors.get(n.anchor) is n:
                for alias in self.aliases_of(n.anchor):
                    if alias not in inside:
                        return False
        return True

    def unregister_subtree(self, node):
        """Remove the anchors and aliases of the node and its descendants.

        Aliases elsewhere that referred to a removed anchor become dangling.

        """
        for n in node.subtree():
            self._aliases.pop(n, None)
            if n.anchor and self._anchors.get(n.anchor) is n:
                del self._anchors[n.anchor]
                for alias in self.aliases_of(n.anchor):
                    alias.dangling = True

    def register_subtree(self, node):
        """Register the anchors and aliases of the node and its descendants."""
        for n in node.subtree():
            if n.anchor:
                self.register_anchor(n.anchor, n)
        for n in node.subtree():
            if isinstance(n.value, element.Alias):
                self.register_alias(n.value.name, n)

    def reconcile(self):
        """Update the dangling state of all aliases, e.g. after reading a
        document in which aliases may refer forward."""
        for node, name in self._aliases.items():
            node.dangling = name not in self._anchors

    def rebuild(self, root):
        """Clear the registry and register all anchors and aliases in the
        tree below root."""
        self._anchors.clear()
        self._aliases.clear()
        self.register_subtree(root)
        logger.debug("rebuilt registry: %d anchors, %d aliases, %d dangling",
            len(self._anchors), len(self._aliases), len(self.dangling()))
