"""Attribute module sizes to the packages that pulled them into a bundle.

Every module in a compilation is assigned to one package node. Packages are
nested by "used only by": a package that is reached only through lodash sits
under lodash, while a package that several top-level packages require sits
under their sole common ancestor. Sizes are cumulative, so each node weighs
its own modules plus everything nested below it. Total sizes also count the
shared packages a node pulls in that are nested elsewhere.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator

from bundle_analyzer.ancestor import sole_ancestor
from bundle_analyzer.exceptions import CircularDependencyError, MalformedReportError
from bundle_analyzer.stats import Compilation, Module


logger = logging.getLogger(__name__)

INTERNAL_PACKAGE = "(internal)"

_LOADER_PREFIX = re.compile(r"^.*!")
_PACKAGE_MARKER = re.compile(r"~/((?:@[^/]+/)?[^/]+)")


def package_name(module_name: str) -> str:
    """Extract the owning package from a module name.

    Webpack names modules inside dependencies like
    ``./~/react-dom/~/fbjs/lib/warning.js``; the package after the last
    ``~/`` owns the module. Loader expressions (``style!css!./~/x/a.css``)
    are ignored.

    Args:
        module_name: The module's display name from the report

    Returns:
        The package name, or INTERNAL_PACKAGE for project modules
    """
    path = _LOADER_PREFIX.sub("", module_name)
    packages = _PACKAGE_MARKER.findall(path)
    return packages[-1] if packages else INTERNAL_PACKAGE


@dataclass
class PackageNode:
    """One package at one position in the tree.

    References to other nodes are indices into the owning PackageTree.

    Attributes:
        index: This node's position in the tree's node list
        name: Package name
        parent: Index of the node this one is nested under (None for the root)
        children: Indices of nested nodes, in creation order
        chains: Indices of the nodes whose modules pulled this package in
        modules: Report modules attributed directly to this node
        size: Cumulative size in bytes of the modules nested under this node
        total_size: Size of every module this node pulls in, including
            modules shared with other packages and nested elsewhere
    """
    index: int
    name: str
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    chains: list[int] = field(default_factory=list)
    modules: list[Module] = field(default_factory=list)
    size: int = 0
    total_size: int = 0


class PackageTree:
    """Arena holding the package nodes of one bundle."""

    def __init__(self):
        self.nodes: list[PackageNode] = []
        self.root = self.add(INTERNAL_PACKAGE)

    def __getitem__(self, index: int) -> PackageNode:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)

    def add(self, name: str, parent: int | None = None, chains: list[int] | None = None) -> int:
        """Create a node, attach it under ``parent`` and return its index."""
        index = len(self.nodes)
        self.nodes.append(PackageNode(index=index, name=name, parent=parent, chains=list(chains or [])))
        if parent is not None:
            self.nodes[parent].children.append(index)
        return index

    def find_child(self, parent: int, name: str) -> int | None:
        for child in self.nodes[parent].children:
            if self.nodes[child].name == name:
                return child
        return None

    def lineage(self, index: int) -> Iterator[int]:
        """Yield ``index`` and then each parent up to the root."""
        current = index
        while current is not None:
            yield current
            current = self.nodes[current].parent

    def add_size(self, index: int, size: int) -> None:
        """Count a module of ``size`` bytes attributed to ``index``.

        ``size`` goes to the node and each parent up to the root.
        ``total_size`` goes to every node that pulled the module in, which
        is every node reachable upward through parents or chains.
        """
        for node in self.lineage(index):
            self.nodes[node].size += size
        for node in self.users(index):
            self.nodes[node].total_size += size

    def users(self, index: int) -> list[int]:
        """Return ``index`` and every node reachable upward from it, nearest first."""
        seen = {index}
        order = [index]
        for current in order:
            node = self.nodes[current]
            upward = node.chains if node.parent is None else [node.parent, *node.chains]
            for user in upward:
                if user not in seen:
                    seen.add(user)
                    order.append(user)
        return order

    def read_chains(self, index: int) -> list[int]:
        return self.nodes[index].chains

    def merge_chains(self, index: int, chains: list[int]) -> None:
        """Widen a node's users with ``chains``.

        A chain position that can already reach ``index`` through the users
        graph is skipped, as adding it would make the node its own user.
        """
        node = self.nodes[index]
        for chain in chains:
            if chain in node.chains or self._reaches(chain, index):
                continue
            node.chains.append(chain)

    def _reaches(self, start: int, target: int) -> bool:
        seen = set()
        stack = [start]
        while stack:
            current = stack.pop()
            if current == target:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self.nodes[current].chains)
        return False


_IN_PROGRESS = object()


class _TreeBuilder:
    """Resolves the package node of every module in one compilation."""

    def __init__(self, compilation: Compilation):
        self.compilation = compilation
        self.tree = PackageTree()
        self._modules: dict[int | str, Module] = {}
        # module id -> _IN_PROGRESS or the index of its package node
        self._resolved: dict[int | str, object] = {}

        for module in compilation.modules:
            if module.id in self._modules:
                raise MalformedReportError(
                    f"Duplicate module id {module.id!r} in compilation",
                    raw_input=module,
                )
            self._modules[module.id] = module

    def build(self) -> PackageTree:
        for module in self.compilation.modules:
            self.resolve(module.id)

        root = self.tree[self.tree.root]
        logger.debug(
            "Attributed %d modules to %d package nodes (%d bytes)",
            len(self._modules), len(self.tree), root.size,
        )
        return self.tree

    def resolve(self, module_id: int | str) -> int:
        """Return the package node index for a module, resolving its reasons first."""
        stack = [module_id]
        while stack:
            current = stack[-1]
            state = self._resolved.get(current)

            if state is None:
                self._resolved[current] = _IN_PROGRESS
                for reason_id in self._reason_ids(current):
                    reason_state = self._resolved.get(reason_id)
                    if reason_state is _IN_PROGRESS:
                        name = self._modules[reason_id].name
                        raise CircularDependencyError(
                            f"Circular module dependency detected in {name}.",
                            module_name=name,
                        )
                    if reason_state is None:
                        stack.append(reason_id)
                continue

            stack.pop()
            if state is _IN_PROGRESS:
                self._resolved[current] = self._attribute(self._modules[current])

        return self._resolved[module_id]

    def _reason_ids(self, module_id: int | str) -> list[int | str]:
        module = self._modules[module_id]
        ids = []
        for reason in module.reasons:
            if reason.module_id is None:
                continue
            if reason.module_id not in self._modules:
                raise MalformedReportError(
                    f"Module {module.name} has a reason referencing unknown module id {reason.module_id!r}",
                    raw_input=module,
                )
            ids.append(reason.module_id)
        return ids

    def _attribute(self, module: Module) -> int:
        """Place an entirely resolved module in the tree and count its size."""
        tree = self.tree
        chains = []
        for reason_id in self._reason_ids(module.id):
            parent = self._resolved[reason_id]
            if parent not in chains:
                chains.append(parent)

        if chains:
            name = package_name(module.name)
            ancestor = sole_ancestor(chains, tree.read_chains)
            if ancestor is None:
                logger.debug(
                    "No sole ancestor for %s across %d chains, attributing under the root",
                    module.name, len(chains),
                )
                ancestor = tree.root

            if tree[ancestor].name == name:
                index = ancestor
            else:
                index = tree.find_child(ancestor, name)
                if index is None:
                    index = tree.add(name, parent=ancestor, chains=chains)
                else:
                    tree.merge_chains(index, chains)
        else:
            index = tree.root

        tree[index].modules.append(module)
        tree.add_size(index, module.size)
        return index


def build_tree(compilation: Compilation) -> PackageTree:
    """Build the package tree for a single-bundle report.

    Args:
        compilation: A validated single-bundle report

    Returns:
        The PackageTree; its ``root`` is the synthetic "(internal)" node

    Raises:
        CircularDependencyError: If module reasons form a cycle
        MalformedReportError: If ids are duplicated or reasons point nowhere
    """
    return _TreeBuilder(compilation).build()
