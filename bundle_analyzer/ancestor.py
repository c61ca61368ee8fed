"""Sole common ancestor search over a lazily discovered parent graph."""

from typing import Callable, Generic, Hashable, Iterable, Sequence, TypeVar


T = TypeVar("T", bound=Hashable)

ReadParents = Callable[[T], Iterable[T]]

_EXPANDING = object()


def sole_ancestor(start_nodes: Sequence[T], read_parents: ReadParents) -> T | None:
    """Find the nearest node that every upward route from every start node passes.

    Starting from each node, the search walks upward through ``read_parents``.
    A node with several parents splits the walk; the answer must lie on every
    branch of every walk, so a node that only some routes reach (a shared
    package on one side of a diamond, say) is never returned.

    Args:
        start_nodes: Nodes to find the common ancestor for
        read_parents: Returns the parents of a node. Called at most once per
            node; the first parent is walked first.

    Returns:
        The sole ancestor, the only start node when given one, or None when
        the routes never converge on a single node

    Example:
        >>> parents = {1: [], 2: [1], 3: [2], 4: [2], 5: [4], 6: [3, 5]}
        >>> sole_ancestor([6, 5], lambda n: parents[n])
        2
        >>> sole_ancestor([3], lambda n: parents[n])
        3
    """
    if len(start_nodes) < 2:
        return start_nodes[0] if start_nodes else None

    routes = _RouteIndex(read_parents)
    first, *others = [routes.route(node) for node in start_nodes]
    other_sets = [set(route) for route in others]

    for node in first:
        if all(node in route for route in other_sets):
            return node
    return None


class _RouteIndex(Generic[T]):
    """Memoizes, per node, the nodes that every upward route from it passes.

    A route is ordered nearest first and starts with the node itself. The
    nodes on it form a chain, so the first one shared by several routes is
    the nearest shared one.
    """

    def __init__(self, read_parents: ReadParents):
        self._read_parents = read_parents
        self._parents: dict[T, list[T]] = {}
        self._routes: dict[T, list[T] | object] = {}

    def parents(self, node: T) -> list[T]:
        if node not in self._parents:
            self._parents[node] = list(self._read_parents(node))
        return self._parents[node]

    def route(self, start: T) -> list[T]:
        stack = [start]
        while stack:
            node = stack[-1]
            state = self._routes.get(node)

            if state is None:
                # First visit: walk the parents that are not resolved yet.
                # A parent that is still expanding sits below us on the stack
                # and would close a cycle, so it is left out.
                self._routes[node] = _EXPANDING
                stack.extend(
                    parent for parent in reversed(self.parents(node))
                    if parent not in self._routes
                )
                continue

            stack.pop()
            if state is _EXPANDING:
                self._routes[node] = [node] + self._shared(node)

        return self._routes[start]

    def _shared(self, node: T) -> list[T]:
        """Nodes found on the routes of all of ``node``'s parents."""
        parent_routes = [
            self._routes[parent] for parent in self.parents(node)
            if self._routes.get(parent) is not _EXPANDING
        ]
        if not parent_routes:
            return []

        first, *others = parent_routes
        if not others:
            return first
        other_sets = [set(route) for route in others]
        return [n for n in first if all(n in route for route in other_sets)]
