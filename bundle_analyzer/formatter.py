"""Convert a PackageTree into plain result nodes."""

from bundle_analyzer.package_tree import PackageTree
from bundle_analyzer.types import BundleResult, ResultNode


def format_node(tree: PackageTree, index: int | None = None) -> ResultNode:
    """Convert the subtree at ``index`` (the root by default) into ResultNodes.

    Children keep the order in which they were discovered. ``used_by`` lists
    the names of the node's chain positions once each. Nodes are built
    children first, so nesting depth is not limited by the call stack.
    """
    if index is None:
        index = tree.root

    order = [index]
    for current in order:
        order.extend(tree[current].children)

    built: dict[int, ResultNode] = {}
    for current in reversed(order):
        node = tree[current]
        built[current] = ResultNode(
            name=node.name,
            size=node.size,
            total_size=node.total_size,
            children=[built.pop(child) for child in node.children],
            used_by=_used_by(tree, current),
            modules=[module.name for module in node.modules],
        )
    return built[index]


def format_bundle(tree: PackageTree, bundle_name: str | None = None) -> BundleResult:
    """Format the whole tree, tagging the root with the bundle's name."""
    root = format_node(tree)
    return BundleResult(**dict(root), bundle_name=bundle_name)


def _used_by(tree: PackageTree, index: int) -> list[str]:
    names = []
    for chain in tree[index].chains:
        name = tree[chain].name
        if name not in names:
            names.append(name)
    return names
