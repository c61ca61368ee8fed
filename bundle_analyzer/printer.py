"""Human-readable rendering of package size trees."""

from typing import Callable, NamedTuple

from bundle_analyzer.template import Template
from bundle_analyzer.types import ResultNode


SELF_LABEL = "<self>"

_UNITS = ["KB", "MB", "GB", "TB"]


def format_bytes(size: int) -> str:
    """Format a byte count, e.g. ``1536`` as ``"1.50 KB"``."""
    if abs(size) < 1024:
        return f"{size} B"

    value = float(size)
    for unit in _UNITS:
        value /= 1024.0
        if abs(value) < 1024.0 or unit == _UNITS[-1]:
            break
    return f"{value:.2f} {unit}"


def _percentage(part: int, total: int) -> str:
    value = part / total * 100 if total else 0.0
    # 3 significant digits, keeping trailing zeros ("5.50", "100")
    return f"{value:#.3g}".rstrip(".")


class _Row(NamedTuple):
    depth: int
    name: str
    size: int
    share: str


class _Level:
    """A node whose children are being listed."""

    def __init__(self, node: ResultNode, depth: int):
        self.node = node
        self.depth = depth
        self.remainder = node.size
        self.done = False
        # largest last, so pop() takes the next child to list
        self.pending = sorted(node.children, key=lambda c: c.size, reverse=True)[::-1]


class TreePrinter:
    """Prints the packages of a size tree, largest first.

    Class attributes (override in subclass or per instance):
        share_stats: Append each entry's share of its parent as a percentage
        min_share: Stop listing siblings once the part of the parent not yet
            listed falls below this fraction of the parent's size
        indent: Indentation added per nesting level
        template: Template rendering the collected rows

    Example:
        >>> printer = TreePrinter(share_stats=False)
        >>> printer.write(trees[0])
        react: 120.50 KB
          fbjs: 20.12 KB
          <self>: 100.38 KB
        <self>: 3.20 KB
    """

    share_stats: bool = True
    min_share: float = 0.01
    indent: str = "  "
    template: Template = Template(path="templates/tree.txt.j2", filters={"filesize": format_bytes})

    def __init__(self, *, share_stats: bool | None = None, min_share: float | None = None,
                 indent: str | None = None):
        if share_stats is not None:
            self.share_stats = share_stats
        if min_share is not None:
            self.min_share = min_share
        if indent is not None:
            self.indent = indent

    def render_lines(self, tree: ResultNode) -> list[str]:
        """Render a tree into output lines."""
        text = self.template.render(
            bundle_name=getattr(tree, "bundle_name", None),
            rows=self._rows(tree),
            indent=self.indent,
            share_stats=self.share_stats,
        )
        return text.splitlines()

    def write(self, tree: ResultNode, output_fn: Callable[[str], None] | None = None) -> None:
        """Send each rendered line to ``output_fn`` (``print`` by default)."""
        if output_fn is None:
            output_fn = print
        for line in self.render_lines(tree):
            output_fn(line)

    def _rows(self, tree: ResultNode) -> list[_Row]:
        rows = []
        stack = [_Level(tree, 0)]
        while stack:
            level = stack[-1]
            total = level.node.size

            if level.done or not level.pending:
                stack.pop()
                if level.depth == 0 or level.remainder != total:
                    rows.append(_Row(level.depth, SELF_LABEL, level.remainder,
                                     _percentage(level.remainder, total)))
                continue

            child = level.pending.pop()
            rows.append(_Row(level.depth, child.name, child.size, _percentage(child.size, total)))
            level.remainder -= child.size
            level.done = level.remainder < self.min_share * total
            stack.append(_Level(child, level.depth + 1))
        return rows


def print_dependency_size_tree(
    tree: ResultNode,
    share_stats: bool = True,
    output_fn: Callable[[str], None] | None = None,
) -> None:
    """Print a tree produced by ``dependency_size_tree`` with default settings."""
    TreePrinter(share_stats=share_stats).write(tree, output_fn)
