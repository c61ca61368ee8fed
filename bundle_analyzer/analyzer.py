"""Entry point for turning a webpack report into package size trees."""

import logging
from typing import Any

from bundle_analyzer.formatter import format_bundle
from bundle_analyzer.package_tree import build_tree
from bundle_analyzer.stats import Compilation, MultiCompilation, Stats, parse_stats
from bundle_analyzer.types import BundleResult


logger = logging.getLogger(__name__)


def bundle_size_tree(compilation: Compilation) -> BundleResult:
    """Build and format the size tree of a single bundle."""
    tree = build_tree(compilation)
    return format_bundle(tree, bundle_name=compilation.name)


def dependency_size_tree(stats: Stats | dict[str, Any]) -> list[BundleResult]:
    """Compute package size trees from the output of ``webpack --json``.

    There is one tree per bundle in the compilation, in report order.

    Args:
        stats: A parsed report, or the decoded JSON to validate first

    Returns:
        List of BundleResult roots, one per bundle

    Raises:
        MalformedReportError: If the report does not match the schema
        CircularDependencyError: If a bundle's module reasons form a cycle

    Example:
        >>> trees = dependency_size_tree({"modules": []})
        >>> trees[0].size
        0
    """
    if not isinstance(stats, (Compilation, MultiCompilation)):
        stats = parse_stats(stats)

    if isinstance(stats, MultiCompilation):
        compilations = stats.children
    else:
        compilations = [stats]

    logger.debug("Analyzing %d bundle(s)", len(compilations))
    return [bundle_size_tree(compilation) for compilation in compilations]
