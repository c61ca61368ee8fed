"""bundle_analyzer - package size attribution for webpack bundles.

Given the module graph in a ``webpack --json`` report, bundle_analyzer works
out which npm package pulled each module into the bundle and how many bytes
every package, together with the packages only it depends on, contributes.
"""

from bundle_analyzer._version import __version__
from bundle_analyzer.ancestor import sole_ancestor
from bundle_analyzer.analyzer import bundle_size_tree, dependency_size_tree
from bundle_analyzer.exceptions import AnalyzerError, CircularDependencyError, MalformedReportError
from bundle_analyzer.formatter import format_bundle, format_node
from bundle_analyzer.package_tree import INTERNAL_PACKAGE, PackageTree, build_tree, package_name
from bundle_analyzer.printer import TreePrinter, format_bytes, print_dependency_size_tree
from bundle_analyzer.stats import Compilation, Module, MultiCompilation, Reason, load_stats, parse_stats
from bundle_analyzer.types import BundleResult, ResultNode

__all__ = [
    "__version__",
    "dependency_size_tree",
    "bundle_size_tree",
    "build_tree",
    "package_name",
    "PackageTree",
    "INTERNAL_PACKAGE",
    "sole_ancestor",
    "format_node",
    "format_bundle",
    "ResultNode",
    "BundleResult",
    "load_stats",
    "parse_stats",
    "Compilation",
    "MultiCompilation",
    "Module",
    "Reason",
    "TreePrinter",
    "print_dependency_size_tree",
    "format_bytes",
    "AnalyzerError",
    "MalformedReportError",
    "CircularDependencyError",
]
