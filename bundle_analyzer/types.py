"""Result types returned by the analyzer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ResultNode(BaseModel):
    """One package at one position in a finished size tree.

    Attributes:
        name: Package name, or "(internal)" for project code and the root
        size: Cumulative size in bytes, including every nested package
        total_size: Size in bytes of everything this package pulls in,
            including shared packages nested under a common ancestor
        children: Packages included only through this one, in discovery order
        used_by: Names of the packages whose modules pulled this one in
        modules: Names of the modules attributed directly to this position
    """
    name: str
    size: int = 0
    total_size: int = 0
    children: list[ResultNode] = []
    used_by: list[str] = []
    modules: list[str] = []

    def to_dict(self) -> dict[str, Any]:
        """Same data as ``model_dump()``, built without recursion.

        Use this for trees nested deeper than pydantic's serializer allows.
        """
        result: dict[str, Any] = {}
        stack = [(self, result)]
        while stack:
            node, out = stack.pop()
            for name in type(node).model_fields:
                value = getattr(node, name)
                if name == "children":
                    value = [{} for _ in node.children]
                    stack.extend(zip(node.children, value))
                elif isinstance(value, list):
                    value = list(value)
                out[name] = value
        return result


class BundleResult(ResultNode):
    """Root of the size tree for a single bundle.

    Attributes:
        bundle_name: The compilation's name, when the report has one
    """
    bundle_name: str | None = None
