"""Schema for webpack's `--json` compilation report.

Only the fields the analyzer needs are modelled; everything else in the
report is ignored. A report is either a single compilation, which lists its
modules directly, or a multi-compilation that lists one compilation per
bundle under ``children``. The two shapes are told apart once, here.
"""

import json
from typing import Any, Union

from pydantic import BaseModel, Field, ValidationError

from bundle_analyzer.exceptions import MalformedReportError


INVALID_JSON_HELP = (
    "The input is not valid JSON.\n\n"
    "Check that:\n"
    " - You passed the '--json' argument to 'webpack'\n"
    " - There is no extra non-JSON content in the output, such as log messages."
)


class Reason(BaseModel):
    """A reference to the module that caused another module to be included.

    Entry points carry reasons without a module id; those are kept so the
    report validates, and skipped when building the tree.
    """
    module_id: int | str | None = Field(default=None, alias="moduleId")


class Module(BaseModel):
    """A single module in a compilation."""
    id: int | str
    name: str
    size: int
    reasons: list[Reason] = []


class Compilation(BaseModel):
    """Report for one bundle."""
    name: str | None = None
    modules: list[Module]


class MultiCompilation(BaseModel):
    """Report for a webpack config that is an array of bundles."""
    name: str | None = None
    children: list[Compilation]


Stats = Union[Compilation, MultiCompilation]


def parse_stats(data: Any) -> Stats:
    """Validate decoded report data.

    Args:
        data: The decoded JSON report

    Returns:
        A MultiCompilation when the report has no top-level ``modules`` key,
        a Compilation otherwise

    Raises:
        MalformedReportError: If the data does not match the report schema
    """
    if not isinstance(data, dict):
        raise MalformedReportError(
            f"Expected a JSON object at the top level, got {type(data).__name__}",
            raw_input=data,
        )

    model = Compilation if "modules" in data else MultiCompilation
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedReportError(
            f"The input is not a valid webpack report: {e}",
            raw_input=data,
        ) from e


def load_stats(text: str | bytes) -> Stats:
    """Parse the JSON written by ``webpack --json``.

    Args:
        text: The report as text, or as raw bytes in UTF-8, UTF-16 or UTF-32

    Raises:
        MalformedReportError: If the input cannot be decoded, is not JSON or
            is not a webpack report
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedReportError(
            f"{INVALID_JSON_HELP}\n\nThe parsing error was:\n\n  {e}",
            raw_input=text,
        ) from e
    except UnicodeDecodeError as e:
        raise MalformedReportError(
            f"The input is not UTF-8 encoded text: {e}",
            raw_input=text,
        ) from e

    return parse_stats(data)
