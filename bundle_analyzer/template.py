"""Jinja2 template support for text reports."""

import inspect
from pathlib import Path
from typing import Callable

from jinja2 import BaseLoader, Environment, FileSystemLoader


class Template:
    """A Jinja2 template for rendering reports.

    Supports file-based or inline string templates. The template is compiled
    on first render and reused afterwards.

    Args:
        path: Path to a template file (relative to the caller's file).
        template: Inline Jinja2 template string.
        args: Default template variables. Defaults to {}.
        filters: Extra Jinja2 filters, by name.

    Exactly one of ``path`` or ``template`` must be provided.
    """

    def __init__(
        self,
        *,
        path: str | None = None,
        template: str | None = None,
        args: dict | None = None,
        filters: dict[str, Callable] | None = None,
    ):
        if path is not None and template is not None:
            raise ValueError("Specify exactly one of 'path' or 'template', not both.")
        if path is None and template is None:
            raise ValueError("Specify exactly one of 'path' or 'template'.")

        self.args = args or {}
        self.filters = filters or {}
        self._compiled = None

        if path is not None:
            # Resolve relative to caller's file
            caller_frame = inspect.stack()[1]
            caller_dir = Path(caller_frame.filename).resolve().parent
            self._resolved_path = (caller_dir / path).resolve()
            if not self._resolved_path.is_file():
                raise FileNotFoundError(f"Template file not found: {self._resolved_path}")
            self._template_string = None
        else:
            self._resolved_path = None
            self._template_string = template

    def render(self, **args) -> str:
        """Render the template; call-time args override the stored ones."""
        if self._compiled is None:
            self._compiled = self._compile()
        return self._compiled.render(**{**self.args, **args})

    def _compile(self):
        if self._resolved_path is not None:
            env = Environment(loader=FileSystemLoader(str(self._resolved_path.parent)))
        else:
            env = Environment(loader=BaseLoader())
        env.filters.update(self.filters)

        if self._resolved_path is not None:
            return env.get_template(self._resolved_path.name)
        return env.from_string(self._template_string)
