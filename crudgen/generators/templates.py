"""Jinja2 template rendering for generated source files.

Provides the TemplateRenderer class which loads ``.j2`` templates from the
bundled ``crudgen/generators/templates/`` directory (or from per-project
override files) and renders them with canonical template data.

Helpers are not registered globally.  :data:`DEFAULT_HELPERS` is an
immutable name -> function mapping; each renderer installs the helper set it
was given into its own environment as both filters and globals, so output is
a pure function of (template, data, helpers).
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from crudgen.errors import TemplateRenderError
from crudgen.schema.normalizer import CanonicalTemplateData, default_value_literal, ts_type
from crudgen.utils import camel_case, humanize, kebab_case, pascal_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _json_helper(value: Any) -> str:
    if hasattr(value, "model_dump"):
        value = value.model_dump(by_alias=True, mode="json")
    return json.dumps(value, indent=2)


def _yup_validation_helper(field: Any) -> str:
    return field.yup_validation


DEFAULT_HELPERS: Mapping[str, Callable[..., Any]] = MappingProxyType({
    "camel_case": camel_case,
    "pascal_case": pascal_case,
    "kebab_case": kebab_case,
    "humanize": humanize,
    "ts_type": ts_type,
    "default_value": default_value_literal,
    "yup_validation": _yup_validation_helper,
    "json": _json_helper,
})


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for entity code generation.

    Templates are addressed by id, a slash path without the ``.j2`` suffix
    (e.g. ``"components/form"``).  An override maps an id to a template file
    outside the bundled directory.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        helpers: Mapping[str, Callable[..., Any]] = DEFAULT_HELPERS,
        overrides: Mapping[str, Path] | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.helpers = MappingProxyType(dict(helpers))
        self.overrides = MappingProxyType(dict(overrides or {}))
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters.update(self.helpers)
        self.env.globals.update(self.helpers)

    def render(self, template_id: str, data: CanonicalTemplateData) -> str:
        """Render template *template_id* with *data*.

        Raises:
            TemplateRenderError: If the template is missing or fails to render.
        """
        try:
            template = self._load(template_id)
            return template.render(**data.context())
        except TemplateNotFound as e:
            raise TemplateRenderError(template_id, f"template not found ({e.name})") from e
        except TemplateError as e:
            raise TemplateRenderError(template_id, str(e)) from e

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        try:
            return self.env.from_string(template_string).render(**context)
        except TemplateError as e:
            raise TemplateRenderError("<string>", str(e)) from e

    def list_templates(self) -> list[str]:
        """Return the sorted ids of every bundled template."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()[: -len(TEMPLATE_SUFFIX)]
            for p in self.template_dir.rglob(f"*{TEMPLATE_SUFFIX}")
        )

    def _load(self, template_id: str):
        override = self.overrides.get(template_id)
        if override is not None:
            try:
                source = override.read_text(encoding="utf-8")
            except OSError as e:
                raise TemplateRenderError(
                    template_id, f"cannot read override {override}: {e}"
                ) from e
            return self.env.from_string(source)
        return self.env.get_template(f"{template_id}{TEMPLATE_SUFFIX}")
