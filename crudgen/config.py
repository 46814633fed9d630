"""crud-gen project configuration.

Typed configuration for a target project.  All settings use Pydantic v2
models so they are validated at construction time and serialised to/from the
camelCase ``crud-gen.config.json`` file without boiler-plate.  A partial file
is merged with the defaults section by section because every nested model
carries its own defaults.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from crudgen.errors import ConfigNotFoundError, SchemaValidationError
from crudgen.utils import dump_json, load_json

CONFIG_FILENAME = "crud-gen.config.json"
CRUD_GEN_DIR = ".crud-gen"
MANIFEST_FILENAME = "manifest.json"
DEFAULT_SCHEMA_REF = "./.crud-gen/schemas/config.schema.json"

# Config key -> bundled template id it overrides.
TEMPLATE_KEYS: dict[str, str] = {
    "api": "api/inject",
    "types": "types/entity",
    "form": "components/form",
    "table": "components/table",
    "grid": "components/grid",
    "details": "components/details",
    "pageList": "pages/list",
    "pageCreate": "pages/create",
    "pageEdit": "pages/edit",
    "pageDetails": "pages/details",
    "hook": "hooks/hook",
    "testApi": "tests/api.test",
    "testComponent": "tests/component.test",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PathsConfig(_CamelModel):
    """Output directory for each artifact kind, relative to the project root."""

    pages: str = "src/pages"
    components: str = "src/components"
    store: str = "src/store"
    hooks: str = "src/hooks"
    types: str = "src/types"
    tests: str = "src/__tests__"

    @model_validator(mode="after")
    def _distinct(self) -> "PathsConfig":
        values = [self.pages, self.components, self.store, self.hooks, self.types, self.tests]
        normalised = [Path(v).as_posix().rstrip("/") for v in values]
        if len(set(normalised)) != len(normalised):
            raise ValueError("output paths must be distinct for every artifact kind")
        return self


class DefaultsConfig(_CamelModel):
    list_type: Literal["table", "grid", "both"] = "table"
    details_view: Literal["page", "modal"] = "page"
    tenant_scoped: bool = True
    generate_tests: bool = True


class ResponseShapeConfig(_CamelModel):
    """Field names of the backend's response envelope."""

    data_field: str = "data"
    status_field: str = "status"
    message_field: str = "message"
    meta_field: str = "meta"


class ErrorShapeConfig(_CamelModel):
    status_field: str = "status"
    message_field: str = "message"


class ApiConfig(_CamelModel):
    response_shape: ResponseShapeConfig = Field(default_factory=ResponseShapeConfig)
    error_shape: ErrorShapeConfig = Field(default_factory=ErrorShapeConfig)


class ComponentsConfig(_CamelModel):
    table_component: str = "DataTable"
    grid_component: str = "CardGrid"
    form_layout: Literal["vertical", "horizontal", "grid"] = "vertical"


class ProjectConfig(_CamelModel):
    """Configuration of one target project.

    Instances are created once per invocation (usually by :func:`load_config`)
    and are treated as read-only for the rest of the run.
    """

    schema_ref: Optional[str] = Field(default=DEFAULT_SCHEMA_REF, alias="$schema")
    project_root: str = "."
    paths: PathsConfig = Field(default_factory=PathsConfig)
    templates: dict[str, str] = Field(default_factory=dict)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    components: ComponentsConfig = Field(default_factory=ComponentsConfig)

    @field_validator("templates")
    @classmethod
    def _known_template_keys(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(value) - set(TEMPLATE_KEYS))
        if unknown:
            raise ValueError(f"unknown template keys: {', '.join(unknown)}")
        return value

    def template_overrides(self, project_root: Path) -> dict[str, Path]:
        """Return ``{template_id: absolute_path}`` for every configured override."""
        return {
            TEMPLATE_KEYS[key]: (project_root / rel).resolve()
            for key, rel in self.templates.items()
        }

    def to_json(self) -> str:
        """Serialise to the on-disk camelCase JSON form."""
        return dump_json(self.model_dump(by_alias=True, exclude_none=True))


# ---------------------------------------------------------------------------
# Loading / saving
# ---------------------------------------------------------------------------


def config_path(project_root: str | Path) -> Path:
    return Path(project_root) / CONFIG_FILENAME


def manifest_path(project_root: str | Path) -> Path:
    return Path(project_root) / CRUD_GEN_DIR / MANIFEST_FILENAME


def parse_config(raw: dict, file_path: str | None = None) -> ProjectConfig:
    """Validate a raw config mapping, converting pydantic errors."""
    try:
        return ProjectConfig.model_validate(raw)
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(e, file_path, context="config") from e


async def load_config(project_root: str | Path) -> ProjectConfig:
    """Load and validate ``crud-gen.config.json`` from *project_root*.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        SchemaValidationError: If the file is not valid JSON or fails validation.
    """
    path = config_path(project_root)
    if not await asyncio.to_thread(path.exists):
        raise ConfigNotFoundError(str(path))

    try:
        raw = await asyncio.to_thread(load_json, path)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass.
        raise SchemaValidationError(f"Invalid JSON: {e}", str(path)) from e
    return parse_config(raw, str(path))


async def save_config(project_root: str | Path, config: ProjectConfig) -> Path:
    """Write *config* to the project root and return the file path."""
    path = config_path(project_root)
    await asyncio.to_thread(path.write_text, config.to_json(), "utf-8")
    return path


async def config_exists(project_root: str | Path) -> bool:
    return await asyncio.to_thread(config_path(project_root).exists)


def default_config() -> ProjectConfig:
    """Return a fresh configuration populated entirely with defaults."""
    return ProjectConfig()
