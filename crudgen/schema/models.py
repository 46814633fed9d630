"""Pydantic v2 models for entity schema documents.

These models are the structural validation boundary: a document that
constructs an :class:`EntitySchema` is structurally valid.  Optional sections
(``tenantScoped``, ``pagination``, ``views``) stay ``None`` when absent so the
normalizer can resolve defaults itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

IDENTIFIER_PATTERN = r"^[A-Za-z_$][A-Za-z0-9_$]*$"
ENTITY_PATTERN = r"^[A-Za-z][A-Za-z0-9]*$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """Declared type of an entity field."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    COMPUTED = "computed"
    RELATION = "relation"


class ModalStyle(str, Enum):
    DRAWER = "drawer"
    DIALOG = "dialog"


# ---------------------------------------------------------------------------
# Field-level models
# ---------------------------------------------------------------------------

class ValidationRules(_CamelModel):
    """Validation rules for a field.  Every rule is optional and combinable."""
    required: bool = False
    type: Optional[Literal["email", "url", "uuid"]] = None
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[str] = None


class RelationConfig(_CamelModel):
    entity: str
    label_field: str
    value_field: str


class SelectOption(_CamelModel):
    label: str
    value: str


class FormUI(_CamelModel):
    exclude: bool = False
    component: Optional[
        Literal["Input", "Select", "AsyncSelect", "Checkbox", "Textarea", "DatePicker", "Hidden"]
    ] = None
    type: Optional[str] = None
    placeholder: Optional[str] = None
    label: Optional[str] = None
    helper_text: Optional[str] = None
    options: Optional[list[SelectOption]] = None
    endpoint: Optional[str] = None


class TableUI(_CamelModel):
    exclude: bool = False
    visible: bool = True
    sortable: bool = False
    filterable: bool = False
    header: Optional[str] = None


class UIConfig(_CamelModel):
    form: FormUI = Field(default_factory=FormUI)
    table: TableUI = Field(default_factory=TableUI)


class FieldSchema(_CamelModel):
    """One field of an entity, in declaration order."""
    name: str = Field(..., pattern=IDENTIFIER_PATTERN)
    type: FieldType
    validation: Optional[ValidationRules] = None
    relation: Optional[RelationConfig] = None
    computation: Optional[str] = None
    ui: UIConfig = Field(default_factory=UIConfig)

    @model_validator(mode="after")
    def _relation_matches_type(self) -> "FieldSchema":
        if self.type is FieldType.RELATION and self.relation is None:
            raise ValueError(f"relation field '{self.name}' requires a 'relation' block")
        if self.type is not FieldType.RELATION and self.relation is not None:
            raise ValueError(f"field '{self.name}' has a 'relation' block but is not a relation")
        return self


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------

class ViewKind(BaseModel):
    """Closed variant for a details or create/edit view.

    ``Page``, ``Modal(style)`` or ``Disabled``.  Raw documents use the
    ``{"type": "modal", "modalType": "drawer"}`` shape, or ``false`` to
    disable a details view; both are accepted on input.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["page", "modal", "disabled"]
    style: Optional[ModalStyle] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_raw(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return {"kind": "modal", "style": "dialog"} if value else {"kind": "disabled"}
        if not isinstance(value, dict):
            return value
        if "type" in value or "modalType" in value:
            extra = set(value) - {"type", "modalType"}
            if extra:
                raise ValueError(f"unexpected view keys: {', '.join(sorted(extra))}")
            value = {"kind": value.get("type"), "style": value.get("modalType")}
        if value.get("kind") == "modal":
            return {"kind": "modal", "style": value.get("style") or "dialog"}
        return {"kind": value.get("kind"), "style": None}

    @classmethod
    def page(cls) -> "ViewKind":
        return cls(kind="page")

    @classmethod
    def modal(cls, style: ModalStyle = ModalStyle.DIALOG) -> "ViewKind":
        return cls(kind="modal", style=style)

    @classmethod
    def disabled(cls) -> "ViewKind":
        return cls(kind="disabled")

    @property
    def is_page(self) -> bool:
        return self.kind == "page"

    @property
    def is_modal(self) -> bool:
        return self.kind == "modal"

    @property
    def is_drawer(self) -> bool:
        return self.kind == "modal" and self.style is ModalStyle.DRAWER

    @property
    def is_dialog(self) -> bool:
        return self.kind == "modal" and self.style is ModalStyle.DIALOG

    @property
    def is_disabled(self) -> bool:
        return self.kind == "disabled"


class ListView(_CamelModel):
    type: Literal["table", "grid", "both"] = "table"
    default_view: Optional[Literal["table", "grid"]] = None
    grid_component: Optional[str] = None

    @model_validator(mode="after")
    def _resolve_default_view(self) -> "ListView":
        if self.default_view is None:
            self.default_view = "grid" if self.type == "grid" else "table"
        elif self.type != "both" and self.default_view != self.type:
            raise ValueError(
                f"defaultView '{self.default_view}' is not available for list type '{self.type}'"
            )
        return self

    @property
    def has_table(self) -> bool:
        return self.type in ("table", "both")

    @property
    def has_grid(self) -> bool:
        return self.type in ("grid", "both")


class Views(_CamelModel):
    """View preferences.  All three keys are required when ``views`` is given."""
    list: ListView
    details: ViewKind
    create_edit: ViewKind = Field(..., alias="create/edit")

    @model_validator(mode="after")
    def _create_edit_enabled(self) -> "Views":
        if self.create_edit.is_disabled:
            raise ValueError("the create/edit view cannot be disabled")
        return self


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------

class Pagination(_CamelModel):
    default_page_size: int = Field(..., ge=1)
    page_size_options: list[int] = Field(..., min_length=1)


class EntitySchema(_CamelModel):
    """Declarative description of one domain entity."""
    schema_ref: Optional[str] = Field(default=None, alias="$schema")
    entity: str = Field(..., pattern=ENTITY_PATTERN)
    plural: str = Field(..., min_length=1)
    route: str = Field(..., min_length=1)
    api_endpoint: str = Field(..., min_length=1)
    tenant_scoped: Optional[bool] = None
    pagination: Optional[Pagination] = None
    views: Optional[Views] = None
    fields: list[FieldSchema] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _unique_field_names(self) -> "EntitySchema":
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"duplicate field name '{field.name}'")
            seen.add(field.name)
        return self
