"""Schema normalizer: entity schema -> canonical template data.

Resolves entity-level defaults (tenant scoping, pagination, views) and
derives per-field attributes (form/table inclusion, semantic and TypeScript
types, default literals, ordered validation clauses).  Every generator
consumes the resulting :class:`CanonicalTemplateData` read-only.

:func:`normalize` is a pure function of its two inputs: no clock, no
randomness, no I/O.  Normalizing the same inputs twice yields identical data.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from crudgen.config import ComponentsConfig, ErrorShapeConfig, ProjectConfig, ResponseShapeConfig
from crudgen.utils import camel_case, humanize, kebab_case

from .models import (
    EntitySchema,
    FieldSchema,
    FieldType,
    ListView,
    ModalStyle,
    Pagination,
    RelationConfig,
    UIConfig,
    ValidationRules,
    ViewKind,
    Views,
)

# ---------------------------------------------------------------------------
# Fixed defaults
# ---------------------------------------------------------------------------

DEFAULT_PAGE_SIZE = 20
DEFAULT_PAGE_SIZE_OPTIONS = (10, 20, 50, 100)


def default_pagination() -> Pagination:
    return Pagination(
        default_page_size=DEFAULT_PAGE_SIZE,
        page_size_options=list(DEFAULT_PAGE_SIZE_OPTIONS),
    )


def fallback_views() -> Views:
    """Views used when a schema has no ``views`` object at all."""
    return Views(
        list=ListView(type="table", default_view="table"),
        details=ViewKind.modal(ModalStyle.DIALOG),
        create_edit=ViewKind.modal(ModalStyle.DIALOG),
    )


class SemanticType(str, Enum):
    """Language-neutral value type of a field."""
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    IDENTIFIER = "identifier"


_SEMANTIC_TYPES: dict[FieldType, SemanticType] = {
    FieldType.STRING: SemanticType.TEXT,
    FieldType.NUMBER: SemanticType.NUMBER,
    FieldType.BOOLEAN: SemanticType.BOOLEAN,
    FieldType.DATE: SemanticType.DATETIME,
    FieldType.RELATION: SemanticType.IDENTIFIER,
    FieldType.COMPUTED: SemanticType.TEXT,
}

_TS_TYPES: dict[FieldType, str] = {
    FieldType.STRING: "string",
    FieldType.NUMBER: "number",
    FieldType.BOOLEAN: "boolean",
    FieldType.DATE: "Date",
    FieldType.RELATION: "string",
    FieldType.COMPUTED: "string",
}

_DEFAULT_LITERALS: dict[FieldType, str] = {
    FieldType.STRING: "''",
    FieldType.NUMBER: "0",
    FieldType.BOOLEAN: "false",
    FieldType.DATE: "new Date()",
    FieldType.RELATION: "''",
    FieldType.COMPUTED: "''",
}

_YUP_BASE: dict[FieldType, str] = {
    FieldType.NUMBER: "number",
    FieldType.BOOLEAN: "boolean",
    FieldType.DATE: "date",
}


def ts_type(field_type: Union[FieldType, str]) -> str:
    """TypeScript type for a declared field type (``any`` when unknown)."""
    try:
        return _TS_TYPES[FieldType(field_type)]
    except ValueError:
        return "any"


def default_value_literal(field_type: Union[FieldType, str]) -> str:
    """TypeScript literal used as a form's initial value."""
    try:
        return _DEFAULT_LITERALS[FieldType(field_type)]
    except ValueError:
        return "''"


# ---------------------------------------------------------------------------
# Validation clauses
# ---------------------------------------------------------------------------

class ClauseKind(str, Enum):
    REQUIRED = "required"
    EMAIL = "email"
    URL = "url"
    UUID = "uuid"
    MIN = "min"
    MAX = "max"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"


class ValidationClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ClauseKind
    message: str
    param: Optional[Union[int, float, str]] = None


_FORMAT_CLAUSES: dict[str, tuple[ClauseKind, str]] = {
    "email": (ClauseKind.EMAIL, "Invalid email address"),
    "url": (ClauseKind.URL, "Invalid URL"),
    "uuid": (ClauseKind.UUID, "Invalid UUID"),
}


def validation_clauses(field: FieldSchema) -> list[ValidationClause]:
    """Derive the ordered validation clauses for *field*.

    The order is fixed: required, format (email/url/uuid), min, max,
    minLength, maxLength, pattern.  Templates emit clauses in this sequence.
    """
    rules: Optional[ValidationRules] = field.validation
    if rules is None:
        return []

    label = field.ui.form.label or field.name
    clauses: list[ValidationClause] = []

    if rules.required:
        clauses.append(ValidationClause(kind=ClauseKind.REQUIRED, message=f"{label} is required"))
    if rules.type in _FORMAT_CLAUSES:
        kind, message = _FORMAT_CLAUSES[rules.type]
        clauses.append(ValidationClause(kind=kind, message=message))
    if rules.min is not None:
        clauses.append(ValidationClause(
            kind=ClauseKind.MIN, message=f"Must be at least {rules.min}", param=rules.min,
        ))
    if rules.max is not None:
        clauses.append(ValidationClause(
            kind=ClauseKind.MAX, message=f"Must be at most {rules.max}", param=rules.max,
        ))
    if rules.min_length is not None:
        clauses.append(ValidationClause(
            kind=ClauseKind.MIN_LENGTH,
            message=f"Must be at least {rules.min_length} characters",
            param=rules.min_length,
        ))
    if rules.max_length is not None:
        clauses.append(ValidationClause(
            kind=ClauseKind.MAX_LENGTH,
            message=f"Must be at most {rules.max_length} characters",
            param=rules.max_length,
        ))
    if rules.pattern:
        clauses.append(ValidationClause(
            kind=ClauseKind.PATTERN, message="Invalid format", param=rules.pattern,
        ))
    return clauses


def _js_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


# A slash is unescaped when preceded by an even number of backslashes.
_UNESCAPED_SLASH = re.compile(r"(?<!\\)((?:\\\\)*)/")


def _regex_literal_body(pattern: str) -> str:
    """Escape the slashes of *pattern* for use inside a JS regex literal."""
    return _UNESCAPED_SLASH.sub(r"\1\\/", pattern)


def yup_schema(field_type: Union[FieldType, str], clauses: list[ValidationClause]) -> str:
    """Render validation clauses as a Yup schema expression."""
    try:
        base = _YUP_BASE.get(FieldType(field_type), "string")
    except ValueError:
        base = "string"

    schema = f"yup.{base}()"
    for clause in clauses:
        message = _js_string(clause.message)
        if clause.kind in (ClauseKind.REQUIRED, ClauseKind.EMAIL, ClauseKind.URL, ClauseKind.UUID):
            schema += f".{clause.kind.value}({message})"
        elif clause.kind in (ClauseKind.MIN, ClauseKind.MIN_LENGTH):
            schema += f".min({clause.param}, {message})"
        elif clause.kind in (ClauseKind.MAX, ClauseKind.MAX_LENGTH):
            schema += f".max({clause.param}, {message})"
        elif clause.kind is ClauseKind.PATTERN:
            pattern = _regex_literal_body(str(clause.param))
            schema += f".matches(/{pattern}/, {message})"
    return schema


# ---------------------------------------------------------------------------
# Canonical data
# ---------------------------------------------------------------------------

class CanonicalField(BaseModel):
    """A field with every derived attribute resolved."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: FieldType
    label: str
    header: str
    semantic_type: SemanticType
    ts_type: str
    default_value_literal: str
    validation_descriptor: list[ValidationClause]
    yup_validation: str
    required: bool
    include_in_form: bool
    include_in_table: bool
    is_relation: bool
    is_computed: bool
    form_component: str
    validation: Optional[ValidationRules] = None
    relation: Optional[RelationConfig] = None
    computation: Optional[str] = None
    ui: UIConfig


class CanonicalTemplateData(BaseModel):
    """Fully resolved view of one entity, ready for rendering."""

    model_config = ConfigDict(frozen=True)

    entity: str
    entity_lower: str
    entity_kebab: str
    plural: str
    route: str
    api_endpoint: str
    tenant_scoped: bool
    pagination: Pagination
    views: Views
    fields: list[CanonicalField]
    form_fields: list[CanonicalField]
    table_fields: list[CanonicalField]
    computed_fields: list[CanonicalField]
    relation_fields: list[CanonicalField]
    has_relations: bool
    is_modal: bool
    is_drawer: bool
    is_page: bool
    details_enabled: bool
    details_is_page: bool
    details_is_modal: bool
    details_is_drawer: bool
    response_shape: ResponseShapeConfig
    error_shape: ErrorShapeConfig
    components: ComponentsConfig

    def context(self) -> dict:
        """Top-level template variables (nested models stay as objects)."""
        return dict(self)


def include_in_form(field: FieldSchema) -> bool:
    return (
        not field.ui.form.exclude
        and field.type is not FieldType.COMPUTED
        and field.name != "id"
    )


def include_in_table(field: FieldSchema) -> bool:
    return (
        field.ui.table.visible is not False
        and not field.ui.table.exclude
        and field.name != "id"
    )


def _form_component(field: FieldSchema) -> str:
    if field.ui.form.component:
        return field.ui.form.component
    if field.type is FieldType.BOOLEAN:
        return "Checkbox"
    if field.type is FieldType.DATE:
        return "DatePicker"
    if field.type is FieldType.RELATION:
        return "AsyncSelect" if field.ui.form.endpoint else "Select"
    if field.ui.form.options:
        return "Select"
    return "Input"


def normalize_field(field: FieldSchema) -> CanonicalField:
    clauses = validation_clauses(field)
    label = field.ui.form.label or humanize(field.name)
    return CanonicalField(
        name=field.name,
        type=field.type,
        label=label,
        header=field.ui.table.header or label,
        semantic_type=_SEMANTIC_TYPES[field.type],
        ts_type=_TS_TYPES[field.type],
        default_value_literal=_DEFAULT_LITERALS[field.type],
        validation_descriptor=clauses,
        yup_validation=yup_schema(field.type, clauses),
        required=bool(field.validation and field.validation.required),
        include_in_form=include_in_form(field),
        include_in_table=include_in_table(field),
        is_relation=field.type is FieldType.RELATION and field.relation is not None,
        is_computed=field.type is FieldType.COMPUTED,
        form_component=_form_component(field),
        validation=field.validation,
        relation=field.relation,
        computation=field.computation,
        ui=field.ui,
    )


def normalize(schema: EntitySchema, config: ProjectConfig) -> CanonicalTemplateData:
    """Resolve *schema* against *config* into canonical template data.

    ``views`` falls back as a whole: when the schema has no ``views`` object
    the fixed fallback is used, otherwise the schema's views are used as-is.
    """
    fields = [normalize_field(f) for f in schema.fields]
    views = schema.views if schema.views is not None else fallback_views()
    tenant_scoped = (
        schema.tenant_scoped
        if schema.tenant_scoped is not None
        else config.defaults.tenant_scoped
    )
    pagination = schema.pagination if schema.pagination is not None else default_pagination()

    create_edit = views.create_edit
    details = views.details

    return CanonicalTemplateData(
        entity=schema.entity,
        entity_lower=camel_case(schema.entity),
        entity_kebab=kebab_case(schema.entity),
        plural=schema.plural,
        route=schema.route,
        api_endpoint=schema.api_endpoint,
        tenant_scoped=tenant_scoped,
        pagination=pagination,
        views=views,
        fields=fields,
        form_fields=[f for f in fields if f.include_in_form],
        table_fields=[f for f in fields if f.include_in_table],
        computed_fields=[f for f in fields if f.is_computed],
        relation_fields=[f for f in fields if f.is_relation],
        has_relations=any(f.type is FieldType.RELATION for f in schema.fields),
        is_modal=create_edit.is_modal,
        is_drawer=create_edit.is_drawer,
        is_page=create_edit.is_page,
        details_enabled=not details.is_disabled,
        details_is_page=details.is_page,
        details_is_modal=details.is_modal,
        details_is_drawer=details.is_drawer,
        response_shape=config.api.response_shape,
        error_shape=config.api.error_shape,
        components=config.components,
    )
