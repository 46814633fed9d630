"""Entity schema models, loading and normalization."""

from crudgen.schema.loader import load_entity, parse_entity
from crudgen.schema.models import EntitySchema, FieldSchema, FieldType, ModalStyle, ViewKind, Views
from crudgen.schema.normalizer import (
    CanonicalField,
    CanonicalTemplateData,
    ClauseKind,
    SemanticType,
    ValidationClause,
    normalize,
)

__all__ = [
    "CanonicalField",
    "CanonicalTemplateData",
    "ClauseKind",
    "EntitySchema",
    "FieldSchema",
    "FieldType",
    "ModalStyle",
    "SemanticType",
    "ValidationClause",
    "ViewKind",
    "Views",
    "load_entity",
    "normalize",
    "parse_entity",
]
