"""Entity schema loading with validation.

Loads an entity document (JSON or YAML) and validates it with the pydantic
models, converting failures into :class:`SchemaValidationError` with one
readable line per problem.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from crudgen.errors import SchemaValidationError
from crudgen.utils import load_document

from .models import EntitySchema


def parse_entity(raw: dict[str, Any], file_path: str | None = None) -> EntitySchema:
    """Validate a raw entity mapping."""
    try:
        return EntitySchema.model_validate(raw)
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(e, file_path) from e


async def load_entity(path: str | Path) -> EntitySchema:
    """Load and validate an entity document from disk.

    Raises:
        SchemaValidationError: If the file is missing, unparsable or invalid.
    """
    file_path = Path(path)
    if not await asyncio.to_thread(file_path.exists):
        raise SchemaValidationError("File not found", str(file_path))

    try:
        raw = await asyncio.to_thread(load_document, file_path)
    except yaml.YAMLError as e:
        raise SchemaValidationError(f"Invalid YAML syntax: {e}", str(file_path)) from e
    except ValueError as e:
        raise SchemaValidationError(f"Invalid document: {e}", str(file_path)) from e
    return parse_entity(raw, str(file_path))
