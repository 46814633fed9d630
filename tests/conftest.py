"""Shared pytest fixtures for the crud-gen test suite.

Provides reusable fixtures for:
- Temporary target projects (with package.json and config)
- Sample entity documents and validated schemas
- Ledgers with a deterministic clock
- A renderer and a pass-through formatter
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from crudgen.config import ProjectConfig, default_config
from crudgen.generators import NullFormatter, TemplateRenderer
from crudgen.ledger import GenerationLedger
from crudgen.schema import EntitySchema, parse_entity


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty Node.js project directory."""
    root = tmp_path / "web-app"
    root.mkdir()
    (root / "package.json").write_text('{"name": "web-app"}\n', encoding="utf-8")
    yield root


@pytest.fixture
def config() -> ProjectConfig:
    return default_config()


@pytest.fixture
def configured_project(project_root: Path, config: ProjectConfig) -> Path:
    """A project with ``crud-gen.config.json`` already written."""
    (project_root / "crud-gen.config.json").write_text(config.to_json(), encoding="utf-8")
    return project_root


# ---------------------------------------------------------------------------
# Entity documents
# ---------------------------------------------------------------------------

PRODUCT_ENTITY: dict[str, Any] = {
    "entity": "Product",
    "plural": "Products",
    "route": "products",
    "apiEndpoint": "/api/v1/products",
    "fields": [
        {"name": "id", "type": "string"},
        {"name": "name", "type": "string", "validation": {"required": True}},
    ],
}

ORDER_ENTITY: dict[str, Any] = {
    "$schema": "../.crud-gen/schemas/entity.schema.json",
    "entity": "OrderItem",
    "plural": "OrderItems",
    "route": "order-items",
    "apiEndpoint": "/api/v1/order-items",
    "tenantScoped": False,
    "pagination": {"defaultPageSize": 25, "pageSizeOptions": [25, 50]},
    "views": {
        "list": {"type": "both", "defaultView": "grid"},
        "details": {"type": "page"},
        "create/edit": {"type": "page"},
    },
    "fields": [
        {"name": "id", "type": "string", "ui": {"form": {"exclude": True}, "table": {"exclude": True}}},
        {
            "name": "email",
            "type": "string",
            "validation": {"required": True, "type": "email", "maxLength": 50},
            "ui": {"form": {"label": "Contact email", "placeholder": "you@example.com"}},
        },
        {"name": "quantity", "type": "number", "validation": {"min": 1, "max": 99}},
        {"name": "active", "type": "boolean", "ui": {"table": {"sortable": True}}},
        {
            "name": "productId",
            "type": "relation",
            "relation": {"entity": "Product", "labelField": "name", "valueField": "id"},
            "ui": {"form": {"endpoint": "/api/v1/products"}},
        },
        {"name": "total", "type": "computed", "computation": "quantity * price"},
        {"name": "internalNote", "type": "string", "ui": {"table": {"visible": False}}},
        {"name": "createdAt", "type": "date", "ui": {"form": {"exclude": True}}},
    ],
}


@pytest.fixture
def product_raw() -> dict[str, Any]:
    return copy.deepcopy(PRODUCT_ENTITY)


@pytest.fixture
def order_raw() -> dict[str, Any]:
    return copy.deepcopy(ORDER_ENTITY)


@pytest.fixture
def product_schema(product_raw: dict[str, Any]) -> EntitySchema:
    return parse_entity(product_raw)


@pytest.fixture
def order_schema(order_raw: dict[str, Any]) -> EntitySchema:
    return parse_entity(order_raw)


@pytest.fixture
def write_entity(tmp_path: Path) -> Callable[[dict[str, Any], str], Path]:
    """Write an entity document to disk and return its path."""

    def _write(raw: dict[str, Any], name: str = "entity.json") -> Path:
        path = tmp_path / "schemas" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(raw, indent=2), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Ledger & rendering
# ---------------------------------------------------------------------------

class FakeClock:
    """Deterministic timestamp source; call :meth:`advance` to move time."""

    def __init__(self) -> None:
        self.tick = 0

    def __call__(self) -> str:
        return f"2026-01-15T10:{self.tick:02d}:00+00:00"

    def advance(self) -> None:
        self.tick += 1


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(project_root: Path, clock: FakeClock) -> GenerationLedger:
    return GenerationLedger(project_root, clock=clock)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def formatter() -> NullFormatter:
    return NullFormatter()
