"""Per-part code generators.

Each generator renders one part of an entity's front-end code (API client,
types, components, pages, hook, tests) and writes it through the ledger.
"""

from crudgen.generators.api import ApiGenerator
from crudgen.generators.base import (
    ALL_PARTS,
    ArtifactPaths,
    BaseGenerator,
    GenerateOptions,
    GenerationPart,
)
from crudgen.generators.components import ComponentsGenerator
from crudgen.generators.formatter import NullFormatter, PrettierFormatter
from crudgen.generators.hooks import HooksGenerator
from crudgen.generators.pages import PagesGenerator
from crudgen.generators.templates import DEFAULT_HELPERS, TemplateRenderer
from crudgen.generators.tests import TestsGenerator
from crudgen.generators.types import TypesGenerator

GENERATORS: dict[str, type[BaseGenerator]] = {
    "api": ApiGenerator,
    "types": TypesGenerator,
    "components": ComponentsGenerator,
    "pages": PagesGenerator,
    "hooks": HooksGenerator,
    "tests": TestsGenerator,
}

__all__ = [
    "ALL_PARTS",
    "ApiGenerator",
    "ArtifactPaths",
    "BaseGenerator",
    "ComponentsGenerator",
    "DEFAULT_HELPERS",
    "GENERATORS",
    "GenerateOptions",
    "GenerationPart",
    "HooksGenerator",
    "NullFormatter",
    "PagesGenerator",
    "PrettierFormatter",
    "TemplateRenderer",
    "TestsGenerator",
    "TypesGenerator",
]
