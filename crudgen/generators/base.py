"""Shared generator machinery: options, artifact paths, render-and-write.

Artifact paths are deterministic functions of the entity and the configured
output directories.  Because the six output roots are validated to be
distinct and each kind uses its own file name, no two artifacts collide.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Protocol

from crudgen.config import PathsConfig, ProjectConfig
from crudgen.ledger import GenerationLedger
from crudgen.schema.normalizer import CanonicalTemplateData

from .templates import TemplateRenderer

GenerationPart = Literal["api", "types", "components", "pages", "hooks", "tests"]
ALL_PARTS: tuple[GenerationPart, ...] = ("api", "types", "components", "pages", "hooks", "tests")


@dataclass
class GenerateOptions:
    """Per-run switches chosen on the command line."""

    force: bool = False
    only: list[GenerationPart] | None = None
    skip: list[GenerationPart] = field(default_factory=list)
    prune: bool = False

    def selected_parts(self) -> list[GenerationPart]:
        """Parts to run, always in the fixed generation order."""
        wanted = set(self.only) if self.only else set(ALL_PARTS)
        return [p for p in ALL_PARTS if p in wanted and p not in self.skip]


class Formatter(Protocol):
    async def format(self, code: str, parser: str = "typescript") -> str: ...


def _join(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


class ArtifactPaths:
    """Project-relative output paths for one entity."""

    def __init__(self, paths: PathsConfig, data: CanonicalTemplateData) -> None:
        self._paths = paths
        self.entity = data.entity
        self.lower = data.entity_lower
        self.route = data.route

    def api(self) -> str:
        return _join(self._paths.store, self.lower, f"{self.lower}Api.ts")

    def api_index(self) -> str:
        return _join(self._paths.store, self.lower, "index.ts")

    def types(self) -> str:
        return _join(self._paths.types, f"{self.lower}.ts")

    def component(self, kind: str) -> str:
        return _join(self._paths.components, self.lower, f"{self.entity}{kind}.tsx")

    def component_index(self) -> str:
        return _join(self._paths.components, self.lower, "index.ts")

    def page(self, sub_path: str) -> str:
        return _join(self._paths.pages, self.route, sub_path)

    def hook(self) -> str:
        return _join(self._paths.hooks, f"use{self.entity}.ts")

    def api_test(self) -> str:
        return _join(self._paths.tests, "store", self.lower, f"{self.lower}Api.test.ts")

    def component_test(self) -> str:
        return _join(self._paths.tests, "components", self.lower, f"{self.entity}Form.test.tsx")


class BaseGenerator:
    """Base class for the per-part generators.

    Subclasses set :attr:`part` and implement :meth:`generate`, which returns
    the project-relative paths the part produces (written or left in place).
    """

    part: ClassVar[GenerationPart]

    def __init__(
        self,
        ledger: GenerationLedger,
        renderer: TemplateRenderer,
        config: ProjectConfig,
        formatter: Formatter,
    ) -> None:
        self.ledger = ledger
        self.renderer = renderer
        self.config = config
        self.formatter = formatter

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        raise NotImplementedError

    def paths(self, data: CanonicalTemplateData) -> ArtifactPaths:
        return ArtifactPaths(self.config.paths, data)

    async def emit(
        self,
        template_id: str,
        relative_path: str,
        data: CanonicalTemplateData,
        options: GenerateOptions,
        parser: str = "typescript",
    ) -> str:
        """Render, format and write one file; return its path."""
        content = self.renderer.render(template_id, data)
        formatted = await self.formatter.format(content, parser)
        await self.ledger.write(relative_path, formatted, options.force)
        return relative_path

    async def emit_raw(self, relative_path: str, content: str, options: GenerateOptions) -> str:
        """Write a file that needs neither templating nor formatting."""
        await self.ledger.write(relative_path, content, options.force)
        return relative_path
