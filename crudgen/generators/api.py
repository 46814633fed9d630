"""API client generator (RTK Query endpoints injected into the base API)."""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class ApiGenerator(BaseGenerator):
    part = "api"

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        paths = self.paths(data)
        api_path = await self.emit("api/inject", paths.api(), data, options)
        index_path = await self.emit_raw(
            paths.api_index(), f"export * from './{data.entity_lower}Api.js';\n", options
        )
        return [api_path, index_path]
