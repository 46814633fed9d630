"""TypeScript interface generator."""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class TypesGenerator(BaseGenerator):
    part = "types"

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        return [await self.emit("types/entity", self.paths(data).types(), data, options)]
