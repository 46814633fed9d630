"""Data-fetch hook generator."""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class HooksGenerator(BaseGenerator):
    part = "hooks"

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        return [await self.emit("hooks/hook", self.paths(data).hook(), data, options)]
