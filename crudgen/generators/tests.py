"""Test file generator (API slice test and form component test)."""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class TestsGenerator(BaseGenerator):
    part = "tests"
    __test__ = False  # not a pytest class

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        if not self.config.defaults.generate_tests:
            return []

        paths = self.paths(data)
        return [
            await self.emit("tests/api.test", paths.api_test(), data, options),
            await self.emit("tests/component.test", paths.component_test(), data, options),
        ]
