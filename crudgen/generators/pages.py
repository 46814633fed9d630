"""Page generator: list page, plus create/edit and details pages when routed."""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class PagesGenerator(BaseGenerator):
    part = "pages"

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        paths = self.paths(data)
        produced = [await self.emit("pages/list", paths.page("index.tsx"), data, options)]

        if data.is_page:
            produced.append(await self.emit("pages/create", paths.page("create.tsx"), data, options))
            produced.append(await self.emit("pages/edit", paths.page("[id]/edit.tsx"), data, options))

        if data.details_is_page:
            produced.append(
                await self.emit("pages/details", paths.page("[id]/index.tsx"), data, options)
            )
        return produced
