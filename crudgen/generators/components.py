"""UI component generator: form, table, grid and details components.

Which components are produced depends on the resolved views: the table and
grid follow the list view type, the details component is skipped when the
details view is disabled.  The barrel ``index.ts`` is written last and
exports exactly the components produced by this run.
"""

from __future__ import annotations

from crudgen.schema.normalizer import CanonicalTemplateData

from .base import BaseGenerator, GenerateOptions


class ComponentsGenerator(BaseGenerator):
    part = "components"

    def component_kinds(self, data: CanonicalTemplateData) -> list[str]:
        """Component kinds (``Form``, ``Table``, ...) for *data*, in output order."""
        kinds = ["Form"]
        if data.views.list.has_table:
            kinds.append("Table")
        if data.views.list.has_grid:
            kinds.append("Grid")
        if data.details_enabled:
            kinds.append("Details")
        return kinds

    async def generate(self, data: CanonicalTemplateData, options: GenerateOptions) -> list[str]:
        paths = self.paths(data)
        produced: list[str] = []
        kinds = self.component_kinds(data)

        for kind in kinds:
            template_id = f"components/{kind.lower()}"
            produced.append(await self.emit(template_id, paths.component(kind), data, options))

        exports = "".join(
            f"export {{ {data.entity}{kind} }} from './{data.entity}{kind}.js';\n"
            for kind in kinds
        )
        produced.append(await self.emit_raw(paths.component_index(), exports, options))
        return produced
