"""Generation run orchestrator.

One run generates the code for a single entity:

1. NORMALIZE -- resolve the schema into canonical template data.  Errors here
   abort before anything is written.
2. GENERATE  -- run the selected parts in fixed order (api, types,
   components, pages, hooks, tests), each writing through the ledger.
3. COMMIT    -- record the run's files in the manifest.

Any failure in steps 2-3 rolls back every file written by the run and is
re-raised as :class:`GenerationError`; the manifest is never partially
committed.  Cancellation and Ctrl-C also roll back, then propagate unchanged.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from crudgen.config import ProjectConfig
from crudgen.errors import GenerationError
from crudgen.generators import GENERATORS, GenerateOptions, PrettierFormatter, TemplateRenderer
from crudgen.generators.base import BaseGenerator, Formatter
from crudgen.ledger import GenerationLedger
from crudgen.schema.models import EntitySchema
from crudgen.schema.normalizer import CanonicalTemplateData, normalize
from crudgen.utils import print_dim


@dataclass
class GenerationResult:
    """Outcome of a successful run."""

    entity: str
    files: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    pruned: list[str] = field(default_factory=list)
    parts: list[str] = field(default_factory=list)


class GenerationPipeline:
    """Runs every generation step for one entity against one project.

    Attributes:
        project_root: Target project directory.
        config: Project configuration, read-only for the run.
        ledger: Tracks written files and owns the manifest.
    """

    def __init__(
        self,
        project_root: str | Path,
        config: ProjectConfig,
        *,
        renderer: TemplateRenderer | None = None,
        formatter: Formatter | None = None,
        ledger: GenerationLedger | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config
        self.renderer = renderer or TemplateRenderer(
            overrides=config.template_overrides(self.project_root)
        )
        self.formatter = formatter or PrettierFormatter(self.project_root)
        self.ledger = ledger or GenerationLedger(self.project_root)
        self.generators: dict[str, BaseGenerator] = {
            part: cls(self.ledger, self.renderer, self.config, self.formatter)
            for part, cls in GENERATORS.items()
        }

    def prepare(self, schema: EntitySchema) -> CanonicalTemplateData:
        return normalize(schema, self.config)

    async def run(self, schema: EntitySchema, options: GenerateOptions) -> GenerationResult:
        """Generate, then commit; roll back and raise on any failure."""
        data = self.prepare(schema)
        parts = options.selected_parts()

        await self.ledger.begin()
        try:
            previous = await self.ledger.entry(data.entity)
            produced: list[str] = []
            for part in parts:
                produced.extend(await self.generators[part].generate(data, options))

            files = self._manifest_files(
                previous.files if previous else [], produced, partial=len(parts) < len(GENERATORS)
            )
            pruned = await self.ledger.commit(data.entity, files, prune=options.prune)
        except (asyncio.CancelledError, KeyboardInterrupt):
            await self.ledger.rollback()
            raise
        except Exception as e:
            await self.ledger.rollback()
            raise GenerationError(data.entity, str(e)) from e

        for path in pruned:
            print_dim(f"Pruned stale file {path}")

        return GenerationResult(
            entity=data.entity,
            files=files,
            skipped=self.ledger.skipped,
            pruned=pruned,
            parts=list(parts),
        )

    def _manifest_files(
        self, previous_files: list[str], produced: list[str], *, partial: bool
    ) -> list[str]:
        """Build the entity's file list for the manifest.

        Files written this run come first, then files this run produced but
        left untouched because they already existed and the manifest already
        owned them.  A partial run (``--only`` / ``--skip``) also keeps the
        previously owned files of the parts it did not run.
        """
        written = self.ledger.files
        owned = [p for p in previous_files if p not in written]
        produced_set = set(produced)
        if partial:
            return written + owned
        return written + [p for p in owned if p in produced_set]
