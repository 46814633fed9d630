"""Generation ledger: tracked writes, rollback and the durable manifest.

The ledger records every file written during one generation run so the run
can be reverted as a whole, and persists a manifest
(``.crud-gen/manifest.json``) mapping entity name to the files generated for
it.  Writes follow a "skip if exists unless forced" policy.

All file-system work is done in worker threads via :func:`asyncio.to_thread`;
calls are awaited one at a time by a single run, so the in-memory run list
needs no locking.  The manifest itself is not locked: two concurrent
invocations against the same project race, unless the run called
:meth:`GenerationLedger.begin`, in which case :meth:`GenerationLedger.commit`
refuses to overwrite a manifest that changed underneath it.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import os
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crudgen.config import manifest_path
from crudgen.errors import ManifestConflictError, SchemaValidationError
from crudgen.utils import dump_json, print_dim, print_error, print_success, print_warning


class ManifestEntry(BaseModel):
    """Files generated for one entity plus generation timestamps."""

    model_config = ConfigDict(populate_by_name=True)

    entity: str
    files: list[str] = Field(default_factory=list)
    generated_at: str = Field(..., alias="generatedAt")
    last_modified: str = Field(..., alias="lastModified")

    def to_raw(self) -> dict:
        return self.model_dump(by_alias=True)


Manifest = dict[str, ManifestEntry]


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class GenerationLedger:
    """Tracks the files of the current run and owns the durable manifest.

    Attributes:
        project_root: Directory every relative path is resolved against.
        manifest_path: Location of the persisted manifest.
    """

    def __init__(
        self,
        project_root: str | Path,
        manifest_file: str | Path | None = None,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.manifest_path = Path(manifest_file) if manifest_file else manifest_path(project_root)
        self._clock = clock or utc_timestamp
        self._written: list[str] = []
        self._skipped: list[str] = []
        self._tracking = False
        self._snapshot: Optional[str] = None

    # -- Run state ---------------------------------------------------------

    @property
    def files(self) -> list[str]:
        """Paths written during the current run, in write order."""
        return list(self._written)

    @property
    def skipped(self) -> list[str]:
        """Paths skipped during the current run because they already existed."""
        return list(self._skipped)

    async def begin(self) -> None:
        """Start a run: clear the run lists and snapshot the manifest digest."""
        self._written = []
        self._skipped = []
        self._snapshot = await self._digest()
        self._tracking = True

    # -- Writes ------------------------------------------------------------

    async def write(self, relative_path: str, content: str, force: bool = False) -> bool:
        """Write *content* to *relative_path* under the project root.

        Returns ``False`` without touching the file when it already exists
        and *force* is not set.  Parent directories are created as needed.

        Raises:
            OSError: If the write itself fails.  Nothing is recorded.
        """
        full_path = self._resolve(relative_path)

        if not force and await asyncio.to_thread(full_path.exists):
            print_warning(f"Skipping {relative_path} (already exists). Use --force to overwrite.")
            if relative_path not in self._skipped:
                self._skipped.append(relative_path)
            return False

        try:
            await asyncio.to_thread(_write_file, full_path, content)
        except OSError as e:
            print_error(f"Failed to create {relative_path}: {e}")
            raise

        if relative_path not in self._written:
            self._written.append(relative_path)
        print_success(f"Created {relative_path}")
        return True

    async def rollback(self) -> None:
        """Remove every file written in this run, newest first.

        Individual failures are reported and skipped; the run list is cleared
        even if some removals failed.
        """
        if self._written:
            print_warning("Rolling back changes...")
        try:
            for relative_path in reversed(self._written):
                full_path = self._resolve(relative_path)
                try:
                    if await asyncio.to_thread(full_path.exists):
                        await asyncio.to_thread(full_path.unlink)
                        print_dim(f"Removed {relative_path}")
                except OSError as e:
                    print_error(f"Failed to remove {relative_path}: {e}")
        finally:
            self._written = []
            self._skipped = []

    # -- Manifest ----------------------------------------------------------

    async def load(self) -> Manifest:
        """Return the persisted manifest, or an empty one on first run."""
        text = await asyncio.to_thread(_read_text, self.manifest_path)
        if text is None:
            return {}
        try:
            raw = json.loads(text)
            return {name: ManifestEntry.model_validate(entry) for name, entry in raw.items()}
        except (ValueError, AttributeError, ValidationError) as e:
            raise SchemaValidationError(f"Invalid manifest: {e}", str(self.manifest_path)) from e

    async def entry(self, entity_name: str) -> Optional[ManifestEntry]:
        manifest = await self.load()
        return manifest.get(entity_name)

    async def commit(
        self, entity_name: str, files: Iterable[str], *, prune: bool = False
    ) -> list[str]:
        """Record *files* as the generated set for *entity_name* and persist.

        ``generatedAt`` is kept from an existing entry; ``lastModified`` is
        always refreshed.  The file list is replaced wholesale.  With *prune*,
        files listed by the previous entry but absent from *files* are
        deleted after the manifest is saved.

        Returns:
            The stale paths that were actually deleted (empty unless *prune*).

        Raises:
            ManifestConflictError: If :meth:`begin` was called and the
                manifest changed on disk since.
        """
        if self._tracking and await self._digest() != self._snapshot:
            raise ManifestConflictError(
                f"{self.manifest_path} was modified by another process during generation"
            )

        manifest = await self.load()
        previous = manifest.get(entity_name)
        now = self._clock()
        ordered = list(dict.fromkeys(files))

        manifest[entity_name] = ManifestEntry(
            entity=entity_name,
            files=ordered,
            generated_at=previous.generated_at if previous else now,
            last_modified=now,
        )
        await self._save(manifest)

        pruned: list[str] = []
        if prune and previous is not None:
            keep = set(ordered)
            pruned = await self._remove_files(f for f in previous.files if f not in keep)

        if self._tracking:
            self._snapshot = await self._digest()
        return pruned

    async def remove_entity(self, entity_name: str) -> list[str]:
        """Delete an entity's files and drop it from the manifest.

        Files already missing are skipped.  Returns the paths actually removed.
        """
        entry = await self.entry(entity_name)
        if entry is None:
            return []

        removed = await self._remove_files(entry.files)

        manifest = await self.load()
        manifest.pop(entity_name, None)
        await self._save(manifest)
        return removed

    # -- Internals ---------------------------------------------------------

    def _resolve(self, relative_path: str) -> Path:
        full_path = self.project_root / relative_path
        root = self.project_root.resolve()
        if not full_path.resolve().is_relative_to(root):
            raise ValueError(f"Path escapes the project root: {relative_path}")
        return full_path

    async def _remove_files(self, relative_paths: Iterable[str]) -> list[str]:
        removed: list[str] = []
        for relative_path in relative_paths:
            try:
                full_path = self._resolve(relative_path)
                if not await asyncio.to_thread(full_path.exists):
                    print_dim(f"Already missing: {relative_path}")
                    continue
                await asyncio.to_thread(full_path.unlink)
            except (OSError, ValueError) as e:
                print_error(f"Failed to remove {relative_path}: {e}")
                continue
            removed.append(relative_path)
            print_dim(f"Removed {relative_path}")
        return removed

    async def _save(self, manifest: Manifest) -> None:
        content = dump_json({name: entry.to_raw() for name, entry in manifest.items()})
        await asyncio.to_thread(_atomic_write, self.manifest_path, content)

    async def _digest(self) -> Optional[str]:
        data = await asyncio.to_thread(_read_bytes, self.manifest_path)
        if data is None:
            return None
        return hashlib.sha256(data).hexdigest()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def _read_bytes(path: Path) -> Optional[bytes]:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
