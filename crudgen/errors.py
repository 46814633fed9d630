"""Exception hierarchy for crud-gen.

Storage failures are not wrapped: they surface as the builtin ``OSError`` so
callers can tell a broken disk from a broken schema.
"""

from __future__ import annotations

from pydantic import ValidationError


class CrudGenError(Exception):
    """Base class for every error raised deliberately by crud-gen."""


class SchemaValidationError(CrudGenError):
    """Raised when an entity schema or project config fails structural checks."""

    def __init__(self, message: str, file_path: str | None = None) -> None:
        self.file_path = file_path
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        return self.message

    @classmethod
    def from_pydantic(
        cls, error: ValidationError, file_path: str | None = None, context: str = ""
    ) -> "SchemaValidationError":
        """Build an error listing one ``location: problem`` line per pydantic error."""
        messages = []
        for err in error.errors():
            loc = ".".join(str(x) for x in err["loc"]) or "root"
            if context:
                loc = f"{context}.{loc}"
            messages.append(f"{loc}: {err['msg']}")
        return cls("\n".join(messages), file_path)


class ConfigNotFoundError(CrudGenError):
    """Raised when ``crud-gen.config.json`` is missing from the project root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Configuration file not found: {path}\nRun 'crud-gen init' to create one."
        )


class TemplateRenderError(CrudGenError):
    """Raised when a template cannot be loaded or rendered."""

    def __init__(self, template_id: str, message: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template '{template_id}': {message}")


class ManifestConflictError(CrudGenError):
    """Raised when the manifest changed on disk while a run was in progress."""


class GenerationError(CrudGenError):
    """Raised when a generation run fails after its writes were rolled back."""

    def __init__(self, entity: str, message: str) -> None:
        self.entity = entity
        super().__init__(f"Generation failed for '{entity}': {message}")
