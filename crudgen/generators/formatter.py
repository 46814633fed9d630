"""Source formatting for rendered output.

Formatting is optional and never fatal: if Prettier is not installed or
rejects the input, the unformatted code is written instead.
"""

from __future__ import annotations

from pathlib import Path

from crudgen.utils import print_warning, run_command

PRETTIER_OPTIONS: list[str] = [
    "--single-quote",
    "--trailing-comma", "es5",
    "--tab-width", "2",
    "--print-width", "100",
]


class PrettierFormatter:
    """Formats code by piping it through the project's Prettier install."""

    def __init__(self, project_root: str | Path, timeout: int = 60) -> None:
        self.project_root = Path(project_root)
        self.timeout = timeout

    async def format(self, code: str, parser: str = "typescript") -> str:
        cmd = ["npx", "--no-install", "prettier", "--parser", parser, *PRETTIER_OPTIONS]
        try:
            returncode, stdout, stderr = await run_command(
                cmd, cwd=self.project_root, timeout=self.timeout, input_text=code
            )
        except OSError as e:
            print_warning(f"Prettier unavailable ({e}), writing unformatted code")
            return code

        if returncode != 0 or not stdout.strip():
            print_warning("Prettier formatting failed, writing unformatted code")
            return code
        return stdout


class NullFormatter:
    """Formatter used with ``--no-format``: returns code unchanged."""

    async def format(self, code: str, parser: str = "typescript") -> str:
        return code
