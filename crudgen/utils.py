"""Shared utility functions for crud-gen.

Provides async command execution, JSON/YAML document I/O, identifier case
helpers and Rich-based console reporting.  Every public function is designed
to be side-effect-free where possible, with clear error messages when
something goes wrong.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
    input_text: str | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Shell command string or list of arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        input_text: Optional text fed to the child's stdin.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  Stdout is returned without
        stripping so that formatted source keeps its trailing newline.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdin_pipe = asyncio.subprocess.PIPE if input_text is not None else None

    if isinstance(cmd, list):
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=stdin_pipe,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    else:
        process = await asyncio.create_subprocess_shell(
            cmd,
            stdin=stdin_pipe,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )

    payload = input_text.encode("utf-8") if input_text is not None else None
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(payload), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {cmd if isinstance(cmd, str) else ' '.join(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace")
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Identifier case helpers
# ---------------------------------------------------------------------------


def camel_case(value: str) -> str:
    """Lower the first character: ``OrderItem`` -> ``orderItem``."""
    if not value:
        return ""
    return value[0].lower() + value[1:]


def pascal_case(value: str) -> str:
    """Upper the first character: ``orderItem`` -> ``OrderItem``."""
    if not value:
        return ""
    return value[0].upper() + value[1:]


def kebab_case(value: str) -> str:
    """Convert ``OrderItem`` to ``order-item``."""
    if not value:
        return ""
    return re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value).lower()


def humanize(value: str) -> str:
    """Turn an identifier into a label: ``createdAt`` -> ``Created At``."""
    words = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value).replace("_", " ").split()
    return " ".join(word[0].upper() + word[1:] for word in words)


# ---------------------------------------------------------------------------
# Document I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file whose top level is an object.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top level is not an object.
    """
    file_path = Path(path)
    data = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a JSON object at the top level")
    return data


def load_document(path: str | Path) -> dict[str, Any]:
    """Load a JSON or YAML document, chosen by file extension.

    ``.yaml`` / ``.yml`` files are parsed with ``yaml.safe_load``; anything
    else is treated as JSON.
    """
    file_path = Path(path)
    if file_path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{file_path}: expected a mapping at the top level")
        return data
    return load_json(file_path)


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* the way every crud-gen JSON file is written."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically.  The write is performed in
    a worker thread to avoid blocking the event loop.
    """
    file_path = Path(path)
    content = dump_json(data)

    def _write() -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_write)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(
    rows: list[tuple[str, ...]],
    columns: tuple[str, ...],
    title: str = "Summary",
) -> None:
    """Print a table with the given column headers and rows."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for index, column in enumerate(columns):
        table.add_column(column, style="cyan" if index == 0 else None, no_wrap=index == 0)

    for row in rows:
        table.add_row(*(escape(str(cell)) for cell in row))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_dim(message: str) -> None:
    """Print a de-emphasised message."""
    console.print(f"[dim]{escape(message)}[/dim]")
