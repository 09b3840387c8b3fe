"""Typed errors for fano.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The library raises the typed errors below; it never prints.
- The CLI does not tell error kinds apart: every codec failure maps to EXIT_GENERIC.
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success (also: usage printed because too few arguments)"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (missing mode flag, invalid options spec)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Codec failure (unreadable file, corrupt archive, encoding error)"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE - do not edit manually.\n")
    lines.append("> Source of truth: `src/fano/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Library errors extend `FanoError` and carry an `exit_code`.\n")
    lines.append("- Codec errors are printed to stdout with the `[fano]` prefix.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class FanoError(Exception):
    """Base error for fano."""

    exit_code: int = EXIT_GENERIC


class UsageError(FanoError):
    exit_code = EXIT_USAGE


class IoError(FanoError):
    """A file could not be opened, read or written."""


class FormatError(FanoError):
    """Archive is malformed: bad table, truncated stream, ambiguous codes."""


class EncodingError(FanoError):
    """A byte has no code, or the table exceeds what the format can store."""
