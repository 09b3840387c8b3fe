"""Run options spec (v1) for fano.

Goal: make a compress/decompress run reproducible from a single JSON blob
(scripts, CI) instead of a flag string.

This module intentionally stays *small* and strict:
  - JSON only
  - explicit schema id
  - unknown keys are rejected
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fano.errors import UsageError

SPEC_ID_V1 = "fano.options.v1"

MODES = ("compress", "decompress")
ZSTD_LEVEL_DEFAULT = 19


class OptionsError(UsageError):
    pass


def _load_json_arg(options_arg: str) -> dict[str, Any]:
    s = options_arg.strip()
    if not s:
        raise OptionsError("options: argomento vuoto")

    if s.startswith("@"):
        p = Path(s[1:]).expanduser()
        if not p.exists() or not p.is_file():
            raise OptionsError(f"options: file non trovato: {p}")
        raw = p.read_text(encoding="utf-8")
        try:
            obj = json.loads(raw)
        except Exception as e:
            raise OptionsError(f"options: JSON non valido in {p}: {e}") from e
        if not isinstance(obj, dict):
            raise OptionsError(f"options: il JSON in {p} deve essere un oggetto")
        return obj

    try:
        obj = json.loads(s)
    except Exception as e:
        raise OptionsError(f"options: JSON inline non valido: {e}") from e
    if not isinstance(obj, dict):
        raise OptionsError("options: il JSON inline deve essere un oggetto")
    return obj


def _optional_bool(obj: dict[str, Any], key: str) -> bool | None:
    if key not in obj:
        return None
    v = obj.get(key)
    if isinstance(v, bool):
        return v
    raise OptionsError(f"options: campo '{key}' deve essere booleano")


@dataclass(frozen=True)
class RunOptions:
    """Flags of a single run. None = not set (CLI default applies)."""

    mode: str | None = None
    time: bool | None = None
    print_codes: bool | None = None
    stats: bool | None = None
    zstd_level: int = ZSTD_LEVEL_DEFAULT


def load_options(options_arg: str) -> RunOptions:
    """Load and validate a run options spec.

    options_arg:
      - '@file.json'
      - inline JSON object
    """
    obj = _load_json_arg(options_arg)

    allowed = {"spec", "mode", "time", "print_codes", "stats", "zstd_level"}
    extra = sorted(set(obj.keys()) - allowed)
    if extra:
        raise OptionsError(f"options: chiavi non supportate: {', '.join(extra)}")

    spec_id = obj.get("spec")
    if spec_id != SPEC_ID_V1:
        raise OptionsError(f"options: spec non supportata: {spec_id!r} (attesa {SPEC_ID_V1!r})")

    mode = obj.get("mode")
    if mode is not None and mode not in MODES:
        raise OptionsError(f"options: 'mode' deve essere uno di {', '.join(MODES)}")

    level = obj.get("zstd_level", ZSTD_LEVEL_DEFAULT)
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 22:
        raise OptionsError("options: 'zstd_level' deve essere un intero 1..22")

    return RunOptions(
        mode=mode,
        time=_optional_bool(obj, "time"),
        print_codes=_optional_bool(obj, "print_codes"),
        stats=_optional_bool(obj, "stats"),
        zstd_level=level,
    )
