from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

pytestmark = pytest.mark.p0


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run fano CLI through a python -c wrapper.

    This avoids assuming the console-script entrypoint is installed.
    """
    cmd = [
        sys.executable,
        "-c",
        "from fano.cli import main; raise SystemExit(main())",
        *args,
    ]
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        text=True,
        capture_output=True,
    )


def test_cli_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    arc = tmp_path / "in.fano"
    back = tmp_path / "back.txt"

    data = "HELLO 123\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n"
    inp.write_text(data, encoding="utf-8")

    r = _run_cli(str(inp), str(arc), "-c")
    assert r.returncode == 0, (r.stdout, r.stderr)

    r = _run_cli(str(arc), str(back), "-d")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_text(encoding="utf-8") == data


def test_cli_too_few_args_prints_usage_exit_0() -> None:
    r = _run_cli("only_one_arg")
    assert r.returncode == 0
    assert "Usage: fano" in r.stdout


def test_cli_missing_mode_exit_2(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text("abc", encoding="utf-8")
    r = _run_cli(str(inp), str(tmp_path / "out"), "-t")
    assert r.returncode == 2
    assert "Specify mode" in r.stderr


def test_cli_last_mode_flag_wins(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    arc = tmp_path / "in.fano"
    inp.write_text("abcabc", encoding="utf-8")

    r = _run_cli(str(inp), str(arc), "-d", "-c")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert arc.read_bytes()[0] == 3


def test_cli_print_codes_and_time(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_bytes(b"AAABC")

    r = _run_cli(str(inp), str(tmp_path / "o.fano"), "-c", "-p", "-t")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "0x41    A: 0" in r.stdout
    assert "0x42    B: 10" in r.stdout
    assert "0x43    C: 11" in r.stdout
    assert "Execution time:" in r.stdout


def test_cli_stats_report(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text("ciao mondo " * 40, encoding="utf-8")

    r = _run_cli(str(inp), str(tmp_path / "o.fano"), "-c", "-s")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "=== fano archive ===" in r.stdout
    assert "Entropia" in r.stdout
    assert "zstd" in r.stdout


def test_cli_codec_error_reported_on_stdout(tmp_path: Path) -> None:
    r = _run_cli(str(tmp_path / "missing.bin"), str(tmp_path / "out"), "-c")
    assert r.returncode == 10
    assert "[fano]" in r.stdout
    assert not (tmp_path / "out").exists()


def test_cli_truncated_archive_reported(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    arc = tmp_path / "in.fano"
    inp.write_text("troncato? " * 30, encoding="utf-8")
    assert _run_cli(str(inp), str(arc), "-c").returncode == 0
    arc.write_bytes(arc.read_bytes()[:-4])

    r = _run_cli(str(arc), str(tmp_path / "back.txt"), "-d", "-t")
    assert r.returncode == 10
    assert "[fano]" in r.stdout
    assert "Execution time:" in r.stdout


def test_cli_options_spec_inline(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    arc = tmp_path / "in.fano"
    back = tmp_path / "back.txt"
    inp.write_text("options spec ok\n", encoding="utf-8")

    spec = json.dumps({"spec": "fano.options.v1", "mode": "compress", "print_codes": True})
    r = _run_cli(str(inp), str(arc), "--options", spec)
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "0x0a" in r.stdout

    # -d on the command line beats "mode" from --options
    r = _run_cli(str(arc), str(back), "--options", spec, "-d")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_text(encoding="utf-8") == "options spec ok\n"


def test_cli_options_spec_rejected_exit_2(tmp_path: Path) -> None:
    r = _run_cli(str(tmp_path / "a"), str(tmp_path / "b"), "-c", "--options", "{}")
    assert r.returncode == 2
    assert "[fano]" in r.stderr


def test_cli_version() -> None:
    r = _run_cli("--version")
    assert r.returncode == 0
    assert r.stdout.startswith("fano ")
