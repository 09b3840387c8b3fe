"""fano CLI.

This is the stable CLI entrypoint (console-script: ``fano``).

    fano <input> <output> [-c | -d] [-t] [-p] [-s] [--options SPEC] [--debug]

UX policy:
  - Fewer than 3 arguments: print usage, exit 0.
  - No mode: complain on stderr, exit EXIT_USAGE.
  - Codec failures are reported on stdout and all map to EXIT_GENERIC.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from fano import __version__
from fano.core.archive import compress, decompress
from fano.core.frequency import read_input
from fano.errors import EXIT_GENERIC, EXIT_OK, EXIT_USAGE, FanoError
from fano.options import OptionsError, RunOptions, load_options
from fano.stats import describe_compression, format_code_table, render_report

USAGE = (
    "Usage: fano <input> <output> [-c | -d] [flags]\n"
    "Flags:\n"
    "  -c   Compress file\n"
    "  -d   Decompress file\n"
    "  -t   Measure execution time\n"
    "  -p   Print code table\n"
    "  -s   Print compression report (with zstd reference)\n"
    "  --options SPEC   Run options JSON ('@file.json' or inline)\n"
    "  --debug          Show stack traces on errors\n"
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fano", description="Shannon-Fano file compressor", add_help=False)
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    # -c/-d share dest: the last one on the command line wins.
    p.add_argument("-c", dest="mode", action="store_const", const="compress", help="Compress file")
    p.add_argument("-d", dest="mode", action="store_const", const="decompress", help="Decompress file")
    p.add_argument("-t", dest="time", action="store_true", help="Measure execution time")
    p.add_argument("-p", dest="print_codes", action="store_true", help="Print code table")
    p.add_argument("-s", dest="stats", action="store_true", help="Print compression report")
    p.add_argument("--options", default=None, help="Run options JSON ('@file.json' or inline)")
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")
    p.add_argument("--version", action="version", version=f"fano {__version__}")
    return p


def _run_compress(input_path: Path, output_path: Path, *, print_codes: bool, stats: bool, zstd_level: int) -> None:
    res = compress(input_path, output_path)
    print(f"Compressione completata: {output_path} ({len(res.archive)} byte)")
    if print_codes:
        print(format_code_table(res.table))
    if stats:
        report = describe_compression(read_input(input_path), res.archive, res.table, zstd_level=zstd_level)
        print(render_report(report, str(input_path), str(output_path)))


def _run_decompress(input_path: Path, output_path: Path) -> None:
    n = decompress(input_path, output_path)
    print(f"Decompressione completata: {output_path} ({n} byte)")


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if len(argv) < 3 and "--version" not in argv:
        print(USAGE, end="")
        return EXIT_OK

    ns, _unknown = build_parser().parse_known_args(argv)

    try:
        opts = load_options(ns.options) if ns.options is not None else RunOptions()
    except OptionsError as e:
        if ns.debug:
            raise
        print(f"[fano] {e}", file=sys.stderr)
        return EXIT_USAGE

    mode = ns.mode or opts.mode
    if mode is None:
        print("Specify mode: -c (compress) or -d (decompress)", file=sys.stderr)
        print(USAGE, end="", file=sys.stderr)
        return EXIT_USAGE

    show_time = ns.time or bool(opts.time)
    rc = EXIT_OK
    start = time.perf_counter()
    try:
        if mode == "compress":
            _run_compress(
                ns.input,
                ns.output,
                print_codes=ns.print_codes or bool(opts.print_codes),
                stats=ns.stats or bool(opts.stats),
                zstd_level=opts.zstd_level,
            )
        else:
            _run_decompress(ns.input, ns.output)
    except FanoError as e:
        if ns.debug:
            raise
        print(f"[fano] {e}")
        rc = EXIT_GENERIC
    except Exception as e:
        if ns.debug:
            raise
        print(f"[fano] error: {e}")
        rc = EXIT_GENERIC

    if show_time:
        print(f"Execution time: {time.perf_counter() - start:.6f}s")
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
