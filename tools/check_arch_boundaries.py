from __future__ import annotations

import sys
from pathlib import Path


def main() -> int:
    """Run the architecture boundary checks without pytest (pre-commit hook)."""
    repo_root = Path(__file__).resolve().parents[1]
    test_path = repo_root / "tests" / "test_arch_boundaries.py"
    if not test_path.is_file():
        print("ERROR: tests/test_arch_boundaries.py not found.", file=sys.stderr)
        return 3

    ns: dict[str, object] = {"__file__": str(test_path), "__name__": "__main__"}
    try:
        code = test_path.read_text(encoding="utf-8")
        exec(compile(code, str(test_path), "exec"), ns, ns)
        checks = [v for k, v in sorted(ns.items()) if k.startswith("test_") and callable(v)]
        if not checks:
            print("ERROR: no checks found in tests/test_arch_boundaries.py.", file=sys.stderr)
            return 3
        for fn in checks:
            fn()  # type: ignore[operator]
        print(f"OK: architecture boundaries respected ({len(checks)} checks).")
        return 0
    except AssertionError as e:
        print(str(e), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
