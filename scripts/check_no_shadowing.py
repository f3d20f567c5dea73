"""Guard script to prevent accidental dependency shadowing.

Fail if directories or modules named like runtime/test dependencies (e.g.
`pydantic/`, `yaml/`, `pytest/`) are added to the repository root, where
they would be imported instead of the installed distributions.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path


ROOT = Path(os.getenv("EXTMERGE_ROOT") or Path(__file__).resolve().parents[1]).resolve()
FORBIDDEN = {"pydantic", "pydantic_core", "yaml", "pytest"}


def find_offenders(root: Path) -> list:
    offenders = []
    for name in FORBIDDEN:
        if (root / name).exists() or (root / f"{name}.py").exists():
            offenders.append(name)
    return sorted(offenders)


def main() -> int:
    offenders = find_offenders(ROOT)
    if offenders:
        sys.stderr.write(
            "Forbidden shadowing modules present at repo root: "
            + ", ".join(offenders)
            + "\n"
        )
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
