#!/usr/bin/env python3
"""Normalize a raw MBS rules export into the catalog schema.

Usage:
    python scripts/normalize_mbs_rules.py data/mbs_rules.json [data/mbs_rules.normalized.json]

A copy of the input is written next to it as ``<name>.backup.json``. Without
an output path the input file is normalized in place.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from catalog import CatalogError, normalize_catalog  # noqa: E402


def backup_path_for(path: Path) -> Path:
    if path.suffix.lower() == ".json":
        return path.with_name(f"{path.stem}.backup.json")
    return path.with_name(f"{path.name}.backup.json")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python scripts/normalize_mbs_rules.py <path-to-mbs_rules.json> [output.json]")
        return 1

    input_path = Path(args[0]).resolve()
    if not input_path.is_file():
        print(f"File not found: {input_path}")
        return 1

    try:
        with open(input_path, encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        print(f"Invalid JSON input: {e}")
        return 1

    try:
        normalized, report = normalize_catalog(data)
    except CatalogError as e:
        print(f"Cannot normalize {input_path.name}: {e}")
        return 1

    backup_path = backup_path_for(input_path)
    with open(backup_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    output_path = Path(args[1]).resolve() if len(args) > 1 else input_path
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(normalized, f, indent=2, ensure_ascii=False)

    print(
        "Normalized MBS rules: "
        f"total={report['total']} with_time={report['with_time']} "
        f"with_freq={report['with_freq']} with_conditions={report['with_conditions']}"
    )
    print(f"Backup saved to {backup_path}")
    print(f"Output written to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
