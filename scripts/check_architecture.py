#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/geotool_converter"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    # Only use_cases wires concrete infrastructure into the application layer.
    for path in (PACKAGE / "application").glob("*.py"):
        banned = [
            "import typer",
            "from typer",
            "import watchdog",
            "from watchdog",
            "import subprocess",
        ]
        if path.name != "use_cases.py":
            banned.append("geotool_converter.infrastructure")
        _assert_no_imports(path, banned)

    for name in ("schemas.py", "catalog.py", "types.py", "errors.py"):
        _assert_no_imports(
            PACKAGE / name,
            ["geotool_converter.application", "geotool_converter.infrastructure"],
        )

    for path in (PACKAGE / "infrastructure").glob("*.py"):
        _assert_no_imports(path, ["import typer", "from typer"])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
