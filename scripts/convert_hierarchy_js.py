#!/usr/bin/env python3
"""
Convert heading-list JS files (window.NAME_HIERARCHY = [...];) to document folders
with an outline.json each.

Run from repo root:
    python scripts/convert_hierarchy_js.py path/to/hierarchies codes/
"""
import json
import re
import sys
from pathlib import Path

from codebook_outline.core import parse_outline

ASSIGNMENT_RE = re.compile(r"^\s*window\.(\w+)\s*=\s*", re.MULTILINE)


def parse_hierarchy_js(source: str) -> tuple[str, list]:
    """Return (variable name, chapter list) from a 'window.X = [...];' file."""
    match = ASSIGNMENT_RE.search(source)
    if not match:
        raise ValueError("No window.<NAME> = [...] assignment found")
    body = source[match.end():].strip().rstrip(";").strip()
    return match.group(1), json.loads(body)


def slug_for(name: str) -> str:
    """FIRE2016_HIERARCHY -> fire2016."""
    return re.sub(r"_HIERARCHY$", "", name).lower().replace("_", "-")


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__)
        return 1
    src_dir, out_root = Path(argv[0]), Path(argv[1])
    files = sorted(src_dir.glob("*_hierarchy.js"))
    if not files:
        print(f"No *_hierarchy.js files in {src_dir}")
        return 1
    for js in files:
        try:
            name, data = parse_hierarchy_js(js.read_text(encoding="utf-8"))
            chapters = parse_outline(data)
        except ValueError as e:
            print(f"  Error in {js.name}: {e}")
            continue
        out_dir = out_root / slug_for(name)
        out_dir.mkdir(parents=True, exist_ok=True)
        outline = [c.model_dump(mode="json") for c in chapters]
        (out_dir / "outline.json").write_text(json.dumps(outline, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"Converted {js.name} -> {out_dir} ({len(chapters)} chapters)")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
