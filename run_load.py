"""CLI entry point.

This script loads every resource described in a JSON descriptor tree and writes
the result tree to disk.

Examples:
    python run_load.py --tree tree.json --out result.json
    python run_load.py --tree tree.json --base-url https://example.com --credentials

A descriptor tree looks like:
    {"readme": {"src": "/README.txt"}, "data": {"cfg": {"src": "/cfg.json", "type": "json"}}}
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from restree import Engine, ProgressEvent, RestreeError
from restree.config import Settings, get_settings
from restree.log_setup import configure_logging


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Load a tree of resources concurrently.")
    p.add_argument("--tree", type=str, required=True, help="JSON file with the descriptor tree.")
    p.add_argument("--out", type=str, default="result.json", help="Output JSON file path.")
    p.add_argument("--base-url", type=str, default=None, help="Base URL for relative locations.")
    p.add_argument(
        "--credentials",
        action="store_true",
        help="Send stored credentials with every request.",
    )
    p.add_argument("--quiet", action="store_true", help="Do not print progress.")
    return p.parse_args()


def with_credentials(tree: Any) -> Any:
    """Return a copy of ``tree`` with ``credentials`` set on every job node."""
    if not isinstance(tree, dict):
        return tree
    if "src" in tree:
        return {**tree, "credentials": True}
    return {k: with_credentials(v) for k, v in tree.items()}


def print_progress(event: ProgressEvent) -> None:
    line = f"[{event.percent:5.1f}%] {event.type} {event.processed}/{event.total}"
    if event.src is not None:
        line += f" {event.src}"
    print(line)


def main() -> int:
    args = parse_args()
    configure_logging()

    settings: Settings = get_settings()
    if args.base_url is not None:
        settings = settings.model_copy(update={"base_url": args.base_url})

    tree = json.loads(Path(args.tree).expanduser().read_text(encoding="utf-8"))
    if args.credentials:
        tree = with_credentials(tree)

    engine = Engine(settings=settings)
    on_progress = None if args.quiet else print_progress
    try:
        result = asyncio.run(engine.load(tree, on_progress=on_progress))
    except RestreeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    out_path = Path(args.out).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(result, indent=2, ensure_ascii=False), encoding="utf-8")

    print(f"Wrote result tree to: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
