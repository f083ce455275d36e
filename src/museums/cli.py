from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import httpx

from contracts.artwork import ArtworkCandidate, MuseumSource

from .adapters import load_aic_curated
from .aggregator import DEFAULT_LIMIT, search_all, search_one
from .contracts import MuseumApiConfig


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="museum-search",
        description="Search open-access museum collections and print normalized candidates as JSON.",
    )
    p.add_argument("query", nargs="?", default="", help="Free-text query (omit with --curated).")
    p.add_argument(
        "--source",
        default="all",
        choices=["all"] + [s.value for s in MuseumSource],
        help="One source, or 'all' to interleave every source (default).",
    )
    p.add_argument("--curated", action="store_true", help="Load the curated AIC selection instead of searching.")
    p.add_argument("--limit", type=int, default=DEFAULT_LIMIT)
    p.add_argument("--rijksmuseum-key", default=None, help="Rijksmuseum API key (source skipped without it).")
    p.add_argument("--harvard-key", default=None, help="Harvard Art Museums API key (source skipped without it).")
    p.add_argument("--timeout-s", type=float, default=15.0, help="Per-request timeout in seconds.")
    p.add_argument("--source-timeout-s", type=float, default=None, help="Upper bound for one source in 'all' mode.")
    p.add_argument("--jsonl", action="store_true", help="One JSON object per line instead of an array.")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


async def _run(args: argparse.Namespace, config: MuseumApiConfig) -> list[ArtworkCandidate]:
    async with httpx.AsyncClient(follow_redirects=True) as client:
        if args.curated:
            return await load_aic_curated(client, config=config)
        if args.source == "all":
            return await search_all(client, query=args.query, limit=args.limit, config=config)
        return await search_one(client, args.source, query=args.query, limit=args.limit, config=config)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.curated and not args.query.strip():
        print("query is required unless --curated is given", file=sys.stderr)
        return 2

    config = MuseumApiConfig(
        rijksmuseum_key=args.rijksmuseum_key,
        harvard_key=args.harvard_key,
        timeout_s=args.timeout_s,
        source_timeout_s=args.source_timeout_s,
    )

    try:
        candidates = asyncio.run(_run(args, config))
    except (httpx.HTTPError, RuntimeError) as e:
        print(f"search failed: {e}", file=sys.stderr)
        return 2

    rows = [c.to_dict() for c in candidates]
    if args.jsonl:
        for row in rows:
            print(json.dumps(row, sort_keys=True, ensure_ascii=False))
    else:
        print(json.dumps(rows, sort_keys=True, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
