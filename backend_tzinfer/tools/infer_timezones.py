#!/usr/bin/env python3
"""
Infer timezones for addresses from the command line.

Uses the same settings as the API server (SIM_PROXY_URL, SIM_CHAIN_IDS, WORKERS, ...)
and prints the result list as JSON.

Usage:
  python -m backend_tzinfer.tools.infer_timezones 0xabc... 0xdef...
  python -m backend_tzinfer.tools.infer_timezones --file addresses.txt --chains 1,8453
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Sequence

from backend_tzinfer.analysis_engine.scorer import InferenceResult
from backend_tzinfer.config.settings import Settings, get_settings
from backend_tzinfer.core.exceptions import TZInferError
from backend_tzinfer.service import TimezoneInferenceService
from backend_tzinfer.tzinfer_logging import get_logger

logger = get_logger(__name__)


def read_address_file(path: Path) -> list[str]:
    """One address per line; blank lines and '#' comments skipped."""
    addresses: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            addresses.append(line)
    return addresses


async def run(addresses: Sequence[str], settings: Settings) -> list[InferenceResult]:
    service = TimezoneInferenceService.from_settings(settings)
    try:
        return await service.infer_timezones(list(addresses))
    finally:
        await service.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Infer the probable UTC offset of blockchain addresses from on-chain activity.",
    )
    parser.add_argument("addresses", nargs="*", help="Addresses to analyze")
    parser.add_argument("--file", type=Path, help="Read addresses from a file (one per line)")
    parser.add_argument("--chains", help="Comma-separated chain ids (default: SIM_CHAIN_IDS)")
    parser.add_argument("--workers", type=int, help="Concurrent fetchers (default: WORKERS)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    chain_ids = None
    if args.chains is not None:
        chain_ids = tuple(c.strip() for c in args.chains.split(",") if c.strip())
        if not chain_ids:
            parser.error("--chains must name at least one chain id")
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be >= 1")

    addresses = list(args.addresses)
    if args.file:
        addresses.extend(read_address_file(args.file))

    try:
        settings = get_settings()
        overrides = {}
        if chain_ids is not None:
            overrides["chain_ids"] = chain_ids
        if args.workers is not None:
            overrides["workers"] = args.workers
        if overrides:
            settings = dataclasses.replace(settings, **overrides)
        results = asyncio.run(run(addresses, settings))
    except TZInferError as e:
        logger.error("infer_timezones_failed", error=str(e))
        print("ERROR:", e, file=sys.stderr)
        return 1

    print(json.dumps([r.to_dict() for r in results], indent=args.indent or None))
    return 0


if __name__ == "__main__":
    sys.exit(main())
