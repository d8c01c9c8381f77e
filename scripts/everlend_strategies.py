from __future__ import annotations

import argparse
import asyncio
import json
import sys

from loguru import logger

from realms_strategies.adapters.everlend_adapter.adapter import EverlendAdapter
from realms_strategies.core.config import load_config
from realms_strategies.core.utils.solana import solana_connection


async def _run(args: argparse.Namespace) -> int:
    load_config(args.config, require_exists=bool(args.config))

    adapter = EverlendAdapter()
    async with solana_connection(args.cluster) as connection:
        ok, strategies = await adapter.get_strategies(connection)

    if not ok:
        logger.error(f"Strategy listing failed: {strategies}")
        return 1

    rows = [
        s.model_dump(
            include={
                "handled_token_symbol",
                "handled_mint",
                "pool_pub_key",
                "pool_mint",
                "apy",
            }
        )
        for s in strategies
    ]
    print(json.dumps(rows, indent=2))
    return 0


def main() -> None:
    p = argparse.ArgumentParser(description="List Everlend deposit strategies.")
    p.add_argument("--config", default=None, help="Config path (default: config.json)")
    p.add_argument(
        "--cluster",
        default=None,
        help="mainnet or devnet (default: strategy.cluster from config)",
    )
    p.add_argument("--debug", action="store_true")
    args = p.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "INFO")

    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
