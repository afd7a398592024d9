#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from digitalbits.frontier import ClientConfig, Network, Server


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Page through an account's operations via REST")
    p.add_argument("account")
    p.add_argument("limit", nargs="?", type=int, default=10)
    p.add_argument("pages", nargs="?", type=int, default=3)
    p.add_argument("--network", default="testnet", choices=["testnet", "livenet"])
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with Server(ClientConfig.for_network(Network(args.network))) as server:
        builder = server.operations().for_account(args.account).limit(args.limit).order("desc")
        print(f"{'Paging Token':20} | {'Type':28} | {'Created At':20}")
        print("-" * 76)
        async for op in builder.iter_records(max_pages=args.pages):
            print(f"{op.paging_token:20} | {op.type:28} | {op.get('created_at', ''):20}")


if __name__ == "__main__":
    asyncio.run(main())
