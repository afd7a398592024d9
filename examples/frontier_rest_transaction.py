#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio

from digitalbits.frontier import ClientConfig, Network, Server, xdr_fields


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch one transaction and follow its links")
    p.add_argument("hash")
    p.add_argument("--network", default="testnet", choices=["testnet", "livenet"])
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    async with Server(ClientConfig.for_network(Network(args.network))) as server:
        tx = await server.transactions().record(args.hash).call()
        print(f"Transaction {tx.hash} in ledger {tx.ledger} (successful={tx.successful})")
        for name, blob in xdr_fields(tx).items():
            print(f"  {name}: {len(blob)} base64 chars")

        operations = await tx.links["operations"](limit=20)
        for op in operations:
            print(f"  op {op.id}: {op.type}")


if __name__ == "__main__":
    asyncio.run(main())
