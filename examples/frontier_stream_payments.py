#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from digitalbits.frontier import (
    ClientConfig,
    ConnectionEvent,
    Network,
    Record,
    RetryPolicy,
    Server,
)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Stream payments, optionally for one account")
    p.add_argument("account", nargs="?")
    p.add_argument("--cursor", default="now")
    p.add_argument("--seconds", type=float, default=60.0)
    p.add_argument("--network", default="testnet", choices=["testnet", "livenet"])
    return p.parse_args()


def on_message(payment: Record) -> None:
    amount = payment.get("amount", "-")
    asset = payment.get("asset_code", "XDB")
    print(f"{payment.get('created_at', ''):20} | {payment.type:16} | {amount:>18} {asset}")


def on_status(event: ConnectionEvent) -> None:
    print(f"[{event.state.value}] cursor={event.cursor} attempt={event.attempt}")


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)
    async with Server(ClientConfig.for_network(Network(args.network))) as server:
        builder = server.payments().cursor(args.cursor)
        if args.account:
            builder.for_account(args.account)
        subscription = builder.stream(
            on_message,
            on_status=on_status,
            retry_policy=RetryPolicy(max_retries=None),
            idle_timeout=90.0,
        )
        try:
            await asyncio.sleep(args.seconds)
        finally:
            await subscription.close()
        print(f"Stopped at cursor {subscription.cursor}")


if __name__ == "__main__":
    asyncio.run(main())
