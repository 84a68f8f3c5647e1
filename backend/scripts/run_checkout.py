"""
Checkout flow from the command line against a running backend.

Run:
    python scripts/run_checkout.py card
    python scripts/run_checkout.py crypto --chain base-sepolia --currency usdc [--tx-hash 0x...]
    python scripts/run_checkout.py status <order_id>

Requires: backend running on http://127.0.0.1:8000 (override with --base-url)

The card flow stops once the hosted element config is ready (confirming a
card needs a browser). The crypto flow prints the serialized transaction; sign
and send it with your own wallet, then paste the hash (or pass --tx-hash).
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import asyncio
import json
import logging

from checkout_api import CheckoutApiClient
from domain.constants import DEFAULT_CRYPTO_CHAIN, DEFAULT_CRYPTO_CURRENCY
from services.checkout_service import CardCheckout, CryptoCheckout, SuccessTracker

BASE = "http://127.0.0.1:8000"


def section(title):
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)


class ManualWallet:
    """Stands in for a browser wallet: the operator sends the tx by hand."""

    def __init__(self, tx_hash=None):
        self.tx_hash = tx_hash

    async def send_transaction(self, serialized_tx, chain):
        print(f"  Chain:          {chain}")
        print(f"  Serialized tx:  {serialized_tx}")
        if self.tx_hash:
            return self.tx_hash
        return input("  Paste the transaction hash once sent: ").strip()


async def track(api, order_id, interval):
    section(f"Tracking order {order_id}")
    tracker = SuccessTracker(api, order_id, interval=interval)
    tracker.start()
    try:
        await tracker.wait()
    finally:
        await tracker.stop()
    view = tracker.view()
    print(f"  Status:   {view['status']}")
    if view["headline"]:
        print(f"  {view['headline']}: {view['message']}")
    elif view["error"]:
        print(f"  Error:    {view['error']}")
    print(f"  Elapsed:  {view['elapsedSeconds']}s")


async def run_card(api, args):
    section("Card checkout")
    checkout = CardCheckout(api)
    config = await checkout.start()
    if config is None:
        print(f"  [FAIL] {checkout.error}")
        return 1
    print(f"  Order ID:  {config.order_id}")
    print("  Payment element config:")
    print(json.dumps(config.model_dump(by_alias=True), indent=2))
    return 0


async def run_crypto(api, args):
    section(f"Crypto checkout ({args.chain} / {args.currency})")
    completed = []
    checkout = CryptoCheckout(api, on_complete=completed.append, chain=args.chain, currency=args.currency)

    order = await checkout.start()
    if order is None:
        print(f"  [FAIL] {checkout.error}")
        return 1
    print(f"  Order ID:        {order.order_id}")
    print(f"  Amount:          {order.amount}")
    print(f"  Payment address: {order.payment_address}")

    section("Send transaction")
    if not await checkout.sign_and_send(ManualWallet(args.tx_hash)):
        print(f"  [FAIL] {checkout.error or 'No serialized transaction on the order'}")
        return 1

    section("Process payment")
    if not await checkout.process_payment():
        print(f"  [FAIL] {checkout.error}")
        return 1
    print("  [PASS] Payment processed")

    await track(api, completed[0], args.interval)
    return 0


async def run_status(api, args):
    await track(api, args.order_id, args.interval)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Run a checkout against the backend")
    parser.add_argument("--base-url", default=BASE)
    parser.add_argument("--interval", type=float, default=None, help="status poll interval (s)")
    sub = parser.add_subparsers(dest="flow", required=True)

    sub.add_parser("card")

    crypto = sub.add_parser("crypto")
    crypto.add_argument("--chain", default=DEFAULT_CRYPTO_CHAIN)
    crypto.add_argument("--currency", default=DEFAULT_CRYPTO_CURRENCY)
    crypto.add_argument("--tx-hash", default=None)

    status = sub.add_parser("status")
    status.add_argument("order_id")

    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)

    flows = {"card": run_card, "crypto": run_crypto, "status": run_status}

    async def _run():
        async with CheckoutApiClient(base_url=args.base_url) as api:
            return await flows[args.flow](api, args)

    sys.exit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
