#!/usr/bin/env python3
"""
Run one remittance transfer (token -> quote -> transaction -> confirm) and
print each stage to the terminal.

Runs against the in-memory mock rail unless INTEGRATIONS_MODE=real, in which
case DRAP_* credentials must be set in the environment or .env.

Usage (from repo root):
  python scripts/run_flow_demo.py
  python scripts/run_flow_demo.py --fail-at QUOTE
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from remittance.flows.transfer import TransferFlow
from remittance.integrations.clients.mocks.drap import MockDrapRail
from remittance.integrations.clients.real_http.drap import DrapRailClient
from remittance.integrations.contracts.interfaces import (
    Credentials,
    FlowStage,
    QuoteRequest,
    Receiver,
    TransactionRequest,
)
from remittance.utils.config_loader import load_credentials, load_remittance_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main(fail_at: str | None):
    setup_logging()
    config = load_remittance_config()

    if config.use_real_rail:
        rail = DrapRailClient(config)
        credentials = load_credentials()
    else:
        rail = MockDrapRail(fail_at=FlowStage(fail_at) if fail_at else None)
        credentials = Credentials(client_id="demo", client_secret="demo", username="demo", password="demo")

    quote_request = QuoteRequest(
        sending_country_code="AE",
        sending_currency_code="AED",
        receiving_country_code="PK",
        receiving_currency_code="PKR",
        sending_amount=100,
    )
    transaction_request = TransactionRequest(
        sender_customer_number="1000001220000001",
        receiver=Receiver(
            mobile_number="+919586741508",
            first_name="Anija",
            last_name="Lastname",
            nationality="IN",
        ),
    )
    print_stage("QUOTE REQUEST", quote_request.to_payload())

    result = await TransferFlow(rail).run(credentials, quote_request, transaction_request)

    if result.quote:
        print_stage("QUOTE", result.quote.raw or {"quote_id": result.quote.quote_id})
    if result.transaction:
        print_stage("TRANSACTION OPENED", {"transaction_ref_number": result.transaction.reference,
                                           "state": result.transaction.state})
    print_stage("RESULT", result.to_dict())
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a demo remittance transfer")
    parser.add_argument("--fail-at", choices=[stage.value for stage in FlowStage], default=None,
                        help="Mock rail only: make this stage fail")
    args = parser.parse_args()
    sys.exit(asyncio.run(main(args.fail_at)))
