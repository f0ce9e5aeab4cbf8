#!/usr/bin/env python3
"""
Add a rate to the configured store (file or SQL backend).

Usage:
  python scripts/add_rate.py --title Rush --rate 150 [--currency EUR] [--type SPECIAL] [--description ...]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rates_api.core.config import get_settings
from rates_api.domain.rates import Currency, Rate, RateType
from rates_api.repositories.base import build_store


def main() -> None:
    ap = argparse.ArgumentParser(description="Add a rate")
    ap.add_argument("--title", required=True, help="Display label")
    ap.add_argument("--rate", required=True, type=float, help="Rate amount (>= 0)")
    ap.add_argument("--description", default="", help="Optional free text")
    ap.add_argument("--currency", default=Currency.CHF.value, choices=[c.value for c in Currency])
    ap.add_argument("--type", default=RateType.STANDARD.value, choices=[t.value for t in RateType])
    ap.add_argument("--id", default="", help="Explicit id (file backend only)")
    ap.add_argument("--actor", help="Recorded as createdBy")
    args = ap.parse_args()

    store = build_store(get_settings())
    rate = store.create(
        Rate(
            id=args.id,
            title=args.title,
            amount=args.rate,
            description=args.description,
            currency=Currency(args.currency),
            rate_type=RateType(args.type),
        ),
        actor=args.actor,
    )
    print("OK: rate created")
    print(f"  ID: {rate.id}")
    print(f"  Title: {rate.title}")
    print(f"  Rate: {rate.amount:g} {rate.currency.value}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
