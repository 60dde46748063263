#!/usr/bin/env python3
"""Generate sample data files for validation.

This script builds a small demo marketplace, settles a few negotiations
and writes users, advertisements and transactions as JSON files in the
local/ folder, plus advertisements.txt in line format.
"""

import sys
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from classifieds.cli import export_store
from classifieds.logging import setup_logging
from classifieds.models import NegotiationChoice
from classifieds.scenarios import MarketplaceScenario
from classifieds.store import MarketplaceStore


def settle_some_deals(store: MarketplaceStore, count: int) -> int:
    """Accept the best proposal on the first ``count`` ads that have one."""
    print("\n2. Settling negotiations...")
    settled = 0
    for ad in list(store.advertisements.values()):
        if settled >= count:
            break
        if ad.proposal_count == 0:
            continue
        store.negotiate(ad.id, lambda _proposal: NegotiationChoice.ACCEPT, report=lambda _line: None)
        settled += 1
    return settled


def print_summary(data: dict[str, Any], output_dir: Path) -> None:
    """Print generation summary."""
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    for name, count in data.items():
        print(f"{name + ':':22}{count}")
    print(f"\nAll files saved to: {output_dir}")
    print("=" * 60)


def main() -> None:
    """Generate all sample data files."""
    setup_logging("WARNING")
    output_dir = project_root / "local"

    print("=" * 60)
    print("Generating Sample Data for Validation")
    print("=" * 60)

    print("\n1. Building marketplace...")
    store = MarketplaceScenario(num_users=8, ads_per_user=2, proposals_per_ad=3, seed=42).generate()
    settle_some_deals(store, count=4)

    print("\n3. Writing files...")
    export_store(store, output_dir, pretty=True, text=True)

    print_summary(store.summary(), output_dir)


if __name__ == "__main__":
    main()
