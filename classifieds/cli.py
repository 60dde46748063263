"""Command-line entry point.

Usage::

    classifieds negotiate --users 6 --seed 42
    classifieds export --output-dir output --pretty
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from classifieds.config import MarketplaceConfig
from classifieds.exceptions import ClassifiedsError
from classifieds.logging import get_logger, setup_logging
from classifieds.models import NegotiationOutcome, configure_id_sequence, make_prompt_chooser
from classifieds.scenarios import MarketplaceScenario
from classifieds.sinks import JsonFileSink, write_advertisement
from classifieds.store import MarketplaceStore

logger = get_logger(__name__)


def build_parser(config: MarketplaceConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classifieds",
        description="Classified-ads marketplace with proposal negotiation",
    )
    parser.add_argument("--users", type=int, default=config.generator.num_users)
    parser.add_argument("--ads-per-user", type=int, default=config.generator.ads_per_user)
    parser.add_argument(
        "--proposals-per-ad", type=int, default=config.generator.proposals_per_ad
    )
    parser.add_argument("--seed", type=int, default=config.seed)
    parser.add_argument("--log-level", default=config.log_level)

    commands = parser.add_subparsers(dest="command", required=True)

    negotiate = commands.add_parser("negotiate", help="Review proposals on an ad interactively")
    negotiate.add_argument("--ad-id", type=int, default=None, help="Ad to negotiate (default: busiest)")

    export = commands.add_parser("export", help="Write a demo marketplace to JSON files")
    export.add_argument("--output-dir", type=Path, default=config.output.json_output_dir)
    export.add_argument("--pretty", action="store_true", default=config.output.pretty_json)
    export.add_argument(
        "--text", action="store_true", help="Also write advertisements.txt in line format"
    )
    return parser


def build_store(args: argparse.Namespace, config: MarketplaceConfig) -> MarketplaceStore:
    scenario = MarketplaceScenario(
        num_users=args.users,
        ads_per_user=args.ads_per_user,
        proposals_per_ad=args.proposals_per_ad,
        sale_ratio=config.generator.sale_ratio,
        highlight_days=config.default_highlight_days,
        seed=args.seed,
        locale=config.generator.locale,
    )
    return scenario.generate()


def run_negotiation(
    store: MarketplaceStore,
    ad_id: int | None = None,
    input_func: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> int:
    """Review an ad's proposals until the user goes back or none are left.

    Returns the number of proposals accepted.
    """
    if not store.advertisements:
        output("The marketplace has no advertisements.")
        return 0
    if ad_id is None:
        ad_id = max(store.advertisements.values(), key=lambda ad: ad.proposal_count).id

    ad = store.view_advertisement(ad_id)
    output(f"[{ad.get_type().value}] #{ad.id} {ad.title} - asking {ad.price}")
    output(f"Posted by {ad.owner.name} ({ad.location}) on {ad.creation_date}")

    chooser = make_prompt_chooser(input_func=input_func, output=output)
    accepted = 0
    while True:
        result = store.negotiate(ad_id, chooser, output)
        if result.outcome is NegotiationOutcome.ACCEPTED:
            accepted += 1
            deal = result.transaction
            output(f"Deal closed with {deal.proposer_name} for {deal.price}")
        elif result.outcome in (NegotiationOutcome.BACK, NegotiationOutcome.EMPTY):
            return accepted


def export_store(
    store: MarketplaceStore,
    output_dir: Path,
    pretty: bool = False,
    text: bool = False,
) -> JsonFileSink:
    sink = JsonFileSink(output_dir, pretty=pretty)
    sink.write_batch("users", list(store.users))
    sink.write_batch("advertisements", list(store.advertisements.values()))
    sink.write_batch("transactions", store.transactions)
    if text:
        with open(sink.output_dir / "advertisements.txt", "w", encoding="utf-8") as f:
            for ad in store.advertisements.values():
                write_advertisement(ad, f)
    sink.close()
    return sink


def main(argv: list[str] | None = None) -> int:
    try:
        config = MarketplaceConfig.from_env()
        args = build_parser(config).parse_args(argv)
        setup_logging(args.log_level, config.log_format)
        configure_id_sequence(config.id_start)

        store = build_store(args, config)
        if args.command == "negotiate":
            accepted = run_negotiation(store, args.ad_id)
            logger.info("Accepted %d proposals", accepted)
        else:
            export_store(store, args.output_dir, pretty=args.pretty, text=args.text)
    except ClassifiedsError as exc:
        logger.error("%s", exc)
        return 1
    except (EOFError, KeyboardInterrupt):
        print()
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
