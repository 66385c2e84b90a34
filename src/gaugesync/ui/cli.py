# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from gaugesync.app import list_voting_gauges, sync_voting_gauges
from gaugesync.config import configure_logging
from gaugesync.domain.chains import default_chain_table, lookup_chain

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from gaugesync.domain.model import Chain, VotingGauge

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return parsed


def _positive_float(value: str) -> float:
    parsed = float(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise the voting gauge list")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Rebuild voting gauges from chain and subgraph")
    sync.add_argument(
        "--batch-size",
        type=_positive_int,
        default=None,
        help="Number of contract calls per multicall batch (defaults to config)",
    )
    sync.add_argument(
        "--deadline-seconds",
        type=_positive_float,
        default=None,
        help="Abort the run if it takes longer than this many seconds",
    )

    list_cmd = subparsers.add_parser("list", help="Print persisted voting gauges")
    list_cmd.add_argument(
        "--chain",
        type=str,
        help="Only print gauges on this chain (e.g. MAINNET, ARBITRUM)",
    )

    return parser.parse_args(list(argv))


def _parse_chain(value: str) -> Chain:
    chain = lookup_chain(value, default_chain_table())
    if chain is None:
        raise ValueError(f"Unknown chain: {value}")
    return chain


def _format_gauge(gauge: VotingGauge) -> str:
    cap = "-" if gauge.weight_cap is None else f"{gauge.weight_cap:.4f}"
    staking = gauge.staking_gauge_id or "-"
    return (
        f"{gauge.chain:<10} {gauge.address} {gauge.status:<7} "
        f"weight={gauge.weight:.6f} cap={cap} staking={staking}"
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        chain = _parse_chain(parsed_args.chain) if getattr(parsed_args, "chain", None) else None
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            sync_voting_gauges(
                batch_size=parsed_args.batch_size,
                deadline_seconds=parsed_args.deadline_seconds,
            )
        elif parsed_args.command == "list":
            for gauge in list_voting_gauges(chain=chain):
                print(_format_gauge(gauge))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
