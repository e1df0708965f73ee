"""Periodic runner for the Kitchenline background sweeps.

Every cycle cancels orders that stayed ``placed`` past the expiry threshold
and, unless disabled, delivers notifications that were never attempted.

Usage:
    python src/sweeper.py                   # Run forever, every SWEEP_INTERVAL_SECONDS
    python src/sweeper.py --once            # Run a single cycle and exit
    python src/sweeper.py --interval 30     # Override the interval
"""

import argparse
import asyncio

import structlog
from protean.exceptions import InvalidOperationError, ValidationError

logger = structlog.get_logger("sweeper")


def run_cycle(domain, dispatch_pending: bool = True) -> dict:
    """Run one sweep cycle inside the domain context and report the counts."""
    from ordering.notification.pending import DispatchPendingNotifications
    from ordering.order.expiry import ExpireStaleOrders

    with domain.domain_context():
        expired = domain.process(ExpireStaleOrders(), asynchronous=False) or 0
        dispatched = 0
        if dispatch_pending:
            dispatched = domain.process(DispatchPendingNotifications(), asynchronous=False) or 0

    logger.info("Sweep cycle complete", expired_count=expired, dispatched_count=dispatched)
    return {"expired_count": expired, "dispatched_count": dispatched}


async def run(interval: int | None, once: bool, dispatch_pending: bool):
    from ordering import settings
    from ordering.domain import ordering

    ordering.init()
    if interval is None:
        with ordering.domain_context():
            interval = settings.sweep_interval_seconds()

    logger.info("Sweeper started", interval_seconds=interval, once=once)
    while True:
        try:
            run_cycle(ordering, dispatch_pending=dispatch_pending)
        except (ValidationError, InvalidOperationError) as exc:
            logger.warning("Sweep cycle rejected", error=str(exc))

        if once:
            return
        await asyncio.sleep(interval)


def main():
    parser = argparse.ArgumentParser(description="Kitchenline sweeper")
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between cycles (default: SWEEP_INTERVAL_SECONDS setting)",
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument(
        "--no-dispatch",
        action="store_true",
        help="Only expire orders; leave pending notifications alone",
    )
    args = parser.parse_args()

    try:
        asyncio.run(run(args.interval, args.once, not args.no_dispatch))
    except KeyboardInterrupt:
        logger.info("Sweeper stopped")


if __name__ == "__main__":
    main()
