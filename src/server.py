"""Protean Engine runner for the Kitchenline ordering domain.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes event handlers
  (notably the NotificationDispatcher that delivers push notifications)

Usage:
    python src/server.py
    python src/server.py --test-mode   # Process pending messages and exit
"""

import argparse
import asyncio

from protean.server.engine import Engine


async def run(test_mode: bool = False):
    from ordering.domain import ordering

    ordering.init()
    engine = Engine(ordering, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Kitchenline Engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process the messages currently queued, then exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
