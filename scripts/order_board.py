#!/usr/bin/env python
"""Kitchen order board for a terminal.

Prints the active queue (oldest first) and refreshes every ORDER_REFRESH_SECONDS
until interrupted.

Usage:
    python scripts/order_board.py
    python scripts/order_board.py --interval 5 --store-url sqlite:///canteen.db
    python scripts/order_board.py --once
"""
from __future__ import annotations
import os, sys, argparse, logging, time

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dotenv import load_dotenv  # noqa: E402

from canteen.config.settings import load_settings, normalize  # noqa: E402
from canteen.services.orders import OrderRepository  # noqa: E402
from canteen.services.refresh import OrderRefresher  # noqa: E402
from canteen.services.reports import dashboard_stats  # noqa: E402
from canteen.services.store import open_store  # noqa: E402
from canteen.utils.board import render_order_board  # noqa: E402
from canteen.utils.clock import resolve_timezone, utcnow  # noqa: E402


def render(repo: OrderRepository) -> str:
    now = utcnow()
    stats = dashboard_stats(repo.get_all(), now, repo.tz).to_dict()
    header = (
        f"Today {stats['date']}: pending {stats['pending']} | preparing {stats['preparing']} | "
        f"ready {stats['ready']} | completed {stats['completed']}"
    )
    return header + '\n\n' + render_order_board(repo.get_active(), now)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description='Show the active order queue')
    p.add_argument('--store-url', default=None)
    p.add_argument('--interval', type=float, default=None, help='Refresh interval in seconds')
    p.add_argument('--once', action='store_true', help='Print once and exit')
    return p.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv()
    args = parse_args(argv)
    settings = normalize(load_settings())
    logging.basicConfig(level=getattr(logging, settings['LOG_LEVEL'], logging.INFO))
    store = open_store(args.store_url or settings['CANTEEN_STORE_URL'])
    repo = OrderRepository(store, tz=resolve_timezone(settings['CANTEEN_TIMEZONE']))

    def show():
        print('\033[2J\033[H' + render(repo), flush=True)

    show()
    if args.once:
        return 0
    refresher = OrderRefresher(show, args.interval or settings['ORDER_REFRESH_SECONDS'])
    refresher.start()
    try:
        while refresher.running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        refresher.stop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
