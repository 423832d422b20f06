#!/usr/bin/env python
"""Idempotent seed script for a fresh canteen (menu, admin, staff, shop location).

Usage:
    python scripts/seed_canteen.py                          # seed CANTEEN_STORE_URL
    python scripts/seed_canteen.py --store-url sqlite:///x.db
    python scripts/seed_canteen.py --dry-run                # report what would be written
    python scripts/seed_canteen.py --show                   # print key -> record counts afterwards
"""
from __future__ import annotations
import os, sys, argparse, textwrap

# Allow running from repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from canteen.config.settings import load_settings  # noqa: E402
from canteen.constants.storage import ALL_KEYS  # noqa: E402
from canteen.services.seed import ensure_sample_data  # noqa: E402
from canteen.services.store import MemoryStore, open_store  # noqa: E402
from canteen.utils.board import format_table  # noqa: E402


def snapshot(store) -> MemoryStore:
    """Copy the seeded keys into a throwaway in-memory store."""
    copy = MemoryStore()
    for key in ALL_KEYS:
        value = store.get(key)
        if value is not None:
            copy.set(key, value)
    return copy


def summarize(store):
    rows = []
    for key in ALL_KEYS:
        value = store.get(key)
        if value is None:
            rows.append([key, '-'])
        elif isinstance(value, list):
            rows.append([key, str(len(value))])
        else:
            rows.append([key, '1'])
    return format_table(['Key', 'Records'], rows)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description='Seed canteen sample data',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_canteen.py\n  dry run: seed_canteen.py --dry-run\n  show keys: seed_canteen.py --show\n"""),
    )
    p.add_argument('--store-url', default=None, help='Store URL (default: CANTEEN_STORE_URL or sqlite:///canteen.db)')
    p.add_argument('--dry-run', action='store_true', help='Seed a copy of the store and report counts (no writes)')
    p.add_argument('--show', action='store_true', help='Print record counts per key after seeding')
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    url = args.store_url or load_settings()['CANTEEN_STORE_URL']
    store = open_store(url)
    target = snapshot(store) if args.dry_run else store
    written = ensure_sample_data(target)
    label = '[DRY-RUN] would write' if args.dry_run else '[DONE] wrote'
    print(f"{label}: " + ', '.join(f'{k}={v}' for k, v in written.items()))
    if args.show:
        print(summarize(target))
    return 0


if __name__ == '__main__':
    sys.exit(main())
