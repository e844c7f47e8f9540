#!/usr/bin/env python3
"""
List, add, enable or disable SMS recipients.

Run from backend dir:
  python scripts/recipients.py list
  python scripts/recipients.py add 010-1234-5678 --games speetto1000 speetto2000
  python scripts/recipients.py disable 010-1234-5678
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from speetto_monitor.core.constants import TRACKED_GAMES, Game
from speetto_monitor.db.session import SessionLocal
from speetto_monitor.services.alert_state_service import ensure_recipient, list_recipients, set_recipient_active


def main() -> int:
    parser = argparse.ArgumentParser(description="Manage Speetto alert recipients")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("list")
    add = sub.add_parser("add")
    add.add_argument("phone_number")
    add.add_argument("--games", nargs="+", choices=[g.value for g in Game], default=[g.value for g in TRACKED_GAMES])
    for name in ("enable", "disable"):
        p = sub.add_parser(name)
        p.add_argument("phone_number")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.command == "list":
            for r in list_recipients(db):
                state = "active" if r["is_active"] else "inactive"
                print(f"{r['id']:>4}  {r['phone_number']:<16} {state:<8} {r['target_games']}")
            return 0
        if args.command == "add":
            try:
                row = ensure_recipient(db, args.phone_number.strip(), [Game(g) for g in args.games])
            except ValueError as e:
                print(e)
                return 1
            print(f"Recipient {row.phone_number} (id={row.id})")
            return 0
        result = set_recipient_active(db, args.phone_number.strip(), args.command == "enable")
        if result.get("error"):
            print(result["error"])
            return 1
        print(f"{result['phone_number']} is_active={result['is_active']}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
