"""
Record Viewer
=============

List, delete and clear finished-session records.

Usage:
    python -m tools.view_records [--records PATH] list [--mode MODE]
    python -m tools.view_records [--records PATH] delete RECORD_ID
    python -m tools.view_records [--records PATH] clear [--yes]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path for direct script execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from gaprunner.gap_core.config_loader import GameMode, load_config
from gaprunner.gap_core.records import JsonRecordStore, RecordStore, RoundRecord


def format_table(records: List[RoundRecord], mode_labels: Optional[dict] = None) -> str:
    """
    Render records as a text table, newest first.

    Args:
        records: Records to show, already ordered.
        mode_labels: Optional display name per GameMode.

    Returns:
        The table, or a placeholder line when there are no records.
    """
    if not records:
        return "No records yet."

    mode_labels = mode_labels or {}
    lines = [
        f"{'#':>3}  {'Score':>6}  {'Mode':<14} {'Time':>6}  {'Completed':<19}  ID",
        "-" * 78,
    ]
    for rank, record in enumerate(records, start=1):
        label = mode_labels.get(record.mode, record.mode.value)
        completed = record.completed_at.strftime("%Y-%m-%d %H:%M:%S")
        lines.append(
            f"{rank:>3}  {record.score:>6}  {label:<14} {record.format_duration():>6}  "
            f"{completed:<19}  {record.id}"
        )
    return "\n".join(lines)


def list_records(store: RecordStore, mode: Optional[GameMode] = None, mode_labels=None) -> int:
    records = store.fetch_all()
    if mode is not None:
        records = [r for r in records if r.mode is mode]
    print(format_table(records, mode_labels))
    return 0


def delete_record(store: RecordStore, record_id: str) -> int:
    if store.delete(record_id):
        print(f"Deleted {record_id}")
        return 0
    print(f"No record with id {record_id}")
    return 1


def clear_records(store: RecordStore, confirmed: bool) -> int:
    if not confirmed:
        answer = input("Delete all records? [y/N] ").strip().lower()
        if answer != "y":
            print("Cancelled")
            return 1
    removed = store.clear_all()
    print(f"Removed {removed} record(s)")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Manage GapRunner session records")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--records", type=str, default=None,
                        help="Record file (default: records.path from config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command")
    list_parser = sub.add_parser("list", help="Show records, newest first")
    list_parser.add_argument("--mode", choices=[m.value for m in GameMode], default=None)
    delete_parser = sub.add_parser("delete", help="Delete one record")
    delete_parser.add_argument("record_id")
    clear_parser = sub.add_parser("clear", help="Delete every record")
    clear_parser.add_argument("--yes", action="store_true", help="Skip confirmation")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = load_config(args.config)
    store = JsonRecordStore(args.records or config.records.path)
    mode_labels = {mode: mode_config.label for mode, mode_config in config.modes.items()}

    if args.command == "delete":
        return delete_record(store, args.record_id)
    if args.command == "clear":
        return clear_records(store, args.yes)

    mode = GameMode(args.mode) if getattr(args, "mode", None) else None
    return list_records(store, mode, mode_labels)


if __name__ == "__main__":
    sys.exit(main())
