"""CLI script to manually run a reminder dispatch sweep."""
from __future__ import annotations

import argparse
from datetime import datetime

from dailybudget.tasks.reminders import purge_delivery_markers, send_due_reminders


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Manually trigger a reminder sweep",
    )
    parser.add_argument(
        "--at",
        type=str,
        help="Sweep instant in ISO format, e.g. 2025-01-15T08:00:00+00:00 (default: now)",
    )
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Purge expired delivery markers instead of sweeping",
    )
    parser.add_argument(
        "--async",
        action="store_true",
        dest="use_async",
        help="Queue task asynchronously instead of running immediately",
    )

    args = parser.parse_args()

    if args.at:
        datetime.fromisoformat(args.at)  # fail early on a malformed instant

    task = purge_delivery_markers if args.purge else send_due_reminders
    task_args = () if args.purge else (args.at,)
    print(f"Running {task.name}")
    if args.use_async:
        queued = task.apply_async(args=task_args)
        print(f"Task queued: {queued.id}")
    else:
        result = task.run(*task_args)
        print(f"Result: {result}")


if __name__ == "__main__":
    main()
