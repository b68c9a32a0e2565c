#!/usr/bin/env python3
"""
slotplanner Runner Script

Command-line entry point for the availability scheduling engine.

Usage:
    python run.py --plan goal.json --busy busy.json            # Plan a goal
    python run.py --plan goal.json --busy busy.json --diagnostic
    python run.py --find "tomorrow afternoon" --duration 30     # Ad-hoc slots
    python run.py --recurrence "3x per week" --start 2026-10-19 --deadline 2026-12-31
    python run.py --check-config                                # Validate configuration

Common options:
    --now 2026-10-19T08:00    # Pin the current time (naive values use the configured timezone)
    --json                    # Print machine-readable output
    --config PATH             # Alternative settings.yaml

Busy files hold Google Calendar ``events.list`` items (a list, or an object
with an ``items`` key). Plain ``{"start": ISO, "end": ISO}`` entries work too.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))


def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def normalise_busy_items(data: Any) -> List[Dict[str, Any]]:
    """Accept events.list output or plain start/end records."""
    if isinstance(data, dict):
        data = data.get("items", [])

    items = []
    for item in data or []:
        if not isinstance(item, dict):
            continue
        item = dict(item)
        for key in ("start", "end"):
            if isinstance(item.get(key), str):
                item[key] = {"dateTime": item[key]}
        items.append(item)
    return items


def check_config(config_path=None) -> None:
    """Check configuration and print status."""
    from slotplanner.core import ConfigurationError, get_config

    print("\n" + "=" * 60)
    print("slotplanner Configuration Check")
    print("=" * 60 + "\n")

    try:
        cfg = get_config(config_path)
    except ConfigurationError as e:
        print(e)
        print("\n❌ Configuration has errors. Please fix them before running.")
        sys.exit(1)

    print(f"Timezone:      {cfg.scheduling.timezone}")
    print(f"Horizon:       {cfg.scheduling.horizon_days} days")
    print(f"Ad-hoc slots:  {cfg.scheduling.adhoc_max_slots}")
    print(f"Calendar:      {cfg.calendar.calendar_id} (reminder {cfg.calendar.reminder_minutes} min)")
    print(f"Log level:     {cfg.general.log_level}")
    print("\n✅ Configuration is valid.")
    sys.exit(0)


def main():
    import argparse

    parser = argparse.ArgumentParser(description="slotplanner - Availability Scheduling Engine")
    parser.add_argument("--check-config", action="store_true", help="Validate configuration and exit")
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument("--now", type=str, metavar="ISO", help="Current time to plan from")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")

    parser.add_argument("--plan", type=str, metavar="GOAL_JSON", help="Plan sessions for a goal file")
    parser.add_argument("--busy", type=str, metavar="BUSY_JSON", help="Busy events file")
    parser.add_argument("--diagnostic", action="store_true", help="Report shortfall and alternatives")

    parser.add_argument("--find", type=str, metavar="TEXT", help="Find ad-hoc slots for a time phrase")
    parser.add_argument("--duration", type=int, default=60, help="Slot length in minutes for --find")

    parser.add_argument("--recurrence", type=str, metavar="FREQ", help="Build a recurrence rule")
    parser.add_argument("--start", type=str, metavar="DATE", help="First occurrence for --recurrence")
    parser.add_argument("--deadline", type=str, metavar="DATE", help="Deadline for --recurrence")

    args = parser.parse_args()

    if args.check_config:
        check_config(args.config)
        return

    from slotplanner.core import ConfigurationError, get_config, get_error_message, get_logger, setup_logging
    from slotplanner.scheduling import Goal, SchedulingManager, build_recurrence
    from slotplanner.scheduling.timeutils import parse_date_value
    from slotplanner.tools import busy_intervals_from_events

    try:
        cfg = get_config(args.config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    setup_logging(cfg, log_to_file=False)
    logger = get_logger("run")

    clock = None
    if args.now:
        pinned = datetime.fromisoformat(args.now)
        clock = lambda: pinned  # noqa: E731

    manager = SchedulingManager(cfg, clock=clock)

    busy = []
    if args.busy:
        busy = busy_intervals_from_events(normalise_busy_items(load_json(args.busy)), manager.tz)
        logger.debug(f"Loaded {len(busy)} busy interval(s) from {args.busy}")

    if args.plan:
        goal = Goal.from_dict(load_json(args.plan))
        result = manager.plan(goal, busy, diagnostic=args.diagnostic)
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
        else:
            print(manager.format_schedule(result, goal))
        return

    if args.find:
        request, slots = manager.find_time(args.find, args.duration, busy)
        if args.json:
            print(json.dumps({
                "request": request.to_dict(),
                "slots": [s.to_dict() for s in slots],
            }, indent=2))
        else:
            print(manager.format_slots(request, slots))
        return

    if args.recurrence:
        if not args.start:
            parser.error("--recurrence requires --start")
        descriptor = build_recurrence(
            args.recurrence,
            parse_date_value(args.start),
            parse_date_value(args.deadline),
            today=manager.now().date(),
            tz=manager.tz,
        )
        if descriptor is None:
            print(f"ℹ️ {get_error_message('one_time')}")
        elif args.json:
            print(json.dumps(descriptor.to_dict(), indent=2))
        else:
            print(descriptor.as_rrule_line())
        return

    parser.print_help()


if __name__ == "__main__":
    main()
