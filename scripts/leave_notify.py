#!/usr/bin/env python3
"""
Leave-time reminder host.

Evaluates the configured leave time once, or keeps polling it, and shows a
desktop reminder when the work day is over.

Usage:
    python3 scripts/leave_notify.py --leave-by 17:30
    python3 scripts/leave_notify.py --leave-by 17:30 --watch
    python3 scripts/leave_notify.py --reset-dismiss
    python3 scripts/leave_notify.py --leave-by 17:30 --config ~/.leavetime/config.yaml

Exit status is 0 whether or not a reminder was due; "no reminder" is a normal
outcome. Usage errors exit with 2.
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from leavetime.config import load_config
from leavetime.dismissal import get_dismissal_tracker
from leavetime.leave_notifier import get_leave_notifier
from leavetime.logger import configure_logging, get_logger


def drain_activations(notifier, logger):
    for event in notifier.activation.drain():
        # No window to raise from a terminal host; record the request.
        logger.info(f"Host activation requested: {event}")


def watch(notifier, leave_by, interval, logger):
    logger.info(f"Watching leave time {leave_by} every {interval}s (Ctrl-C to stop)")
    current = None
    try:
        while True:
            if current is None or not notifier.presenter.is_open(current):
                result = notifier.notify_leave(leave_by)
                if result is not False:
                    current = result
            drain_activations(notifier, logger)
            time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Stopped")


def main():
    parser = argparse.ArgumentParser(description="Remind me when it's time to leave")
    parser.add_argument("--leave-by", metavar="HH:MM", help="Time of day the work period ends")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--watch", action="store_true",
                        help="Keep polling instead of evaluating once")
    parser.add_argument("--reset-dismiss", action="store_true",
                        help="Clear today's dismissal before evaluating")
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config)
    logger = get_logger("leave_notify", config)
    notifier = get_leave_notifier(config)

    if args.reset_dismiss:
        get_dismissal_tracker(config).update_dismiss(None)
        if not args.leave_by:
            return 0

    if not args.leave_by:
        parser.error("--leave-by is required")

    if args.watch:
        watch(notifier, args.leave_by,
              config.get("host.poll_interval_seconds", 60), logger)
        return 0

    result = notifier.notify_leave(args.leave_by)
    if result is False:
        print("No reminder due.")
        return 0
    print(f"{result.title}: {result.body}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
