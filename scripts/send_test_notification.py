#!/usr/bin/env python3
"""Send a test favorite team notification through the push gateway.

WARNING: Without --dry-run this delivers a REAL push notification to the
given user's devices.

This script builds a synthetic event, runs it through the same state machine
and formatter as production, and delivers the resulting commands.

Usage:
    # Dry run (preview payloads only, no sends)
    python scripts/send_test_notification.py --user-id USER --dry-run

    # Nearby tier only (user 2 km from the venue)
    python scripts/send_test_notification.py --user-id USER --distance-meters 2000

    # Both tiers (user at the venue)
    python scripts/send_test_notification.py --user-id USER --distance-meters 0

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
"""

import argparse
import json
import logging
import math
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.event import Coordinate, Event
from src.core.formatter import format_notification
from src.core.geo import EARTH_RADIUS_M
from src.core.notification_state import NotificationStateMachine
from src.shell.config_loader import load_config
from src.shell.push_client import PushClient

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


# The Corner Hotel, Richmond VIC
VENUE = Coordinate(latitude=-37.8230, longitude=144.9980)


def create_test_event(home_team: str, away_team: str) -> Event:
    """Create a synthetic test event at the default venue."""
    now = datetime.now(timezone.utc)
    return Event(
        id="test-event-" + now.strftime("%Y%m%d%H%M%S"),
        home_team=home_team,
        away_team=away_team,
        location=VENUE,
        venue_name="[TEST] The Corner Hotel",
        venue_address="57 Swan St, Richmond VIC 3121",
        date=now,
        check_in_time=now,
    )


def offset_north(origin: Coordinate, meters: float) -> Coordinate:
    """Point ``meters`` due north of ``origin``."""
    delta_lat = math.degrees(meters / EARTH_RADIUS_M)
    return Coordinate(latitude=origin.latitude + delta_lat, longitude=origin.longitude)


def main():
    parser = argparse.ArgumentParser(
        description="Send a test favorite team notification",
        epilog="WARNING: This sends REAL push notifications! Use --dry-run first.",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        required=True,
        help="Recipient user id",
    )
    parser.add_argument(
        "--home-team",
        type=str,
        default="Richmond",
        help="Home team name (default: Richmond)",
    )
    parser.add_argument(
        "--away-team",
        type=str,
        default="Carlton",
        help="Away team name (default: Carlton)",
    )
    parser.add_argument(
        "--distance-meters",
        type=float,
        default=50.0,
        help="Simulated distance from the venue (default: 50, fires both tiers)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print payloads without sending",
    )
    args = parser.parse_args()

    config = load_config(os.environ.get("CONFIG_PATH", "config/config.yaml"))

    event = create_test_event(args.home_team, args.away_team)
    user_location = offset_north(VENUE, args.distance_meters)

    state = NotificationStateMachine(
        nearby_radius_km=config.nearby_radius_km,
        proximity_radius_meters=config.proximity_radius_meters,
    )
    commands = state.check_favorite_team_events(
        args.user_id,
        [args.home_team],
        user_location,
        [event],
    )

    if not commands:
        logger.error(
            "No notifications at %.0fm (nearby radius %.1fkm, proximity radius %.0fm)",
            args.distance_meters,
            config.nearby_radius_km,
            config.proximity_radius_meters,
        )
        return 1

    if args.dry_run:
        logger.info("DRY RUN - Would send %d notification(s):", len(commands))
        for command in commands:
            print(json.dumps(format_notification(command), indent=2, ensure_ascii=False))
        return 0

    client = PushClient(
        webhook_url=config.push_webhook_url,
        timeout=config.push_timeout_seconds,
    )

    failures = 0
    for command in commands:
        response = client.deliver(command, user_id=args.user_id)
        if response.success:
            logger.info("  ✓ %s notification sent", command.kind)
        else:
            failures += 1
            logger.error("  ✗ %s notification failed: %s", command.kind, response.error)

    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
