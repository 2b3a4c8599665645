#!/usr/bin/env python3
"""
Recompute streaks and productivity scores for every user.

Meant to run periodically (e.g. from cron shortly after midnight) so
that users who did nothing today still get a fresh row and a streak
that reflects the day boundary.

Usage:
    python scripts/recalculate_scores.py
    python scripts/recalculate_scores.py --user alice --user bob
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table

from tempo.core.config import Config
from tempo.core.database import get_database
from tempo.core.errors import PersistenceError
from tempo.core.models import DailyStats
from tempo.core.repositories import DailyStatsRepository, TaskRepository
from tempo.productivity import ProductivityTracker

logger = logging.getLogger("recalculate_scores")


def recalculate(
    tracker: ProductivityTracker,
    user_ids: List[str]
) -> Tuple[Dict[str, DailyStats], List[str]]:
    """
    Recompute every user in user_ids, continuing past failures.

    Returns:
        (fresh rows by user id, user ids that failed)
    """
    results: Dict[str, DailyStats] = {}
    failed: List[str] = []
    for user_id in user_ids:
        try:
            results[user_id] = tracker.recompute_derived(user_id)
        except PersistenceError as e:
            failed.append(user_id)
            logger.error("Failed to recompute %s: %s", user_id, e)
    return results, failed


def render_summary(results: Dict[str, DailyStats], failed: List[str]) -> Table:
    table = Table(show_header=True, header_style="bold cyan", title="Productivity recalculated")
    table.add_column("User")
    table.add_column("Day", width=12)
    table.add_column("Completed", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Score", justify="right")

    for user_id, stats in results.items():
        table.add_row(
            user_id,
            stats.day.isoformat(),
            str(stats.tasks_completed),
            str(stats.streak_days),
            str(stats.productivity_score),
        )
    for user_id in failed:
        table.add_row(user_id, "[red]failed[/red]", "-", "-", "-")
    return table


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute productivity scores")
    parser.add_argument("--user", action="append", dest="users",
                        help="Only recompute this user (repeatable)")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Configuration directory (defaults to ./config)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Skip the summary table")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = Config(args.config_dir)
    db = get_database(config.get_database_path())
    tracker = ProductivityTracker(DailyStatsRepository(db), config.today)

    user_ids = args.users or TaskRepository(db).list_user_ids()
    logger.info("Recomputing productivity for %d user(s)", len(user_ids))

    results, failed = recalculate(tracker, user_ids)
    if not args.quiet:
        Console().print(render_summary(results, failed))
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
