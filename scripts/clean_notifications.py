"""Utility script to purge notifications that do not point at any item."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import (
    cleanup_manager_announcement_notifications,
    count_blank_target_notifications,
    count_manager_announcement_notifications,
    purge_blank_target_notifications,
    sample_blank_target_notifications,
)
from app.infrastructure.database import SessionLocal, initialize_database


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the clean-up."""

    parser = argparse.ArgumentParser(
        description="Delete notifications stored without a target item.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report what would be deleted.",
    )
    parser.add_argument(
        "--managers",
        action="store_true",
        help="Also remove announcement notifications held by managers.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the clean-up and return the number of deleted notifications."""

    args = parse_args(argv)
    initialize_database()

    session = SessionLocal()
    try:
        count = count_blank_target_notifications(session)
        print(f"Found {count} notification(s) without target")
        for notification in sample_blank_target_notifications(session):
            print(
                f"  - #{notification.id} {notification.type.value} "
                f"user={notification.user_id}: {notification.message}"
            )

        if args.managers:
            manager_count = count_manager_announcement_notifications(session)
            print(f"Found {manager_count} announcement notification(s) held by managers")

        if args.dry_run:
            print("Dry run: nothing deleted")
            return 0

        deleted = purge_blank_target_notifications(session) if count else 0
        if args.managers:
            deleted += cleanup_manager_announcement_notifications(session)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Clean-up failed: {exc}") from exc
    finally:
        session.close()

    print(f"Deleted {deleted} notification(s)")
    return deleted


if __name__ == "__main__":
    main()
