"""Dashboard Resources - Library Overview

Resources:
- library://dashboard/stats - Headline counts and the overdue list
- library://dashboard/notifications - Due-soon reminders

Both are recomputed from the snapshot on every read.
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError

from ..engine import LibraryEngine

logger = logging.getLogger(__name__)


def dashboard_resources(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Resource definitions computing the dashboard from ``engine``."""

    async def dashboard_stats_handler() -> dict[str, Any]:
        """Returns totals plus active and overdue loans."""
        try:
            dashboard = engine.dashboard()
            return {
                "computedAt": dashboard.computed_at.isoformat(),
                **dashboard.counts(),
                "returnedLoans": len(dashboard.returned_loans),
                "overdue": [loan.to_wire() for loan in dashboard.overdue_loans],
            }
        except Exception as e:
            logger.exception("Error in dashboard/stats resource")
            raise ResourceError(f"Failed to compute dashboard: {e!s}") from e

    async def notifications_handler() -> dict[str, Any]:
        """Returns a warning for every active loan due within the reminder window."""
        try:
            dashboard = engine.dashboard()
            logger.debug(
                "MCP Resource Request - dashboard/notifications: %d due soon",
                len(dashboard.notifications),
            )
            return {
                "computedAt": dashboard.computed_at.isoformat(),
                "windowDays": engine.due_soon_days,
                "notifications": [
                    notice.to_wire() for notice in dashboard.notifications
                ],
            }
        except Exception as e:
            logger.exception("Error in dashboard/notifications resource")
            raise ResourceError(f"Failed to compute notifications: {e!s}") from e

    return [
        {
            "uri": "library://dashboard/stats",
            "name": "Library Statistics",
            "description": (
                "Total books, students and loans, active and overdue loan counts, "
                "and the list of overdue loans."
            ),
            "mime_type": "application/json",
            "handler": dashboard_stats_handler,
        },
        {
            "uri": "library://dashboard/notifications",
            "name": "Due-Soon Reminders",
            "description": (
                "Warnings for loans still out that fall due today or within the "
                "configured number of days."
            ),
            "mime_type": "application/json",
            "handler": notifications_handler,
        },
    ]
