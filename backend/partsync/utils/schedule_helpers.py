"""
Schedule helpers — cron expression parsing for Celery beat.
Version: 1.0.0
"""
from typing import Dict

CRON_FIELDS = ("minute", "hour", "day_of_month", "month_of_year", "day_of_week")


def parse_cron_expression(expression: str) -> Dict[str, str]:
    """Split a five-field cron expression into celery crontab kwargs.

    >>> parse_cron_expression("0 3 * * *")["hour"]
    '3'
    """
    fields = (expression or "").split()
    if len(fields) != len(CRON_FIELDS):
        raise ValueError(
            f"Invalid cron expression {expression!r}: expected 5 fields, got {len(fields)}"
        )
    return dict(zip(CRON_FIELDS, fields))
