import logging
from datetime import datetime, time, timedelta

from django.contrib.auth import get_user_model
from django.db.models import Sum
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from jobs.models import Job
from marketplace_api.exceptions import InvalidInput
from payments.models import PlatformLedgerEntry, Transaction
from projects.models import Project, ProjectStatusChange

User = get_user_model()
logger = logging.getLogger(__name__)


def _parse_bound(value, *, end=False):
    try:
        day = parse_date(value)
        parsed = parse_datetime(value) if day is None else None
    except ValueError:
        # well formatted but impossible, e.g. 2024-02-30
        return None
    if day is not None:
        parsed = datetime.combine(day, time.max if end else time.min)
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def month_range(now=None):
    now = now or timezone.now()
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(microseconds=1)


def parse_range(date_from, date_to):
    """Validate a ``from``/``to`` pair of ISO dates or datetimes; both bounds are inclusive."""
    if not date_from or not date_to:
        raise InvalidInput("Both 'from' and 'to' are required.")

    start = _parse_bound(date_from)
    end = _parse_bound(date_to, end=True)
    if start is None or end is None:
        raise InvalidInput("Dates must be ISO formatted (YYYY-MM-DD).")
    if start > end:
        raise InvalidInput("'from' must not be after 'to'.")
    return start, end


class AnalyticsService:

    @staticmethod
    def summary(start, end):
        transactions = Transaction.objects.filter(created_at__range=(start, end))
        completed_projects = (
            ProjectStatusChange.objects.filter(status=Project.STATUS_COMPLETED, changed_at__range=(start, end))
            .values('project').distinct()
        )

        data = {
            'from': start,
            'to': end,
            'users_joined': User.objects.filter(date_joined__range=(start, end)).count(),
            'jobs_posted': Job.objects.filter(created_at__range=(start, end)).count(),
            'projects_completed': completed_projects.count(),
            'transactions': transactions.count(),
            'total_revenue': transactions.aggregate(total=Sum('amount'))['total'] or 0,
            'platform_revenue': PlatformLedgerEntry.platform_revenue(
                PlatformLedgerEntry.objects.filter(created_at__range=(start, end))
            ),
        }
        logger.info(f"Analytics computed for {start.date()} - {end.date()}")
        return data

    @staticmethod
    def this_month():
        return AnalyticsService.summary(*month_range())

    @staticmethod
    def timeframe(date_from, date_to):
        return AnalyticsService.summary(*parse_range(date_from, date_to))
