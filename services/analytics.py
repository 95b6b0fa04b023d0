from sqlalchemy.orm import Session
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable
from models.analytics import AnalyticsQuery, AnalyticsSummary, VariantMetrics
from models.enums import EventType
from data.database import Event
import logging

logger = logging.getLogger(__name__)


@dataclass
class _VariantAccumulator:
    """Working record for one variant while events are being counted."""
    events: int = 0
    user_ids: set[str] = field(default_factory=set)
    conversions: int = 0

    def add(self, event):
        self.events += 1
        self.user_ids.add(event.user_id)
        if event.event_type == EventType.CONVERSION:
            self.conversions += 1

    def finalize(self) -> VariantMetrics:
        users = len(self.user_ids)
        return VariantMetrics(
            events=self.events,
            users=users,
            conversions=self.conversions,
            conversion_rate=self.conversions / users if users > 0 else 0,
        )


def is_in_scope(event, experiment_scoped: bool) -> bool:
    """
    Whether an event counts towards the per-variant breakdown.
    When the events were already filtered down to one experiment, a variant
    label is enough; otherwise the event must also belong to some experiment.
    """
    if experiment_scoped:
        return event.variant is not None
    return event.variant is not None and event.experiment_id is not None


def summarize(events: Iterable, experiment_scoped: bool) -> AnalyticsSummary:
    """
    Reduces a list of events into totals plus per-variant metrics.

    Each event only needs ``user_id``, ``event_type``, ``experiment_id`` and
    ``variant`` attributes. Totals cover every event; the variant breakdown
    covers in-scope events only (see ``is_in_scope``). Pure function.
    """
    events = list(events)
    accumulators: dict[str, _VariantAccumulator] = {}

    for event in events:
        if not is_in_scope(event, experiment_scoped):
            continue
        accumulators.setdefault(event.variant, _VariantAccumulator()).add(event)

    return AnalyticsSummary(
        total_events=len(events),
        unique_users=len({event.user_id for event in events}),
        variants={name: acc.finalize() for name, acc in accumulators.items()},
    )


def end_of_day(value: datetime) -> datetime:
    """Moves a datetime to 23:59:59.999 of the same day so the whole end day is included."""
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def fetch_events(db: Session, tenant_id: str, query: AnalyticsQuery) -> list[Event]:
    """Loads the tenant's events matching the optional date range and experiment."""
    events_query = db.query(Event).filter(Event.tenant_id == tenant_id)

    if query.start_date:
        events_query = events_query.filter(Event.timestamp >= query.start_date)
    if query.end_date:
        events_query = events_query.filter(Event.timestamp <= end_of_day(query.end_date))
    if query.experiment_id:
        events_query = events_query.filter(Event.experiment_id == query.experiment_id)

    return events_query.all()


def get_summary(db: Session, tenant_id: str, query: AnalyticsQuery) -> AnalyticsSummary:
    """Fetches the tenant's events for the given filters and summarizes them."""
    events = fetch_events(db, tenant_id, query)
    logger.debug("analytics summary for tenant %s: start=%s end=%s experiment=%s, %d events",
                 tenant_id, query.start_date, query.end_date, query.experiment_id, len(events))

    return summarize(events, experiment_scoped=query.experiment_id is not None)
