from datetime import datetime, timezone
from fastapi import status
import pytest

from data.database import Event, Experiment
from models.enums import EventType, ExperimentStatus


@pytest.fixture
def experiment(db_session, tenant):
    experiment = Experiment(tenant_id=tenant.id, name="CTA Button Test",
                            status=ExperimentStatus.ACTIVE,
                            variants=[{"name": "A", "trafficSplit": 50}, {"name": "B", "trafficSplit": 50}])
    db_session.add(experiment)
    db_session.commit()
    return experiment


def add_event(db, tenant_id, user_id, event_type, experiment_id=None, variant=None, timestamp=None):
    db.add(Event(
        tenant_id=tenant_id,
        user_id=user_id,
        event_type=event_type,
        experiment_id=experiment_id,
        variant=variant,
        properties={},
        timestamp=timestamp or datetime(2025, 9, 29, 12, 0, tzinfo=timezone.utc),
    ))
    db.commit()


def test_summary_requires_api_key(client):
    assert client.get("/analytics/summary").status_code == status.HTTP_401_UNAUTHORIZED


def test_empty_summary(client, headers):
    response = client.get("/analytics/summary", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"totalEvents": 0, "uniqueUsers": 0, "variants": {}}


def test_summary_across_experiments(client, headers, tenant, experiment, db_session):
    add_event(db_session, tenant.id, "user_001", EventType.PAGE_VIEW, experiment.id, "A")
    add_event(db_session, tenant.id, "user_001", EventType.CONVERSION, experiment.id, "A")
    add_event(db_session, tenant.id, "user_002", EventType.CONVERSION, experiment.id, "B")
    add_event(db_session, tenant.id, "user_003", EventType.CONVERSION, experiment.id, "B")
    add_event(db_session, tenant.id, "user_004", EventType.PAGE_VIEW)
    # A variant label without an experiment only counts towards the totals
    add_event(db_session, tenant.id, "user_005", EventType.CONVERSION, None, "A")

    data = client.get("/analytics/summary", headers=headers).json()

    assert data["totalEvents"] == 6
    assert data["uniqueUsers"] == 5
    assert data["variants"] == {
        "A": {"events": 2, "users": 1, "conversions": 1, "conversionRate": 1.0},
        "B": {"events": 2, "users": 2, "conversions": 2, "conversionRate": 1.0},
    }


def test_summary_for_one_experiment(client, headers, tenant, experiment, db_session):
    other = Experiment(tenant_id=tenant.id, name="Pricing", variants=[])
    db_session.add(other)
    db_session.commit()
    add_event(db_session, tenant.id, "user1", EventType.PAGE_VIEW, experiment.id, "A")
    add_event(db_session, tenant.id, "user1", EventType.CLICK, experiment.id, "A")
    add_event(db_session, tenant.id, "user2", EventType.CONVERSION, experiment.id, "A")
    add_event(db_session, tenant.id, "user9", EventType.CONVERSION, other.id, "Control")

    response = client.get("/analytics/summary", params={"experimentId": experiment.id}, headers=headers)

    data = response.json()
    assert data["totalEvents"] == 3
    assert data["uniqueUsers"] == 2
    assert data["variants"] == {"A": {"events": 3, "users": 2, "conversions": 1, "conversionRate": 0.5}}


def test_end_date_includes_whole_day(client, headers, tenant, db_session):
    add_event(db_session, tenant.id, "early", EventType.PAGE_VIEW, timestamp=datetime(2025, 9, 28, 23, 0, tzinfo=timezone.utc))
    add_event(db_session, tenant.id, "morning", EventType.PAGE_VIEW, timestamp=datetime(2025, 9, 29, 0, 0, tzinfo=timezone.utc))
    add_event(db_session, tenant.id, "late", EventType.PAGE_VIEW, timestamp=datetime(2025, 9, 30, 23, 59, 59, tzinfo=timezone.utc))
    add_event(db_session, tenant.id, "after", EventType.PAGE_VIEW, timestamp=datetime(2025, 10, 1, 0, 0, tzinfo=timezone.utc))

    response = client.get("/analytics/summary", params={"startDate": "2025-09-29", "endDate": "2025-09-30"}, headers=headers)

    assert response.json()["totalEvents"] == 2

    response = client.get("/analytics/summary", params={"startDate": "2025-09-30"}, headers=headers)
    assert response.json()["totalEvents"] == 2

    response = client.get("/analytics/summary", params={"endDate": "2025-09-28"}, headers=headers)
    assert response.json()["totalEvents"] == 1


def test_summary_is_tenant_scoped(client, headers, tenant, other_tenant, db_session):
    add_event(db_session, tenant.id, "mine", EventType.PAGE_VIEW)
    add_event(db_session, other_tenant.id, "theirs", EventType.PAGE_VIEW)
    add_event(db_session, other_tenant.id, "theirs-too", EventType.CLICK)

    assert client.get("/analytics/summary", headers=headers).json()["totalEvents"] == 1


def test_summary_rejects_bad_dates(client, headers):
    response = client.get("/analytics/summary", params={"startDate": "not-a-date"}, headers=headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
