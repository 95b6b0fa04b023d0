#!/usr/bin/env python3
"""Seed demo tenants, experiments, user assignments and events.

Usage:
    python scripts/seed_demo.py

Re-running is safe: tenants whose API key already exists are skipped.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# The application modules live at the project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy.orm import Session  # noqa: E402

from data.database import Event, Experiment, SessionLocal, Tenant, UserAssignment, create_tables  # noqa: E402
from models.enums import EventType, ExperimentStatus  # noqa: E402

import logging  # noqa: E402

logger = logging.getLogger(__name__)

TENANTS = [
    {"name": "Acme Corp", "api_key": "test-api-key-12345"},
    {"name": "Demo Company", "api_key": "demo-api-key-67890"},
]

EXPERIMENTS = [
    {
        "tenant_key": "test-api-key-12345",
        "name": "Homepage CTA Button Test",
        "description": "Testing different CTA button colors",
        "status": ExperimentStatus.ACTIVE,
        "variants": ["A", "B"],
        "start_date": datetime(2025, 1, 1, tzinfo=timezone.utc),
        "end_date": None,
    },
    {
        "tenant_key": "test-api-key-12345",
        "name": "Pricing Page Layout Test",
        "description": "A/B test for pricing page design",
        "status": ExperimentStatus.ACTIVE,
        "variants": ["Control", "Variant"],
        "start_date": datetime(2025, 1, 15, tzinfo=timezone.utc),
        "end_date": None,
    },
    {
        "tenant_key": "test-api-key-12345",
        "name": "Email Subject Line Test",
        "description": "Testing email subject line variations",
        "status": ExperimentStatus.COMPLETED,
        "variants": ["Original", "New"],
        "start_date": datetime(2024, 12, 1, tzinfo=timezone.utc),
        "end_date": datetime(2024, 12, 31, tzinfo=timezone.utc),
    },
    {
        "tenant_key": "demo-api-key-67890",
        "name": "Landing Page Headline Test",
        "description": "Testing headline variations",
        "status": ExperimentStatus.ACTIVE,
        "variants": ["Headline A", "Headline B"],
        "start_date": datetime(2025, 1, 10, tzinfo=timezone.utc),
        "end_date": None,
    },
]

ASSIGNMENTS = {
    "Homepage CTA Button Test": [
        ("user_001", "A"), ("user_002", "B"), ("user_003", "A"), ("user_004", "B"), ("user_005", "B"),
    ],
    "Pricing Page Layout Test": [
        ("user_006", "Control"), ("user_007", "Variant"), ("user_008", "Control"),
    ],
}

# (tenant key, user, type, experiment name, variant, properties, minutes ago or fixed timestamp)
EVENTS = [
    ("test-api-key-12345", "user_001", EventType.PAGE_VIEW, "Homepage CTA Button Test", "A", None, 5),
    ("test-api-key-12345", "user_001", EventType.CLICK, "Homepage CTA Button Test", "A", {"element": "cta_button"}, 4),
    ("test-api-key-12345", "user_001", EventType.CONVERSION, "Homepage CTA Button Test", "A", {"value": 99.99}, 3),
    ("test-api-key-12345", "user_002", EventType.PAGE_VIEW, "Homepage CTA Button Test", "B", None, 10),
    ("test-api-key-12345", "user_003", EventType.PAGE_VIEW, "Homepage CTA Button Test", "A", None, 15),
    ("test-api-key-12345", "user_003", EventType.CLICK, "Homepage CTA Button Test", "A", None, 14),
    ("test-api-key-12345", "user_004", EventType.PAGE_VIEW, "Homepage CTA Button Test", "B", None, 20),
    ("test-api-key-12345", "user_004", EventType.CONVERSION, "Homepage CTA Button Test", "B", {"value": 49.99}, 19),
    ("test-api-key-12345", "user_005", EventType.PAGE_VIEW, "Homepage CTA Button Test", "B", None, 25),
    ("test-api-key-12345", "user_006", EventType.PAGE_VIEW, "Pricing Page Layout Test", "Control", None, 30),
    ("test-api-key-12345", "user_007", EventType.PAGE_VIEW, "Pricing Page Layout Test", "Variant", None, 35),
    ("test-api-key-12345", "user_007", EventType.CONVERSION, "Pricing Page Layout Test", "Variant", None, 34),
    ("test-api-key-12345", "user_010", EventType.PAGE_VIEW, "Email Subject Line Test", "Original", None,
     datetime(2024, 12, 15, 10, 0, tzinfo=timezone.utc)),
    ("test-api-key-12345", "user_011", EventType.PAGE_VIEW, "Email Subject Line Test", "New", None,
     datetime(2024, 12, 15, 11, 0, tzinfo=timezone.utc)),
    # Untied traffic: counts toward totals but never toward a variant
    ("test-api-key-12345", "user_020", EventType.PAGE_VIEW, None, None, {"page": "/about"}, 40),
    ("demo-api-key-67890", "user_101", EventType.PAGE_VIEW, "Landing Page Headline Test", "Headline A", None, 8),
    ("demo-api-key-67890", "user_101", EventType.CONVERSION, "Landing Page Headline Test", "Headline A", None, 7),
    ("demo-api-key-67890", "user_102", EventType.PAGE_VIEW, "Landing Page Headline Test", "Headline B", None, 12),
]


def even_variants(names: list[str]) -> list[dict]:
    split = round(100 / len(names), 2)
    return [{"name": name, "trafficSplit": split} for name in names]


def seed(db: Session, now: datetime | None = None) -> dict[str, int]:
    """Inserts the demo data set and returns how many rows of each kind were created."""
    now = now or datetime.now(timezone.utc)
    created = {"tenants": 0, "experiments": 0, "assignments": 0, "events": 0}

    tenants: dict[str, Tenant] = {}
    for data in TENANTS:
        if db.query(Tenant).filter(Tenant.api_key == data["api_key"]).first():
            logger.info("Tenant %s already seeded, skipping", data["name"])
            continue
        tenant = Tenant(name=data["name"], api_key=data["api_key"])
        db.add(tenant)
        tenants[data["api_key"]] = tenant
        created["tenants"] += 1
    db.flush()

    experiments: dict[str, Experiment] = {}
    for data in EXPERIMENTS:
        tenant = tenants.get(data["tenant_key"])
        if tenant is None:
            continue
        experiment = Experiment(
            tenant_id=tenant.id,
            name=data["name"],
            description=data["description"],
            status=data["status"],
            variants=even_variants(data["variants"]),
            start_date=data["start_date"],
            end_date=data["end_date"],
        )
        db.add(experiment)
        experiments[data["name"]] = experiment
        created["experiments"] += 1
    db.flush()

    for experiment_name, pairs in ASSIGNMENTS.items():
        experiment = experiments.get(experiment_name)
        if experiment is None:
            continue
        for user_id, variant in pairs:
            db.add(UserAssignment(
                tenant_id=experiment.tenant_id,
                experiment_id=experiment.id,
                user_id=user_id,
                variant=variant,
            ))
            created["assignments"] += 1

    for tenant_key, user_id, event_type, experiment_name, variant, properties, when in EVENTS:
        tenant = tenants.get(tenant_key)
        if tenant is None:
            continue
        experiment = experiments.get(experiment_name) if experiment_name else None
        timestamp = when if isinstance(when, datetime) else now - timedelta(minutes=when)
        db.add(Event(
            tenant_id=tenant.id,
            user_id=user_id,
            event_type=event_type,
            experiment_id=experiment.id if experiment else None,
            variant=variant,
            properties=properties or {},
            timestamp=timestamp,
        ))
        created["events"] += 1

    db.commit()
    return created


def main() -> int:
    create_tables()
    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()

    print("Seed summary:")
    for kind, count in created.items():
        print(f"   {kind}: {count}")
    print("API keys:")
    for data in TENANTS:
        print(f"   {data['name']}: {data['api_key']}")
    print("Try:")
    print("   GET /experiments")
    print("   GET /analytics/summary?startDate=2024-12-01&endDate=2024-12-31")
    return 0


if __name__ == "__main__":
    sys.exit(main())
