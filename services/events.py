from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status
from data.database import Event, utc_now
from models.events import EventCreate
from services.experiments import find_experiment
import logging

logger = logging.getLogger(__name__)

def create_event(db: Session, tenant_id: str, event_data: EventCreate) -> Event:
    """
    Stores a tracking event for the tenant.
    experimentId and variant are lifted out of the event properties so
    analytics can group on them; the properties themselves are kept whole.
    """
    properties = event_data.properties or {}
    experiment_id = properties.get("experimentId") or None
    variant = properties.get("variant") or None

    if experiment_id is not None and find_experiment(db, tenant_id, str(experiment_id)) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown experiment {experiment_id}"
        )

    db_event = Event(
        tenant_id=tenant_id,
        user_id=event_data.user_id,
        event_type=event_data.event_type,
        experiment_id=str(experiment_id) if experiment_id is not None else None,
        variant=str(variant) if variant is not None else None,
        properties=properties,
        timestamp=event_data.timestamp or utc_now(),
    )

    try:
        db.add(db_event)
        db.commit()
        db.refresh(db_event)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to insert event for user %s of type %s", event_data.user_id, event_data.event_type)
        raise

    logger.info("Recorded %s event for user %s (experiment=%s, variant=%s)",
                db_event.event_type.value, db_event.user_id, db_event.experiment_id, db_event.variant)
    return db_event
