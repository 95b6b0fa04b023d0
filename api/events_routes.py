from fastapi import APIRouter, HTTPException, status
from sqlalchemy.orm import Session

from config import config
from data.database import Tenant
from models.events import EventCreate, EventResponse
from services import events
from services.cache import CacheClient
from api.depends import CURRENT_TENANT, DB_DEPENDENCY, CACHE_CLIENT

import logging

logger = logging.getLogger(__name__)

events_router = APIRouter(
    prefix="/events",
    tags=["events"],
)

# POST /events
@events_router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def record_event_route(
    event_data: EventCreate,
    tenant: Tenant = CURRENT_TENANT,
    db: Session = DB_DEPENDENCY,
    cache: CacheClient = CACHE_CLIENT
):
    """
    Ingest a campaign event (page view, click, conversion) for a user.
    Throttled per tenant to EVENTS_RATE_LIMIT requests per EVENTS_RATE_WINDOW seconds.
    """
    if cache.hit_rate_limit("events", tenant.id, config.events_rate_limit, config.events_rate_window):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(config.events_rate_window)},
        )

    return events.create_event(db, tenant.id, event_data)
