from fastapi.security import APIKeyHeader
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from data.database import Tenant, get_db
from services.cache import CacheClient, get_cache_client
import logging

logger = logging.getLogger(__name__)

# auto_error is off so a missing header gets our own 401 message
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)

def get_current_tenant(
    api_key: str | None = Depends(api_key_scheme),
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache_client),
) -> Tenant:
    """Resolves the calling tenant from the X-API-Key header for every secured endpoint."""
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tenant identification required",
        )

    tenant = cache.get_tenant(api_key)
    if tenant is None:
        tenant = db.query(Tenant).filter(Tenant.api_key == api_key).one_or_none()
        if tenant is None:
            logger.info("Rejected request with unknown API key")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
            )
        cache.set_tenant(tenant)

    return tenant
