from fastapi import Depends
from services.cache import get_cache_client
from auth.security import get_current_tenant
from data.database import get_db

# --- DEPENDENCY INJECTION SETUP ---
CURRENT_TENANT = Depends(get_current_tenant)
DB_DEPENDENCY = Depends(get_db)
CACHE_CLIENT = Depends(get_cache_client)
