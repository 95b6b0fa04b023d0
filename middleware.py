from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from contextvars import ContextVar

import logging
import uuid

# Define the ContextVar to store the request ID
request_id_context: ContextVar[str] = ContextVar("request_id", default="N/A")

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    @classmethod
    def request_id_context(cls):
        return request_id_context

    async def dispatch(self, request: Request, call_next):

        # Reuse the caller's request ID when it sends one, otherwise generate a short one
        new_request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        # Store the token (ContextVar token) to be used for reset later
        token = request_id_context.set(new_request_id)

        logger.debug("%s %s Request started", request.method, request.url.path)

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = new_request_id

        except Exception:
            # Log any exceptions with the context intact
            logger.exception("Unhandled error during request processing.")
            raise

        finally:
            logger.debug("%s %s Request finished", request.method, request.url.path)
            request_id_context.reset(token)

        return response
