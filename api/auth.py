"""X-API-Key access control for the REST API.

Access control is off unless API_AUTH_KEY is set. Provider keys are a
separate concern handled by the settings endpoints.
"""

import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from api.config import APIConfig

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(x_api_key: Optional[str] = Security(api_key_header)) -> Optional[str]:
    """Reject the request unless X-API-Key matches API_AUTH_KEY."""
    expected = APIConfig.load().api_key
    if not expected:
        return None
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        logger.warning("Rejected request with missing or invalid X-API-Key")
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return x_api_key
