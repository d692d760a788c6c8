"""Health check schema."""

from typing import Literal

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Reachability of the database and the response cache.

    ``degraded`` means only the cache is unreachable and listings are served
    uncached; ``down`` means the database is unreachable.
    """

    status: Literal["ok", "degraded", "down"]
    environment: str
    database: str
    cache: str
