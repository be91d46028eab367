"""
Refresh schemas.

POST /refresh-stats → RefreshResponse

The request body is read leniently by the router (see routers/refresh.py),
so there is no request model here.
"""
from pydantic import BaseModel, Field


class RefreshResponse(BaseModel):
    updated: int = Field(
        description="Members for which a new snapshot was written. 0 is still a success.",
        examples=[3],
    )
