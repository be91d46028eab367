from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserBootstrapRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=256)
    email: Optional[str] = Field(default=None, max_length=320)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: str
