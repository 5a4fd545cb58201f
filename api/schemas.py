from typing import Optional, Union
from pydantic import BaseModel, Field

class StartRequest(BaseModel):
    """Match start request schema."""
    seed: int = 42
    width: Optional[int] = Field(default=None, ge=2)
    height: Optional[int] = Field(default=None, ge=1)

class ValueIn(BaseModel):
    """Angle or power submission; numeric strings are accepted as typed."""
    value: Union[float, str]

class EventsResponse(BaseModel):
    """Events response schema."""
    match_no: int
    next_offset: int
    events: list[dict]
