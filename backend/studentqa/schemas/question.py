from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class QuestionResponse(BaseModel):
    """Response schema for a single question."""

    id: int
    user_id: int
    author: str
    title: str
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
