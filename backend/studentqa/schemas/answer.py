"""
Pydantic schemas for answer CRUD operations.

Responses are detached copies of the ORM rows, so they stay usable after the
database connection that produced them is closed.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from studentqa.config import settings


def _validate_content(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("Answer content cannot be empty")
    if len(v) > settings.max_answer_length:
        raise ValueError(
            f"Answer content cannot exceed {settings.max_answer_length} characters"
        )
    return v


class AnswerCreate(BaseModel):
    """Input for creating an answer."""

    user_id: int
    question_id: int
    author: str = Field(max_length=255)
    content: str

    @field_validator('author')
    @classmethod
    def validate_author(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Author name cannot be empty")
        return v.strip()

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _validate_content(v)


class AnswerUpdate(BaseModel):
    """Input for updating an answer's content and solution flag."""

    content: str
    is_solution: bool = False

    @field_validator('content')
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _validate_content(v)


class AnswerResponse(BaseModel):
    """Response schema for a single answer."""

    id: int
    user_id: int
    question_id: int
    author: str
    content: str
    is_solution: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
