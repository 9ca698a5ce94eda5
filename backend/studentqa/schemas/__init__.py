from studentqa.schemas.answer import (
    AnswerCreate,
    AnswerUpdate,
    AnswerResponse,
)
from studentqa.schemas.question import (
    QuestionResponse,
)
from studentqa.schemas.result import Result
from studentqa.schemas.user import User, ROLES, PRIVILEGED_ROLES

__all__ = [
    "AnswerCreate",
    "AnswerUpdate",
    "AnswerResponse",
    "QuestionResponse",
    "Result",
    "User",
    "ROLES",
    "PRIVILEGED_ROLES",
]
