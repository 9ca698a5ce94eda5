from typing import Any, Optional

from pydantic import BaseModel


class Result(BaseModel):
    """
    Outcome of a data-access operation.

    Expected failures (missing rows, forbidden edits, invalid input) come
    back as ``success=False`` with a message instead of an exception.
    """

    success: bool
    message: str = ''
    data: Optional[Any] = None

    @classmethod
    def ok(cls, message: str = '', data: Any = None) -> "Result":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "Result":
        return cls(success=False, message=message)
