from studentqa.database import Base
from studentqa.models.question import Question
from studentqa.models.answer import Answer

__all__ = ['Base', 'Question', 'Answer']
