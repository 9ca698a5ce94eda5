from studentqa.services.answers import Answers

__all__ = [
    "Answers",
]
