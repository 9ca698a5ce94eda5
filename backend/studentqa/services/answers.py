"""
Answers data-access object.

This service handles:
- Creating answers for existing questions
- Reading single answers and the answers of a question
- Updating content and the solution flag on behalf of an acting user
- Deleting answers on behalf of an acting user
- Case-insensitive keyword search over answer content

Mutating operations report expected failures through ``Result`` instead of
raising; reads return ``None`` or an empty list when nothing matches.
"""

import logging
from typing import List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from studentqa.database import DatabaseHelper
from studentqa.exceptions import (
    AppException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from studentqa.models.answer import Answer
from studentqa.models.question import Question
from studentqa.schemas import AnswerCreate, AnswerUpdate, AnswerResponse, Result, User

logger = logging.getLogger(__name__)

SchemaT = TypeVar('SchemaT', bound=BaseModel)

db_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True
)


def _validate(schema: Type[SchemaT], **data) -> SchemaT:
    """Build ``schema`` from ``data``, raising ValidationException on bad input."""
    try:
        return schema(**data)
    except ValidationError as e:
        errors = e.errors()
        message = errors[0]['msg'] if errors else str(e)
        # Drop pydantic's "Value error, " prefix from custom validator messages
        message = message.removeprefix('Value error, ')
        raise ValidationException(
            message,
            details={'errors': [
                {'field': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
                for err in errors
            ]}
        ) from e


def _escape_like(value: str) -> str:
    return (
        value.replace('\\', '\\\\')
        .replace('%', '\\%')
        .replace('_', '\\_')
    )


class Answers:
    """CRUD and search operations over answer rows."""

    def __init__(self, db: Union[DatabaseHelper, Session]):
        self._db = db

    @property
    def session(self) -> Session:
        if isinstance(self._db, DatabaseHelper):
            return self._db.session
        return self._db

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @db_retry
    def _get_answer(self, answer_id: int) -> Optional[Answer]:
        try:
            return self.session.get(Answer, answer_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                f"Failed to load answer {answer_id}: {e}",
                extra={'answer_id': answer_id}
            )
            raise

    @db_retry
    def _question_exists(self, question_id: int) -> bool:
        try:
            return self.session.get(Question, question_id) is not None
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                f"Failed to load question {question_id}: {e}",
                extra={'question_id': question_id}
            )
            raise

    def read(self, answer_id: int) -> Optional[AnswerResponse]:
        """
        Retrieve an answer by ID.

        Returns:
            The answer, or None if no answer has that ID
        """
        answer = self._get_answer(answer_id)
        if answer is None:
            logger.debug(f"Answer {answer_id} not found", extra={'answer_id': answer_id})
            return None
        return AnswerResponse.model_validate(answer)

    @db_retry
    def size(self) -> int:
        """Number of stored answers."""
        try:
            return self.session.query(func.count(Answer.id)).scalar() or 0
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to count answers: {e}")
            raise

    @db_retry
    def for_question(self, question_id: int) -> List[AnswerResponse]:
        """All answers to a question, oldest first."""
        try:
            answers = (
                self.session.query(Answer)
                .filter(Answer.question_id == question_id)
                .order_by(Answer.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                f"Failed to list answers for question {question_id}: {e}",
                extra={'question_id': question_id}
            )
            raise
        return [AnswerResponse.model_validate(a) for a in answers]

    @db_retry
    def search(
        self,
        keyword: Optional[str],
        question_id: Optional[int] = None,
        author: Optional[str] = None
    ) -> List[AnswerResponse]:
        """
        Find answers whose content contains ``keyword``, ignoring case.

        Args:
            keyword: Substring to look for, used as given; None or blank matches every answer
            question_id: Only answers to this question when given
            author: Only answers by this author (case-insensitive) when given

        Returns:
            Matching answers ordered by ID; empty list when nothing matches
        """
        query = self.session.query(Answer)
        if keyword and keyword.strip():
            pattern = f"%{_escape_like(keyword)}%"
            query = query.filter(Answer.content.ilike(pattern, escape='\\'))
        if question_id is not None:
            query = query.filter(Answer.question_id == question_id)
        if author and author.strip():
            query = query.filter(func.lower(Answer.author) == author.strip().lower())

        try:
            answers = query.order_by(Answer.id).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(
                f"Answer search failed: {e}",
                extra={'keyword': keyword, 'question_id': question_id, 'author': author}
            )
            raise

        logger.debug(
            f"Search for '{keyword}' matched {len(answers)} answer(s)",
            extra={'keyword': keyword, 'question_id': question_id, 'author': author}
        )
        return [AnswerResponse.model_validate(a) for a in answers]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, user_id: int, question_id: int, author: str, content: str) -> Result:
        """
        Insert a new answer to an existing question.

        Returns:
            Result whose data is the created AnswerResponse on success
        """
        try:
            payload = _validate(
                AnswerCreate,
                user_id=user_id,
                question_id=question_id,
                author=author,
                content=content
            )
            if not self._question_exists(payload.question_id):
                raise NotFoundException('Question', payload.question_id)

            answer = Answer(
                user_id=payload.user_id,
                question_id=payload.question_id,
                author=payload.author,
                content=payload.content,
                is_solution=False
            )
            self.session.add(answer)
            self.session.commit()
            self.session.refresh(answer)
        except AppException as e:
            return self._fail('create', e)
        except SQLAlchemyError as e:
            return self._fail_db('create', e)

        logger.info(
            f"Created answer {answer.id} for question {answer.question_id}",
            extra={'answer_id': answer.id, 'question_id': answer.question_id, 'user_id': answer.user_id}
        )
        return Result.ok("Answer created successfully", AnswerResponse.model_validate(answer))

    def update(
        self,
        answer_id: int,
        question_id: Optional[int],
        acting_user: Optional[User],
        new_content: str,
        is_solution: bool
    ) -> Result:
        """
        Change an answer's content and solution flag.

        The acting user must own the answer or hold a privileged role, and
        ``question_id`` (when given) must be the question the answer belongs to.
        """
        try:
            answer = self._load_for_change(answer_id, acting_user, 'update')
            if question_id is not None and answer.question_id != question_id:
                raise ValidationException(
                    f"Answer {answer_id} does not belong to question {question_id}",
                    details={'answer_id': answer_id, 'question_id': question_id}
                )
            changes = _validate(AnswerUpdate, content=new_content, is_solution=is_solution)

            answer.content = changes.content
            answer.is_solution = changes.is_solution
            self.session.commit()
            self.session.refresh(answer)
        except AppException as e:
            return self._fail('update', e)
        except SQLAlchemyError as e:
            return self._fail_db('update', e)

        logger.info(
            f"Updated answer {answer_id}",
            extra={'answer_id': answer_id, 'user_id': acting_user.id, 'is_solution': answer.is_solution}
        )
        return Result.ok("Answer updated successfully", AnswerResponse.model_validate(answer))

    def delete(self, answer_id: int, acting_user: Optional[User]) -> Result:
        """Remove an answer owned by the acting user (or any answer for privileged roles)."""
        try:
            answer = self._load_for_change(answer_id, acting_user, 'delete')
            self.session.delete(answer)
            self.session.commit()
        except AppException as e:
            return self._fail('delete', e)
        except SQLAlchemyError as e:
            return self._fail_db('delete', e)

        logger.info(
            f"Deleted answer {answer_id}",
            extra={'answer_id': answer_id, 'user_id': acting_user.id}
        )
        return Result.ok("Answer deleted successfully")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_for_change(self, answer_id: int, acting_user: Optional[User], action: str) -> Answer:
        if acting_user is None:
            raise PermissionDeniedException(f"An acting user is required to {action} an answer")

        answer = self._get_answer(answer_id)
        if answer is None:
            raise NotFoundException('Answer', answer_id)

        if not acting_user.can_modify(answer.user_id):
            raise PermissionDeniedException(
                f"User {acting_user.username} may not {action} answer {answer_id}",
                details={'answer_id': answer_id, 'user_id': acting_user.id, 'role': acting_user.role}
            )
        return answer

    def _rollback(self) -> None:
        if isinstance(self._db, DatabaseHelper) and not self._db.is_connected:
            return
        self.session.rollback()

    def _fail(self, action: str, exc: AppException) -> Result:
        self._rollback()
        logger.warning(
            f"Answer {action} rejected: {exc.error_code} - {exc.message}",
            extra={'error_code': exc.error_code, 'details': exc.details}
        )
        return Result.fail(exc.message)

    def _fail_db(self, action: str, exc: SQLAlchemyError) -> Result:
        self._rollback()
        logger.error(f"Database error during answer {action}: {exc}", exc_info=True)
        return Result.fail(f"Database error during answer {action}: {exc.__class__.__name__}")
