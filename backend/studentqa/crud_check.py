#!/usr/bin/env python3
"""
Answers CRUD check suite.

Runs five checks against a live database, one after another: create, read,
update, delete and search. Every check opens its own database connection,
performs its operations through ``Answers`` and closes the connection again,
whether it passed or not. A failing or crashing check never stops the ones
after it.

Usage:
    python -m studentqa.crud_check [--database-url URL] [--init-db]

At least one question must exist; see ``scripts/seed_question.py``.
"""

import argparse
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from studentqa.config import settings
from studentqa.database import DatabaseHelper, create_db_engine, ensure_database_directory, init_db
from studentqa.exceptions import DatabaseException
from studentqa.logging_config import setup_logging
from studentqa.schemas import User
from studentqa.services.answers import Answers

logger = logging.getLogger(__name__)

DatabaseFactory = Callable[[], DatabaseHelper]
CheckFn = Callable[[DatabaseFactory], bool]

BANNER_WIDTH = 43


@dataclass
class CheckSummary:
    """Running tally of check outcomes."""

    passed: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0


def _say(message: str) -> None:
    print(f"  {message}")


@contextmanager
def scoped_database(make_db: DatabaseFactory) -> Iterator[Optional[DatabaseHelper]]:
    """
    Connect a fresh helper and always close it afterwards.

    Yields None when the database cannot be reached; the failure is logged
    with its traceback.
    """
    db = make_db()
    try:
        try:
            db.connect_to_database()
        except DatabaseException as e:
            _say(f"Error: {e.message}")
            logger.error(f"Database connection failed: {e.details}", exc_info=True)
            yield None
        else:
            yield db
    finally:
        db.close_connection()


def first_question_id(db: DatabaseHelper) -> Optional[int]:
    """ID of the first stored question, or None when there are none."""
    questions = db.load_all_questions()
    if not questions:
        _say("No questions found in database. Please create at least one question first.")
        return None

    question_id = questions[0].id
    _say(f"Using existing question with ID: {question_id}")
    return question_id


def check_create_answer(make_db: DatabaseFactory) -> bool:
    """Creating an answer succeeds, grows the count by one and keeps the author."""
    _say("Testing answer creation with valid data...")

    with scoped_database(make_db) as db:
        if db is None:
            return False

        question_id = first_question_id(db)
        if question_id is None:
            _say("Error: Could not find valid question")
            return False

        answers = Answers(db)
        initial_size = answers.size()

        result = answers.create(1, question_id, "John Doe", "This is a test answer.")
        if not result.success:
            _say(f"Error: Answer creation failed - {result.message}")
            return False

        if answers.size() != initial_size + 1:
            _say("Error: Answer count did not increase")
            return False

        created = result.data
        if created is None or created.author != "John Doe":
            _say("Error: Created answer has incorrect data")
            return False

        _say(f"Answer created successfully with ID: {created.id}")
        return True


def check_read_answer(make_db: DatabaseFactory) -> bool:
    """A freshly created answer can be read back by its ID."""
    _say("Testing answer retrieval by ID...")

    with scoped_database(make_db) as db:
        if db is None:
            return False

        question_id = first_question_id(db)
        if question_id is None:
            _say("Error: Could not find valid question")
            return False

        answers = Answers(db)
        create_result = answers.create(2, question_id, "Jane Smith", "Test answer for reading.")
        if not create_result.success:
            _say("Error: Failed to create test answer")
            return False

        answer_id = create_result.data.id
        retrieved = answers.read(answer_id)

        if retrieved is None:
            _say("Error: Retrieved answer is null")
            return False

        if retrieved.id != answer_id:
            _say("Error: Retrieved answer has wrong ID")
            return False

        if retrieved.content != "Test answer for reading.":
            _say("Error: Retrieved answer has wrong content")
            return False

        _say(f"Answer retrieved successfully: ID={retrieved.id}")
        return True


def check_update_answer(make_db: DatabaseFactory) -> bool:
    """The author can change an answer's content and mark it as the solution."""
    _say("Testing answer update operation...")

    with scoped_database(make_db) as db:
        if db is None:
            return False

        question_id = first_question_id(db)
        if question_id is None:
            _say("Error: Could not find valid question")
            return False

        answers = Answers(db)
        create_result = answers.create(3, question_id, "Bob Johnson", "Original content")
        if not create_result.success:
            _say("Error: Failed to create test answer")
            return False

        answer_id = create_result.data.id
        user = User(
            id=3,
            username="bob",
            role="student",
            name="Bob Johnson",
            email="bob@test.com"
        )

        update_result = answers.update(answer_id, question_id, user, "Updated content", True)
        if not update_result.success:
            _say(f"Error: Answer update failed - {update_result.message}")
            return False

        updated = answers.read(answer_id)
        if updated is None or updated.content != "Updated content":
            _say("Error: Content was not updated")
            return False

        if not updated.is_solution:
            _say("Error: Solution flag was not updated")
            return False

        _say("Answer updated successfully")
        return True


def check_delete_answer(make_db: DatabaseFactory) -> bool:
    """The author can delete an answer; the count shrinks and reads miss."""
    _say("Testing answer deletion operation...")

    with scoped_database(make_db) as db:
        if db is None:
            return False

        question_id = first_question_id(db)
        if question_id is None:
            _say("Error: Could not find valid question")
            return False

        answers = Answers(db)
        create_result = answers.create(4, question_id, "Alice Williams", "Answer to be deleted")
        if not create_result.success:
            _say("Error: Failed to create test answer")
            return False

        answer_id = create_result.data.id
        size_before_delete = answers.size()
        user = User(
            id=4,
            username="alice",
            role="student",
            name="Alice Williams",
            email="alice@test.com"
        )

        delete_result = answers.delete(answer_id, user)
        if not delete_result.success:
            _say(f"Error: Answer deletion failed - {delete_result.message}")
            return False

        if answers.size() != size_before_delete - 1:
            _say("Error: Answer count did not decrease")
            return False

        if answers.read(answer_id) is not None:
            _say("Error: Answer still exists after deletion")
            return False

        _say("Answer deleted successfully")
        return True


def check_search_answers(make_db: DatabaseFactory) -> bool:
    """Keyword search finds the answer mentioning Java, ignoring case."""
    _say("Testing answer search operation...")

    with scoped_database(make_db) as db:
        if db is None:
            return False

        question_id = first_question_id(db)
        if question_id is None:
            _say("Error: Could not find valid question")
            return False

        answers = Answers(db)
        answers.create(5, question_id, "Charlie Brown", "This answer discusses Java programming")
        answers.create(5, question_id, "Charlie Brown", "This answer is about Python programming")
        answers.create(5, question_id, "Charlie Brown", "This answer covers database design")

        results = answers.search("Java", None, None)

        if results is None:
            _say("Error: Search results are null")
            return False

        if not results:
            _say("Error: Search returned no results")
            return False

        if not any("java" in answer.content.lower() for answer in results):
            _say("Error: No search results contain the keyword 'Java'")
            return False

        _say(f"Search found {len(results)} matching answer(s)")
        return True


CHECKS: List[Tuple[str, CheckFn]] = [
    ("Test 1: Create Answer", check_create_answer),
    ("Test 2: Read Answer", check_read_answer),
    ("Test 3: Update Answer", check_update_answer),
    ("Test 4: Delete Answer", check_delete_answer),
    ("Test 5: Search Answers", check_search_answers),
]


def run_check(name: str, check: CheckFn, make_db: DatabaseFactory, summary: CheckSummary) -> bool:
    """Run one check, print its outcome and record it in ``summary``."""
    print(f"Running: {name}")
    try:
        passed = check(make_db)
    except Exception as e:
        print(f"✗ FAILED with exception: {e}\n")
        logger.exception(f"Check '{name}' raised an exception")
        summary.failed += 1
        return False

    if passed:
        print("✓ PASSED\n")
        summary.passed += 1
    else:
        print("✗ FAILED\n")
        summary.failed += 1
    return passed


def _banner(title: str) -> None:
    print("=" * BANNER_WIDTH)
    print(title.center(BANNER_WIDTH).rstrip())
    print("=" * BANNER_WIDTH)


def print_summary(summary: CheckSummary) -> None:
    print()
    _banner("Test Summary")
    print(f"Tests Passed: {summary.passed}")
    print(f"Tests Failed: {summary.failed}")
    print(f"Total Tests:  {summary.total}")
    print("=" * BANNER_WIDTH + "\n")


def run_all(
    make_db: DatabaseFactory,
    checks: Optional[List[Tuple[str, CheckFn]]] = None
) -> CheckSummary:
    """Run every check in order and print the summary."""
    summary = CheckSummary()

    _banner("Answers CRUD Operations Test Suite")
    print()

    for name, check in checks or CHECKS:
        run_check(name, check, make_db, summary)

    print_summary(summary)
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns 0 when every check passed, 1 otherwise."""
    parser = argparse.ArgumentParser(
        description="Run the Answers CRUD checks against a database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m studentqa.crud_check
  python -m studentqa.crud_check --init-db
  python -m studentqa.crud_check --database-url sqlite:///./storage/hw.db
        """
    )

    parser.add_argument(
        '--database-url',
        default=None,
        help='SQLAlchemy database URL (default: DATABASE_URL from config)'
    )

    parser.add_argument(
        '--init-db',
        action='store_true',
        help='Create missing tables before running the checks'
    )

    args = parser.parse_args(argv)

    setup_logging()

    database_url = args.database_url or settings.database_url
    engine = create_db_engine(database_url, echo=settings.database_echo)
    logger.info("Running Answers CRUD checks", extra={'database_url': engine.url.render_as_string()})

    try:
        ensure_database_directory(engine)
        if args.init_db:
            init_db(engine)

        summary = run_all(lambda: DatabaseHelper(bind=engine))
    finally:
        engine.dispose()

    return 0 if summary.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
