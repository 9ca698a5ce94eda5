#!/usr/bin/env python3
"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator

# Keep the module-level engine away from the default database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from studentqa.database import DatabaseHelper, create_db_engine, init_db
from studentqa.models.question import Question
from studentqa.schemas import User
from studentqa.services.answers import Answers


# ============================================================================
# Database Fixtures (in-memory SQLite)
# ============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory database with the schema created; shared by every session."""
    db_engine = create_db_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


def add_question(engine: Engine, title: str = "What is a foreign key?", user_id: int = 1) -> int:
    """Insert a question and return its ID."""
    with Session(engine) as session:
        question = Question(user_id=user_id, author="Test Student", title=title, content="")
        session.add(question)
        session.commit()
        return question.id


@pytest.fixture
def question_id(engine: Engine) -> int:
    return add_question(engine)


@pytest.fixture
def db(engine: Engine, question_id: int) -> Generator[DatabaseHelper, None, None]:
    helper = DatabaseHelper(bind=engine, connect_attempts=1)
    helper.connect_to_database()
    yield helper
    helper.close_connection()


@pytest.fixture
def answers(db: DatabaseHelper) -> Answers:
    return Answers(db)


# ============================================================================
# Users
# ============================================================================


@pytest.fixture
def author() -> User:
    return User(id=3, username="bob", role="student", name="Bob Johnson", email="bob@test.com")


@pytest.fixture
def other_student() -> User:
    return User(id=99, username="eve", role="student", name="Eve Adams")


@pytest.fixture
def instructor() -> User:
    return User(id=500, username="prof", role="instructor", name="Prof Oak")
