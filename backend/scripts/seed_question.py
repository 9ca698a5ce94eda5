#!/usr/bin/env python3
"""
Insert a question so the Answers CRUD checks have a foreign key target.

Usage:
    python scripts/seed_question.py [--title TITLE] [--author NAME] [--user-id ID] [--database-url URL]

Examples:
    python scripts/seed_question.py
    python scripts/seed_question.py --title "How do joins work?" --author "Dana Lee"
    python scripts/seed_question.py --database-url sqlite:///./storage/hw.db
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

# Add parent directory to path to import studentqa modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from studentqa.database import DatabaseHelper, create_db_engine, init_db, engine
from studentqa.exceptions import DatabaseException
from studentqa.models.question import Question

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def seed_question(
    title: str,
    author: str,
    user_id: int,
    content: str = "",
    database_url: Optional[str] = None
) -> Optional[int]:
    """
    Create the tables if needed and insert one question.

    Args:
        title: Question title
        author: Display name of the asking student
        user_id: ID of the asking student
        content: Question body
        database_url: Database to seed (default: DATABASE_URL from config)

    Returns:
        ID of the new question, or None on failure
    """
    bind = create_db_engine(database_url) if database_url else engine

    db = DatabaseHelper(bind=bind)
    try:
        init_db(bind)
        db.connect_to_database()
        question = Question(user_id=user_id, author=author, title=title, content=content)
        db.session.add(question)
        db.session.commit()
        logger.info(f"✓ Created question {question.id}: {question.title}")
        return question.id

    except DatabaseException as e:
        logger.error(f"Could not connect to database: {e.message}", extra=e.details)
        return None

    except SQLAlchemyError as e:
        logger.error(f"Error creating question: {e}", exc_info=True)
        if db.is_connected:
            db.session.rollback()
        return None

    finally:
        db.close_connection()
        if bind is not engine:
            bind.dispose()


def main(argv=None):
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Insert a question for the Answers CRUD checks"
    )

    parser.add_argument(
        '--title',
        default='How do I start with SQL databases?',
        help='Question title'
    )

    parser.add_argument(
        '--author',
        default='Test Student',
        help='Name of the asking student'
    )

    parser.add_argument(
        '--user-id',
        type=int,
        default=1,
        help='ID of the asking student (default: 1)'
    )

    parser.add_argument(
        '--content',
        default='',
        help='Question body'
    )

    parser.add_argument(
        '--database-url',
        default=None,
        help='SQLAlchemy database URL (default: DATABASE_URL from config)'
    )

    args = parser.parse_args(argv)

    question_id = seed_question(
        args.title,
        args.author,
        args.user_id,
        args.content,
        database_url=args.database_url
    )
    sys.exit(0 if question_id is not None else 1)


if __name__ == "__main__":
    main()
