#!/usr/bin/env python3
"""
Tests for scripts/seed_question.py.
"""

import importlib.util
from pathlib import Path

import pytest

from studentqa.database import DatabaseHelper, create_db_engine

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "seed_question.py"


@pytest.fixture(scope="module")
def seed_script():
    spec = importlib.util.spec_from_file_location("seed_question", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _load_titles(url):
    check_engine = create_db_engine(url)
    try:
        with DatabaseHelper(bind=check_engine) as db:
            return [q.title for q in db.load_all_questions()]
    finally:
        check_engine.dispose()


class TestSeedQuestion:
    """Tests for seeding a question into a chosen database."""

    @pytest.mark.integration
    def test_seeds_custom_database(self, seed_script, tmp_path):
        url = f"sqlite:///{tmp_path / 'data' / 'seed.db'}"

        question_id = seed_script.seed_question("Why joins?", "Dana Lee", 7, database_url=url)

        assert question_id is not None
        assert _load_titles(url) == ["Why joins?"]

    @pytest.mark.integration
    def test_main_accepts_database_url(self, seed_script, tmp_path):
        url = f"sqlite:///{tmp_path / 'cli.db'}"

        with pytest.raises(SystemExit) as exc_info:
            seed_script.main(["--database-url", url, "--title", "From the CLI"])

        assert exc_info.value.code == 0
        assert _load_titles(url) == ["From the CLI"]

    @pytest.mark.integration
    def test_unreachable_database_fails(self, seed_script, tmp_path, monkeypatch):
        from sqlalchemy import create_engine

        bad_engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'x' / 'qa.db'}")
        monkeypatch.setattr(seed_script, "create_db_engine", lambda url: bad_engine)
        monkeypatch.setattr(seed_script, "init_db", lambda bind: None)

        assert seed_script.seed_question("T", "A", 1, database_url="sqlite://") is None
