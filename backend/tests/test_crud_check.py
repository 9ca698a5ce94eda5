#!/usr/bin/env python3
"""
Tests for the sequential Answers CRUD check runner.
"""

import pytest

from studentqa import crud_check
from studentqa.crud_check import CHECKS, CheckSummary, run_all, run_check
from studentqa.database import DatabaseHelper, create_db_engine, init_db
from tests.conftest import add_question


@pytest.fixture
def make_db(engine):
    return lambda: DatabaseHelper(bind=engine, connect_attempts=1)


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    # main() would otherwise replace pytest's log handlers
    monkeypatch.setattr(crud_check, "setup_logging", lambda: None)


class TestChecks:
    """Each check passes against a database holding a question."""

    @pytest.mark.integration
    @pytest.mark.parametrize("name,check", CHECKS, ids=[name for name, _ in CHECKS])
    def test_check_passes(self, make_db, question_id, name, check):
        assert check(make_db) is True

    @pytest.mark.integration
    @pytest.mark.parametrize("name,check", CHECKS, ids=[name for name, _ in CHECKS])
    def test_check_fails_without_questions(self, make_db, name, check, capsys):
        assert check(make_db) is False
        assert "No questions found in database" in capsys.readouterr().out

    @pytest.mark.integration
    def test_checks_use_first_question(self, engine, make_db, capsys):
        first = add_question(engine, title="First")
        add_question(engine, title="Second")

        crud_check.check_create_answer(make_db)

        assert f"Using existing question with ID: {first}" in capsys.readouterr().out

    @pytest.mark.integration
    def test_connection_is_closed_after_each_check(self, engine, question_id):
        helpers = []

        def make_db():
            helper = DatabaseHelper(bind=engine, connect_attempts=1)
            helpers.append(helper)
            return helper

        run_all(make_db)

        assert len(helpers) == len(CHECKS)
        assert not any(h.is_connected for h in helpers)

    @pytest.mark.integration
    def test_rows_accumulate_across_runs(self, engine, make_db, question_id):
        from studentqa.services.answers import Answers

        run_all(make_db)
        with DatabaseHelper(bind=engine) as db:
            after_first = Answers(db).size()
        run_all(make_db)
        with DatabaseHelper(bind=engine) as db:
            after_second = Answers(db).size()

        # create + read + update + 3 search answers survive; delete removes its own
        assert after_first == 6
        assert after_second == 12


class TestRunner:
    """Tests for tallying and exception isolation."""

    @pytest.mark.unit
    def test_run_check_counts_pass_and_fail(self, make_db, capsys):
        summary = CheckSummary()

        assert run_check("ok", lambda _: True, make_db, summary) is True
        assert run_check("bad", lambda _: False, make_db, summary) is False

        out = capsys.readouterr().out
        assert "Running: ok" in out
        assert "✓ PASSED" in out
        assert "✗ FAILED" in out
        assert (summary.passed, summary.failed, summary.total) == (1, 1, 2)

    @pytest.mark.unit
    def test_exception_is_counted_and_does_not_stop_later_checks(self, make_db, capsys):
        calls = []

        def explode(_):
            calls.append("explode")
            raise RuntimeError("boom")

        def fine(_):
            calls.append("fine")
            return True

        summary = run_all(make_db, [("explode", explode), ("fine", fine)])

        assert calls == ["explode", "fine"]
        assert summary.passed == 1
        assert summary.failed == 1
        assert not summary.all_passed
        assert "✗ FAILED with exception: boom" in capsys.readouterr().out

    @pytest.mark.unit
    def test_connection_failure_counts_as_failure(self, tmp_path, capsys):
        from sqlalchemy import create_engine

        bad_engine = create_engine(f"sqlite:///{tmp_path / 'nope' / 'x' / 'qa.db'}")
        summary = run_all(
            lambda: DatabaseHelper(bind=bad_engine, connect_attempts=1),
            CHECKS[:1]
        )

        out = capsys.readouterr().out
        assert summary.failed == 1
        assert "Error: Could not connect to database" in out
        assert "✗ FAILED\n" in out
        assert "FAILED with exception" not in out
        bad_engine.dispose()

    @pytest.mark.unit
    def test_connection_failure_logs_traceback(self, tmp_path, caplog):
        from sqlalchemy import create_engine

        bad_engine = create_engine(f"sqlite:///{tmp_path / 'nope' / 'x' / 'qa.db'}")
        make_bad_db = lambda: DatabaseHelper(bind=bad_engine, connect_attempts=1)

        with caplog.at_level("ERROR"):
            assert crud_check.check_search_answers(make_bad_db) is False

        assert any(r.exc_info for r in caplog.records if r.name == "studentqa.crud_check")
        bad_engine.dispose()

    @pytest.mark.integration
    def test_full_run_summary(self, make_db, question_id, capsys):
        summary = run_all(make_db)

        out = capsys.readouterr().out
        assert summary.passed == 5
        assert summary.failed == 0
        assert "Answers CRUD Operations Test Suite" in out
        assert "Tests Passed: 5" in out
        assert "Tests Failed: 0" in out
        assert "Total Tests:  5" in out
        assert "Search found 1 matching answer(s)" in out


class TestMain:
    """Tests for the command line entry point."""

    @pytest.mark.integration
    def test_exit_code_zero_when_all_pass(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'hw.db'}"
        seed_engine = create_db_engine(url)
        init_db(seed_engine)
        add_question(seed_engine)
        seed_engine.dispose()

        assert crud_check.main(["--database-url", url]) == 0

    @pytest.mark.integration
    def test_exit_code_one_without_questions(self, tmp_path, capsys):
        url = f"sqlite:///{tmp_path / 'empty.db'}"

        assert crud_check.main(["--database-url", url, "--init-db"]) == 1
        assert "Tests Failed: 5" in capsys.readouterr().out
