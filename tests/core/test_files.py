from __future__ import annotations

import logging

from quiz_runner.core.files import read_question_source


def test_read_question_source_returns_text(workspace):
    path = workspace.write("q.csv", "header\nrow\n")

    assert read_question_source(path) == "header\nrow\n"


def test_read_question_source_missing_logs_and_returns_empty(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="quiz_runner"):
        assert read_question_source(tmp_path / "absent.csv") == ""

    record = caplog.records[-1]
    assert record.getMessage() == "Question source not found"
    assert record.source == tmp_path / "absent.csv"


def test_read_question_source_directory(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="quiz_runner"):
        assert read_question_source(tmp_path) == ""

    assert "directory" in caplog.text
