"""
Tests for the directory-sync command line.
"""

import json
from unittest.mock import patch

from directory_sync import cli
from directory_sync.jobs import JOBS


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_init_db(capsys):
    assert cli.main(["--database-url", "sqlite://", "init-db"]) == 0
    assert "Database initialized" in capsys.readouterr().out


@patch("directory_sync.cli.run_sync_job")
def test_runs_job_and_prints_envelope(mock_run, capsys):
    mock_run.return_value = {"success": True, "count": 1, "data": [{"title": "Cyber Breakfast"}]}

    exit_code = cli.main(["--database-url", "sqlite://", "extract-events"])

    assert exit_code == 0
    assert mock_run.call_args.args[0] is JOBS["extract_events"]
    assert mock_run.call_args.kwargs["settings"].database_url == "sqlite://"
    assert json.loads(capsys.readouterr().out)["data"] == [{"title": "Cyber Breakfast"}]


@patch("directory_sync.cli.run_sync_job")
def test_summary_drops_records(mock_run, capsys):
    mock_run.return_value = {"success": True, "count": 4, "data": [{}, {}, {}, {}]}

    cli.main(["--database-url", "sqlite://", "scrape-companies", "--summary"])

    assert json.loads(capsys.readouterr().out) == {"success": True, "count": 4}


def test_missing_credential_exits_nonzero(capsys):
    exit_code = cli.main(["--database-url", "sqlite://", "extract-companies"])

    assert exit_code == 1
    envelope = json.loads(capsys.readouterr().out)
    assert envelope["success"] is False
    assert "FIRECRAWL_API_KEY" in envelope["error"]


@patch("directory_sync.cli.configure_logging")
def test_log_level_flag_configures_logging(mock_configure):
    cli.main(["--log-level", "debug", "--database-url", "sqlite://", "init-db"])

    settings, level = mock_configure.call_args.args
    assert level == "debug"
    assert settings.database_url == "sqlite://"
