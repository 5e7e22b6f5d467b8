"""Tests for the listquery CLI."""

import json

import pytest

from listquery.cli import _coerce_filter_value, main
from listquery.config.models import FilterDefinition

VIEWS_YAML = """
version: 1
views:
  appointments:
    searchable_fields: [type, status]
    page_size: 2
    filters:
      - key: status
        label: Status
        kind: select
      - key: duration
        label: Duration
        kind: number
      - key: appointmentTime
        label: Date
        kind: dateRange
"""


@pytest.fixture
def records_file(tmp_path, appointments):
    rows = [dict(a, appointmentTime=str(a["appointmentTime"]) if a["appointmentTime"] else None) for a in appointments]
    path = tmp_path / "appointments.json"
    path.write_text(json.dumps(rows), encoding="utf-8")
    return path


@pytest.fixture
def views_file(tmp_path):
    path = tmp_path / "views.yaml"
    path.write_text(VIEWS_YAML, encoding="utf-8")
    return path


def _run_json(capsys, argv):
    main(argv + ["--format", "json"])
    return json.loads(capsys.readouterr().out)["data"]


def test_query_with_view_filters_and_sort(capsys, records_file, views_file):
    data = _run_json(
        capsys,
        [
            "query",
            "--records", str(records_file),
            "--config", str(views_file),
            "--filter", "status=SCHEDULED",
            "--sort", "id",
            "--desc",
        ],
    )
    assert [item["id"] for item in data["items"]] == ["a4", "a1"]
    assert data["sort_config"] == {"key": "id", "direction": "desc"}


def test_query_search_applies_immediately(capsys, records_file, views_file):
    data = _run_json(
        capsys,
        ["query", "--records", str(records_file), "--config", str(views_file), "--search", "call"],
    )
    assert [item["id"] for item in data["items"]] == ["a2", "a4"]
    assert data["effective_search_term"] == "call"


def test_query_page_is_clamped(capsys, records_file, views_file):
    data = _run_json(
        capsys,
        ["query", "--records", str(records_file), "--config", str(views_file), "--page", "99"],
    )
    assert data["window"]["current_page"] == 2
    assert data["window"]["start_item"] == 3
    assert data["window"]["end_item"] == 4


def test_query_date_range_and_number_filters(capsys, records_file, views_file):
    data = _run_json(
        capsys,
        [
            "query",
            "--records", str(records_file),
            "--config", str(views_file),
            "--filter", "appointmentTime=2024-03-01..2024-03-06",
            "--filter", "duration=30",
        ],
    )
    assert [item["id"] for item in data["items"]] == ["a2"]


def test_query_without_config_searches_all_fields(capsys, records_file):
    data = _run_json(capsys, ["query", "--records", str(records_file), "--search", "chat"])
    assert [item["id"] for item in data["items"]] == ["a3"]
    assert data["window"]["page_size"] == 10


def test_query_table_output(capsys, records_file, views_file):
    main(["query", "--records", str(records_file), "--config", str(views_file), "--columns", "id,status"])
    out = capsys.readouterr().out
    assert "Showing 1-2 of 4 results (page 1/2)" in out


def test_views_command(capsys, views_file):
    main(["views", "--config", str(views_file)])
    out = capsys.readouterr().out
    assert "appointments" in out
    assert "status:select" in out


def test_bad_filter_argument_raises(records_file):
    with pytest.raises(ValueError, match="KEY=VALUE"):
        main(["query", "--records", str(records_file), "--filter", "nonsense"])


def test_coerce_filter_value():
    number = FilterDefinition(key="n", label="N", kind="number")
    date_range = FilterDefinition(key="d", label="D", kind="dateRange")
    select = FilterDefinition(key="s", label="S", kind="select", options=[{"value": 3, "label": "Three"}])

    assert _coerce_filter_value(number, "4.5") == 4.5
    assert _coerce_filter_value(date_range, "2024-01-01..2024-01-31") == ("2024-01-01", "2024-01-31")
    assert _coerce_filter_value(date_range, "2024-01-01") is None
    assert _coerce_filter_value(select, "3") == 3
    assert _coerce_filter_value(None, "raw") == "raw"
