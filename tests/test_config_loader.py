"""Tests for view configuration models and the YAML loader."""

from pathlib import Path

import pytest

from listquery.config.loader import get_view_config, list_view_names, load_views_config
from listquery.config.models import FilterDefinition, SortDirection, ViewConfig

VIEWS_YAML = """
version: 1
defaults:
  page_size: 25
  debounce_seconds: 0.5
views:
  users:
    searchable_fields: [name, email]
    filters:
      - key: role
        label: Role
        kind: select
        options:
          - {value: ADMIN, label: Admin}
          - {value: CLIENT, label: Client}
    initial_sort: {key: name, direction: desc}
  progress:
    page_size: 5
    filters:
      - key: progressDate
        label: Date
        kind: dateRange
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "views.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_and_build_view(tmp_path):
    config = load_views_config(_write(tmp_path, VIEWS_YAML))
    assert list_view_names(config) == ["users", "progress"]

    users = get_view_config("users", config)
    assert users.name == "users"
    assert users.searchable_fields == ["name", "email"]
    assert users.page_size == 25
    assert users.debounce_seconds == 0.5
    assert users.initial_sort.direction == SortDirection.DESC
    assert users.get_filter("role").get_option_label("CLIENT") == "Client"


def test_view_settings_override_defaults(tmp_path):
    config = load_views_config(_write(tmp_path, VIEWS_YAML))
    progress = get_view_config("progress", config)
    assert progress.page_size == 5
    assert progress.searchable_fields == []


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_views_config(tmp_path / "nope.yaml")


def test_version_required(tmp_path):
    with pytest.raises(ValueError, match="version"):
        load_views_config(_write(tmp_path, "views: {}\n"))


def test_views_must_be_mapping(tmp_path):
    with pytest.raises(ValueError, match="views"):
        load_views_config(_write(tmp_path, "version: 1\nviews: [a, b]\n"))


def test_unknown_view(tmp_path):
    config = load_views_config(_write(tmp_path, VIEWS_YAML))
    with pytest.raises(KeyError):
        get_view_config("meals", config)


def test_invalid_view_reports_name(tmp_path):
    text = """
version: 1
views:
  broken:
    filters:
      - {key: role, label: Role, kind: select}
      - {key: role, label: Again, kind: text}
"""
    config = load_views_config(_write(tmp_path, text))
    with pytest.raises(ValueError, match="broken"):
        get_view_config("broken", config)


def test_options_only_allowed_for_select():
    with pytest.raises(ValueError):
        FilterDefinition(key="name", label="Name", kind="text", options=[{"value": "a", "label": "A"}])


def test_unknown_kind_is_accepted():
    definition = FilterDefinition(key="x", label="X", kind="geo")
    assert definition.kind == "geo"


def test_declared_fields_are_checked():
    ViewConfig(fields=["id", "name"], searchable_fields=["name"])
    with pytest.raises(ValueError, match="email"):
        ViewConfig(fields=["id", "name"], searchable_fields=["email"])
    with pytest.raises(ValueError, match="sort key"):
        ViewConfig(fields=["id"], initial_sort={"key": "name"})


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        ViewConfig(page_size=0)


def test_example_config_loads():
    example = Path(__file__).resolve().parents[1] / "config" / "views.yaml.example"
    config = load_views_config(example)
    for name in list_view_names(config):
        assert get_view_config(name, config).name == name
