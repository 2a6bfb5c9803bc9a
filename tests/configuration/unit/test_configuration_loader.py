"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from form_sheet_sync.configuration.loader import ConfigurationError, load_configuration


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def _write_catalog(tmp_path: Path) -> Path:
    return _write_file(tmp_path / "forms.yaml", "forms: []\n")


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    _write_catalog(tmp_path)
    config_path = _write_file(
        tmp_path / "config.yaml",
        """
site:
  name: "Example Site"
catalog:
  path: forms.yaml
store:
  directory: workbooks
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.site.name == "Example Site"
    assert configuration.site.timezone == "UTC"
    assert configuration.catalog.path == (tmp_path / "forms.yaml").resolve()
    assert configuration.store.directory == (tmp_path / "workbooks").resolve()
    assert configuration.state.mappings_path == (tmp_path / "sheet-mappings.json").resolve()
    assert configuration.state.activity_log_path == (tmp_path / "sync-log.json").resolve()
    assert configuration.sync.batch_size == 500
    assert configuration.sync.batch_pause_seconds == 1.0
    assert configuration.sync.log_retention == 100
    assert configuration.sync.error_notice_retention == 10


def test_loads_json_configuration_with_overrides(tmp_path: Path) -> None:
    catalog_path = _write_catalog(tmp_path)
    config_path = _write_file(
        tmp_path / "config.json",
        json.dumps(
            {
                "site": {"name": "Shop", "timezone": "Europe/Berlin"},
                "catalog": {"path": str(catalog_path)},
                "store": {"directory": str(tmp_path / "out")},
                "state": {"mappings_path": "state/map.json"},
                "sync": {"batch_size": 50, "batch_pause_seconds": 0},
            }
        ),
    )

    configuration = load_configuration(config_path)

    assert configuration.site.timezone == "Europe/Berlin"
    assert configuration.state.mappings_path == (tmp_path / "state" / "map.json").resolve()
    assert configuration.sync.batch_size == 50
    assert configuration.sync.batch_pause_seconds == 0.0


@pytest.mark.parametrize(
    "contents, message",
    [
        ("- a\n", "root must be a mapping"),
        ("catalog: {path: forms.yaml}\nstore: {directory: out}\n", "'site' is required"),
        ("site: {name: ''}\n", "site.name must not be empty"),
        ("site: {name: S, timezone: Mars/Base}\n", "not a known time zone"),
        (
            "site: {name: S}\ncatalog: {path: missing.yaml}\nstore: {directory: out}\n",
            "Form catalog file not found",
        ),
        (
            "site: {name: S}\ncatalog: {path: forms.yaml}\nstore: {directory: out}\n"
            "sync: {batch_size: 0}\n",
            "sync.batch_size must be greater than zero",
        ),
        (
            "site: {name: S}\ncatalog: {path: forms.yaml}\nstore: {directory: out}\n"
            "sync: {batch_pause_seconds: -1}\n",
            "must not be negative",
        ),
    ],
)
def test_rejects_invalid_configuration(tmp_path: Path, contents: str, message: str) -> None:
    _write_catalog(tmp_path)
    config_path = _write_file(tmp_path / "config.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)


def test_missing_configuration_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "absent.yaml")
