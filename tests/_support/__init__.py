"""
Test support utilities for ssm-document tests.

Helpers that don't fit as pytest fixtures but are useful across
multiple test files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def write_document_config(directory: Path, data: dict[str, Any], *, file_name: str = "document.yml") -> Path:
    """Write a document config as YAML (or JSON for ``.json`` names)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    if path.suffix == ".json":
        path.write_text(json.dumps(data), encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(data, default_flow_style=False), encoding="utf-8")
    return path


def assert_dict_subset(actual: dict, expected: dict, path: str = "") -> None:
    """Assert that ``expected`` is a recursive subset of ``actual``."""
    for key, expected_value in expected.items():
        current_path = f"{path}.{key}" if path else key
        assert key in actual, f"Missing key at {current_path}"
        actual_value = actual[key]

        if isinstance(expected_value, dict) and isinstance(actual_value, dict):
            assert_dict_subset(actual_value, expected_value, current_path)
        else:
            assert actual_value == expected_value, (
                f"Mismatch at {current_path}: expected {expected_value!r}, got {actual_value!r}"
            )
