"""Shared fixtures: raw OneTab records and the sample DevTools export."""

import copy
import json
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
SAMPLE_EXPORT = FIXTURES_DIR / "onetab" / "export_state.json"


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "e2e: end-to-end scenarios driven through the command line.",
    )


def raw_group(group_id, create_date, tabs=None, **extra):
    if tabs is None:
        tabs = [{"id": f"{group_id}-t1", "url": f"https://example.com/{group_id}", "title": f"Page {group_id}"}]
    group = {"id": group_id, "createDate": create_date, "tabsMeta": tabs}
    group.update(extra)
    return group


@pytest.fixture
def make_group():
    return raw_group


@pytest.fixture
def sample_export():
    return copy.deepcopy(json.loads(SAMPLE_EXPORT.read_text(encoding="utf-8")))


@pytest.fixture
def sample_export_path():
    return SAMPLE_EXPORT
