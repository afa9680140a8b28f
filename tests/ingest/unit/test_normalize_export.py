import json

from onetab_archive.ingest.normalize import normalize, parse_export, transform_group, transform_tab
from onetab_archive.models import SCHEMA_VERSION, SourceInfo

SOURCE = SourceInfo(browser="edge", extension_id="hoimpamkkoehapgenciaoajfkfkpgfop", extraction_method="devtools")


def test_single_group_import():
    raw = {
        "tabGroups": [
            {
                "id": "g1",
                "createDate": 1700000000000,
                "tabsMeta": [{"id": "t1", "url": "https://github.com/x", "title": ""}],
            }
        ]
    }

    master = parse_export(raw, SOURCE)

    assert master.schema_version == SCHEMA_VERSION
    assert len(master.groups) == 1
    group = master.groups[0]
    assert group.created_at == "2023-11-14T22:13:20.000Z"
    assert group.tab_count == 1
    assert group.starred is False
    tab = group.tabs[0]
    assert tab.domain == "github.com"
    assert tab.title == "github.com"
    assert master.stats.total_groups == 1
    assert master.stats.total_tabs == 1
    assert master.stats.date_range.earliest == master.stats.date_range.latest == group.created_at


def test_sample_export_is_sorted_newest_first(sample_export):
    master = parse_export(sample_export, SOURCE)

    assert [g.id for g in master.groups] == ["g-2025-06", "g-2025-01", "g-2024-12"]
    epochs = [g.created_at_epoch for g in master.groups]
    assert epochs == sorted(epochs, reverse=True)
    assert master.stats.total_tabs == 5
    assert master.stats.date_range.earliest == "2024-12-31T10:00:00.000Z"
    assert master.stats.date_range.latest == "2025-06-15T12:00:00.000Z"


def test_group_fields_survive_normalization(sample_export):
    master = parse_export(sample_export, SOURCE)
    research = master.groups[0]

    assert research.starred is True
    assert research.title == "Research"
    assert [t.domain for t in research.tabs] == ["github.com", "docs.python.org"]


def test_schemeless_url_domain_and_title_fallback(sample_export):
    master = parse_export(sample_export, SOURCE)
    tab = next(t for g in master.groups for t in g.tabs if t.id == "t4")

    assert tab.domain == "news.ycombinator.com"
    assert tab.title == "news.ycombinator.com"


def test_double_encoded_export_normalizes_identically(sample_export):
    groups = sample_export["state"]["tabGroups"]
    encoded = {"state": json.dumps({"tabGroups": json.dumps(groups)})}

    plain = parse_export(sample_export, SOURCE).to_dict()
    twice = parse_export(encoded, SOURCE).to_dict()
    plain.pop("exportedAt")
    twice.pop("exportedAt")

    assert plain == twice


def test_non_string_title_is_dropped():
    group = transform_group({"id": "g", "createDate": 1, "tabsMeta": [], "title": 42})
    assert group.title is None
    assert "title" not in group.to_dict()


def test_tab_keeps_its_own_title():
    tab = transform_tab({"id": "t", "url": "https://Docs.Python.org/3/", "title": "Docs"})
    assert tab.title == "Docs"
    assert tab.domain == "docs.python.org"


def test_tab_count_matches_tabs(sample_export):
    master = parse_export(sample_export, SOURCE)
    for group in master.groups:
        assert group.tab_count == len(group.tabs)


def test_empty_batch_uses_now_for_date_range():
    master = normalize([], SOURCE)

    assert master.groups == []
    assert master.stats.total_groups == 0
    assert master.stats.total_tabs == 0
    assert master.stats.date_range.earliest == master.stats.date_range.latest
    assert master.stats.date_range.earliest.endswith("Z")


def test_source_is_recorded():
    master = normalize([], SOURCE)
    assert master.to_dict()["source"] == {
        "browser": "edge",
        "extensionId": "hoimpamkkoehapgenciaoajfkfkpgfop",
        "extractionMethod": "devtools",
    }
