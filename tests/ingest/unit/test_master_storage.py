import json

import pytest

from onetab_archive.ingest.normalize import parse_export
from onetab_archive.ingest.storage import load_json_payload, load_master, save_master
from onetab_archive.models import SourceInfo, Stats, DateRange


def test_save_then_load_round_trips(tmp_path, sample_export):
    master = parse_export(sample_export, SourceInfo(browser="chrome", extraction_method="devtools"))
    path = tmp_path / "data" / "master.json"

    written = save_master(path, master)
    loaded = load_master(path)

    assert loaded.to_dict() == written.to_dict()
    assert [g.to_dict() for g in loaded.groups] == [g.to_dict() for g in master.groups]


def test_master_file_uses_camel_case_and_two_space_indent(tmp_path, sample_export):
    master = parse_export(sample_export, SourceInfo())
    path = tmp_path / "master.json"
    save_master(path, master)

    text = path.read_text(encoding="utf-8")
    data = json.loads(text)

    assert list(data) == ["schemaVersion", "exportedAt", "source", "stats", "groups"]
    assert text.startswith('{\n  "schemaVersion": "1.0.0",')
    assert text.endswith("\n")
    first = data["groups"][0]
    assert first["createdAt"] == "2025-06-15T12:00:00.000Z"
    assert first["createdAtEpoch"] == 1749988800000
    assert first["tabCount"] == 2


def test_save_rebuilds_stale_stats(tmp_path, sample_export):
    master = parse_export(sample_export, SourceInfo())
    master.stats = Stats(total_groups=99, total_tabs=0, date_range=DateRange(earliest="", latest=""))

    written = save_master(tmp_path / "master.json", master)

    assert written.stats.total_groups == 3
    assert written.stats.total_tabs == 5


def test_non_ascii_titles_are_written_verbatim(tmp_path, sample_export):
    master = parse_export(sample_export, SourceInfo())
    master.groups[0].tabs[0].title = "Ünïcödé ⭐"
    path = tmp_path / "master.json"
    save_master(path, master)

    assert "Ünïcödé ⭐" in path.read_text(encoding="utf-8")


def test_missing_master_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Master data not found"):
        load_master(tmp_path / "nope.json")


def test_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="Input file not found"):
        load_json_payload(tmp_path / "nope.json")
