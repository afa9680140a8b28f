from onetab_archive.models import GroupRef, MatchFlags, Tab, TabGroup


def _tab():
    return Tab(id="t1", url="https://github.com/x", title="x", domain="github.com")


def test_group_derives_created_at_and_count():
    group = TabGroup(id="g1", tabs=[_tab(), _tab()], created_at_epoch=1700000000000)

    assert group.created_at == "2023-11-14T22:13:20.000Z"
    assert group.tab_count == 2


def test_group_dict_omits_missing_title():
    data = TabGroup(id="g1", tabs=[_tab()], created_at_epoch=1700000000000).to_dict()

    assert "title" not in data
    assert data == {
        "id": "g1",
        "tabs": [{"id": "t1", "url": "https://github.com/x", "title": "x", "domain": "github.com"}],
        "createdAt": "2023-11-14T22:13:20.000Z",
        "createdAtEpoch": 1700000000000,
        "tabCount": 1,
        "starred": False,
    }


def test_group_from_dict_rederives_fields():
    data = {
        "id": "g1",
        "tabs": [_tab().to_dict()],
        "createdAt": "stale",
        "createdAtEpoch": 1749988800000,
        "tabCount": 40,
        "starred": True,
        "title": "Research",
    }

    group = TabGroup.from_dict(data)

    assert group.created_at == "2025-06-15T12:00:00.000Z"
    assert group.tab_count == 1
    assert group.title == "Research"


def test_match_flags():
    flags = MatchFlags(in_url=True, in_domain=True)

    assert flags.any is True
    assert flags.fields() == ["url", "domain"]
    assert MatchFlags().any is False


def test_group_ref_dict():
    assert GroupRef(id="g", created_at="2025-01-01T00:00:00.000Z").to_dict() == {
        "id": "g",
        "createdAt": "2025-01-01T00:00:00.000Z",
    }
