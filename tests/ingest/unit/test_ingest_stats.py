from onetab_archive.ingest.stats import compute_stats, sort_newest_first
from onetab_archive.models import DateRange, Tab, TabGroup


def _group(group_id, epoch, tabs=1):
    return TabGroup(
        id=group_id,
        tabs=[Tab(id=f"{group_id}-{i}", url="https://a.example/", title="a", domain="a.example") for i in range(tabs)],
        created_at_epoch=epoch,
    )


def test_stats_count_groups_and_tabs():
    groups = [_group("a", 1735720200000, tabs=3), _group("b", 1749988800000, tabs=2)]

    stats = compute_stats(groups)

    assert stats.total_groups == 2
    assert stats.total_tabs == 5
    assert stats.date_range == DateRange(earliest="2025-01-01T08:30:00.000Z", latest="2025-06-15T12:00:00.000Z")


def test_empty_groups_keep_given_range():
    kept = DateRange(earliest="2024-01-01T00:00:00.000Z", latest="2024-02-01T00:00:00.000Z")
    stats = compute_stats([], empty_range=kept)

    assert stats.total_groups == 0
    assert stats.date_range == kept


def test_sort_newest_first_does_not_modify_input():
    groups = [_group("a", 1), _group("c", 3), _group("b", 2)]

    ordered = sort_newest_first(groups)

    assert [g.id for g in ordered] == ["c", "b", "a"]
    assert [g.id for g in groups] == ["a", "c", "b"]
