# tests/test_catalog_store.py

from __future__ import annotations

from ca_helper.catalog.store import DEFAULT_CATEGORY, CatalogStore, load_catalog
from ca_helper.core.models import CatalogRecord, Difficulty
from ca_helper.progress.decoder import encode_completed_ids

from .fakes import FakeCatalogSource


def _source() -> FakeCatalogSource:
    return FakeCatalogSource(
        tiers={
            Difficulty.EASY: [10, 11, 12],
            Difficulty.HARD: [20, 21, 22, 23],
        },
        records={
            10: CatalogRecord(task_id=1, name="Kill Vorkath", description="Kill it."),
            11: None,
            12: CatalogRecord(task_id=2, name="   "),
            20: CatalogRecord(task_id=3, name="Defeat the Chaos Fanatic in a solo raid"),
            21: RuntimeError("struct read failed"),
            22: CatalogRecord(task_id=1, name="Duplicate of task one"),
            23: CatalogRecord(task_id=4, name="Zulrah Speedrun"),
        },
    )


def test_load_catalog_skips_bad_records() -> None:
    catalog = load_catalog(_source())

    assert [t.id for t in catalog] == [1, 3, 4]
    assert catalog.get(1).name == "Kill Vorkath"
    assert catalog.get(1).difficulty == Difficulty.EASY
    assert catalog.get(3).difficulty == Difficulty.HARD


def test_loaded_tasks_get_heuristic_monster_and_default_category() -> None:
    catalog = load_catalog(_source())

    assert catalog.get(1).monster == "Vorkath"
    assert catalog.get(3).monster == "Chaos Fanatic"
    assert catalog.get(4).monster == "Zulrah"
    assert all(t.category == DEFAULT_CATEGORY for t in catalog)
    assert all(not t.is_complete for t in catalog)


def test_evaluate_attaches_completion_without_mutating_store() -> None:
    catalog = load_catalog(_source())

    evaluated = catalog.evaluate(encode_completed_ids([3]))
    by_id = {t.id: t for t in evaluated}
    assert by_id[3].is_complete is True
    assert by_id[1].is_complete is False
    assert catalog.get(3).is_complete is False


def test_find_and_empty_store() -> None:
    catalog = load_catalog(_source())
    assert [t.id for t in catalog.find("vorkath")] == [1]
    assert catalog.find("  ") == []

    empty = CatalogStore()
    assert empty.is_empty
    assert len(empty) == 0
    assert empty.get(1) is None


def test_broken_tier_does_not_stop_other_tiers() -> None:
    class BrokenTiers(FakeCatalogSource):
        def tier_record_ids(self, tier):
            if tier == Difficulty.EASY:
                raise RuntimeError("enum missing")
            return super().tier_record_ids(tier)

    src = _source()
    catalog = load_catalog(BrokenTiers(src.tiers, src.records))
    assert [t.id for t in catalog] == [3, 1, 4]
