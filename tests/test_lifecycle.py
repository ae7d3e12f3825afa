from __future__ import annotations

import pytest

from realty.errors import (
    DuplicateName,
    NotFound,
    ParentNotFound,
    PartialFailure,
    StorageError,
    UnsupportedOperation,
)
from realty.models import NAME_MAX, Property, Support, Unit, UnitKind, WorkingArea
from realty.schemas import LIVE_NAME_MAX
from realty.services.lifecycle import LifecycleManager, MillisClock

from helpers import area_fields, property_fields, unit_fields


def test_create_rejects_duplicate_live_name(lm):
    lm.create(WorkingArea, area_fields("Zone1"))
    with pytest.raises(DuplicateName):
        lm.create(WorkingArea, area_fields("Zone1"))


def test_create_property_duplicate_name_across_areas(lm):
    a = lm.create(WorkingArea, area_fields("A"))
    b = lm.create(WorkingArea, area_fields("B"))
    lm.create(Property, property_fields(a.id, "P1"))
    with pytest.raises(DuplicateName):
        lm.create(Property, property_fields(b.id, "P1"))


def test_create_requires_live_parent(lm):
    with pytest.raises(ParentNotFound):
        lm.create(Property, property_fields("missing"))

    area = lm.create(WorkingArea, area_fields())
    prop = lm.create(Property, property_fields(area.id))
    lm.soft_delete(Property, prop.id)
    with pytest.raises(ParentNotFound):
        lm.create(Unit, unit_fields(prop.id))


def test_parent_not_found_is_a_not_found():
    assert issubclass(ParentNotFound, NotFound)


def test_unit_defaults(lm, catalog):
    _, _, unit = catalog
    assert unit.type == UnitKind.APARTMENT
    assert unit.is_ready is False
    assert unit.delivery_date is None


def test_ids_unique_across_history(lm):
    seen = set()
    for _ in range(3):
        row = lm.create(WorkingArea, area_fields("Zone1"))
        assert row.id not in seen
        seen.add(row.id)
        lm.soft_delete(WorkingArea, row.id)

    all_rows = lm.list_all(WorkingArea, include_deleted=True)
    assert {r.id for r in all_rows} == seen


def test_recreate_after_soft_delete(lm):
    old = lm.create(WorkingArea, area_fields("X"))
    lm.soft_delete(WorkingArea, old.id)

    new = lm.create(WorkingArea, area_fields("X"))
    assert new.id != old.id

    with pytest.raises(NotFound):
        lm.get(WorkingArea, old.id)

    retired = lm.get(WorkingArea, old.id, include_deleted=True)
    assert retired.name != "X"
    assert retired.name.startswith("X_d")
    assert retired.retired_name == retired.name
    assert retired.deleted_at is not None

    # only one row ever answers to "X"
    named_x = [r for r in lm.list_all(WorkingArea, include_deleted=True) if r.name == "X"]
    assert [r.id for r in named_x] == [new.id]
    assert lm.get_by_name(WorkingArea, "X", include_deleted=True).id == new.id


def test_retired_names_distinct_within_same_millisecond(store):
    lm = LifecycleManager(store, clock=MillisClock(now=lambda: 1_700_000_000.0))
    names = []
    for _ in range(3):
        row = lm.create(Property, property_fields(lm.create(WorkingArea, area_fields(f"A{len(names)}")).id, "P"))
        lm.soft_delete(Property, row.id)
        names.append(lm.get(Property, row.id, include_deleted=True).name)

    assert names == ["P_d1700000000000", "P_d1700000000001", "P_d1700000000002"]


def test_millis_clock_is_strictly_increasing():
    clock = MillisClock(now=lambda: 5.0)
    assert [clock(), clock(), clock()] == [5000, 5001, 5002]


def test_update_partial_patch_keeps_other_fields(lm, catalog):
    _, prop, _ = catalog
    before = lm.get(Property, prop.id)
    snapshot = {
        k: getattr(before, k)
        for k in ("id", "name", "cover_url", "down_payment_percentage", "number_of_year", "working_area_id", "created_at", "deleted_at")
    }
    updated_before = before.updated_at

    after = lm.update(Property, prop.id, {"owner": "New owner"})

    assert after.owner == "New owner"
    for k, v in snapshot.items():
        assert getattr(after, k) == v, k
    assert after.updated_at > updated_before


def test_update_name_checks_live_rows_except_self(lm):
    a = lm.create(WorkingArea, area_fields("A"))
    b = lm.create(WorkingArea, area_fields("B"))

    # renaming to its own name is fine
    assert lm.update(WorkingArea, a.id, {"name": "A"}).name == "A"

    with pytest.raises(DuplicateName):
        lm.update(WorkingArea, b.id, {"name": "A"})

    lm.soft_delete(WorkingArea, a.id)
    assert lm.update(WorkingArea, b.id, {"name": "A"}).name == "A"


def test_update_missing_or_deleted(lm, catalog):
    _, _, unit = catalog
    with pytest.raises(NotFound):
        lm.update(Unit, "missing", {"bedrooms": 3})

    lm.soft_delete(Unit, unit.id)
    with pytest.raises(NotFound):
        lm.update(Unit, unit.id, {"bedrooms": 3})


def test_soft_delete_property_leaves_units_live(lm, catalog):
    _, prop, unit = catalog
    lm.soft_delete(Property, prop.id)

    assert prop.id not in {p.id for p in lm.list_all(Property)}
    live_unit = lm.get(Unit, unit.id)
    assert live_unit.deleted_at is None
    assert unit.id in {u.id for u in lm.list_all(Unit)}


def test_soft_delete_working_area_leaves_properties_live(lm, catalog):
    area, prop, _ = catalog
    lm.soft_delete(WorkingArea, area.id)

    assert lm.list_all(WorkingArea) == []
    assert lm.get(Property, prop.id).deleted_at is None


def test_soft_delete_unit_does_not_rename(lm, catalog):
    _, _, unit = catalog
    lm.soft_delete(Unit, unit.id)
    row = lm.get(Unit, unit.id, include_deleted=True)
    assert row.deleted_at is not None
    assert row.url == "http://z"


def test_soft_delete_twice_is_not_found(lm, catalog):
    area, _, _ = catalog
    lm.soft_delete(WorkingArea, area.id)
    with pytest.raises(NotFound):
        lm.soft_delete(WorkingArea, area.id)


def test_support_has_no_delete(lm):
    row = lm.create(Support, {"whatsapp_phone": "01000000000", "phone_number": "01000000001", "mail_us": "a@b.io"})
    with pytest.raises(UnsupportedOperation):
        lm.soft_delete(Support, row.id)


def test_support_allows_many_rows(lm):
    for i in range(2):
        lm.create(Support, {"whatsapp_phone": "1", "phone_number": "2", "mail_us": "same@b.io"})
    assert len(lm.list_all(Support)) == 2


def test_get_by_name_only_for_named_kinds(lm):
    with pytest.raises(UnsupportedOperation):
        lm.get_by_name(Unit, "x")


class _FlakyMarkStore:
    """Wraps a real store and fails mark_deleted a fixed number of times."""

    def __init__(self, store, failures: int = 1):
        self._store = store
        self._failures = failures

    def __getattr__(self, name):
        return getattr(self._store, name)

    def mark_deleted(self, kind, entity_id):
        if self._failures > 0:
            self._failures -= 1
            raise StorageError("disk on fire")
        return self._store.mark_deleted(kind, entity_id)


def test_partial_failure_then_resume(store):
    flaky = _FlakyMarkStore(store)
    lm = LifecycleManager(flaky, clock=MillisClock())

    area = lm.create(WorkingArea, area_fields("Zone1"))

    with pytest.raises(PartialFailure) as info:
        lm.soft_delete(WorkingArea, area.id)
    assert info.value.completed == ("rename",)
    assert info.value.remaining == ("mark_deleted",)
    assert isinstance(info.value.__cause__, StorageError)

    # renamed but still live: the intermediate state is visible
    half = lm.get(WorkingArea, area.id)
    assert half.is_half_retired
    renamed = half.name
    assert renamed.startswith("Zone1_d")

    # "Zone1" is already free again
    lm.create(WorkingArea, area_fields("Zone1"))

    # second call only runs the remaining step, the name is not mutated twice
    lm.soft_delete(WorkingArea, area.id)
    done = lm.get(WorkingArea, area.id, include_deleted=True)
    assert done.deleted_at is not None
    assert done.name == renamed


def test_renaming_a_half_retired_row_restarts_retirement(store):
    flaky = _FlakyMarkStore(store)
    lm = LifecycleManager(flaky, clock=MillisClock())

    area = lm.create(WorkingArea, area_fields("Zone1"))
    with pytest.raises(PartialFailure):
        lm.soft_delete(WorkingArea, area.id)
    first_retired = lm.get(WorkingArea, area.id).name

    restored = lm.update(WorkingArea, area.id, {"name": "Zone1"})
    assert restored.name == "Zone1"
    assert restored.retired_name is None
    assert not restored.is_half_retired
    assert store.list_half_retired(WorkingArea) == []

    lm.soft_delete(WorkingArea, area.id)
    retired = lm.get(WorkingArea, area.id, include_deleted=True)
    assert retired.deleted_at is not None
    assert retired.name.startswith("Zone1_d")
    assert retired.name != first_retired

    fresh = lm.create(WorkingArea, area_fields("Zone1"))
    named = [r.id for r in lm.list_all(WorkingArea, include_deleted=True) if r.name == "Zone1"]
    assert named == [fresh.id]


def test_non_name_patch_keeps_half_retired_state(store):
    flaky = _FlakyMarkStore(store)
    lm = LifecycleManager(flaky, clock=MillisClock())

    area = lm.create(WorkingArea, area_fields("Zone1"))
    with pytest.raises(PartialFailure):
        lm.soft_delete(WorkingArea, area.id)

    row = lm.update(WorkingArea, area.id, {"description": "still going"})
    assert row.is_half_retired
    assert [r.id for r in store.list_half_retired(WorkingArea)] == [area.id]


def test_retired_name_fits_the_name_column(lm):
    longest = "n" * LIVE_NAME_MAX
    assert len(lm.retired_name_for(longest)) <= NAME_MAX

    area = lm.create(WorkingArea, area_fields(longest))
    lm.soft_delete(WorkingArea, area.id)
    assert len(lm.get(WorkingArea, area.id, include_deleted=True).name) <= NAME_MAX


def test_resume_pending_deletes(store):
    flaky = _FlakyMarkStore(store, failures=2)
    lm = LifecycleManager(flaky, clock=MillisClock())

    ids = []
    for name in ("P1", "P2"):
        area = lm.create(WorkingArea, area_fields(f"area-{name}"))
        prop = lm.create(Property, property_fields(area.id, name))
        ids.append(prop.id)
        with pytest.raises(PartialFailure):
            lm.soft_delete(Property, prop.id)

    assert sorted(lm.resume_pending_deletes(Property)) == sorted(ids)
    assert lm.list_all(Property) == []
    assert store.list_half_retired(Property) == []


def test_resume_pending_deletes_named_kinds_only(lm):
    with pytest.raises(UnsupportedOperation):
        lm.resume_pending_deletes(Unit)
