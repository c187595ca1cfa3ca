"""
Tests for the JSON file-backed entity store: seed merge, id allocation
across restarts, atomic pretty-printed writes and fail-open persistence.
"""

import json

import pytest

from activity_bookings.models.activity import Activity
from activity_bookings.models.booking import Booking
from activity_bookings.models.payment import PaymentStatus
from activity_bookings.repositories.id_allocator import IdAllocator, numeric_suffix
from activity_bookings.repositories.json_repository import JsonRepository


def activity_document(activity_id: str, name: str, **overrides) -> dict:
    document = {
        "id": activity_id,
        "name": name,
        "slug": name.lower(),
        "price": 10,
        "date": "2030-01-01T10:00:00.000Z",
        "duration": 60,
        "location": "Harbour",
        "minParticipants": 1,
        "maxParticipants": 4,
        "status": "draft",
        "userId": "user-1",
        "createdAt": "2026-01-01T00:00:00.000Z",
    }
    document.update(overrides)
    return document


def write_json(path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def paths(tmp_path):
    return tmp_path / "activities.json", tmp_path / "seed" / "activities.json"


def make_repo(paths, **kwargs) -> JsonRepository[Activity]:
    entity_path, seed_path = paths
    return JsonRepository(Activity, "activity", str(entity_path), str(seed_path), **kwargs)


def test_persisted_record_overrides_seed(paths):
    entity_path, seed_path = paths
    write_json(seed_path, [activity_document("activity-1", "A", location="Seed Lake")])
    write_json(entity_path, [activity_document("activity-1", "B")])

    repo = make_repo(paths)
    repo.load()

    activity = repo.get_by_id("activity-1")
    assert activity.name == "B"
    # full replacement, not a field merge
    assert activity.location == "Harbour"


def test_merge_keeps_seed_order_then_persisted(paths):
    entity_path, seed_path = paths
    write_json(seed_path, [activity_document("activity-1", "A"), activity_document("activity-2", "B")])
    write_json(entity_path, [activity_document("activity-3", "C"), activity_document("activity-1", "A2")])

    repo = make_repo(paths)
    repo.load()

    assert [a.id for a in repo.get_all()] == ["activity-1", "activity-2", "activity-3"]
    assert repo.get_by_id("activity-1").name == "A2"


def test_missing_files_load_empty(paths):
    repo = make_repo(paths)
    repo.load()

    assert repo.get_all() == []
    assert repo.next_id() == "activity-1"


def test_corrupt_file_loads_empty(paths):
    entity_path, _ = paths
    entity_path.write_text("{not json", encoding="utf-8")

    repo = make_repo(paths)
    repo.load()

    assert repo.get_all() == []


def test_non_list_document_loads_empty(paths):
    entity_path, _ = paths
    write_json(entity_path, {"id": "activity-1"})

    repo = make_repo(paths)
    repo.load()

    assert len(repo) == 0


def test_invalid_records_are_skipped(paths):
    entity_path, _ = paths
    write_json(entity_path, [
        activity_document("activity-1", "Valid"),
        {"id": "activity-2", "name": "Missing fields"},
        {"name": "No id"},
        "not an object",
    ])

    repo = make_repo(paths)
    repo.load()

    assert [a.id for a in repo.get_all()] == ["activity-1"]


def test_next_id_continues_after_highest_suffix_on_restart(paths):
    entity_path, seed_path = paths
    write_json(seed_path, [])
    write_json(entity_path, [activity_document("activity-3", "C"), activity_document("activity-7", "G")])

    repo = make_repo(paths)
    repo.load()

    assert repo.next_id() == "activity-8"
    assert repo.next_id() == "activity-9"


def test_create_persists_pretty_printed_array(paths):
    entity_path, _ = paths
    repo = make_repo(paths)
    repo.load()

    activity = Activity.model_validate(activity_document(repo.next_id(), "Kayak"))
    repo.create(activity)

    content = entity_path.read_text(encoding="utf-8")
    assert content == json.dumps([activity.to_document()], indent=2, ensure_ascii=False)
    assert json.loads(content)[0]["maxParticipants"] == 4
    assert not (entity_path.parent / "activities.json.tmp").exists()


def test_create_creates_missing_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "bookings.json"
    repo = JsonRepository(Booking, "booking", str(path))
    repo.load()

    repo.create(Booking(
        id=repo.next_id(),
        activity_id="activity-1",
        user_id="user-1",
        participants=2,
        created_at="2026-01-01T00:00:00.000Z",
    ))

    assert json.loads(path.read_text(encoding="utf-8"))[0]["id"] == "booking-1"


def test_state_survives_reload(paths):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(activity_document(repo.next_id(), "Kayak")))
    repo.create(Activity.model_validate(activity_document(repo.next_id(), "Hike")))

    reloaded = make_repo(paths)
    reloaded.load()

    assert [a.name for a in reloaded.get_all()] == ["Kayak", "Hike"]
    assert reloaded.next_id() == "activity-3"


def test_update_applies_only_present_fields(paths):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(activity_document("activity-1", "Kayak")))

    updated = repo.update("activity-1", {"location": "Bay", "maxParticipants": 10})

    assert updated.location == "Bay"
    assert updated.max_participants == 10
    assert updated.name == "Kayak"
    assert updated.price == 10


def test_update_explicit_none_clears_optional_field(paths):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(
        activity_document("activity-1", "Kayak", updatedAt="2026-02-01T00:00:00.000Z")
    ))

    updated = repo.update("activity-1", {"updated_at": None})

    assert updated.updated_at is None
    assert "updatedAt" not in updated.to_document()


def test_update_missing_id_returns_none(paths):
    repo = make_repo(paths)
    repo.load()

    assert repo.update("activity-99", {"name": "X"}) is None


def test_update_rejects_unknown_and_id_fields(paths):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(activity_document("activity-1", "Kayak")))

    with pytest.raises(ValueError):
        repo.update("activity-1", {"colour": "red"})
    with pytest.raises(ValueError):
        repo.update("activity-1", {"id": "activity-2"})


def test_delete_persists_only_when_something_was_removed(paths, monkeypatch):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(activity_document("activity-1", "Kayak")))

    saves = []
    monkeypatch.setattr(repo, "save", lambda: saves.append(True) or True)

    assert repo.delete("activity-404") is False
    assert saves == []

    assert repo.delete("activity-1") is True
    assert saves == [True]
    assert repo.get_by_id("activity-1") is None


def test_write_failure_is_absorbed_and_reported(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    failures = []

    repo = JsonRepository(
        Activity,
        "activity",
        str(blocker / "activities.json"),
        on_write_error=lambda path, exc: failures.append((path, exc)),
    )
    repo.load()

    created = repo.create(Activity.model_validate(activity_document("activity-1", "Kayak")))

    # the caller still sees success and in-memory state stays authoritative
    assert created.id == "activity-1"
    assert repo.get_by_id("activity-1") is not None
    assert repo.degraded is True
    assert isinstance(repo.last_write_error, OSError)
    assert len(failures) == 1
    assert failures[0][0] == str(blocker / "activities.json")


def test_successful_write_clears_degraded_flag(tmp_path):
    repo = JsonRepository(Booking, "booking", str(tmp_path / "bookings.json"))
    repo.load()
    repo.degraded = True
    repo.last_write_error = OSError("disk full")

    assert repo.save() is True
    assert repo.degraded is False
    assert repo.last_write_error is None


def test_enum_fields_are_stored_as_plain_values(tmp_path):
    path = tmp_path / "bookings.json"
    repo = JsonRepository(Booking, "booking", str(path))
    repo.load()
    repo.create(Booking(
        id="booking-1",
        activity_id="activity-1",
        user_id="user-1",
        participants=1,
        created_at="2026-01-01T00:00:00.000Z",
        payment_id="payment-1",
        payment_status=PaymentStatus.PAID,
    ))

    stored = json.loads(path.read_text(encoding="utf-8"))[0]
    assert stored["paymentStatus"] == "paid"
    assert stored["activityId"] == "activity-1"


def test_create_with_explicit_id_moves_allocator_forward(paths):
    repo = make_repo(paths)
    repo.load()
    repo.create(Activity.model_validate(activity_document("activity-12", "Imported")))

    assert repo.next_id() == "activity-13"


@pytest.mark.parametrize("entity_id, expected", [
    ("activity-7", 7),
    ("booking-120", 120),
    ("user-x", None),
    ("plain", None),
])
def test_numeric_suffix(entity_id, expected):
    assert numeric_suffix(entity_id) == expected


def test_allocator_reset_ignores_non_numeric_ids():
    allocator = IdAllocator("payment")
    allocator.reset(["payment-2", "legacy", "payment-x", "payment-5"])

    assert allocator.allocate() == "payment-6"
