"""
Tests for settings: document paths follow DATA_DIR unless set explicitly.
"""

import os

from activity_bookings.core.config import Settings
from activity_bookings.services.container import build_container


def test_entity_files_default_under_data_dir(tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path / "data"))

    assert settings.ACTIVITIES_FILE == os.path.join(str(tmp_path / "data"), "activities.json")
    assert settings.USERS_FILE == os.path.join(str(tmp_path / "data"), "users.json")
    assert settings.BOOKINGS_FILE == os.path.join(str(tmp_path / "data"), "bookings.json")
    assert settings.PAYMENTS_FILE == os.path.join(str(tmp_path / "data"), "payments.json")


def test_explicit_file_overrides_data_dir(tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path), BOOKINGS_FILE=str(tmp_path / "elsewhere" / "b.json"))

    assert settings.BOOKINGS_FILE == str(tmp_path / "elsewhere" / "b.json")
    assert settings.USERS_FILE == os.path.join(str(tmp_path), "users.json")


def test_seed_file_is_not_moved_by_data_dir(tmp_path):
    settings = Settings(DATA_DIR=str(tmp_path))

    assert settings.ACTIVITIES_SEED_FILE == "db/seed/activities.json"


def test_container_writes_into_data_dir(tmp_path):
    data_dir = tmp_path / "srv"
    container = build_container(Settings(DATA_DIR=str(data_dir), ACTIVITIES_SEED_FILE=None))

    container.users.create({
        "username": "dana",
        "email": "dana@example.com",
        "password": "secret1",
        "terms": True,
    })

    assert (data_dir / "users.json").exists()
