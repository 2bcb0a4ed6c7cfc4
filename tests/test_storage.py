"""Storage contract tests, run against every backend."""

from unittest.mock import patch

import pytest

from students_api.core.exceptions import StudentNotFoundException
from students_api.schemas.student import StudentUpdate
from students_api.storage.base import changed_fields


def test_create_then_get_returns_same_fields(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)

    student = storage.get_student_by_id(student_id)

    assert student.id == student_id
    assert student.name == "Ann"
    assert student.email == "ann@x.com"
    assert student.age == 21


def test_ids_are_strictly_increasing(storage):
    ids = [storage.create_student(f"S{i}", f"s{i}@x.com", 20 + i) for i in range(5)]

    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_ids_are_not_reused_after_delete(storage):
    first = storage.create_student("Ann", "ann@x.com", 21)
    second = storage.create_student("Bob", "bob@x.com", 22)
    storage.delete_student_by_id(second)

    third = storage.create_student("Cid", "cid@x.com", 23)

    assert third > second > first


def test_get_missing_student_raises_not_found(storage):
    with pytest.raises(StudentNotFoundException) as exc_info:
        storage.get_student_by_id(42)

    assert exc_info.value.student_id == 42
    assert "42" in exc_info.value.message


def test_get_all_on_empty_store_returns_empty_list(storage):
    assert storage.get_all_students() == []


def test_get_all_returns_every_row(storage):
    storage.create_student("Ann", "ann@x.com", 21)
    storage.create_student("Bob", "bob@x.com", 22)

    students = storage.get_all_students()

    assert sorted(s.name for s in students) == ["Ann", "Bob"]


def test_duplicate_email_is_allowed(storage):
    storage.create_student("Ann", "same@x.com", 21)
    storage.create_student("Ann Again", "same@x.com", 30)

    assert len(storage.get_all_students()) == 2


def test_patch_with_only_email_keeps_other_fields(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)

    updated = storage.modify_student_by_id(student_id, StudentUpdate(email="new@x.com"))

    assert updated.email == "new@x.com"
    assert updated.name == "Ann"
    assert updated.age == 21
    assert storage.get_student_by_id(student_id) == updated


def test_patch_every_field(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)

    updated = storage.modify_student_by_id(
        student_id, StudentUpdate(name="Anne", email="anne@x.com", age=30)
    )

    assert (updated.name, updated.email, updated.age) == ("Anne", "anne@x.com", 30)


def test_empty_patch_is_a_no_op(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)
    before = storage.get_student_by_id(student_id)

    after = storage.modify_student_by_id(student_id, StudentUpdate())

    assert after == before


def test_zero_values_in_patch_leave_fields_unchanged(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)

    after = storage.modify_student_by_id(student_id, StudentUpdate(name="", email="", age=0))

    assert (after.name, after.email, after.age) == ("Ann", "ann@x.com", 21)


def test_patch_missing_student_raises_not_found(storage):
    with pytest.raises(StudentNotFoundException):
        storage.modify_student_by_id(7, StudentUpdate(age=30))


def test_delete_returns_snapshot_and_removes_row(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)

    deleted = storage.delete_student_by_id(student_id)

    assert deleted.id == student_id
    assert deleted.name == "Ann"
    with pytest.raises(StudentNotFoundException):
        storage.get_student_by_id(student_id)


def test_delete_missing_student_raises_not_found(storage):
    with pytest.raises(StudentNotFoundException):
        storage.delete_student_by_id(99)


def test_update_of_row_deleted_after_fetch_raises_not_found(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)
    snapshot = storage.get_student_by_id(student_id)
    storage.delete_student_by_id(student_id)

    with patch.object(storage, "get_student_by_id", return_value=snapshot):
        with pytest.raises(StudentNotFoundException):
            storage.modify_student_by_id(student_id, StudentUpdate(age=22))


def test_delete_of_row_deleted_after_fetch_raises_not_found(storage):
    student_id = storage.create_student("Ann", "ann@x.com", 21)
    snapshot = storage.get_student_by_id(student_id)
    storage.delete_student_by_id(student_id)

    with patch.object(storage, "get_student_by_id", return_value=snapshot):
        with pytest.raises(StudentNotFoundException):
            storage.delete_student_by_id(student_id)

    assert storage.get_all_students() == []


def test_changed_fields_skips_empty_values():
    update = StudentUpdate(name="", email="a@x.com", age=0)

    assert changed_fields(update) == {"email": "a@x.com"}


def test_changed_fields_keeps_fixed_order():
    update = StudentUpdate(age=3, email="a@x.com", name="A")

    assert list(changed_fields(update)) == ["name", "email", "age"]
