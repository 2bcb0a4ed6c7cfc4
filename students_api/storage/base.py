"""Storage contract shared by every student backend."""

from typing import Any, Dict, List, Protocol

from students_api.schemas.student import Student, StudentUpdate

# Fields a patch may change, in the order they appear in the SET clause
PATCHABLE_FIELDS = ("name", "email", "age")


class Storage(Protocol):
    """Persistence capability handed to the request handlers."""

    def create_student(self, name: str, email: str, age: int) -> int: ...

    def get_student_by_id(self, student_id: int) -> Student: ...

    def get_all_students(self) -> List[Student]: ...

    def modify_student_by_id(self, student_id: int, patch: StudentUpdate) -> Student: ...

    def delete_student_by_id(self, student_id: int) -> Student: ...

    def close(self) -> None: ...


def changed_fields(patch: StudentUpdate) -> Dict[str, Any]:
    """
    Collect the fields a patch actually sets.

    Empty strings, zero and None all count as "not provided".
    """
    changes = {}
    for field in PATCHABLE_FIELDS:
        value = getattr(patch, field)
        if value:
            changes[field] = value
    return changes
