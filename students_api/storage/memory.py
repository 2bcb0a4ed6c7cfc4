"""In-memory student storage, used by tests and throwaway runs."""

import itertools
import logging
import threading
from typing import Dict, List

from students_api.core.exceptions import StudentNotFoundException
from students_api.schemas.student import Student, StudentUpdate
from students_api.storage.base import changed_fields

logger = logging.getLogger(__name__)


class InMemoryStorage:
    def __init__(self):
        self._rows: Dict[int, Student] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create_student(self, name: str, email: str, age: int) -> int:
        with self._lock:
            student_id = next(self._ids)
            self._rows[student_id] = Student(id=student_id, name=name, email=email, age=age)
        return student_id

    def get_student_by_id(self, student_id: int) -> Student:
        with self._lock:
            student = self._rows.get(student_id)
        if student is None:
            raise StudentNotFoundException(student_id)
        return student.model_copy()

    def get_all_students(self) -> List[Student]:
        with self._lock:
            return [student.model_copy() for student in self._rows.values()]

    def modify_student_by_id(self, student_id: int, patch: StudentUpdate) -> Student:
        current = self.get_student_by_id(student_id)

        changes = changed_fields(patch)
        if not changes:
            logger.info(f"no new data to update for student {student_id}")
            return current

        with self._lock:
            if student_id not in self._rows:
                raise StudentNotFoundException(student_id)
            self._rows[student_id] = self._rows[student_id].model_copy(update=changes)

        return self.get_student_by_id(student_id)

    def delete_student_by_id(self, student_id: int) -> Student:
        current = self.get_student_by_id(student_id)

        with self._lock:
            if self._rows.pop(student_id, None) is None:
                raise StudentNotFoundException(student_id)

        return current

    def close(self) -> None:
        with self._lock:
            self._rows.clear()
