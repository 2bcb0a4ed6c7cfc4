"""SQLite-backed student storage."""

import logging
from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from students_api.core.database import (
    create_database_tables,
    create_db_engine,
    create_session_factory,
)
from students_api.core.exceptions import StorageException, StudentNotFoundException
from students_api.models.student import Student as StudentModel
from students_api.schemas.student import Student, StudentUpdate
from students_api.storage.base import changed_fields

logger = logging.getLogger(__name__)

students_table = StudentModel.__table__

# Patch field -> column. Only these identifiers ever reach the SET clause.
UPDATE_COLUMNS = {
    "name": students_table.c.name,
    "email": students_table.c.email,
    "age": students_table.c.age,
}


class SqliteStorage:
    """Student storage on a single SQLite file, shared by all requests."""

    def __init__(self, storage_path: str, echo: bool = False):
        self.storage_path = storage_path
        try:
            self.engine = create_db_engine(storage_path, echo=echo)
            create_database_tables(self.engine)
        except SQLAlchemyError as exc:
            raise StorageException(f"cannot open storage at {storage_path}: {exc}") from exc
        self.SessionLocal = create_session_factory(self.engine)

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        """
        Yield a session, turning driver failures into StorageException.
        The session is rolled back on error and always closed.
        """
        db = self.SessionLocal()
        try:
            yield db
        # OverflowError: the sqlite3 driver rejects ints outside 64 bits at bind time
        except (SQLAlchemyError, OverflowError) as exc:
            db.rollback()
            logger.error(f"{action}: {exc}")
            raise StorageException(f"{action}: {exc}") from exc
        finally:
            db.close()

    def create_student(self, name: str, email: str, age: int) -> int:
        db_student = StudentModel(name=name, email=email, age=age)
        with self._session("insert error") as db:
            db.add(db_student)
            db.commit()
        return db_student.id

    def get_student_by_id(self, student_id: int) -> Student:
        with self._session("query error") as db:
            db_student = db.execute(
                select(StudentModel).where(StudentModel.id == student_id)
            ).scalar_one_or_none()

        if db_student is None:
            raise StudentNotFoundException(student_id)
        return Student.model_validate(db_student)

    def get_all_students(self) -> List[Student]:
        with self._session("query error") as db:
            rows = db.execute(select(StudentModel)).scalars().all()
        return [Student.model_validate(row) for row in rows]

    def modify_student_by_id(self, student_id: int, patch: StudentUpdate) -> Student:
        current = self.get_student_by_id(student_id)

        changes = changed_fields(patch)
        if not changes:
            logger.info(f"no new data to update for student {student_id}")
            return current

        stmt = (
            update(students_table)
            .where(students_table.c.id == student_id)
            .values({UPDATE_COLUMNS[field]: value for field, value in changes.items()})
        )
        with self._session("update error") as db:
            rows_affected = db.execute(stmt).rowcount
            db.commit()

        # The row existed a moment ago; another request deleted it in between
        if rows_affected == 0:
            raise StudentNotFoundException(student_id)

        return self.get_student_by_id(student_id)

    def delete_student_by_id(self, student_id: int) -> Student:
        current = self.get_student_by_id(student_id)

        with self._session("delete error") as db:
            rows_affected = db.execute(
                delete(students_table).where(students_table.c.id == student_id)
            ).rowcount
            db.commit()

        if rows_affected == 0:
            raise StudentNotFoundException(student_id)

        return current

    def close(self) -> None:
        self.engine.dispose()
