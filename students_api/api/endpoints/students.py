import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, status

from students_api.api.deps import get_storage
from students_api.schemas.student import (
    INT64_MAX,
    INT64_MIN,
    StatusResponse,
    Student,
    StudentCreate,
    StudentCreated,
    StudentUpdate,
)
from students_api.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()

StudentId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]


@router.post("", response_model=StudentCreated, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    storage: Storage = Depends(get_storage)
):
    """
    Create a student

    - **name**: required, non-empty
    - **email**: required, valid email address
    - **age**: required
    """
    logger.info("Creating a student")

    student_id = storage.create_student(
        name=student.name,
        email=student.email,
        age=student.age,
    )

    logger.info(f"student created successfully, id={student_id}")
    return StudentCreated(id=student_id)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: StudentId,
    storage: Storage = Depends(get_storage)
):
    """
    Fetch one student by ID
    """
    logger.info(f"getting a student, id={student_id}")
    return storage.get_student_by_id(student_id)


@router.get("", response_model=List[Student])
def get_students(storage: Storage = Depends(get_storage)):
    logger.info("Fetching all the students")
    return storage.get_all_students()


@router.patch("/{student_id}", response_model=Student)
def update_student(
    student_id: StudentId,
    student: StudentUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Update only the fields present in the body.
    Empty strings and 0 are treated as "not provided".
    """
    logger.info(f"modifying student, id={student_id}")
    return storage.modify_student_by_id(student_id, student)


@router.delete("/{student_id}", response_model=StatusResponse)
def delete_student(
    student_id: StudentId,
    storage: Storage = Depends(get_storage)
):
    logger.info(f"deleting student, id={student_id}")
    storage.delete_student_by_id(student_id)
    return StatusResponse(status="success")
