from fastapi import status


class BaseAPIException(Exception):
    """
    Base class for every custom error raised by the service.
    Handlers turn it into the standard error envelope.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class NotFoundException(BaseAPIException):
    """404: resource not found"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

# =========================================================
# 2. STORAGE ERRORS
# =========================================================

class StudentNotFoundException(NotFoundException):
    """No row matches the requested student id."""
    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(message=f"no student found with id {student_id}")

class StorageException(BaseAPIException):
    """
    500: the database driver or engine failed (I/O, constraint, bad SQL...).
    """
    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
