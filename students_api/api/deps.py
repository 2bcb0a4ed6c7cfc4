from fastapi import Request

from students_api.storage.base import Storage


def get_storage(request: Request) -> Storage:
    """
    Dependency returning the storage built at startup.
    The same object serves every request until shutdown.
    """
    return request.app.state.storage
