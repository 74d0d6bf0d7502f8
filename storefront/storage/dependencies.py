from fastapi import Request

from .base import Storage


async def get_storage(request: Request) -> Storage:
    """Resolves the storage handle the app was started with (see ``app.state``)."""
    return request.app.state.storage
