"""
HTTP routes for filestore

``GET /`` is registered ahead of the catch-all routes so the root URL
always returns the welcome text.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .models import COPY_FROM_HEADER, WELCOME_TEXT, EntryKind, Message, MessageResponse
from .storage import FileStore, ResourceNotFoundError, SourceNotFoundError
from .utils import format_http_date

logger = logging.getLogger(__name__)

api_router = APIRouter(tags=["files"])


def get_store(request: Request) -> FileStore:
    """Return the FileStore bound to the application at startup"""
    return request.app.state.store


def message_response(message: Message, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MessageResponse(message=message.value).to_dict(),
    )


@api_router.get("/")
async def welcome():
    """Fixed welcome text, never a listing of the storage root"""
    return PlainTextResponse(WELCOME_TEXT)


@api_router.put("/{path:path}")
async def put_file(request: Request, path: str):
    """Create or overwrite a file from the body or from X-Copy-From"""

    store = get_store(request)
    copy_from = request.headers.get(COPY_FROM_HEADER)

    if copy_from is not None:
        try:
            result = await store.copy(path, copy_from)
        except SourceNotFoundError as e:
            logger.warning(str(e))
            return message_response(Message.SOURCE_NOT_FOUND, status_code=404)

        if result.created:
            return message_response(Message.FILE_COPIED, status_code=201)
        return message_response(Message.FILE_OVERWRITTEN)

    result = await store.write(path, request.stream())
    if result.created:
        return message_response(Message.FILE_CREATED, status_code=201)
    return message_response(Message.FILE_UPDATED)


@api_router.get("/{path:path}")
async def get_file_or_listing(request: Request, path: str):
    """Raw file bytes, or the child names of a directory"""

    store = get_store(request)
    try:
        content = await store.read(path)
    except ResourceNotFoundError:
        return message_response(Message.NOT_FOUND, status_code=404)

    if isinstance(content, bytes):
        # Declared as plain text whatever the actual content is
        return Response(content=content, headers={"Content-Type": "text/plain"})
    return JSONResponse(content=content)


@api_router.head("/{path:path}")
async def head_file(request: Request, path: str):
    """Size and last write time of a file, without a body"""

    store = get_store(request)
    try:
        info = await store.file_info(path)
    except ResourceNotFoundError:
        return Response(
            content='{"message": "%s"}' % Message.FILE_NOT_FOUND.value,
            status_code=404,
            media_type="application/json",
        )

    return Response(
        status_code=200,
        headers={
            "Content-Length": str(info.size),
            "Last-Modified": format_http_date(info.modified),
        },
    )


@api_router.delete("/{path:path}")
async def delete_file_or_directory(request: Request, path: str):
    """Delete a file, or a directory with everything below it"""

    store = get_store(request)
    try:
        kind = await store.delete(path)
    except ResourceNotFoundError:
        return message_response(Message.NOT_FOUND, status_code=404)

    if kind is EntryKind.DIRECTORY:
        return message_response(Message.DIRECTORY_DELETED)
    return message_response(Message.FILE_DELETED)


def setup_api_routes(app):
    """Setup API routes"""
    app.include_router(api_router)
    logger.info("API routes setup complete")
