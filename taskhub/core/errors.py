"""Application errors and their translation to HTTP responses."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that reach the client with a status code and a message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"msg": self.message}


class BadValuesError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class UserCreatorNotMatchError(ForbiddenError):
    def __init__(self, user: UUID, project: UUID):
        self.user = user
        self.project = project
        super().__init__(f"{user} is not the creator of project {project}!")


class PostAuthorNotMatchError(ForbiddenError):
    def __init__(self, author: UUID, post: UUID):
        self.author = author
        self.post = post
        super().__init__(f"{author} is not the author of post {post}!")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
