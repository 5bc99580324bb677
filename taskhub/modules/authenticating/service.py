import logging
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from taskhub.core.errors import BadValuesError, ConflictError, ForbiddenError, NotFoundError, UnauthenticatedError
from taskhub.core.security import get_password_hash, verify_password
from taskhub.database import Database
from taskhub.modules.authenticating.schemas import UserDoc, UserResponse

logger = logging.getLogger(__name__)

DELETED_USER = "DELETED_USER"


class AuthService:
    def __init__(self, database: Database, table: str = "users"):
        self.users = database.collection(table)

    @staticmethod
    def _redact(doc: dict) -> UserResponse:
        return UserResponse(**{k: v for k, v in doc.items() if k != "password"})

    async def create(self, username: str, password: str) -> dict:
        """Register a new user; the password is stored as a bcrypt hash"""
        await self._can_create(username, password)
        _id = await self.users.create_one({"username": username, "password": get_password_hash(password)})
        logger.info(f"Created user {username} ({_id})")
        return {"msg": "User created successfully!", "user": await self.get_user_by_id(_id)}

    async def authenticate(self, username: str, password: str) -> dict:
        doc = await self.users.read_one({"username": username})
        if doc is None or not verify_password(password, doc["password"]):
            raise UnauthenticatedError("Username or password is incorrect.")
        return {"msg": "Successfully authenticated.", "id": UUID(str(doc["id"]))}

    async def get_user_by_id(self, _id: UUID) -> UserResponse:
        doc = await self.users.read_one({"id": _id})
        if doc is None:
            raise NotFoundError("User not found!")
        return self._redact(doc)

    async def get_user_by_username(self, username: str) -> UserResponse:
        doc = await self.users.read_one({"username": username})
        if doc is None:
            raise NotFoundError(f"User {username} not found!")
        return self._redact(doc)

    async def get_users(self, username: Optional[str] = None) -> List[UserResponse]:
        filter = {"username": username} if username else {}
        return [self._redact(doc) for doc in await self.users.read_many(filter)]

    async def ids_to_usernames(self, ids: Iterable[UUID]) -> List[str]:
        """Map user ids to usernames, preserving order; unknown ids map to DELETED_USER"""
        ids = list(ids)
        if not ids:
            return []
        docs = await self.users.read_many({"id": list(set(ids))}, projection=["username"])
        id_to_username: Dict[str, str] = {str(doc["id"]): doc["username"] for doc in docs}
        return [id_to_username.get(str(_id), DELETED_USER) for _id in ids]

    async def update_username(self, _id: UUID, username: str) -> dict:
        await self._assert_username_unique(username)
        if await self.users.partial_update_one({"id": _id}, {"username": username}) is None:
            raise NotFoundError("User not found!")
        return {"msg": "Updated username successfully!"}

    async def update_password(self, _id: UUID, current_password: str, new_password: str) -> dict:
        doc = await self.users.read_one({"id": _id})
        if doc is None:
            raise NotFoundError("User not found!")
        if not verify_password(current_password, UserDoc(**doc).password):
            raise ForbiddenError("The given current password is wrong!")
        await self.users.partial_update_one({"id": _id}, {"password": get_password_hash(new_password)})
        return {"msg": "Password updated successfully!"}

    async def delete(self, _id: UUID) -> dict:
        await self.users.delete_one({"id": _id})
        logger.info(f"Deleted user {_id}")
        return {"msg": "User deleted!"}

    async def _can_create(self, username: str, password: str):
        if not username or not password:
            raise BadValuesError("Username and password must be non-empty!")
        await self._assert_username_unique(username)

    async def _assert_username_unique(self, username: str):
        if await self.users.read_one({"username": username}):
            raise ConflictError(f"User with username {username} already exists!")
