import logging
from typing import List, Optional
from uuid import UUID

from taskhub.core.errors import ConflictError, NotFoundError
from taskhub.database import Database
from taskhub.modules.friending.schemas import FriendRequestDoc, FriendshipDoc

logger = logging.getLogger(__name__)


class FriendService:
    def __init__(self, database: Database, friends_table: str = "friends", requests_table: str = "friend_requests"):
        self.friends = database.collection(friends_table)
        self.requests = database.collection(requests_table)

    async def get_requests(self, user: UUID) -> List[FriendRequestDoc]:
        """Requests sent or received by the user, newest first"""
        sent = await self.requests.read_many({"from_user": user})
        received = await self.requests.read_many({"to_user": user})
        docs = sorted(sent + received, key=lambda doc: doc["created_at"], reverse=True)
        return [FriendRequestDoc(**doc) for doc in docs]

    async def send_request(self, from_user: UUID, to_user: UUID) -> dict:
        await self._can_send_request(from_user, to_user)
        await self.requests.create_one({"from_user": from_user, "to_user": to_user, "status": "pending"})
        return {"msg": "Sent request!"}

    async def accept_request(self, from_user: UUID, to_user: UUID) -> dict:
        await self._set_request_status(from_user, to_user, "accepted")
        await self.friends.create_one({"user1": from_user, "user2": to_user})
        logger.info(f"Users {from_user} and {to_user} are now friends")
        return {"msg": "Accepted request!"}

    async def reject_request(self, from_user: UUID, to_user: UUID) -> dict:
        await self._set_request_status(from_user, to_user, "rejected")
        return {"msg": "Rejected request!"}

    async def remove_request(self, from_user: UUID, to_user: UUID) -> dict:
        request = await self.requests.pop_one({"from_user": from_user, "to_user": to_user, "status": "pending"})
        if request is None:
            raise NotFoundError(f"Friend request from {from_user} to {to_user} does not exist!")
        return {"msg": "Removed request!"}

    async def remove_friend(self, user: UUID, friend: UUID) -> dict:
        friendship = await self._get_friendship(user, friend)
        if friendship is None:
            raise NotFoundError(f"Friendship between {user} and {friend} does not exist!")
        await self.friends.delete_one({"id": friendship.id})
        logger.info(f"Users {user} and {friend} are no longer friends")
        return {"msg": "Unfriended!"}

    async def get_friends(self, user: UUID) -> List[UUID]:
        as_user1 = await self.friends.read_many({"user1": user})
        as_user2 = await self.friends.read_many({"user2": user})
        return [FriendshipDoc(**doc).user2 for doc in as_user1] + [FriendshipDoc(**doc).user1 for doc in as_user2]

    async def _get_friendship(self, u1: UUID, u2: UUID) -> Optional[FriendshipDoc]:
        doc = await self.friends.read_one({"user1": u1, "user2": u2})
        if doc is None:
            doc = await self.friends.read_one({"user1": u2, "user2": u1})
        return FriendshipDoc(**doc) if doc else None

    async def _set_request_status(self, from_user: UUID, to_user: UUID, status: str):
        updated = await self.requests.partial_update_one(
            {"from_user": from_user, "to_user": to_user, "status": "pending"},
            {"status": status},
        )
        if updated is None:
            raise NotFoundError(f"Friend request from {from_user} to {to_user} does not exist!")

    async def _can_send_request(self, u1: UUID, u2: UUID):
        if u1 == u2:
            raise ConflictError("Cannot send a friend request to yourself!")
        if await self._get_friendship(u1, u2) is not None:
            raise ConflictError(f"{u1} and {u2} are already friends!")
        for from_user, to_user in ((u1, u2), (u2, u1)):
            if await self.requests.read_one({"from_user": from_user, "to_user": to_user, "status": "pending"}):
                raise ConflictError(f"Friend request between {u1} and {u2} already exists!")
