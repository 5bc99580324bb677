from typing import Literal
from uuid import UUID

from taskhub.core.schemas import BaseDoc

FriendRequestStatus = Literal["pending", "accepted", "rejected"]


class FriendshipDoc(BaseDoc):
    user1: UUID
    user2: UUID


class FriendRequestDoc(BaseDoc):
    from_user: UUID
    to_user: UUID
    status: FriendRequestStatus
