"""
Response shaping: replaces user ids with usernames before data leaves the app.
"""

from typing import List
from uuid import UUID

from taskhub.modules.authenticating.service import AuthService
from taskhub.modules.friending.schemas import FriendRequestDoc
from taskhub.modules.posting.schemas import PostDoc


class Responses:
    def __init__(self, authing: AuthService):
        self.authing = authing

    async def post(self, post: PostDoc) -> dict:
        author = await self.authing.get_user_by_id(post.author)
        return {**post.model_dump(), "author": author.username}

    async def posts(self, posts: List[PostDoc]) -> List[dict]:
        authors = await self.authing.ids_to_usernames([post.author for post in posts])
        return [{**post.model_dump(), "author": author} for post, author in zip(posts, authors)]

    async def friend_requests(self, requests: List[FriendRequestDoc]) -> List[dict]:
        senders = await self.authing.ids_to_usernames([request.from_user for request in requests])
        recipients = await self.authing.ids_to_usernames([request.to_user for request in requests])
        return [
            {
                "id": request.id,
                "from": sender,
                "to": recipient,
                "status": request.status,
                "created_at": request.created_at,
                "updated_at": request.updated_at,
            }
            for request, sender, recipient in zip(requests, senders, recipients)
        ]

    async def users(self, ids: List[UUID]) -> List[dict]:
        """Pair user ids with their usernames (member and assignee lists)"""
        usernames = await self.authing.ids_to_usernames(ids)
        return [{"id": _id, "username": username} for _id, username in zip(ids, usernames)]
