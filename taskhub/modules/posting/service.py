import logging
from typing import List, Optional
from uuid import UUID

from taskhub.core.errors import NotFoundError, PostAuthorNotMatchError
from taskhub.database import Database
from taskhub.modules.posting.schemas import PostDoc, PostOptions

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, database: Database, table: str = "posts"):
        self.posts = database.collection(table)

    async def create(self, author: UUID, content: str, options: Optional[PostOptions] = None) -> dict:
        _id = await self.posts.create_one({
            "author": author,
            "content": content,
            "options": options.model_dump(exclude_none=True) if options else None,
        })
        logger.info(f"User {author} created post {_id}")
        return {"msg": "Post successfully created!", "post": PostDoc(**await self.posts.read_one({"id": _id}))}

    async def get_posts(self) -> List[PostDoc]:
        return [PostDoc(**doc) for doc in await self.posts.read_many()]

    async def get_by_author(self, author: UUID) -> List[PostDoc]:
        return [PostDoc(**doc) for doc in await self.posts.read_many({"author": author})]

    async def update(self, _id: UUID, content: Optional[str] = None, options: Optional[PostOptions] = None) -> dict:
        """Update only the fields that were given"""
        update = {}
        if content is not None:
            update["content"] = content
        if options is not None:
            update["options"] = options.model_dump(exclude_none=True)
        await self.posts.partial_update_one({"id": _id}, update)
        return {"msg": "Post successfully updated!"}

    async def delete(self, _id: UUID) -> dict:
        await self.posts.delete_one({"id": _id})
        return {"msg": "Post deleted successfully!"}

    async def assert_author_is_user(self, _id: UUID, user: UUID):
        doc = await self.posts.read_one({"id": _id})
        if doc is None:
            raise NotFoundError(f"Post {_id} does not exist!")
        if PostDoc(**doc).author != user:
            raise PostAuthorNotMatchError(user, _id)
