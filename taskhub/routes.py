"""
Web server routes for the app. Synchronizes the concepts with each other.

Handlers live on ``Routes``; ``ROUTE_TABLE`` lists every endpoint and
``build_router`` registers them on a FastAPI router at startup.
"""

import logging
from typing import List, NamedTuple, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from taskhub.core.dependencies import get_session
from taskhub.core.errors import AppError, BadValuesError, ConflictError, NotFoundError
from taskhub.database import Database
from taskhub.modules.authenticating.schemas import LoginRequest, PasswordUpdate, UserCreate, UsernameUpdate
from taskhub.modules.authenticating.service import AuthService
from taskhub.modules.friending.service import FriendService
from taskhub.modules.grouping.service import GroupItemService
from taskhub.modules.posting.schemas import PostCreate, PostUpdate
from taskhub.modules.posting.service import PostService
from taskhub.modules.projects.schemas import ProjectCreate, ProjectManagerUpdate, ProjectMemberAdd, ProjectNameUpdate
from taskhub.modules.projects.service import ProjectService
from taskhub.modules.sessioning.service import SessionDoc, SessionService
from taskhub.modules.tasking.schemas import TaskAssigneeAdd, TaskCompletionUpdate, TaskCreate, TaskDescriptionUpdate, TaskDoc
from taskhub.modules.tasking.service import TaskService
from taskhub.responses import Responses

logger = logging.getLogger(__name__)


class Concepts:
    """The concept instances the app is composed of, all backed by one database."""

    def __init__(self, database: Database):
        self.sessioning = SessionService()
        self.authing = AuthService(database, "users")
        self.posting = PostService(database, "posts")
        self.friending = FriendService(database, "friends", "friend_requests")
        self.project = ProjectService(database, "projects")
        # group = project, item = user
        self.project_member = GroupItemService(database, "project_members")
        # task stores description, associated project, and completion
        self.task = TaskService(database, "tasks")
        # group = task, item = user
        self.task_assignee = GroupItemService(database, "task_assignees")


class Routes:
    def __init__(self, concepts: Concepts):
        self.c = concepts
        self.responses = Responses(concepts.authing)

    # Users and sessions

    async def get_session_user(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.authing.get_user_by_id(user)

    async def get_users(self, username: Optional[str] = None):
        return await self.c.authing.get_users(username)

    async def get_user(self, username: str):
        return await self.c.authing.get_user_by_username(username)

    async def create_user(self, body: UserCreate, session: SessionDoc = Depends(get_session)):
        self.c.sessioning.is_logged_out(session)
        return await self.c.authing.create(body.username, body.password)

    async def update_username(self, body: UsernameUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.authing.update_username(user, body.username)

    async def update_password(self, body: PasswordUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.authing.update_password(user, body.current_password, body.new_password)

    async def delete_user(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        self.c.sessioning.end(session)
        return await self.c.authing.delete(user)

    async def log_in(self, body: LoginRequest, session: SessionDoc = Depends(get_session)):
        authenticated = await self.c.authing.authenticate(body.username, body.password)
        self.c.sessioning.start(session, authenticated["id"])
        return {"msg": "Logged in!"}

    async def log_out(self, session: SessionDoc = Depends(get_session)):
        self.c.sessioning.end(session)
        return {"msg": "Logged out!"}

    # Posts

    async def get_posts(self, author: Optional[str] = None):
        if author:
            author_id = (await self.c.authing.get_user_by_username(author)).id
            posts = await self.c.posting.get_by_author(author_id)
        else:
            posts = await self.c.posting.get_posts()
        return await self.responses.posts(posts)

    async def create_post(self, body: PostCreate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        created = await self.c.posting.create(user, body.content, body.options)
        return {"msg": created["msg"], "post": await self.responses.post(created["post"])}

    async def update_post(self, id: UUID, body: PostUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.posting.assert_author_is_user(id, user)
        return await self.c.posting.update(id, body.content, body.options)

    async def delete_post(self, id: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.posting.assert_author_is_user(id, user)
        return await self.c.posting.delete(id)

    # Friends

    async def get_friends(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.authing.ids_to_usernames(await self.c.friending.get_friends(user))

    async def remove_friend(self, friend: str, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        friend_id = (await self.c.authing.get_user_by_username(friend)).id
        return await self.c.friending.remove_friend(user, friend_id)

    async def get_requests(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.responses.friend_requests(await self.c.friending.get_requests(user))

    async def send_friend_request(self, to: str, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        to_id = (await self.c.authing.get_user_by_username(to)).id
        return await self.c.friending.send_request(user, to_id)

    async def remove_friend_request(self, to: str, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        to_id = (await self.c.authing.get_user_by_username(to)).id
        return await self.c.friending.remove_request(user, to_id)

    async def accept_friend_request(self, sender: str, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        sender_id = (await self.c.authing.get_user_by_username(sender)).id
        return await self.c.friending.accept_request(sender_id, user)

    async def reject_friend_request(self, sender: str, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        sender_id = (await self.c.authing.get_user_by_username(sender)).id
        return await self.c.friending.reject_request(sender_id, user)

    # Projects

    async def create_project(self, body: ProjectCreate, session: SessionDoc = Depends(get_session)):
        """Create a project managed by the current user, who also becomes its first member"""
        user = self.c.sessioning.get_user(session)
        project = (await self.c.project.create(user, body.name))["project"]
        if project:
            await self.c.project_member.add_group_item(project.id, user)
        return {"msg": "Successfully created project!", "project": project}

    async def delete_project(self, id: UUID, session: SessionDoc = Depends(get_session)):
        """
        Delete a project (creator only).

        Cascade order: membership links, assignee links of every task in the
        project, the tasks, then the project row. The steps are independent
        store calls; a failure part way leaves the earlier steps applied.
        """
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(id, user)
        await self.c.project_member.delete_all_items_in_group(id)
        for task in await self.c.task.get_all_tasks_for_project(id):
            await self.c.task_assignee.delete_all_items_in_group(task.id)
        await self.c.task.delete_tasks_for_project(id)
        return await self.c.project.delete_project(id)

    async def get_project(
        self,
        name: Optional[str] = None,
        id: Optional[UUID] = None,
        session: SessionDoc = Depends(get_session),
    ):
        """Get a project by id (members only) or by name"""
        user = self.c.sessioning.get_user(session)
        if id:
            await self.c.project_member.assert_item_in_group(id, user)
            project = await self.c.project.get_project(id)
            if project is None:
                raise NotFoundError(f"Project {id} does not exist!")
            return project
        if name:
            return await self.c.project.get_project_by_name(name)
        raise BadValuesError("Did not specify project to fetch!")

    async def get_user_projects(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.project.get_projects(await self.c.project_member.get_groups_for_item(user))

    async def update_project_name(self, body: ProjectNameUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(body.id, user)
        return await self.c.project.update_project_name(body.id, body.name)

    async def update_project_manager(self, body: ProjectManagerUpdate, session: SessionDoc = Depends(get_session)):
        """Hand the project over to another member (creator only)"""
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(body.id, user)
        await self.c.project_member.assert_item_in_group(body.id, body.manager)
        return await self.c.project.update_project_creator(body.id, body.manager)

    async def add_member_to_project(self, body: ProjectMemberAdd, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(body.id, user)
        await self.c.authing.get_user_by_id(body.member)
        return await self.c.project_member.add_group_item(body.id, body.member)

    async def delete_member_from_project(self, id: UUID, member: UUID, session: SessionDoc = Depends(get_session)):
        """Remove a member (creator only); their assignments on this project's tasks go with them"""
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(id, user)
        if member == user:
            raise ConflictError("The project manager cannot be removed from the project!")
        await self.c.project_member.assert_item_in_group(id, member)
        for task in await self.c.task.get_all_tasks_for_project(id):
            await self.c.task_assignee.remove_group_item(task.id, member)
            if task.assignee == member:
                await self._reassign_from_links(task.id)
        return await self.c.project_member.remove_group_item(id, member)

    async def get_all_members_in_project(self, id: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.project_member.assert_item_in_group(id, user)
        return await self.responses.users(await self.c.project_member.get_items_in_group(id))

    # Tasks

    async def _get_task(self, task: UUID) -> TaskDoc:
        doc = await self.c.task.get_task(task)
        if doc is None:
            raise NotFoundError("Task does not exist!")
        return doc

    async def _reassign_from_links(self, task: UUID) -> dict:
        """Point the task's assignee field at its most recent remaining link, or NULL when none is left"""
        remaining = await self.c.task_assignee.get_items_in_group(task)
        if remaining:
            return await self.c.task.update_assignee(task, remaining[0])
        return await self.c.task.unassign_task(task)

    async def create_task(self, body: TaskCreate, session: SessionDoc = Depends(get_session)):
        """Create a task (creator only); an assignee must already be a project member"""
        user = self.c.sessioning.get_user(session)
        await self.c.project.assert_user_is_creator(body.project, user)
        if body.assignee:
            await self.c.project_member.assert_item_in_group(body.project, body.assignee)
        created = await self.c.task.create(body.description, body.project, body.assignee)
        if body.assignee:
            if not created["task"]:
                raise AppError("Task not successfully created!")
            await self.c.task_assignee.add_group_item(created["task"].id, body.assignee)
        return created

    async def delete_task(self, id: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        task = await self._get_task(id)
        await self.c.project.assert_user_is_creator(task.project, user)
        await self.c.task_assignee.delete_all_items_in_group(id)
        return await self.c.task.delete(id)

    async def get_tasks_for_project(self, project: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        await self.c.project_member.assert_item_in_group(project, user)
        return await self.c.task.get_all_tasks_for_project(project)

    async def get_tasks_for_user(self, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        return await self.c.task.get_tasks(await self.c.task_assignee.get_groups_for_item(user))

    async def update_task_description(self, body: TaskDescriptionUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        task = await self._get_task(body.task)
        await self.c.project.assert_user_is_creator(task.project, user)
        return await self.c.task.update_description(body.task, body.description)

    async def update_task_completion(self, body: TaskCompletionUpdate, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        task = await self._get_task(body.task)
        await self.c.project.assert_user_is_creator(task.project, user)
        return await self.c.task.set_completion_status(body.task, body.completion)

    async def add_task_assignee(self, body: TaskAssigneeAdd, session: SessionDoc = Depends(get_session)):
        """
        Assign a project member to a task (creator only).

        Assignees accumulate; call DELETE /project/task/assignees first to
        replace them.
        """
        user = self.c.sessioning.get_user(session)
        task = await self._get_task(body.task)
        await self.c.project.assert_user_is_creator(task.project, user)
        await self.c.project_member.assert_item_in_group(task.project, body.assignee)
        await self.c.task_assignee.add_group_item(body.task, body.assignee)
        return await self.c.task.update_assignee(body.task, body.assignee)

    async def unassign_task(self, task: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        doc = await self._get_task(task)
        await self.c.project.assert_user_is_creator(doc.project, user)
        await self.c.task_assignee.delete_all_items_in_group(task)
        return await self.c.task.unassign_task(task)

    async def get_assignees_for_task(self, task: UUID, session: SessionDoc = Depends(get_session)):
        user = self.c.sessioning.get_user(session)
        doc = await self._get_task(task)
        await self.c.project_member.assert_item_in_group(doc.project, user)
        return await self.responses.users(await self.c.task_assignee.get_items_in_group(task))


class Route(NamedTuple):
    method: str
    path: str
    endpoint: str
    status_code: int = 200


ROUTE_TABLE: List[Route] = [
    Route("GET", "/session", "get_session_user"),
    Route("GET", "/users", "get_users"),
    Route("GET", "/users/{username}", "get_user"),
    Route("POST", "/users", "create_user", 201),
    Route("PATCH", "/users/username", "update_username"),
    Route("PATCH", "/users/password", "update_password"),
    Route("DELETE", "/users", "delete_user"),
    Route("POST", "/login", "log_in"),
    Route("POST", "/logout", "log_out"),

    Route("GET", "/posts", "get_posts"),
    Route("POST", "/posts", "create_post", 201),
    Route("PATCH", "/posts/{id}", "update_post"),
    Route("DELETE", "/posts/{id}", "delete_post"),

    Route("GET", "/friends", "get_friends"),
    Route("DELETE", "/friends/{friend}", "remove_friend"),
    Route("GET", "/friend/requests", "get_requests"),
    Route("POST", "/friend/requests/{to}", "send_friend_request"),
    Route("DELETE", "/friend/requests/{to}", "remove_friend_request"),
    Route("PUT", "/friend/accept/{sender}", "accept_friend_request"),
    Route("PUT", "/friend/reject/{sender}", "reject_friend_request"),

    Route("POST", "/projects", "create_project", 201),
    Route("GET", "/projects", "get_project"),
    Route("DELETE", "/projects/{id}", "delete_project"),
    Route("PATCH", "/project/name", "update_project_name"),
    Route("PATCH", "/project/manager", "update_project_manager"),
    Route("POST", "/project/members", "add_member_to_project"),
    Route("DELETE", "/project/members", "delete_member_from_project"),
    Route("GET", "/project/members", "get_all_members_in_project"),

    Route("POST", "/project/tasks", "create_task", 201),
    Route("DELETE", "/project/tasks/{id}", "delete_task"),
    Route("GET", "/project/tasks", "get_tasks_for_project"),
    Route("PATCH", "/project/task/description", "update_task_description"),
    Route("PATCH", "/project/task/completion", "update_task_completion"),
    Route("POST", "/project/task/assignees", "add_task_assignee"),
    Route("DELETE", "/project/task/assignees", "unassign_task"),
    Route("GET", "/project/task/assignees", "get_assignees_for_task"),

    Route("GET", "/user/projects", "get_user_projects"),
    Route("GET", "/user/tasks", "get_tasks_for_user"),
]


def build_router(routes: Routes, table: List[Route] = ROUTE_TABLE) -> APIRouter:
    router = APIRouter()
    for route in table:
        router.add_api_route(
            route.path,
            getattr(routes, route.endpoint),
            methods=[route.method],
            status_code=route.status_code,
            name=route.endpoint,
        )
    logger.debug(f"Registered {len(table)} routes")
    return router
