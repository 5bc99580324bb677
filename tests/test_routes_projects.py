"""
HTTP tests for projects, membership and tasks, including the delete cascade
"""
from types import SimpleNamespace
from uuid import uuid4

import pytest

from tests.conftest import register_and_login


@pytest.fixture
async def team(make_client):
    """alice manages project "roadmap", bob is a member, carol is an outsider"""
    alice, bob, carol = make_client(), make_client(), make_client()
    ids = SimpleNamespace(
        alice=await register_and_login(alice, "alice"),
        bob=await register_and_login(bob, "bob"),
        carol=await register_and_login(carol, "carol"),
    )
    response = await alice.post("/api/projects", json={"name": "roadmap"})
    assert response.status_code == 201
    project = response.json()["project"]["id"]
    response = await alice.post("/api/project/members", json={"id": project, "member": ids.bob})
    assert response.status_code == 200
    return SimpleNamespace(alice=alice, bob=bob, carol=carol, ids=ids, project=project)


async def create_task(team, description="design doc", assignee=None):
    body = {"project": team.project, "description": description}
    if assignee:
        body["assignee"] = assignee
    response = await team.alice.post("/api/project/tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()["task"]


class TestProjects:
    @pytest.mark.asyncio
    async def test_creator_is_first_member(self, team):
        members = (await team.alice.get("/api/project/members", params={"id": team.project})).json()

        assert sorted(m["username"] for m in members) == ["alice", "bob"]

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, team):
        response = await team.carol.post("/api/projects", json={"name": "roadmap"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_get_project_by_id_requires_membership(self, team):
        by_member = await team.bob.get("/api/projects", params={"id": team.project})
        by_outsider = await team.carol.get("/api/projects", params={"id": team.project})
        by_name = await team.carol.get("/api/projects", params={"name": "roadmap"})

        assert by_member.json()["name"] == "roadmap"
        assert by_outsider.status_code == 404
        assert by_name.json()["id"] == team.project
        assert (await team.carol.get("/api/projects")).status_code == 400

    @pytest.mark.asyncio
    async def test_only_creator_renames(self, team):
        body = {"id": team.project, "name": "q3-roadmap"}

        assert (await team.bob.patch("/api/project/name", json=body)).status_code == 403
        assert (await team.alice.patch("/api/project/name", json=body)).status_code == 200
        assert (await team.alice.get("/api/projects", params={"name": "q3-roadmap"})).status_code == 200

    @pytest.mark.asyncio
    async def test_manager_must_be_member(self, team):
        outsider = {"id": team.project, "manager": team.ids.carol}
        member = {"id": team.project, "manager": team.ids.bob}

        assert (await team.alice.patch("/api/project/manager", json=outsider)).status_code == 404
        assert (await team.alice.patch("/api/project/manager", json=member)).status_code == 200
        # alice is no longer the manager
        assert (await team.alice.patch("/api/project/manager", json=member)).status_code == 403

    @pytest.mark.asyncio
    async def test_member_management_is_creator_only(self, team):
        body = {"id": team.project, "member": team.ids.carol}

        assert (await team.bob.post("/api/project/members", json=body)).status_code == 403
        assert (await team.alice.post("/api/project/members", json=body)).status_code == 200
        missing = {"id": team.project, "member": str(uuid4())}
        assert (await team.alice.post("/api/project/members", json=missing)).status_code == 404

        params = {"id": team.project, "member": team.ids.carol}
        assert (await team.bob.delete("/api/project/members", params=params)).status_code == 403
        assert (await team.alice.delete("/api/project/members", params=params)).status_code == 200
        assert (await team.carol.get("/api/project/members", params={"id": team.project})).status_code == 404

    @pytest.mark.asyncio
    async def test_manager_cannot_remove_self(self, team):
        params = {"id": team.project, "member": team.ids.alice}

        assert (await team.alice.delete("/api/project/members", params=params)).status_code == 409

    @pytest.mark.asyncio
    async def test_user_projects(self, team):
        projects = (await team.bob.get("/api/user/projects")).json()

        assert [p["name"] for p in projects] == ["roadmap"]
        assert (await team.carol.get("/api/user/projects")).json() == []


class TestTasks:
    @pytest.mark.asyncio
    async def test_create_without_assignee(self, team):
        task = await create_task(team)

        assert task["completion"] is False
        assert task["assignee"] is None

    @pytest.mark.asyncio
    async def test_only_creator_creates_tasks(self, team):
        body = {"project": team.project, "description": "sneaky"}

        assert (await team.bob.post("/api/project/tasks", json=body)).status_code == 403

    @pytest.mark.asyncio
    async def test_assigning_non_member_fails(self, team, fake_supabase):
        body = {"project": team.project, "description": "x", "assignee": team.ids.carol}

        assert (await team.alice.post("/api/project/tasks", json=body)).status_code == 404
        assert fake_supabase.rows("tasks") == []

        task = await create_task(team)
        assign = {"task": task["id"], "assignee": team.ids.carol}
        assert (await team.alice.post("/api/project/task/assignees", json=assign)).status_code == 404

    @pytest.mark.asyncio
    async def test_create_with_assignee_links_member(self, team):
        task = await create_task(team, assignee=team.ids.bob)

        assert task["assignee"] == team.ids.bob
        assignees = (await team.bob.get("/api/project/task/assignees", params={"task": task["id"]})).json()
        assert assignees == [{"id": team.ids.bob, "username": "bob"}]
        assert [t["id"] for t in (await team.bob.get("/api/user/tasks")).json()] == [task["id"]]

    @pytest.mark.asyncio
    async def test_tasks_visible_to_members_only(self, team):
        await create_task(team)
        params = {"project": team.project}

        assert len((await team.bob.get("/api/project/tasks", params=params)).json()) == 1
        assert (await team.carol.get("/api/project/tasks", params=params)).status_code == 404

    @pytest.mark.asyncio
    async def test_update_description_and_completion(self, team):
        task = await create_task(team)

        body = {"task": task["id"], "description": "final doc"}
        assert (await team.bob.patch("/api/project/task/description", json=body)).status_code == 403
        assert (await team.alice.patch("/api/project/task/description", json=body)).status_code == 200
        body = {"task": task["id"], "completion": True}
        assert (await team.alice.patch("/api/project/task/completion", json=body)).status_code == 200

        tasks = (await team.alice.get("/api/project/tasks", params={"project": team.project})).json()
        assert tasks[0]["description"] == "final doc"
        assert tasks[0]["completion"] is True

    @pytest.mark.asyncio
    async def test_unassign_clears_links_and_field(self, team):
        task = await create_task(team)
        assign = {"task": task["id"], "assignee": team.ids.bob}
        assert (await team.alice.post("/api/project/task/assignees", json=assign)).status_code == 200

        response = await team.alice.delete("/api/project/task/assignees", params={"task": task["id"]})

        assert response.status_code == 200
        assert (await team.bob.get("/api/project/task/assignees", params={"task": task["id"]})).json() == []
        tasks = (await team.alice.get("/api/project/tasks", params={"project": team.project})).json()
        assert tasks[0]["assignee"] is None

    @pytest.mark.asyncio
    async def test_assignee_changes_are_creator_only(self, team):
        task = await create_task(team)
        assign = {"task": task["id"], "assignee": team.ids.bob}

        assert (await team.bob.post("/api/project/task/assignees", json=assign)).status_code == 403
        assert (await team.alice.post("/api/project/task/assignees", json=assign)).status_code == 200
        params = {"task": task["id"]}
        assert (await team.bob.delete("/api/project/task/assignees", params=params)).status_code == 403
        assignees = (await team.bob.get("/api/project/task/assignees", params=params)).json()
        assert assignees == [{"id": team.ids.bob, "username": "bob"}]

    @pytest.mark.asyncio
    async def test_removing_latest_assignee_falls_back_to_remaining_link(self, team):
        await team.alice.post("/api/project/members", json={"id": team.project, "member": team.ids.carol})
        task = await create_task(team, assignee=team.ids.bob)
        assign = {"task": task["id"], "assignee": team.ids.carol}
        assert (await team.alice.post("/api/project/task/assignees", json=assign)).status_code == 200

        params = {"id": team.project, "member": team.ids.carol}
        assert (await team.alice.delete("/api/project/members", params=params)).status_code == 200

        links = (await team.bob.get("/api/project/task/assignees", params={"task": task["id"]})).json()
        assert links == [{"id": team.ids.bob, "username": "bob"}]
        tasks = (await team.alice.get("/api/project/tasks", params={"project": team.project})).json()
        assert tasks[0]["assignee"] == team.ids.bob
        assert [t["id"] for t in (await team.bob.get("/api/user/tasks")).json()] == [task["id"]]
        assert (await team.carol.get("/api/user/tasks")).json() == []

    @pytest.mark.asyncio
    async def test_removing_earlier_assignee_keeps_field(self, team):
        await team.alice.post("/api/project/members", json={"id": team.project, "member": team.ids.carol})
        task = await create_task(team, assignee=team.ids.bob)
        await team.alice.post("/api/project/task/assignees", json={"task": task["id"], "assignee": team.ids.carol})

        params = {"id": team.project, "member": team.ids.bob}
        assert (await team.alice.delete("/api/project/members", params=params)).status_code == 200

        tasks = (await team.alice.get("/api/project/tasks", params={"project": team.project})).json()
        assert tasks[0]["assignee"] == team.ids.carol

    @pytest.mark.asyncio
    async def test_removing_member_drops_their_assignments(self, team):
        task = await create_task(team, assignee=team.ids.bob)

        params = {"id": team.project, "member": team.ids.bob}
        assert (await team.alice.delete("/api/project/members", params=params)).status_code == 200

        assert (await team.bob.get("/api/user/tasks")).json() == []
        tasks = (await team.alice.get("/api/project/tasks", params={"project": team.project})).json()
        assert tasks[0]["id"] == task["id"]
        assert tasks[0]["assignee"] is None

    @pytest.mark.asyncio
    async def test_delete_task_removes_links(self, team, fake_supabase):
        task = await create_task(team, assignee=team.ids.bob)

        assert (await team.bob.delete(f"/api/project/tasks/{task['id']}")).status_code == 403
        assert (await team.alice.delete(f"/api/project/tasks/{task['id']}")).status_code == 200

        assert fake_supabase.rows("tasks") == []
        assert fake_supabase.rows("task_assignees") == []
        assert (await team.alice.delete(f"/api/project/tasks/{task['id']}")).status_code == 404


class TestDeleteProject:
    @pytest.mark.asyncio
    async def test_only_creator_deletes(self, team):
        assert (await team.bob.delete(f"/api/projects/{team.project}")).status_code == 403
        assert (await team.alice.delete(f"/api/projects/{uuid4()}")).status_code == 404

    @pytest.mark.asyncio
    async def test_cascade_leaves_no_orphans(self, team, fake_supabase):
        first = await create_task(team, "one", assignee=team.ids.bob)
        await create_task(team, "two", assignee=team.ids.alice)
        await team.carol.post("/api/projects", json={"name": "other"})

        response = await team.alice.delete(f"/api/projects/{team.project}")

        assert response.json() == {"msg": "Project successfully deleted!"}
        assert fake_supabase.rows("tasks") == []
        assert fake_supabase.rows("task_assignees") == []
        remaining = fake_supabase.rows("project_members")
        assert [row["item"] for row in remaining] == [team.ids.carol]
        assert [row["name"] for row in fake_supabase.rows("projects")] == ["other"]
        assert (await team.bob.get("/api/project/task/assignees", params={"task": first["id"]})).status_code == 404


@pytest.mark.asyncio
async def test_end_to_end_roadmap(make_client, fake_supabase):
    alice, bob = make_client(), make_client()
    await register_and_login(alice, "alice")
    bob_id = await register_and_login(bob, "bob")

    project = (await alice.post("/api/projects", json={"name": "roadmap"})).json()["project"]
    task = (await alice.post(
        "/api/project/tasks",
        json={"project": project["id"], "description": "design doc"},
    )).json()["task"]
    assert task["completion"] is False
    assert task["assignee"] is None

    assert (await alice.get("/api/users/bob")).json()["id"] == bob_id
    await alice.post("/api/project/members", json={"id": project["id"], "member": bob_id})
    response = await alice.post("/api/project/task/assignees", json={"task": task["id"], "assignee": bob_id})
    assert response.status_code == 200
    assert [t["id"] for t in (await bob.get("/api/user/tasks")).json()] == [task["id"]]

    assert (await alice.delete(f"/api/projects/{project['id']}")).status_code == 200

    assert (await alice.get("/api/project/task/assignees", params={"task": task["id"]})).status_code == 404
    assert (await bob.get("/api/user/tasks")).json() == []
    assert (await alice.get("/api/projects", params={"name": "roadmap"})).status_code == 404
    assert fake_supabase.rows("project_members") == []
