"""TeamService 测试 -- 个人团队列表

测试内容：
1. 首次读取自动创建空列表
2. 按邮箱添加：不存在 / 添加自己 / 重复
3. 移除：不在列表中为 no-op，列表不存在为 NotFound
4. 成员关系单向、不授予任务权限
5. 并发添加同一成员只保留一条
"""

import asyncio
from datetime import date

import pytest
from taskflow.core.exceptions import (
    AccessDeniedError,
    DuplicateMemberError,
    InvalidOperationError,
    TeamNotFoundError,
    UserNotFoundError,
)
from taskflow.core.models import TaskDraft
from taskflow.gateway.services.task_service import TaskService
from taskflow.gateway.services.team_service import TeamService


@pytest.fixture
def service(store_group) -> TeamService:
    return TeamService(store_group)


class TestGetTeam:
    async def test_lazily_creates_empty_team(self, service, alice, store_group):
        assert await store_group.team_store.get_team(alice.user_id) is None
        assert await service.get_team(alice.user_id) == []
        assert await store_group.team_store.get_team(alice.user_id) is not None

    async def test_idempotent(self, service, alice):
        assert await service.get_team(alice.user_id) == []
        assert await service.get_team(alice.user_id) == []


class TestAddMember:
    async def test_add_by_email(self, service, alice, bob):
        members = await service.add_member(alice.user_id, "bob@example.com")
        assert [m.user_id for m in members] == [bob.user_id]

    async def test_email_lookup_is_normalized(self, service, alice, bob):
        members = await service.add_member(alice.user_id, "  BOB@example.com ")
        assert [m.user_id for m in members] == [bob.user_id]

    async def test_creates_team_on_first_add(self, service, alice, bob, store_group):
        await service.add_member(alice.user_id, bob.email)
        team = await store_group.team_store.get_team(alice.user_id)
        assert team.member_ids == [bob.user_id]

    async def test_unknown_email(self, service, alice):
        with pytest.raises(UserNotFoundError):
            await service.add_member(alice.user_id, "nobody@example.com")

    async def test_self_add_rejected(self, service, alice):
        with pytest.raises(InvalidOperationError):
            await service.add_member(alice.user_id, alice.email)

    async def test_duplicate_rejected_and_single_entry_kept(self, service, alice, bob):
        await service.add_member(alice.user_id, bob.email)
        with pytest.raises(DuplicateMemberError):
            await service.add_member(alice.user_id, bob.email)
        members = await service.get_team(alice.user_id)
        assert [m.user_id for m in members] == [bob.user_id]

    async def test_concurrent_adds_keep_one_entry(self, service, alice, bob):
        results = await asyncio.gather(
            service.add_member(alice.user_id, bob.email),
            service.add_member(alice.user_id, bob.email),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateMemberError)
        assert [m.user_id for m in await service.get_team(alice.user_id)] == [bob.user_id]

    async def test_members_keep_insertion_order(self, service, alice, bob, carol):
        await service.add_member(alice.user_id, carol.email)
        members = await service.add_member(alice.user_id, bob.email)
        assert [m.user_id for m in members] == [carol.user_id, bob.user_id]


class TestRemoveMember:
    async def test_remove(self, service, alice, bob, carol):
        await service.add_member(alice.user_id, bob.email)
        await service.add_member(alice.user_id, carol.email)
        members = await service.remove_member(alice.user_id, bob.user_id)
        assert [m.user_id for m in members] == [carol.user_id]

    async def test_remove_absent_is_noop(self, service, alice, bob):
        before = await service.add_member(alice.user_id, bob.email)
        after = await service.remove_member(alice.user_id, "01JNOTAMEMBER0000000000000")
        assert after == before

    async def test_remove_without_team(self, service, alice, bob):
        with pytest.raises(TeamNotFoundError):
            await service.remove_member(alice.user_id, bob.user_id)

    async def test_remove_after_lazy_create(self, service, alice, bob):
        await service.get_team(alice.user_id)
        assert await service.remove_member(alice.user_id, bob.user_id) == []


class TestMembershipSemantics:
    async def test_membership_is_directional(self, service, alice, bob):
        await service.add_member(alice.user_id, bob.email)
        assert await service.get_team(bob.user_id) == []

    async def test_membership_grants_no_task_rights(self, service, store_group, alice, bob):
        await service.add_member(alice.user_id, bob.email)
        tasks = TaskService(store_group)
        detail = await tasks.create_task(
            alice.user_id, TaskDraft(title="Private", due_date=date(2024, 6, 1))
        )

        assert await tasks.list_visible_tasks(bob.user_id) == []
        with pytest.raises(AccessDeniedError):
            await tasks.get_task(bob.user_id, detail.task.task_id)


class TestOwnerLocks:
    async def test_lock_released_after_mutations(self, service, alice, bob):
        await service.add_member(alice.user_id, bob.email)
        assert alice.user_id not in TeamService._owner_locks
        await service.remove_member(alice.user_id, bob.user_id)
        assert alice.user_id not in TeamService._owner_locks

    async def test_lock_released_after_rejection(self, service, alice, bob):
        await service.add_member(alice.user_id, bob.email)
        with pytest.raises(DuplicateMemberError):
            await service.add_member(alice.user_id, bob.email)
        assert alice.user_id not in TeamService._owner_locks

    async def test_lock_released_after_concurrent_adds(self, service, alice, bob):
        await asyncio.gather(
            service.add_member(alice.user_id, bob.email),
            service.add_member(alice.user_id, bob.email),
            return_exceptions=True,
        )
        assert alice.user_id not in TeamService._owner_locks
