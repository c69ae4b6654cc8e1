"""任务路由

GET /api/tasks: 当前用户可见的任务列表（创建的 + 被指派的），支持 status/priority 筛选。
GET /api/tasks/{task_id}: 任务详情（无关用户 403，不存在 404）。
POST /api/tasks: 创建任务，createdBy 强制为当前用户。
PUT /api/tasks/{task_id}: 部分更新，被指派人只能改 status。
DELETE /api/tasks/{task_id}: 删除任务，仅创建者。
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from taskflow.core.models import TaskDetail, TaskDraft, TaskPatch, TaskPriority, TaskStatus

from ..deps import get_current_user_id, get_store_group
from ..services.task_service import TaskService
from .users import UserOut

router = APIRouter()


class TaskOut(BaseModel):
    """任务对外表示（camelCase）"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    due_date: str
    priority: str
    status: str
    assignee: UserOut | None
    created_by: UserOut
    created_at: str
    updated_at: str

    @classmethod
    def from_detail(cls, detail: TaskDetail) -> "TaskOut":
        task = detail.task
        return cls(
            id=task.task_id,
            title=task.title,
            description=task.description,
            due_date=task.due_date.isoformat(),
            priority=task.priority.value,
            status=task.status.value,
            assignee=UserOut.from_user(detail.assignee) if detail.assignee else None,
            created_by=UserOut.from_user(detail.creator),
            created_at=task.created_at.isoformat(),
            updated_at=task.updated_at.isoformat(),
        )


class MessageResponse(BaseModel):
    message: str


@router.get("/api/tasks", response_model=list[TaskOut])
async def list_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    priority: TaskPriority | None = Query(default=None, description="按优先级筛选"),
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """查询当前用户可见的任务，按 created_at 倒序"""
    service = TaskService(store_group)
    details = await service.list_visible_tasks(user_id, status=status, priority=priority)
    return [TaskOut.from_detail(d) for d in details]


@router.get("/api/tasks/{task_id}", response_model=TaskOut)
async def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    detail = await TaskService(store_group).get_task(user_id, task_id)
    return TaskOut.from_detail(detail)


@router.post("/api/tasks", response_model=TaskOut, status_code=201)
async def create_task(
    body: TaskDraft,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """创建任务 -- title / dueDate 缺失返回 400"""
    detail = await TaskService(store_group).create_task(user_id, body)
    return TaskOut.from_detail(detail)


@router.put("/api/tasks/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: str,
    body: TaskPatch,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """部分更新任务

    - 创建者可改全部字段，assigneeId: null 清除被指派人
    - 被指派人只能改 status，其它字段被忽略（即使值非法也不会 400）
    - 无关用户 403，与请求体内容无关

    请求体只做宽松解析，字段类型在按角色过滤之后由 TaskService 校验。
    """
    detail = await TaskService(store_group).update_task(user_id, task_id, body)
    return TaskOut.from_detail(detail)


@router.delete("/api/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    await TaskService(store_group).delete_task(user_id, task_id)
    return MessageResponse(message="Task deleted")
