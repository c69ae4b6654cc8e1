"""个人团队列表路由

GET /api/team/my-team: 我的团队成员（首次访问自动创建空列表）。
POST /api/team/my-team/add: 按邮箱添加成员。
DELETE /api/team/my-team/{member_id}: 移除成员（不在列表中也返回 200）。
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_current_user_id, get_store_group
from ..services.team_service import TeamService
from .users import UserOut

router = APIRouter()


class AddMemberRequest(BaseModel):
    """添加成员请求体"""

    email: str = Field(description="待添加用户的邮箱")


class TeamResponse(BaseModel):
    """成员变更响应"""

    message: str
    team: list[UserOut]


@router.get("/api/team/my-team", response_model=list[UserOut])
async def get_my_team(
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    members = await TeamService(store_group).get_team(user_id)
    return [UserOut.from_user(m) for m in members]


@router.post("/api/team/my-team/add", response_model=TeamResponse)
async def add_team_member(
    body: AddMemberRequest,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """添加成员

    - 邮箱不存在 404
    - 添加自己 400 INVALID_OPERATION
    - 已在列表中 409 DUPLICATE_MEMBER
    """
    members = await TeamService(store_group).add_member(user_id, body.email)
    return TeamResponse(
        message="Team member added successfully",
        team=[UserOut.from_user(m) for m in members],
    )


@router.delete("/api/team/my-team/{member_id}", response_model=TeamResponse)
async def remove_team_member(
    member_id: str,
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """移除成员 -- 团队列表尚未创建时 404"""
    members = await TeamService(store_group).remove_member(user_id, member_id)
    return TeamResponse(
        message="Team member removed",
        team=[UserOut.from_user(m) for m in members],
    )
