"""用户目录路由

POST /api/users: 登记用户（name + email），凭据由上游认证组件负责。
GET /api/users: 用户目录，用于指派下拉框。
GET /api/users/me: 当前请求者。
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from taskflow.core.models import User, UserSummary

from ..deps import get_current_user_id, get_store_group
from ..services.user_service import UserService

router = APIRouter()


class UserOut(BaseModel):
    """对外用户摘要（不含凭据）"""

    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User | UserSummary) -> "UserOut":
        return cls(id=user.user_id, name=user.name, email=user.email)


class RegisterRequest(BaseModel):
    """用户登记请求体"""

    name: str = Field(description="显示名称")
    email: str = Field(description="邮箱（唯一）")


@router.post("/api/users", response_model=UserOut, status_code=201)
async def register_user(
    body: RegisterRequest,
    store_group=Depends(get_store_group),
):
    """登记用户 -- 邮箱重复返回 409"""
    user = await UserService(store_group).register(body.name, body.email)
    return UserOut.from_user(user)


@router.get("/api/users", response_model=list[UserOut])
async def list_users(
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    """列出全部用户"""
    users = await UserService(store_group).list_users()
    return [UserOut.from_user(u) for u in users]


@router.get("/api/users/me", response_model=UserOut)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    store_group=Depends(get_store_group),
):
    user = await UserService(store_group).get_user(user_id)
    return UserOut.from_user(user)
