"""UserService -- 用户目录

凭据的存储与校验不在本服务范围内：上游认证组件负责产出已验证的 user_id，
这里只维护 (id, name, email) 目录并据此解析请求身份。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from taskflow.core.exceptions import (
    EmailTakenError,
    TaskValidationError,
    UnauthenticatedError,
    UserNotFoundError,
)
from taskflow.core.models import User, normalize_email
from taskflow.core.store import StoreGroup, atomic
from ulid import ULID

log = structlog.get_logger()


class UserService:
    """用户目录服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def register(self, name: str, email: str) -> User:
        """登记新用户

        Raises:
            TaskValidationError: name / email 为空或 email 格式不合法
            EmailTakenError: 邮箱已被登记
        """
        name = name.strip()
        email = normalize_email(email)
        if not name:
            raise TaskValidationError("Name is required")
        if not email or "@" not in email:
            raise TaskValidationError("A valid email is required")

        if await self._stores.user_store.get_user_by_email(email) is not None:
            raise EmailTakenError(email)

        user = User(
            user_id=str(ULID()),
            name=name,
            email=email,
            created_at=datetime.now(UTC),
        )
        try:
            async with atomic(self._stores.conn):
                await self._stores.user_store.create_user(user)
        except aiosqlite.IntegrityError as e:
            # 并发登记同一邮箱
            raise EmailTakenError(email) from e

        log.info("user_registered", user_id=user.user_id)
        return user

    async def get_user(self, user_id: str) -> User:
        user = await self._stores.user_store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"User with id {user_id} does not exist")
        return user

    async def list_users(self) -> list[User]:
        return await self._stores.user_store.list_users()

    async def authenticate(self, user_id: str | None) -> str:
        """把上游认证组件给出的 user_id 解析为目录中的用户

        Raises:
            UnauthenticatedError: 未携带身份或身份不在目录中
        """
        if not user_id:
            raise UnauthenticatedError("Missing user identity")
        if await self._stores.user_store.get_user(user_id) is None:
            raise UnauthenticatedError("Unknown user identity")
        return user_id
