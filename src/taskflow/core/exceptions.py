"""TaskFlow 异常体系

所有业务异常继承 TaskflowError，并携带稳定的 code，供 Gateway 映射为 HTTP 响应。
异常均为请求级、确定性的：状态不变时重试会得到同样的错误。
"""


class TaskflowError(Exception):
    """TaskFlow 基础异常"""

    code: str = "TASKFLOW_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskValidationError(TaskflowError):
    """输入缺失或格式非法（调用方修正输入后可恢复）"""

    code = "VALIDATION_ERROR"


class AccessDeniedError(TaskflowError):
    """已认证但无权对该任务执行此操作"""

    code = "ACCESS_DENIED"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class NotFoundError(TaskflowError):
    """引用的资源不存在"""

    code = "NOT_FOUND"


class TaskNotFoundError(NotFoundError):
    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"


class TeamNotFoundError(NotFoundError):
    code = "TEAM_NOT_FOUND"

    def __init__(self, owner_id: str) -> None:
        super().__init__("Team not found")
        self.owner_id = owner_id


class InvalidOperationError(TaskflowError):
    """结构合法但语义上禁止的操作（如把自己加入自己的团队）"""

    code = "INVALID_OPERATION"


class DuplicateMemberError(TaskflowError):
    """成员已在团队列表中"""

    code = "DUPLICATE_MEMBER"

    def __init__(self, member_id: str) -> None:
        super().__init__("User already in your team")
        self.member_id = member_id


class EmailTakenError(TaskflowError):
    """注册时邮箱已被占用"""

    code = "EMAIL_TAKEN"

    def __init__(self, email: str) -> None:
        super().__init__(f"Email {email} is already registered")
        self.email = email


class UnauthenticatedError(TaskflowError):
    """请求未携带可识别的用户身份"""

    code = "UNAUTHENTICATED"
