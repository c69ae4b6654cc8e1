"""TaskStore SQLite 实现

此处仅提供数据库操作，不做任何权限判定；
提交（commit）由调用方通过 transaction.atomic 控制。
"""

from datetime import date, datetime

import aiosqlite

from ..models.task import Task

_COLUMNS = (
    "task_id, title, description, due_date, priority, status, "
    "assignee_id, created_by, created_at, updated_at"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        await self._conn.execute(
            f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                task.task_id,
                task.title,
                task.description,
                task.due_date.isoformat(),
                task.priority.value,
                task.status.value,
                task.assignee_id,
                task.created_by,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_visible_tasks(
        self,
        user_id: str,
        status: str | None = None,
        priority: str | None = None,
    ) -> list[Task]:
        """查询 user_id 可见的任务（创建者或被指派人），按 created_at 倒序

        status / priority 筛选条件与可见性条件取交集。
        """
        sql = f"SELECT {_COLUMNS} FROM tasks WHERE (created_by = ? OR assignee_id = ?)"
        params: list[str] = [user_id, user_id]
        if status:
            sql += " AND status = ?"
            params.append(status)
        if priority:
            sql += " AND priority = ?"
            params.append(priority)
        sql += " ORDER BY created_at DESC, task_id DESC"

        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> None:
        """整行覆盖可变字段（created_by / created_at 不参与更新）"""
        await self._conn.execute(
            """
            UPDATE tasks
            SET title = ?, description = ?, due_date = ?, priority = ?,
                status = ?, assignee_id = ?, updated_at = ?
            WHERE task_id = ?
            """,
            (
                task.title,
                task.description,
                task.due_date.isoformat(),
                task.priority.value,
                task.status.value,
                task.assignee_id,
                task.updated_at.isoformat(),
                task.task_id,
            ),
        )

    async def delete_task(self, task_id: str) -> bool:
        """删除任务，返回是否有行被删除"""
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            task_id=row[0],
            title=row[1],
            description=row[2],
            due_date=date.fromisoformat(row[3]),
            priority=row[4],
            status=row[5],
            assignee_id=row[6],
            created_by=row[7],
            created_at=datetime.fromisoformat(row[8]),
            updated_at=datetime.fromisoformat(row[9]),
        )
