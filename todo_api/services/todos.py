from sqlalchemy import insert, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from todo_api.models.todo import Todo, ACTIVE, DELETED


async def list_todos(db: AsyncSession, user_id: str, status: str | None = None) -> list[Todo]:
    # Deleted rows are always excluded, so an explicit status=deleted filter matches nothing
    query = select(Todo).filter(Todo.user_id == user_id, Todo.status != DELETED)
    if status:
        query = query.filter(Todo.status == status)

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_todo(db: AsyncSession, task: str, user_id: str) -> None:
    await db.execute(insert(Todo).values(task=task, status=ACTIVE, user_id=user_id))
    await db.commit()


async def update_todo(db: AsyncSession, todo_id: int, status: str | None = None, task: str | None = None) -> None:
    """
    Apply the supplied fields as two independent statements.
    A failure on the second leaves the first one committed.
    """
    if status:
        await db.execute(update(Todo).where(Todo.id == todo_id).values(status=status))
        await db.commit()
    if task:
        await db.execute(update(Todo).where(Todo.id == todo_id).values(task=task))
        await db.commit()


async def soft_delete_todo(db: AsyncSession, todo_id: int) -> None:
    await db.execute(update(Todo).where(Todo.id == todo_id).values(status=DELETED))
    await db.commit()
