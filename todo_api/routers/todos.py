import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.dependencies import get_db
from todo_api.schemas.todo import Todo as TodoSchema, TodoCreate, TodoUpdate, Message
from todo_api.services import todos as todo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=list[TodoSchema])
async def list_todos(
    user_id: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    if not user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="user_id is required")

    try:
        return await todo_service.list_todos(db, user_id, status_filter)
    except SQLAlchemyError as exc:
        logger.error("GET /todos error: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch todos") from exc


@router.post("", response_model=Message)
async def create_todo(todo_data: TodoCreate | None = None, db: AsyncSession = Depends(get_db)):
    todo_data = todo_data or TodoCreate()
    if not todo_data.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="user_id is required")
    if not todo_data.task:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="task is required")

    try:
        await todo_service.create_todo(db, todo_data.task, todo_data.user_id)
    except SQLAlchemyError as exc:
        logger.error("POST /todos error: %s", exc)
        raise HTTPException(status_code=500, detail="Insert failed") from exc
    return {"message": "Todo added!"}


@router.put("/{id}", response_model=Message)
async def update_todo(
    update_data: TodoUpdate | None = None,
    todo_id: int = Path(alias="id"),
    db: AsyncSession = Depends(get_db),
):
    # Neither field supplied is a successful no-op
    update_data = update_data or TodoUpdate()
    try:
        await todo_service.update_todo(db, todo_id, status=update_data.status, task=update_data.task)
    except SQLAlchemyError as exc:
        logger.error("PUT /todos/%s error: %s", todo_id, exc)
        raise HTTPException(status_code=500, detail="Update failed") from exc
    return {"message": "Todo updated!"}


@router.delete("/{id}", response_model=Message)
async def delete_todo(todo_id: int = Path(alias="id"), db: AsyncSession = Depends(get_db)):
    try:
        await todo_service.soft_delete_todo(db, todo_id)
    except SQLAlchemyError as exc:
        logger.error("DELETE /todos/%s error: %s", todo_id, exc)
        raise HTTPException(status_code=500, detail="Delete failed") from exc
    return {"message": "Todo deleted!"}
