from sqlalchemy import Column, Integer, String, Text
from todo_api.database import Base

ACTIVE = "active"
DELETED = "deleted"


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    task = Column(Text, nullable=False)
    status = Column(String(50), nullable=False, default=ACTIVE)  # active/deleted/anything the caller sets
    user_id = Column(String(255), nullable=False, index=True)
