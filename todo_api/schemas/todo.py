from pydantic import BaseModel, field_validator


def _as_text(v):
    # JSON clients send numeric owner ids; they are stored as text
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# Fields are optional here so that a missing one is reported as 400 by the router
class TodoCreate(BaseModel):
    task: str | None = None
    user_id: str | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def owner_as_text(cls, v):
        return _as_text(v)


class TodoUpdate(BaseModel):
    status: str | None = None
    task: str | None = None


class Todo(BaseModel):
    id: int
    task: str
    status: str
    user_id: str

    @field_validator("user_id", mode="before")
    @classmethod
    def owner_as_text(cls, v):
        return _as_text(v)

    class Config:
        from_attributes = True


class Message(BaseModel):
    message: str
