from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class ChatResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None
