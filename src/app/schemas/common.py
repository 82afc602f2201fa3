"""Общие Pydantic-схемы ответов."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Общий ответ с сообщением."""

    message: str
