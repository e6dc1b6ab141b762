"""Pydantic schemas for the chatbot endpoint."""

from typing import Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: str = ""


class ChatResponse(BaseModel):
    reply: str
    topic: Optional[str] = None
