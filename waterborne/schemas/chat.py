# waterborne/schemas/chat.py
from pydantic import BaseModel, Field
from typing import Optional


class ChatIn(BaseModel):
    message: str = Field("", max_length=2000)
    locale: Optional[str] = Field(None, max_length=16)


class ChatOut(BaseModel):
    reply: str
    locale: str
    engine: str = Field(..., description="'local' (knowledge base) or 'remote' (hosted model).")
    intent: Optional[str] = None
    disease_id: Optional[str] = None
    field: Optional[str] = None


class GreetingOut(BaseModel):
    locale: str
    reply: str
