from datetime import datetime
from typing import Optional
from beanie import Document, Indexed
from pydantic import Field


class User(Document):
    username: Indexed(str, unique=True) = Field(..., description="Unique username")
    email: Indexed(str, unique=True) = Field(..., description="Unique email address")
    password_hash: str = Field(..., description="bcrypt password hash")
    display_name: Optional[str] = Field(None, description="Display name")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "users"

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"
