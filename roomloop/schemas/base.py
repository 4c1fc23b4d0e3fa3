from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentResponse(BaseModel):
    """MongoDB 문서 응답 공통 스키마 (ObjectId → 문자열)"""
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="문서 ID")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value
