from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    reply_to: Optional[int] = Field(default=None, ge=0)

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Comment content cannot be empty')
        return v
