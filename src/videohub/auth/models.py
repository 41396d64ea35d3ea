from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        # Names are whole words for user search, so no inner spaces.
        if not v.strip():
            raise ValueError('Username cannot be empty')
        if ' ' in v.strip():
            raise ValueError('Username cannot contain spaces')
        return v.strip()


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError('Username cannot be empty')
        return v.strip()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
