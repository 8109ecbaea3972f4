from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    username: str
    email: str | None = None
    is_system_admin: bool = False
    role: str | None = None
    permissions: list[str] = []


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    user: UserResponse
