from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    # optional so the service can answer with "Missing email" / "Missing password"
    email: Optional[str] = Field(None, example="bob@example.com", description="Unique email address")
    password: Optional[str] = Field(None, example="toto1234!", description="Cleartext password, stored as a digest")


class UserResponse(BaseModel):
    id: int = Field(..., example=1, description="User identification number")
    email: str = Field(..., example="bob@example.com")

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    token: str = Field(..., example="031bffac-3edc-4e51-aaae-1c121317da8a")


class StatusResponse(BaseModel):
    redis: bool
    db: bool


class StatsResponse(BaseModel):
    users: int
    files: int
