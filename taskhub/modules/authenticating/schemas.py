from pydantic import BaseModel, Field

from taskhub.core.schemas import BaseDoc


class UserCreate(BaseModel):
    username: str
    password: str


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UsernameUpdate(BaseModel):
    username: str = Field(min_length=1)


class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(min_length=1)


class UserDoc(BaseDoc):
    username: str
    password: str


class UserResponse(BaseDoc):
    """A user with the password hash redacted."""
    username: str
