from pydantic import BaseModel, ConfigDict, Field

from marketplace.models import Role

PHONE_PATTERN = r"^\+7\s?\(?\d{3}\)?\s?\d{3}-?\d{2}-?\d{2}$"


# --- Auth ---

class Login(BaseModel):
    username: str = Field(min_length=4, max_length=32)
    password: str = Field(min_length=8, max_length=16)


class Register(BaseModel):
    username: str = Field(min_length=4, max_length=32)
    password: str = Field(min_length=8, max_length=16)
    first_name: str = Field(min_length=2, max_length=16)
    last_name: str = Field(min_length=2, max_length=16)
    phone: str = Field(pattern=PHONE_PATTERN)
    role: Role = Role.USER


# --- User ---

class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str | None
    phone: str
    role: Role
    image: str | None
    model_config = ConfigDict(from_attributes=True)


class UpdateUser(BaseModel):
    first_name: str = Field(min_length=3, max_length=10)
    last_name: str = Field(min_length=3, max_length=10)
    phone: str = Field(pattern=PHONE_PATTERN)


class NewPassword(BaseModel):
    current_password: str = Field(min_length=8, max_length=16)
    new_password: str = Field(min_length=8, max_length=16)


# --- Ad ---

class AdCreateOrUpdate(BaseModel):
    title: str = Field(min_length=4, max_length=32)
    price: int = Field(ge=0, le=10_000_000)
    description: str = Field(min_length=8, max_length=64)


class AdResponse(BaseModel):
    pk: int
    author: int
    image: str | None
    price: int
    title: str


class AdsResponse(BaseModel):
    count: int
    results: list[AdResponse] = []


class ExtendedAd(BaseModel):
    pk: int
    author_first_name: str
    author_last_name: str | None
    description: str | None
    email: str
    image: str | None
    phone: str
    price: int
    title: str


# --- Comment ---

class CommentCreateOrUpdate(BaseModel):
    text: str = Field(min_length=8, max_length=64)


class CommentResponse(BaseModel):
    pk: int
    author: int
    author_first_name: str | None
    author_image: str | None
    created_at: int
    text: str


class CommentsResponse(BaseModel):
    count: int
    results: list[CommentResponse] = []
