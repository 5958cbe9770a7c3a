from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignUpSchema(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignInSchema(BaseModel):
    email: EmailStr
    password: str
    user_tid: Optional[int] = None


class CreatePasswordSchema(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    user_tid: Optional[int] = None


class EmailSchema(BaseModel):
    email: EmailStr


class LimitCreateSchema(BaseModel):
    app_id: str = Field(min_length=1)
    app_name: str = Field(min_length=1)
    icon_name: str = "app"
    daily_limit_minutes: int = Field(ge=0)


class LimitUpdateSchema(BaseModel):
    daily_limit_minutes: int = Field(ge=0)


class UsageSchema(BaseModel):
    app_id: str = Field(min_length=1)
    minutes: int = Field(ge=0)


class GroupCreateSchema(BaseModel):
    name: str
    description: Optional[str] = None
    user_oid: str


class GroupUpdateSchema(BaseModel):
    name: str
    description: Optional[str] = None
    user_oid: str


class InviteSchema(BaseModel):
    inviter_oid: str
    user_oid: str


class MembershipSchema(BaseModel):
    user_oid: str


class ExtensionRequestSchema(BaseModel):
    app_id: str
    requested_minutes: int
    reason: str
    user_oid: str
    group_oid: Optional[str] = None


class ExtensionResponseSchema(BaseModel):
    user_oid: str
    approved: bool
    comment: Optional[str] = None
