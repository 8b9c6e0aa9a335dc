"""Pydantic schemas for Profiles."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ProfileRegister(BaseModel):
    """Account metadata forwarded by the auth collaborator on sign-up."""

    full_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_picture: Optional[str] = None


class ProfileOut(BaseModel):
    id: str
    full_name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileRef(BaseModel):
    id: str
    full_name: str

    model_config = {"from_attributes": True}
