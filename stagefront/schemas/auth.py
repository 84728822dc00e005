"""Request/response schemas for login and registration."""

from typing import Literal

from pydantic import BaseModel, Field


class RegistrationData(BaseModel):
    """Everything the registration flow persists for a new user (media already stored)."""

    email: str = Field(..., min_length=1, max_length=255, description="Email, used as the login name")
    password: str = Field(..., min_length=1, max_length=128, description="Plain-text password")
    name: str = Field(default="", max_length=255)
    role: str = Field(..., min_length=1, max_length=32, description="musician, band_member or event_organizer")
    description: str = Field(default="")
    instrument: str | None = Field(default=None, max_length=255)
    profile_picture: str | None = Field(default=None, description="Stored relative path")
    video: str | None = Field(default=None, description="Stored relative path")
    audio: str | None = Field(default=None, description="Stored relative path")

    def media_paths(self) -> list[str]:
        return [p for p in (self.profile_picture, self.video, self.audio) if p]


class FormField(BaseModel):
    name: str
    type: Literal["text", "email", "password", "textarea", "select", "file"]
    required: bool = False
    options: list[str] | None = None


class FormDescriptor(BaseModel):
    """Describes a form for the client to render (GET /login, GET /register)."""

    action: str
    method: Literal["post"] = "post"
    enctype: str = "application/x-www-form-urlencoded"
    fields: list[FormField]
