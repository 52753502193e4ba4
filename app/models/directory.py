"""
Pydantic models for the dashboard's user and FAQ directory payloads.

These mirror the JSON documents served by the admin API (``users.json`` and
``faqs.json``). Only the fields the typeahead reads are required; anything
else in the payload is ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DirectoryModel(BaseModel):
    """Base model for directory records."""

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class UserRecord(DirectoryModel):
    """A dashboard user as listed in users.json."""

    id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: str = Field(default="", description="admin/user/editor/moderator")
    status: Optional[str] = Field(default=None, description="active/inactive/pending/blocked")
    blocked: bool = Field(default=False, description="Whether the account is blocked")

    def matches(self, query: str) -> bool:
        """Case-insensitive containment on name, email or role."""
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.email.lower()
            or needle in self.role.lower()
        )


class FaqRecord(DirectoryModel):
    """A frequently asked question as listed in faqs.json."""

    id: str = Field(..., min_length=1, description="FAQ identifier")
    question: str = Field(..., description="Question text")
    answer: str = Field(default="", description="Answer body")
    category: Optional[str] = Field(default=None, description="FAQ category")
    status: Optional[str] = Field(default=None, description="published/draft")

    def matches(self, query: str) -> bool:
        """Case-insensitive containment on question, answer or category."""
        needle = (query or "").lower()
        return (
            needle in self.question.lower()
            or needle in self.answer.lower()
            or needle in (self.category or "").lower()
        )


class UsersDocument(DirectoryModel):
    users: List[UserRecord] = Field(default_factory=list)


class FaqsDocument(DirectoryModel):
    faqs: List[FaqRecord] = Field(default_factory=list)
