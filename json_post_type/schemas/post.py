import json
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from json_post_type.constants import PostStatus


class PostWrite(BaseModel):
    """Body accepted by the REST create and update endpoints."""

    title: Optional[str] = Field(None, title="Title", description="The title of the document.")
    content: Optional[Union[str, dict[str, Any], list[Any]]] = Field(
        None,
        title="Content",
        description="JSON text stored verbatim, or an object/array serialized with two-space indentation.",
    )
    status: Optional[PostStatus] = Field(None, title="Status", description="The lifecycle status of the document.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Homepage modules",
                "content": {"modules": ["hero", "latest"], "limit": 10},
                "status": "publish",
            }
        }
    )

    @field_validator("content", mode="after")
    @classmethod
    def serialize_structured_content(cls, value):
        if isinstance(value, (dict, list)):
            return json.dumps(value, indent=2, ensure_ascii=False)
        return value

    @field_validator("status", mode="after")
    @classmethod
    def reject_auto_draft(cls, value):
        if value == PostStatus.AUTO_DRAFT:
            raise ValueError("auto-draft is not a writable status")
        return value


class PostRevisionResponse(BaseModel):
    id: int = Field(..., title="Revision ID")
    parent: int = Field(..., validation_alias="post_id", title="Post ID")
    author: Optional[int] = Field(None, validation_alias="editor_id", title="Editor ID")
    date: datetime = Field(..., validation_alias="created_at", title="Created At")
    title: str
    content: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
