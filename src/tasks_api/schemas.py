from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new Task.

    Blank titles are accepted here and rejected by the service so the
    failure maps to a 400 ValidationError.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
            }
        }
    )

    title: str = Field(..., description="Short title for the task")


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing Task.
    All fields are optional; only fields present in the request body are applied.
    An explicit null title is a blank title; an explicit null completed is ignored.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "completed": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="New title")
    completed: Optional[bool] = Field(default=None, description="New completion status")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema for returning a Task in responses.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6650c0ffee0000000000abcd",
                "title": "Buy groceries",
                "completed": False,
                "owner_id": "user-123",
                "created_at": "2025-01-25T10:15:30.123456Z",
                "updated_at": "2025-01-26T09:00:00.000001Z",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    completed: bool = Field(..., description="Completion status flag")
    owner_id: str = Field(..., description="Id of the user who owns the task")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


# PUBLIC_INTERFACE
class MessageOut(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Human-readable confirmation")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Error body returned for every failed task operation."""

    error: str = Field(..., description="Error class name, e.g. NotFoundError")
    message: str = Field(..., description="Short human-readable message")
