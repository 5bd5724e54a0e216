# folio/taskflow/models.py
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'


class RepeatType(str, Enum):
    NONE = 'none'
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'
    CUSTOM = 'custom'


class RepeatSettings(BaseModel):
    type: RepeatType = RepeatType.NONE
    interval: Optional[int] = Field(None, ge=1)
    days_of_week: Optional[List[int]] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    end_date: Optional[datetime] = None


class SubTask(BaseModel):
    id: str
    title: str = Field(..., min_length=1, max_length=200)
    is_completed: bool = False


class Attachment(BaseModel):
    id: str
    name: str
    url: str
    type: Literal['link', 'file'] = 'link'


class Task(BaseModel):
    id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    repeat: Optional[RepeatSettings] = None
    is_important: bool = False
    is_my_day: bool = False
    status: TaskStatus = TaskStatus.PENDING
    project_id: Optional[str] = None
    sub_tasks: List[SubTask] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    assigned_to: List[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    repeat: Optional[RepeatSettings] = None
    is_important: bool = False
    is_my_day: bool = False
    status: TaskStatus = TaskStatus.PENDING
    project_id: Optional[str] = None
    sub_tasks: List[SubTask] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    assigned_to: List[str] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    repeat: Optional[RepeatSettings] = None
    is_important: Optional[bool] = None
    is_my_day: Optional[bool] = None
    status: Optional[TaskStatus] = None
    project_id: Optional[str] = None
    sub_tasks: Optional[List[SubTask]] = None
    attachments: Optional[List[Attachment]] = None
    assigned_to: Optional[List[str]] = None


class SubTaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class TaskFilters(BaseModel):
    status: Optional[TaskStatus] = None
    is_important: Optional[bool] = None
    is_my_day: Optional[bool] = None
    project_id: Optional[str] = None
    search_query: Optional[str] = None


class TaskProject(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    color: str = '#3b82f6'
    icon: Optional[str] = None
    task_ids: List[str] = Field(default_factory=list)
    members: List[str] = Field(default_factory=list)
    is_shared: bool = False
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)


class TaskProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    color: str = Field('#3b82f6', pattern=r'^#[0-9a-fA-F]{6}$')
    icon: Optional[str] = None
    members: List[str] = Field(default_factory=list)
    is_shared: bool = False


class TaskProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    color: Optional[str] = Field(None, pattern=r'^#[0-9a-fA-F]{6}$')
    icon: Optional[str] = None
    members: Optional[List[str]] = None
    is_shared: Optional[bool] = None


class SyncEvent(BaseModel):
    """A change notification carrying the full updated collection."""

    type: Literal['tasks', 'projects']
    user_id: str
    data: List[Any] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow)
