"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Type safety for API inputs and outputs
- Automatic validation and error messages
- OpenAPI documentation generation
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

TaskStatus = Literal["todo", "in_progress", "completed"]


# =============================================================================
# Base Response Schemas
# =============================================================================

class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str
    code: Optional[str] = None


# =============================================================================
# Category Schemas
# =============================================================================

class CategoryCreate(BaseModel):
    """Request body for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=32)


class CategoryResponse(BaseModel):
    """Category data returned from API."""
    id: int
    name: str
    color: Optional[str] = None

    class Config:
        from_attributes = True


# =============================================================================
# Task Schemas
# =============================================================================

class TaskCreate(BaseModel):
    """Request body for creating a task."""
    title: str = Field(..., max_length=500)
    description: Optional[str] = None
    priority: Optional[int] = None  # Out-of-range values fall back to the default
    category_id: int
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """Request body for updating a task. Only fields that are sent change."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    category_id: Optional[int] = None
    due_date: Optional[datetime] = None
    time_spent: Optional[int] = None  # seconds; negative values are clamped to 0


class TaskResponse(BaseModel):
    """Task data returned from API."""
    id: int
    title: str
    description: Optional[str] = None
    status: str
    priority: int
    category_id: int
    category_name: str
    due_date: Optional[str] = None
    completed_at: Optional[str] = None
    time_spent: int = 0
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


class TimeLogCreate(BaseModel):
    """Request body for logging time against a task."""
    minutes: int = Field(..., ge=0)
    session_type: Literal["work", "break"] = "work"


class TaskListResponse(BaseModel):
    """Response for listing tasks."""
    tasks: List[TaskResponse]
    total: int


# =============================================================================
# Productivity Schemas
# =============================================================================

class DailyStatsResponse(BaseModel):
    """A day's aggregate counters and derived fields."""
    day: str
    tasks_completed: int
    tasks_created: int
    streak_days: int
    productivity_score: int = Field(..., ge=0, le=100)


class RecalculateResponse(BaseModel):
    """Response from an explicit productivity recalculation."""
    message: str
    stats: DailyStatsResponse


class ProductivityPoint(BaseModel):
    """One point of the productivity chart."""
    date: str  # Short weekday name, e.g. "Mon"
    day: str   # ISO date
    completed: int
    created: int
    score: int


# =============================================================================
# Prioritization Schemas
# =============================================================================

class PriorityChange(BaseModel):
    """A persisted priority change."""
    id: int
    title: str
    old_priority: int
    new_priority: int


class PrioritizeResponse(BaseModel):
    """Result of re-prioritizing a user's open tasks."""
    message: str
    tasks: List[PriorityChange]


# =============================================================================
# Dashboard Schemas
# =============================================================================

class DashboardStatsResponse(BaseModel):
    """Headline counts; streak and score come from the latest aggregate row."""
    total_tasks: int
    completed: int
    in_progress: int
    todo: int
    today_completed: int
    streak_days: int
    productivity_score: int = Field(..., ge=0, le=100)

    class Config:
        from_attributes = True


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders in one request."""
    generated_at: str
    tasks: List[TaskResponse]
    categories: List[CategoryResponse]
    stats: DashboardStatsResponse
