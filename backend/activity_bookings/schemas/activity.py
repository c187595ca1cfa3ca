"""
Pydantic schemas for activity-related requests.
"""

from typing import Any

from pydantic import BaseModel


class ActivityStatusUpdate(BaseModel):
    # Any value is accepted here; ActivityService reports unknown statuses
    status: Any = None
