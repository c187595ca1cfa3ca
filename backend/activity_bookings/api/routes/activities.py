"""
Activity endpoints: public listing/lookup, owner-only mutation.

Handlers are plain `def` so FastAPI runs them on its threadpool; the
repositories' locks keep concurrent requests consistent.
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from activity_bookings.api.dependencies import get_activity_service
from activity_bookings.core.exceptions import ActivityNotFound, FieldError, ValidationFailed
from activity_bookings.core.security import get_current_user_id
from activity_bookings.models.activity import ACTIVITY_STATUSES, Activity
from activity_bookings.schemas.activity import ActivityStatusUpdate
from activity_bookings.services.activity_service import ActivityService, normalize_create_request

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("", response_model=list[Activity], response_model_exclude_none=True)
def list_activities(
    q: Optional[str] = Query(None, description="Search in name, location and slug"),
    slug: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, alias="_sort"),
    order: str = Query("asc", alias="_order"),
    activities: ActivityService = Depends(get_activity_service),
):
    """List activities, optionally filtered by `q`/`slug` and sorted by `_sort`/`_order`."""
    if not (q or slug or sort):
        return activities.get_all()
    return activities.query(q=q, slug=slug, sort=sort, order=order)


@router.get("/{activity_id}", response_model=Activity, response_model_exclude_none=True)
def get_activity(
    activity_id: str,
    activities: ActivityService = Depends(get_activity_service),
):
    activity = activities.get_by_id(activity_id)
    if activity is None:
        raise ActivityNotFound()
    return activity


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Activity, response_model_exclude_none=True)
def create_activity(
    payload: Any = Body(None),
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Create an activity owned by the caller. Duration defaults to 60, status to draft."""
    return activities.create(normalize_create_request(payload), user_id)


@router.put("/{activity_id}", response_model=Activity, response_model_exclude_none=True)
def update_activity(
    activity_id: str,
    payload: Any = Body(None),
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Update the given fields of an activity the caller owns."""
    return activities.update(activity_id, payload, user_id)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    activity_id: str,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    if not activities.delete(activity_id, user_id):
        raise ActivityNotFound()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{activity_id}/status", response_model=Activity, response_model_exclude_none=True)
def transition_activity_status(
    activity_id: str,
    payload: ActivityStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    activities: ActivityService = Depends(get_activity_service),
):
    """Move an activity to another status. Any status may follow any other."""
    if not isinstance(payload.status, str) or not payload.status:
        raise ValidationFailed(
            [FieldError(field="status", message=f"Status must be one of: {', '.join(ACTIVITY_STATUSES)}")],
            message="Status field is required and must be a string",
        )
    return activities.transition_status(activity_id, payload.status, user_id)
