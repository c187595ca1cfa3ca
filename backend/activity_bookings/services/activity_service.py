"""
Activity service: validation, slug derivation, ownership-gated mutation and
the status state machine.

STATUS TRANSITIONS
==================

States: draft, published, confirmed, sold-out, done, cancelled.

The only rule enforced is that the target is one of these six values; any
status can move to any other. Only the owner may transition an activity.
A transition table (e.g. done/cancelled as terminal) would be a behaviour
change for existing clients and is not applied here.
"""

import re
from typing import Any, Mapping, Optional

from activity_bookings.core.exceptions import (
    ActivityNotFound,
    FieldError,
    Forbidden,
    ValidationFailed,
)
from activity_bookings.core.logging import get_logger
from activity_bookings.models.activity import ACTIVITY_STATUSES, Activity, ActivityStatus
from activity_bookings.repositories.json_repository import JsonRepository
from activity_bookings.services.validation import (
    BODY_ERROR,
    as_payload,
    is_non_empty_string,
    is_number,
    is_whole_number,
    parse_iso_datetime,
    utc_now,
    utc_now_iso,
)

logger = get_logger(__name__)

DEFAULT_DURATION = 60
DEFAULT_STATUS = ActivityStatus.DRAFT.value

NUMERIC_FIELDS = ("price", "duration", "minParticipants", "maxParticipants")

# request key -> Activity attribute
UPDATABLE_FIELDS = {
    "name": "name",
    "price": "price",
    "date": "date",
    "duration": "duration",
    "location": "location",
    "minParticipants": "min_participants",
    "maxParticipants": "max_participants",
    "status": "status",
}

SEARCHABLE_FIELDS = ("name", "location", "slug")


def generate_slug(name: str) -> str:
    """URL-friendly slug: lowercase, special characters dropped, hyphen separated."""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def normalize_create_request(body: Any) -> dict[str, Any]:
    """
    Parse numeric strings and apply defaults (duration 60, status draft)
    to a raw create body. Unparseable strings are left for the validator.
    """
    payload = as_payload(body)
    if payload is None:
        return {}

    normalized = dict(payload)
    for key in NUMERIC_FIELDS:
        value = normalized.get(key)
        if isinstance(value, str):
            normalized[key] = _parse_number(value)

    if normalized.get("duration") is None:
        normalized["duration"] = DEFAULT_DURATION
    if normalized.get("status") is None:
        normalized["status"] = DEFAULT_STATUS
    return normalized


def _parse_number(text: str) -> Any:
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        return text


def _check_date(value: Any, errors: list[FieldError], required: bool) -> None:
    if not is_non_empty_string(value):
        message = (
            "Date is required and must be a valid ISO date string"
            if required
            else "Date must be a valid ISO date string"
        )
        errors.append(FieldError(field="date", message=message))
        return

    parsed = parse_iso_datetime(value)
    if parsed is None:
        errors.append(FieldError(field="date", message="Date must be a valid ISO date string"))
    elif parsed <= utc_now():
        errors.append(FieldError(field="date", message="Date must be in the future"))


def _status_message(prefix: str) -> str:
    return f"{prefix} must be one of: {', '.join(ACTIVITY_STATUSES)}"


class ActivityService:
    def __init__(self, repository: JsonRepository[Activity]):
        self.repository = repository

    # ------------------------------------------------------------- validation

    def validate_create(self, data: Any) -> list[FieldError]:
        """Return every validation error in a create body (empty if valid)."""
        req = as_payload(data)
        if req is None:
            return [BODY_ERROR]

        errors: list[FieldError] = []

        if not is_non_empty_string(req.get("name")):
            errors.append(FieldError(field="name", message="Name is required and must be a non-empty string"))

        price = req.get("price")
        if not is_number(price) or price <= 0:
            errors.append(FieldError(field="price", message="Price is required and must be a positive number"))

        _check_date(req.get("date"), errors, required=True)

        duration = req.get("duration")
        if not is_number(duration) or duration <= 0:
            errors.append(FieldError(
                field="duration",
                message="Duration is required and must be a positive number (in minutes)",
            ))

        if not is_non_empty_string(req.get("location")):
            errors.append(FieldError(field="location", message="Location is required and must be a non-empty string"))

        min_p = req.get("minParticipants")
        max_p = req.get("maxParticipants")
        if not is_whole_number(min_p) or min_p < 1:
            errors.append(FieldError(
                field="minParticipants",
                message="Min participants is required and must be a whole number of at least 1",
            ))
        if not is_whole_number(max_p) or max_p < 1:
            errors.append(FieldError(
                field="maxParticipants",
                message="Max participants is required and must be a whole number of at least 1",
            ))
        if is_number(min_p) and is_number(max_p) and min_p > max_p:
            errors.append(FieldError(
                field="minParticipants",
                message="Min participants must be less than or equal to max participants",
            ))

        if req.get("status") not in ACTIVITY_STATUSES:
            errors.append(FieldError(field="status", message=_status_message("Status is required and")))

        return errors

    def validate_update(self, data: Any, existing: Activity) -> list[FieldError]:
        """
        Every field is optional. Min/max participants are cross-checked using
        the existing value for whichever side the patch leaves out.
        """
        req = as_payload(data)
        if req is None:
            return [BODY_ERROR]

        errors: list[FieldError] = []

        if "name" in req and not is_non_empty_string(req["name"]):
            errors.append(FieldError(field="name", message="Name must be a non-empty string"))

        if "price" in req and (not is_number(req["price"]) or req["price"] <= 0):
            errors.append(FieldError(field="price", message="Price must be a positive number"))

        if "date" in req:
            _check_date(req["date"], errors, required=False)

        if "duration" in req and (not is_number(req["duration"]) or req["duration"] <= 0):
            errors.append(FieldError(field="duration", message="Duration must be a positive number (in minutes)"))

        if "location" in req and not is_non_empty_string(req["location"]):
            errors.append(FieldError(field="location", message="Location must be a non-empty string"))

        if "minParticipants" in req and (not is_whole_number(req["minParticipants"]) or req["minParticipants"] < 1):
            errors.append(FieldError(field="minParticipants", message="Min participants must be a whole number of at least 1"))

        if "maxParticipants" in req and (not is_whole_number(req["maxParticipants"]) or req["maxParticipants"] < 1):
            errors.append(FieldError(field="maxParticipants", message="Max participants must be a whole number of at least 1"))

        min_p = req.get("minParticipants", existing.min_participants)
        max_p = req.get("maxParticipants", existing.max_participants)
        if is_number(min_p) and is_number(max_p) and min_p > max_p:
            errors.append(FieldError(
                field="minParticipants",
                message="Min participants must be less than or equal to max participants",
            ))

        if "status" in req and req["status"] not in ACTIVITY_STATUSES:
            errors.append(FieldError(field="status", message=_status_message("Status")))

        return errors

    # ------------------------------------------------------------------ reads

    def get_all(self) -> list[Activity]:
        return self.repository.get_all()

    def get_by_id(self, activity_id: str) -> Optional[Activity]:
        return self.repository.get_by_id(activity_id)

    def query(
        self,
        q: Optional[str] = None,
        slug: Optional[str] = None,
        sort: Optional[str] = None,
        order: str = "asc",
    ) -> list[Activity]:
        """
        Filter by search term (name/location/slug, case-insensitive) and/or
        exact slug, then optionally sort by any field. Activities without the
        sort field go last.
        """
        activities = self.get_all()

        if q:
            needle = q.lower()
            activities = [
                a for a in activities
                if any(needle in getattr(a, f).lower() for f in SEARCHABLE_FIELDS)
            ]

        if slug:
            activities = [a for a in activities if a.slug == slug]

        if sort:
            activities = self._sort(activities, sort, descending=(order or "").lower() == "desc")

        return activities

    @staticmethod
    def _sort(activities: list[Activity], field: str, descending: bool) -> list[Activity]:
        key = field
        if field in Activity.model_fields:
            key = Activity.model_fields[field].alias or field

        def value_of(activity: Activity) -> Any:
            return activity.to_document().get(key)

        present = [a for a in activities if value_of(a) is not None]
        missing = [a for a in activities if value_of(a) is None]
        present.sort(key=value_of, reverse=descending)
        return present + missing

    # -------------------------------------------------------------- mutations

    def create(self, data: Any, owner_id: str) -> Activity:
        errors = self.validate_create(data)
        if errors:
            raise ValidationFailed(errors)

        req = as_payload(data)
        activity = Activity(
            id=self.repository.next_id(),
            name=req["name"],
            slug=generate_slug(req["name"]),
            price=req["price"],
            date=req["date"],
            duration=req["duration"],
            location=req["location"],
            min_participants=int(req["minParticipants"]),
            max_participants=int(req["maxParticipants"]),
            status=req["status"],
            user_id=owner_id,
            created_at=utc_now_iso(),
        )
        self.repository.create(activity)

        logger.info("activity_created", activity_id=activity.id, name=activity.name, owner_id=owner_id)
        return activity

    def update(self, activity_id: str, patch: Any, caller_id: str) -> Activity:
        with self.repository.lock:
            activity = self._get_owned(activity_id, caller_id, action="update")

            errors = self.validate_update(patch, activity)
            if errors:
                raise ValidationFailed(errors)

            req = as_payload(patch)
            changes: dict[str, Any] = {}
            for key, attr in UPDATABLE_FIELDS.items():
                if key in req:
                    changes[attr] = req[key]
            for attr in ("min_participants", "max_participants"):
                if attr in changes:
                    changes[attr] = int(changes[attr])

            if "name" in changes and changes["name"] != activity.name:
                changes["slug"] = generate_slug(changes["name"])
            changes["updated_at"] = utc_now_iso()

            updated = self.repository.update(activity_id, changes)

        logger.info("activity_updated", activity_id=activity_id, fields=sorted(changes))
        return updated

    def delete(self, activity_id: str, caller_id: str) -> bool:
        """False if the activity never existed; Forbidden for non-owners."""
        with self.repository.lock:
            activity = self.repository.get_by_id(activity_id)
            if activity is None:
                return False
            if activity.user_id != caller_id:
                raise Forbidden("You can only delete your own activities")

            self.repository.delete(activity_id)

        logger.info("activity_deleted", activity_id=activity_id, name=activity.name)
        return True

    def transition_status(self, activity_id: str, new_status: Any, caller_id: str) -> Activity:
        with self.repository.lock:
            activity = self._get_owned(activity_id, caller_id, action="transition")

            if new_status not in ACTIVITY_STATUSES:
                raise ValidationFailed(
                    [FieldError(field="status", message=_status_message("Status"))],
                    message=f"Invalid status transition to {new_status!r}",
                )

            previous = activity.status.value
            updated = self.repository.update(
                activity_id,
                {"status": new_status, "updated_at": utc_now_iso()},
            )

        logger.info(
            "activity_status_changed",
            activity_id=activity_id,
            from_status=previous,
            to_status=new_status,
        )
        return updated

    def _get_owned(self, activity_id: str, caller_id: str, action: str) -> Activity:
        activity = self.repository.get_by_id(activity_id)
        if activity is None:
            raise ActivityNotFound()
        if activity.user_id != caller_id:
            logger.warning("activity_forbidden", activity_id=activity_id, caller_id=caller_id, action=action)
            raise Forbidden(f"You can only {action} your own activities")
        return activity
