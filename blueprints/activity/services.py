# blueprints/activity/services.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Activity

log = logging.getLogger(__name__)

STUDY_PLAN_CREATED = "study_plan_created"
WEEKLY_SLOT_CREATED = "weekly_slot_created"
AUTOFILL = "autofill"

def log_activity(type_: str, message: str, related_id: Optional[int] = None) -> Optional[Activity]:
    """Write an activity row in its own commit; a failure here never reaches the caller."""
    try:
        act = Activity(type=type_, message=message, related_id=related_id)
        db.session.add(act)
        db.session.commit()
        return act
    except SQLAlchemyError:
        db.session.rollback()
        log.warning("activity log write failed", exc_info=True, extra={"event": type_})
        return None

def recent_activities(limit: int = 10) -> List[Activity]:
    return (Activity.query
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .limit(limit)
            .all())
