# blueprints/planning/services.py
from __future__ import annotations
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, time, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import (
    StudyPlan, StudyPlanSubject, StudyPlanSource, StudyPlanStatus,
    SubjectProgress, WeeklyStudySlot,
)
from blueprints.activity import services as activity
from blueprints.catalog.services import ensure_student_and_course, get_student, subject_names
from blueprints.core.errors import (
    AllocationExhaustedError, NoSlotsConfiguredError, NotFoundError, PlannerError, ValidationError,
)
from blueprints.progress import services as progress_svc
from blueprints.slots import services as slots_svc
from .allocator import REVIEW_CAP_MINUTES, Allocation, ProgressState, allocate, apply_to_states, total_minutes
from .locks import student_lock

log = logging.getLogger(__name__)

DEFAULT_AUTOFILL_MAX_DAYS = 366

def daterange(d_from: date, d_to: date) -> Iterable[date]:
    d = d_from
    while d <= d_to:
        yield d
        d += timedelta(days=1)

def _review_cap() -> int:
    return int(current_app.config.get("REVIEW_CAP_MINUTES", REVIEW_CAP_MINUTES))

def _persist_plan(*, student_id: int, course_id: int, on_date: date, start: time, end: time,
                  notes: Optional[str], source: StudyPlanSource,
                  allocations: List[Allocation]) -> StudyPlan:
    """Write one plan with its subject rows and advance the progress counters (no commit)."""
    ids = [a.progress_id for a in allocations]
    rows = {p.id: p for p in SubjectProgress.query.filter(SubjectProgress.id.in_(ids)).all()}

    plan = StudyPlan(student_id=student_id, course_id=course_id, date=on_date,
                     start_time=start, end_time=end, notes=notes,
                     status=StudyPlanStatus.PLANNED.value, source=source.value)
    db.session.add(plan)
    for a in allocations:
        row = rows[a.progress_id]
        if a.is_review:
            progress_svc.record_review(row, on_date)
        else:
            progress_svc.apply_allocation(row, a.minutes, on_date)
        plan.subjects.append(StudyPlanSubject(subject_progress_id=row.id,
                                              allocated_minutes=a.minutes,
                                              is_review=a.is_review))
    db.session.flush()
    return plan

# ===== manual plan =====
@dataclass
class PlanRequest:
    student_id: int
    course_id: int
    date: date
    start_time: time
    end_time: time
    notes: Optional[str] = None

@dataclass
class StudyPlanResult:
    plan: StudyPlan
    allocated_subjects: List[StudyPlanSubject]
    unallocated_minutes: int

def create_study_plan(req: PlanRequest) -> StudyPlanResult:
    window = slots_svc.slot_minutes(req.start_time, req.end_time)
    if req.start_time >= req.end_time or window <= 0:
        raise ValidationError("start_time must be before end_time",
                              details={"start_time": req.start_time.isoformat(),
                                       "end_time": req.end_time.isoformat()})
    student, course = ensure_student_and_course(req.student_id, req.course_id)

    with student_lock(req.student_id):
        try:
            rows = progress_svc.ensure_progress(req.student_id, req.course_id)
            allocations = allocate(progress_svc.snapshot(rows), window, _review_cap())
            plan = _persist_plan(student_id=req.student_id, course_id=req.course_id,
                                 on_date=req.date, start=req.start_time, end=req.end_time,
                                 notes=req.notes, source=StudyPlanSource.MANUAL,
                                 allocations=allocations)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    log.info("study plan created", extra={"student_id": req.student_id, "course_id": req.course_id,
                                          "filled": len(allocations)})
    activity.log_activity(
        activity.STUDY_PLAN_CREATED,
        f"Study plan for {student.full_name} in {course.name} on {req.date.isoformat()} "
        f"({len(allocations)} subjects planned)",
        related_id=plan.id,
    )
    return StudyPlanResult(plan=plan, allocated_subjects=list(plan.subjects),
                           unallocated_minutes=window - total_minutes(allocations))

# ===== autofill =====
class AllocationStrategy(Protocol):
    dry_run: bool

    def commit(self, *, student_id: int, slot: WeeklyStudySlot, on_date: date,
               allocations: List[Allocation]) -> Optional[int]:
        ...

    def finish(self) -> None:
        ...

class SimulationStrategy:
    """Dry run: nothing reaches the database, the snapshot alone carries state."""
    dry_run = True

    def commit(self, *, student_id, slot, on_date, allocations):
        return None

    def finish(self) -> None:
        # drop progress rows ensure_progress may have flushed
        db.session.rollback()

class PersistingStrategy:
    """Live run: one commit per slot, earlier slots keep their effect if a later one fails."""
    dry_run = False

    def commit(self, *, student_id, slot, on_date, allocations):
        plan = _persist_plan(student_id=student_id, course_id=slot.course_id, on_date=on_date,
                             start=slot.start_time, end=slot.end_time,
                             notes=f"Auto-filled from weekly slot #{slot.id}",
                             source=StudyPlanSource.AUTOFILL, allocations=allocations)
        db.session.commit()
        return plan.id

    def finish(self) -> None:
        db.session.commit()

@dataclass
class FilledSlot:
    date: str
    slot_id: int
    course_id: int
    subjects: List[Dict[str, Any]]
    study_plan_id: Optional[int] = None

@dataclass
class AutoFillReport:
    success: bool
    dry_run: bool
    filled_slots: List[FilledSlot] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    cancelled: bool = False
    message: Optional[str] = None

    @property
    def total_minutes(self) -> int:
        return sum(s["allocated_minutes"] for f in self.filled_slots for s in f.subjects)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "message": self.message, "dry_run": self.dry_run,
                    "errors": self.errors, "cancelled": self.cancelled}
        return {
            "success": True,
            "dry_run": self.dry_run,
            "filled_slots": [asdict(f) for f in self.filled_slots],
            "errors": self.errors,
            "total_minutes": self.total_minutes,
            "cancelled": self.cancelled,
        }

def _slot_error(err: PlannerError, on_date: date, slot: WeeklyStudySlot) -> Dict[str, Any]:
    return {"date": on_date.isoformat(), "slot_id": slot.id, "course_id": slot.course_id, **err.to_dict()}

class AutoFillScheduler:
    def __init__(self, strategy: Optional[AllocationStrategy] = None,
                 review_cap: int = REVIEW_CAP_MINUTES,
                 max_days: int = DEFAULT_AUTOFILL_MAX_DAYS):
        self.strategy = strategy or SimulationStrategy()
        self.review_cap = review_cap
        self.max_days = max_days

    def _load_states(self, student_id: int, slots: List[WeeklyStudySlot]) -> Dict[int, List[ProgressState]]:
        states: Dict[int, List[ProgressState]] = {}
        for course_id in sorted({s.course_id for s in slots}):
            try:
                rows = progress_svc.ensure_progress(student_id, course_id)
            except NotFoundError:
                log.warning("course without subjects in weekly slots",
                            extra={"student_id": student_id, "course_id": course_id})
                rows = []
            states[course_id] = progress_svc.snapshot(rows)
        return states

    def run(self, student_id: int, start_date: date, end_date: date,
            should_stop: Optional[Callable[[], bool]] = None) -> AutoFillReport:
        if end_date < start_date:
            raise ValidationError("start_date cannot be after end_date",
                                  details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()})
        if (end_date - start_date).days + 1 > self.max_days:
            raise ValidationError("Date range is too long", details={"max_days": self.max_days})

        slots = slots_svc.list_by_student(student_id)
        if not slots:
            raise NoSlotsConfiguredError("Student has no weekly slots", details={"student_id": student_id})

        states = self._load_states(student_id, slots)
        if not self.strategy.dry_run:
            # progress rows created above must survive a failing slot's rollback
            db.session.commit()

        by_day: Dict[int, List[WeeklyStudySlot]] = {}
        for s in slots:
            by_day.setdefault(s.day_of_week, []).append(s)
        names = subject_names(st.subject_id for course_states in states.values() for st in course_states)

        report = AutoFillReport(success=True, dry_run=self.strategy.dry_run)
        # strictly chronological: each date sees what earlier dates consumed
        for d in daterange(start_date, end_date):
            if should_stop is not None and should_stop():
                report.cancelled = True
                break
            for slot in by_day.get(d.isoweekday(), []):
                window = slots_svc.slot_minutes(slot.start_time, slot.end_time)
                course_states = states.get(slot.course_id, [])
                try:
                    allocations = allocate(course_states, window, self.review_cap)
                except PlannerError as e:
                    report.errors.append(_slot_error(e, d, slot))
                    continue
                try:
                    plan_id = self.strategy.commit(student_id=student_id, slot=slot, on_date=d,
                                                   allocations=allocations)
                except SQLAlchemyError as e:
                    db.session.rollback()
                    log.warning("autofill slot not persisted", exc_info=True,
                                extra={"student_id": student_id, "course_id": slot.course_id})
                    report.errors.append({"date": d.isoformat(), "slot_id": slot.id,
                                          "course_id": slot.course_id, "code": "PERSISTENCE_ERROR",
                                          "message": str(e.__class__.__name__)})
                    continue
                except PlannerError as e:
                    db.session.rollback()
                    report.errors.append(_slot_error(e, d, slot))
                    continue

                apply_to_states(course_states, allocations, d)
                report.filled_slots.append(FilledSlot(
                    date=d.isoformat(), slot_id=slot.id, course_id=slot.course_id,
                    study_plan_id=plan_id,
                    subjects=[{"subject_id": a.subject_id, "name": names.get(a.subject_id),
                               "allocated_minutes": a.minutes, "is_review": a.is_review}
                              for a in allocations],
                ))
                unused = window - total_minutes(allocations)
                if unused > 0:
                    soft = AllocationExhaustedError("Slot only partially filled",
                                                    details={"unallocated_minutes": unused})
                    report.errors.append(_slot_error(soft, d, slot))

        self.strategy.finish()
        if not report.filled_slots:
            report.success = False
            report.message = "nothing to fill"
        return report

def autofill_topics(student_id: int, start_date: date, end_date: date, dry_run: bool = True,
                    should_stop: Optional[Callable[[], bool]] = None) -> AutoFillReport:
    get_student(student_id)
    strategy: AllocationStrategy = SimulationStrategy() if dry_run else PersistingStrategy()
    scheduler = AutoFillScheduler(
        strategy=strategy,
        review_cap=_review_cap(),
        max_days=int(current_app.config.get("AUTOFILL_MAX_DAYS", DEFAULT_AUTOFILL_MAX_DAYS)),
    )
    with student_lock(student_id):
        try:
            report = scheduler.run(student_id, start_date, end_date, should_stop=should_stop)
        except PlannerError:
            db.session.rollback()
            raise

    log.info("autofill finished", extra={"student_id": student_id, "dry_run": dry_run,
                                         "filled": len(report.filled_slots), "errors": len(report.errors)})
    if not dry_run and report.success:
        activity.log_activity(
            activity.AUTOFILL,
            f"Autofill for {start_date.isoformat()} - {end_date.isoformat()}: "
            f"{len(report.filled_slots)} slots filled",
            related_id=student_id,
        )
    return report

# ===== plan maintenance =====
def list_plans(student_id: int) -> List[StudyPlan]:
    return (StudyPlan.query
            .filter_by(student_id=student_id)
            .order_by(StudyPlan.date.desc(), StudyPlan.start_time.asc(), StudyPlan.id.asc())
            .all())

def get_plan(plan_id: int) -> StudyPlan:
    plan = db.session.get(StudyPlan, plan_id)
    if not plan:
        raise NotFoundError("Study plan not found", details={"plan_id": plan_id})
    return plan

def update_plan(plan_id: int, *, notes: Optional[str] = None, status: Optional[str] = None) -> StudyPlan:
    """Only notes and status are editable; allocations stay as generated."""
    plan = get_plan(plan_id)
    if notes is not None:
        plan.notes = notes
    if status is not None:
        try:
            plan.status = StudyPlanStatus(status).value
        except ValueError:
            raise ValidationError("Unknown study plan status",
                                  details={"status": status,
                                           "allowed": [s.value for s in StudyPlanStatus]})
    db.session.commit()
    return plan

def delete_plan(plan_id: int) -> None:
    # progress counters are not given back: planned time counts as spent
    plan = get_plan(plan_id)
    db.session.delete(plan)
    db.session.commit()

def plan_subject_to_dict(ps: StudyPlanSubject) -> Dict[str, Any]:
    p = ps.progress
    return {
        "id": ps.id,
        "study_plan_id": ps.study_plan_id,
        "subject_progress_id": ps.subject_progress_id,
        "subject_id": p.subject_id if p else None,
        "name": p.subject.name if p and p.subject else None,
        "allocated_minutes": ps.allocated_minutes,
        "is_review": bool(ps.is_review),
    }

def plan_to_dict(plan: StudyPlan, with_subjects: bool = True) -> Dict[str, Any]:
    out = {
        "id": plan.id,
        "student_id": plan.student_id,
        "course_id": plan.course_id,
        "date": plan.date.isoformat(),
        "start_time": plan.start_time.strftime("%H:%M"),
        "end_time": plan.end_time.strftime("%H:%M"),
        "notes": plan.notes,
        "status": plan.status,
        "source": plan.source,
    }
    if with_subjects:
        out["subjects"] = [plan_subject_to_dict(ps) for ps in plan.subjects]
    return out
