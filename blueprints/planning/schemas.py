from __future__ import annotations
from datetime import date as dt_date, time
from typing import Optional
from pydantic import BaseModel, Field, model_validator

class StudyPlanIn(BaseModel):
    student_id: int = Field(ge=1)
    course_id: int = Field(ge=1)
    date: dt_date
    start_time: time
    end_time: time
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be > start_time")
        return self

class StudyPlanPatch(BaseModel):
    notes: Optional[str] = Field(None, max_length=2000)
    status: Optional[str] = None

class AutoFillIn(BaseModel):
    start_date: dt_date
    end_date: dt_date
    dry_run: Optional[bool] = None
