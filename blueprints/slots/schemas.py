from __future__ import annotations
from datetime import time
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

class WeeklySlotIn(BaseModel):
    course_id: int = Field(ge=1)
    day_of_week: int = Field(ge=1, le=7)
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be > start_time")
        return self

class WeeklySlotPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    course_id: Optional[int] = Field(None, ge=1)
    day_of_week: Optional[int] = Field(None, ge=1, le=7)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    # accepted only to be rejected explicitly by the registry
    student_id: Optional[int] = None

