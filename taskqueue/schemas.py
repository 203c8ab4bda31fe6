"""Pydantic schemas for demo run reports."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


class TaskSpec(BaseModel):
    label: str = Field(..., description="Value the task returns.")
    duration_ms: int = Field(..., description="Simulated work time in milliseconds.")

    @field_validator("label")
    @classmethod
    def validate_label(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("label cannot be empty.")
        return value

    @field_validator("duration_ms")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value < 0:
            raise ValueError("duration_ms must be >= 0")
        return value


class TaskEvent(BaseModel):
    label: str
    kind: Literal["start", "finish"]
    offset_ms: float


class DemoReport(BaseModel):
    concurrency_limit: int
    results: List[str]
    elapsed_ms: float
    sequential_ms: int
    events: List[TaskEvent] = Field(default_factory=list)

    def started_order(self) -> List[str]:
        return [event.label for event in self.events if event.kind == "start"]

    def offset(self, label: str, kind: str) -> float:
        for event in self.events:
            if event.label == label and event.kind == kind:
                return event.offset_ms
        raise KeyError(f"no {kind} event for {label!r}")
