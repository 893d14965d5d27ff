"""Pydantic models for generated itineraries."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictInt, StrictStr, ValidationInfo, field_validator, model_validator

TimeSlot = Literal["Morning", "Afternoon", "Evening"]
TIME_SLOTS: tuple[TimeSlot, ...] = ("Morning", "Afternoon", "Evening")


class Activity(BaseModel):
  """One activity in a day's time slot."""

  time: TimeSlot
  description: StrictStr = Field(min_length=1)
  location: StrictStr = Field(min_length=1)
  model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class Day(BaseModel):
  """A single itinerary day with exactly one activity per time slot."""

  day: StrictInt = Field(gt=0)
  theme: StrictStr = Field(min_length=1)
  activities: list[Activity] = Field(min_length=3, max_length=3)
  model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

  @field_validator("activities")
  @classmethod
  def cover_each_time_slot(cls, activities: list[Activity]) -> list[Activity]:
    slots = [activity.time for activity in activities]
    duplicates = sorted({slot for slot in slots if slots.count(slot) > 1})
    if duplicates:
      raise ValueError(f"Duplicate time slot(s): {', '.join(duplicates)}")
    missing = [slot for slot in TIME_SLOTS if slot not in slots]
    if missing:
      raise ValueError(f"Missing time slot(s): {', '.join(missing)}")
    return activities


class Itinerary(RootModel[list[Day]]):
  """An ordered, non-empty list of days numbered from 1.

  Pass ``context={"expected_days": n}`` to ``model_validate`` to also require
  exactly ``n`` days.
  """

  root: list[Day] = Field(min_length=1)

  @model_validator(mode="after")
  def check_day_sequence(self, info: ValidationInfo) -> Itinerary:
    for position, day in enumerate(self.root, start=1):
      if day.day != position:
        raise ValueError(f"Day numbers must be sequential from 1; found day {day.day} at position {position}")

    context = info.context or {}
    expected_days = context.get("expected_days")
    if expected_days is not None and len(self.root) != expected_days:
      raise ValueError(f"Expected {expected_days} days, got {len(self.root)}")
    return self


def validate_itinerary(data: Any, *, expected_days: int | None = None) -> list[Day]:
  """Validate raw parsed JSON as an itinerary and return its days."""
  return Itinerary.model_validate(data, context={"expected_days": expected_days}).root


def dump_itinerary(days: list[Day]) -> list[dict[str, Any]]:
  """Return plain dicts suitable for storage."""
  return [day.model_dump(mode="python") for day in days]
