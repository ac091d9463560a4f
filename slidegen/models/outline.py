from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Tone(str, Enum):
    FORMAL = "formal"
    CASUAL = "casual"
    TECHNICAL = "technical"


class OutlineSection(BaseModel):
    """A named grouping of key points mapped to one or more slides."""
    title: str
    points: List[str] = Field(default_factory=list)
    slide_count: int = 1
    has_visuals: bool = True


class Outline(BaseModel):
    """
    The structured plan that content generation expands into per-slide text.

    ``total_slides`` counts content slides only (the synthetic title and
    closing slides are not included) and equals the sum of section slide
    counts once normalized.
    """
    title: str
    sections: List[OutlineSection] = Field(default_factory=list)
    total_slides: int = 0
    estimated_duration_minutes: int = 0
    tone: Tone = Tone.FORMAL

    def computed_total(self) -> int:
        return sum(section.slide_count for section in self.sections)

    def recompute_total(self) -> "Outline":
        """Return a copy whose total matches the section slide counts."""
        return self.model_copy(update={"total_slides": self.computed_total()})
