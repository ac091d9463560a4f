from typing import Optional

from pydantic import BaseModel, Field, field_validator

from slidegen.models.outline import Tone


class SlideGenerationRequest(BaseModel):
    """Single request value the pipeline is invoked with."""
    topic: str = Field(..., description="Presentation topic")
    slide_count: Optional[int] = Field(default=None, ge=1, le=50)
    tone: Optional[Tone] = None
    audience: Optional[str] = None
    include_images: Optional[bool] = None
    theme_preference: Optional[str] = None

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("topic must not be empty")
        return value
