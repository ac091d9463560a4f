from typing import List

from pydantic import BaseModel, Field


class TopicResearch(BaseModel):
    """Structured topic summary produced once per generation request."""
    topic: str
    summary: str = ""
    key_points: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    related_topics: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @classmethod
    def empty(cls, topic: str) -> "TopicResearch":
        """Research placeholder used when the research stage fails."""
        return cls(topic=topic, key_points=[], confidence=0.0)
