"""
Response schemas requested from the model gateway.

Every field is optional or defaulted: the model is an untrusted producer and a
partially filled draft is still useful to the stages, which apply their own
defaults on top.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ResearchDraft(BaseModel):
    topic: Optional[str] = Field(default=None, description="The researched topic")
    summary: Optional[str] = Field(default=None, description="Concise summary of the topic")
    keyPoints: List[str] = Field(default_factory=list, description="Key points valuable in a presentation")
    sources: List[str] = Field(default_factory=list, description="Conceptual sources")
    relatedTopics: List[str] = Field(default_factory=list, description="Related topics worth exploring")
    confidence: Optional[float] = Field(default=None, description="Confidence (0-1) in the completeness of the research")


class SectionDraft(BaseModel):
    title: Optional[str] = Field(default=None, description="Section title")
    points: List[str] = Field(default_factory=list, description="Key points covered by the section")
    slideCount: Optional[int] = Field(default=None, description="Number of slides for the section")
    hasVisuals: Optional[bool] = Field(default=None, description="Whether the section benefits from visuals")


class OutlineDraft(BaseModel):
    title: Optional[str] = Field(default=None, description="Presentation title")
    sections: List[SectionDraft] = Field(default_factory=list)
    totalSlides: Optional[int] = None
    estimatedDuration: Optional[int] = Field(default=None, description="Estimated duration in minutes")
    tone: Optional[str] = Field(default=None, description="formal | casual | technical")


class SlideContentDraft(BaseModel):
    title: Optional[str] = Field(default=None, description="Slide title")
    content: Optional[str] = Field(default=None, description="Main slide content with markdown formatting")
    notes: Optional[str] = Field(default=None, description="Presenter notes")
    visualSuggestions: List[str] = Field(default_factory=list)


class ImageQueryDraft(BaseModel):
    query: Optional[str] = Field(default=None, description="Specific search query")
    description: Optional[str] = Field(default=None, description="What this image should show")
    style: Optional[str] = Field(default=None, description="photographic | illustration | abstract | icon | chart")
    priority: Optional[str] = Field(default=None, description="high | medium | low")


class ImageQueryList(BaseModel):
    queries: List[ImageQueryDraft] = Field(default_factory=list)
