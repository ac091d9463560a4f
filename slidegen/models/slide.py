from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from slidegen.models.theme import Theme


class LayoutType(str, Enum):
    TITLE_SLIDE = "title-slide"
    CONTENT_ONLY = "content-only"
    CONTENT_IMAGE_SPLIT = "content-image-split"
    IMAGE_FOCUS = "image-focus"
    BULLET_POINTS = "bullet-points"
    TWO_COLUMN = "two-column"
    QUOTE = "quote"
    SECTION_HEADER = "section-header"
    COMPARISON = "comparison"
    TIMELINE = "timeline"


class AssetType(str, Enum):
    IMAGE = "image"
    ICON = "icon"
    CHART = "chart"
    DIAGRAM = "diagram"


class AssetPlacement(BaseModel):
    position: str
    width: str
    height: str
    x: Optional[float] = None
    y: Optional[float] = None


class AssetSize(BaseModel):
    width: Union[int, float]
    height: Union[int, float]
    unit: str = "px"


class Asset(BaseModel):
    """A visual element attached to a slide with placement metadata."""
    type: AssetType
    url: Optional[str] = None
    description: str
    placement: AssetPlacement
    size: AssetSize
    alt: str


class SlideMetadata(BaseModel):
    order: int
    duration: Optional[int] = None
    transitions: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None


class Slide(BaseModel):
    """Final composed unit of a presentation."""
    id: str
    title: str
    content: str
    layout: LayoutType = LayoutType.CONTENT_ONLY
    theme: Theme
    assets: Optional[List[Asset]] = None
    metadata: SlideMetadata


class RenderResult(BaseModel):
    html: str
    css: str = ""
    js: str = ""
    assets: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
