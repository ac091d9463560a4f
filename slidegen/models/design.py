from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from slidegen.models.outline import Tone
from slidegen.models.slide import AssetType, LayoutType
from slidegen.models.theme import Theme


class SlidePosition(str, Enum):
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"
    ANY = "any"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class AssetSuggestion(BaseModel):
    type: AssetType
    description: str = ""
    relevance: float = 0.5
    search_query: str = ""


class ContentAnalysis(BaseModel):
    """Features extracted from a slide's raw text."""
    word_count: int
    sentence_count: int
    has_lists: bool
    has_quotes: bool
    has_code: bool
    has_numbers: bool
    complexity: Complexity
    tone: Tone
    key_points: List[str] = Field(default_factory=list)
    suggested_assets: List[AssetSuggestion] = Field(default_factory=list)


class SlideFeatures(BaseModel):
    """Input to the layout decision table."""
    word_count: int = 0
    has_lists: bool = False
    has_quotes: bool = False
    has_code: bool = False
    allows_visuals: bool = True
    position: SlidePosition = SlidePosition.MIDDLE


class AppliedDesignRule(BaseModel):
    rule: str
    applied: bool
    impact: str


class LayoutDecision(BaseModel):
    layout_type: LayoutType
    reasoning: str
    confidence: float
    alternatives: List[LayoutType] = Field(default_factory=list)
    design_rules: List[AppliedDesignRule] = Field(default_factory=list)


class AssetStrategy(BaseModel):
    """Image-vs-icon policy for a whole presentation."""
    model_config = ConfigDict(frozen=True)

    use_images: bool
    use_icons: bool
    image_style: str = "photographic"
    icon_style: str = "line"
    placement: str = "balanced"


class DesignDecision(BaseModel):
    """Computed once per generation and shared by asset resolution and composition."""
    model_config = ConfigDict(frozen=True)

    theme: Theme
    layout_map: Dict[int, LayoutType] = Field(default_factory=dict)
    asset_strategy: AssetStrategy
    reasoning: str = ""
