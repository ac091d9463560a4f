from slidegen.models.theme import Theme, ThemeColors, Typography, HeadingSizes, FontWeights, Spacing, Effects
from slidegen.models.research import TopicResearch
from slidegen.models.outline import Tone, Outline, OutlineSection
from slidegen.models.slide import (
    LayoutType,
    AssetType,
    Asset,
    AssetPlacement,
    AssetSize,
    Slide,
    SlideMetadata,
    RenderResult,
)
from slidegen.models.design import (
    SlidePosition,
    Complexity,
    AssetSuggestion,
    ContentAnalysis,
    SlideFeatures,
    AppliedDesignRule,
    LayoutDecision,
    AssetStrategy,
    DesignDecision,
)
from slidegen.models.requests import SlideGenerationRequest
from slidegen.models.results import GenerationMetadata, SlideGenerationResult

__all__ = [
    "Theme", "ThemeColors", "Typography", "HeadingSizes", "FontWeights", "Spacing", "Effects",
    "TopicResearch",
    "Tone", "Outline", "OutlineSection",
    "LayoutType", "AssetType", "Asset", "AssetPlacement", "AssetSize", "Slide", "SlideMetadata", "RenderResult",
    "SlidePosition", "Complexity", "AssetSuggestion", "ContentAnalysis", "SlideFeatures",
    "AppliedDesignRule", "LayoutDecision", "AssetStrategy", "DesignDecision",
    "SlideGenerationRequest",
    "GenerationMetadata", "SlideGenerationResult",
]
