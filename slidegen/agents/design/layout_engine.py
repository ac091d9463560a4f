from typing import Dict, List, Optional, Sequence

from slidegen.agents.design.content_analyzer import ContentAnalyzer
from slidegen.agents.design.rules import matching_rules
from slidegen.agents.exceptions import LayoutEngineError
from slidegen.config.design import (
    ASSET_PLACEMENTS,
    DEFAULT_ASSET_PLACEMENT,
    DESIGN_RULES,
    LAYOUT_CLASS_MODIFIERS,
    LayoutRule,
)
from slidegen.config.logging_config import get_logger
from slidegen.models.design import (
    AppliedDesignRule,
    Complexity,
    ContentAnalysis,
    LayoutDecision,
    SlideFeatures,
    SlidePosition,
)
from slidegen.models.slide import AssetPlacement, LayoutType

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.3


class LayoutEngine:
    """
    Layout decisions for slide content.

    Wraps the pure rule table with content analysis, a confidence score and
    the design notes that applied to the chosen layout.
    """

    def __init__(self, analyzer: Optional[ContentAnalyzer] = None):
        self.analyzer = analyzer or ContentAnalyzer()

    def determine_layout(
        self,
        content: str,
        position: SlidePosition = SlidePosition.MIDDLE,
        has_visuals: bool = True
    ) -> LayoutDecision:
        analysis = self.analyzer.analyze(content)
        features = SlideFeatures(
            word_count=analysis.word_count,
            has_lists=analysis.has_lists,
            has_quotes=analysis.has_quotes,
            has_code=analysis.has_code,
            allows_visuals=has_visuals,
            position=position,
        )
        matches = matching_rules(features)

        if not matches:
            return LayoutDecision(
                layout_type=LayoutType.CONTENT_ONLY,
                reasoning="Default layout applied - no specific rules matched",
                confidence=0.5,
                alternatives=[LayoutType.BULLET_POINTS, LayoutType.TWO_COLUMN],
                design_rules=[],
            )

        best = matches[0]
        return LayoutDecision(
            layout_type=best.layout_type,
            reasoning=best.description,
            confidence=self._calculate_confidence(analysis, best),
            alternatives=[rule.layout_type for rule in matches[1:3]],
            design_rules=self._applied_design_rules(analysis, best.layout_type),
        )

    def _calculate_confidence(self, analysis: ContentAnalysis, rule: LayoutRule) -> float:
        confidence = 0.7
        conditions = rule.conditions

        if conditions.word_count_min is not None and conditions.word_count_max is not None:
            midpoint = (conditions.word_count_min + conditions.word_count_max) / 2
            distance = abs(analysis.word_count - midpoint)
            span = conditions.word_count_max - conditions.word_count_min
            if span > 0:
                confidence += (1 - distance / span) * 0.2

        if conditions.has_lists is not None and conditions.has_lists == analysis.has_lists:
            confidence += 0.05
        if conditions.has_quotes is not None and conditions.has_quotes == analysis.has_quotes:
            confidence += 0.05

        return min(confidence, 0.98)

    def _applied_design_rules(self, analysis: ContentAnalysis, layout: LayoutType) -> List[AppliedDesignRule]:
        rules = []
        typography = DESIGN_RULES["typography"]

        if analysis.word_count > typography["max_lines_per_slide"] * typography["max_words_per_line"]:
            rules.append(AppliedDesignRule(
                rule="Content exceeds recommended length - consider splitting",
                applied=True,
                impact="high",
            ))

        if layout == LayoutType.CONTENT_ONLY and analysis.word_count > DESIGN_RULES["whitespace"]["content_only_word_limit"]:
            rules.append(AppliedDesignRule(rule="Optimize whitespace for readability", applied=True, impact="medium"))

        if self.analyzer.should_use_images(analysis):
            rules.append(AppliedDesignRule(
                rule="Use professional images for visual impact",
                applied="image" in layout.value,
                impact="high",
            ))

        if self.analyzer.should_use_icons(analysis):
            rules.append(AppliedDesignRule(
                rule="Use icons to enhance bullet points",
                applied=analysis.has_lists,
                impact="medium",
            ))

        if analysis.complexity == Complexity.COMPLEX:
            rules.append(AppliedDesignRule(
                rule="Simplify content or split across multiple slides",
                applied=False,
                impact="high",
            ))

        return rules

    def determine_asset_placement(self, layout: LayoutType, asset_type: str) -> AssetPlacement:
        position, width, height = ASSET_PLACEMENTS.get(layout, {}).get(asset_type, DEFAULT_ASSET_PLACEMENT)
        return AssetPlacement(position=position, width=width, height=height)

    def get_layout_classes(self, layout: LayoutType) -> List[str]:
        layout = LayoutType(layout)
        return ["slide", f"slide--{layout.value}", *LAYOUT_CLASS_MODIFIERS.get(layout, [])]

    def validate_layout(self, decision: LayoutDecision) -> bool:
        if decision.confidence < MIN_CONFIDENCE:
            raise LayoutEngineError("Layout confidence too low", {"decision": decision.model_dump()})
        return True

    def plan_presentation_layout(self, slide_contents: Sequence[str]) -> Dict[int, LayoutDecision]:
        """Layout per slide index; the opening slide is planned without visuals."""
        plan = {}
        last = len(slide_contents) - 1
        for index, content in enumerate(slide_contents):
            if index == 0:
                position = SlidePosition.FIRST
            elif index == last:
                position = SlidePosition.LAST
            else:
                position = SlidePosition.MIDDLE
            plan[index] = self.determine_layout(content, position, has_visuals=index > 0)

        logger.debug(f"[DESIGN] Planned layouts: {[d.layout_type.value for d in plan.values()]}")
        return plan
