"""
Design stage: theme, per-slide layout and asset strategy for a deck.

Everything here is deterministic. The layout engine may reject a low
confidence decision, in which case that slide falls back to content-only.
"""

from typing import Dict, List, Optional, Sequence

from slidegen.agents.core.base_agent import BaseAgent
from slidegen.agents.core.task_log import TaskPriority, TaskType
from slidegen.agents.design.layout_engine import LayoutEngine
from slidegen.agents.design.rules import select_theme
from slidegen.agents.exceptions import LayoutEngineError
from slidegen.config.logging_config import get_logger
from slidegen.models.design import AssetStrategy, DesignDecision
from slidegen.models.outline import Outline, Tone
from slidegen.models.slide import LayoutType
from slidegen.models.theme import Theme
from slidegen.utils.colors import get_contrast_ratio, get_luminance, shift_hue

logger = get_logger(__name__)

WCAG_AA_CONTRAST = 4.5

THEME_VARIATIONS = [
    (30, "Variant 1"),
    (-30, "Variant 2"),
    (60, "Variant 3"),
]


class DesignAgent(BaseAgent):
    task_type = TaskType.DESIGN

    def __init__(self, layout_engine: Optional[LayoutEngine] = None, task_history_limit: int = 1000):
        super().__init__(None, task_history_limit)
        self.layout_engine = layout_engine or LayoutEngine()

    def make_design_decisions(
        self,
        outline: Outline,
        slide_contents: Sequence[str],
        theme_name: Optional[str] = None,
        prefer_images: Optional[bool] = None
    ) -> DesignDecision:
        task_input = {"title": outline.title, "theme_name": theme_name, "prefer_images": prefer_images}
        with self.track("Make design decisions for presentation", task_input) as task:
            theme = select_theme(outline.tone, theme_name)
            layout_map = self.determine_layouts(slide_contents)
            strategy = self.define_asset_strategy(outline, prefer_images)

            decision = DesignDecision(
                theme=theme,
                layout_map=layout_map,
                asset_strategy=strategy,
                reasoning=self.generate_design_reasoning(theme, strategy),
            )
            task.complete({"theme": theme.name, "layouts": len(layout_map)})
            logger.info(f"[DESIGN] {decision.reasoning}")
            return decision

    def determine_layouts(self, slide_contents: Sequence[str]) -> Dict[int, LayoutType]:
        layout_map = {}
        for index, decision in self.layout_engine.plan_presentation_layout(slide_contents).items():
            try:
                self.layout_engine.validate_layout(decision)
                layout_map[index] = decision.layout_type
            except LayoutEngineError as e:
                logger.warning(f"[DESIGN] Slide {index + 1}: {e.message}, using content-only")
                layout_map[index] = LayoutType.CONTENT_ONLY
        return layout_map

    def define_asset_strategy(self, outline: Outline, prefer_images: Optional[bool] = None) -> AssetStrategy:
        with_visuals = sum(1 for s in outline.sections if s.has_visuals)
        visual_ratio = with_visuals / len(outline.sections) if outline.sections else 0.0

        use_images = prefer_images if prefer_images is not None else visual_ratio > 0.5
        use_icons = not use_images or outline.tone == Tone.TECHNICAL

        if outline.tone == Tone.TECHNICAL:
            image_style = "minimal"
        elif outline.tone == Tone.CASUAL:
            image_style = "illustration"
        else:
            image_style = "photographic"

        if visual_ratio > 0.7:
            placement = "image-heavy"
        elif visual_ratio < 0.3:
            placement = "minimal"
        else:
            placement = "balanced"

        return AssetStrategy(
            use_images=use_images,
            use_icons=use_icons,
            image_style=image_style,
            icon_style="line" if outline.tone == Tone.FORMAL else "filled",
            placement=placement,
        )

    def generate_design_reasoning(self, theme: Theme, strategy: AssetStrategy) -> str:
        reasons = [f'Selected "{theme.name}" theme for visual coherence']
        if strategy.use_images:
            reasons.append(f"Using {strategy.image_style} images to enhance visual appeal")
        if strategy.use_icons:
            reasons.append(f"Incorporating {strategy.icon_style} icons for clarity")
        reasons.append(f"Layout strategy: {strategy.placement} visual distribution")
        return ". ".join(reasons) + "."

    def adjust_theme_contrast(self, theme: Theme, target_contrast: float = WCAG_AA_CONTRAST) -> Theme:
        """Return theme with black or white text when text/background contrast is too low."""
        if get_contrast_ratio(theme.colors.background, theme.colors.text) >= target_contrast:
            return theme

        text = "#000000" if get_luminance(theme.colors.background) > 0.5 else "#ffffff"
        colors = theme.colors.model_copy(update={"text": text})
        return theme.model_copy(update={"colors": colors})

    def create_theme_variations(self, base_theme: Theme, count: int = 3) -> List[Theme]:
        """The base theme followed by up to count - 1 accent hue shifts."""
        with self.track("Create theme variations", {"theme": base_theme.name, "count": count}, TaskPriority.LOW):
            variations = [base_theme]
            for degrees, label in THEME_VARIATIONS[:max(count - 1, 0)]:
                colors = base_theme.colors.model_copy(update={"accent": shift_hue(base_theme.colors.accent, degrees)})
                variations.append(base_theme.model_copy(update={
                    "name": f"{base_theme.name} {label}",
                    "colors": colors,
                }))
            return variations
