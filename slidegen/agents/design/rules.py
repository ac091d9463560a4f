"""
Pure decision functions for layout and theme selection.

Both functions are total: they never raise for any input and fall back to a
documented default when nothing more specific applies.
"""

from typing import List, Optional, Union

from slidegen.config.design import (
    DEFAULT_THEME,
    LAYOUT_RULES,
    THEMES,
    TONE_THEMES,
    LayoutRule,
)
from slidegen.models.design import SlideFeatures, SlidePosition
from slidegen.models.outline import Tone
from slidegen.models.slide import LayoutType
from slidegen.models.theme import Theme


def rule_matches(rule: LayoutRule, features: SlideFeatures) -> bool:
    conditions = rule.conditions

    if conditions.slide_position and conditions.slide_position != SlidePosition.ANY:
        if conditions.slide_position != features.position:
            return False

    if conditions.word_count_min is not None and features.word_count < conditions.word_count_min:
        return False
    if conditions.word_count_max is not None and features.word_count > conditions.word_count_max:
        return False

    if conditions.has_lists is not None and features.has_lists != conditions.has_lists:
        return False
    if conditions.has_quotes is not None and features.has_quotes != conditions.has_quotes:
        return False
    if conditions.has_code is not None and features.has_code != conditions.has_code:
        return False
    if conditions.requires_image and not features.allows_visuals:
        return False

    return True


def matching_rules(features: SlideFeatures) -> List[LayoutRule]:
    """All satisfied rules, highest priority first, declaration order on ties."""
    matches = [rule for rule in LAYOUT_RULES if rule_matches(rule, features)]
    # sorted() is stable, so equal priorities keep their declaration order
    return sorted(matches, key=lambda rule: -rule.priority)


def decide_layout(features: SlideFeatures) -> LayoutType:
    matches = matching_rules(features)
    if not matches:
        return LayoutType.CONTENT_ONLY
    return matches[0].layout_type


def select_theme(tone: Union[Tone, str, None], explicit_preference: Optional[str] = None) -> Theme:
    """Explicit catalog preference first, then the tone lookup, then professional."""
    if explicit_preference:
        key = explicit_preference.strip().lower()
        if key in THEMES:
            return THEMES[key]

    try:
        tone_value = Tone(tone) if tone is not None else None
    except (ValueError, TypeError):
        tone_value = None

    return THEMES[TONE_THEMES.get(tone_value, DEFAULT_THEME)]
