"""
Design catalog and decision tables.

THEMES is the fixed theme catalog; LAYOUT_RULES is the ordered layout table
evaluated by the design rule engine. Declaration order matters: it breaks
priority ties.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from slidegen.models.design import SlidePosition
from slidegen.models.outline import Tone
from slidegen.models.slide import LayoutType
from slidegen.models.theme import (
    Effects,
    FontWeights,
    HeadingSizes,
    Spacing,
    Theme,
    ThemeColors,
    Typography,
)


THEMES: Dict[str, Theme] = {
    "professional": Theme(
        name="Professional",
        colors=ThemeColors(
            primary="#2c3e50",
            secondary="#34495e",
            accent="#3498db",
            background="#ffffff",
            text="#2c3e50",
            text_secondary="#7f8c8d",
            border="#ecf0f1",
        ),
        typography=Typography(
            font_family="'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif",
            heading_font="'Inter', sans-serif",
            base_size="18px",
            line_height=1.6,
            heading_sizes=HeadingSizes(h1="48px", h2="36px", h3="28px"),
            weights=FontWeights(normal=400, medium=500, bold=700),
        ),
        spacing=Spacing(base="16px", small="8px", medium="24px", large="48px", xlarge="64px"),
        effects=Effects(shadows=True, gradients=False, border_radius="8px", animations=True),
    ),
    "modern": Theme(
        name="Modern",
        colors=ThemeColors(
            primary="#6366f1",
            secondary="#8b5cf6",
            accent="#ec4899",
            background="#0f172a",
            text="#f1f5f9",
            text_secondary="#cbd5e1",
            border="#1e293b",
        ),
        typography=Typography(
            font_family="'Poppins', -apple-system, sans-serif",
            heading_font="'Poppins', sans-serif",
            base_size="20px",
            line_height=1.7,
            heading_sizes=HeadingSizes(h1="56px", h2="40px", h3="32px"),
            weights=FontWeights(normal=400, medium=600, bold=700),
        ),
        spacing=Spacing(base="16px", small="12px", medium="32px", large="56px", xlarge="80px"),
        effects=Effects(shadows=True, gradients=True, border_radius="12px", animations=True),
    ),
    "minimal": Theme(
        name="Minimal",
        colors=ThemeColors(
            primary="#000000",
            secondary="#404040",
            accent="#808080",
            background="#ffffff",
            text="#000000",
            text_secondary="#666666",
            border="#e0e0e0",
        ),
        typography=Typography(
            font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
            heading_font="'Helvetica Neue', sans-serif",
            base_size="18px",
            line_height=1.8,
            heading_sizes=HeadingSizes(h1="52px", h2="38px", h3="30px"),
            weights=FontWeights(normal=300, medium=400, bold=600),
        ),
        spacing=Spacing(base="20px", small="10px", medium="40px", large="60px", xlarge="100px"),
        effects=Effects(shadows=False, gradients=False, border_radius="0px", animations=False),
    ),
    "vibrant": Theme(
        name="Vibrant",
        colors=ThemeColors(
            primary="#ff6b6b",
            secondary="#4ecdc4",
            accent="#ffe66d",
            background="#f7fff7",
            text="#1a1a2e",
            text_secondary="#16213e",
            border="#e8f8f5",
        ),
        typography=Typography(
            font_family="'Nunito', -apple-system, sans-serif",
            heading_font="'Nunito', sans-serif",
            base_size="19px",
            line_height=1.65,
            heading_sizes=HeadingSizes(h1="54px", h2="42px", h3="32px"),
            weights=FontWeights(normal=400, medium=600, bold=800),
        ),
        spacing=Spacing(base="18px", small="10px", medium="28px", large="52px", xlarge="72px"),
        effects=Effects(shadows=True, gradients=True, border_radius="16px", animations=True),
    ),
}

DEFAULT_THEME = "professional"

TONE_THEMES: Dict[Tone, str] = {
    Tone.FORMAL: "professional",
    Tone.CASUAL: "vibrant",
    Tone.TECHNICAL: "modern",
}


@dataclass(frozen=True)
class LayoutConditions:
    word_count_min: Optional[int] = None
    word_count_max: Optional[int] = None
    has_lists: Optional[bool] = None
    has_quotes: Optional[bool] = None
    has_code: Optional[bool] = None
    requires_image: bool = False
    slide_position: Optional[SlidePosition] = None


@dataclass(frozen=True)
class LayoutRule:
    layout_type: LayoutType
    conditions: LayoutConditions
    priority: int
    description: str


LAYOUT_RULES = [
    LayoutRule(
        LayoutType.TITLE_SLIDE,
        LayoutConditions(slide_position=SlidePosition.FIRST, word_count_max=30),
        priority=10,
        description="Title slide for presentation opening",
    ),
    LayoutRule(
        LayoutType.SECTION_HEADER,
        LayoutConditions(word_count_max=20, has_lists=False),
        priority=8,
        description="Section divider with minimal text",
    ),
    LayoutRule(
        LayoutType.QUOTE,
        LayoutConditions(has_quotes=True, word_count_max=50),
        priority=9,
        description="Highlight important quotes or statements",
    ),
    LayoutRule(
        LayoutType.BULLET_POINTS,
        LayoutConditions(has_lists=True, word_count_min=30, word_count_max=150),
        priority=7,
        description="List-based content with clear hierarchy",
    ),
    LayoutRule(
        LayoutType.CONTENT_IMAGE_SPLIT,
        LayoutConditions(requires_image=True, word_count_min=50, word_count_max=200),
        priority=6,
        description="Balanced layout with text and visual",
    ),
    LayoutRule(
        LayoutType.IMAGE_FOCUS,
        LayoutConditions(requires_image=True, word_count_max=50),
        priority=7,
        description="Image-centric slide with minimal text",
    ),
    LayoutRule(
        LayoutType.TWO_COLUMN,
        LayoutConditions(has_lists=True, word_count_min=100),
        priority=5,
        description="Two-column layout for comparison or extensive content",
    ),
    LayoutRule(
        LayoutType.COMPARISON,
        LayoutConditions(has_lists=True, word_count_min=60),
        priority=6,
        description="Side-by-side comparison of concepts",
    ),
    LayoutRule(
        LayoutType.CONTENT_ONLY,
        LayoutConditions(word_count_min=40, word_count_max=150, has_lists=False),
        priority=4,
        description="Text-focused slide without visuals",
    ),
]

# Typography and whitespace limits used when annotating layout decisions
DESIGN_RULES = {
    "typography": {
        "max_lines_per_slide": 7,
        "max_words_per_line": 12,
        "max_bullet_points": 5,
        "min_font_size": "16px",
    },
    "whitespace": {
        "content_only_word_limit": 100,
    },
}

LAYOUT_CLASS_MODIFIERS: Dict[LayoutType, list] = {
    LayoutType.TITLE_SLIDE: ["slide--centered", "slide--hero"],
    LayoutType.CONTENT_ONLY: ["slide--text-focus"],
    LayoutType.CONTENT_IMAGE_SPLIT: ["slide--split", "slide--balanced"],
    LayoutType.IMAGE_FOCUS: ["slide--visual-focus", "slide--minimal-text"],
    LayoutType.BULLET_POINTS: ["slide--list"],
    LayoutType.TWO_COLUMN: ["slide--columns"],
    LayoutType.QUOTE: ["slide--centered", "slide--emphasis"],
    LayoutType.SECTION_HEADER: ["slide--centered", "slide--divider"],
    LayoutType.COMPARISON: ["slide--split", "slide--comparison"],
    LayoutType.TIMELINE: ["slide--sequential"],
}

# (position, width, height) per layout and asset type
ASSET_PLACEMENTS = {
    LayoutType.TITLE_SLIDE: {
        "image": ("background", "100%", "100%"),
        "icon": ("center", "80px", "80px"),
        "chart": ("center", "60%", "auto"),
    },
    LayoutType.CONTENT_IMAGE_SPLIT: {
        "image": ("right", "45%", "auto"),
        "icon": ("left", "60px", "60px"),
        "chart": ("right", "45%", "auto"),
    },
    LayoutType.IMAGE_FOCUS: {
        "image": ("center", "80%", "auto"),
        "icon": ("center", "120px", "120px"),
        "chart": ("center", "85%", "auto"),
    },
    LayoutType.BULLET_POINTS: {
        "image": ("right", "40%", "auto"),
        "icon": ("left", "48px", "48px"),
        "chart": ("bottom", "70%", "auto"),
    },
}
DEFAULT_ASSET_PLACEMENT = ("right", "40%", "auto")


def get_theme(theme_name: Optional[str] = None) -> Theme:
    """Get theme by name or return the default"""
    if not theme_name:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(theme_name.strip().lower(), THEMES[DEFAULT_THEME])
