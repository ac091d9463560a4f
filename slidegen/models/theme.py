from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ThemeColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    text_secondary: str
    border: Optional[str] = None


class HeadingSizes(BaseModel):
    model_config = ConfigDict(frozen=True)

    h1: str
    h2: str
    h3: str


class FontWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    normal: int = 400
    medium: int = 500
    bold: int = 700


class Typography(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_family: str
    heading_font: Optional[str] = None
    base_size: str
    line_height: float
    heading_sizes: HeadingSizes
    weights: FontWeights = Field(default_factory=FontWeights)


class Spacing(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: str
    small: str
    medium: str
    large: str
    xlarge: str


class Effects(BaseModel):
    model_config = ConfigDict(frozen=True)

    shadows: bool = True
    gradients: bool = False
    border_radius: str = "8px"
    animations: bool = True


class Theme(BaseModel):
    """
    A bundle of colors, typography, spacing and effect toggles applied
    uniformly across a deck. Instances are immutable; derive variants with
    ``model_copy(update=...)``.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    colors: ThemeColors
    typography: Typography
    spacing: Spacing
    effects: Optional[Effects] = None
