"""
HTML rendering for composed slides.

The markdown conversion is a deliberately small single-pass regex converter:
headings, bold, italic and flat lists only. Only the first run of list items
is wrapped in <ul>, and nested lists are not supported.
"""

import html
import re
from dataclasses import dataclass
from string import Template
from typing import List, Optional, Sequence

from slidegen.agents.design.layout_engine import LayoutEngine
from slidegen.models.slide import AssetType, LayoutType, RenderResult, Slide
from slidegen.models.theme import Theme

MAX_CONTENT_CHARS = 500
MAX_ASSETS = 3

EMPTY_IMAGE = "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg'/%3E"

H3 = re.compile(r"^### (.+)$", re.M)
H2 = re.compile(r"^## (.+)$", re.M)
H1 = re.compile(r"^# (.+)$", re.M)
BOLD = re.compile(r"\*\*(.+?)\*\*")
ITALIC = re.compile(r"\*(.+?)\*")
BULLET = re.compile(r"^[-*+] (.+)$", re.M)
LIST_RUN = re.compile(r"(<li>.*</li>)", re.S)
NUMBERED = re.compile(r"^\d+\. (.+)$", re.M)


@dataclass
class RenderOptions:
    include_css: bool = True
    include_js: bool = True
    # "standalone" wraps the slides in a full document, "fragment" does not
    export_format: str = "standalone"
    title: Optional[str] = None


CSS_TEMPLATE = Template("""
:root {
  --color-primary: $primary;
  --color-secondary: $secondary;
  --color-accent: $accent;
  --color-background: $background;
  --color-text: $text;
  --color-text-secondary: $text_secondary;
  --color-border: $border;

  --font-family: $font_family;
  --font-heading: $heading_font;
  --font-size-base: $base_size;
  --line-height: $line_height;

  --spacing-small: $spacing_small;
  --spacing-base: $spacing_base;
  --spacing-medium: $spacing_medium;
  --spacing-large: $spacing_large;
  --spacing-xlarge: $spacing_xlarge;

  --border-radius: $border_radius;
}

* {
  margin: 0;
  padding: 0;
  box-sizing: border-box;
}

body {
  font-family: var(--font-family);
  font-size: var(--font-size-base);
  line-height: var(--line-height);
  color: var(--color-text);
  background: var(--color-background);
}

.presentation {
  width: 100%;
  height: 100vh;
  overflow: hidden;
}

.slide {
  width: 100%;
  height: 100vh;
  display: flex;
  align-items: center;
  justify-content: center;
  padding: var(--spacing-xlarge);
  position: relative;
  $transition
}

.slide__container {
  max-width: 1200px;
  width: 100%;
  height: 100%;
  display: flex;
  flex-direction: column;
}

.slide__header {
  margin-bottom: var(--spacing-large);
}

.slide__title {
  font-family: var(--font-heading);
  font-size: $h1;
  font-weight: $weight_bold;
  color: var(--color-primary);
  line-height: 1.2;
}

.slide--title-slide .slide__title {
  font-size: $h1;
  text-align: center;
}

.slide__content {
  flex: 1;
  display: flex;
  gap: var(--spacing-large);
  align-items: center;
}

.slide__text {
  flex: 1;
}

.slide__text h2 {
  font-size: $h2;
  font-weight: $weight_bold;
  margin-bottom: var(--spacing-base);
  color: var(--color-primary);
}

.slide__text h3 {
  font-size: $h3;
  font-weight: $weight_medium;
  margin-bottom: var(--spacing-small);
  color: var(--color-secondary);
}

.slide__text p {
  margin-bottom: var(--spacing-base);
  font-size: var(--font-size-base);
  color: var(--color-text);
}

.slide__text ul,
.slide__text ol {
  margin-left: var(--spacing-medium);
  margin-bottom: var(--spacing-base);
}

.slide__text li {
  margin-bottom: var(--spacing-small);
  color: var(--color-text);
}

.slide__text strong {
  font-weight: $weight_bold;
  color: var(--color-primary);
}

.slide__text em {
  font-style: italic;
  color: var(--color-secondary);
}

.slide__assets {
  flex: 1;
  display: flex;
  align-items: center;
  justify-content: center;
}

.slide__asset img {
  width: 100%;
  height: auto;
  border-radius: var(--border-radius);
  $shadow
}

.slide--split .slide__content {
  flex-direction: row;
}

.slide--centered {
  text-align: center;
}

.slide--centered .slide__content {
  justify-content: center;
  align-items: center;
  flex-direction: column;
}

.slide--quote .slide__text {
  font-size: 2em;
  font-style: italic;
  text-align: center;
  color: var(--color-secondary);
  border-left: 5px solid var(--color-accent);
  padding-left: var(--spacing-large);
}

.slide__notes {
  position: absolute;
  bottom: -100%;
  left: 0;
  right: 0;
  padding: var(--spacing-base);
  background: rgba(0,0,0,0.8);
  color: white;
  font-size: 0.9em;
  transition: bottom 0.3s ease;
}

.slide:hover .slide__notes {
  bottom: 0;
}

@media print {
  .slide {
    page-break-after: always;
    height: auto;
    min-height: 100vh;
  }

  .slide__notes {
    position: relative;
    bottom: 0;
    background: transparent;
    color: var(--color-text);
    border-top: 1px solid var(--color-border);
    margin-top: var(--spacing-base);
  }
}

@media (max-width: 768px) {
  .slide {
    padding: var(--spacing-medium);
  }

  .slide__title {
    font-size: $h2;
  }

  .slide--split .slide__content {
    flex-direction: column;
  }
}
""")

NAVIGATION_JS = """
(function() {
  let currentSlide = 0;
  const slides = document.querySelectorAll('.slide');

  function showSlide(index) {
    if (index < 0 || index >= slides.length) return;

    slides.forEach((slide, i) => {
      slide.style.display = i === index ? 'flex' : 'none';
    });

    currentSlide = index;
    history.replaceState(null, '', '#' + currentSlide);
  }

  function nextSlide() {
    if (currentSlide < slides.length - 1) showSlide(currentSlide + 1);
  }

  function prevSlide() {
    if (currentSlide > 0) showSlide(currentSlide - 1);
  }

  document.addEventListener('keydown', (e) => {
    if (e.key === 'ArrowRight' || e.key === ' ') {
      e.preventDefault();
      nextSlide();
    } else if (e.key === 'ArrowLeft') {
      e.preventDefault();
      prevSlide();
    } else if (e.key === 'Home') {
      e.preventDefault();
      showSlide(0);
    } else if (e.key === 'End') {
      e.preventDefault();
      showSlide(slides.length - 1);
    }
  });

  let touchStartX = 0;
  document.addEventListener('touchstart', (e) => {
    touchStartX = e.touches[0].clientX;
  });

  document.addEventListener('touchend', (e) => {
    const diff = touchStartX - e.changedTouches[0].clientX;
    if (Math.abs(diff) > 50) {
      if (diff > 0) nextSlide(); else prevSlide();
    }
  });

  showSlide(parseInt(window.location.hash.slice(1)) || 0);
})();
""".strip()


def escape_html(text: str) -> str:
    return html.escape(text or "", quote=True)


def parse_markdown(content: str) -> str:
    text = H3.sub(r"<h3>\1</h3>", content)
    text = H2.sub(r"<h2>\1</h2>", text)
    text = H1.sub(r"<h1>\1</h1>", text)

    text = BOLD.sub(r"<strong>\1</strong>", text)
    text = ITALIC.sub(r"<em>\1</em>", text)

    text = BULLET.sub(r"<li>\1</li>", text)
    text = LIST_RUN.sub(r"<ul>\1</ul>", text, count=1)
    text = NUMBERED.sub(r"<li>\1</li>", text)

    paragraphs = []
    for para in text.split("\n\n"):
        if para.strip() and not para.startswith("<"):
            paragraphs.append(f"<p>{para.strip()}</p>")
        else:
            paragraphs.append(para)
    return "\n".join(paragraphs)


class HTMLRenderer:
    """Renders slides and a theme into HTML, CSS and a navigation script."""

    def __init__(self, layout_engine: Optional[LayoutEngine] = None):
        self.layout_engine = layout_engine or LayoutEngine()

    def render_presentation(
        self,
        slides: Sequence[Slide],
        theme: Theme,
        options: Optional[RenderOptions] = None
    ) -> RenderResult:
        options = options or RenderOptions()

        slides_html = "\n".join(self.render_slide(slide, index) for index, slide in enumerate(slides))
        css = self.generate_css(theme) if options.include_css else ""
        js = NAVIGATION_JS if options.include_js else ""

        if options.export_format == "standalone":
            title = options.title or (slides[0].title if slides else "") or "Presentation"
            document = self.wrap_standalone(slides_html, css, js, title)
        else:
            document = slides_html

        return RenderResult(
            html=document,
            css=css,
            js=js,
            assets=[asset.url or "" for slide in slides for asset in (slide.assets or [])],
            warnings=self.validate_slides(slides),
        )

    def render_slide(self, slide: Slide, index: int) -> str:
        classes = " ".join(self.layout_engine.get_layout_classes(slide.layout))
        notes = self._render_notes(slide.metadata.notes) if slide.metadata.notes else ""
        return f"""
    <section class="{classes}" data-slide-id="{escape_html(slide.id)}" data-slide-index="{index}">
      <div class="slide__container">
        {self._render_header(slide)}
        <div class="slide__content">
          {self._render_content(slide)}
          {self._render_assets(slide)}
        </div>
        {notes}
      </div>
    </section>"""

    def _render_header(self, slide: Slide) -> str:
        if not slide.title:
            return ""
        tag = "h1" if slide.layout == LayoutType.TITLE_SLIDE else "h2"
        return f"""
    <header class="slide__header">
      <{tag} class="slide__title">{escape_html(slide.title)}</{tag}>
    </header>"""

    def _render_content(self, slide: Slide) -> str:
        return f"""
    <div class="slide__text">
      {parse_markdown(slide.content)}
    </div>"""

    def _render_assets(self, slide: Slide) -> str:
        if not slide.assets:
            return ""

        rendered = []
        for asset in slide.assets:
            placement = asset.placement
            style = f"width: {placement.width}; height: {placement.height};"
            if placement.x is not None:
                style += f" left: {placement.x}px;"
            if placement.y is not None:
                style += f" top: {placement.y}px;"

            if asset.type == AssetType.IMAGE:
                rendered.append(f"""
        <div class="slide__asset slide__asset--image slide__asset--{placement.position}" style="{style}">
          <img src="{escape_html(asset.url or EMPTY_IMAGE)}"
               alt="{escape_html(asset.alt)}"
               loading="lazy" />
        </div>""")
            elif asset.type == AssetType.ICON:
                rendered.append(f"""
        <div class="slide__asset slide__asset--icon slide__asset--{placement.position}" style="{style}">
          <i class="icon" aria-label="{escape_html(asset.alt)}"></i>
        </div>""")
            else:
                rendered.append(f"""
        <div class="slide__asset slide__asset--{asset.type.value} slide__asset--{placement.position}" style="{style}">
          <div class="asset-placeholder">{asset.type.value}</div>
        </div>""")

        return '<div class="slide__assets">' + "\n".join(rendered) + "</div>"

    def _render_notes(self, notes: str) -> str:
        return f"""
    <aside class="slide__notes" aria-label="Speaker notes">
      {escape_html(notes)}
    </aside>"""

    def generate_css(self, theme: Theme) -> str:
        colors = theme.colors
        typography = theme.typography
        spacing = theme.spacing
        effects = theme.effects

        return CSS_TEMPLATE.substitute(
            primary=colors.primary,
            secondary=colors.secondary,
            accent=colors.accent,
            background=colors.background,
            text=colors.text,
            text_secondary=colors.text_secondary,
            border=colors.border or colors.text_secondary,
            font_family=typography.font_family,
            heading_font=typography.heading_font or typography.font_family,
            base_size=typography.base_size,
            line_height=typography.line_height,
            spacing_small=spacing.small,
            spacing_base=spacing.base,
            spacing_medium=spacing.medium,
            spacing_large=spacing.large,
            spacing_xlarge=spacing.xlarge,
            border_radius=effects.border_radius if effects else "8px",
            transition="transition: all 0.5s ease;" if effects and effects.animations else "",
            shadow="box-shadow: 0 10px 30px rgba(0,0,0,0.1);" if effects and effects.shadows else "",
            h1=typography.heading_sizes.h1,
            h2=typography.heading_sizes.h2,
            h3=typography.heading_sizes.h3,
            weight_bold=typography.weights.bold,
            weight_medium=typography.weights.medium,
        ).strip()

    def wrap_standalone(self, slides_html: str, css: str, js: str, title: str = "Presentation") -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta name="generator" content="slidegen">
  <title>{escape_html(title)}</title>
  <style>{css}</style>
</head>
<body>
  <div class="presentation">
    {slides_html}
  </div>
  <script>{js}</script>
</body>
</html>"""

    def validate_slides(self, slides: Sequence[Slide]) -> List[str]:
        warnings = []
        for number, slide in enumerate(slides, start=1):
            if not slide.title and slide.layout != LayoutType.SECTION_HEADER:
                warnings.append(f"Slide {number}: Missing title")
            if len(slide.content) > MAX_CONTENT_CHARS:
                warnings.append(f"Slide {number}: Content may be too long ({len(slide.content)} chars)")
            if slide.assets and len(slide.assets) > MAX_ASSETS:
                warnings.append(f"Slide {number}: Many assets ({len(slide.assets)}) may clutter the slide")
        return warnings
