from slidegen.agents.generation.html_renderer import HTMLRenderer, RenderOptions, escape_html, parse_markdown
from slidegen.config.design import THEMES
from slidegen.models.slide import Asset, AssetPlacement, AssetSize, AssetType, LayoutType, Slide, SlideMetadata


def slide(index, title="Title", content="Body", layout=LayoutType.CONTENT_ONLY, assets=None, notes=None):
    return Slide(
        id=f"slide-{index}",
        title=title,
        content=content,
        layout=layout,
        theme=THEMES["professional"],
        assets=assets,
        metadata=SlideMetadata(order=index, notes=notes),
    )


def test_escape_html():
    assert escape_html('<b>"Tom" & \'Jerry\'</b>') == "&lt;b&gt;&quot;Tom&quot; &amp; &#x27;Jerry&#x27;&lt;/b&gt;"
    assert escape_html(None) == ""


def test_parse_markdown_headings_emphasis_and_lists():
    html = parse_markdown("### Small\n\nSome **bold** and *italic*\n\n- one\n- two")

    assert "<h3>Small</h3>" in html
    assert "<p>Some <strong>bold</strong> and <em>italic</em></p>" in html
    assert "<ul><li>one</li>\n<li>two</li></ul>" in html


def test_parse_markdown_numbered_items_are_not_wrapped():
    html = parse_markdown("1. first\n2. second")
    assert "<li>first</li>" in html
    assert "<ul>" not in html


def test_standalone_document_uses_theme_and_title():
    renderer = HTMLRenderer()
    theme = THEMES["modern"]

    result = renderer.render_presentation([slide(0, "Intro", layout=LayoutType.TITLE_SLIDE)], theme, RenderOptions(title="A & B"))

    assert result.html.startswith("<!DOCTYPE html>")
    assert "<title>A &amp; B</title>" in result.html
    assert "--color-primary: #6366f1;" in result.css
    assert '<h1 class="slide__title">Intro</h1>' in result.html
    assert "ArrowRight" in result.js


def test_fragment_without_css_or_js():
    result = HTMLRenderer().render_presentation(
        [slide(0)], THEMES["minimal"], RenderOptions(include_css=False, include_js=False, export_format="fragment")
    )

    assert not result.html.lstrip().startswith("<!DOCTYPE")
    assert result.css == ""
    assert result.js == ""
    assert 'data-slide-index="0"' in result.html


def test_assets_notes_and_escaping():
    image = Asset(
        type=AssetType.IMAGE,
        url="https://img.test/a.png?x=1&y=2",
        description="Chart",
        alt='A "quoted" alt',
        placement=AssetPlacement(position="right", width="45%", height="auto", x=10),
        size=AssetSize(width=100, height=100, unit="%"),
    )
    chart = image.model_copy(update={"type": AssetType.CHART, "url": None})

    result = HTMLRenderer().render_presentation(
        [slide(0, "<script>x</script>", assets=[image, chart], notes="Say <hello>")], THEMES["professional"]
    )

    assert "&lt;script&gt;x&lt;/script&gt;" in result.html
    assert 'src="https://img.test/a.png?x=1&amp;y=2"' in result.html
    assert 'alt="A &quot;quoted&quot; alt"' in result.html
    assert "left: 10.0px;" in result.html
    assert '<div class="asset-placeholder">chart</div>' in result.html
    assert "Say &lt;hello&gt;" in result.html
    assert result.assets == ["https://img.test/a.png?x=1&y=2", ""]


def test_renderer_warnings():
    many = [
        Asset(
            type=AssetType.ICON,
            description="icon",
            alt="icon",
            placement=AssetPlacement(position="left", width="64px", height="64px"),
            size=AssetSize(width=64, height=64),
        )
    ] * 4
    slides = [
        slide(0, title=""),
        slide(1, title="", layout=LayoutType.SECTION_HEADER),
        slide(2, content="y" * 501),
        slide(3, assets=many),
    ]

    assert HTMLRenderer().validate_slides(slides) == [
        "Slide 1: Missing title",
        "Slide 3: Content may be too long (501 chars)",
        "Slide 4: Many assets (4) may clutter the slide",
    ]
