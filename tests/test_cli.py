from slidegen import __main__ as cli
from slidegen.agents.exceptions import GenerationError

from conftest import build_generator


def test_parser_defaults():
    args = cli.build_parser().parse_args(["Ocean currents"])
    assert args.topic == "Ocean currents"
    assert args.slides is None
    assert args.no_images is False
    assert args.output == "presentation.html"


def test_cli_writes_html_and_markdown(tmp_path, monkeypatch, gateway, asset_source, pipeline_config):
    monkeypatch.setattr(cli, "create_slide_generator", lambda: build_generator(gateway, asset_source, pipeline_config))
    output = tmp_path / "deck" / "out.html"
    markdown = tmp_path / "deck.md"

    code = cli.main([
        "AI in Healthcare", "--slides", "10", "--tone", "casual", "--no-images",
        "--output", str(output), "--markdown", str(markdown), "--log-level", "WARNING",
    ])

    assert code == 0
    html = output.read_text(encoding="utf-8")
    assert "<title>AI in Healthcare</title>" in html
    assert "--color-primary: #ff6b6b;" in html
    assert markdown.read_text(encoding="utf-8").count("<!-- Slide ") == 12
    assert asset_source.queries == []


def test_cli_reports_generation_failure(tmp_path, monkeypatch):
    class FailingGenerator:
        async def generate_with_progress(self, request, on_progress):
            raise GenerationError(request.topic, RuntimeError("boom"), 0.1)

    monkeypatch.setattr(cli, "create_slide_generator", lambda: FailingGenerator())
    assert cli.main(["Anything", "--output", str(tmp_path / "x.html"), "--log-level", "ERROR"]) == 1


def test_cli_rejects_invalid_request(tmp_path):
    assert cli.main(["Anything", "--slides", "0", "--output", str(tmp_path / "x.html"), "--log-level", "ERROR"]) == 2
