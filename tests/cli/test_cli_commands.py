"""Tests for the figma-icon-sync CLI."""

import json
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from figma_icon_sync.cli.commands import sync as sync_command
from figma_icon_sync.cli.commands import validate as validate_command
from figma_icon_sync.cli.commands.init import parse_formats
from figma_icon_sync.cli.main import app
from figma_icon_sync.models import RawAsset
from figma_icon_sync.sync import BatchReport

runner = CliRunner()

ICON_SVG = '<svg viewBox="0 0 24 24"><path d="M0 0"/></svg>'


class FakeFigmaClient:
    """Stands in for FigmaClient with a fixed set of components."""

    names = ["Arrow Left", "Circle"]

    def __init__(self, access_token: str, file_key: str, **kwargs):
        self.access_token = access_token
        self.file_key = file_key

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def get_file(self):
        return {"name": "Design System"}

    async def find_icon_nodes(self, node_id=None):
        return [{"id": f"1:{i}", "name": name} for i, name in enumerate(self.names)]

    async def get_icons(self, node_id=None, name_filter=None):
        return [
            RawAsset(name=node["name"], original_name=node["name"], content=ICON_SVG, remote_id=node["id"])
            for node in await self.find_icon_nodes(node_id)
        ]


@pytest.fixture
def captured(monkeypatch):
    output = StringIO()
    monkeypatch.setattr(sync_command, "console", Console(file=output, width=200))
    return output


@pytest.fixture
def fake_figma(monkeypatch):
    monkeypatch.setattr(sync_command, "FigmaClient", FakeFigmaClient)
    monkeypatch.setattr(validate_command, "FigmaClient", FakeFigmaClient)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / ".figma-icon-sync.json"
    path.write_text(
        json.dumps(
            {
                "figma": {"fileKey": "KEY"},
                "output": {"directory": "./icons", "formats": ["svg", "react"]},
                "naming": {"transform": "kebab-case"},
                "git": {"enabled": True},
            }
        )
    )
    return path


def test_parse_formats():
    assert parse_formats("svg, React") == ["svg", "react"]
    assert parse_formats("") == ["svg"]


def test_parse_formats_rejects_unknown():
    import typer

    with pytest.raises(typer.BadParameter):
        parse_formats("svg,png")


def test_display_summary(captured):
    report = BatchReport(
        added=["icons/a.svg"],
        updated=["icons/b.svg", "icons/c.svg"],
        unchanged=["icons/d.svg"],
    )
    report.add_error("broken", "Invalid SVG")

    sync_command.display_sync_summary(report)

    text = captured.getvalue()
    assert "Added: 1 icon(s)" in text
    assert "Updated: 2 icon(s)" in text
    assert "Unchanged: 1 icon(s)" in text
    assert "Deleted" not in text
    assert "broken: Invalid SVG" in text


def test_display_summary_up_to_date(captured):
    sync_command.display_sync_summary(BatchReport(unchanged=["icons/a.svg"]))
    assert "Everything up to date" in captured.getvalue()


def test_display_detailed_results(captured):
    sync_command.display_detailed_sync_results(
        BatchReport(added=["icons/b.svg", "icons/a.svg"], deleted=["icons/old.svg"])
    )
    text = captured.getvalue()
    assert "Added" in text
    assert text.index("icons/a.svg") < text.index("icons/b.svg")
    assert "icons/old.svg" in text


def test_init_creates_config(tmp_path: Path):
    result = runner.invoke(app, ["init"], input="KEY123\n1:2\n./src/icons\nsvg,react\n")

    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / ".figma-icon-sync.json").read_text())
    assert data["figma"] == {"fileKey": "KEY123", "nodeId": "1:2"}
    assert data["output"]["directory"] == "./src/icons"
    assert data["output"]["formats"] == ["svg", "react"]


def test_init_refuses_to_overwrite(config_file: Path):
    before = config_file.read_text()
    result = runner.invoke(app, ["init"], input="OTHER\n\n\n\n")

    assert result.exit_code == 1
    assert config_file.read_text() == before


def test_sync_without_config():
    result = runner.invoke(app, ["sync"])
    assert result.exit_code == 1


def test_sync_without_token(config_file: Path, fake_figma):
    result = runner.invoke(app, ["sync", "--no-git"])
    assert result.exit_code == 1
    assert not Path("icons").exists()


def test_sync_writes_icons(config_file: Path, fake_figma, tmp_path: Path):
    result = runner.invoke(
        app, ["sync", "--no-git", "--verbose"], env={"FIGMA_ACCESS_TOKEN": "secret"}
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in (tmp_path / "icons").iterdir()) == [
        "arrow-left.svg",
        "arrow-left.tsx",
        "circle.svg",
        "circle.tsx",
    ]
    assert "Sync completed successfully" in result.output

    again = runner.invoke(app, ["sync", "--no-git"], env={"FIGMA_ACCESS_TOKEN": "secret"})
    assert again.exit_code == 0
    assert "Everything up to date" in again.output


def test_validate(config_file: Path, fake_figma):
    result = runner.invoke(app, ["validate"], env={"FIGMA_ACCESS_TOKEN": "secret"})

    assert result.exit_code == 0, result.output
    assert "Connected to Figma file: Design System" in result.output
    assert "Found 2 potential icon(s)" in result.output
    assert "- Arrow Left" in result.output


def test_validate_without_token(config_file: Path, fake_figma):
    result = runner.invoke(app, ["validate"])
    assert result.exit_code == 1
