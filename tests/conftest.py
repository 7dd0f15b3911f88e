"""Common test fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from figma_icon_sync.config import SyncConfig
from figma_icon_sync.models import RawAsset

ARROW_SVG = (
    '<svg width="24" height="24" viewBox="0 0 24 24" fill="none" '
    'xmlns="http://www.w3.org/2000/svg">'
    '<path d="M15 18L9 12L15 6" stroke="black" stroke-width="2" stroke-linecap="round"/>'
    "</svg>"
)

CIRCLE_SVG = (
    '<svg width="16" height="16" viewBox="0 0 16 16" xmlns="http://www.w3.org/2000/svg">'
    '<circle cx="8" cy="8" r="6" fill="currentColor" fill-rule="evenodd"/>'
    "</svg>"
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch) -> None:
    """Keep real tokens and .env files out of the tests."""
    monkeypatch.delenv("FIGMA_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "icons"


@pytest.fixture
def make_config(output_dir: Path) -> Callable[..., SyncConfig]:
    """Build a SyncConfig writing to output_dir, with overrides."""

    def _make(**overrides) -> SyncConfig:
        data = {"output": {"directory": output_dir, "formats": ["svg"]}}
        for key, value in overrides.items():
            if key == "output":
                data["output"].update(value)
            else:
                data[key] = value
        return SyncConfig(**data)

    return _make


@pytest.fixture
def config(make_config) -> SyncConfig:
    return make_config()


@pytest.fixture
def make_asset() -> Callable[..., RawAsset]:
    """Build a RawAsset whose Figma name is also its raw name."""

    def _make(name: str, content: str = ARROW_SVG, remote_id: str = "1:1") -> RawAsset:
        return RawAsset(name=name, original_name=name, content=content, remote_id=remote_id)

    return _make


@pytest.fixture
def arrow_svg() -> str:
    return ARROW_SVG


@pytest.fixture
def circle_svg() -> str:
    return CIRCLE_SVG
