"""Configuration management for figma-icon-sync."""

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from figma_icon_sync.exceptions import ConfigError
from figma_icon_sync.models import OutputKind

CONFIG_FILENAMES = (
    ".figma-icon-sync.json",
    ".figma-icon-sync.yml",
    ".figma-icon-sync.yaml",
)
DEFAULT_BRANCH = "chore/sync-figma-icons"
DEFAULT_COMMIT_MESSAGE = "chore: sync Figma icons"
DEFAULT_PR_TITLE = "Sync Figma Icons"
DEFAULT_PR_BODY = "This PR was automatically generated by figma-icon-sync."


class _ConfigModel(BaseModel):
    """Accepts both snake_case field names and the camelCase keys used in config files."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NamingTransform(str, Enum):
    PRESERVE = "preserve"
    KEBAB_CASE = "kebab-case"
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"


class NamingPolicy(_ConfigModel):
    """How Figma node names become file names."""

    transform: NamingTransform = NamingTransform.PRESERVE
    sanitize: bool = Field(default=True, description="Replace filesystem-unsafe characters")


class ExportType(str, Enum):
    NAMED = "named"
    DEFAULT = "default"


class ComponentPolicy(_ConfigModel):
    """Settings for generated React components."""

    typescript: bool = True
    export_type: ExportType = Field(default=ExportType.NAMED, alias="exportType")
    component_prefix: Optional[str] = Field(default=None, alias="componentPrefix")

    @property
    def extension(self) -> str:
        return OutputKind.REACT.extension(self.typescript)


class OptimizationPolicy(_ConfigModel):
    """SVG optimization settings.

    Plugins are svgo-style names ("removeComments") or mappings such as
    {"name": "cleanupNumericValues", "params": {"floatPrecision": 3}}.
    """

    enabled: bool = False
    plugins: List[Union[str, Dict[str, Any]]] = Field(default_factory=list)

    @field_validator("plugins")
    @classmethod
    def validate_plugin_params(
        cls, v: List[Union[str, Dict[str, Any]]]
    ) -> List[Union[str, Dict[str, Any]]]:
        for plugin in v:
            if isinstance(plugin, str):
                continue
            params = plugin.get("params") or {}
            if not isinstance(params, dict):
                raise ValueError(f"params of plugin {plugin.get('name')!r} must be a mapping")
            precision = params.get("floatPrecision")
            if precision is not None:
                try:
                    int(precision)
                except (TypeError, ValueError):
                    raise ValueError(f"floatPrecision must be an integer, got {precision!r}")
        return v


class OutputConfig(_ConfigModel):
    directory: Path = Path("./icons")
    formats: List[OutputKind] = Field(default_factory=lambda: [OutputKind.SVG])
    react: ComponentPolicy = Field(default_factory=ComponentPolicy)

    @field_validator("formats")
    @classmethod
    def dedupe_formats(cls, v: List[OutputKind]) -> List[OutputKind]:
        """Keep the first occurrence of each format."""
        return list(dict.fromkeys(v))


class FilterConfig(_ConfigModel):
    """Regular expressions matched (searched) against the Figma node name."""

    include_pattern: Optional[str] = Field(default=None, alias="includePattern")
    exclude_pattern: Optional[str] = Field(default=None, alias="excludePattern")

    @field_validator("include_pattern", "exclude_pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid regular expression {v!r}: {e}")
        return v or None

    def accepts(self, name: str) -> bool:
        """Exclude wins over include when both match."""
        if self.exclude_pattern and re.search(self.exclude_pattern, name):
            return False
        if self.include_pattern:
            return re.search(self.include_pattern, name) is not None
        return True


class FigmaConfig(_ConfigModel):
    file_key: str = Field(default="", alias="fileKey")
    node_id: Optional[str] = Field(default=None, alias="nodeId")
    access_token: Optional[str] = Field(default=None, alias="accessToken")


class GitConfig(_ConfigModel):
    enabled: bool = False
    branch: str = DEFAULT_BRANCH
    base_branch: str = Field(default="main", alias="baseBranch")
    commit_message: str = Field(default=DEFAULT_COMMIT_MESSAGE, alias="commitMessage")
    create_pr: bool = Field(default=False, alias="createPR")
    pr_title: str = Field(default=DEFAULT_PR_TITLE, alias="prTitle")
    pr_body: str = Field(default=DEFAULT_PR_BODY, alias="prBody")


class SyncConfig(BaseSettings):
    """Configuration for one figma-icon-sync project."""

    figma: FigmaConfig = Field(default_factory=FigmaConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    naming: NamingPolicy = Field(default_factory=NamingPolicy)
    git: GitConfig = Field(default_factory=GitConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    svgo: OptimizationPolicy = Field(default_factory=OptimizationPolicy)
    max_workers: int = Field(default=8, ge=1, description="Concurrent file writes per batch")

    # Secrets are read from the environment (or .env), never written to the config file
    figma_access_token: Optional[str] = Field(default=None, validation_alias="FIGMA_ACCESS_TOKEN")
    github_token: Optional[str] = Field(default=None, validation_alias="GITHUB_TOKEN")

    model_config = SettingsConfigDict(
        env_prefix="FIGMA_ICON_SYNC_",
        env_nested_delimiter="__",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def access_token(self) -> Optional[str]:
        """Figma token from the config file, falling back to FIGMA_ACCESS_TOKEN."""
        return self.figma.access_token or self.figma_access_token


def find_config_file(directory: Optional[Path] = None) -> Optional[Path]:
    directory = directory or Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _parse_config_text(path: Path, text: str) -> Dict[str, Any]:
    try:
        if path.suffix in (".yml", ".yaml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain an object at the top level")
    return data


def load_config(path: Optional[Path] = None) -> SyncConfig:
    """
    Load and validate the project configuration.

    Args:
        path: Explicit config file. When omitted, the current directory is
            searched for one of CONFIG_FILENAMES.

    Raises:
        ConfigError: If no file is found, it cannot be parsed, or it is invalid
    """
    path = path or find_config_file()
    if path is None:
        raise ConfigError(
            f"No configuration file found (looked for {', '.join(CONFIG_FILENAMES)}). "
            "Run 'figma-icon-sync init' to create one."
        )
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    data = _parse_config_text(path, path.read_text(encoding="utf-8"))
    try:
        config = SyncConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e

    if not config.figma.file_key:
        raise ConfigError(f"figma.fileKey is required in {path}")

    logger.debug(f"Loaded configuration from {path}")
    return config


def create_config_file(
    path: Optional[Path] = None,
    *,
    file_key: str = "",
    node_id: Optional[str] = None,
    directory: str = "./icons",
    formats: Optional[List[str]] = None,
) -> Path:
    """Write a starter configuration file and return its path.

    Raises:
        ConfigError: If the file already exists
    """
    path = path or Path.cwd() / CONFIG_FILENAMES[0]
    if path.exists():
        raise ConfigError(f"Configuration file already exists: {path}")

    starter = {
        "figma": {"fileKey": file_key, "nodeId": node_id or None},
        "output": {
            "directory": directory,
            "formats": formats or [OutputKind.SVG.value],
            "react": ComponentPolicy().model_dump(mode="json", by_alias=True),
        },
        "naming": NamingPolicy(transform=NamingTransform.KEBAB_CASE).model_dump(mode="json"),
        "git": GitConfig().model_dump(mode="json", by_alias=True),
        "filters": {"includePattern": None, "excludePattern": None},
        "svgo": OptimizationPolicy().model_dump(mode="json"),
    }

    if path.suffix in (".yml", ".yaml"):
        text = yaml.safe_dump(starter, sort_keys=False)
    else:
        text = json.dumps(starter, indent=2) + "\n"
    path.write_text(text, encoding="utf-8")
    logger.info(f"Created configuration file {path}")
    return path
