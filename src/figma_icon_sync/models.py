"""Core data models shared across figma-icon-sync components."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutputKind(str, Enum):
    """File representations an icon can be written as.

    - svg: the (optionally optimized) vector graphic itself
    - react: a generated React component wrapping the graphic
    """

    SVG = "svg"
    REACT = "react"

    def extension(self, typescript: bool = True) -> str:
        """File extension for this kind, including the leading dot."""
        if self is OutputKind.REACT:
            return ".tsx" if typescript else ".jsx"
        return ".svg"


# Every extension a kind can produce. Files with these extensions in the
# output directory are treated as managed by the sync.
MANAGED_EXTENSIONS = frozenset({".svg", ".tsx", ".jsx"})


class FileStatus(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DELETED = "deleted"


class RawAsset(BaseModel):
    """A single icon fetched from Figma, before any local transformation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Name used to derive the target file name")
    original_name: str = Field(description="Name of the node as it appears in Figma")
    content: str = Field(description="Raw SVG markup exported by Figma")
    remote_id: str = Field(description="Figma node id")


@dataclass(frozen=True)
class DesiredFile:
    """A file the current batch wants to exist in the output directory.

    file_name is relative to the output directory; source is the original
    Figma name of the icon it was rendered from.
    """

    file_name: str
    content: str
    base_name: str
    kind: OutputKind
    source: str
