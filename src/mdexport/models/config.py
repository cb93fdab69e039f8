"""Configuration models for mdexport."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from reportlab.lib.pagesizes import A4


class HistoryConfig(BaseModel):
    """Configuration for the recent-document history store."""

    max_items: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum number of history items kept (oldest dropped first)"
    )

    storage_dir: str = Field(
        default="~/.local/share/mdexport",
        description="Directory holding persisted history and last-session state"
    )

    @field_validator("storage_dir")
    @classmethod
    def expand_storage_dir(cls, v: str) -> str:
        """Expand ~ in the storage directory."""
        return str(Path(v).expanduser())

    model_config = {"frozen": True}


class RenderConfig(BaseModel):
    """Configuration for HTML output."""

    theme: Literal["light", "dark"] = Field(
        default="light",
        description="Stylesheet variant for HTML export"
    )

    title: str = Field(
        default="Markdown Export",
        description="Document <title> for HTML and Word exports"
    )

    model_config = {"frozen": True}


class FontConfig(BaseModel):
    """Fonts for paginated output.

    Each style slot names either one of the standard PDF fonts or a path to
    a TrueType (.ttf) file. Characters a slot font has no glyph for are
    drawn with the first fallback font that has one.
    """

    regular: str = Field(default="Helvetica")
    bold: str = Field(default="Helvetica-Bold")
    italic: str = Field(default="Helvetica-Oblique")
    bold_italic: str = Field(default="Helvetica-BoldOblique")
    mono: str = Field(default="Courier")
    mono_bold: str = Field(default="Courier-Bold")

    fallback_fonts: tuple[str, ...] = Field(
        default=(),
        description="TrueType files tried in order for characters the slot fonts cannot show"
    )

    search_system_fonts: bool = Field(
        default=True,
        description="Also try well-known system Unicode fonts as fallbacks"
    )

    cid_fallback: Optional[str] = Field(
        default="STSong-Light",
        description="Built-in CJK CID font used as the last fallback (None disables it)"
    )

    model_config = {"frozen": True}


class PageLayout(BaseModel):
    """Page geometry and font metrics for paginated output.

    Defaults model an A4 page with symmetric one-inch margins.
    """

    page_width: float = Field(default=A4[0], gt=0, description="Page width in points")
    page_height: float = Field(default=A4[1], gt=0, description="Page height in points")
    margin: float = Field(default=72.0, ge=0, description="Symmetric page margin in points")
    body_font_size: float = Field(default=12.0, gt=0)
    code_font_size: float = Field(default=10.0, gt=0)
    heading_font_sizes: tuple[float, float, float, float, float, float] = Field(
        default=(24.0, 20.0, 18.0, 16.0, 14.0, 12.0),
        description="Font sizes for heading levels 1..6"
    )
    leading: float = Field(default=1.25, ge=1.0, description="Line height as a multiple of font size")
    block_spacing: float = Field(default=8.0, ge=0, description="Vertical gap between blocks")
    rule_height: float = Field(default=12.0, gt=0, description="Height reserved for a horizontal rule")
    quote_indent: float = Field(default=12.0, ge=0)
    list_indent: float = Field(default=18.0, ge=0)
    fonts: FontConfig = Field(default_factory=FontConfig, description="Fonts for text and fallbacks")

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def content_top(self) -> float:
        return self.margin

    @property
    def content_bottom(self) -> float:
        return self.page_height - self.margin

    def heading_size(self, level: int) -> float:
        return self.heading_font_sizes[level - 1]

    @model_validator(mode="after")
    def margin_fits(self) -> "PageLayout":
        """Reject margins that leave no content box."""
        if self.margin * 2 >= min(self.page_width, self.page_height):
            raise ValueError(f"Margin {self.margin} leaves no content area")
        return self

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for mdexport."""

    history: HistoryConfig = Field(default_factory=HistoryConfig, description="History store settings")
    render: RenderConfig = Field(default_factory=RenderConfig, description="HTML render settings")
    document: PageLayout = Field(default_factory=PageLayout, description="Paginated document settings")

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Example format:\n\n"
                f"history:\n"
                f"  max_items: 50\n"
                f"  storage_dir: ~/.local/share/mdexport\n\n"
                f"render:\n"
                f"  theme: light\n"
            )

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {path}")

        return cls(**data)

    model_config = {"frozen": True}

