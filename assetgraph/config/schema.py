"""Configuration schema definitions using Pydantic for validation.

This module provides strongly-typed configuration classes for the
resolver, the layout engine and the visibility filter. Using Pydantic
ensures configuration errors are caught early with clear error messages.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from assetgraph.graph.filters import FilterSettings
from assetgraph.graph.models.classification import RESERVED_PREFIXES


class ResolverConfig(BaseModel):
    """Configuration for dependency resolution.

    Attributes:
        max_depth: Default traversal budget (-1 = unlimited, 0 = root only).
        reserved_prefixes: Path prefixes that are never traversed.
    """

    max_depth: int = Field(default=-1, ge=-1)
    reserved_prefixes: List[str] = Field(default_factory=lambda: list(RESERVED_PREFIXES))

    @field_validator("reserved_prefixes")
    @classmethod
    def validate_prefixes(cls, v: List[str]) -> List[str]:
        """Validate that prefixes are non-empty strings."""
        for prefix in v:
            if not prefix or not isinstance(prefix, str):
                raise ValueError(f"Invalid reserved prefix: {prefix!r}")
        return v


class LayoutConfig(BaseModel):
    """Configuration for the layout engine.

    Attributes:
        node_width: Width of a node rectangle.
        node_height: Height of a node rectangle.
        horizontal_spacing: Gap between depth columns.
        vertical_spacing: Gap between nodes within a column.
        radial_radius: Ring spacing for the radial layout.
    """

    node_width: float = Field(default=200.0, gt=0)
    node_height: float = Field(default=60.0, gt=0)
    horizontal_spacing: float = Field(default=80.0, ge=0)
    vertical_spacing: float = Field(default=40.0, ge=0)
    radial_radius: float = Field(default=200.0, gt=0)

    @property
    def column_step(self) -> float:
        return self.node_width + self.horizontal_spacing

    @property
    def row_step(self) -> float:
        return self.node_height + self.vertical_spacing


class GraphSettings(BaseModel):
    """Top-level configuration for a graph session.

    Attributes:
        resolver: Resolver configuration.
        layout: Layout configuration.
        filters: Initial visibility filter.
    """

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    filters: FilterSettings = Field(default_factory=FilterSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSettings":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            GraphSettings instance.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()
