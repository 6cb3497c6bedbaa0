"""Engine configuration.

Options can be passed directly or read from the [tool.dragtree] section
of the nearest pyproject.toml:

    [tool.dragtree]
    node_width = 12
    dnd_threshold = 40
"""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from dragtree.exceptions import ConfigError

LayoutAlgorithm = Literal["tree", "cluster"]


@dataclass(frozen=True)
class EngineConfig:
    """Options recognised by the layout and interaction engines.

    Attributes:
        node_width: Breadth distance between adjacent siblings, in pixels
        node_spacing: Total depth extent; depth step is
            node_spacing / (tree height + padding)
        padding: Extra depth levels of room around the tree
        depth_inset: Pixels removed from the half-padding depth shift
        dnd_threshold: Maximum distance from a drop point to a new parent
        click_delay_ms: Window in which a second press counts as a double click
        min_drag_travel: Moves at or below this distance are click jitter
        algorithm: "tree" for a tidy tree, "cluster" for a dendrogram
    """

    node_width: float = 10.0
    node_spacing: float = 640.0
    padding: float = 1.0
    depth_inset: float = 10.0
    dnd_threshold: float = 30.0
    click_delay_ms: float = 300.0
    min_drag_travel: float = 2.0
    algorithm: LayoutAlgorithm = "tree"

    def __post_init__(self) -> None:
        for name in ("node_width", "node_spacing"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)!r}")
        for name in ("padding", "depth_inset", "dnd_threshold", "click_delay_ms", "min_drag_travel"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)!r}")
        if self.algorithm not in ("tree", "cluster"):
            raise ConfigError(
                f"Unknown layout algorithm: '{self.algorithm}'\n\n"
                f"How to fix: use 'tree' or 'cluster'"
            )

    def replace(self, **overrides: Any) -> EngineConfig:
        """Return a copy with the given options changed."""
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_mapping(cls, section: dict[str, Any]) -> EngineConfig:
        """Build from a config mapping, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(
                f"Unknown dragtree option(s): {', '.join(unknown)}\n\n"
                f"Known options: {', '.join(sorted(known))}"
            )
        return cls(**section)


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None, **overrides: Any) -> EngineConfig:
    """Load [tool.dragtree] from the nearest pyproject.toml.

    Returns the default config if there is no pyproject.toml or no
    [tool.dragtree] section. Keyword overrides win over file values.
    """
    section: dict[str, Any] = {}
    path = find_pyproject(start)
    if path is not None:
        if sys.version_info >= (3, 11):
            import tomllib
        else:
            import tomli as tomllib

        with open(path, "rb") as f:
            data = tomllib.load(f)
        section = dict(data.get("tool", {}).get("dragtree", {}))

    section.update({k: v for k, v in overrides.items() if v is not None})
    return EngineConfig.from_mapping(section)
