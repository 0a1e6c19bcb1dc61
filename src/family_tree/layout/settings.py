from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

from family_tree.config import FTConfig, get_config


@dataclass(frozen=True)
class LayoutSettings:
    """
    Fixed content-space dimensions used by the layout engine.

    x positions are the left edge of a node's slot; y is
    ``layer_index * row_height``.
    """
    node_width: float = 140.0
    node_height: float = 100.0
    row_height: float = 180.0
    h_spacing: float = 40.0
    spouse_gap: float = 20.0

    @property
    def couple_width(self) -> float:
        return 2 * self.node_width + self.spouse_gap

    @classmethod
    def from_config(cls, cfg: Optional[FTConfig] = None) -> "LayoutSettings":
        cfg = cfg or get_config()
        section: dict[str, Any] = cfg.layout or {}
        values = {}
        for f in fields(cls):
            if section.get(f.name) is not None:
                values[f.name] = float(section[f.name])
        return cls(**values)
