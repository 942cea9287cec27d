"""Layer models for priority-ordered template assembly."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class LayerKind(str, Enum):
    """What a layer contributes."""

    BASE = "base"
    THEME = "theme"
    CONTENT = "content"
    BEHAVIOR = "behavior"


class Layer(BaseModel):
    """A prioritized partial template fragment.

    ``content`` is an opaque fragment shaped like (part of) a template
    document; it is deep-merged with the other layers in ascending priority.
    """

    kind: LayerKind = Field(description="What the layer contributes")
    priority: float = Field(description="Higher priority is applied later and wins")
    content: Dict[str, Any] = Field(default_factory=dict, description="Partial template fragment")
    source: str = Field(description="Provenance identifier, e.g., 'theme:corporate'")
