"""Classification result models."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from mindstash.collection.models import AssetType


class ClassificationResult(BaseModel):
    """Outcome of classifying a pasted or dropped string.

    Attributes:
        type: Asset type selected by the first matching rule.
        content: Trimmed input, stored as the asset content.
        metadata: Type-specific attributes (thumbnail, author, domain).
    """

    model_config = ConfigDict(frozen=True)

    type: AssetType
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["ClassificationResult"]
