"""
Models for API payloads and match results.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class ConfidenceEvaluation(BaseModel):
    """Parsed response of the confidence scoring call."""

    model_config = ConfigDict(strict=True)

    confidence_score: StrictInt = Field(..., ge=1, le=100, description="Match confidence (1-100)")
    reasoning: StrictStr = Field(..., description="Why the score was given")


@dataclass
class MatchOutcome:
    """Result of the most recent find() call."""

    matched_record: Optional[dict]  # None if suppressed by the threshold
    confidence_score: Optional[int] = None
    confidence_reasoning: Optional[str] = None
