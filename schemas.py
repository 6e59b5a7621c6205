"""
Value objects exchanged between the estimator, the reviewers and the
results store.

Attributes are snake_case; the serialised form (``by_alias=True``) uses the
camelCase keys of the storage contract, e.g. ``estimatedEnergy``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Frozen(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class FileSample(_Frozen):
    """A file handed to the engine by the acquisition layer."""

    size_bytes: int = Field(..., ge=0)
    file_name:  str
    content:    Optional[str] = None


class LanguageProfile(_Frozen):
    tag:        str
    multiplier: float = Field(..., gt=0)


class EnergyMetrics(_Frozen):
    """Energy / CO₂ estimate for one file."""

    estimated_energy: float = Field(..., ge=0, description="kWh, 3 decimals")
    estimated_co2:    float = Field(..., ge=0, alias="estimatedCO2", description="gCO2e, 2 decimals")
    grid_intensity:   int   = Field(..., ge=0, description="gCO2/kWh sample used")
    line_count:       int   = Field(..., ge=0)
    language:         str
    complexity:       float = Field(..., ge=1.0, le=3.0)
    energy_unit:      str   = "kWh"
    co2_unit:         str   = "gCO2e"


class ReviewResult(_Frozen):
    """Score (1–10, 10 = most efficient) plus three pieces of advice."""

    score:        int = Field(..., ge=1, le=10, strict=True)
    bottleneck:   str
    optimization: str
    improvement:  str


class AnalysisRecord(_Frozen):
    """One stored analysis: metrics, review and file facts."""

    file_name:        str   = Field(..., min_length=1)
    file_size:        int   = Field(..., ge=0)
    estimated_energy: float = Field(..., ge=0)
    estimated_co2:    float = Field(..., ge=0, alias="estimatedCO2")
    grid_intensity:   int   = Field(..., ge=0)
    line_count:       int   = Field(..., ge=0)
    language:         str
    complexity:       float
    score:            int   = Field(..., ge=0, le=10)
    bottleneck:       str
    optimization:     str
    improvement:      str
    created_at:       str
    user_id:          Optional[str] = None

    @classmethod
    def from_parts(
        cls,
        sample: FileSample,
        metrics: EnergyMetrics,
        review: ReviewResult,
        created_at: str,
        user_id: Optional[str] = None,
    ) -> "AnalysisRecord":
        return cls(
            file_name=sample.file_name,
            file_size=sample.size_bytes,
            created_at=created_at,
            user_id=user_id,
            **metrics.model_dump(exclude={"energy_unit", "co2_unit"}),
            **review.model_dump(),
        )


class DashboardSummary(_Frozen):
    count:         int
    total_energy:  float
    total_co2:     float
    average_score: float
