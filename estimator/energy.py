"""
Energy and CO₂ accounting.

Converts a file's size, language and structure into kWh and gCO₂e, and
aggregates stored analyses into dashboard totals.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Optional

from config import BYTES_PER_LINE
from estimator.grid import GridIntensitySource, HourlyGridIntensity
from estimator.language import classify
from schemas import AnalysisRecord, DashboardSummary, EnergyMetrics
from static_analyzer.detectors import estimate_complexity

# Nominal kWh per kilobyte of source.
KWH_PER_KB = 0.0001


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positive values (``round`` is banker's)."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def count_lines(size_bytes: int, content: Optional[str]) -> int:
    """Newline-delimited segments of *content*, else estimated from size."""
    if content:
        return len(content.split("\n"))
    return math.ceil(size_bytes / BYTES_PER_LINE)


def adjusted_energy(
    size_bytes: int,
    complexity: float,
    language_multiplier: float,
    line_count: int,
) -> float:
    """Unrounded kWh: size × complexity × language × line-count penalty."""
    base = (size_bytes / 1024) * KWH_PER_KB
    return base * complexity * language_multiplier * (1 + line_count / 1000)


def _check_inputs(size_bytes, content) -> None:
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, Real):
        raise ValueError(f"size_bytes must be a number, got {size_bytes!r}")
    if not math.isfinite(size_bytes) or size_bytes < 0:
        raise ValueError(f"size_bytes must be finite and >= 0, got {size_bytes!r}")
    if content is not None and not isinstance(content, str):
        raise TypeError(f"content must be a str, got {type(content).__name__}")


async def compute_metrics(
    size_bytes: int,
    file_name: str,
    content: Optional[str] = None,
    grid: Optional[GridIntensitySource] = None,
) -> EnergyMetrics:
    """
    Estimate energy and CO₂ for one file.

    Parameters
    ----------
    size_bytes : raw file size; must be finite and non-negative
    file_name  : only the extension is used
    content    : full text; when empty or ``None`` the line count is
                 approximated from the size and complexity is 1
    grid       : intensity source; defaults to ``HourlyGridIntensity()``

    CO₂ is derived from the unrounded energy and intensity; only the
    returned fields are rounded.
    """
    _check_inputs(size_bytes, content)
    grid = grid or HourlyGridIntensity()

    line_count = count_lines(size_bytes, content)
    complexity = estimate_complexity(content) if content else 1.0
    language   = classify(file_name)

    energy    = adjusted_energy(size_bytes, complexity, language.multiplier, line_count)
    intensity = await grid.current_intensity()
    co2       = energy * intensity

    return EnergyMetrics(
        estimated_energy=round_half_up(energy, 3),
        estimated_co2=round_half_up(co2, 2),
        grid_intensity=int(round_half_up(intensity)),
        line_count=line_count,
        language=language.tag,
        complexity=round_half_up(complexity, 2),
    )


def summarize(records: Iterable[AnalysisRecord]) -> DashboardSummary:
    """Totals across stored analyses: energy, CO₂ and mean score."""
    records = list(records)
    if not records:
        return DashboardSummary(count=0, total_energy=0.0, total_co2=0.0, average_score=0.0)

    total_energy = sum(r.estimated_energy for r in records)
    total_co2    = sum(r.estimated_co2 for r in records)
    avg_score    = sum(r.score for r in records) / len(records)

    return DashboardSummary(
        count=len(records),
        total_energy=round(total_energy, 3),
        total_co2=round(total_co2, 2),
        average_score=round(avg_score, 1),
    )


def format_metrics_report(metrics: EnergyMetrics | AnalysisRecord) -> str:
    """Return a human-readable energy & CO₂ summary string."""
    return (
        f"Language   : {metrics.language.upper()}\n"
        f"Lines      : {metrics.line_count}\n"
        f"Complexity : {metrics.complexity:.2f}\n"
        f"Energy     : {metrics.estimated_energy:.3f} kWh\n"
        f"Grid       : {metrics.grid_intensity} gCO₂/kWh\n"
        f"CO₂        : {metrics.estimated_co2:.2f} gCO2e"
    )
