"""
End-to-end analysis pipeline.

Pipeline stages
---------------
1. Ingest  — load one file or walk a directory into ``FileSample`` objects
2. Measure — energy / CO₂ metrics for every file, concurrently
3. Review  — LLM review with heuristic fallback (or heuristic only)
4. Report  — rich table to console
5. Persist — append ``AnalysisRecord`` rows to the results store
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from estimator.energy import compute_metrics
from estimator.grid import GridIntensitySource, HourlyGridIntensity
from ingestor.files import collect
from llm.reviewer import FallbackReviewer, build_reviewer
from schemas import AnalysisRecord, EnergyMetrics, FileSample, ReviewResult
from store.results import ResultStore

console = Console()

# Log levels used by the callback
LOG_INFO    = "info"
LOG_SUCCESS = "success"
LOG_WARNING = "warning"
LOG_STAGE   = "stage"

_STYLES = {
    LOG_SUCCESS: "bold green",
    LOG_WARNING: "yellow",
    LOG_STAGE:   "bold cyan",
}


def _score_colour(score: int) -> str:
    if score >= 7:
        return "green"
    if score >= 5:
        return "yellow"
    return "red"


class Analyzer:
    """
    Ties all pipeline stages together.

    Parameters
    ----------
    path          : File or directory to analyse.
    use_llm       : Try the LLM reviewer first (needs OPENROUTER_API_KEY).
    user_id       : Optional owner recorded on every stored record.
    save          : Persist records to *store*.
    grid          : Intensity source; defaults to the hourly oracle.
    store         : Results store; defaults to ``ResultStore()``.
    log_callback  : Optional callable(level: str, message: str) for streaming
                    logs to another front end.
    """

    def __init__(
        self,
        path: str,
        use_llm: bool = True,
        user_id: Optional[str] = None,
        save: bool = True,
        grid: Optional[GridIntensitySource] = None,
        store: Optional[ResultStore] = None,
        log_callback: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.path         = Path(path)
        self.use_llm      = use_llm
        self.user_id      = user_id
        self.save         = save
        self.grid         = grid or HourlyGridIntensity()
        self.store        = store or ResultStore()
        self.log_callback = log_callback
        self.reviewer     = build_reviewer(use_llm=use_llm, on_fallback=self._on_fallback)
        self.samples: List[FileSample] = []
        self.records: List[AnalysisRecord] = []

    def _log(self, level: str, message: str) -> None:
        """Emit to rich console AND to the callback if provided."""
        style = _STYLES.get(level)
        text  = escape(message)
        console.print(f"  [{style}]{text}[/{style}]" if style else f"  {text}")
        if self.log_callback:
            self.log_callback(level, message)

    def _on_fallback(self, exc: Exception) -> None:
        self._log(LOG_WARNING, f"LLM review failed ({type(exc).__name__}: {exc}) — using heuristic review")

    # ── Stage 1 ───────────────────────────────────────────────────────────────

    def ingest(self) -> List[FileSample]:
        self._log(LOG_STAGE, "Stage 1 — Ingesting")
        self.samples = collect(self.path)
        self._log(LOG_INFO, f"Found {len(self.samples)} source file(s).")
        return self.samples

    # ── Stage 2 ───────────────────────────────────────────────────────────────

    async def _measure_all(self) -> List[EnergyMetrics]:
        return list(await asyncio.gather(*(
            compute_metrics(s.size_bytes, s.file_name, s.content, grid=self.grid)
            for s in self.samples
        )))

    def measure(self) -> List[EnergyMetrics]:
        self._log(LOG_STAGE, "Stage 2 — Estimating energy")
        metrics = asyncio.run(self._measure_all())
        total = sum(m.estimated_co2 for m in metrics)
        self._log(LOG_INFO, f"Estimated {total:.2f} gCO2e across {len(metrics)} file(s).")
        return metrics

    # ── Stage 3 ───────────────────────────────────────────────────────────────

    def review(self) -> List[ReviewResult]:
        mode = "LLM + heuristic fallback" if isinstance(self.reviewer, FallbackReviewer) else "heuristic"
        self._log(LOG_STAGE, f"Stage 3 — Reviewing  (mode: {mode})")
        if self.use_llm and mode == "heuristic":
            self._log(LOG_WARNING, "OPENROUTER_API_KEY not set — LLM review disabled.")

        reviews: List[ReviewResult] = []
        for i, s in enumerate(self.samples, 1):
            self._log(LOG_INFO, f"[{i}/{len(self.samples)}] Reviewing `{s.file_name}`")
            reviews.append(self.reviewer.review(s.content or ""))
        return reviews

    # ── Stage 4 ───────────────────────────────────────────────────────────────

    def report(self, records: List[AnalysisRecord]) -> None:
        self._log(LOG_STAGE, "Stage 4 — Report")

        table = Table(title="Energy & CO₂ Estimate", expand=True)
        table.add_column("File",        style="cyan", no_wrap=True)
        table.add_column("Lang",        style="magenta")
        table.add_column("Lines",       justify="right")
        table.add_column("Complexity",  justify="right")
        table.add_column("kWh",         justify="right")
        table.add_column("gCO2e",       justify="right", style="bold")
        table.add_column("Score",       justify="right")
        table.add_column("Bottleneck",  style="dim")

        for r in records:
            colour = _score_colour(r.score)
            table.add_row(
                escape(r.file_name),
                r.language.upper(),
                str(r.line_count),
                f"{r.complexity:.2f}",
                f"{r.estimated_energy:.3f}",
                f"{r.estimated_co2:.2f}",
                f"[{colour}]{r.score}/10[/{colour}]",
                escape(r.bottleneck),
            )

        console.print(table)

    # ── Stage 5 ───────────────────────────────────────────────────────────────

    def persist(self, records: List[AnalysisRecord]) -> None:
        if not self.save:
            self._log(LOG_INFO, "Not saving results (--no-save).")
            return
        self._log(LOG_STAGE, "Stage 5 — Persisting")
        self.store.extend(records)
        self._log(LOG_SUCCESS, f"Saved {len(records)} record(s) → {self.store.path}")

    # ── Run all stages ────────────────────────────────────────────────────────

    def run(self) -> List[AnalysisRecord]:
        """Execute all pipeline stages and return the analysis records."""
        self.ingest()
        if not self.samples:
            self._log(LOG_WARNING, "Nothing to analyse.")
            return []

        metrics = self.measure()
        reviews = self.review()

        created_at = datetime.now(timezone.utc).isoformat()
        records = [
            AnalysisRecord.from_parts(s, m, r, created_at=created_at, user_id=self.user_id)
            for s, m, r in zip(self.samples, metrics, reviews)
        ]

        self.report(records)
        self.persist(records)
        self.records = records
        return records
