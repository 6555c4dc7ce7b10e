from __future__ import annotations

from dataclasses import dataclass

from log_config.logger import get_logger, log_performance

logger = get_logger("telemetry")


@dataclass(frozen=True)
class TimingRecord:
    stage: str
    elapsed_ms: float
    budget_ms: float
    features: int
    combos: int


def log_timing(record: TimingRecord) -> None:
    logger.debug(
        f"detect.timing stage={record.stage} features={record.features} "
        f"combos={record.combos} elapsed_ms={record.elapsed_ms:.3f} budget_ms={record.budget_ms:.3f}"
    )
    log_performance(f"detect.{record.stage}", record.elapsed_ms, threshold_ms=record.budget_ms)
