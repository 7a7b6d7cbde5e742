"""
Reporting

Tabular summaries of learned parameters, daily metrics and attempt logs.
"""

import pandas as pd

from faq_emergence.domain.entities import DailyMetrics, GenerationOutcome, ScenarioRecord

SCENARIO_COLUMNS = [
    "scenario_code", "best_score", "success_count",
    "temperature", "max_tokens", "top_p", "updated_at",
]
METRIC_COLUMNS = [
    "metric_date", "total_requests", "successful_requests",
    "success_rate", "avg_quality_score", "avg_attempts",
]
ATTEMPT_COLUMNS = ["attempt", "strategy", "score", "level", "duration_ms", "error"]


def scenario_frame(records: list[ScenarioRecord]) -> pd.DataFrame:
    """One row per learned scenario, in the given (best-first) order"""
    rows = [
        {
            "scenario_code": r.scenario_code,
            "best_score": r.best_score,
            "success_count": r.success_count,
            "temperature": r.best_config.temperature,
            "max_tokens": r.best_config.max_tokens,
            "top_p": r.best_config.top_p,
            "updated_at": r.updated_at,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=SCENARIO_COLUMNS)


def metrics_frame(metrics: list[DailyMetrics]) -> pd.DataFrame:
    """One row per day"""
    rows = [
        {
            "metric_date": m.metric_date,
            "total_requests": m.total_requests,
            "successful_requests": m.successful_requests,
            "success_rate": m.success_rate,
            "avg_quality_score": m.avg_quality_score,
            "avg_attempts": m.avg_attempts,
        }
        for m in metrics
    ]
    return pd.DataFrame(rows, columns=METRIC_COLUMNS)


def attempt_frame(outcome: GenerationOutcome) -> pd.DataFrame:
    """One row per attempt of a request"""
    rows = [
        {
            "attempt": i,
            "strategy": record.strategy_name,
            "score": record.score.overall if record.score else 0.0,
            "level": record.score.level if record.score else "failed",
            "duration_ms": record.duration_ms,
            "error": record.error or "",
        }
        for i, record in enumerate(outcome.attempt_log, start=1)
    ]
    return pd.DataFrame(rows, columns=ATTEMPT_COLUMNS)


def summarize_metrics(metrics: list[DailyMetrics]) -> dict:
    """Totals across days, with request-weighted averages"""
    df = metrics_frame(metrics)
    total = int(df["total_requests"].sum()) if not df.empty else 0
    if total == 0:
        return {"total_requests": 0, "successful_requests": 0, "success_rate": 0.0,
                "avg_quality_score": 0.0, "avg_attempts": 0.0}
    weights = df["total_requests"]
    successful = int(df["successful_requests"].sum())
    return {
        "total_requests": total,
        "successful_requests": successful,
        "success_rate": successful / total,
        "avg_quality_score": float((df["avg_quality_score"] * weights).sum() / total),
        "avg_attempts": float((df["avg_attempts"] * weights).sum() / total),
    }
