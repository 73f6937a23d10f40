"""Passive yearly stat drift."""

from __future__ import annotations

from typing import Dict

from .balance import AgeingBalance


def ageing_delta(new_age: int, balance: AgeingBalance | None = None) -> Dict[str, float]:
    """Stat deltas for reaching ``new_age``; thresholds are strict.

    Deltas may be fractional; :meth:`Character.apply_delta` carries the
    fraction in ``stat_residuals`` until it adds up to a whole point.
    """
    cfg = balance or AgeingBalance()
    delta: Dict[str, float] = {}
    if new_age > cfg.health_after:
        delta["health"] = cfg.health_delta
    if new_age > cfg.looks_after:
        delta["looks"] = cfg.looks_delta
    if new_age > cfg.smarts_after:
        delta["smarts"] = cfg.smarts_delta
    return delta


def merge_deltas(*deltas: Dict[str, float]) -> Dict[str, float]:
    merged: Dict[str, float] = {}
    for delta in deltas:
        for name, value in (delta or {}).items():
            merged[name] = merged.get(name, 0) + value
    return merged


__all__ = ["ageing_delta", "merge_deltas"]
