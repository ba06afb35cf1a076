from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from statistics import mean
from typing import Any, Dict, Iterable, List, Optional, Tuple

# ---------------- Utilities ----------------

LabelKey = Tuple[Tuple[str, str], ...]  # sorted tuple of (k,v)


def _labels_key(labels: Dict[str, Any] | None) -> LabelKey:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _pct(sorted_vals: Iterable[float], q: float) -> float:
    vals = list(sorted_vals)
    if not vals:
        return 0.0
    idx = max(0, min(len(vals) - 1, int(round((len(vals) - 1) * q))))
    return vals[idx]


# ---------------- Metric types ----------------

@dataclass
class _Base:
    name: str
    labels: LabelKey


class Counter(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0

    def inc(self, n: float = 1.0) -> None:
        self._value += n

    def value(self) -> float:
        return self._value


class Gauge(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._value = 0.0

    def set(self, v: float) -> None:
        self._value = float(v)

    def value(self) -> float:
        return self._value


class Histogram(_Base):
    def __init__(self, name: str, labels: LabelKey):
        super().__init__(name, labels)
        self._values: List[float] = []

    def observe(self, v: float) -> None:
        self._values.append(float(v))

    def snapshot(self) -> Dict[str, float]:
        if not self._values:
            return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0, "p50": 0.0, "p90": 0.0}
        vals_sorted = sorted(self._values)
        return {
            "count": float(len(vals_sorted)),
            "min": vals_sorted[0],
            "max": vals_sorted[-1],
            "mean": mean(vals_sorted),
            "p50": _pct(vals_sorted, 0.50),
            "p90": _pct(vals_sorted, 0.90),
        }


# ---------------- Registry ----------------

class _Registry:
    def __init__(self) -> None:
        self._counters: Dict[Tuple[str, LabelKey], Counter] = {}
        self._gauges: Dict[Tuple[str, LabelKey], Gauge] = {}
        self._hists: Dict[Tuple[str, LabelKey], Histogram] = {}

    def counter(self, name: str, labels: Dict[str, Any] | None) -> Counter:
        key = (name, _labels_key(labels))
        m = self._counters.get(key)
        if m is None:
            m = self._counters[key] = Counter(name, key[1])
        return m

    def gauge(self, name: str, labels: Dict[str, Any] | None) -> Gauge:
        key = (name, _labels_key(labels))
        m = self._gauges.get(key)
        if m is None:
            m = self._gauges[key] = Gauge(name, key[1])
        return m

    def hist(self, name: str, labels: Dict[str, Any] | None) -> Histogram:
        key = (name, _labels_key(labels))
        m = self._hists.get(key)
        if m is None:
            m = self._hists[key] = Histogram(name, key[1])
        return m

    def items(self):
        return (
            list(self._counters.items()),
            list(self._gauges.items()),
            list(self._hists.items()),
        )

    def clear(self) -> None:
        self._counters.clear()
        self._gauges.clear()
        self._hists.clear()


_REG = _Registry()

# ---------------- Public API ----------------

def inc(name: str, n: float = 1.0, **labels: Any) -> None:
    _REG.counter(name, labels).inc(n)


def gauge_set(name: str, v: float, **labels: Any) -> None:
    _REG.gauge(name, labels).set(v)


def observe_hist(name: str, v: float, **labels: Any) -> None:
    _REG.hist(name, labels).observe(v)


def counter_value(name: str, **labels: Any) -> float:
    """Current value of one counter; 0.0 if it was never touched."""
    m = _REG._counters.get((name, _labels_key(labels)))
    return 0.0 if m is None else m.value()


def reset() -> None:
    """Drop every metric (tests call this between cases)."""
    _REG.clear()


# ---------------- Timer Helper ----------------

class Timer:
    """Context manager for measuring latency and reporting into a histogram."""
    def __init__(self, hist_name: str, **labels: Any) -> None:
        self.hist_name = hist_name
        self.labels = labels
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        dt_ms = (time.perf_counter() - self._t0) * 1000.0
        observe_hist(self.hist_name, dt_ms, **self.labels)
        return False


# ---------------- Snapshot / emit ----------------

def snapshot() -> dict:
    counters, gauges, hists = _REG.items()
    out = {"counters": [], "gauges": [], "hists": []}
    for (name, labels), m in counters:
        out["counters"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in gauges:
        out["gauges"].append({"name": name, "labels": dict(labels), "value": m.value()})
    for (name, labels), m in hists:
        out["hists"].append({"name": name, "labels": dict(labels), **m.snapshot()})
    return out


def force_emit(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Log the current snapshot, one record per metric."""
    lg = logger or logging.getLogger("metrics")
    snap = snapshot()
    if json_mode:
        for kind in ("counters", "gauges", "hists"):
            for m in snap[kind]:
                lg.info({"type": kind[:-1], **m})
        return
    for m in snap["counters"]:
        lg.info(f"[ctr] {m['name']} {m['labels']} value={m['value']:.0f}")
    for m in snap["gauges"]:
        lg.info(f"[gauge] {m['name']} {m['labels']} value={m['value']:.3f}")
    for m in snap["hists"]:
        lg.info(
            f"[hist] {m['name']} {m['labels']} "
            f"n={int(m['count'])} min={m['min']:.3f} p50={m['p50']:.3f} "
            f"p90={m['p90']:.3f} max={m['max']:.3f} mean={m['mean']:.3f}"
        )
