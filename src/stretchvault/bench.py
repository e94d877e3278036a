"""
bench.py - Benchmark stretching cost to help pick a stretch_count.

Responsibilities:
- Measure stretch() time for several stretch counts / algorithms
- Measure Argon2 verify time as a reference point
- Suggest a stretch_count that lands near a target latency
- Return results in structured dicts for printing/reporting
"""

from __future__ import annotations

import logging
import statistics
import time
from typing import Any, Dict, Iterable, List

from argon2 import PasswordHasher

from .digests import as_digest, digest_name
from .errors import InvalidArgument
from .stretch import stretch


log = logging.getLogger(__name__)

# Argon2id reference parameters
# memory_cost is in kilobytes (the KiB version). time_cost is iterations.
ARGON2_TIME_COST = 2
ARGON2_MEMORY_COST = 102400  # about 100 MiB
ARGON2_PARALLELISM = 8

CALIBRATION_COUNT = 1000


def _time_ms(fn, rounds: int) -> float:
    if rounds < 1:
        raise InvalidArgument("rounds must be at least 1")
    timings = []
    for _ in range(rounds):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        timings.append((t1 - t0) * 1000.0)
    return float(statistics.median(timings))


def bench_stretch(
    algorithm: object,
    stretch_counts: Iterable[int],
    rounds: int = 5,
    password: bytes = b"password",
    salt: bytes = b"salt",
) -> List[Dict[str, Any]]:
    """Benchmark stretch() for each stretch count."""
    name = digest_name(as_digest(algorithm))
    results: List[Dict[str, Any]] = []
    for count in stretch_counts:
        ms = _time_ms(lambda: stretch(password, salt, algorithm, count), rounds)
        log.debug("bench %s stretch_count=%d median=%.3fms", name, count, ms)
        results.append(
            {
                "algorithm": name,
                "stretch_count": count,
                "median_ms": ms,
                "rounds": rounds,
            }
        )
    return results


def bench_argon2_verify(secret: str = "1234", rounds: int = 5) -> Dict[str, Any]:
    """Benchmark Argon2id verification time."""
    ph = PasswordHasher(
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
    )
    stored_hash = ph.hash(secret)
    ms = _time_ms(lambda: ph.verify(stored_hash, secret), rounds)
    return {"metric": "argon2_verify_median_ms", "rounds": rounds, "value": ms}


def suggest_stretch_count(algorithm: object, target_ms: float, rounds: int = 3) -> int:
    """
    Estimate the stretch_count whose cost is close to target_ms.

    Cost is linear in the count, so one calibration run is scaled.
    """
    if target_ms <= 0:
        raise InvalidArgument("target_ms must be positive")
    (result,) = bench_stretch(algorithm, [CALIBRATION_COUNT], rounds=rounds)
    per_round = result["median_ms"] / CALIBRATION_COUNT
    if per_round <= 0:
        # clock too coarse to measure anything
        return CALIBRATION_COUNT
    suggested = max(1, int(target_ms / per_round))
    log.info("suggest %s: %.6fms/round -> stretch_count=%d for %.1fms", result["algorithm"], per_round, suggested, target_ms)
    return suggested
