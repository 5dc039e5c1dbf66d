#!/usr/bin/env python3
"""
Statistics over alignment coverage

average() and standard_deviation() round to two decimals (half up); the
standard deviation is the population one, taken around the rounded mean.
"""
import math
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence

import numpy as np

from orthocds.exceptions import StatisticsError
from orthocds.models.orthogroup import BackboneStats, CoverageRecord

logger = logging.getLogger("orthocds.utils.statistics")


def round_decimal(value: float, places: int = 2) -> float:
    """Round half up to a fixed number of decimals"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero"""
    return int(Decimal(repr(float(value))).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _as_array(values: Iterable[float]) -> np.ndarray:
    array = np.asarray(list(values), dtype=float)
    if array.size == 0:
        raise StatisticsError("Cannot compute statistics of an empty set of values")
    return array


def average(values: Iterable[float]) -> float:
    """Arithmetic mean rounded to 2 decimals

    Raises:
        StatisticsError: If values is empty
    """
    return round_decimal(float(np.mean(_as_array(values))))


def standard_deviation(values: Iterable[float]) -> float:
    """Population standard deviation around the rounded mean, 2 decimals

    Raises:
        StatisticsError: If values is empty
    """
    array = _as_array(values)
    mean = average(array)
    variance = float(np.mean((array - mean) ** 2))
    return round_decimal(math.sqrt(variance))


def backbone_statistics(records: Sequence[CoverageRecord]) -> BackboneStats:
    """Coverage and length statistics over backbone records

    An empty backbone set gives an undefined BackboneStats instead of an error.
    """
    backbone = [r for r in records if r.is_backbone]
    if not backbone:
        logger.warning("No backbone sequences left in the alignment; statistics undefined")
        return BackboneStats()

    coverages = [r.coverage for r in backbone]
    lengths = [r.length for r in backbone]
    return BackboneStats(
        count=len(backbone),
        avg_cov=average(coverages),
        sd_cov=standard_deviation(coverages),
        avg_len=round_half_up(average(lengths)),
        sd_len=round_half_up(standard_deviation(lengths)),
    )


def rank_by_coverage(records: Iterable[CoverageRecord]) -> List[CoverageRecord]:
    """Highest coverage first; equal coverage keeps the incoming order"""
    return sorted(records, key=lambda r: r.coverage, reverse=True)
