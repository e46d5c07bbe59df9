"""
Lambda cost model.

Pricing is a flat, single-tier approximation of AWS Lambda billing; the volume
discount tiers are ignored:

x86 Price
    First 6 Billion GB-seconds / month      $0.0000166667 for every GB-second
    Next 9 Billion GB-seconds / month       $0.000015 for every GB-second
    Over 15 Billion GB-seconds / month      $0.0000133334 for every GB-second
Arm Price
    First 7.5 Billion GB-seconds / month    $0.0000133334 for every GB-second
    Next 11.25 Billion GB-seconds / month   $0.0000120001 for every GB-second
    Over 18.75 Billion GB-seconds / month   $0.0000106667 for every GB-second

Requests cost $0.20 per 1M on both architectures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from .constants import (
    DAYS_PER_MONTH,
    DEFAULT_GB_SECOND_PRICE,
    GB_SECOND_PRICE,
    MB_PER_GB,
    MEMORY_HEADROOM_FACTOR,
    MEMORY_STEP_MB,
    MIN_OPTIMIZED_MEMORY_MB,
    OPTIMIZED_ARCHITECTURE,
    REQUEST_PRICE_PER_MILLION,
    REQUESTS_PER_MILLION,
)
from .report_parser import Measurement


def gb_second_price(architecture: str) -> float:
    """Return the per GB-second price for an architecture label."""
    if architecture == OPTIMIZED_ARCHITECTURE:
        return GB_SECOND_PRICE[OPTIMIZED_ARCHITECTURE]
    return DEFAULT_GB_SECOND_PRICE


@dataclass
class FunctionAggregate:
    """All measurements observed for one Lambda function."""

    name: str
    architecture: str = ""
    measurements: list[Measurement] = field(default_factory=list)

    def add(self, measurement: Measurement) -> None:
        self.measurements.append(measurement)

    def invocation_count(self) -> int:
        return len(self.measurements)

    def average_duration(self) -> timedelta:
        """Mean wall-clock duration, zero when nothing was observed."""
        if not self.measurements:
            return timedelta(0)
        total = sum((m.duration for m in self.measurements), timedelta(0))
        return total / len(self.measurements)

    def average_memory_used(self) -> int:
        if not self.measurements:
            return 0
        return sum(m.max_memory_used for m in self.measurements) // len(self.measurements)

    def peak_memory_used(self) -> int:
        return max((m.max_memory_used for m in self.measurements), default=0)

    def assigned_memory(self) -> int:
        """
        Memory configured for the function.

        Taken from the first measurement; configuration changes inside the
        observation window are not detected.
        """
        if not self.measurements:
            return 0
        return self.measurements[0].memory_size

    def cost_for(self, architecture: str, memory_size: int = 0) -> float:
        """
        Cost of the observed invocations under a given configuration.

        Args:
            architecture: Architecture label to price (e.g. "arm64", "x86_64")
            memory_size: Memory in MB to price at, or 0 to use each
                measurement's recorded memory size

        Returns:
            float: Cost in USD over the observation window
        """
        if not self.measurements:
            return 0.0

        request_cost = (
            REQUEST_PRICE_PER_MILLION / REQUESTS_PER_MILLION * len(self.measurements)
        )
        gb_seconds = 0.0
        for measurement in self.measurements:
            memory_mb = memory_size or measurement.memory_size
            gb_seconds += (
                memory_mb / MB_PER_GB * measurement.billed_duration.total_seconds()
            )
        return gb_seconds * gb_second_price(architecture) + request_cost

    def current_cost(self) -> float:
        return self.cost_for(self.architecture, 0)

    def optimize(self) -> tuple[int, float]:
        """
        Propose a smaller memory size and its arm64 cost.

        Returns:
            tuple: (memory_mb, cost); (0, 0.0) when there is nothing to base a
            recommendation on
        """
        if not self.measurements:
            return 0, 0.0

        memory_size = self.assigned_memory()
        # Don't bother optimising below the minimum amount of RAM.
        if memory_size > MIN_OPTIMIZED_MEMORY_MB:
            proposed = self.peak_memory_used() * MEMORY_HEADROOM_FACTOR
            if proposed < MIN_OPTIMIZED_MEMORY_MB:
                proposed = MIN_OPTIMIZED_MEMORY_MB + 1
            proposed = (proposed // MEMORY_STEP_MB) * MEMORY_STEP_MB
            # Only ever recommend less RAM.
            if proposed < memory_size:
                memory_size = proposed
        return memory_size, self.cost_for(OPTIMIZED_ARCHITECTURE, memory_size)


def monthly_cost(daily_cost: float) -> float:
    """Extrapolate a daily cost to a 30 day month."""
    return daily_cost * DAYS_PER_MONTH


def monthly_savings(aggregate: FunctionAggregate) -> float:
    """Monthly savings from switching to the optimized memory size and arm64, never negative."""
    _, optimized_cost = aggregate.optimize()
    savings = monthly_cost(aggregate.current_cost()) - monthly_cost(optimized_cost)
    return max(0.0, savings)


@dataclass
class FunctionMetrics:
    """Derived figures shown for one function in the report."""

    name: str
    architecture: str
    daily_cost: float
    monthly_cost: float
    invocations: int
    average_duration: timedelta
    peak_memory_used: int
    memory_used_percent: float
    assigned_memory: int
    optimized_memory: int
    monthly_savings: float


def compute_metrics(aggregate: FunctionAggregate) -> FunctionMetrics:
    """Compute every reported figure for an aggregate."""
    assigned = aggregate.assigned_memory()
    peak = aggregate.peak_memory_used()
    used_percent = (peak / assigned) * 100.0 if assigned > 0 else 0.0
    daily = aggregate.current_cost()
    optimized_memory, _ = aggregate.optimize()
    return FunctionMetrics(
        name=aggregate.name,
        architecture=aggregate.architecture,
        daily_cost=daily,
        monthly_cost=monthly_cost(daily),
        invocations=aggregate.invocation_count(),
        average_duration=aggregate.average_duration(),
        peak_memory_used=peak,
        memory_used_percent=used_percent,
        assigned_memory=assigned,
        optimized_memory=optimized_memory,
        monthly_savings=monthly_savings(aggregate),
    )
