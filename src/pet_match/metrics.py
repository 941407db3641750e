from dataclasses import dataclass


@dataclass
class ScoringMetrics:
    """Track cache and oracle counters for the match engine."""

    cache_hits: int = 0
    cache_misses: int = 0
    oracle_calls: int = 0
    oracle_failures: int = 0
    fallbacks: int = 0
    total_oracle_time_ms: float = 0.0
    cycles: int = 0
    discarded_cycles: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return self.cache_hits / total

    @property
    def avg_oracle_time_ms(self) -> float:
        """Calculate average oracle call duration."""
        if self.oracle_calls == 0:
            return 0.0
        return self.total_oracle_time_ms / self.oracle_calls

    def record_hit(self) -> None:
        self.cache_hits += 1

    def record_miss(self) -> None:
        self.cache_misses += 1

    def record_oracle_call(self, duration_ms: float, failed: bool = False) -> None:
        """Record one oracle round trip."""
        self.oracle_calls += 1
        self.total_oracle_time_ms += duration_ms
        if failed:
            self.oracle_failures += 1

    def record_fallback(self) -> None:
        self.fallbacks += 1

    def record_cycle(self, discarded: bool = False) -> None:
        self.cycles += 1
        if discarded:
            self.discarded_cycles += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "oracle_calls": self.oracle_calls,
            "oracle_failures": self.oracle_failures,
            "fallbacks": self.fallbacks,
            "avg_oracle_time_ms": self.avg_oracle_time_ms,
            "cycles": self.cycles,
            "discarded_cycles": self.discarded_cycles,
        }
