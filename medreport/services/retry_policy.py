"""Exponential backoff schedule for the generation retry loop."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Wait ``base ** attempt`` seconds between attempts, up to ``max_attempts`` tries."""

    max_attempts: int = 3
    base: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def delay_for_attempt(self, attempt: int) -> float:
        return self.base**attempt

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt remains after ``attempt`` failed."""
        return attempt + 1 < self.max_attempts


DEFAULT_RETRY_POLICY = RetryPolicy()
