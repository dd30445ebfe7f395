"""
Module: builder.config

Purpose:
    Configuration dataclass for the exam draft wizard. Immutable limits
    with validation on construction.

Key Classes:
    - DraftRules: Field limits and the passing-marks ratio

Dependencies:
    - dataclasses (std)

Used By:
    - builder.planner: Passing-marks seed
    - builder.draft: Field validation
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DraftRules:
    """
    Limits applied to an exam draft (immutable).

    Attributes:
        min_title_length: Minimum trimmed title length
        min_duration: Shortest allowed exam in minutes
        max_duration: Longest allowed exam in minutes
        passing_ratio: Fraction of total marks used to seed passing marks
        bank_limit: Default number of bank questions fetched for selection

    Invariants:
        - 0 < min_duration <= max_duration
        - 0 <= passing_ratio <= 1

    Example:
        >>> rules = DraftRules()
        >>> rules.duration_range
        (5, 300)
    """

    min_title_length: int = 5
    min_duration: int = 5
    max_duration: int = 300
    passing_ratio: float = 0.5
    bank_limit: int = 100

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.min_title_length < 1:
            raise ValueError(f"min_title_length must be positive: {self.min_title_length}")
        if self.min_duration <= 0:
            raise ValueError(f"min_duration must be positive: {self.min_duration}")
        if self.max_duration < self.min_duration:
            raise ValueError(
                f"max_duration ({self.max_duration}) must be >= "
                f"min_duration ({self.min_duration})"
            )
        if not (0.0 <= self.passing_ratio <= 1.0):
            raise ValueError(f"passing_ratio must be 0-1: {self.passing_ratio}")
        if self.bank_limit < 1:
            raise ValueError(f"bank_limit must be positive: {self.bank_limit}")

    @property
    def duration_range(self) -> tuple[int, int]:
        return (self.min_duration, self.max_duration)

    def is_valid_duration(self, minutes: int) -> bool:
        """
        Check if an exam duration is allowed.

        Args:
            minutes: Duration to check

        Returns:
            True if minutes within [min_duration, max_duration]
        """
        return self.min_duration <= minutes <= self.max_duration
