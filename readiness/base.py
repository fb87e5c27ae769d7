"""
readiness/base.py

Abstract base interface for readiness category scoring models.
All category models must inherit from BaseCategoryScore.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseCategoryScore(ABC):
    """Abstract base class for one readiness category score.

    Defines the interface that the data, coverage, rules and posture
    models follow. Enforces a consistent compute contract across the
    categories combined by the overall readiness model.
    """

    category: str = ""

    @abstractmethod
    def compute(self, inputs: Any) -> int:
        """Compute a category score from the given inputs.

        Args:
            inputs: The category-specific input (rows, mapping, rule
                    results or questionnaire).

        Returns:
            An integer in [0, 100]. Degenerate inputs yield a low or
            neutral score rather than an exception.

        Raises:
            NotImplementedError: If the subclass does not implement
                                 this method.
        """
        raise NotImplementedError("Subclasses must implement compute()")
