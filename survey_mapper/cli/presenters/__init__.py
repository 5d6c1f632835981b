"""Presenters for CLI output formatting.

Presenters turn use-case results into rich tables and status lines.
"""

from .progress import ProgressPresenter
from .summary import SummaryPresenter

__all__ = ["ProgressPresenter", "SummaryPresenter"]
