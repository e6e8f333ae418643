"""
Turns the outcomes of a batch into the summary returned to callers.
"""

from typing import List

from ..config.common import BATCH_COMPLETED_MESSAGE
from ..domain.models import BatchSummary, EncodeOutcome


class ResultReporter:
    @staticmethod
    def summarize(outcomes: List[EncodeOutcome], message: str = BATCH_COMPLETED_MESSAGE) -> BatchSummary:
        success_count = sum(1 for outcome in outcomes if outcome.is_success)
        return BatchSummary(
            message=message,
            results=list(outcomes),
            success_count=success_count,
            failed_count=len(outcomes) - success_count,
        )
