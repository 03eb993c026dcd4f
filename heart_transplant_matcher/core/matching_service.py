"""
Heart Matching Service

Service layer that runs one donor against a recipient waiting list: build
the match records, rank them under the selected policy, and collect the
run statistics.
"""

import logging
from typing import Iterable, List, Optional

from .data_models import Donor, MatchRun, Recipient
from .match_builder import MatchBuilder, collect_statistics
from .ranker import DEFAULT_POLICY, RankingPolicy, rank
from ..utils.recipient_loader import load_recipients


class HeartMatchingService:
    """Service for donor-to-recipient matching runs."""

    def __init__(self, ranking_policy: Optional[RankingPolicy] = None):
        """
        Initialize the matching service.

        Args:
            ranking_policy: Ranking policy; its compatibility policy also
                drives the blood type verdict (default: size_match)
        """
        self.ranking_policy = ranking_policy or DEFAULT_POLICY
        self.builder = MatchBuilder(self.ranking_policy.compatibility_policy)

    def load_recipients(self, recipients_file: str) -> List[Recipient]:
        """Load the waiting list from an Excel workbook or CSV file."""
        return load_recipients(recipients_file)

    def run(self, donor: Donor, recipients: Iterable[Recipient]) -> MatchRun:
        """
        Match a donor against the waiting list.

        Args:
            donor: The donor
            recipients: Recipients in waiting-list order

        Returns:
            MatchRun with the ranked records and the skipped manifest

        Raises:
            ValidationError: if the donor profile is unusable
        """
        recipients = list(recipients)
        logging.info(
            f"Matching donor {donor.name} against {len(recipients)} recipients "
            f"(policy: {self.ranking_policy.name})"
        )

        donor_phm = self.builder.compute_donor_phm(donor)
        records, skipped = self.builder.build_records(donor, donor_phm, recipients)
        ranked = rank(records, self.ranking_policy)

        return MatchRun(
            donor=donor,
            donor_phm=donor_phm,
            records=ranked,
            skipped=skipped,
            policy_name=self.ranking_policy.name,
            statistics=collect_statistics(ranked, skipped),
            ranking_criteria=[stage.description for stage in self.ranking_policy.stages]
        )
