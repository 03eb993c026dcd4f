"""
Match Builder - enriches every recipient with its match against the donor.

The donor PHM is computed once per run. Each recipient then gets its own PHM,
the donor/recipient ratio, size category, risk level and blood type verdict.
A malformed recipient is skipped and reported; a malformed donor aborts the
run before any recipient is processed.
"""

import logging
from datetime import date
from numbers import Real
from typing import Iterable, List, Optional, Tuple

from .classifier import classify_category, classify_risk
from .compatibility import CompatibilityPolicy, evaluate
from .data_models import (
    LOWEST_PRIORITY_STATUS,
    BiometricProfile,
    Donor,
    MatchRecord,
    Recipient,
    RunStatistics,
    SkippedRecipient
)
from .exceptions import InvalidInput, RecordSkipped, ValidationError
from .phm_calculator import compute_phm, phm_ratio


DONOR_PROFILE_FIELDS = ['gender', 'age', 'height', 'weight']
DONOR_NUMERIC_FIELDS = ['age', 'height', 'weight']
HIGHEST_PRIORITY_STATUS = 1


class MatchBuilder:
    """
    Builds enriched match records for one donor against a waiting list.

    Records are built independently from immutable inputs, so the order of
    the returned records follows the order of the recipients given.
    """

    def __init__(self, compatibility_policy: CompatibilityPolicy = CompatibilityPolicy.FULL_CHART):
        """
        Initialize the match builder.

        Args:
            compatibility_policy: Blood type rule set used for the
                blood_type_compatible verdict (default: FULL_CHART)
        """
        self.compatibility_policy = compatibility_policy
        self.logger = logging.getLogger(__name__)

    def compute_donor_phm(self, donor: Donor) -> float:
        """
        Validate the donor and compute its PHM.

        Raises:
            ValidationError: if the donor profile is incomplete, holds
                non-numeric values, or is rejected by the calculator
        """
        profile = donor.profile
        if not isinstance(profile, BiometricProfile):
            raise ValidationError("Donor has no biometric profile", fields=['profile'])

        missing_fields = [name for name in DONOR_PROFILE_FIELDS
                          if getattr(profile, name) in (None, '')]
        if missing_fields:
            raise ValidationError(
                f"Donor profile is incomplete, missing: {', '.join(missing_fields)}",
                fields=missing_fields
            )

        for name in DONOR_NUMERIC_FIELDS:
            value = getattr(profile, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValidationError(f"Donor {name} must be a number", fields=[name])

        try:
            return compute_phm(profile)
        except InvalidInput as e:
            raise ValidationError(f"Invalid donor profile: {e}", fields=[e.field] if e.field else []) from e

    def build_matches(self, donor: Donor,
                      recipients: Iterable[Recipient]) -> Tuple[List[MatchRecord], List[SkippedRecipient]]:
        """
        Build match records for every well-formed recipient.

        Args:
            donor: The donor of this run
            recipients: Recipients in input order

        Returns:
            (records, skipped) - records in input order, and the manifest of
            recipients that could not be matched
        """
        donor_phm = self.compute_donor_phm(donor)
        self.logger.debug(f"Donor {donor.name} PHM: {donor_phm:.2f}g")
        return self.build_records(donor, donor_phm, recipients)

    def build_records(self, donor: Donor, donor_phm: float,
                      recipients: Iterable[Recipient]) -> Tuple[List[MatchRecord], List[SkippedRecipient]]:
        """Build match records against an already computed donor PHM."""
        records: List[MatchRecord] = []
        skipped: List[SkippedRecipient] = []

        for recipient in recipients:
            try:
                records.append(self.build_record(donor, donor_phm, recipient))
            except RecordSkipped as e:
                self.logger.warning(
                    f"SKIPPED - Recipient {e.skipped.recipient_id} {e.skipped.name}: {e.skipped.reason}"
                )
                skipped.append(e.skipped)

        self.logger.info(
            f"Built {len(records)} match records ({len(skipped)} recipients skipped)"
        )
        return records, skipped

    def build_record(self, donor: Donor, donor_phm: float, recipient: Recipient) -> MatchRecord:
        """
        Build the match record of a single recipient.

        Raises:
            RecordSkipped: if the recipient's biometrics, status or
                date added are invalid
        """
        if not isinstance(recipient.profile, BiometricProfile):
            raise RecordSkipped(self._skip(recipient, 'profile', "Recipient has no biometric profile"))

        try:
            recipient_phm = compute_phm(recipient.profile)
        except InvalidInput as e:
            raise RecordSkipped(self._skip(recipient, e.field, str(e))) from e

        problem = self._check_waiting_list_fields(recipient)
        if problem:
            raise RecordSkipped(self._skip(recipient, *problem))

        ratio = phm_ratio(donor_phm, recipient_phm)
        verdict = evaluate(donor.blood_type, recipient.blood_type, self.compatibility_policy)

        record = MatchRecord(
            recipient=recipient,
            donor_phm=donor_phm,
            recipient_phm=recipient_phm,
            phm_ratio=ratio,
            match_category=classify_category(ratio),
            risk_level=classify_risk(ratio),
            blood_type_compatible=verdict.compatible,
            exact_blood_type_match=verdict.exact_match,
            rhesus_mismatch=verdict.rhesus_mismatch,
            status=recipient.effective_status,
            date_added=recipient.date_added
        )

        self.logger.debug(
            f"Recipient {recipient.recipient_id}: PHM {recipient_phm:.2f}g, "
            f"ratio {ratio:.3f}, {record.match_category.code}, {record.risk_level.value}, "
            f"compatible={verdict.compatible}"
        )
        return record

    @staticmethod
    def _check_waiting_list_fields(recipient: Recipient) -> Optional[Tuple[str, str]]:
        """Return (field, reason) for an unusable status or date added, else None."""
        status = recipient.status
        if status is not None:
            if isinstance(status, bool) or not isinstance(status, int):
                return 'status', f"status must be an integer, got {status!r}"
            if not HIGHEST_PRIORITY_STATUS <= status <= LOWEST_PRIORITY_STATUS:
                return 'status', (f"status must be between {HIGHEST_PRIORITY_STATUS} "
                                  f"and {LOWEST_PRIORITY_STATUS}, got {status}")

        # datetime is a subclass of date
        if recipient.date_added is not None and not isinstance(recipient.date_added, date):
            return 'date_added', f"date_added must be a date, got {recipient.date_added!r}"

        return None

    @staticmethod
    def _skip(recipient: Recipient, field: Optional[str], reason: str) -> SkippedRecipient:
        return SkippedRecipient(
            recipient_id=recipient.recipient_id,
            name=recipient.name,
            field=field,
            reason=reason
        )


def build_matches(donor: Donor,
                  recipients: Iterable[Recipient],
                  compatibility_policy: CompatibilityPolicy = CompatibilityPolicy.FULL_CHART
                  ) -> Tuple[List[MatchRecord], List[SkippedRecipient]]:
    """Build match records with a one-off MatchBuilder."""
    return MatchBuilder(compatibility_policy).build_matches(donor, recipients)


def collect_statistics(records: List[MatchRecord], skipped: List[SkippedRecipient]) -> RunStatistics:
    """Summarize a run's match records and skipped recipients."""
    stats = RunStatistics(
        total_recipients=len(records) + len(skipped),
        matched=len(records),
        skipped=len(skipped)
    )

    for record in records:
        if record.blood_type_compatible:
            stats.blood_type_compatible += 1
        if record.exact_blood_type_match:
            stats.exact_blood_type_matches += 1
        if record.is_high_risk:
            stats.high_risk += 1
        if record.rhesus_mismatch:
            stats.rhesus_mismatches += 1

        code = record.match_category.code
        stats.category_distribution[code] = stats.category_distribution.get(code, 0) + 1

    return stats
