"""
Audit logging and reporting for heart transplant matching runs.

Rounding to two decimals happens here; the engine keeps full precision.
"""

import csv
import logging
from datetime import datetime
from typing import List, Optional

from ..core.data_models import MatchRecord, MatchRun, RunStatistics


REFERENCE_CITATION = (
    'Based on: Kransdorf et al. "Predicted heart mass is the optimal metric '
    'for size match in heart transplantation" (2019)'
)

RESULT_COLUMNS = [
    'rank', 'id', 'name', 'gender', 'age', 'blood_type', 'compatible',
    'exact_blood_type_match', 'rhesus_mismatch', 'status', 'date_added',
    'recipient_phm', 'donor_phm', 'phm_ratio', 'match_category', 'risk_level'
]


class MatchAuditLogger:
    """
    Audit logging for matching runs.

    Provides structured log lines suitable for a clinical audit trail of
    which recipient was ranked where, and why a recipient was left out.
    """

    def __init__(self, logger_name: str = "heart_matching"):
        """
        Initialize the audit logger.

        Args:
            logger_name: Name for the logger instance
        """
        self.logger = logging.getLogger(logger_name)

    def log_match_decision(self, rank: int, record: MatchRecord) -> None:
        """Log the ranking decision for one recipient."""
        log_parts = []

        if record.is_high_risk:
            log_parts.append("HIGH_RISK")
        if record.rhesus_mismatch:
            log_parts.append("RHESUS_MISMATCH")

        recipient = record.recipient
        log_parts.append(f"RANK {rank} - Recipient: {recipient.recipient_id} {recipient.name}")
        log_parts.append(f"Ratio: {record.phm_ratio:.3f}")
        log_parts.append(f"Category: {record.match_category.code}")
        log_parts.append(f"Compatible: {'yes' if record.blood_type_compatible else 'no'}")

        log_level = logging.WARNING if record.is_high_risk else logging.INFO
        self.logger.log(log_level, " - ".join(log_parts))

    def log_run(self, run: MatchRun) -> None:
        """Log every decision, every skipped recipient, and the run summary."""
        for rank, record in enumerate(run.records, 1):
            self.log_match_decision(rank, record)

        for skipped in run.skipped:
            self.logger.warning(
                f"SKIPPED - Recipient: {skipped.recipient_id} {skipped.name} - "
                f"Field: {skipped.field or 'n/a'} - {skipped.reason}"
            )

        self.log_run_summary(run.statistics)

    def log_run_summary(self, stats: RunStatistics) -> None:
        """
        Log summary statistics for the matching run.

        Args:
            stats: Run statistics to log
        """
        self.logger.info("MATCHING_RUN_COMPLETE")
        self.logger.info(f"TOTAL_RECIPIENTS: {stats.total_recipients}")
        self.logger.info(f"MATCHED: {stats.matched}")
        self.logger.info(f"SKIPPED: {stats.skipped}")
        self.logger.info(f"BLOOD_TYPE_COMPATIBLE: {stats.blood_type_compatible}")
        self.logger.info(f"HIGH_RISK: {stats.high_risk}")

        if stats.category_distribution:
            self.logger.info("CATEGORY_DISTRIBUTION:")
            for category, count in sorted(stats.category_distribution.items()):
                self.logger.info(f"  {category}: {count}")


def _format_profile_value(value) -> str:
    if value is None:
        return "?"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def generate_match_report(run: MatchRun, generated_at: Optional[datetime] = None) -> str:
    """
    Generate a plain-text match report.

    Args:
        run: Completed matching run
        generated_at: Report timestamp (default: now)

    Returns:
        Formatted report
    """
    generated_at = generated_at or datetime.now()
    donor = run.donor
    profile = donor.profile
    gender = getattr(profile.gender, 'value', profile.gender)

    report_lines = [
        "=" * 70,
        "HEART TRANSPLANT MATCH REPORT",
        "=" * 70,
        f"Donor: {donor.name}",
        f"Gender: {gender}, Age: {_format_profile_value(profile.age)}, "
        f"Blood Type: {donor.blood_type or 'Unknown'}",
        f"Height: {_format_profile_value(profile.height)}, "
        f"Weight: {_format_profile_value(profile.weight)}kg",
        f"Donor Predicted Heart Mass: {run.donor_phm:.2f}g",
        f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        ""
    ]

    if run.records:
        report_lines.append(
            f"{'Rank':>4}  {'ID':<10} {'Name':<20} {'Blood':<6} {'Comp':<5} "
            f"{'Recip PHM':>10} {'Ratio':>6}  {'Category':<27} {'Risk':<10}"
        )
        report_lines.append("-" * 110)

        for rank, record in enumerate(run.records, 1):
            recipient = record.recipient
            report_lines.append(
                f"{rank:>4}  {recipient.recipient_id or '':<10} {(recipient.name or '')[:20]:<20} "
                f"{str(recipient.blood_type or 'Unknown'):<6} "
                f"{'yes' if record.blood_type_compatible else 'no':<5} "
                f"{record.recipient_phm:>9.2f}g {record.phm_ratio:>6.2f}  "
                f"{record.match_category.label:<27} {record.risk_level.value:<10}"
            )
    else:
        report_lines.append("No recipients could be matched.")

    report_lines.append("")

    if run.skipped:
        report_lines.extend([
            f"SKIPPED RECIPIENTS ({len(run.skipped)}):",
            "-" * 50
        ])
        for skipped in run.skipped:
            report_lines.append(f"  {skipped.recipient_id} {skipped.name}: {skipped.reason}")
        report_lines.append("")

    report_lines.extend([
        "Risk Categories:",
        "  High Risk: PHM ratio < 0.86",
        "  Acceptable: PHM ratio >= 0.86",
        "",
        "Note: Matches are sorted by:"
    ])

    for i, criterion in enumerate(run.ranking_criteria, 1):
        report_lines.append(f"  {i}. {criterion}")

    report_lines.extend([
        "",
        REFERENCE_CITATION,
        "=" * 70
    ])

    return "\n".join(report_lines)


def result_rows(records: List[MatchRecord]) -> List[dict]:
    """Ranked records as flat rows, values rounded for display."""
    rows = []
    for rank, record in enumerate(records, 1):
        data = record.to_dict()
        rows.append({
            'rank': rank,
            'id': data['id'],
            'name': data['name'],
            'gender': data['gender'],
            'age': data['age'],
            'blood_type': data['blood_type'] or 'Unknown',
            'compatible': 'yes' if record.blood_type_compatible else 'no',
            'exact_blood_type_match': 'yes' if record.exact_blood_type_match else 'no',
            'rhesus_mismatch': 'yes' if record.rhesus_mismatch else 'no',
            'status': data['status'],
            'date_added': data['date_added'] or '',
            'recipient_phm': f"{record.recipient_phm:.2f}",
            'donor_phm': f"{record.donor_phm:.2f}",
            'phm_ratio': f"{record.phm_ratio:.2f}",
            'match_category': data['match_category'],
            'risk_level': data['risk_level'],
        })
    return rows


def write_results_csv(output_file: str, run: MatchRun) -> None:
    """Write the ranked results to a CSV file."""
    with open(output_file, 'w', newline='', encoding='utf-8') as outfile:
        writer = csv.DictWriter(outfile, fieldnames=RESULT_COLUMNS)
        writer.writeheader()
        writer.writerows(result_rows(run.records))

    logging.info(f"Wrote {len(run.records)} ranked recipients to {output_file}")
