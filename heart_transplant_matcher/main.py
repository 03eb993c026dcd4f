#!/usr/bin/env python3
"""
Heart Transplant Matcher - Main Entrypoint

Ranks a recipient waiting list against one donor using Predicted Heart Mass
(PHM) size matching and blood type compatibility.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.data_models import BiometricProfile, Donor
from .core.exceptions import HeartMatchError
from .core.matching_service import HeartMatchingService
from .core.ranker import RANKING_POLICIES, RankingPolicy, get_policy
from .reporting.audit_logger import MatchAuditLogger, generate_match_report, write_results_csv
from .utils.normalizers import normalize_blood_type, normalize_gender


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    format_str = '%(asctime)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Heart Transplant Matcher - PHM size matching of a donor against a waiting list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s waiting_list.xlsx --donor-name "Donor 1" --donor-gender male \\
      --donor-age 45 --donor-height 180 --donor-weight 80 --donor-blood-type O-
  %(prog)s recipients.csv ... --policy waiting_list -o ranked.csv
  %(prog)s recipients.csv ... --rank-by blood_type_compatibility,status,date_added
        """
    )

    parser.add_argument('recipients_file', help='Recipient waiting list file path (.xlsx or .csv)')
    parser.add_argument('--donor-name', required=True, help='Donor name')
    parser.add_argument('--donor-gender', required=True, help='Donor gender (male/female)')
    parser.add_argument('--donor-age', required=True, type=float, help='Donor age in years')
    parser.add_argument('--donor-height', required=True, type=float,
                        help='Donor height in cm (values <= 3 are read as meters)')
    parser.add_argument('--donor-weight', required=True, type=float, help='Donor weight in kg')
    parser.add_argument('--donor-blood-type', help='Donor blood type, e.g. O- or AB+')
    parser.add_argument('--policy', choices=sorted(RANKING_POLICIES), default='size_match',
                        help='Ranking policy (default: size_match)')
    parser.add_argument('--rank-by',
                        help='Comma-separated ranking stages, overrides the policy stages')
    parser.add_argument('-o', '--output', help='Ranked results CSV file')
    parser.add_argument('--report', help='Text report file (default: stderr)')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')
    return parser


def resolve_policy(policy_name: str, rank_by: Optional[str]) -> RankingPolicy:
    """Pick the preset policy, optionally replacing its stages."""
    policy = get_policy(policy_name)
    if not rank_by:
        return policy

    stage_names: List[str] = [name.strip() for name in rank_by.split(',') if name.strip()]
    return RankingPolicy.from_stage_names(
        name=f"{policy.name}_custom",
        stage_names=stage_names,
        compatibility_policy=policy.compatibility_policy,
        description=f"Custom ordering: {', '.join(stage_names)}"
    )


def build_donor(args: argparse.Namespace) -> Donor:
    """Build the donor from command line arguments."""
    blood_type = None
    if args.donor_blood_type:
        blood_type = normalize_blood_type(args.donor_blood_type)
        if blood_type is None:
            logging.warning(f"Unrecognized donor blood type '{args.donor_blood_type}', treated as unknown")

    return Donor(
        name=args.donor_name,
        profile=BiometricProfile(
            gender=normalize_gender(args.donor_gender),
            age=args.donor_age,
            height=args.donor_height,
            weight=args.donor_weight
        ),
        blood_type=blood_type
    )


def main(argv: Optional[List[str]] = None):
    """Main entrypoint for the heart transplant matcher."""
    args = build_parser().parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)

    # Validate input file
    if not Path(args.recipients_file).exists():
        print(f"Error: Recipient file not found: {args.recipients_file}", file=sys.stderr)
        sys.exit(1)

    try:
        policy = resolve_policy(args.policy, args.rank_by)
        service = HeartMatchingService(ranking_policy=policy)

        donor = build_donor(args)
        recipients = service.load_recipients(args.recipients_file)
        run = service.run(donor, recipients)

        MatchAuditLogger().log_run(run)

        if args.output:
            write_results_csv(args.output, run)

        report = generate_match_report(run)
        if args.report:
            with open(args.report, 'w', encoding='utf-8') as report_file:
                report_file.write(report + "\n")
            logging.info(f"Report written to {args.report}")
        else:
            print(report, file=sys.stderr)

        stats = run.statistics
        print(f"\nMatching complete! {stats.matched} ranked, {stats.skipped} skipped | "
              f"Compatible rate: {stats.get_compatible_rate():.1%}", file=sys.stderr)

    except (HeartMatchError, ValueError, OSError) as e:
        logging.error(f"Processing failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
