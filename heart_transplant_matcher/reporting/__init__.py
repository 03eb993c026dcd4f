"""Match reports and audit logging."""

from .audit_logger import MatchAuditLogger, generate_match_report, write_results_csv

__all__ = [
    'MatchAuditLogger',
    'generate_match_report',
    'write_results_csv'
]
