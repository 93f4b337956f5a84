"""Plan vs. MES production data reconciliation."""

__version__ = "0.1.0"

from .analysis.deviation import ReconciliationStats, build_stats, filter_records, preview
from .compare.joiner import ComparisonResult, MergedRecord, compare, reconcile
from .errors import MappingError, ProdCompareError, SourceReadError
from .export.report import export_workbook, write_report
from .ingest import RawTable, parse_number, read_html_report, read_source, read_spreadsheet
from .mapping.detector import propose_mapping
from .schemas import ColumnMapping, FieldRole

__all__ = [
    "ColumnMapping", "ComparisonResult", "FieldRole", "MappingError", "MergedRecord",
    "ProdCompareError", "RawTable", "ReconciliationStats", "SourceReadError",
    "build_stats", "compare", "export_workbook", "filter_records", "parse_number",
    "preview", "propose_mapping", "read_html_report", "read_source", "read_spreadsheet",
    "reconcile", "write_report",
]
