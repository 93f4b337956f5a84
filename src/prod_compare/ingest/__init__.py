from .html_report import read_html_report
from .numbers import parse_number
from .sources import read_source
from .spreadsheet import read_spreadsheet
from .table import RawTable

__all__ = ["RawTable", "parse_number", "read_html_report", "read_source", "read_spreadsheet"]
