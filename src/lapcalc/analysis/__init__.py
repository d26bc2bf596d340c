"""Session analysis output: CSV and JSON export, diagnostic plots."""

from lapcalc.analysis.export import export_lap_summary_json, export_records_csv
from lapcalc.analysis.plots import export_standard_plots

__all__ = [
    "export_lap_summary_json",
    "export_records_csv",
    "export_standard_plots",
]
