"""Export and display adapters for pro forma results."""

from .display import (
    NOT_APPLICABLE,
    format_deal_result,
    format_percent,
    format_ratio,
    format_summary_table,
    round_currency,
)
from .workbook import (
    WorkbookConfig,
    generate_pro_forma_excel,
    projections_to_dataframe,
)

__all__ = [
    "NOT_APPLICABLE",
    "format_deal_result",
    "format_percent",
    "format_ratio",
    "format_summary_table",
    "round_currency",
    "WorkbookConfig",
    "generate_pro_forma_excel",
    "projections_to_dataframe",
]
