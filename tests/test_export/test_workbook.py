"""Tests for the pro forma workbook export."""

import io

from openpyxl import load_workbook

from proforma.calculations.deal import calculate_deal
from proforma.calculations.trace import TraceContext
from proforma.export.workbook import (
    WorkbookConfig,
    generate_pro_forma_excel,
    projections_to_dataframe,
)
from proforma.models.lookups import PropertyType
from proforma.models.waterfall import default_waterfall_config


class TestProjectionsDataFrame:
    """Tests for the projection DataFrame."""

    def test_one_row_per_year(self, retail_result):
        df = projections_to_dataframe(retail_result)

        assert len(df) == len(retail_result.projections)
        assert df.index.name == "period"
        assert list(df.index) == list(range(1, 12))

    def test_values_unrounded(self, retail_result):
        df = projections_to_dataframe(retail_result)

        assert df.loc[2, "gross_rent"] == retail_result.projections[1].gross_rent
        assert bool(df.loc[1, "is_construction"]) is True
        assert df.loc[1, "noi"] == 0


class TestGenerateWorkbook:
    """Tests for workbook generation."""

    def test_sheets_with_trace(self, retail_inputs):
        with TraceContext() as ctx:
            result = calculate_deal(retail_inputs, PropertyType.RETAIL, default_waterfall_config())

        content = generate_pro_forma_excel(result, trace_context=ctx)
        wb = load_workbook(io.BytesIO(content))

        assert wb.sheetnames == [
            "Summary", "Development Budget", "Projections", "Waterfall", "Traced Calculations",
        ]

    def test_no_waterfall_sheet_without_waterfall(self, office_result):
        wb = load_workbook(io.BytesIO(generate_pro_forma_excel(office_result)))

        assert "Waterfall" not in wb.sheetnames
        assert "Traced Calculations" not in wb.sheetnames

    def test_formula_registry_sheet_optional(self, office_result):
        config = WorkbookConfig(include_formula_registry=True, include_projections=False)
        wb = load_workbook(io.BytesIO(generate_pro_forma_excel(office_result, config)))

        assert "Formula Registry" in wb.sheetnames
        assert "Projections" not in wb.sheetnames

    def test_projection_header_row(self, retail_result):
        wb = load_workbook(io.BytesIO(generate_pro_forma_excel(retail_result)))
        ws = wb["Projections"]

        assert ws.cell(row=3, column=1).value == "Period"
        assert ws.cell(row=3, column=2).value == "Year"
        assert ws.cell(row=4, column=2).value == "Construction Year 1"

    def test_summary_names_property_type(self, office_result):
        wb = load_workbook(io.BytesIO(generate_pro_forma_excel(office_result)))
        values = [cell.value for row in wb["Summary"].iter_rows() for cell in row]

        assert "Property Type: Office" in values
