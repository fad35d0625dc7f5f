#!/usr/bin/env python3
"""Example script to run the pro forma engine on the retail and office presets."""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from proforma.models.lookups import PropertyType
from proforma.models.waterfall import default_waterfall_config
from proforma.calculations.deal import calculate_deal
from proforma.calculations.sensitivity import SensitivityVariable, run_sensitivity
from proforma.calculations.trace import TraceContext
from proforma.calculations.validation import validate_deal
from proforma.export.display import format_summary_table
from proforma.export.workbook import generate_pro_forma_excel
from tests.fixtures.test_inputs import get_retail_inputs, get_office_inputs

logger = logging.getLogger("run_example")


def run_single_deal(inputs, property_type, excel_path=None):
    """Run one deal and print its summary and validation warnings."""
    print("\n" + "=" * 60)
    print(f"Running {property_type.value} pro forma: {inputs.name}")
    print("=" * 60)

    with TraceContext() as ctx:
        result = calculate_deal(inputs, property_type, default_waterfall_config())

    print("\n" + format_summary_table(result))

    warnings = validate_deal(inputs, property_type)
    if warnings:
        print("\nValidation:")
        for warning in warnings:
            print(f"  [{warning.severity.value.upper()}] {warning.field}: {warning.message}")
    else:
        print("\nValidation: all thresholds met")

    if excel_path:
        Path(excel_path).write_bytes(generate_pro_forma_excel(result, trace_context=ctx))
        logger.info("Wrote workbook to %s", excel_path)

    return result


def run_sensitivity_table(inputs, property_type):
    """Print a sensitivity table for the main value drivers."""
    variables = [
        SensitivityVariable("Exit Cap Rate", "exit_cap_rate", [-10, 0, 10]),
        SensitivityVariable("Shell Cost / SF", "construction_shell_per_sf", [-10, 0, 10]),
        SensitivityVariable("Vacancy", "vacancy_rate", [-50, 0, 50]),
        SensitivityVariable("Perm Rate", "permanent_loan_rate", [-10, 0, 10]),
    ]
    results = run_sensitivity(inputs, property_type, variables, parallel=True)

    print("\n" + "=" * 60)
    print(f"SENSITIVITY: {inputs.name}")
    print("=" * 60)
    print(f"\n{'Variable':<20} {'Adj':>6} {'Value':>10} {'Equity IRR':>11} {'Margin':>8} {'DSCR':>6}")
    print("-" * 66)

    for result in results:
        for row in result.to_dict()["results"]:
            # Non-converged IRR estimates are starred
            irr = row["equityIRR"] if row["equityIRRConverged"] else row["equityIRR"] + "*"
            print(
                f"{result.variable:<20} {row['adjustment']:>+5}% {row['value']:>10.2f} "
                f"{irr:>11} {row['developmentMargin']:>8} {row['dscr']:>6}"
            )


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Development Pro Forma")
    parser.add_argument(
        "--sensitivity",
        action="store_true",
        help="Run sensitivity tables for both presets",
    )
    parser.add_argument(
        "--excel",
        metavar="DIR",
        help="Write a workbook per preset into DIR",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    presets = [
        (get_retail_inputs(), PropertyType.RETAIL),
        (get_office_inputs(), PropertyType.OFFICE),
    ]

    for inputs, property_type in presets:
        excel_path = None
        if args.excel:
            excel_path = Path(args.excel) / f"{property_type.value}_pro_forma.xlsx"
        run_single_deal(inputs, property_type, excel_path)

        if args.sensitivity:
            run_sensitivity_table(inputs, property_type)

    print("\nDone.")


if __name__ == "__main__":
    main()
