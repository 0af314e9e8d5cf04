import argparse
import sys

from lxml import etree

from country_codes import (
    DEFAULT_COUNTRIES_FILE,
    CountryRegistry,
    default_registry,
    download_country_codes,
)
from error_utils import data_error, file_error, validation_error
from file_utils import ensure_directory_exists, get_output_filename, read_isins
from isin_utils import InvalidInputError, compute_check_digit, diagnose_isin
from xml_output import IsinReport

REPORT_SCHEMA = "schemas/isin_report.xsd"


def load_registry(args) -> CountryRegistry:
    if args.countries_url:
        download_country_codes(args.countries_url, args.countries)
    if not args.countries:
        return default_registry()
    try:
        registry = CountryRegistry.from_xml(args.countries)
    except OSError as e:
        file_error("reading", args.countries, str(e))
    except etree.XMLSyntaxError as e:
        file_error("parsing", args.countries, str(e))
    except ValueError as e:
        data_error("country list", str(e), args.countries)
    print(f"Loaded {len(registry)} country codes from {args.countries}")
    return registry


def check_digit(prefix: str):
    try:
        digit = compute_check_digit(prefix)
    except InvalidInputError:
        validation_error(
            "ISIN prefix",
            prefix,
            "the first 11 characters of an ISIN: 2 letters + 9 letters or digits",
        )
    print(f"Check digit for {prefix}: {digit} ({prefix}{digit})")


def validate(args, registry) -> int:
    candidates = list(args.isins)
    if args.file:
        candidates += read_isins(args.file, args.column)
        print(f"Read {len(candidates) - len(args.isins)} ISINs from {args.file}")

    outcomes = [diagnose_isin(candidate, registry) for candidate in candidates]
    for outcome in outcomes:
        if not outcome.is_valid:
            print(outcome.message)
        elif not args.quiet:
            print(f"{outcome.value} is valid")

    invalid = sum(1 for outcome in outcomes if not outcome.is_valid)
    print(f"Checked {len(outcomes)} ISINs: {len(outcomes) - invalid} valid, {invalid} invalid")

    if args.report is not None:
        path = get_output_filename(args.report or None, "isin_report")
        ensure_directory_exists(path)
        report = IsinReport(outcomes, path)
        report.write()
        if args.verify:
            report.verify(args.verify)

    return 1 if invalid else 0


def main(argv=None):
    # Parse the arguments
    parser = argparse.ArgumentParser(
        description="Validate ISINs (International Securities Identification Numbers)"
    )
    parser.add_argument("isins", nargs="*", metavar="ISIN", help="ISINs to validate")
    parser.add_argument("--file", help="Path to a text, CSV or Excel file with ISINs")
    parser.add_argument("--column", help="Column with the ISINs (CSV and Excel files)")
    parser.add_argument(
        "--check-digit",
        metavar="PREFIX",
        help="Print the check digit for the first 11 characters of an ISIN",
    )
    parser.add_argument("--countries", help="Path to an XML country list to use instead of ISO 3166-1")
    parser.add_argument(
        "--countries-url",
        help="Download the XML country list from this URL first (at most once a day)",
    )
    parser.add_argument(
        "--report",
        nargs="?",
        const="",
        help="Write an XML report (timestamped file in data/ if no path is given)",
    )
    parser.add_argument(
        "--verify",
        nargs="?",
        const=REPORT_SCHEMA,
        help="Verify the XML report against an xsd schema",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print invalid ISINs")
    args = parser.parse_args(argv)

    if args.countries_url and not args.countries:
        args.countries = DEFAULT_COUNTRIES_FILE
    if args.column and not args.file:
        parser.error("--column requires --file")
    if args.verify and args.report is None:
        parser.error("--verify requires --report")

    if args.check_digit:
        check_digit(args.check_digit)
        if not args.isins and not args.file:
            return 0

    if not args.isins and not args.file:
        parser.error("No ISINs provided")

    registry = load_registry(args)
    return validate(args, registry)


if __name__ == "__main__":
    sys.exit(main())
