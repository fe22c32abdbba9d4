#!/usr/bin/env python3
"""
awsutils.py - Summaries of AWS IAM certificates and CloudFront distributions

Wraps the AWS CLI and turns its JSON output into readable reports.

Commands:
- iam certs:                   certificate expiry status per IAM server certificate
- cloudfront export-configs:   one JSON file per distribution in the current directory
- cloudfront dists:            distribution summary table (or --csv)

Setup:
1. Ensure AWS CLI is installed and configured with proper permissions
2. Run: awsutils cloudfront dists --order-by status
"""

import argparse
import sys
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import pandas as pd

import CloudFront
import IAM_Certificates
from aws_cli import DEFAULT_AWS_BIN
from console import error, format_table, info, setup_console, success

__version__ = "1.0.0"

DEFAULT_ORDER_BY = "alias"
DEFAULT_NAME_FROM = "id"

# Marker for --xlsx given without a filename
TIMESTAMPED = "-"


def aws_options(args: argparse.Namespace) -> dict:
    """Options passed through to every AWS CLI call."""
    return {
        "profile": args.profile,
        "region": args.region,
        "aws_bin": args.aws_bin,
        "no_verify_ssl": args.no_verify_ssl,
    }


def report_filename(requested: Optional[str], prefix: str) -> Optional[str]:
    """Resolve the --xlsx argument, naming the file after the current time if omitted."""
    if requested == TIMESTAMPED:
        timestamp = datetime.now().strftime("%Y_%m_%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
    return requested


def write_report(frame: pd.DataFrame, filename: str, sheet_name: str) -> bool:
    """Write a summary frame to an Excel workbook."""
    try:
        frame.to_excel(filename, index=False, sheet_name=sheet_name)
    except (OSError, ValueError) as e:
        error(f"Unable to write Excel report '{filename}': {e}")
        return False
    success(f"Report saved to {filename}")
    return True


def cmd_iam_certs(args: argparse.Namespace) -> int:
    """Summarise IAM server certificates and their expiry status."""
    info("Checking IAM server certificates...")
    ok, result = IAM_Certificates.get_server_certificates(**aws_options(args))
    if not ok:
        error(result)
        return 1

    try:
        certificates = IAM_Certificates.summarize_certificates(result)
    except ValueError as e:
        error(f"Failed to read list-server-certificates output: {e}")
        return 1

    print(IAM_Certificates.render_certificate_table(certificates))

    filename = report_filename(args.xlsx, "iam_certificates")
    if filename and not write_report(certificates, filename, "IAM_Certificates"):
        return 1
    return 0


def cmd_cloudfront_export_configs(args: argparse.Namespace) -> int:
    """Export every CloudFront distribution config to its own JSON file."""
    info("Checking CloudFront distributions...")
    ok, result = CloudFront.get_cloudfront_distributions(**aws_options(args))
    if not ok:
        error(result)
        return 1

    exported = CloudFront.export_distributions(result, name_from=args.name_from)
    print(format_table(list(exported.columns), exported.values.tolist()))
    info(f"Exported {len(exported)} of {len(result)} distributions")
    return 0


def cmd_cloudfront_dists(args: argparse.Namespace) -> int:
    """Summarise CloudFront distributions as a table or CSV."""
    info("Checking CloudFront distributions...")
    ok, result = CloudFront.get_cloudfront_distributions(**aws_options(args))
    if not ok:
        error(result)
        return 1

    summaries = CloudFront.summarize_distributions(result)
    summaries = CloudFront.sort_summaries(summaries, args.order_by)

    if args.csv:
        print(CloudFront.render_summary_csv(summaries))
    else:
        print(CloudFront.render_summary_table(summaries))

    filename = report_filename(args.xlsx, "cloudfront_distributions")
    if filename and not write_report(summaries, filename, "CloudFront_Distributions"):
        return 1
    return 0


Handler = Callable[[argparse.Namespace], int]

COMMANDS: Dict[Tuple[str, str], Handler] = {
    ("iam", "certs"): cmd_iam_certs,
    ("cloudfront", "export-configs"): cmd_cloudfront_export_configs,
    ("cloudfront", "dists"): cmd_cloudfront_dists,
}


def add_xlsx_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--xlsx", nargs="?", const=TIMESTAMPED, metavar="FILE",
                        help="also save the summary as an Excel workbook "
                             "(default name includes a timestamp)")


def build_parser() -> argparse.ArgumentParser:
    """Build the awsutils command tree; every leaf records its COMMANDS key."""
    parser = argparse.ArgumentParser(
        prog="awsutils",
        description="automation of Amazon Web Services configurations through their API"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--profile", type=str, help="AWS CLI profile name")
    parser.add_argument("--region", type=str, help="AWS region")
    parser.add_argument("--aws-bin", type=str, default=DEFAULT_AWS_BIN,
                        help=f"AWS CLI executable (default: {DEFAULT_AWS_BIN})")
    parser.add_argument("--no-verify-ssl", action="store_true",
                        help="pass --no-verify-ssl to the AWS CLI")
    parser.add_argument("--no-color", action="store_true", help="disable coloured messages")

    services = parser.add_subparsers(dest="service", metavar="SERVICE")
    services.required = True

    iam = services.add_parser("iam", help="use the AWS iam API")
    iam_commands = iam.add_subparsers(dest="action", metavar="COMMAND")
    iam_commands.required = True
    certs = iam_commands.add_parser(
        "certs", help="summarise certificate configurations available in your AWS account")
    add_xlsx_argument(certs)
    certs.set_defaults(command=("iam", "certs"))

    cloudfront = services.add_parser("cloudfront", aliases=["cf"], help="use the AWS cloudfront API")
    cf_commands = cloudfront.add_subparsers(dest="action", metavar="COMMAND")
    cf_commands.required = True

    export = cf_commands.add_parser(
        "export-configs", help="export the cloudfront distribution configurations")
    export.add_argument("--name-from", choices=sorted(CloudFront.EXPORT_NAME_FIELDS),
                        default=DEFAULT_NAME_FROM,
                        help="origin field used to name each exported file "
                             f"(default: {DEFAULT_NAME_FROM})")
    export.set_defaults(command=("cloudfront", "export-configs"))

    dists = cf_commands.add_parser(
        "dists", help="summarize the cloudfront distribution configurations")
    # Unknown values fall back to alias with a warning instead of a usage error
    dists.add_argument("--order-by", default=DEFAULT_ORDER_BY,
                       help="sort results on alias|origin|status")
    dists.add_argument("--csv", action="store_true", help="output as csv")
    add_xlsx_argument(dists)
    dists.set_defaults(command=("cloudfront", "dists"))

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)
    setup_console(color=not args.no_color)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
