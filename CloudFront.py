"""
CloudFront.py - AWS CloudFront distribution summary and export

Summarises the CloudFront distributions of an account into one row per
distribution (ID, domain, aliases, primary origin, status), or exports the
full configuration of every distribution to its own JSON file.

Output:
- Aligned table or semicolon separated text on stdout
- <origin>.json per distribution for export-configs
"""

import json
import os
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from aws_cli import run_aws_command
from console import format_table, warning

SUMMARY_COLUMNS = ["ID", "Domain", "Alias", "Origin", "Status"]

# --order-by values and the summary column each one sorts on
SORT_KEYS = {
    "alias": "Alias",
    "origin": "Origin",
    "status": "Status",
}

# --name-from values and the origin field each export filename comes from
EXPORT_NAME_FIELDS = {
    "id": "Id",
    "domain": "DomainName",
}


def get_cloudfront_distributions(profile: Optional[str] = None, region: Optional[str] = None,
                                 **aws_options) -> Tuple[bool, Any]:
    """Retrieve CloudFront distributions for an account."""
    ok, data = run_aws_command(["cloudfront", "list-distributions"], profile, region, **aws_options)
    if not ok:
        return False, data

    # An account without distributions returns a DistributionList without Items
    dist_list = data.get("DistributionList", {}) if isinstance(data, dict) else None
    if not isinstance(dist_list, dict):
        return False, "Unexpected response from list-distributions"

    items = dist_list.get("Items", [])
    if not isinstance(items, list):
        return False, "Unexpected response from list-distributions"
    return True, [dist for dist in items if isinstance(dist, dict)]


def _items(block: Any) -> List[Any]:
    """Return the Items list of a Quantity/Items block, or an empty list."""
    if not isinstance(block, dict):
        return []
    items = block.get("Items")
    return items if isinstance(items, list) else []


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def extract_aliases(aliases: Any) -> str:
    """Join the alias names with commas."""
    return ",".join(alias for alias in _items(aliases) if isinstance(alias, str))


def extract_primary_origin(origins: Any) -> str:
    """
    Select the domain of the primary origin.

    The primary origin is one with an empty OriginPath. All origins are
    scanned, so when several qualify the last one wins.
    """
    primary = ""
    for origin in _items(origins):
        if not isinstance(origin, dict):
            continue
        if origin.get("OriginPath") == "" and isinstance(origin.get("DomainName"), str):
            primary = origin["DomainName"]
    return primary


def summarize_distribution(dist: Dict[str, Any]) -> Dict[str, str]:
    """Process a single CloudFront distribution."""
    return {
        'ID': _text(dist.get('Id')),
        'Domain': _text(dist.get('DomainName')),
        'Alias': extract_aliases(dist.get('Aliases')),
        'Origin': extract_primary_origin(dist.get('Origins')),
        'Status': _text(dist.get('Status')),
    }


def summarize_distributions(distributions: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame([summarize_distribution(dist) for dist in distributions],
                        columns=SUMMARY_COLUMNS)


def sort_summaries(summaries: pd.DataFrame, order_by: str) -> pd.DataFrame:
    """Sort summaries on alias, origin or status, keeping input order for ties."""
    column = SORT_KEYS.get(order_by)
    if column is None:
        warning(f"Unrecognised value for {order_by}. Sorting by alias instead.")
        column = SORT_KEYS["alias"]
    return summaries.sort_values(column, kind="stable").reset_index(drop=True)


def render_summary_table(summaries: pd.DataFrame) -> str:
    return format_table(SUMMARY_COLUMNS, summaries[SUMMARY_COLUMNS].values.tolist())


def render_summary_csv(summaries: pd.DataFrame) -> str:
    """
    Render summaries as semicolon separated, double quoted fields.

    Quotes and semicolons inside values are not escaped.
    """
    lines = [";".join(SUMMARY_COLUMNS)]
    for row in summaries[SUMMARY_COLUMNS].itertuples(index=False):
        lines.append(";".join(f'"{value}"' for value in row))
    return "\n".join(lines)


def export_filename(dist: Dict[str, Any], name_from: str = "id") -> Optional[str]:
    """Derive the export filename from the distribution's first origin."""
    origins = _items(dist.get('Origins'))
    if not origins or not isinstance(origins[0], dict):
        return None
    name = origins[0].get(EXPORT_NAME_FIELDS[name_from])
    if not isinstance(name, str) or not name:
        return None
    return f"{name}.json"


def export_distribution(dist: Dict[str, Any], name_from: str = "id") -> Optional[str]:
    """Write one distribution config to the working directory; return the filename."""
    filename = export_filename(dist, name_from)
    if filename is None:
        warning(f"Distribution {_text(dist.get('Id')) or '<unknown>'} has no usable origin "
                f"{EXPORT_NAME_FIELDS[name_from]}; unable to create file in '{os.getcwd()}'")
        return None

    try:
        with open(filename, 'w') as f:
            json.dump(dist, f, indent=2)
    except (OSError, ValueError):
        warning(f"Unable to create file '{filename}' in '{os.getcwd()}'")
        return None
    return filename


def export_distributions(distributions: List[Dict[str, Any]], name_from: str = "id") -> pd.DataFrame:
    """Export every distribution config; failures are reported and skipped."""
    exported = []
    for dist in distributions:
        filename = export_distribution(dist, name_from)
        if filename is None:
            continue
        origin = _items(dist.get('Origins'))[0]
        exported.append({'DomainName': _text(origin.get('DomainName')), 'File': filename})

    return pd.DataFrame(exported, columns=['DomainName', 'File'])
