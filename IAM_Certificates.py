"""
IAM_Certificates.py - IAM server certificate expiry summary

Lists the server certificates uploaded to IAM and classifies each one by
how close it is to expiring:

- OK:            expires more than one calendar month from now
- Expiring soon: expires within the next calendar month
- Expired:       expiration is now or in the past

Output:
- Table with ID, Name and Status columns
- Optional Excel workbook with the expiration dates included
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from aws_cli import run_aws_command
from console import format_table

CERTIFICATE_COLUMNS = ["ID", "Name", "Status"]


class ExpiryStatus(Enum):
    """Expiry classification of a certificate."""

    OK = "OK"
    EXPIRING_SOON = "Expiring soon"
    EXPIRED = "Expired"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_expiration(value: Any) -> datetime:
    """Parse an AWS CLI timestamp such as 2024-05-01T12:00:00Z."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"invalid expiration timestamp: {value!r}")
    return _as_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))


def resolve_status(expiration: datetime, now: Optional[datetime] = None) -> ExpiryStatus:
    """
    Resolve a certificate's expiry status.

    The warning horizon is one calendar month, so on the 31st of January the
    threshold is the end of February rather than a fixed 30 days ahead.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    expiration = _as_utc(expiration)
    now = _as_utc(now)
    # Only the current time goes through pandas; expirations may lie past pd.Timestamp.max
    threshold = (pd.Timestamp(now) + pd.DateOffset(months=1)).to_pydatetime()

    if expiration > threshold:
        return ExpiryStatus.OK
    if expiration > now:
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.EXPIRED


def get_server_certificates(profile: Optional[str] = None, region: Optional[str] = None,
                            **aws_options) -> Tuple[bool, Any]:
    """Retrieve IAM server certificate metadata for an account."""
    ok, data = run_aws_command(["iam", "list-server-certificates"], profile, region, **aws_options)
    if not ok:
        return False, data

    certificates = data.get("ServerCertificateMetadataList", []) if isinstance(data, dict) else None
    if not isinstance(certificates, list):
        return False, "Unexpected response from list-server-certificates"
    return True, certificates


def summarize_certificates(certificates: List[Dict[str, Any]],
                           now: Optional[datetime] = None) -> pd.DataFrame:
    """Build the certificate summary; raises ValueError on a bad expiration."""
    rows = []
    for cert in certificates:
        if not isinstance(cert, dict):
            raise ValueError(f"unexpected certificate record: {cert!r}")
        expiration = parse_expiration(cert.get("Expiration"))
        rows.append({
            'ID': cert.get('ServerCertificateId', ''),
            'Name': cert.get('ServerCertificateName', ''),
            'Status': resolve_status(expiration, now).value,
            'Expiration': expiration.isoformat(),
        })

    return pd.DataFrame(rows, columns=CERTIFICATE_COLUMNS + ["Expiration"])


def render_certificate_table(frame: pd.DataFrame) -> str:
    """Render the certificate summary as an aligned ID/Name/Status table."""
    return format_table(CERTIFICATE_COLUMNS, frame[CERTIFICATE_COLUMNS].values.tolist())
