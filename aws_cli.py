"""
aws_cli.py - Thin wrapper around the AWS command line interface

Runs an ``aws`` command, decodes the JSON it prints and reports failures as
``(False, message)`` instead of raising. Credentials, retries and paging
are left to the AWS CLI itself.
"""

import json
import os
import subprocess
from typing import Any, List, Optional, Tuple

DEFAULT_AWS_BIN = os.environ.get("AWSUTILS_AWS_BIN", "aws")


def build_aws_command(cmd: List[str], profile: Optional[str] = None, region: Optional[str] = None,
                      aws_bin: str = DEFAULT_AWS_BIN, no_verify_ssl: bool = False) -> List[str]:
    """Build the full argument list for an AWS CLI call."""
    full_cmd = [aws_bin] + cmd + ["--output", "json"]
    if profile:
        full_cmd += ["--profile", profile]
    if region:
        full_cmd += ["--region", region]
    if no_verify_ssl:
        full_cmd.append("--no-verify-ssl")
    return full_cmd


def run_aws_command(cmd: List[str], profile: Optional[str] = None, region: Optional[str] = None,
                    aws_bin: str = DEFAULT_AWS_BIN, no_verify_ssl: bool = False) -> Tuple[bool, Any]:
    """Run AWS CLI command and return parsed JSON output."""
    full_cmd = build_aws_command(cmd, profile, region, aws_bin, no_verify_ssl)

    try:
        result = subprocess.run(full_cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        return False, f"AWS CLI executable '{aws_bin}' not found"
    except (subprocess.SubprocessError, OSError) as e:
        return False, f"Failed to execute AWS CLI command: {str(e)}"

    if result.returncode != 0:
        error_msg = result.stderr.strip() or f"exit status {result.returncode}"
        return False, f"'{' '.join(full_cmd)}' failed: {error_msg}"

    try:
        return True, json.loads(result.stdout)
    except json.JSONDecodeError as e:
        return False, f"Failed to parse JSON output from AWS CLI: {e}"
