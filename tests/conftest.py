"""
Shared fixtures for awsutils tests.

AWS CLI calls are replaced with a fake ``subprocess.run`` so no test ever
starts a real process.
"""

import json
import subprocess
from typing import Any, Dict, List, Optional

import pytest

import aws_cli
import console


def make_distribution(
    dist_id: str,
    domain: str = "",
    status: str = "Deployed",
    aliases: Optional[List[str]] = None,
    origins: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """Build a list-distributions item with the nested blocks the CLI returns."""
    origins = origins if origins is not None else []
    dist = {
        "Id": dist_id,
        "ARN": f"arn:aws:cloudfront::123456789012:distribution/{dist_id}",
        "Status": status,
        "DomainName": domain or f"{dist_id.lower()}.cloudfront.net",
        "Enabled": True,
        "Comment": "",
        "PriceClass": "PriceClass_All",
        "Origins": {"Quantity": len(origins), "Items": origins},
        "Aliases": {"Quantity": len(aliases or [])},
        "DefaultCacheBehavior": {
            "TargetOriginId": origins[0].get("Id", "") if origins else "",
            "ViewerProtocolPolicy": "redirect-to-https",
            "ForwardedValues": {"QueryString": False, "Cookies": {"Forward": "none"}},
        },
        "CacheBehaviors": {"Quantity": 0},
        "ViewerCertificate": {"CloudFrontDefaultCertificate": True},
        "Restrictions": {"GeoRestriction": {"RestrictionType": "none", "Quantity": 0}},
    }
    if aliases:
        dist["Aliases"]["Items"] = aliases
    return dist


def make_origin(origin_id: str, domain: str, path: str = "") -> Dict[str, Any]:
    return {"Id": origin_id, "DomainName": domain, "OriginPath": path}


class FakeAwsCli:
    """Stands in for subprocess.run and records the commands it was given."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.stdout = ""
        self.stderr = ""
        self.returncode = 0
        self.raises: Optional[Exception] = None

    def respond(self, payload: Any) -> None:
        self.stdout = json.dumps(payload)

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_aws(monkeypatch) -> FakeAwsCli:
    fake = FakeAwsCli()
    monkeypatch.setattr(aws_cli.subprocess, "run", fake)
    return fake


@pytest.fixture(autouse=True)
def plain_console(monkeypatch):
    """Keep diagnostics free of ANSI colour codes."""
    monkeypatch.setattr(console, "USE_COLOR", False)


@pytest.fixture
def distributions() -> List[Dict[str, Any]]:
    return [
        make_distribution(
            "E2QWRUHEXAMPLE",
            status="InProgress",
            aliases=["www.example.com", "example.com"],
            origins=[
                make_origin("assets", "assets.example.s3.amazonaws.com", "/static"),
                make_origin("web", "web.example.com"),
            ],
        ),
        make_distribution(
            "E1ABCDEXAMPLE",
            status="Deployed",
            aliases=["api.example.org"],
            origins=[make_origin("api", "api-origin.example.org")],
        ),
        make_distribution(
            "E3NOALIASES",
            status="Deployed",
            origins=[make_origin("bucket", "bucket.s3.amazonaws.com", "/v2")],
        ),
    ]
