"""Shared fixtures and the YAML resolution fixture loader.

Each fixture document under tests/fixtures/ carries a configuration and
a list of cases. A case gives either a ``url`` (decomposed first) or a
``path`` with ``params``, and an ``expect`` block holding either the
expected target/group/routing or the expected miss reason.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from aka import RedirectRequest, RedirectService, decompose_url

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


SAMPLE_DOCUMENT: dict[str, Any] = {
    "version": "1.0.0",
    "metadata": {
        "created": "2024-01-15T10:00:00Z",
        "lastModified": "2024-02-01T08:30:00Z",
        "author": "AKA Service Team",
    },
    "groups": [
        {
            "name": "Eheschliessung",
            "description": "Test routing group",
            "dependsOnKey": "leika",
            "dependsOnValue": "99059001000000",
            "routings": [
                {
                    "name": "BzMitte",
                    "dependsOnKey": "oeid",
                    "dependsOnValue": "2289",
                    "redirectTarget": "https://example.com/eheschliessung/bzmitte",
                },
                {
                    "name": "Default",
                    "redirectTarget": "https://example.com/eheschliessung/default",
                },
            ],
        },
        {
            "name": "SimpleRedirect",
            "description": "Simple redirect without dependencies",
            "routings": [
                {"name": "Direct", "redirectTarget": "https://example.com/simple"},
            ],
        },
    ],
}


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A fresh, mutable copy of the sample configuration document."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def service(sample_document: dict[str, Any]) -> RedirectService:
    svc = RedirectService()
    svc.initialize(sample_document)
    return svc


# ─── YAML fixture loading ───────────────────────────────────────────────────


@dataclass
class ResolveCase:
    """A single resolution case from a fixture document."""

    fixture_name: str
    case_name: str
    config: dict[str, Any]
    request: RedirectRequest
    url: str | None
    expect: dict[str, Any]

    @property
    def id(self) -> str:
        return f"{self.fixture_name}/{self.case_name}"


def load_resolve_fixtures() -> list[ResolveCase]:
    """Load every case from every fixture file, in file order."""
    cases: list[ResolveCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[ResolveCase]:
    cases: list[ResolveCase] = []
    with path.open(encoding="utf-8") as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            for case in doc["cases"]:
                url = case.get("url")
                if url is not None:
                    request = decompose_url(url)
                else:
                    params = {str(k): str(v) for k, v in case.get("params", {}).items()}
                    request = RedirectRequest(path=case["path"], params=params)
                cases.append(
                    ResolveCase(
                        fixture_name=doc["name"],
                        case_name=case["name"],
                        config=doc["config"],
                        request=request,
                        url=url,
                        expect=case["expect"],
                    )
                )
    return cases
