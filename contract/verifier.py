"""Replay a pact file against a running (or in-process) provider."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import httpx

from storefront.logging import get_logger

logger = get_logger(__name__)

STATES_PATH = "/_pact/provider-states"


@dataclass
class Mismatch:
    description: str
    reason: str


@dataclass
class VerificationResult:
    verified: List[str] = field(default_factory=list)
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


def load_pact(path: Union[str, Path]) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _states(interaction: Dict[str, Any]) -> List[str]:
    if "providerStates" in interaction:
        return [s["name"] for s in interaction["providerStates"]]
    if interaction.get("providerState"):
        return [interaction["providerState"]]
    return []


async def _setup_states(client: httpx.AsyncClient, states: List[str], states_path: str) -> None:
    if not states:
        await client.post(states_path, json={"state": None})
    for name in states:
        r = await client.post(states_path, json={"state": name})
        r.raise_for_status()


async def verify_interaction(
    client: httpx.AsyncClient, interaction: Dict[str, Any], states_path: str = STATES_PATH
) -> List[str]:
    """Return the reasons this interaction does not hold (empty when it does)."""
    await _setup_states(client, _states(interaction), states_path)

    request = interaction["request"]
    kwargs = {}
    if "body" in request:
        kwargs["json"] = request["body"]
    r = await client.request(request["method"], request["path"], params=request.get("query"), **kwargs)

    expected = interaction["response"]
    reasons = []
    if r.status_code != expected["status"]:
        reasons.append(f"status {r.status_code} != {expected['status']}")
    if "body" in expected:
        try:
            actual_body = r.json()
        except ValueError:
            actual_body = r.text
        if actual_body != expected["body"]:
            reasons.append(f"body {actual_body!r} != {expected['body']!r}")
    return reasons


async def verify_pact(
    pact: Dict[str, Any], client: httpx.AsyncClient, states_path: str = STATES_PATH
) -> VerificationResult:
    result = VerificationResult()
    for interaction in pact.get("interactions", []):
        description = interaction.get("description", "")
        try:
            reasons = await verify_interaction(client, interaction, states_path)
        except httpx.HTTPError as e:
            reasons = [f"request failed: {e!r}"]

        if reasons:
            for reason in reasons:
                result.mismatches.append(Mismatch(description, reason))
            logger.warning("Interaction %r failed: %s", description, "; ".join(reasons))
        else:
            result.verified.append(description)
    logger.info(
        "Verified %d/%d interactions between %s and %s",
        len(result.verified),
        len(pact.get("interactions", [])),
        pact.get("consumer", {}).get("name"),
        pact.get("provider", {}).get("name"),
    )
    return result
