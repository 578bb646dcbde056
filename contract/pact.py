"""
Request interception that doubles as a pact contract recorder.

Declare the interactions a consumer is expected to perform, hand the
``transport`` to an ``httpx.AsyncClient`` and every matching request is
answered with the declared status/body. Exercised interactions can then be
written out as a pact file for the provider to verify.

Usage:
    pact = PactMock()
    pact.intercept("GET", "/order-service/v1/items", 200, body=[...],
                   description="Get items", provider_states=["There are 2 items"],
                   alias="getItems")
    client = httpx.AsyncClient(transport=pact.transport, base_url="http://test")
    ...
    pact.write()
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from storefront.logging import get_logger

logger = get_logger(__name__)

CONSUMER = os.getenv("PACT_CONSUMER", "shop-frontend")
PROVIDER = os.getenv("PACT_PROVIDER", "order-service")
PACT_SPEC_VERSION = os.getenv("PACT_SPEC_VERSION", "2.0.0")
OUTPUT_DIR = os.getenv("PACT_OUTPUT_DIR", "pacts")

_NO_BODY = object()


@dataclass
class Interaction:
    method: str
    path: str
    status: int
    body: Any = _NO_BODY
    description: Optional[str] = None
    provider_states: List[str] = field(default_factory=list)
    alias: Optional[str] = None
    # body of the last request that hit this interaction, if any
    request_body: Any = _NO_BODY
    exercised: bool = False

    def matches(self, request: httpx.Request) -> bool:
        return request.method == self.method and request.url.path == self.path

    def respond(self) -> httpx.Response:
        if self.body is _NO_BODY:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)

    @property
    def key(self) -> str:
        return self.description or f"{self.method} {self.path}"


class PactMock:
    def __init__(
        self,
        consumer: str = CONSUMER,
        provider: str = PROVIDER,
        pact_version: str = PACT_SPEC_VERSION,
        output_dir: str = OUTPUT_DIR,
    ):
        self.consumer = consumer
        self.provider = provider
        self.pact_version = pact_version
        self.output_dir = Path(output_dir)
        self.interactions: List[Interaction] = []
        self.received: Dict[str, List[httpx.Request]] = {}
        self.unmatched: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def intercept(
        self,
        method: str,
        path: str,
        status: int,
        body: Any = _NO_BODY,
        description: Optional[str] = None,
        provider_states: Optional[List[str]] = None,
        alias: Optional[str] = None,
    ) -> Interaction:
        """Declare an interaction; it overrides earlier ones for the same method+path."""
        interaction = Interaction(
            method=method.upper(),
            path=path,
            status=status,
            body=body,
            description=description,
            provider_states=list(provider_states or []),
            alias=alias,
        )
        self.interactions.append(interaction)
        return interaction

    def _match(self, request: httpx.Request) -> Optional[Interaction]:
        for interaction in reversed(self.interactions):
            if interaction.matches(request):
                return interaction
        return None

    def _handle(self, request: httpx.Request) -> httpx.Response:
        interaction = self._match(request)
        if interaction is None:
            logger.warning("No interaction declared for %s %s", request.method, request.url.path)
            self.unmatched.append(request)
            return httpx.Response(404, json={"error": f"no interaction for {request.method} {request.url.path}"})

        interaction.exercised = True
        if request.content:
            try:
                interaction.request_body = json.loads(request.content)
            except ValueError:
                interaction.request_body = request.content.decode("utf-8", "replace")
        if interaction.alias:
            self.received.setdefault(interaction.alias, []).append(request)
        return interaction.respond()

    # --------- Observed requests ---------
    def requests(self, alias: str) -> List[httpx.Request]:
        return list(self.received.get(alias, []))

    def last_request(self, alias: str) -> httpx.Request:
        seen = self.received.get(alias)
        if not seen:
            raise LookupError(f"no request observed for @{alias}")
        return seen[-1]

    def last_json(self, alias: str) -> Any:
        return json.loads(self.last_request(alias).content)

    # --------- Contract output ---------
    def _interaction_record(self, interaction: Interaction) -> Dict[str, Any]:
        record: Dict[str, Any] = {"description": interaction.key}
        if interaction.provider_states:
            if self.pact_version.startswith("2"):
                record["providerState"] = interaction.provider_states[0]
            else:
                record["providerStates"] = [{"name": name} for name in interaction.provider_states]

        request: Dict[str, Any] = {"method": interaction.method, "path": interaction.path}
        if interaction.request_body is not _NO_BODY:
            request["headers"] = {"Content-Type": "application/json"}
            request["body"] = interaction.request_body
        record["request"] = request

        response: Dict[str, Any] = {"status": interaction.status}
        if interaction.body is not _NO_BODY:
            response["headers"] = {"Content-Type": "application/json"}
            response["body"] = interaction.body
        record["response"] = response
        return record

    def to_pact(self) -> Dict[str, Any]:
        """Pact document for the interactions exercised so far (latest wins per description)."""
        records: Dict[str, Dict[str, Any]] = {}
        for interaction in self.interactions:
            if interaction.exercised:
                records[interaction.key] = self._interaction_record(interaction)
        return {
            "consumer": {"name": self.consumer},
            "provider": {"name": self.provider},
            "interactions": list(records.values()),
            "metadata": {"pactSpecification": {"version": self.pact_version}},
        }

    def write(self) -> Path:
        """Write or merge ``<consumer>-<provider>.json`` under the output dir."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{self.consumer}-{self.provider}.json"
        pact = self.to_pact()

        if path.exists():
            existing = json.loads(path.read_text(encoding="utf-8"))
            merged = {i["description"]: i for i in existing.get("interactions", [])}
            for record in pact["interactions"]:
                merged[record["description"]] = record
            pact["interactions"] = list(merged.values())

        path.write_text(json.dumps(pact, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote %d interactions to %s", len(pact["interactions"]), path)
        return path
