from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from contracts.artwork import AiEnrichment


@dataclass(frozen=True, slots=True)
class EnrichmentConfig:
    """
    AI vision service endpoint.

    The key, when present, is sent as a bearer token. Nothing is read from the environment.
    """

    endpoint_url: str
    api_key: str | None = None
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        if not self.endpoint_url.startswith(("http://", "https://")):
            raise ValueError("endpoint_url must be an http(s) URL")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")


def _payload(body: Any) -> Mapping[str, Any] | None:
    # The service may wrap its answer in a "data" member.
    if not isinstance(body, Mapping):
        return None
    inner = body.get("data")
    if isinstance(inner, Mapping):
        return inner
    return body


class AiEnrichmentClient:
    """Sends the artwork image to the vision service and coerces the answer to `AiEnrichment`."""

    def __init__(self, client: httpx.AsyncClient, config: EnrichmentConfig) -> None:
        self.client = client
        self.config = config

    async def enrich(self, image_bytes: bytes) -> AiEnrichment:
        headers = {}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        resp = await self.client.post(
            self.config.endpoint_url,
            json={"imageBase64": base64.b64encode(image_bytes).decode("ascii")},
            headers=headers,
            timeout=self.config.timeout_s,
        )
        resp.raise_for_status()
        return AiEnrichment.from_dict(_payload(resp.json()))
