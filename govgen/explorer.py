"""Async client for Etherscan-compatible block-explorer APIs.

Fetches the ABI of a verified contract (``module=contract&action=getabi``)
from the explorer configured for a network, so proposal authors can pick a
function to call.  Every failure is reported in the returned
``AbiFetchResult`` rather than raised.

Typical usage::

    client = ExplorerClient(Settings.from_env().networks)
    result = await client.fetch_abi("sepolia", "0x...")
    if result.success:
        for entry in result.abi:
            print(entry.name)
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from web3 import Web3

from .config import NetworkConfig

UNKNOWN_CONTRACT = "Unknown Contract"


class AbiParameter(BaseModel):
    """One input or output of an ABI entry."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    type: str


class AbiEntry(BaseModel):
    """A single function, event, constructor or error descriptor."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    name: str | None = None
    inputs: list[AbiParameter] = Field(default_factory=list)
    state_mutability: str | None = Field(default=None, alias="stateMutability")


class AbiFetchResult(BaseModel):
    """Structured result of an ABI lookup."""

    success: bool = Field(default=True, description="Whether the ABI was fetched")
    abi: list[AbiEntry] = Field(default_factory=list)
    name: str = Field(default="", description="Contract name reported by the explorer")
    network: str = Field(default="")
    error: str | None = Field(default=None, description="Error message on failure")

    @property
    def functions(self) -> list[AbiEntry]:
        """Only the ``function`` entries of the ABI."""
        return [entry for entry in self.abi if entry.type == "function"]


class ExplorerClient:
    """Async client over a ``{network: NetworkConfig}`` table."""

    def __init__(self, networks: dict[str, NetworkConfig], timeout: int = 30) -> None:
        self.networks = {name.lower(): cfg for name, cfg in networks.items()}
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"Accept": "application/json"},
        )

    @staticmethod
    def _parse_abi(raw: Any) -> list[AbiEntry]:
        """Parse the explorer's ``result`` field (a JSON-encoded array).

        Raises:
            ValueError: If the payload is not a list of ABI descriptors.
        """
        data = json.loads(raw) if isinstance(raw, str) else raw
        if not isinstance(data, list):
            raise ValueError("ABI is not a JSON array")
        try:
            return [AbiEntry.model_validate(entry) for entry in data]
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    async def fetch_abi(self, network: str, address: str) -> AbiFetchResult:
        """Fetch and parse the ABI of the contract at *address* on *network*."""
        network = network.lower()
        config = self.networks.get(network)
        if config is None:
            return AbiFetchResult(
                success=False, network=network, error=f"Unsupported network: {network}"
            )
        if not Web3.is_address(address):
            return AbiFetchResult(
                success=False, network=network, error=f"Invalid contract address: {address}"
            )

        params = {"module": "contract", "action": "getabi", "address": address}
        if config.api_key:
            params["apikey"] = config.api_key

        try:
            async with self._client() as client:
                response = await client.get(config.api_url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError:
            return AbiFetchResult(
                success=False, network=network,
                error=f"Cannot connect to explorer at {config.api_url}",
            )
        except httpx.TimeoutException:
            return AbiFetchResult(
                success=False, network=network,
                error=f"Request to explorer timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return AbiFetchResult(
                success=False, network=network,
                error=f"API request failed with status {exc.response.status_code}",
            )
        except (httpx.HTTPError, ValueError) as exc:
            return AbiFetchResult(
                success=False, network=network,
                error=f"Failed to fetch contract ABI: {exc}",
            )

        if not isinstance(data, dict):
            return AbiFetchResult(
                success=False, network=network,
                error="Unexpected response format from explorer",
            )
        if str(data.get("status")) == "0" or data.get("message") == "NOTOK":
            return AbiFetchResult(
                success=False, network=network,
                error=data.get("result") or "Failed to fetch contract ABI",
            )

        try:
            abi = self._parse_abi(data.get("result"))
        except ValueError:
            return AbiFetchResult(
                success=False, network=network,
                error="Invalid ABI format returned from API",
            )

        return AbiFetchResult(
            abi=abi,
            name=data.get("contractName") or UNKNOWN_CONTRACT,
            network=network,
        )
