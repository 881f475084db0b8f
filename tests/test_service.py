"""Unit tests for GenerationService (govgen.service)."""

from __future__ import annotations

from pathlib import Path

import pytest

from govgen.config import Settings
from govgen.service import GenerationResponse, GenerationService

pytestmark = pytest.mark.unit


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success_without_saving(self, settings, base_payload):
        response = await GenerationService(settings).generate(base_payload)

        assert response.success is True
        assert response.message == "Contracts generated successfully"
        assert set(response.contracts) == {"token", "governance"}
        assert response.file_paths is None
        assert not settings.output_dir.exists()

    @pytest.mark.asyncio
    async def test_success_with_timelock(self, settings, base_payload):
        payload = {**base_payload, "timelockType": "ControllerStyle"}
        response = await GenerationService(settings).generate(payload)
        assert set(response.contracts) == {"token", "governance", "timelock"}

    @pytest.mark.asyncio
    async def test_save_to_file(self, settings, base_payload):
        response = await GenerationService(settings).generate(base_payload, save_to_file=True)

        assert response.success is True
        assert response.message == "Contracts generated and saved to files successfully"
        token_path = Path(response.file_paths.token_path)
        assert token_path == settings.output_dir / "TSTToken.sol"
        assert token_path.read_text(encoding="utf-8") == response.contracts["token"].code
        assert response.file_paths.timelock_path is None

    @pytest.mark.asyncio
    async def test_validation_failure(self, settings, base_payload):
        payload = {**base_payload, "name": "", "quorumNumerator": 0}
        response = await GenerationService(settings).generate(payload)

        assert response.success is False
        assert response.message == "Validation failed"
        assert {issue.field for issue in response.errors} >= {"name", "quorumNumerator"}
        assert response.contracts == {}

    @pytest.mark.asyncio
    async def test_unsupported_combination(self, settings, base_payload):
        payload = {**base_payload, "votesType": "NonFungibleVotes", "tokenDecimals": 0}
        response = await GenerationService(settings).generate(payload)

        assert response.success is False
        assert response.message == "Failed to generate contracts"
        assert response.errors[0].field == "tokenDecimals"
        assert "tokenDecimals" in response.error

    @pytest.mark.asyncio
    async def test_save_failure_reported(self, tmp_path: Path, base_payload):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        service = GenerationService(Settings(output_dir=blocker))

        response = await service.generate(base_payload, save_to_file=True)

        assert response.success is False
        assert response.message == "Failed to save contracts"
        assert response.error
        assert "token" in response.contracts


class TestGenerationResponse:
    def test_to_wire_camel_case(self):
        response = GenerationResponse(message="ok")
        wire = response.to_wire()
        assert wire == {"success": True, "message": "ok", "contracts": {}, "errors": []}

    @pytest.mark.asyncio
    async def test_to_wire_file_paths(self, settings, base_payload):
        response = await GenerationService(settings).generate(base_payload, save_to_file=True)
        wire = response.to_wire()
        assert set(wire["filePaths"]) == {"tokenPath", "governancePath"}
        assert set(wire["contracts"]["token"]) == {"name", "code"}
