"""Tests for the registry publisher."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from monopub.execution import ExecutionResult
from monopub.publish import RegistryPublisher, build_publish_command
from monopub.workspace import Package


class TestBuildPublishCommand:
    def test_plain(self) -> None:
        assert build_publish_command() == "npm publish"

    def test_tag(self) -> None:
        assert build_publish_command(tag="next") == "npm publish --tag next"

    def test_otp(self) -> None:
        assert build_publish_command(otp="123456") == "npm publish --otp 123456"

    @pytest.mark.parametrize("access", ["public", "private"])
    def test_access(self, access: str) -> None:
        assert build_publish_command(access=access) == f"npm publish --access {access}"

    def test_unknown_access_ignored(
        self, caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(logging.getLogger("monopub"), "propagate", True)
        with caplog.at_level(logging.WARNING, logger="monopub.publish.registry"):
            assert build_publish_command(access="bogus") == "npm publish"
        assert "bogus" in caplog.text

    def test_all_options(self) -> None:
        command = build_publish_command("yarn publish", tag="beta", otp="42", access="public")
        assert command == "yarn publish --tag beta --otp 42 --access public"

    def test_values_are_quoted(self) -> None:
        assert build_publish_command(tag="a b") == "npm publish --tag 'a b'"


class TestRegistryPublisher:
    async def test_runs_in_package(self, temp_dir: Path) -> None:
        pkg = Package.from_manifest(temp_dir, {"name": "oao", "version": "1.0.0"})
        publisher = RegistryPublisher("npm publish --tag next", env={"NPM_TOKEN": "t"})

        with patch(
            "monopub.publish.registry.run_in_package", new_callable=AsyncMock
        ) as mock_run:
            mock_run.return_value = ExecutionResult.success_result("oao")
            result = await publisher.publish(pkg)

        assert result.success
        mock_run.assert_awaited_once()
        assert mock_run.call_args[0] == (pkg, "npm publish --tag next")
        assert mock_run.call_args[1]["env"] == {"NPM_TOKEN": "t"}

    async def test_streams_output(self, temp_dir: Path) -> None:
        pkg = Package.from_manifest(temp_dir, {"name": "oao", "version": "1.0.0"})
        seen: list[tuple[str, str, bool]] = []
        publisher = RegistryPublisher(
            "echo + oao@1.0.0", output_handler=lambda *args: seen.append(args)
        )

        result = await publisher.publish(pkg)

        assert result.success
        assert seen == [("oao", "+ oao@1.0.0", False)]
