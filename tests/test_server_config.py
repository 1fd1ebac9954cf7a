# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for ServerConfig source precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from genro_mux.server import ServerConfig


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove GENRO_MUX_* variables inherited from the test environment."""
    for name in ("HOST", "PORT", "SHUTDOWN_TIMEOUT", "LOG_LEVEL", "SERVER_DIR", "CONFIG"):
        monkeypatch.delenv(f"GENRO_MUX_{name}", raising=False)


@pytest.mark.usefixtures("clean_env")
class TestServerConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = ServerConfig(server_dir=tmp_path)
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.shutdown_timeout == 10.0
        assert config.log_level == "info"
        assert config.address == "0.0.0.0:8080"
        assert config.server_dir == tmp_path.resolve()

    def test_explicit_parameters(self, tmp_path: Path) -> None:
        config = ServerConfig(
            server_dir=tmp_path,
            host="127.0.0.1",
            port=9000,
            shutdown_timeout=2.5,
            log_level="DEBUG",
        )
        assert config.address == "127.0.0.1:9000"
        assert config.shutdown_timeout == 2.5
        assert config.log_level == "debug"

    def test_project_config_file(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            "server:\n  host: 127.0.0.1\n  port: 9001\n  shutdown_timeout: 3\n"
        )
        config = ServerConfig(server_dir=tmp_path)
        assert config.host == "127.0.0.1"
        assert config.port == 9001
        assert config.shutdown_timeout == 3.0
        assert config.log_level == "info"

    def test_explicit_beats_config_file(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("server:\n  port: 9001\n")
        config = ServerConfig(server_dir=tmp_path, port=9002)
        assert config.port == 9002

    def test_environment_beats_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "config.yaml").write_text("server:\n  host: 10.0.0.1\n")
        monkeypatch.setenv("GENRO_MUX_HOST", "127.0.0.2")
        config = ServerConfig(server_dir=tmp_path)
        assert config.host == "127.0.0.2"

    def test_getitem_and_repr(self, tmp_path: Path) -> None:
        config = ServerConfig(server_dir=tmp_path, host="127.0.0.1", port=8000)
        assert config["host"] == "127.0.0.1"
        assert repr(config) == (
            "ServerConfig(address='127.0.0.1:8000', shutdown_timeout=10.0, log_level='info')"
        )
