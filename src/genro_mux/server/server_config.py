# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Server configuration - listener address, shutdown deadline, log level."""

from __future__ import annotations

from pathlib import Path

from genro_toolbox import SmartOptions  # type: ignore[import-untyped]

__all__ = ["ServerConfig", "DEFAULTS"]

DEFAULTS = {
    "host": "0.0.0.0",
    "port": 8080,
    "shutdown_timeout": 10.0,
    "log_level": "info",
}


def _server_opts_spec(
    server_dir: str,
    host: str,
    port: int,
    shutdown_timeout: float,
    log_level: str,
    config: str,
) -> None:
    """Reference function for SmartOptions type extraction (no defaults)."""


class ServerConfig:
    """Resolved settings for one HttpServer."""

    __slots__ = ("_opts",)

    def __init__(
        self,
        server_dir: str | Path | None = None,
        host: str | None = None,
        port: int | None = None,
        shutdown_timeout: float | None = None,
        log_level: str | None = None,
        argv: list[str] | None = None,
    ) -> None:
        self._opts = self._build_config(
            server_dir=server_dir,
            host=host,
            port=port,
            shutdown_timeout=shutdown_timeout,
            log_level=log_level,
            argv=argv or [],
        )

    def _build_config(
        self,
        server_dir: str | Path | None,
        host: str | None,
        port: int | None,
        shutdown_timeout: float | None,
        log_level: str | None,
        argv: list[str],
    ) -> SmartOptions:
        """Build server configuration from multiple sources.

        Config precedence (later overrides earlier):
        1. Built-in DEFAULTS
        2. Project config: <server_dir>/config.yaml, "server" section
        3. Environment variables: GENRO_MUX_*
        4. Command line arguments
        5. Explicit constructor parameters
        """
        env_argv_opts = SmartOptions(_server_opts_spec, env="GENRO_MUX", argv=argv)

        caller_opts = SmartOptions(
            dict(
                server_dir=server_dir,
                host=host,
                port=port,
                shutdown_timeout=shutdown_timeout,
                log_level=log_level,
            ),
            ignore_none=True,
        )

        resolved_server_dir = Path(caller_opts["server_dir"] or env_argv_opts["server_dir"] or ".").resolve()

        # Use --config if specified, otherwise default to config.yaml
        config_file = env_argv_opts["config"] or "config.yaml"
        config_path = resolved_server_dir / config_file
        if config_path.exists():
            project_config = SmartOptions(str(config_path))
        else:
            project_config = SmartOptions({})

        server_opts = (
            SmartOptions(DEFAULTS)
            + (project_config["server"] or SmartOptions({}))
            + env_argv_opts
            + caller_opts
        )
        server_opts["server_dir"] = resolved_server_dir
        return server_opts

    @property
    def server_dir(self) -> Path:
        """Resolved directory holding config.yaml."""
        result: Path = self._opts["server_dir"]
        return result

    @property
    def host(self) -> str:
        return str(self._opts["host"])

    @property
    def port(self) -> int:
        return int(self._opts["port"])

    @property
    def shutdown_timeout(self) -> float:
        """Default deadline, in seconds, for in-flight requests on stop()."""
        return float(self._opts["shutdown_timeout"])

    @property
    def log_level(self) -> str:
        return str(self._opts["log_level"]).lower()

    @property
    def address(self) -> str:
        """Configured "host:port" string."""
        return f"{self.host}:{self.port}"

    def __getitem__(self, name: str) -> object:
        """Proxy bracket access to underlying opts."""
        return self._opts[name]

    def __repr__(self) -> str:
        return (
            f"ServerConfig(address={self.address!r}, "
            f"shutdown_timeout={self.shutdown_timeout}, log_level={self.log_level!r})"
        )


if __name__ == "__main__":
    print(ServerConfig())
