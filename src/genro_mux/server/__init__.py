# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Server package - listener lifecycle and configuration.

Contains:
    - HttpServer: start/stop lifecycle manager
    - ServerState: lifecycle states
    - ServerConfig: configuration handling
"""

from .server import HttpServer, ServerState
from .server_config import ServerConfig

__all__ = ["HttpServer", "ServerState", "ServerConfig"]
