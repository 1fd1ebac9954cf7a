# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Example routes shipped with genro-mux."""

from .echo import EchoRoute
from .hello import HelloRoute

__all__ = ["EchoRoute", "HelloRoute"]
