# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ASGI type definitions for genro-mux.

Every component that speaks to uvicorn (Dispatcher, ServerLifespan,
MuxApplication, Response) is an ASGI callable. These aliases keep their
signatures readable.

Type Definitions
================

Scope : MutableMapping[str, Any]
    Connection metadata. genro-mux handles ``type="http"`` and
    ``type="lifespan"``; anything else is refused.

Message : MutableMapping[str, Any]
    Event exchanged with the server ("http.request", "http.response.start",
    "http.response.body", "http.disconnect", "lifespan.startup", ...).

Receive : Callable[[], Awaitable[Message]]
    Returns the next incoming message.

Send : Callable[[Message], Awaitable[None]]
    Emits an outgoing message.

ASGIApp : Callable[[Scope, Receive, Send], Awaitable[None]]
    The application callable.

Design Decisions
================
MutableMapping rather than TypedDict: ASGI servers add their own keys to
scope and messages, validation happens where the values are read.
"""

from typing import Any, Awaitable, Callable, MutableMapping

__all__ = ["Scope", "Message", "Receive", "Send", "ASGIApp"]

# ASGI Scope - connection metadata
Scope = MutableMapping[str, Any]

# ASGI Message - sent/received data
Message = MutableMapping[str, Any]

# ASGI Receive - callable to receive messages
Receive = Callable[[], Awaitable[Message]]

# ASGI Send - callable to send messages
Send = Callable[[Message], Awaitable[None]]

# ASGI Application - the main callable
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]
