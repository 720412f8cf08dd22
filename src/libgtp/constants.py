"""Constants and environment-configurable defaults for libgtp."""

from __future__ import annotations

import os

#: Seconds :meth:`libgtp.engine.Engine.wait_response` waits by default.
#: Can be configured via :envvar:`LIBGTP_RESPONSE_TIMEOUT_SECONDS`.
RESPONSE_TIMEOUT_SECONDS = float(os.getenv("LIBGTP_RESPONSE_TIMEOUT_SECONDS", 5))

#: The wait loop sleeps ``timeout / WAIT_POLL_DIV`` between polls
WAIT_POLL_DIV = 4

#: Encoding of the text exchanged with the engine process.
#: Can be configured via :envvar:`LIBGTP_ENCODING`.
ENCODING = os.getenv("LIBGTP_ENCODING", "utf-8")

#: Largest value of an ``int`` entity and of a command ID
U32_MAX = 0xFFFFFFFF
