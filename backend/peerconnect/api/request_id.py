"""Request ID helper for endpoints and error handlers.

The observability middleware binds the request id into a ContextVar owned by
the logging module and onto ``request.state``; either source is accepted.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from peerconnect.obs import logging as obs_logging


def get_request_id(request: Optional[Request] = None, default: str = "unknown") -> str:
	rid = obs_logging.current_request_id()
	if rid:
		return rid
	if request is not None:
		state_rid = getattr(request.state, "request_id", None)
		if state_rid:
			return str(state_rid)
	return default
