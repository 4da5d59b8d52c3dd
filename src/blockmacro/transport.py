"""HTTP client for the remote macro agent (run / stop / mouse position).

Run and stop are independent fire-and-forget requests: stop is a separate
request to the agent, it never aborts an in-flight run request here.
Failures come back as a SubmitStatus for display; nothing is retried.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx

from blockmacro.commands import Program
from blockmacro.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
RUN_PATH = "/macros/run"
STOP_PATH = "/macros/stop"
MOUSE_POSITION_PATH = "/mouse/position"


def resolve_base_url(origin: Optional[str]) -> str:
    """``origin`` when it is a network (http/https) origin, else the local agent default."""
    if origin:
        parts = urlsplit(origin.strip())
        if parts.scheme in ("http", "https") and parts.netloc:
            return origin.strip().rstrip("/")
    return DEFAULT_BASE_URL


@dataclass(frozen=True)
class SubmitStatus:
    ok: bool
    message: str
    status_code: Optional[int] = None

    def __str__(self) -> str:
        return self.message


class AgentClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = resolve_base_url(base_url)
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def submit_run(self, program: Program) -> SubmitStatus:
        logger.info("Submitting run (%d steps) to %s", len(program), self.base_url)
        return self._submit("Run", RUN_PATH, json=program.to_dict())

    def submit_stop(self) -> SubmitStatus:
        logger.info("Submitting stop to %s", self.base_url)
        return self._submit("Stop", STOP_PATH)

    def mouse_position(self) -> tuple[int, int]:
        """Current pointer position as reported by the agent."""
        try:
            resp = self._client.get(MOUSE_POSITION_PATH)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TransportError(f"Mouse position unavailable: {e}", path=self.base_url) from e
        if not isinstance(data, dict) or not all(isinstance(data.get(k), int) for k in ("x", "y")):
            raise TransportError(f"Malformed mouse position: {data!r}", path=self.base_url)
        return data["x"], data["y"]

    def _submit(self, action: str, path: str, json: Optional[dict[str, Any]] = None) -> SubmitStatus:
        try:
            resp = self._client.post(path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s request to %s failed: %s", action, self.base_url, e)
            return SubmitStatus(ok=False, message=f"{action} failed: {e}")

        server_message = _response_message(resp)
        if not resp.is_success:
            message = f"{action} failed: HTTP {resp.status_code} {resp.reason_phrase}".rstrip()
            if server_message:
                message += f" ({server_message})"
            logger.warning("%s", message)
            return SubmitStatus(ok=False, message=message, status_code=resp.status_code)
        return SubmitStatus(
            ok=True,
            message=server_message or f"{action} request sent.",
            status_code=resp.status_code,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AgentClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _response_message(resp: httpx.Response) -> Optional[str]:
    """The agent's optional {"message": "..."} body."""
    if not resp.content:
        return None
    try:
        data = resp.json()
    except ValueError:
        return None
    message = data.get("message") if isinstance(data, dict) else None
    if isinstance(message, str) and message.strip():
        return message
    return None
