"""httpx.MockTransport handler replaying canned PushShift responses."""

from typing import Any

import httpx

Scripted = httpx.Response | dict[str, Any] | Exception


class ScriptedServer:
    """httpx.MockTransport handler that replays canned responses in order.

    Each entry is either a JSON body (served with status 200), a full
    httpx.Response, or an exception to raise from the transport. Every
    request received is recorded for later assertions.
    """

    def __init__(self, responses: list[Scripted]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    @property
    def params(self) -> list[dict[str, str]]:
        return [dict(request.url.params) for request in self.requests]

    @property
    def remaining(self) -> int:
        return len(self._responses)
