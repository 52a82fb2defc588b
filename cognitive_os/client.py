"""
Engine Client

HTTP client for a running Cognitive OS server.
"""

from typing import Any, Optional
import logging
import os

import httpx

logger = logging.getLogger(__name__)

API_URL = os.getenv("COGNITIVE_OS_API_URL", "http://localhost:8000")
TIMEOUT = 30.0


class EngineClient:
    """
    Thin wrapper over the HTTP API.

    Transport and HTTP errors are logged and reported as None; the last
    error body is kept in `last_error` for callers that need details.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = TIMEOUT,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)
        self._owns_client = client is None
        self.last_error: Optional[Any] = None

    def close(self):
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EngineClient":
        return self

    def __exit__(self, *exc):
        self.close()

    # ============ Transport ============

    def _request(self, method: str, path: str, **kwargs) -> Optional[Any]:
        self.last_error = None
        try:
            resp = self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = e.response.text
            self.last_error = body.get("detail", body) if isinstance(body, dict) else body
            logger.warning("%s %s failed (%d): %s", method, path, e.response.status_code, self.last_error)
            return None
        except httpx.RequestError as e:
            self.last_error = str(e)
            logger.warning("%s %s failed: %s", method, path, e)
            return None
        return resp.json()

    def _get(self, path: str, **params) -> Optional[Any]:
        params = {k: v for k, v in params.items() if v is not None}
        return self._request("GET", path, params=params or None)

    def _post(self, path: str, data: Any = None) -> Optional[Any]:
        return self._request("POST", path, json=data)

    # ============ Sessions ============

    def start_session(self, game_id: str) -> Optional[dict]:
        return self._post("/sessions", {"game_id": game_id})

    def record_trial(self, session_id: str, trial: dict) -> Optional[dict]:
        return self._post(f"/sessions/{session_id}/trials", trial)

    def record_game_result(self, session_id: str, result: dict) -> Optional[dict]:
        return self._post(f"/sessions/{session_id}/result", result)

    def end_session(self, session_id: str) -> Optional[dict]:
        return self._post(f"/sessions/{session_id}/end")

    def recover_session(self, game_id: str) -> Optional[dict]:
        return self._post(f"/sessions/recover/{game_id}")

    def session_history(self, game_id: Optional[str] = None) -> Optional[list]:
        return self._get("/sessions/history", game_id=game_id)

    # ============ Ratings and plans ============

    def get_cognitive_profile(self) -> Optional[dict]:
        return self._get("/profile")

    def reset_skills(self) -> Optional[dict]:
        return self._post("/profile/reset")

    def get_module_stats(self, game_id: str) -> Optional[dict]:
        return self._get(f"/games/{game_id}/stats")

    def compose_session(self, minutes: Optional[float] = None) -> Optional[dict]:
        return self._get("/plan", minutes=minutes)

    def list_skills(self, domain: Optional[str] = None) -> Optional[dict]:
        return self._get("/skills", domain=domain)

    def get_skill(self, skill_id: str) -> Optional[dict]:
        return self._get(f"/skills/{skill_id}")

    def health(self) -> Optional[dict]:
        return self._get("/health")
