"""
Backend API Client
Connects the Streamlit client to the auth, profile, record and feed services.

Every call either returns the decoded body or raises one of:
    RemoteUnavailable   → connection error, timeout, 5xx, malformed body
    RemoteRejected      → 4xx with a message (bad credentials, duplicate...)
    AuthorizationDenied → 403 on an owned record
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from state.errors import AuthorizationDenied, RemoteRejected, RemoteUnavailable
from .config import ClientSettings, ServiceEndpoints

logger = logging.getLogger(__name__)

# Key holding the created/updated record in POST and PUT responses
SINGULAR = {
    "expenses": "expense",
    "tasks": "task",
    "events": "event",
    "moods": "mood",
    "diary": "entry",
    "feed": "post",
}


class APIClient:
    """Client for the remote services"""

    def __init__(self, endpoints: ServiceEndpoints, timeout: float = 10.0):
        self.endpoints = endpoints
        self.timeout = timeout
        self.session = requests.Session()

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "APIClient":
        return cls(ServiceEndpoints.from_settings(settings), settings.request_timeout)

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[dict] = None,
        data: Optional[dict] = None,
    ) -> Any:
        try:
            resp = self.session.request(method, url, params=params, json=data, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise RemoteUnavailable("Service not reachable") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            if resp.status_code == 403:
                raise AuthorizationDenied(message, resp.status_code)
            if resp.status_code < 500:
                raise RemoteRejected(message, resp.status_code)
            raise RemoteUnavailable(message, resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise RemoteUnavailable("Malformed response", resp.status_code) from e

    def _get(self, url: str, params: dict = None) -> Any:
        return self._request("GET", url, params=params)

    def _post(self, url: str, data: dict = None) -> Any:
        return self._request("POST", url, data=data)

    def _put(self, url: str, data: dict = None, params: dict = None) -> Any:
        return self._request("PUT", url, params=params, data=data)

    def _delete(self, url: str, params: dict = None) -> Any:
        return self._request("DELETE", url, params=params)

    # =========================================================================
    # Health
    # =========================================================================

    def is_connected(self) -> bool:
        """Check if the auth service is reachable"""
        try:
            self._get(self.endpoints.auth.rsplit("/api", 1)[0] + "/health")
        except (RemoteUnavailable, RemoteRejected):
            return False
        return True

    # =========================================================================
    # Auth
    # =========================================================================

    def register(self, **fields) -> Dict[str, Any]:
        body = self._post(f"{self.endpoints.auth}/auth/register", fields)
        return _field(body, "user", dict)

    def login(self, student_id: str, password: str) -> Dict[str, Any]:
        body = self._post(f"{self.endpoints.auth}/auth/login", {
            "studentId": student_id,
            "password": password,
        })
        return _field(body, "user", dict)

    def forgot_password(self, email: str) -> str:
        body = self._post(f"{self.endpoints.auth}/auth/forgot-password", {"email": email})
        return body.get("message", "") if isinstance(body, dict) else ""

    def reset_password(self, email: str, token: str, new_password: str) -> str:
        body = self._post(f"{self.endpoints.auth}/auth/reset-password", {
            "email": email,
            "token": token,
            "newPassword": new_password,
        })
        return body.get("message", "") if isinstance(body, dict) else ""

    # =========================================================================
    # Profile
    # =========================================================================

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        body = self._get(f"{self.endpoints.profile}/profile/{user_id}")
        return _field(body, "user", dict)

    def update_profile(self, user_id: str, **changes) -> Dict[str, Any]:
        body = self._put(f"{self.endpoints.profile}/profile", {"userId": user_id, **changes})
        return _field(body, "user", dict)

    def get_user_stats(self, user_id: str) -> Dict[str, Any]:
        body = self._get(f"{self.endpoints.profile}/profile/user-stats/{user_id}")
        if not isinstance(body, dict):
            raise RemoteUnavailable("Malformed response")
        return body

    # =========================================================================
    # Records (expenses, tasks, events, moods, diary, feed)
    # =========================================================================

    def _collection_url(self, collection: str) -> str:
        return f"{self.endpoints.for_collection(collection)}/{collection}"

    def list_records(self, collection: str, user_id: str) -> List[Dict[str, Any]]:
        body = self._get(self._collection_url(collection), {"userId": user_id})
        if not isinstance(body, list):
            raise RemoteUnavailable(f"Expected a list of {collection}")
        return body

    def create_record(self, collection: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = self._post(self._collection_url(collection), payload)
        return _field(body, SINGULAR[collection], dict)

    def update_record(
        self, collection: str, record_id: str, user_id: str, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        body = self._put(
            f"{self._collection_url(collection)}/{record_id}", patch, params={"userId": user_id}
        )
        return _field(body, SINGULAR[collection], dict)

    def delete_record(self, collection: str, record_id: str, user_id: str) -> None:
        self._delete(f"{self._collection_url(collection)}/{record_id}", {"userId": user_id})

    # =========================================================================
    # Feed interactions
    # =========================================================================

    def toggle_like(self, post_id: str, user_id: str) -> Dict[str, Any]:
        body = self._post(f"{self.endpoints.feed}/feed/{post_id}/like", {"userId": user_id})
        return _field(body, "post", dict)

    def add_comment(self, post_id: str, user_id: str, user_name: str, text: str) -> Dict[str, Any]:
        body = self._post(f"{self.endpoints.feed}/feed/{post_id}/comment", {
            "userId": user_id,
            "userName": user_name,
            "text": text,
        })
        return _field(body, "post", dict)

    def delete_comment(self, post_id: str, comment_id: str, user_id: str) -> Dict[str, Any]:
        body = self._delete(
            f"{self.endpoints.feed}/feed/{post_id}/comment/{comment_id}", {"userId": user_id}
        )
        return _field(body, "post", dict)


def _error_message(resp: requests.Response) -> str:
    """Server message from a failure body: `detail`, else `error`"""
    try:
        body = resp.json()
    except ValueError:
        return f"Request failed ({resp.status_code})"

    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error") or body.get("message")
        if isinstance(detail, list):
            # FastAPI validation errors
            return "; ".join(str(d.get("msg", d)) if isinstance(d, dict) else str(d) for d in detail)
        if detail:
            return str(detail)
    return f"Request failed ({resp.status_code})"


def _field(body: Any, key: str, kind: type) -> Any:
    value = body.get(key) if isinstance(body, dict) else None
    if not isinstance(value, kind):
        raise RemoteUnavailable(f"Response is missing '{key}'")
    return value
