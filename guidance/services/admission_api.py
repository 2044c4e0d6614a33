import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class AdmissionApiError(Exception):
    """
    Raised when the admission API rejects a request or cannot be reached.

    ``status_code`` is None for network failures. ``errors`` holds the
    field -> messages mapping from validation failures, when the API sent one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}

    @property
    def response_status(self) -> int:
        if self.status_code and 400 <= self.status_code < 500:
            return self.status_code
        return 502


def _error_from_response(response) -> AdmissionApiError:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if not isinstance(payload, dict):
        payload = {}

    errors = payload.get("errors") if isinstance(payload.get("errors"), dict) else {}
    message = (
        payload.get("error")
        or payload.get("message")
        or payload.get("detail")
        or (errors.get("error") if isinstance(errors.get("error"), str) else None)
        or "Unknown error"
    )
    if isinstance(message, list):
        message = message[0] if message else "Unknown error"
    return AdmissionApiError(str(message), status_code=response.status_code, errors=errors)


class AdmissionApiClient:
    """
    Thin JSON client for the admission API. All business rules, persistence and
    scoring live behind it; the portal only sends what the dashboard collected.
    """

    def __init__(self, base_url: str, token: str = "", timeout: float = 15.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs) -> Any:
        url = self._url(path)
        logger.debug("Admission API %s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("Admission API %s %s failed: %s", method, url, exc)
            raise AdmissionApiError("Unknown error") from exc

        if response.status_code >= 400:
            error = _error_from_response(response)
            logger.warning(
                "Admission API %s %s returned %s: %s", method, url, response.status_code, error.message
            )
            raise error

        if response.status_code == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, data: Optional[dict] = None) -> Any:
        return self.request("POST", path, json=data if data is not None else {})

    def put(self, path: str, data: Optional[dict] = None) -> Any:
        return self.request("PUT", path, json=data if data is not None else {})

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def upload(self, path: str, upload, field: str = "csv_file") -> Any:
        """Post a file as-is (multipart); the API does all parsing."""
        if hasattr(upload, "seek"):
            upload.seek(0)
        files = {
            field: (
                getattr(upload, "name", "upload.csv"),
                upload,
                getattr(upload, "content_type", None) or "text/csv",
            )
        }
        return self.request("POST", path, files=files)

    def ping(self) -> None:
        self.request("GET", "/health")


def get_admission_client() -> AdmissionApiClient:
    return AdmissionApiClient(
        settings.ADMISSION_API_BASE_URL,
        token=settings.ADMISSION_API_TOKEN,
        timeout=settings.ADMISSION_API_TIMEOUT,
    )


def unwrap_list(payload, key: Optional[str] = None) -> list:
    """
    Accept a bare list, a Laravel-style page (``{"data": [...]}``) or a dict
    holding either under ``key``.
    """
    if key and isinstance(payload, dict):
        payload = payload.get(key)
    if isinstance(payload, dict):
        payload = payload.get("data")
    if isinstance(payload, list):
        return payload
    return []
