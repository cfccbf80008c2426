"""HTTP client for the clinical records service.

The client wraps every route of the service behind a ``requests`` session with
retries, and converts error envelopes returned by the service into
``RecordsAPIError`` exceptions carrying the service's error code.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

__all__ = ["RecordsClientError", "RecordsAPIError", "RecordsClient"]


# Handlers are left to the hosting application.
logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = os.getenv("CLINIC_API_URL", "http://localhost:5000")
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 0.5
ACTOR_HEADER = "X-Actor"


class RecordsClientError(RuntimeError):
    """Base exception for clinical records client errors."""


class RecordsAPIError(RecordsClientError):
    """Raised when the service answers with an error response."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(f"{status_code} {code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message


class RecordsClient:
    """Client for the clinical records HTTP API."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        actor: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    ) -> None:
        if not base_url:
            raise ValueError("base_url must be provided")

        self.base_url = base_url.rstrip("/")
        self.actor = actor
        self.timeout = timeout
        self._session = self._build_session(max_retries=max_retries, backoff_factor=backoff_factor)

    def _build_session(self, *, max_retries: int, backoff_factor: float) -> requests.Session:
        session = requests.Session()
        # POST and PATCH are never retried.
        retry_strategy = Retry(
            total=max_retries,
            read=max_retries,
            connect=max_retries,
            status=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET", "DELETE", "OPTIONS"),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_payload: Optional[Dict[str, Any]] = None,
        expected_status: Union[int, Tuple[int, ...]] = (200,),
    ) -> Response:
        if not path:
            raise ValueError("path must be provided")
        if isinstance(expected_status, int):
            expected_status = (expected_status,)

        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        if self.actor:
            headers[ACTOR_HEADER] = self.actor

        try:
            response = self._session.request(
                method=method.upper(),
                url=url,
                params=params,
                json=json_payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Request to clinical records service failed: %s", exc)
            raise RecordsClientError("Failed to execute request to clinical records service") from exc

        if response.status_code not in expected_status:
            raise self._error_from_response(response)

        return response

    @staticmethod
    def _error_from_response(response: Response) -> RecordsAPIError:
        code = "HTTP_ERROR"
        message = response.text[:2048]
        try:
            envelope = response.json().get("error", {})
        except (ValueError, AttributeError):
            envelope = {}
        if isinstance(envelope, dict):
            code = str(envelope.get("code") or code)
            message = str(envelope.get("message") or message)
        logger.error(
            "Clinical records error response: status=%s code=%s message=%s",
            response.status_code,
            code,
            message,
        )
        return RecordsAPIError(response.status_code, code, message)

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "healthz").json()

    def create_patient(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Register a patient; raises ``RecordsAPIError`` with ``MRN_ALREADY_EXISTS`` on conflict."""

        if not isinstance(payload, dict) or not payload:
            raise ValueError("payload must be a non-empty dictionary")
        return self._request("POST", "patients", json_payload=payload, expected_status=201).json()

    def get_patient(self, patient_id: str) -> Dict[str, Any]:
        if not patient_id:
            raise ValueError("patient_id must be provided")
        return self._request("GET", f"patients/{patient_id}").json()

    def search_patients(self, query: str = "", status: str = "") -> List[Dict[str, Any]]:
        params = {key: value for key, value in (("q", query), ("status", status)) if value}
        return self._request("GET", "patients", params=params).json()["items"]

    def update_patient_status(self, patient_id: str, status: str) -> Dict[str, Any]:
        if not patient_id:
            raise ValueError("patient_id must be provided")
        return self._request(
            "PATCH", f"patients/{patient_id}/status", json_payload={"status": status}
        ).json()

    def delete_patient(self, patient_id: str) -> None:
        if not patient_id:
            raise ValueError("patient_id must be provided")
        self._request("DELETE", f"patients/{patient_id}", expected_status=204)

    def list_patient_appointments(self, patient_id: str) -> List[Dict[str, Any]]:
        if not patient_id:
            raise ValueError("patient_id must be provided")
        return self._request("GET", f"patients/{patient_id}/appointments").json()["items"]

    def create_appointment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(payload, dict) or not payload:
            raise ValueError("payload must be a non-empty dictionary")
        return self._request("POST", "appointments", json_payload=payload, expected_status=201).json()

    def get_appointment(self, appointment_id: str) -> Dict[str, Any]:
        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        return self._request("GET", f"appointments/{appointment_id}").json()

    def update_appointment_status(self, appointment_id: str, status: str) -> Dict[str, Any]:
        if not appointment_id:
            raise ValueError("appointment_id must be provided")
        return self._request(
            "PATCH", f"appointments/{appointment_id}/status", json_payload={"status": status}
        ).json()

    def latest_audit_events(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        return self._request("GET", "audit", params=params).json()["items"]
