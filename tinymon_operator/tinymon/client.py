import json
from typing import Any, Dict, Iterable, Optional, Tuple

import requests
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from tinymon_operator.tinymon.models import Check, Host, Result


class TinyMonException(Exception):
    """Raised when a push API call fails"""
    pass


class TinyMonTransportException(TinyMonException):
    """The request never produced an HTTP response"""
    pass


class TinyMonStatusException(TinyMonException):
    """The push API answered with a status outside the operation's success set"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code

    @property
    def transient(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500


class _TransientStatus(Exception):
    def __init__(self, error: TinyMonStatusException):
        super().__init__(str(error))
        self.error = error


UPSERT_CODES = (200, 201)
DELETE_CODES = (200, 404)
PUSH_CODES = (200,)


class TinyMonClient:
    """Binding for the TinyMon push API.

    Every call is idempotent on the remote side. Transport failures and
    429/5xx answers are retried with bounded exponential backoff; any other
    status outside the operation's success set fails immediately.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_max_wait: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_max_wait = retry_max_wait

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _send(self, method: str, path: str, body: Dict[str, Any], success: Tuple[int, ...], what: str) -> int:
        try:
            response = requests.request(
                method,
                url=f"{self.base_url}{path}",
                headers=self._headers(),
                data=json.dumps(body),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TinyMonTransportException(f"{what}: request failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.status_code not in success:
            error = TinyMonStatusException(
                f"{what}: unexpected status {response.status_code} - {response.text}",
                response.status_code,
            )
            if error.transient:
                raise _TransientStatus(error)
            raise error
        return response.status_code

    def _do(self, method: str, path: str, body: Dict[str, Any], success: Tuple[int, ...], what: str) -> int:
        logger.debug(f"{what}: {method} {path} {json.dumps(body)}")
        try:
            for attempt in Retrying(
                reraise=True,
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=0.5, max=self.retry_max_wait),
                retry=retry_if_exception_type((TinyMonTransportException, _TransientStatus)),
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(f"{what}: retrying (attempt {attempt.retry_state.attempt_number}/{self.retry_attempts})")
                    return self._send(method, path, body, success, what)
        except _TransientStatus as e:
            raise e.error from None

    def upsert_host(self, host: Host) -> None:
        self._do("POST", "/api/push/hosts", host.to_payload(), UPSERT_CODES, f"upsert host {host.address}")

    def delete_host(self, address: str) -> bool:
        """Delete a host and, by cascade on the remote side, its checks and results.

        Returns:
            bool: False if the host was already gone
        """
        code = self._do("DELETE", "/api/push/hosts", {"address": address}, DELETE_CODES, f"delete host {address}")
        return code != 404

    def upsert_check(self, check: Check) -> None:
        self._do(
            "POST", "/api/push/checks", check.to_payload(), UPSERT_CODES,
            f"upsert check {check.host_address}/{check.type}",
        )

    def delete_check(self, host_address: str, check_type: str) -> bool:
        code = self._do(
            "DELETE", "/api/push/checks", {"host_address": host_address, "type": check_type}, DELETE_CODES,
            f"delete check {host_address}/{check_type}",
        )
        return code != 404

    def push_result(self, result: Result) -> None:
        self._do(
            "POST", "/api/push/results", result.to_payload(), PUSH_CODES,
            f"push result {result.host_address}/{result.check_type}",
        )

    def push_bulk(self, results: Iterable[Result], host_address: Optional[str] = None) -> None:
        payload = {"results": [result.to_payload() for result in results]}
        what = f"push bulk {host_address}" if host_address else "push bulk"
        self._do("POST", "/api/push/bulk", payload, PUSH_CODES, what)
