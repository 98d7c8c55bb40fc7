"""
HTTP client for the remote ledger.

The remote ledger is a script endpoint that accepts one POST per action:

    {"action": "logBatchData", "payload": {"salesData": [...]}}

and answers {"status": "success"} or {"status": "error", "message": "..."}.
The body is sent as text/plain so the endpoint's redirect chain does not
trigger a CORS preflight; redirects are followed.
"""
import logging

import requests
from django.conf import settings
from rest_framework.renderers import JSONRenderer

from core_backend.exceptions import NetworkError

logger = logging.getLogger(__name__)


class RemoteLedgerClient:
    CONTENT_TYPE = "text/plain;charset=utf-8"

    def __init__(self, url: str, timeout: float = None):
        self.url = url
        self.timeout = timeout if timeout is not None else settings.SYNC_HTTP_TIMEOUT

    def post_action(self, action: str, payload: dict) -> dict:
        """
        POST one action and return the decoded response.

        Raises NetworkError when the request fails, the response is not JSON
        or the remote reports anything other than success.
        """
        body = JSONRenderer().render({"action": action, "payload": payload})
        try:
            response = requests.post(
                self.url,
                data=body,
                headers={"Content-Type": self.CONTENT_TYPE},
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Could not reach the remote ledger: {e}", details={"action": action}) from e

        if response.status_code >= 400:
            raise NetworkError(
                f"Remote ledger returned HTTP {response.status_code}",
                details={"action": action, "status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(
                "Remote ledger returned a non-JSON response",
                details={"action": action, "body": response.text[:200]},
            ) from e

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message", "") if isinstance(data, dict) else ""
            raise NetworkError(
                f"Remote ledger rejected {action}: {message or data!r}",
                details={"action": action, "response": data},
            )

        logger.debug(f"Remote ledger accepted {action}: {data.get('message', '')}")
        return data

    def log_batch(self, sales_data) -> dict:
        return self.post_action("logBatchData", {"salesData": sales_data})
