"""Cloudflare D1 sink using the raw batch endpoint."""

from typing import List, Sequence

import requests

from hkgflights.archive.errors import ConfigError, SinkBatchFailure
from hkgflights.archive.sinks.base import Statement

API_BASE_URL = "https://api.cloudflare.com/client/v4"


class D1Sink:
    """Sends batches of parameterized statements to a D1 database."""

    def __init__(
        self,
        account_id: str,
        api_token: str,
        database_id: str,
        timeout: int = 120,
        base_url: str = API_BASE_URL,
    ):
        if not account_id or not api_token or not database_id:
            raise ConfigError(
                "D1 sink requires CLOUDFLARE_ACCOUNT_ID, CLOUDFLARE_API_TOKEN and D1_DATABASE_ID"
            )
        self.url = f"{base_url}/accounts/{account_id}/d1/database/{database_id}/raw"
        self.api_token = api_token
        self.timeout = timeout

    def execute_batch(self, statements: Sequence[Statement]) -> List[int]:
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }
        payload = {"batch": [s.to_dict() for s in statements]}
        try:
            resp = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise SinkBatchFailure(str(e)) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok or not isinstance(data, dict) or not data.get("success"):
            raise SinkBatchFailure(self._error_message(resp, data))

        results = data.get("result") or []
        return [((r or {}).get("meta") or {}).get("changes", 0) for r in results]

    @staticmethod
    def _error_message(resp: requests.Response, data) -> str:
        if isinstance(data, dict):
            errors = data.get("errors") or []
            if errors and isinstance(errors[0], dict) and errors[0].get("message"):
                return errors[0]["message"]
        return f"D1 batch failed (HTTP {resp.status_code})"
