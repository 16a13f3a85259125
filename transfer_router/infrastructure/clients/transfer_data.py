"""Transfer data HTTP client for fetching account and transfer-rule snapshots"""

import httpx
from transfer_router.config import settings
from transfer_router.domain.exceptions import InvalidSnapshotError, TransferDataAPIError
from transfer_router.infrastructure.observability.metrics import transfer_data_fetch_failures_counter
from transfer_router.infrastructure.snapshots import TransferSnapshot, parse_snapshot


class TransferDataClient:
    """Client for the external transfer data service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.transfer_data_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_snapshot(self, user_id: str | None = None) -> TransferSnapshot:
        """
        Fetch the current accounts and transfer rules.

        Raises:
            TransferDataAPIError: On timeout, HTTP errors, or invalid response
        """
        params = {"user_id": user_id} if user_id else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/transfer-data", params=params)
                response.raise_for_status()
                return parse_snapshot(response.json())

            except httpx.TimeoutException as e:
                transfer_data_fetch_failures_counter.inc()
                raise TransferDataAPIError(f"Transfer data API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                transfer_data_fetch_failures_counter.inc()
                raise TransferDataAPIError(f"Transfer data API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                transfer_data_fetch_failures_counter.inc()
                raise TransferDataAPIError(f"Transfer data API unreachable: {e}") from e
            except (InvalidSnapshotError, ValueError) as e:
                transfer_data_fetch_failures_counter.inc()
                raise TransferDataAPIError(f"Invalid transfer data: {e}") from e
