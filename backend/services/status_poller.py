"""
Order Status Poller - follows one order until its payment settles.

Runs as an asyncio task:
    - polls immediately, then every `interval` seconds
    - stops for good on a terminal status (completed / failed)
    - retries on errors, but gives up after `max_errors` consecutive failures
    - gives up after `max_attempts` polls in total
    - stop() cancels the task; a cancelled poller never polls again
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from config import settings
from domain.enums import PaymentStatus, PollerState, is_terminal
from models import OrderStatusResponse

logger = logging.getLogger(__name__)

FetchStatus = Callable[[str], Awaitable[OrderStatusResponse]]
OnUpdate = Callable[[str, dict], Any]

POLL_ERROR_MESSAGE = "Failed to check order status"


class StatusPoller:
    """Cancellable fixed-interval poller for one order's payment status."""

    def __init__(
        self,
        order_id: str,
        fetch_status: FetchStatus,
        interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        max_errors: Optional[int] = None,
        on_update: Optional[OnUpdate] = None,
    ):
        self.order_id = order_id
        self._fetch_status = fetch_status
        self.interval = settings.status_poll_seconds if interval is None else interval
        self.max_attempts = max_attempts or settings.status_poll_max_attempts
        self.max_errors = max_errors or settings.status_poll_max_errors
        self._on_update = on_update

        self.state = PollerState.IDLE
        self.status: Optional[str] = None
        self.payment: dict = {}
        self.attempts = 0
        self.errors_count = 0
        self.consecutive_errors = 0
        self.last_error: Optional[str] = None
        self.last_polled: Optional[datetime] = None
        self._started_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    # ── Lifecycle ───────────────────────────────────────────────────

    def start(self) -> asyncio.Task:
        """Schedule the polling loop on the running event loop."""
        if self._task and not self._task.done():
            logger.warning(f"Poller for {self.order_id} already running")
            return self._task
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        """Cancel the polling loop and wait for it to unwind."""
        task = self._task
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None

    async def wait(self) -> Optional[str]:
        """Wait for the loop to end; returns the last observed status."""
        if self._task:
            await self._task
        return self.status

    @property
    def running(self) -> bool:
        return self.state == PollerState.RUNNING

    @property
    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return int(time.monotonic() - self._started_at)

    # ── Loop ────────────────────────────────────────────────────────

    async def run(self) -> Optional[str]:
        """
        Poll until a terminal status, the error budget or the attempt
        budget is reached. Can be awaited directly instead of start().
        """
        self.state = PollerState.RUNNING
        self._started_at = time.monotonic()
        logger.info(
            f"Polling order {self.order_id} every {self.interval}s "
            f"(max {self.max_attempts} attempts)"
        )

        try:
            while True:
                self.attempts += 1
                if await self._poll_once():
                    self.state = PollerState.FINISHED
                    logger.info(f"  ✅ Order {self.order_id} reached terminal status: {self.status}")
                    break

                if self.consecutive_errors >= self.max_errors:
                    self.state = PollerState.FAILED
                    logger.error(
                        f"Giving up on order {self.order_id} after "
                        f"{self.consecutive_errors} consecutive errors"
                    )
                    break

                if self.attempts >= self.max_attempts:
                    self.state = PollerState.TIMED_OUT
                    logger.warning(
                        f"Order {self.order_id} still '{self.status}' after "
                        f"{self.attempts} polls; stopping"
                    )
                    break

                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            self.state = PollerState.CANCELLED
            logger.info(f"Polling for order {self.order_id} cancelled")
            raise
        except Exception as e:
            self.state = PollerState.FAILED
            self.last_error = POLL_ERROR_MESSAGE
            logger.error(f"Poller for order {self.order_id} stopped: {e}")

        return self.status

    async def _poll_once(self) -> bool:
        """One status request. Returns True when the order is settled."""
        logger.debug(f"Polling order status for {self.order_id} (attempt {self.attempts})...")
        try:
            result = await self._fetch_status(self.order_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.errors_count += 1
            self.consecutive_errors += 1
            self.last_error = POLL_ERROR_MESSAGE
            logger.warning(f"Error polling order status for {self.order_id}: {e}")
            return False

        self.consecutive_errors = 0
        self.last_error = None
        self.status = result.status or PaymentStatus.PENDING.value
        self.payment = result.payment
        self.last_polled = datetime.now(timezone.utc)

        if self._on_update:
            try:
                self._on_update(self.status, self.payment)
            except Exception as e:
                logger.warning(f"Status update callback failed for {self.order_id}: {e}")

        return is_terminal(self.status)

    # ── Status ──────────────────────────────────────────────────────

    def get_status(self) -> dict:
        """Snapshot of the poller for display or diagnostics."""
        return {
            "orderId": self.order_id,
            "state": self.state.value,
            "running": self.running,
            "status": self.status,
            "attempts": self.attempts,
            "errorsCount": self.errors_count,
            "lastError": self.last_error,
            "lastPolled": self.last_polled.isoformat() if self.last_polled else None,
            "elapsedSeconds": self.elapsed_seconds,
            "pollIntervalSeconds": self.interval,
            "maxAttempts": self.max_attempts,
        }
