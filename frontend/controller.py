"""
TokenPulse - Analysis Request Controller

Client-side lifecycle of the AI analysis panel: idle, loading, success,
error. The controller is bound to one token address at a time, retries
failed requests with a linear backoff and drops any result whose request
was superseded (new address, new submission) or whose controller was
released.

Must be driven from a running asyncio event loop.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from functools import partial
from typing import Any, Awaitable, Callable, Protocol

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from tokenpulse.errors import AnalysisRequestError, RequestCancelled
from tokenpulse.logging import get_client_logger
from tokenpulse.models import AnalysisResult, RequestStatus

logger = get_client_logger()

NO_ADDRESS_MESSAGE = "No token address provided"
FETCH_FAILED_MESSAGE = "Failed to fetch AI analysis"


class AnalysisBackend(Protocol):
    async def analyze(self, token_address: str, prompt: str | None = None) -> AnalysisResult: ...


@dataclass(frozen=True)
class RetryPolicy:
    """Automatic retry policy: ``max_attempts`` calls per submission."""

    max_attempts: int = 3
    base_delay: float = 1.0

    def backoff_seconds(self, attempt: int) -> float:
        """Delay before the retry that follows failure number ``attempt + 1``."""
        return self.base_delay * (attempt + 1)


DEFAULT_RETRY_POLICY = RetryPolicy()


@dataclass(frozen=True)
class RequestState:
    """Snapshot of what the analysis panel shows."""

    status: RequestStatus = RequestStatus.IDLE
    result: AnalysisResult | None = None
    error_message: str | None = None
    attempt_count: int = 0


@dataclass
class RequestTicket:
    """Identity of one issued load: the epoch and address it belongs to."""

    epoch: int
    token_address: str
    prompt: str | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class AnalysisController:
    """
    Owns the RequestState for one analysis panel.

    Usage:
        controller = AnalysisController(client, token_address)
        await controller.wait()
        controller.submit("Is liquidity healthy?")
        await controller.close()
    """

    def __init__(
        self,
        client: AnalysisBackend,
        token_address: str | None = None,
        *,
        policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        on_change: Callable[[RequestState], Any] | None = None,
    ) -> None:
        self.client = client
        self.policy = policy
        self.state = RequestState()

        self._sleep = sleep
        self._on_change = on_change
        self._token_address = ""
        self._last_prompt: str | None = None
        self._epoch = 0
        self._ticket: RequestTicket | None = None
        self._task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._retry_timer: asyncio.Future | None = None
        self._released = False

        if token_address is not None:
            self.bind(token_address)

    @property
    def token_address(self) -> str:
        return self._token_address

    @property
    def is_released(self) -> bool:
        return self._released

    @property
    def has_pending_retry(self) -> bool:
        return self._retry_timer is not None and not self._retry_timer.done()

    # =========================================================================
    # Public operations
    # =========================================================================

    def bind(self, token_address: str, prompt: str | None = None) -> asyncio.Task | None:
        """
        Bind the controller to a token address and start the initial load.

        ``prompt`` is sent with that first load and reused by ``retry``.
        Any in-flight request or pending retry for the previous address
        is invalidated.
        """
        self._ensure_active()

        self._token_address = (token_address or "").strip()
        self._last_prompt = prompt
        self._supersede()
        self._set_state(RequestState())

        if not self._token_address:
            self._set_state(RequestState(status=RequestStatus.ERROR, error_message=NO_ADDRESS_MESSAGE))
            return None

        logger.info("controller_bound", token_address=self._token_address)
        return self._start(prompt)

    def submit(self, prompt: str | None = None) -> asyncio.Task | None:
        """User-initiated request; resets the attempt counter."""
        self._ensure_active()

        if not self._token_address:
            self._set_state(RequestState(status=RequestStatus.ERROR, error_message=NO_ADDRESS_MESSAGE))
            return None

        self._last_prompt = prompt
        self._supersede()
        return self._start(prompt)

    def retry(self) -> asyncio.Task | None:
        """Manual retry of the last submission."""
        return self.submit(self._last_prompt)

    async def wait(self) -> None:
        """Wait until the current load settles (success, error or dropped)."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def close(self) -> None:
        """Release the controller; nothing is written to state afterwards."""
        if self._released:
            return
        self._released = True

        if self._ticket is not None:
            self._ticket.cancel()
        self._cancel_retry_timer()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.debug("controller_released", token_address=self._token_address)

    # =========================================================================
    # Load lifecycle
    # =========================================================================

    def _ensure_active(self) -> None:
        if self._released:
            raise RuntimeError("AnalysisController has been released")

    def _supersede(self) -> None:
        if self._ticket is not None:
            self._ticket.cancel()
        self._cancel_retry_timer()

    def _cancel_retry_timer(self) -> None:
        if self._retry_timer is not None and not self._retry_timer.done():
            self._retry_timer.cancel()
        self._retry_timer = None

    def _start(self, prompt: str | None) -> asyncio.Task:
        self._epoch += 1
        ticket = RequestTicket(epoch=self._epoch, token_address=self._token_address, prompt=prompt)
        self._ticket = ticket

        self._update(status=RequestStatus.LOADING, error_message=None, attempt_count=0)

        task = asyncio.create_task(self._run(ticket))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._task = task
        return task

    def _ensure_current(self, ticket: RequestTicket) -> None:
        """Epoch/identity guard: raise RequestCancelled for stale tickets."""
        if (
            self._released
            or ticket.cancelled
            or ticket.epoch != self._epoch
            or ticket.token_address != self._token_address
        ):
            raise RequestCancelled(f"request {ticket.epoch} for {ticket.token_address} superseded")

    async def _run(self, ticket: RequestTicket) -> None:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception_type(AnalysisRequestError),
            before_sleep=partial(self._on_retry_scheduled, ticket),
            sleep=partial(self._wait_for_retry, ticket),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._attempt(ticket)
        except RequestCancelled:
            logger.debug("analysis_result_dropped", token_address=ticket.token_address, epoch=ticket.epoch)
            return
        except AnalysisRequestError as e:
            logger.warning(
                "analysis_failed",
                token_address=ticket.token_address,
                attempts=self.policy.max_attempts,
                error=e.message,
            )
            self._update(
                status=RequestStatus.ERROR,
                error_message=e.message,
                attempt_count=self.policy.max_attempts,
            )
            return

        logger.info("analysis_loaded", token_address=ticket.token_address, symbol=result.snapshot.symbol)
        self._update(
            status=RequestStatus.SUCCESS,
            result=result,
            error_message=None,
            attempt_count=0,
        )

    async def _attempt(self, ticket: RequestTicket) -> AnalysisResult:
        self._ensure_current(ticket)
        try:
            result = await self.client.analyze(ticket.token_address, ticket.prompt)
        except AnalysisRequestError:
            self._ensure_current(ticket)
            raise
        except Exception as e:
            # Any backend failure goes through the same retry path
            self._ensure_current(ticket)
            logger.warning("analysis_backend_error", token_address=ticket.token_address, error_type=type(e).__name__)
            raise AnalysisRequestError(str(e) or FETCH_FAILED_MESSAGE) from e
        self._ensure_current(ticket)
        return result

    def _retry_wait(self, retry_state: RetryCallState) -> float:
        return self.policy.backoff_seconds(retry_state.attempt_number - 1)

    def _on_retry_scheduled(self, ticket: RequestTicket, retry_state: RetryCallState) -> None:
        # Show the latest error while the retry is pending
        error = retry_state.outcome.exception() if retry_state.outcome else None
        message = error.message if isinstance(error, AnalysisRequestError) else str(error)
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0

        logger.info(
            "analysis_retry_scheduled",
            token_address=ticket.token_address,
            attempt=retry_state.attempt_number,
            delay_s=delay,
            error=message,
        )
        self._update(error_message=message, attempt_count=retry_state.attempt_number)

    async def _wait_for_retry(self, ticket: RequestTicket, seconds: float) -> None:
        """The retry timer; at most one per controller."""
        self._ensure_current(ticket)
        self._cancel_retry_timer()

        timer = asyncio.ensure_future(self._sleep(seconds))
        self._retry_timer = timer
        try:
            await timer
        except asyncio.CancelledError:
            if ticket.cancelled:
                raise RequestCancelled(f"retry for {ticket.token_address} cancelled") from None
            raise
        finally:
            if self._retry_timer is timer:
                self._retry_timer = None

        self._ensure_current(ticket)

    # =========================================================================
    # State
    # =========================================================================

    def _update(self, **changes: Any) -> None:
        self._set_state(replace(self.state, **changes))

    def _set_state(self, state: RequestState) -> None:
        self.state = state
        if self._on_change is None:
            return
        try:
            self._on_change(state)
        except Exception:
            logger.exception("state_listener_failed", status=state.status.value)
