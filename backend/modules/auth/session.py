"""
Session lifecycle management.

SessionManager owns the single current EffectiveSession. Every auth-state
transition, whether pushed by the provider or caused by one of the
manager's own operations, goes through one queue and is handled by one
worker task. A transition therefore never starts before the previous one
(including any profile creation it triggered) has finished, and a slow
resolution for an old principal cannot overwrite a newer session.

States:
    UNINITIALIZED -> LOADING -> READY
    READY -> LOADING -> READY       (sign-in, token refresh, profile refresh)
    any -> SIGNED_OUT               (sign-out or a transition without principal)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from shared.config import get_settings
from shared.exceptions import RentHubError

from .interfaces import IAuthProvider, IIdentityResolver
from .models import (
    AuthEventType,
    EffectiveSession,
    Principal,
    ResolutionFailure,
    SessionState,
    SignupAttributes,
)
from .exceptions import AwaitingConfirmationError, ResolutionTimeoutError
from .roles import parse_role

logger = logging.getLogger(__name__)

SessionListener = Callable[[EffectiveSession], None]


@dataclass
class _Transition:
    event: AuthEventType
    principal: Optional[Principal]
    done: Optional["asyncio.Future[EffectiveSession]"] = None


class SessionManager:
    """
    Bridges auth-state transitions to the identity resolver.

    Readers use ``session``, ``state`` and ``subscribe()``; they never
    mutate the session. Errors from background resolution are logged and
    show up only as ``session.error`` with ``session.profile`` unset.
    Errors from sign-in and sign-up are raised to the caller.

    Usage:
        manager = SessionManager(provider, resolver)
        await manager.start()
        session = await manager.sign_in("a@example.com", "secret")
        if session.is_landlord:
            ...
    """

    def __init__(
        self,
        provider: IAuthProvider,
        resolver: IIdentityResolver,
        resolution_timeout: Optional[float] = None,
    ):
        self._provider = provider
        self._resolver = resolver
        self._timeout = (
            resolution_timeout
            if resolution_timeout is not None
            else get_settings().session_resolution_timeout_seconds
        )

        self._state = SessionState.UNINITIALIZED
        self._session = EffectiveSession()
        self._listeners: list[SessionListener] = []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional["asyncio.Queue[_Transition]"] = None
        self._worker: Optional[asyncio.Task] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # -------------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------------

    @property
    def session(self) -> EffectiveSession:
        """The current published session."""
        return self._session

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._session.is_loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with every published session.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> EffectiveSession:
        """
        Start reacting to auth-state changes and resolve the current session.

        A failure to read the current session is logged and leaves the
        manager signed out.
        """
        if self._unsubscribe is not None:
            return self._session

        self._ensure_worker()
        self._unsubscribe = self._provider.on_auth_state_change(self.notify)

        try:
            principal = await self._provider.get_current_session()
        except RentHubError as e:
            logger.error("Error getting current session: %s", e.message)
            principal = None

        return await self._submit(AuthEventType.INITIAL_SESSION, principal)

    async def stop(self) -> None:
        """
        Unsubscribe from the provider and stop the worker.

        Callers still waiting on a transition are cancelled.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    async def __aenter__(self) -> "SessionManager":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    def notify(self, event: AuthEventType, principal: Optional[Principal]) -> None:
        """
        Queue a provider-pushed transition.

        Safe to call from the provider's callback thread.
        """
        if self._loop is None or self._queue is None:
            raise RuntimeError("SessionManager.start() must be called before notify()")

        transition = _Transition(event, principal)
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._queue.put_nowait(transition)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, transition)

    async def wait_idle(self) -> None:
        """Wait until every queued transition has been processed."""
        if self._queue is not None:
            await self._queue.join()

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def sign_up(
        self,
        email: str,
        password: str,
        role: str,
        display_name: Optional[str] = None,
    ) -> EffectiveSession:
        """
        Create an account and resolve its session.

        The role and display name are stored as signup attributes; they are
        the only source of the role when the profile is first created.
        When the provider requires email confirmation no profile is created
        yet; the session reports AWAITING_CONFIRMATION and the profile is
        created on the first sign-in after confirmation.

        Raises:
            InvalidRoleError: If role is not landlord or tenant
            AuthError: If the provider rejects the sign-up
        """
        user_role = parse_role(role)
        attributes = SignupAttributes.for_signup(email, user_role, display_name)
        principal = await self._provider.sign_up(email, password, attributes)
        if principal.access_token is None:
            return await self._submit(AuthEventType.AWAITING_CONFIRMATION, principal)
        return await self._submit(AuthEventType.SIGNED_IN, principal)

    async def sign_in(self, email: str, password: str) -> EffectiveSession:
        """
        Sign in and resolve the session.

        Raises:
            AuthError: If the provider rejects the credentials
        """
        principal = await self._provider.sign_in_with_password(email, password)
        return await self._submit(AuthEventType.SIGNED_IN, principal)

    async def sign_out(self) -> None:
        """
        Sign out.

        The local session is cleared even if the provider call fails; the
        provider's error is raised afterwards.
        """
        try:
            await self._provider.sign_out()
        finally:
            await self._submit(AuthEventType.SIGNED_OUT, None)

    async def refresh_profile(self) -> EffectiveSession:
        """Re-read the current user's profile, e.g. after an edit."""
        if self._session.principal is None:
            return self._session
        return await self._submit(AuthEventType.PROFILE_REFRESH, None)

    # -------------------------------------------------------------------------
    # Worker
    # -------------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        if self._worker is not None and not self._worker.done():
            return
        self._loop = asyncio.get_running_loop()
        if self._queue is None:
            self._queue = asyncio.Queue()
        self._worker = self._loop.create_task(self._run())

    async def _submit(
        self,
        event: AuthEventType,
        principal: Optional[Principal],
    ) -> EffectiveSession:
        self._ensure_worker()
        done: "asyncio.Future[EffectiveSession]" = self._loop.create_future()
        self._queue.put_nowait(_Transition(event, principal, done))
        return await done

    async def _run(self) -> None:
        transition: Optional[_Transition] = None
        try:
            while True:
                transition = await self._queue.get()
                try:
                    session = await self._apply(transition)
                except Exception as e:
                    logger.exception("Unexpected error handling %s", transition.event.value)
                    if transition.done is not None and not transition.done.done():
                        transition.done.set_exception(e)
                else:
                    if transition.done is not None and not transition.done.done():
                        transition.done.set_result(session)
                finally:
                    self._queue.task_done()
                transition = None
        except asyncio.CancelledError:
            self._abandon(transition)
            raise

    def _abandon(self, in_flight: Optional[_Transition]) -> None:
        """Cancel every waiting caller and end loading when the worker stops."""
        pending = [in_flight] if in_flight is not None else []
        while not self._queue.empty():
            pending.append(self._queue.get_nowait())
            self._queue.task_done()

        for transition in pending:
            if transition.done is not None and not transition.done.done():
                transition.done.cancel()
        if pending:
            logger.info("Session manager stopped with %d pending transition(s)", len(pending))

        if self._session.is_loading:
            state = SessionState.READY if self._session.principal else SessionState.SIGNED_OUT
            self._publish(self._session.model_copy(update={"is_loading": False}), state)

    async def _apply(self, transition: _Transition) -> EffectiveSession:
        logger.debug("Auth transition %s", transition.event.value)

        if transition.event == AuthEventType.PROFILE_REFRESH:
            current = self._session
            if current.principal is None:
                return current
            self._publish(current.model_copy(update={"is_loading": True}), SessionState.LOADING)
            session = await self._bounded(self._resolver.refresh(current), current)
            self._publish(session, SessionState.READY)
            return session

        principal = transition.principal
        if transition.event == AuthEventType.SIGNED_OUT or principal is None:
            session = EffectiveSession()
            self._publish(session, SessionState.SIGNED_OUT)
            return session

        if transition.event == AuthEventType.AWAITING_CONFIRMATION:
            # Nothing to resolve until the first sign-in after confirmation
            error = AwaitingConfirmationError(principal.id)
            logger.info(error.message)
            session = EffectiveSession(principal=principal, error=ResolutionFailure.from_error(error))
            self._publish(session, SessionState.READY)
            return session

        self._publish(self._loading_session(principal), SessionState.LOADING)
        base = EffectiveSession(principal=principal)
        session = await self._bounded(self._resolver.resolve(principal), base)
        self._publish(session, SessionState.READY)
        return session

    def _loading_session(self, principal: Principal) -> EffectiveSession:
        """Session shown while resolving; keeps the profile on token refreshes."""
        current = self._session
        if current.principal is not None and current.principal.id == principal.id:
            return current.model_copy(update={"principal": principal, "is_loading": True})
        return EffectiveSession(principal=principal, is_loading=True)

    async def _bounded(
        self,
        resolution: Awaitable[EffectiveSession],
        base: EffectiveSession,
    ) -> EffectiveSession:
        """
        Run a resolution with the timeout, absorbing its failures.

        On failure the error is set on ``base``, so a refresh keeps the
        profile it already had.
        """
        user_id = base.principal.id
        try:
            session = await asyncio.wait_for(resolution, timeout=self._timeout)
        except asyncio.TimeoutError:
            error = ResolutionTimeoutError(user_id, self._timeout)
            logger.warning(error.message)
            session = base.model_copy(update={"error": ResolutionFailure.from_error(error)})
        except RentHubError as e:
            logger.warning("Session resolution failed for user %s: %s", user_id, e.message)
            session = base.model_copy(update={"error": ResolutionFailure.from_error(e)})
        except Exception as e:
            logger.exception("Unexpected error resolving user %s", user_id)
            failure = ResolutionFailure(code="RESOLUTION_FAILED", message=str(e))
            session = base.model_copy(update={"error": failure})
        return session.model_copy(update={"is_loading": False})

    def _publish(self, session: EffectiveSession, state: SessionState) -> None:
        self._session = session
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener raised")
