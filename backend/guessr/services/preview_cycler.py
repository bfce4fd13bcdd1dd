"""Rotating Street View preview for map pages.

Each mounted view owns one ``PreviewCycler``. It turns the map's locations
into embed URLs and, on a fixed schedule, cross-fades to a randomly chosen
location:

    Idle -> Steady(i) -> FadingOut(i) -> FadingIn(j) -> Steady(j) -> ...

Timers are asyncio tasks: one outer task ticking every ``cycle_seconds``
and, per tick, one inner task that completes the fade after
``fade_seconds``. Unmounting cancels both and nothing changes afterwards.

Usage:
    async with PreviewCycler(api_key=key) as cycler:
        cycler.subscribe(on_state)
        cycler.set_locations(view_model.data)
        ...
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Union

from guessr.schemas.map import Coordinate

logger = logging.getLogger(__name__)

STREETVIEW_EMBED_URL = (
    "//www.google.com/maps/embed/v1/streetview"
    "?key={key}&location={lat},{lng}&fov={fov}"
)

DEFAULT_FOV = 60
DEFAULT_CYCLE_SECONDS = 5.0
DEFAULT_FADE_SECONDS = 1.0

Location = Union[Coordinate, Sequence[float]]


class PreviewPhase(str, Enum):
    """Cycler phases."""

    IDLE = "idle"
    STEADY = "steady"
    FADING_OUT = "fading_out"
    FADING_IN = "fading_in"


class FadeVisual(str, Enum):
    """Fade class applied to the displayed imagery."""

    NONE = "none"
    FADE_OUT = "fade_out"
    FADE_IN = "fade_in"


@dataclass(frozen=True)
class CyclerState:
    """Snapshot of a cycler.

    ``index`` is None while idle and otherwise within ``range(len(urls))``.
    """

    phase: PreviewPhase
    urls: tuple[str, ...] = ()
    index: Optional[int] = None
    visual: FadeVisual = FadeVisual.NONE

    @property
    def current_url(self) -> Optional[str]:
        if self.index is None:
            return None
        return self.urls[self.index]


IDLE = CyclerState(phase=PreviewPhase.IDLE)

StateListener = Callable[[CyclerState], None]


def _format_degrees(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _as_pair(location: Location) -> tuple[float, float]:
    if isinstance(location, Coordinate):
        return location.lat, location.lng
    lat, lng = location
    return float(lat), float(lng)


def build_streetview_urls(
    locations: Iterable[Location], api_key: str, fov: int = DEFAULT_FOV
) -> tuple[str, ...]:
    """Derive one Street View embed URL per location, in order.

    Args:
        locations: Coordinates or (lat, lng) pairs
        api_key: Maps embed API key
        fov: Field of view in degrees

    Returns:
        Tuple of protocol-relative embed URLs
    """
    urls = []
    for location in locations:
        lat, lng = _as_pair(location)
        urls.append(
            STREETVIEW_EMBED_URL.format(
                key=api_key,
                lat=_format_degrees(lat),
                lng=_format_degrees(lng),
                fov=fov,
            )
        )
    return tuple(urls)


class PreviewCycler:
    """Timed, cancellable location preview state machine for one view."""

    def __init__(
        self,
        api_key: str,
        fov: int = DEFAULT_FOV,
        cycle_seconds: float = DEFAULT_CYCLE_SECONDS,
        fade_seconds: float = DEFAULT_FADE_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        """Initialize an idle cycler.

        Args:
            api_key: Maps embed API key used in every URL
            fov: Field of view in degrees
            cycle_seconds: Interval between fades
            fade_seconds: Delay between fade-out and the location swap
            rng: Random source for picking the next location
        """
        if cycle_seconds <= 0 or fade_seconds < 0:
            raise ValueError("cycle_seconds must be positive and fade_seconds non-negative")

        self.api_key = api_key
        self.fov = fov
        self.cycle_seconds = cycle_seconds
        self.fade_seconds = fade_seconds
        self._rng = rng or random.Random()

        self._state = IDLE
        self._locations: tuple[tuple[float, float], ...] = ()
        # Bumped on every re-derivation; callbacks stop once it changes
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._mounted = False
        self._destroyed = False
        self._cycle_task: Optional[asyncio.Task] = None
        self._fade_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> CyclerState:
        return self._state

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def has_cycle_timer(self) -> bool:
        return self._cycle_task is not None and not self._cycle_task.done()

    @property
    def has_fade_timer(self) -> bool:
        return self._fade_task is not None and not self._fade_task.done()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback for every state change.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Start cycling. Must be called from a running event loop.

        Raises:
            RuntimeError: If the cycler was already mounted or destroyed
        """
        if self._destroyed:
            raise RuntimeError("PreviewCycler cannot be remounted after unmount")
        if self._mounted:
            raise RuntimeError("PreviewCycler is already mounted")

        self._mounted = True
        self._start_timers()

    async def unmount(self) -> None:
        """Stop cycling for good and cancel any pending timer."""
        self._mounted = False
        self._destroyed = True
        self._listeners.clear()

        for task in (self._fade_task, self._cycle_task):
            if task is None or task.done() or task is asyncio.current_task():
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        self._fade_task = None
        self._cycle_task = None

    async def __aenter__(self) -> "PreviewCycler":
        self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.unmount()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_locations(self, locations: Iterable[Location]) -> None:
        """Derive the preview URLs for a new set of locations.

        A non-empty list resets the cycler to ``Steady(0)`` and restarts the
        schedule from a full cycle; an empty list returns it to ``Idle``.
        Passing the locations already in use changes nothing.
        """
        if self._destroyed:
            return

        pairs = tuple(_as_pair(location) for location in locations)
        if pairs == self._locations:
            return

        self._locations = pairs
        self._generation += 1
        self._cancel_timers()

        if not pairs:
            self._set_state(IDLE)
            return

        urls = build_streetview_urls(pairs, self.api_key, self.fov)
        self._set_state(CyclerState(phase=PreviewPhase.STEADY, urls=urls, index=0))

        if self._mounted:
            self._start_timers()

    def tick(self) -> bool:
        """Outer timer callback: ``Steady(i) -> FadingOut(i)``.

        Returns:
            True if a fade-out started
        """
        if self._destroyed or self._state.phase is not PreviewPhase.STEADY:
            return False

        generation = self._generation
        self._set_state(
            CyclerState(
                phase=PreviewPhase.FADING_OUT,
                urls=self._state.urls,
                index=self._state.index,
                visual=FadeVisual.FADE_OUT,
            )
        )
        # A listener may have re-derived the locations
        return self._generation == generation

    def finish_fade(self) -> bool:
        """Inner timer callback: swap to a random location and settle.

        The next index is drawn from the whole range, so the current one
        can be picked again.

        Returns:
            True if the displayed location was (re)selected
        """
        if self._destroyed or self._state.phase is not PreviewPhase.FADING_OUT:
            return False

        generation = self._generation
        urls = self._state.urls
        next_index = self._rng.randrange(len(urls))

        self._set_state(
            CyclerState(
                phase=PreviewPhase.FADING_IN,
                urls=urls,
                index=next_index,
                visual=FadeVisual.FADE_IN,
            )
        )
        if self._generation != generation:
            return False

        # Fade-in class stays on until the next fade-out
        self._set_state(
            CyclerState(
                phase=PreviewPhase.STEADY,
                urls=urls,
                index=next_index,
                visual=FadeVisual.FADE_IN,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_state(self, state: CyclerState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Preview state listener failed: {e}")

    def _start_timers(self) -> None:
        if self._state.phase is PreviewPhase.IDLE:
            return
        self._cycle_task = asyncio.create_task(self._run_cycle())

    def _cancel_timers(self) -> None:
        for task in (self._fade_task, self._cycle_task):
            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()
        self._fade_task = None
        self._cycle_task = None

    async def _run_cycle(self) -> None:
        while True:
            await asyncio.sleep(self.cycle_seconds)
            if not self._mounted:
                return
            started = self.tick()
            if self._cycle_task is not asyncio.current_task():
                return
            if started:
                self._fade_task = asyncio.create_task(self._run_fade())

    async def _run_fade(self) -> None:
        await asyncio.sleep(self.fade_seconds)
        if self._mounted:
            self.finish_fade()
