"""Tests for the rotating location preview.

Tests cover:
- Embed URL derivation
- Phase transitions driven directly through the timer callbacks
- Random reselection over the full index range
- Timer lifecycle (mount, reset, unmount) on a real event loop
"""

import asyncio
import random

import pytest

from guessr.schemas.map import Coordinate
from guessr.services.preview_cycler import (
    IDLE,
    CyclerState,
    FadeVisual,
    PreviewCycler,
    PreviewPhase,
    build_streetview_urls,
)


PARIS = [(48.8584, 2.2945), (48.8606, 2.3376), (48.8867, 2.3431)]


class ScriptedRandom(random.Random):
    """Random source returning a fixed sequence of indices."""

    def __init__(self, picks):
        super().__init__(0)
        self.picks = list(picks)
        self.ranges = []

    def randrange(self, stop, *args, **kwargs):
        self.ranges.append(stop)
        return self.picks.pop(0)


def run_cycle(cycler: PreviewCycler) -> None:
    """Drive one full outer tick plus its inner fade."""
    assert cycler.tick()
    assert cycler.finish_fade()


# =============================================================================
# Unit Tests - URL derivation
# =============================================================================


class TestBuildStreetviewUrls:
    """Tests for embed URL templating."""

    def test_one_url_per_location(self):
        urls = build_streetview_urls(PARIS, api_key="test-key")

        assert len(urls) == 3
        assert urls[0] == (
            "//www.google.com/maps/embed/v1/streetview"
            "?key=test-key&location=48.8584,2.2945&fov=60"
        )

    def test_urls_embed_coordinates_in_order(self):
        urls = build_streetview_urls(PARIS, api_key="k")

        for url, (lat, lng) in zip(urls, PARIS):
            assert f"location={lat},{lng}&" in url

    def test_accepts_coordinate_models(self):
        urls = build_streetview_urls([Coordinate(lat=-33.8568, lng=151.2153)], api_key="k")

        assert urls == (
            "//www.google.com/maps/embed/v1/streetview?key=k&location=-33.8568,151.2153&fov=60",
        )

    def test_whole_degrees_and_fov(self):
        urls = build_streetview_urls([(10.0, -20.0)], api_key="k", fov=90)

        assert urls[0].endswith("location=10,-20&fov=90")

    def test_empty(self):
        assert build_streetview_urls([], api_key="k") == ()


# =============================================================================
# Unit Tests - Transitions
# =============================================================================


class TestPreviewCyclerTransitions:
    """State machine tests that call the timer callbacks directly."""

    def test_starts_idle(self):
        cycler = PreviewCycler(api_key="k")

        assert cycler.state is IDLE
        assert cycler.state.current_url is None

    def test_locations_move_to_first_index(self):
        cycler = PreviewCycler(api_key="k")

        cycler.set_locations(PARIS)

        assert cycler.state.phase is PreviewPhase.STEADY
        assert cycler.state.index == 0
        assert len(cycler.state.urls) == 3
        assert cycler.state.current_url == cycler.state.urls[0]
        assert cycler.state.visual is FadeVisual.NONE

    def test_tick_fades_out_without_changing_index(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)

        assert cycler.tick() is True

        assert cycler.state.phase is PreviewPhase.FADING_OUT
        assert cycler.state.index == 0
        assert cycler.state.visual is FadeVisual.FADE_OUT

    def test_finish_fade_selects_new_index_and_settles(self):
        rng = ScriptedRandom([2])
        cycler = PreviewCycler(api_key="k", rng=rng)
        cycler.set_locations(PARIS)
        seen = []
        cycler.subscribe(seen.append)

        run_cycle(cycler)

        assert [s.phase for s in seen] == [
            PreviewPhase.FADING_OUT,
            PreviewPhase.FADING_IN,
            PreviewPhase.STEADY,
        ]
        assert seen[1].index == 2
        assert cycler.state == CyclerState(
            phase=PreviewPhase.STEADY,
            urls=seen[0].urls,
            index=2,
            visual=FadeVisual.FADE_IN,
        )

    def test_random_pick_includes_current_index(self):
        """The next index is drawn from the full range, current one included."""
        rng = ScriptedRandom([0, 0, 1])
        cycler = PreviewCycler(api_key="k", rng=rng)
        cycler.set_locations(PARIS)

        run_cycle(cycler)
        assert cycler.state.index == 0
        run_cycle(cycler)
        assert cycler.state.index == 0
        run_cycle(cycler)
        assert cycler.state.index == 1

        assert rng.ranges == [3, 3, 3]

    def test_tick_ignored_while_fading(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)
        cycler.tick()

        assert cycler.tick() is False
        assert cycler.state.phase is PreviewPhase.FADING_OUT

    def test_finish_fade_ignored_when_steady(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)

        assert cycler.finish_fade() is False
        assert cycler.state.index == 0

    def test_index_always_in_range(self):
        cycler = PreviewCycler(api_key="k", rng=random.Random(1234))
        cycler.set_locations(PARIS)
        states = []
        cycler.subscribe(states.append)

        for _ in range(200):
            run_cycle(cycler)

        assert states
        assert all(0 <= s.index < 3 for s in states)

    def test_single_location_stays_on_zero(self):
        """Five cycles over one location keep index 0."""
        cycler = PreviewCycler(api_key="k", rng=random.Random(7))
        cycler.set_locations([(58.2167, -6.3885)])
        indices = []
        cycler.subscribe(lambda state: indices.append(state.index))

        for _ in range(5):
            run_cycle(cycler)

        assert indices == [0] * 15
        assert cycler.state.index == 0

    def test_empty_locations_stay_idle(self):
        cycler = PreviewCycler(api_key="k")

        cycler.set_locations([])

        assert cycler.state is IDLE
        assert cycler.state.urls == ()
        assert cycler.tick() is False
        assert cycler.finish_fade() is False
        assert cycler.state is IDLE

    def test_new_locations_reset_to_first_index(self):
        cycler = PreviewCycler(api_key="k", rng=ScriptedRandom([2]))
        cycler.set_locations(PARIS)
        run_cycle(cycler)
        assert cycler.state.index == 2

        cycler.set_locations(PARIS[:2])

        assert cycler.state.phase is PreviewPhase.STEADY
        assert cycler.state.index == 0
        assert len(cycler.state.urls) == 2

    def test_same_locations_do_not_reset(self):
        cycler = PreviewCycler(api_key="k", rng=ScriptedRandom([1]))
        cycler.set_locations(PARIS)
        run_cycle(cycler)

        cycler.set_locations(list(PARIS))

        assert cycler.state.index == 1

    def test_clearing_locations_returns_to_idle(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)

        cycler.set_locations([])

        assert cycler.state is IDLE

    def test_unsubscribe(self):
        cycler = PreviewCycler(api_key="k")
        seen = []
        unsubscribe = cycler.subscribe(seen.append)

        cycler.set_locations(PARIS)
        unsubscribe()
        cycler.tick()

        assert len(seen) == 1

    def test_failing_listener_does_not_break_cycler(self):
        cycler = PreviewCycler(api_key="k")
        seen = []

        def broken(state):
            raise RuntimeError("boom")

        cycler.subscribe(broken)
        cycler.subscribe(seen.append)
        cycler.set_locations(PARIS)

        assert cycler.state.phase is PreviewPhase.STEADY
        assert len(seen) == 1

    def test_reset_during_fade_in_keeps_new_urls(self):
        """Re-deriving from a listener mid-swap leaves the new locations in place."""
        cycler = PreviewCycler(api_key="k", rng=ScriptedRandom([2]))
        cycler.set_locations(PARIS)

        def reset_on_fade_in(state):
            if state.phase is PreviewPhase.FADING_IN:
                cycler.set_locations(PARIS[:2])

        cycler.subscribe(reset_on_fade_in)

        assert cycler.tick() is True
        assert cycler.finish_fade() is False

        assert cycler.state.phase is PreviewPhase.STEADY
        assert cycler.state.index == 0
        assert cycler.state.urls == build_streetview_urls(PARIS[:2], api_key="k")

    def test_reset_during_fade_out_cancels_tick(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)

        def reset_on_fade_out(state):
            if state.phase is PreviewPhase.FADING_OUT:
                cycler.set_locations(PARIS[1:])

        cycler.subscribe(reset_on_fade_out)

        assert cycler.tick() is False
        assert cycler.state.phase is PreviewPhase.STEADY
        assert len(cycler.state.urls) == 2

    def test_invalid_timing(self):
        with pytest.raises(ValueError):
            PreviewCycler(api_key="k", cycle_seconds=0)
        with pytest.raises(ValueError):
            PreviewCycler(api_key="k", fade_seconds=-1)


# =============================================================================
# Async Tests - Timer lifecycle
# =============================================================================


class TestPreviewCyclerTimers:
    """Timer tests on a real event loop with short intervals."""

    @pytest.mark.asyncio
    async def test_timers_cycle_through_phases(self):
        cycler = PreviewCycler(
            api_key="k", cycle_seconds=0.02, fade_seconds=0.005, rng=random.Random(3)
        )
        cycler.set_locations(PARIS)
        phases = []
        cycler.subscribe(lambda state: phases.append(state.phase))

        async with cycler:
            await asyncio.sleep(0.15)

        assert phases[:3] == [
            PreviewPhase.FADING_OUT,
            PreviewPhase.FADING_IN,
            PreviewPhase.STEADY,
        ]

    @pytest.mark.asyncio
    async def test_no_timers_without_locations(self):
        cycler = PreviewCycler(api_key="k", cycle_seconds=0.01, fade_seconds=0.001)

        async with cycler:
            cycler.set_locations([])
            await asyncio.sleep(0.05)

            assert cycler.has_cycle_timer is False
            assert cycler.has_fade_timer is False
            assert cycler.state is IDLE

    @pytest.mark.asyncio
    async def test_mount_starts_single_cycle_timer(self):
        cycler = PreviewCycler(api_key="k")
        cycler.set_locations(PARIS)

        async with cycler:
            assert cycler.is_mounted
            assert cycler.has_cycle_timer
            assert cycler.has_fade_timer is False

        assert cycler.has_cycle_timer is False

    @pytest.mark.asyncio
    async def test_locations_after_mount_start_timers(self):
        cycler = PreviewCycler(api_key="k")

        async with cycler:
            assert cycler.has_cycle_timer is False
            cycler.set_locations(PARIS)
            assert cycler.has_cycle_timer

    @pytest.mark.asyncio
    async def test_unmount_cancels_pending_fade(self):
        """No state change once unmounted, even with a fade in flight."""
        cycler = PreviewCycler(api_key="k", cycle_seconds=0.01, fade_seconds=10.0)
        cycler.set_locations(PARIS)

        cycler.mount()
        await asyncio.sleep(0.05)
        assert cycler.state.phase is PreviewPhase.FADING_OUT
        assert cycler.has_fade_timer

        await cycler.unmount()
        frozen = cycler.state

        assert cycler.is_destroyed
        assert cycler.has_cycle_timer is False
        assert cycler.has_fade_timer is False

        await asyncio.sleep(0.05)
        assert cycler.tick() is False
        assert cycler.finish_fade() is False
        cycler.set_locations([(1.0, 2.0)])
        assert cycler.state is frozen

    @pytest.mark.asyncio
    async def test_no_mutation_after_unmount_with_fast_timers(self):
        cycler = PreviewCycler(api_key="k", cycle_seconds=0.01, fade_seconds=0.002)
        cycler.set_locations(PARIS)

        async with cycler:
            await asyncio.sleep(0.05)

        frozen = cycler.state
        await asyncio.sleep(0.05)

        assert cycler.state is frozen

    @pytest.mark.asyncio
    async def test_reset_restarts_cycle_timer(self):
        cycler = PreviewCycler(api_key="k", cycle_seconds=0.03, fade_seconds=10.0)
        cycler.set_locations(PARIS)

        async with cycler:
            await asyncio.sleep(0.05)
            assert cycler.state.phase is PreviewPhase.FADING_OUT

            cycler.set_locations(PARIS[1:])

            assert cycler.state.phase is PreviewPhase.STEADY
            assert cycler.state.index == 0
            assert cycler.has_fade_timer is False
            assert cycler.has_cycle_timer

    @pytest.mark.asyncio
    async def test_cannot_remount(self):
        cycler = PreviewCycler(api_key="k")
        async with cycler:
            with pytest.raises(RuntimeError):
                cycler.mount()

        with pytest.raises(RuntimeError):
            cycler.mount()

    @pytest.mark.asyncio
    async def test_reset_from_listener_keeps_single_cycle_timer(self):
        """A reset triggered inside the outer timer leaves one outer timer alive."""
        cycler = PreviewCycler(api_key="k", cycle_seconds=0.05, fade_seconds=10.0)
        cycler.set_locations(PARIS)
        resets = []

        def reset_once(state):
            if state.phase is PreviewPhase.FADING_OUT and not resets:
                resets.append(state)
                cycler.set_locations(PARIS[1:])

        cycler.subscribe(reset_once)

        def live_tasks(name):
            return [
                task
                for task in asyncio.all_tasks()
                if not task.done() and task.get_coro().__qualname__ == f"PreviewCycler.{name}"
            ]

        async with cycler:
            await asyncio.sleep(0.3)

            assert len(resets) == 1
            assert len(live_tasks("_run_cycle")) == 1
            assert len(live_tasks("_run_fade")) == 1
            assert cycler.state.phase is PreviewPhase.FADING_OUT
            assert len(cycler.state.urls) == 2
