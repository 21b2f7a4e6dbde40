"""Tests for EvolutionView: year changes, mounting and identity continuity."""

import random

import pytest

from echoes.render.surface import RenderSurface
from echoes.scheduler import ManualFrameClock
from echoes.view import EvolutionView


@pytest.fixture()
def view(freedom, config):
    return EvolutionView(freedom, config, rng=random.Random(11))


class TestYearSelection:
    def test_starts_at_default_year(self, view):
        assert view.current_year.value == 2020
        assert view.available_years == [1940, 1980, 2020]

    def test_same_snapshot_does_not_restart(self, view):
        view.mount(RenderSurface(600, 400))
        clock: ManualFrameClock = view.clock
        clock.run(5)
        frames = view.scheduler.frame_count

        assert view.set_year(2023) is False
        assert view.requested_year == 2023
        assert view.scheduler.frame_count == frames
        assert view.scheduler.running

    def test_new_snapshot_restarts_and_notifies(self, view):
        seen = []
        view.current_year.subscribe(seen.append)
        view.mount(RenderSurface(600, 400))
        frames = view.scheduler.frame_count

        assert view.set_year(1990) is True

        assert seen == [1980]
        assert view.current_year.value == 1980
        assert view.snapshot is view.provider.snapshot(1980)
        assert view.scheduler.frame_count == frames + 1

    def test_set_year_while_unmounted(self, view):
        assert view.set_year(1900) is True
        assert view.current_year.value == 1940
        assert not view.scheduler.running


class TestMounting:
    def test_mount_without_surface(self, view):
        assert view.mount(None) is False
        assert not view.scheduler.running
        assert view.clock.pending == 0

    def test_mount_starts_loop(self, view):
        assert view.mount(RenderSurface(600, 400)) is True
        assert view.scheduler.running
        assert set(view.positions) == view.snapshot.node_ids

    def test_unmount_stops_and_clears_hover(self, view):
        view.mount(RenderSurface(600, 400))
        center = view.positions["freedom"]
        view.pointer_move(center.x, center.y)
        assert view.hovered_node.value == "freedom"

        view.unmount()

        assert not view.scheduler.running
        assert view.hovered_node.value is None
        assert view.clock.pending == 0

    def test_resize_updates_viewport(self, view):
        surface = RenderSurface(600, 400)
        view.mount(surface)

        view.resize(300, 200)

        assert view.positions.viewport.width == 300
        assert surface.image.size == (300, 200)
        assert view.scheduler.running

    def test_resize_without_surface_is_noop(self, view):
        view.resize(300, 200)
        assert view.surface is None

    def test_pointer_leave(self, view):
        view.mount(RenderSurface(600, 400))
        center = view.positions["freedom"]
        view.pointer_move(center.x, center.y)

        view.pointer_leave()

        assert view.hovered_node.value is None


class TestIdentityContinuity:
    def test_shared_nodes_keep_state_across_years(self, freedom, config):
        view = EvolutionView(freedom, config, rng=random.Random(5))
        view.set_year(1980)
        view.mount(RenderSurface(600, 400))
        view.clock.run(10)
        freedom_state = view.positions["freedom"]
        expression_state = view.positions["expression"]

        view.set_year(2020)

        assert view.positions["freedom"] is freedom_state
        assert view.positions["expression"] is expression_state
        assert "liberty" not in view.positions
        assert "privacy" in view.positions


class TestObservables:
    def test_consumers_cannot_set_year(self, view):
        assert not hasattr(view.current_year, "set")
        assert not hasattr(view.hovered_node, "set")

    def test_readonly_year_still_notifies(self, view):
        seen = []
        unsubscribe = view.current_year.subscribe(seen.append)
        view.set_year(1940)
        unsubscribe()
        view.set_year(1980)
        assert seen == [1940]
