"""Tests for TreeSession: gestures end to end, events, dirty flag."""

from __future__ import annotations

import pytest

from dragtree import (
    DragStartEvent,
    DropDecision,
    DropEvent,
    EventProcessor,
    InfoRequestedEvent,
    LayoutEvent,
    NodeToggledEvent,
    DragInProgressError,
    ReentrantCallError,
    ReparentEvent,
    TreeSession,
    TypedEventProcessor,
    UnknownNodeError,
)


class ListProcessor(EventProcessor):
    """Collects all events for assertion."""

    def __init__(self):
        self.events: list = []
        self.shutdown_called = False

    def on_event(self, event):
        self.events.append(event)

    def shutdown(self):
        self.shutdown_called = True

    def of_type(self, cls):
        return [e for e in self.events if isinstance(e, cls)]

    def event_types(self):
        return [type(e).__name__ for e in self.events]


@pytest.fixture
def recorder():
    return ListProcessor()


@pytest.fixture
def session(raw_tree, config, recorder):
    return TreeSession.from_raw(raw_tree, config=config, processors=[recorder])


def _drag(session, node_id, dx, dy):
    assert session.on_drag_start(node_id)
    session.on_drag_move(node_id, dx, dy)
    return session.on_drag_end(node_id)


class TestLayout:
    def test_layout_emits_event(self, session, recorder):
        result = session.layout("initial")
        events = recorder.of_type(LayoutEvent)
        assert len(events) == 1
        assert events[0].reason == "initial"
        assert events[0].node_count == len(result.nodes) == 12
        assert events[0].link_count == 11
        assert events[0].session_id == session.session_id
        assert session.last_layout is result


class TestClicks:
    def test_single_click_shows_info(self, raw_tree, config, recorder, ids):
        shown = []
        session = TreeSession.from_raw(raw_tree, config=config, processors=[recorder], on_info=shown.append)
        session.on_pointer_down(ids["Dogs"])
        session.scheduler.advance(0.3)

        assert len(shown) == 1
        info = shown[0]
        assert info.name == "Dogs"
        assert info.path == ("Animals", "Mammals", "Dogs")
        assert info.synonyms == ["Canines"]
        assert info.verbs == ["bark"]
        assert info.child_count == 2
        assert recorder.of_type(InfoRequestedEvent)[0].node_id == ids["Dogs"]

    def test_double_click_toggles(self, session, recorder, ids):
        session.layout()
        session.on_pointer_down(ids["Mammals"])
        session.on_pointer_down(ids["Mammals"])

        assert session.model.node(ids["Mammals"]).collapsed is True
        toggled = recorder.of_type(NodeToggledEvent)
        assert [(e.node_id, e.collapsed) for e in toggled] == [(ids["Mammals"], True)]
        assert recorder.of_type(LayoutEvent)[-1].reason == "toggle"
        assert ids["Dogs"] not in session.last_layout.node_ids
        assert recorder.of_type(InfoRequestedEvent) == []

    def test_double_click_on_leaf_still_lays_out(self, session, recorder, ids):
        result = session.on_toggle_requested(ids["Fish"])
        assert recorder.of_type(NodeToggledEvent) == []
        assert len(result.nodes) == 12

    def test_press_on_unknown_node(self, session):
        with pytest.raises(UnknownNodeError):
            session.on_pointer_down(999)

    def test_drag_suppresses_pending_click(self, raw_tree, config, recorder, ids, grid):
        shown = []
        session = TreeSession.from_raw(raw_tree, config=config, processors=[recorder], on_info=shown.append)
        session.layout()
        grid(session.model)

        session.on_pointer_down(ids["Hound"])
        _drag(session, ids["Hound"], 0, 1)
        session.scheduler.advance(1.0)

        assert shown == []
        assert recorder.of_type(InfoRequestedEvent) == []


class TestToggleIdentity:
    def test_stable_ids_and_objects_across_toggles(self, session, ids):
        first = session.layout()
        objects = {n.stable_id: session.model.node(n.stable_id) for n in first.nodes}

        session.on_toggle_requested(ids["Mammals"])
        second = session.on_toggle_requested(ids["Mammals"])

        assert second.node_ids == first.node_ids
        assert second.link_ids == first.link_ids
        for stable_id, node in objects.items():
            assert session.model.node(stable_id) is node

    def test_positions_restored_after_round_trip(self, session, ids):
        first = session.layout()
        session.on_toggle_requested(ids["Dogs"])
        second = session.on_toggle_requested(ids["Dogs"])
        assert [(n.x, n.y) for n in second.nodes] == [(n.x, n.y) for n in first.nodes]


class TestDrag:
    def test_commit_marks_dirty_and_rebuilds(self, session, recorder, ids, grid):
        session.layout()
        grid(session.model)
        session.model.node(ids["Birds"]).x = 560.0
        session.model.node(ids["Birds"]).y = 600.0

        outcome = _drag(session, ids["Hound"], 0, 50)

        assert outcome.decision is DropDecision.COMMIT
        assert session.dirty is True
        assert recorder.event_types()[-4:] == [
            "DragStartEvent",
            "DropEvent",
            "ReparentEvent",
            "LayoutEvent",
        ]
        reparent = recorder.of_type(ReparentEvent)[0]
        assert reparent.old_parent_id == ids["Dogs"]
        assert reparent.new_parent_name == "Birds"
        assert recorder.of_type(LayoutEvent)[-1].reason == "rebuild"
        assert session.last_layout.node(ids["Hound"]).parent_id == ids["Birds"]

        exported = session.export()
        birds = next(c for c in exported["Children"] if c["Name"] == "Birds")
        assert [c["Name"] for c in birds["Children"]] == ["Parrots", "Owls", "Hound"]
        assert birds["Children"][-1]["Father"] == "Birds"

    def test_revert_keeps_clean(self, session, recorder, ids, grid):
        session.layout()
        grid(session.model)

        outcome = _drag(session, ids["Hound"], 0, 1)

        assert outcome.decision is DropDecision.REVERT_JITTER
        assert session.dirty is False
        assert recorder.of_type(ReparentEvent) == []
        drop = recorder.of_type(DropEvent)[0]
        assert drop.decision is DropDecision.REVERT_JITTER
        assert drop.travel == pytest.approx(1.0)

    def test_mark_clean(self, session, ids, grid):
        session.layout()
        grid(session.model)
        session.model.node(ids["Birds"]).x = 560.0
        session.model.node(ids["Birds"]).y = 600.0
        _drag(session, ids["Hound"], 0, 50)

        session.mark_clean()
        assert session.dirty is False

    def test_root_drag_rejected_without_event(self, session, recorder):
        session.layout()
        assert session.on_drag_start(0) is False
        assert recorder.of_type(DragStartEvent) == []

    def test_end_without_start(self, session, ids):
        session.layout()
        assert session.on_drag_end(ids["Hound"]) is None
        assert session.on_drag_move(ids["Hound"], 1, 1) is None


class TestDragExclusivity:
    """Layout and toggle requests are refused while a drag is in flight."""

    def test_layout_mid_drag_rejected_and_revert_exact(self, session, recorder, ids, grid):
        session.layout()
        grid(session.model)
        hound = session.model.node(ids["Hound"])
        layouts_before = len(recorder.of_type(LayoutEvent))

        assert session.on_drag_start(ids["Hound"])
        session.on_drag_move(ids["Hound"], 0, 1)
        with pytest.raises(DragInProgressError) as exc_info:
            session.layout()
        assert exc_info.value.node_id == ids["Hound"]
        assert exc_info.value.attempted == "layout"
        assert isinstance(exc_info.value, ReentrantCallError)
        assert len(recorder.of_type(LayoutEvent)) == layouts_before

        outcome = session.on_drag_end(ids["Hound"])
        assert outcome.decision is DropDecision.REVERT_JITTER
        assert (hound.x, hound.y) == (500.0, 600.0)
        assert (hound.x0, hound.y0) == (500.0, 600.0)

        # Released once the gesture ends
        session.layout()
        assert len(recorder.of_type(LayoutEvent)) == layouts_before + 1

    def test_toggle_mid_drag_rejected(self, session, recorder, ids, grid):
        session.layout()
        grid(session.model)

        assert session.on_drag_start(ids["Hound"])
        session.on_drag_move(ids["Hound"], 0, 1)
        with pytest.raises(DragInProgressError):
            session.on_toggle_requested(ids["Dogs"])

        assert session.model.node(ids["Dogs"]).collapsed is False
        assert recorder.of_type(NodeToggledEvent) == []
        assert session.model.node(ids["Hound"]) in session.model.visible_nodes()

        outcome = session.on_drag_end(ids["Hound"])
        assert outcome.decision is DropDecision.REVERT_JITTER
        assert (session.model.node(ids["Hound"]).x, session.model.node(ids["Hound"]).y) == (500.0, 600.0)

    def test_toggle_allowed_after_drag_ends(self, session, ids, grid):
        session.layout()
        grid(session.model)
        _drag(session, ids["Hound"], 0, 1)

        session.on_toggle_requested(ids["Dogs"])
        assert session.model.node(ids["Dogs"]).collapsed is True

    def test_rejected_drag_start_does_not_block_layout(self, session):
        session.layout()
        assert session.on_drag_start(0) is False
        session.layout()


class TestEvents:
    def test_typed_processor_dispatch(self, raw_tree, ids):
        seen = []

        class Toggles(TypedEventProcessor):
            def on_node_toggled(self, event):
                seen.append(event.node_name)

        session = TreeSession.from_raw(raw_tree, processors=[Toggles()])
        session.on_toggle_requested(ids["Birds"])
        assert seen == ["Birds"]

    def test_failing_processor_does_not_break_session(self, raw_tree, ids, caplog):
        class Broken(EventProcessor):
            def on_event(self, event):
                raise RuntimeError("boom")

        session = TreeSession.from_raw(raw_tree, processors=[Broken()])
        result = session.on_toggle_requested(ids["Birds"])
        assert result is not None
        assert "failed on" in caplog.text

    def test_strict_processor_errors_propagate(self, raw_tree):
        class Broken(EventProcessor):
            def on_event(self, event):
                raise RuntimeError("boom")

        session = TreeSession.from_raw(raw_tree, processors=[Broken()], strict_events=True)
        with pytest.raises(RuntimeError, match="boom"):
            session.layout()

    def test_reentrant_call_rejected(self, raw_tree):
        class CallsBack(EventProcessor):
            def __init__(self):
                self.session = None

            def on_event(self, event):
                if self.session is not None:
                    self.session.layout()

        processor = CallsBack()
        session = TreeSession.from_raw(raw_tree, processors=[processor], strict_events=True)
        processor.session = session

        with pytest.raises(ReentrantCallError) as exc_info:
            session.layout()
        assert exc_info.value.active == "layout"
        assert exc_info.value.attempted == "layout"

        # The guard is released afterwards
        processor.session = None
        session.layout()

    def test_close_shuts_down_processors(self, session, recorder):
        session.close()
        assert recorder.shutdown_called is True
