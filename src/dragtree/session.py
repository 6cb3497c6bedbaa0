"""TreeSession: the surface a rendering collaborator talks to.

The session wires the model, collapse controller, layout engine, drag
engine and click disambiguator together. Every entry point returns the
data the renderer needs (positions, visibility changes, the dirty flag)
and never touches a presentation layer.

All work happens synchronously inside the caller's event callback. A
mutating call made while another one is running (for example from an
event processor) raises ReentrantCallError instead of interleaving. Layout
and toggle requests are also refused between drag start and drag end.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from dragtree.collapse import CollapseController
from dragtree.config import EngineConfig
from dragtree.events import (
    DragStartEvent,
    DropEvent,
    EventDispatcher,
    EventProcessor,
    InfoRequestedEvent,
    LayoutEvent,
    NodeToggledEvent,
    ReparentEvent,
)
from dragtree.exceptions import DragInProgressError, ReentrantCallError
from dragtree.interaction import (
    ClickDisambiguator,
    DragEcho,
    DragReparentEngine,
    DropOutcome,
    ManualScheduler,
    Scheduler,
)
from dragtree.layout import LayoutEngine, LayoutResult
from dragtree.model import ChildrenAccessor, HierarchyModel, HierarchySchema, DEFAULT_SCHEMA

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeInfo:
    """What a show-info request displays about a node."""

    stable_id: int
    name: str
    path: tuple[str, ...]
    synonyms: list[str]
    verbs: list[str]
    child_count: int
    collapsed: bool
    payload: dict[str, Any] = field(default_factory=dict)


class TreeSession:
    """One editable tree and the gestures applied to it.

    Args:
        model: The hierarchy to edit
        config: Engine options
        scheduler: Timer capability for click disambiguation (defaults to
            a ManualScheduler the host advances; an asyncio loop also works)
        processors: Event processors notified of every change
        strict_events: Re-raise processor failures instead of logging them
        on_info: Called with NodeInfo when a single click resolves

    Example:
        >>> session = TreeSession.from_raw(raw_hierarchy)
        >>> frame = session.layout()
        >>> session.on_drag_start(3)
        True
    """

    def __init__(
        self,
        model: HierarchyModel,
        config: EngineConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        processors: list[EventProcessor] | None = None,
        strict_events: bool = False,
        on_info: Callable[[NodeInfo], object] | None = None,
    ) -> None:
        self.model = model
        self.config = config or EngineConfig()
        self.session_id = uuid.uuid4().hex[:16]
        self.scheduler = scheduler or ManualScheduler()
        self.collapse = CollapseController(model)
        self.layout_engine = LayoutEngine(self.config)
        self.drag = DragReparentEngine(model, self.config, self.collapse)
        self.clicks: ClickDisambiguator[int] = ClickDisambiguator(
            self.scheduler,
            on_single_click=self.on_node_clicked,
            on_double_click=self.on_toggle_requested,
            delay_ms=self.config.click_delay_ms,
        )
        self.dispatcher = EventDispatcher(processors, strict=strict_events, session_id=self.session_id)
        self._on_info = on_info
        self._dirty = False
        self._last_layout: LayoutResult | None = None
        self._active: str | None = None
        self._drag_moved = False

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any],
        children: ChildrenAccessor | None = None,
        *,
        schema: HierarchySchema = DEFAULT_SCHEMA,
        **kwargs: Any,
    ) -> TreeSession:
        """Build the model from a nested hierarchy and open a session on it."""
        return cls(HierarchyModel.build(raw, children, schema=schema), **kwargs)

    # -- state -------------------------------------------------------------------

    @property
    def dirty(self) -> bool:
        """True once a move has changed the tree since the last save."""
        return self._dirty

    def mark_clean(self) -> None:
        """Call after the save collaborator has written the export."""
        self._dirty = False

    @property
    def last_layout(self) -> LayoutResult | None:
        return self._last_layout

    def _require_no_drag(self, name: str) -> None:
        # A layout pass would overwrite the dragged node and its x0/y0
        active = self.drag.active_node_id
        if active is not None:
            raise DragInProgressError(active, name)

    @contextmanager
    def _atomic(self, name: str) -> Iterator[None]:
        if self._active is not None:
            raise ReentrantCallError(self._active, name)
        self._active = name
        try:
            yield
        finally:
            self._active = None

    # -- layout ------------------------------------------------------------------

    def layout(self, reason: str = "refresh") -> LayoutResult:
        """Lay out the visible tree from the root."""
        with self._atomic("layout"):
            self._require_no_drag("layout")
            return self._layout(reason)

    def _layout(self, reason: str) -> LayoutResult:
        result = self.layout_engine.layout(self.model)
        self._last_layout = result
        self.dispatcher.notify(
            LayoutEvent, reason=reason, node_count=len(result.nodes), link_count=len(result.links)
        )
        return result

    # -- clicks ------------------------------------------------------------------

    def on_pointer_down(self, node_id: int) -> None:
        """Raw press on a node; resolves later to a click, a double click or a drag."""
        self.model.node(node_id)
        self.clicks.pointer_down(node_id)

    def on_node_clicked(self, node_id: int) -> NodeInfo:
        """Single click: describe the node for the info collaborator."""
        node = self.model.node(node_id)
        info = NodeInfo(
            stable_id=node.stable_id,
            name=node.name,
            path=self.model.path_of(node),
            synonyms=node.synonyms,
            verbs=node.verbs,
            child_count=len(node.child_ids),
            collapsed=node.collapsed,
            payload=copy.deepcopy(node.payload),
        )
        self.dispatcher.notify(InfoRequestedEvent, node_id=node.stable_id, node_name=node.name)
        if self._on_info is not None:
            self._on_info(info)
        return info

    def on_toggle_requested(self, node_id: int) -> LayoutResult:
        """Double click: collapse or expand the node and lay out again."""
        with self._atomic("toggle"):
            self._require_no_drag("toggle")
            node = self.model.node(node_id)
            if self.collapse.toggle(node):
                self.dispatcher.notify(
                    NodeToggledEvent,
                    node_id=node.stable_id,
                    node_name=node.name,
                    collapsed=node.collapsed,
                )
            return self._layout("toggle")

    # -- drag --------------------------------------------------------------------

    def on_drag_start(self, node_id: int) -> bool:
        """Begin a drag. Returns False for the root or an invisible node."""
        with self._atomic("drag_start"):
            node = self.model.node(node_id)
            accepted = self.drag.start(node)
            self._drag_moved = False
            if accepted:
                self.dispatcher.notify(DragStartEvent, node_id=node.stable_id, node_name=node.name)
            return accepted

    def on_drag_move(self, node_id: int, dx: float, dy: float) -> DragEcho | None:
        """Screen-space delta for the dragged node; echoes its new position."""
        with self._atomic("drag_move"):
            echo = self.drag.move(node_id, dx, dy)
            if echo is not None and not self._drag_moved:
                # The press became a drag: it must not also fire as a click
                self._drag_moved = True
                self.clicks.drag_started(node_id)
            return echo

    def on_drag_end(self, node_id: int) -> DropOutcome | None:
        """Release: commit the move (full rebuild) or revert the gesture."""
        with self._atomic("drag_end"):
            outcome = self.drag.end(node_id)
            if outcome is None:
                return None
            self.clicks.drag_ended()
            self._drag_moved = False

            node = self.model.node(node_id)
            self.dispatcher.notify(
                DropEvent,
                node_id=node.stable_id,
                node_name=node.name,
                decision=outcome.decision,
                target_id=outcome.target_id,
                distance=outcome.distance,
                travel=outcome.travel,
            )
            if outcome.decision.committed:
                self._dirty = True
                result = self.drag.last_result
                if result is not None:
                    parent = self.model.node(result.new_parent_id)
                    self.dispatcher.notify(
                        ReparentEvent,
                        node_id=result.node_id,
                        node_name=node.name,
                        old_parent_id=result.old_parent_id,
                        new_parent_id=result.new_parent_id,
                        new_parent_name=parent.name,
                        updated_count=len(result.updated_ids),
                    )
                self._layout("rebuild")
            return outcome

    # -- export ------------------------------------------------------------------

    def export(self) -> dict[str, Any]:
        """The current tree in the input format, for the save collaborator."""
        return self.model.to_plain_tree()

    def close(self) -> None:
        """Shut down event processors."""
        self.dispatcher.shutdown()
