"""dragtree - layout and editing state for draggable hierarchy views."""

from dragtree.collapse import CollapseController, CollapseState
from dragtree.config import EngineConfig, load_config
from dragtree.events import (
    BaseEvent,
    DragStartEvent,
    DropEvent,
    Event,
    EventDispatcher,
    EventProcessor,
    InfoRequestedEvent,
    LayoutEvent,
    NodeToggledEvent,
    ReparentEvent,
    TypedEventProcessor,
)
from dragtree.exceptions import (
    ConfigError,
    DragInProgressError,
    DragtreeError,
    DuplicateSiblingNameError,
    HierarchyBuildError,
    InvariantViolation,
    MalformedHierarchyError,
    ReentrantCallError,
    ReparentError,
    RootReparentError,
    SelfOrAncestorTargetError,
    SiblingNameClashError,
    UnknownNodeError,
)
from dragtree.interaction import (
    ChangeSet,
    ClickDisambiguator,
    ClickState,
    DragEcho,
    DragReparentEngine,
    DropDecision,
    DropOutcome,
    ManualScheduler,
    Scheduler,
)
from dragtree.io import dump_hierarchy, load_hierarchy
from dragtree.layout import (
    ExtentBox,
    LayoutEngine,
    LayoutResult,
    NodeKind,
    Point,
    PositionedLink,
    PositionedNode,
)
from dragtree.model import (
    DEFAULT_SCHEMA,
    HierarchyModel,
    HierarchySchema,
    ReparentResult,
    TreeNode,
)
from dragtree.session import NodeInfo, TreeSession

__all__ = [
    # Model
    "DEFAULT_SCHEMA",
    "HierarchyModel",
    "HierarchySchema",
    "ReparentResult",
    "TreeNode",
    # Layout
    "ExtentBox",
    "LayoutEngine",
    "LayoutResult",
    "NodeKind",
    "Point",
    "PositionedLink",
    "PositionedNode",
    # Collapse
    "CollapseController",
    "CollapseState",
    # Interaction
    "ChangeSet",
    "ClickDisambiguator",
    "ClickState",
    "DragEcho",
    "DragReparentEngine",
    "DropDecision",
    "DropOutcome",
    "ManualScheduler",
    "Scheduler",
    # Session
    "NodeInfo",
    "TreeSession",
    # Config and IO
    "EngineConfig",
    "dump_hierarchy",
    "load_config",
    "load_hierarchy",
    # Events
    "BaseEvent",
    "DragStartEvent",
    "DropEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "InfoRequestedEvent",
    "LayoutEvent",
    "NodeToggledEvent",
    "ReparentEvent",
    "TypedEventProcessor",
    # Errors
    "ConfigError",
    "DragInProgressError",
    "DragtreeError",
    "DuplicateSiblingNameError",
    "HierarchyBuildError",
    "InvariantViolation",
    "MalformedHierarchyError",
    "ReentrantCallError",
    "ReparentError",
    "RootReparentError",
    "SelfOrAncestorTargetError",
    "SiblingNameClashError",
    "UnknownNodeError",
]
