"""Draw modes, the mode controller, the commit pipeline and edit sessions."""

from greenside.draw.controller import EditorMode, ModeController
from greenside.draw.defaults import defaults_for
from greenside.draw.modes import DefaultedMode, SimpleSelectMode, build_modes
from greenside.draw.pipeline import CommitResult, FeatureCommitPipeline
from greenside.draw.scheduler import LoopScheduler, ManualScheduler
from greenside.draw.session import EditSessionManager
from greenside.draw.tool import DrawTool

__all__ = [
    "CommitResult",
    "DefaultedMode",
    "DrawTool",
    "EditSessionManager",
    "EditorMode",
    "FeatureCommitPipeline",
    "LoopScheduler",
    "ManualScheduler",
    "ModeController",
    "SimpleSelectMode",
    "build_modes",
    "defaults_for",
]
