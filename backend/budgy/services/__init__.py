from .session import LocalSource, RemoteSource, DataSource, resolve_mode, resolve_data_source
from .reconciler import Reconciler, ReconciliationOutcome, ReconciliationResult
from .categories import CategoryBook, relabel
from .prompts import PromptBuilder
from .insights import InsightsService
from .view_model import AppView, EditingTarget, ViewState
from .tracker import FinanceTracker, get_tracker, set_tracker

__all__ = [
    "LocalSource",
    "RemoteSource",
    "DataSource",
    "resolve_mode",
    "resolve_data_source",
    "Reconciler",
    "ReconciliationOutcome",
    "ReconciliationResult",
    "CategoryBook",
    "relabel",
    "PromptBuilder",
    "InsightsService",
    "AppView",
    "EditingTarget",
    "ViewState",
    "FinanceTracker",
    "get_tracker",
    "set_tracker",
]
