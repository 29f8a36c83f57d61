"""Explicit view state with pure transition functions."""
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Dict, Optional
from budgy.models.session import SessionMode
from budgy.models.summary import DetailCategory
from budgy.models.transaction import TransactionType
from budgy.utils.timestamp import month_start, shift_month


class AppView(str, Enum):
    DASHBOARD = "DASHBOARD"
    ADD_TRANSACTION = "ADD_TRANSACTION"
    PROFILE = "PROFILE"
    DETAILS = "DETAILS"


class EditingTarget(str, Enum):
    NONE = "NONE"
    PROFILE_NAME = "PROFILE_NAME"
    SETTINGS = "SETTINGS"
    CATEGORIES = "CATEGORIES"
    CATEGORY_ITEM = "CATEGORY_ITEM"


@dataclass(frozen=True)
class ViewState:
    """Everything the screen needs besides data: where the user is and what they are editing."""

    mode: SessionMode = SessionMode.LOGGED_OUT
    active_view: AppView = AppView.DASHBOARD
    editing: EditingTarget = EditingTarget.NONE
    editing_index: Optional[int] = None
    drafts: Dict[str, str] = field(default_factory=dict)
    detail_category: Optional[DetailCategory] = None
    selected_month: date = field(default_factory=lambda: month_start(date.today()))
    category_tab: TransactionType = TransactionType.EXPENSE
    add_type: TransactionType = TransactionType.EXPENSE

    def as_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "active_view": self.active_view.value,
            "editing": self.editing.value,
            "editing_index": self.editing_index,
            "drafts": dict(self.drafts),
            "detail_category": self.detail_category.value if self.detail_category else None,
            "selected_month": self.selected_month.isoformat(),
            "category_tab": self.category_tab.value,
            "add_type": self.add_type.value,
        }


def with_mode(state: ViewState, mode: SessionMode) -> ViewState:
    """A mode change always lands on a clean dashboard."""
    if state.mode == mode:
        return state
    return ViewState(mode=mode, selected_month=state.selected_month)


def navigate(state: ViewState, view: AppView) -> ViewState:
    """Switch screens, dropping any edit in progress. Use ``open_details`` for DETAILS."""
    if view == AppView.DETAILS:
        raise ValueError("Open the detail view with open_details()")
    return replace(
        state,
        active_view=view,
        editing=EditingTarget.NONE,
        editing_index=None,
        drafts={},
        detail_category=None,
    )


def open_details(state: ViewState, category: DetailCategory, today: Optional[date] = None) -> ViewState:
    """Show a bucket's detail list, starting from the current month."""
    return replace(
        state,
        active_view=AppView.DETAILS,
        editing=EditingTarget.NONE,
        editing_index=None,
        drafts={},
        detail_category=category,
        selected_month=month_start(today or date.today()),
    )


def shift_month_view(state: ViewState, step: int) -> ViewState:
    return replace(state, selected_month=shift_month(state.selected_month, step))


def select_month(state: ViewState, month: date) -> ViewState:
    return replace(state, selected_month=month_start(month))


def start_editing(
    state: ViewState,
    target: EditingTarget,
    drafts: Optional[Dict[str, str]] = None,
    index: Optional[int] = None,
) -> ViewState:
    return replace(state, editing=target, editing_index=index, drafts=dict(drafts or {}))


def update_draft(state: ViewState, key: str, value: str) -> ViewState:
    drafts = dict(state.drafts)
    drafts[key] = value
    return replace(state, drafts=drafts)


def stop_editing(state: ViewState) -> ViewState:
    return replace(state, editing=EditingTarget.NONE, editing_index=None, drafts={})


def select_category_tab(state: ViewState, tab: TransactionType) -> ViewState:
    """Switching tabs abandons a single-item rename but stays in category management."""
    editing = EditingTarget.CATEGORIES if state.editing == EditingTarget.CATEGORY_ITEM else state.editing
    return replace(state, category_tab=tab, editing=editing, editing_index=None)


def set_add_type(state: ViewState, type: TransactionType) -> ViewState:
    return replace(state, add_type=type)
