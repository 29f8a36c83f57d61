"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from budgy.config import settings
from budgy.exceptions import TrackerError
from budgy.models.profile import CURRENCIES, Currency, ProfileNameUpdate, SettingsUpdate, UserProfile
from budgy.models.session import AuthResponse, Credentials, SignUpRequest
from budgy.models.summary import (
    CategoryCreate,
    CategoryLists,
    CategoryRename,
    DashboardSummary,
    DetailCategory,
    DetailView,
    InsightsResponse,
)
from budgy.models.transaction import Transaction, TransactionCreate, TransactionType
from budgy.services.tracker import get_tracker
from budgy.services.view_model import AppView, EditingTarget
from budgy.utils.timestamp import parse_month

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("budgy")


@asynccontextmanager
async def lifespan(app: FastAPI):
    tracker = get_tracker()
    await tracker.start()
    yield
    tracker.close()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


@app.exception_handler(TrackerError)
async def tracker_error_handler(request, exc: TrackerError) -> JSONResponse:
    """Surface tracker failures as a plain message the client can show."""
    return JSONResponse(content={"detail": exc.message}, status_code=exc.status_code)


class EditRequest(BaseModel):
    """Request to enter an edit mode."""

    target: EditingTarget
    index: Optional[int] = None
    drafts: Dict[str, str] = {}


class DraftUpdate(BaseModel):
    """One form field's unsaved value."""

    key: str
    value: str


def _month_or_400(month: Optional[str]):
    if month is None:
        return None
    try:
        return parse_month(month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Budgy Finance API", "version": "1.0.0"}


@app.get("/status")
async def status():
    """Current mode, sync/loading flags, view state and theme."""
    tracker = get_tracker()
    result = tracker.last_reconciliation
    return {
        "mode": tracker.mode.value,
        "syncing": tracker.syncing,
        "loading": tracker.loading,
        "theme": tracker.theme.value,
        "view": tracker.view.as_dict(),
        "last_reconciliation": {
            "outcome": result.outcome.value,
            "transferred": result.transferred,
            "error": result.error,
        } if result else None,
    }


# Auth

@app.post("/auth/sign-up", response_model=AuthResponse)
async def sign_up(request: SignUpRequest):
    return await get_tracker().sign_up(request)


@app.post("/auth/sign-in", response_model=AuthResponse)
async def sign_in(credentials: Credentials):
    """Sign in; device-local guest data is transferred to the account on the way in."""
    return await get_tracker().sign_in(credentials)


@app.post("/auth/guest", response_model=AuthResponse)
async def continue_as_guest():
    return await get_tracker().enter_guest_mode()


@app.post("/auth/sign-out", response_model=AuthResponse)
async def sign_out():
    return await get_tracker().sign_out()


# Transactions

@app.get("/transactions", response_model=List[Transaction])
async def list_transactions():
    return get_tracker().transactions


@app.post("/transactions", response_model=Transaction)
async def add_transaction(draft: TransactionCreate):
    return await get_tracker().add_transaction(draft)


@app.delete("/transactions/{transaction_id}")
async def delete_transaction(transaction_id: str):
    await get_tracker().delete_transaction(transaction_id)
    return {"deleted": transaction_id}


# Aggregates

@app.get("/dashboard", response_model=DashboardSummary)
async def dashboard():
    return get_tracker().dashboard()


@app.get("/details", response_model=DetailView)
async def details(
    category: Optional[DetailCategory] = Query(None, description="INCOME, EXPENSE or PENDING"),
    month: Optional[str] = Query(None, description="Month as YYYY-MM, defaults to the selected month"),
):
    """
    Month/category filtered listing.

    Without parameters this reflects the open detail view.
    """
    return get_tracker().details(category, _month_or_400(month))


@app.post("/insights", response_model=InsightsResponse)
async def insights():
    tracker = get_tracker()
    text = await tracker.generate_insights()
    return InsightsResponse(text=text, model_id=tracker.insights.model_id)


# View state

@app.get("/view")
async def get_view():
    return get_tracker().view.as_dict()


@app.post("/view/navigate")
async def navigate(view: AppView = Query(...)):
    return get_tracker().navigate(view).as_dict()


@app.post("/view/details", response_model=DetailView)
async def open_details(category: DetailCategory = Query(...)):
    return get_tracker().open_details(category)


@app.post("/view/details/month", response_model=DetailView)
async def shift_detail_month(step: int = Query(..., description="-1 for previous month, 1 for next")):
    return get_tracker().shift_detail_month(step)


@app.put("/view/details/month", response_model=DetailView)
async def select_detail_month(month: str = Query(..., description="Month as YYYY-MM")):
    return get_tracker().select_detail_month(_month_or_400(month))


@app.post("/view/edit")
async def start_editing(request: EditRequest):
    return get_tracker().start_editing(request.target, request.drafts, request.index).as_dict()


@app.put("/view/edit/draft")
async def update_draft(request: DraftUpdate):
    """Keep a form field's unsaved value while editing."""
    return get_tracker().update_draft(request.key, request.value).as_dict()


@app.delete("/view/edit")
async def stop_editing():
    return get_tracker().stop_editing().as_dict()


@app.post("/view/category-tab")
async def select_category_tab(tab: TransactionType = Query(...)):
    return get_tracker().select_category_tab(tab).as_dict()


@app.post("/view/add-type")
async def set_add_type(type: TransactionType = Query(...)):
    return get_tracker().set_add_type(type).as_dict()


# Profile and preferences

@app.get("/profile", response_model=UserProfile)
async def get_profile():
    return get_tracker().profile


@app.put("/profile/name", response_model=UserProfile)
async def update_profile_name(update: ProfileNameUpdate):
    return await get_tracker().update_profile_name(update.name)


@app.put("/profile/settings", response_model=UserProfile)
async def update_settings(update: SettingsUpdate):
    return await get_tracker().update_settings(update.monthly_budget, update.currency)


@app.get("/currencies", response_model=List[Currency])
async def currencies():
    return CURRENCIES


@app.get("/theme")
async def get_theme():
    return {"theme": get_tracker().theme.value}


@app.post("/theme/toggle")
async def toggle_theme():
    return {"theme": get_tracker().toggle_theme().value}


# Categories

@app.get("/categories", response_model=CategoryLists)
async def categories():
    return get_tracker().category_lists()


@app.post("/categories", response_model=CategoryLists)
async def add_category(request: CategoryCreate):
    tracker = get_tracker()
    tracker.add_category(request.type, request.name)
    return tracker.category_lists()


@app.put("/categories", response_model=CategoryLists)
async def rename_category(request: CategoryRename):
    """Rename a category; transactions of the same type carrying the old name are relabelled."""
    tracker = get_tracker()
    await tracker.rename_category(request.type, request.index, request.name)
    return tracker.category_lists()


@app.delete("/categories/{type}/{index}", response_model=CategoryLists)
async def delete_category(type: TransactionType, index: int):
    tracker = get_tracker()
    tracker.delete_category(type, index)
    return tracker.category_lists()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
