"""Finance tracker controller: owns the in-memory state and routes every action to the authoritative store."""
import logging
import math
from datetime import date, datetime
from typing import Callable, Dict, List, Optional
from budgy.config import settings
from budgy.exceptions import RemoteStoreError, TrackerError
from budgy.models.profile import CURRENCIES, Theme, UserProfile
from budgy.models.session import AuthResponse, Credentials, Session, SessionMode, SignUpRequest
from budgy.models.summary import CategoryLists, DashboardSummary, DetailCategory, DetailView
from budgy.models.transaction import Transaction, TransactionCreate, TransactionType
from budgy.services import aggregator
from budgy.services.auth import friendly_auth_message, validate_sign_up
from budgy.services.categories import CategoryBook, relabel
from budgy.services.insights import InsightsService
from budgy.services.reconciler import ReconciliationResult, Reconciler
from budgy.services.session import DataSource, LocalSource, RemoteSource, resolve_data_source, resolve_mode
from budgy.services import view_model
from budgy.services.view_model import AppView, EditingTarget, ViewState
from budgy.storage.factory import get_remote_store
from budgy.storage.local import LocalStore
from budgy.storage.remote import PROFILES, TRANSACTIONS, RemoteStore
from budgy.utils.identifiers import generate_local_id
from budgy.utils.privacy import obfuscate_email

logger = logging.getLogger(__name__)


def _unhandled(source: DataSource):
    raise TypeError(f"Unhandled data source: {source!r}")


class FinanceTracker:
    """
    Application state for one device.

    The session resolver decides the mode; entering AUTHENTICATED runs the
    reconciler; dashboard and detail figures are recomputed from
    ``transactions`` on every read.
    """

    def __init__(
        self,
        local: LocalStore,
        remote: RemoteStore,
        insights: Optional[InsightsService] = None,
        categories: Optional[CategoryBook] = None,
    ):
        self.local = local
        self.remote = remote
        self.reconciler = Reconciler(local, remote)
        self.insights = insights or InsightsService()
        self.categories = categories or CategoryBook()

        self.session: Optional[Session] = None
        self.guest_mode = False
        self.mode = SessionMode.LOGGED_OUT
        self.transactions: List[Transaction] = []
        self.profile = local.load_profile() or UserProfile()
        self.theme = local.load_theme()
        self.view = ViewState()
        self.loading = False
        self.last_reconciliation: Optional[ReconciliationResult] = None

        self._identity: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def syncing(self) -> bool:
        return self.reconciler.syncing

    async def start(self) -> None:
        """Subscribe to session changes and load data for the current session."""
        if self._unsubscribe is None:
            self._unsubscribe = self.remote.on_session_change(self._on_session_change)
        self.session = self.remote.current_session()
        await self._apply_mode()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_session_change(self, session: Optional[Session]) -> None:
        self.session = session
        await self._apply_mode()

    # Session resolution

    async def _apply_mode(self) -> None:
        """Reload data when the mode (or the signed-in identity) changes."""
        mode = resolve_mode(self.session, self.guest_mode)
        identity = self.session.user_id if self.session else None
        if mode == self.mode and identity == self._identity:
            return

        previous = self.mode
        self.mode = mode
        self._identity = identity
        self.view = view_model.with_mode(self.view, mode)
        logger.info("Session mode %s -> %s", previous.value, mode.value)

        if previous == SessionMode.AUTHENTICATED:
            self.transactions = []

        if mode == SessionMode.ANONYMOUS:
            self.transactions = self.local.load_transactions() or []
            self.profile = self.local.load_profile() or self.profile
        elif mode == SessionMode.AUTHENTICATED:
            await self._load_authenticated()
        else:
            self.transactions = []

    async def _load_authenticated(self) -> None:
        self.loading = True
        try:
            result = await self.reconciler.reconcile(self.session)
            self.last_reconciliation = result
            if result.transactions is not None:
                self.transactions = result.transactions
            await self._sync_profile()
        finally:
            self.loading = False

    async def _sync_profile(self) -> None:
        """Adopt the remote profile, or seed it once from the device-local one."""
        user_id = self.session.user_id
        try:
            rows = await self.remote.query(PROFILES, {"id": user_id})
        except RemoteStoreError as e:
            logger.error("Error fetching profile: %s", e)
            return

        if rows:
            self.profile = UserProfile.from_remote(rows[0])
            self.local.save_profile(self.profile)
            return

        local_profile = self.local.load_profile()
        if local_profile is not None:
            self.profile = local_profile
            try:
                await self.remote.upsert(PROFILES, self._profile_row(local_profile))
            except RemoteStoreError as e:
                logger.error("Error seeding remote profile: %s", e)
        elif self.session.user_metadata.get("full_name"):
            self.profile = self.profile.model_copy(update={"name": self.session.user_metadata["full_name"]})

    def _profile_row(self, profile: UserProfile) -> dict:
        row = profile.to_remote(self.session.user_id)
        row["updated_at"] = datetime.utcnow().isoformat()
        return row

    def _require_source(self) -> DataSource:
        source = resolve_data_source(self.session, self.guest_mode, self.local)
        if source is None:
            raise TrackerError("Sign in or continue as a guest first.", status_code=401)
        return source

    # Auth actions

    async def sign_up(self, request: SignUpRequest) -> AuthResponse:
        error = validate_sign_up(request.password, request.confirm_password)
        if error:
            raise TrackerError(error)
        try:
            session = await self.remote.sign_up(request)
        except RemoteStoreError as e:
            logger.error("Sign-up failed for %s: %s", obfuscate_email(request.email), e)
            raise TrackerError(friendly_auth_message(e), status_code=429 if e.status == 429 else 400)

        if session is None:
            return AuthResponse(
                mode=self.mode,
                email=request.email,
                verification_sent=True,
                message=f"We've sent a confirmation link to {request.email}. Please verify your email to access your account.",
            )
        self.guest_mode = False
        return self._auth_response()

    async def sign_in(self, credentials: Credentials) -> AuthResponse:
        try:
            await self.remote.authenticate(credentials)
        except RemoteStoreError as e:
            logger.error("Sign-in failed for %s: %s", obfuscate_email(credentials.email), e)
            raise TrackerError(friendly_auth_message(e), status_code=429 if e.status == 429 else 401)
        self.guest_mode = False
        return self._auth_response()

    async def enter_guest_mode(self) -> AuthResponse:
        if self.session is not None:
            raise TrackerError("Sign out before continuing as a guest.", status_code=409)
        self.guest_mode = True
        await self._apply_mode()
        return self._auth_response()

    async def sign_out(self) -> AuthResponse:
        """Leave guest mode or end the remote session. Remote data is kept."""
        if self.session is not None:
            await self.remote.sign_out()
        elif self.guest_mode:
            self.guest_mode = False
            await self._apply_mode()
        self.view = view_model.navigate(self.view, AppView.DASHBOARD)
        return self._auth_response()

    def _auth_response(self) -> AuthResponse:
        return AuthResponse(
            mode=self.mode,
            user_id=self.session.user_id if self.session else None,
            email=self.session.email if self.session else None,
        )

    # Transactions

    async def add_transaction(self, draft: TransactionCreate) -> Transaction:
        source = self._require_source()
        data = draft.model_dump()
        if data["date"] is None:
            data["date"] = datetime.now()

        if isinstance(source, LocalSource):
            transaction = Transaction(id=generate_local_id(), **data)
            updated = [transaction] + self.transactions
            source.cache.save_transactions(updated)
            self.transactions = updated
        elif isinstance(source, RemoteSource):
            record = Transaction(user_id=source.session.user_id, **data).model_dump(
                mode="json", exclude={"id"}, exclude_none=True,
            )
            try:
                rows = await self.remote.insert(TRANSACTIONS, [record])
            except RemoteStoreError as e:
                logger.error("Error adding transaction: %s", e)
                raise TrackerError("Failed to save transaction. Please check your connection.", status_code=502)
            if not rows:
                raise TrackerError("Failed to save transaction. Please check your connection.", status_code=502)
            transaction = Transaction(**rows[0])
            self.transactions = [transaction] + self.transactions
        else:
            _unhandled(source)

        self.view = view_model.navigate(self.view, AppView.DASHBOARD)
        return transaction

    async def delete_transaction(self, transaction_id: str) -> None:
        source = self._require_source()
        if not any(tx.id == transaction_id for tx in self.transactions):
            raise TrackerError(f"Transaction {transaction_id} not found", status_code=404)
        remaining = [tx for tx in self.transactions if tx.id != transaction_id]

        if isinstance(source, LocalSource):
            source.cache.save_transactions(remaining)
        elif isinstance(source, RemoteSource):
            try:
                await self.remote.delete(TRANSACTIONS, transaction_id)
            except RemoteStoreError as e:
                logger.error("Error deleting transaction: %s", e)
                raise TrackerError("Failed to delete transaction.", status_code=502)
        else:
            _unhandled(source)
        self.transactions = remaining

    # Profile and preferences

    async def _save_profile(self, profile: UserProfile) -> None:
        source = self._require_source()
        if isinstance(source, LocalSource):
            source.cache.save_profile(profile)
        elif isinstance(source, RemoteSource):
            try:
                await self.remote.upsert(PROFILES, self._profile_row(profile))
            except RemoteStoreError as e:
                logger.error("Error updating profile: %s", e)
                raise TrackerError("Failed to update profile.", status_code=502)
            self.local.save_profile(profile)
        else:
            _unhandled(source)
        self.profile = profile

    async def update_profile_name(self, name: str) -> UserProfile:
        """Rename the profile. A blank name is ignored."""
        name = name.strip()
        if name:
            await self._save_profile(self.profile.model_copy(update={"name": name}))
        self.view = view_model.stop_editing(self.view)
        return self.profile

    async def update_settings(self, monthly_budget: float, currency: str) -> UserProfile:
        if math.isnan(monthly_budget) or monthly_budget <= 0:
            raise TrackerError("Monthly budget must be greater than zero.")
        if currency not in {c.symbol for c in CURRENCIES}:
            raise TrackerError(f"Unsupported currency: {currency}")
        await self._save_profile(
            self.profile.model_copy(update={"monthly_budget": monthly_budget, "currency": currency})
        )
        self.view = view_model.stop_editing(self.view)
        return self.profile

    def toggle_theme(self) -> Theme:
        self.theme = Theme.LIGHT if self.theme == Theme.DARK else Theme.DARK
        self.local.save_theme(self.theme)
        return self.theme

    # Categories

    def category_lists(self) -> CategoryLists:
        return self.categories.snapshot()

    def add_category(self, type: TransactionType, name: str) -> bool:
        return self.categories.add(type, name)

    async def rename_category(self, type: TransactionType, index: int, name: str) -> bool:
        """Rename a category and relabel every transaction of that type that used the old name."""
        try:
            old_name = self.categories.rename(type, index, name)
        except IndexError as e:
            raise TrackerError(str(e), status_code=404)
        if old_name is None:
            return False
        new_name = self.categories.get(type, index)

        relabelled = relabel(self.transactions, type, old_name, new_name)
        try:
            await self._persist_relabel(relabelled, old_name, new_name, type)
        except TrackerError:
            self.categories.rename(type, index, old_name)
            raise
        self.transactions = relabelled
        self.view = view_model.start_editing(self.view, EditingTarget.CATEGORIES)
        return True

    async def _persist_relabel(
        self,
        relabelled: List[Transaction],
        old_name: str,
        new_name: str,
        type: TransactionType,
    ) -> None:
        source = resolve_data_source(self.session, self.guest_mode, self.local)
        if source is None:
            return
        if isinstance(source, LocalSource):
            source.cache.save_transactions(relabelled)
        elif isinstance(source, RemoteSource):
            try:
                await self.remote.update_where(
                    TRANSACTIONS,
                    {"type": type.value, "category": old_name},
                    {"category": new_name},
                )
            except RemoteStoreError as e:
                logger.error("Error relabelling %s category %r: %s", type.value, old_name, e)
                raise TrackerError("Failed to rename category.", status_code=502)
        else:
            _unhandled(source)

    def delete_category(self, type: TransactionType, index: int) -> str:
        """Remove a category name. Existing transactions keep their label."""
        try:
            return self.categories.delete(type, index)
        except IndexError as e:
            raise TrackerError(str(e), status_code=404)

    # Views

    def dashboard(self) -> DashboardSummary:
        financials = aggregator.compute_financials(self.transactions)
        return DashboardSummary(
            name=self.profile.name,
            currency=self.profile.currency,
            monthly_budget=self.profile.monthly_budget,
            percent_spent=aggregator.percent_spent(financials.expense, self.profile.monthly_budget),
            financials=financials,
            breakdown=aggregator.expense_breakdown(self.transactions),
            transactions=self.transactions,
            mode=self.mode,
            syncing=self.syncing,
            loading=self.loading,
        )

    def details(
        self,
        category: Optional[DetailCategory] = None,
        month: Optional[date] = None,
    ) -> DetailView:
        category = category or self.view.detail_category
        if category is None:
            raise TrackerError("Choose INCOME, EXPENSE or PENDING to see details.")
        return aggregator.build_detail_view(self.transactions, category, month or self.view.selected_month)

    def open_details(self, category: DetailCategory, today: Optional[date] = None) -> DetailView:
        self.view = view_model.open_details(self.view, category, today)
        return self.details()

    def shift_detail_month(self, step: int) -> DetailView:
        if self.view.active_view != AppView.DETAILS:
            raise TrackerError("The detail view is not open.", status_code=409)
        self.view = view_model.shift_month_view(self.view, step)
        return self.details()

    def select_detail_month(self, month: date) -> DetailView:
        """Jump the open detail view to any month."""
        if self.view.active_view != AppView.DETAILS:
            raise TrackerError("The detail view is not open.", status_code=409)
        self.view = view_model.select_month(self.view, month)
        return self.details()

    def navigate(self, view: AppView) -> ViewState:
        try:
            self.view = view_model.navigate(self.view, view)
        except ValueError as e:
            raise TrackerError(str(e))
        return self.view

    def start_editing(
        self,
        target: EditingTarget,
        drafts: Optional[Dict[str, str]] = None,
        index: Optional[int] = None,
    ) -> ViewState:
        self.view = view_model.start_editing(self.view, target, drafts, index)
        return self.view

    def update_draft(self, key: str, value: str) -> ViewState:
        if self.view.editing == EditingTarget.NONE:
            raise TrackerError("Nothing is being edited.", status_code=409)
        self.view = view_model.update_draft(self.view, key, value)
        return self.view

    def stop_editing(self) -> ViewState:
        self.view = view_model.stop_editing(self.view)
        return self.view

    def select_category_tab(self, tab: TransactionType) -> ViewState:
        self.view = view_model.select_category_tab(self.view, tab)
        return self.view

    def set_add_type(self, type: TransactionType) -> ViewState:
        """Pick income or expense on the add form; the category list follows."""
        self.view = view_model.set_add_type(self.view, type)
        return self.view

    async def generate_insights(self) -> str:
        return await self.insights.summarize_transactions(self.transactions, self.profile.currency)


_tracker: Optional[FinanceTracker] = None


def get_tracker() -> FinanceTracker:
    """Get the process-wide tracker, building it from settings on first use."""
    global _tracker
    if _tracker is None:
        _tracker = FinanceTracker(
            LocalStore(settings.local_store_path),
            get_remote_store(),
        )
    return _tracker


def set_tracker(tracker: Optional[FinanceTracker]) -> None:
    """Replace the process-wide tracker (used by tests)."""
    global _tracker
    _tracker = tracker
