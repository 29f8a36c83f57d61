"""User-managed category lists."""
from typing import Dict, List, Optional
from budgy.models.summary import CategoryLists
from budgy.models.transaction import Transaction, TransactionType

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Housing",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Health",
    "Education",
    "Personal Care",
    "Travel",
    "Other",
]

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investment",
    "Gift",
    "Refund",
    "Other",
]


class CategoryBook:
    """Two ordered lists of distinct category names, one per transaction type."""

    def __init__(
        self,
        expense: Optional[List[str]] = None,
        income: Optional[List[str]] = None,
    ):
        self._lists: Dict[TransactionType, List[str]] = {
            TransactionType.EXPENSE: list(expense if expense is not None else EXPENSE_CATEGORIES),
            TransactionType.INCOME: list(income if income is not None else INCOME_CATEGORIES),
        }

    def categories(self, type: TransactionType) -> List[str]:
        return list(self._lists[type])

    def snapshot(self) -> CategoryLists:
        return CategoryLists(
            expense=self.categories(TransactionType.EXPENSE),
            income=self.categories(TransactionType.INCOME),
        )

    def add(self, type: TransactionType, name: str) -> bool:
        """Append a category. Blank and duplicate names are ignored (returns False)."""
        name = name.strip()
        names = self._lists[type]
        if not name or name in names:
            return False
        names.append(name)
        return True

    def get(self, type: TransactionType, index: int) -> str:
        names = self._lists[type]
        if index < 0 or index >= len(names):
            raise IndexError(f"No {type.value.lower()} category at index {index}")
        return names[index]

    def rename(self, type: TransactionType, index: int, new_name: str) -> Optional[str]:
        """
        Rename the category at ``index``.

        Returns:
            The old name, or None when the new name is blank or already used
            by another category of the same type
        """
        old_name = self.get(type, index)
        new_name = new_name.strip()
        names = self._lists[type]
        if not new_name or (new_name != old_name and new_name in names):
            return None
        names[index] = new_name
        return old_name

    def delete(self, type: TransactionType, index: int) -> str:
        """Remove the category at ``index``. Transactions keep the label."""
        name = self.get(type, index)
        del self._lists[type][index]
        return name


def relabel(
    transactions: List[Transaction],
    type: TransactionType,
    old_name: str,
    new_name: str,
) -> List[Transaction]:
    """Copy of ``transactions`` with ``old_name`` replaced by ``new_name`` for the given type only."""
    return [
        tx.model_copy(update={"category": new_name})
        if tx.type == type and tx.category == old_name
        else tx
        for tx in transactions
    ]
