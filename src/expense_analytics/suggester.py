"""Category suggestion from historical keyword profiles.

The suggester learns which words belong to which category from previously
categorized transactions: every lower-cased vendor name and every title
word becomes a keyword of the transaction's category. Repeated keywords are
kept: a vendor seen often weighs more.

A new receipt is scored per category as the share of that category's
keywords found in its text or vendor string.
"""

from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

import structlog

from .config import SuggesterConfig
from .exceptions import InvalidTransactionError
from .models import CategorySuggestion, ExpenseCategory, Transaction

logger = structlog.get_logger()


def build_keyword_index(
    transactions: Iterable[Transaction],
) -> dict[ExpenseCategory, list[str]]:
    """Build the keyword profile of every category seen in history.

    Categories are ordered by label. Categories whose transactions carry no
    vendor or title contribute no profile.
    """
    index: dict[ExpenseCategory, list[str]] = defaultdict(list)
    for txn in transactions:
        if txn.vendor:
            index[txn.category].append(txn.vendor.lower())
        if txn.title:
            index[txn.category].extend(txn.title.lower().split())

    return {cat: index[cat] for cat in sorted(index, key=lambda c: c.value) if index[cat]}


def _validate_amount(amount: Union[Decimal, float, int, str, None]) -> Optional[Decimal]:
    if amount is None:
        return None
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise InvalidTransactionError(
            "Amount is not a number",
            field="amount",
            value=str(amount),
        ) from None
    if not value.is_finite() or value < 0:
        raise InvalidTransactionError(
            "Amount must be a finite, non-negative number",
            field="amount",
            value=str(amount),
        )
    return value


class CategorySuggester:
    """Suggest a category for free text using a precomputed keyword index.

    The index is built once and can be queried any number of times:

        suggester = CategorySuggester.from_transactions(history)
        suggestion = suggester.suggest("starbucks coffee", vendor="Starbucks")
    """

    def __init__(
        self,
        keyword_index: dict[ExpenseCategory, list[str]],
        config: Optional[SuggesterConfig] = None,
    ):
        self.keyword_index = keyword_index
        self.config = config or SuggesterConfig()

    @classmethod
    def from_transactions(
        cls,
        transactions: Iterable[Transaction],
        config: Optional[SuggesterConfig] = None,
    ) -> "CategorySuggester":
        return cls(build_keyword_index(transactions), config)

    def score(self, text: str, vendor: Optional[str] = None) -> dict[ExpenseCategory, float]:
        """Share of each category's keywords found in the text or vendor."""
        text_lower = (text or "").lower()
        vendor_lower = (vendor or "").lower()

        scores: dict[ExpenseCategory, float] = {}
        for category, keywords in self.keyword_index.items():
            hits = sum(
                1 for keyword in keywords
                if keyword in text_lower or keyword in vendor_lower
            )
            scores[category] = hits / len(keywords)
        return scores

    def suggest(
        self,
        text: str,
        vendor: Optional[str] = None,
        amount: Union[Decimal, float, int, str, None] = None,
    ) -> CategorySuggestion:
        """Pick the best-scoring category for a new receipt.

        Args:
            text: Raw receipt text (title, OCR output, description)
            vendor: Vendor name, if known
            amount: Receipt amount; validated but not used for scoring

        Returns:
            The winning category, or the fallback category when nothing
            scores above zero, with confidence capped below certainty

        Raises:
            InvalidTransactionError: If amount is negative or not a finite number
        """
        _validate_amount(amount)

        best_category = self.config.fallback_category
        best_score = 0.0
        for category, category_score in self.score(text, vendor).items():
            if category_score > best_score:
                best_category, best_score = category, category_score

        suggestion = CategorySuggestion(
            category=best_category,
            confidence=min(self.config.max_confidence, best_score),
        )
        logger.info(
            "category_suggested",
            category=suggestion.category.value,
            confidence=round(suggestion.confidence, 4),
            profiles=len(self.keyword_index),
        )
        return suggestion
