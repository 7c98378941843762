# app/utils/categorization.py
from typing import List, NamedTuple, Sequence, Tuple

DEFAULT_CATEGORY = "other"

KeywordTable = Sequence[Tuple[str, Sequence[str]]]

# Order matters: the first category with a matching keyword wins in classify().
# "gas" appears under both transport and utilities; transport is declared first.
DEFAULT_CATEGORY_KEYWORDS: KeywordTable = (
    ("housing", ("rent", "mortgage", "property", "apartment", "house", "lease", "landlord")),
    ("transport", ("uber", "lyft", "taxi", "bus", "train", "metro", "gas", "fuel", "parking", "car", "vehicle")),
    ("food", ("restaurant", "cafe", "coffee", "lunch", "dinner", "breakfast", "food", "grocery",
              "supermarket", "starbucks", "mcdonalds")),
    ("utilities", ("electric", "water", "gas", "internet", "phone", "cable", "utility")),
    ("healthcare", ("doctor", "hospital", "pharmacy", "medicine", "medical", "health", "dental", "insurance")),
    ("entertainment", ("movie", "cinema", "netflix", "spotify", "game", "concert", "show", "ticket",
                       "entertainment")),
    ("shopping", ("amazon", "shop", "store", "retail", "clothing", "clothes", "shoes", "mall")),
    ("education", ("school", "university", "course", "book", "tuition", "education", "learning")),
    ("subscriptions", ("subscription", "monthly", "annual", "membership", "premium")),
)


class CategorySuggestion(NamedTuple):
    category: str
    confidence: float


class KeywordCategorizer:
    """Maps free-text descriptions to expense categories by keyword substrings."""

    def __init__(self, keywords: KeywordTable = DEFAULT_CATEGORY_KEYWORDS, default: str = DEFAULT_CATEGORY):
        self._keywords: List[Tuple[str, Tuple[str, ...]]] = [
            (category, tuple(word.lower() for word in words)) for category, words in keywords
        ]
        self.default = default

    @property
    def categories(self) -> List[str]:
        return [category for category, _ in self._keywords]

    def classify(self, description: str) -> str:
        text = (description or "").lower()
        for category, words in self._keywords:
            if any(word in text for word in words):
                return category
        return self.default

    def suggest(self, description: str) -> CategorySuggestion:
        """
        Score every category by the number of its keywords found in the text.

        The best score wins (earliest category on ties) and confidence is
        score / 3 capped at 1. No match gives (default, 0).
        """
        text = (description or "").lower()
        best_category, best_score = self.default, 0
        for category, words in self._keywords:
            score = sum(1 for word in words if word in text)
            if score > best_score:
                best_category, best_score = category, score

        if best_score == 0:
            return CategorySuggestion(self.default, 0.0)
        return CategorySuggestion(best_category, min(best_score / 3, 1.0))


categorizer = KeywordCategorizer()


def categorize_expense(description: str) -> str:
    return categorizer.classify(description)


def suggest_category(description: str) -> CategorySuggestion:
    return categorizer.suggest(description)
