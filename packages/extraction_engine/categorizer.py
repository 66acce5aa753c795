"""Keyword-table category classifier.

The table is an ordered tuple of ``(category, keywords)`` pairs. The first
category with a keyword contained in the lower-cased description wins, so
the order below is a priority: ``"Swiggy Order"`` is food, not shopping.
"""

from typing import Optional, Sequence, Tuple

from .models import Category

CategoryTable = Sequence[Tuple[Category, Tuple[str, ...]]]

DEFAULT_CATEGORY_TABLE: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (
        Category.FOOD,
        (
            "starbucks",
            "coffee",
            "restaurant",
            "cafe",
            "food",
            "pizza",
            "burger",
            "dining",
            "zomato",
            "swiggy",
            "domino",
            "mcdonald",
        ),
    ),
    (
        Category.TRANSPORT,
        (
            "uber",
            "taxi",
            "ola",
            "travel",
            "bus",
            "train",
            "flight",
            "airport",
            "cab",
            "ride",
            "metro",
            "fuel",
            "petrol",
            "diesel",
            "transport",
            "singapore airlines",
        ),
    ),
    (
        Category.SHOPPING,
        (
            "amazon",
            "flipkart",
            "mall",
            "retail",
            "shop",
            "store",
            "order",
            "myntra",
            "purchase",
            "reliance",
            "big bazaar",
        ),
    ),
    (
        Category.ENTERTAINMENT,
        (
            "movie",
            "cinema",
            "netflix",
            "spotify",
            "game",
            "entertainment",
            "prime",
            "hotstar",
            "youtube",
            "bookmyshow",
        ),
    ),
    (
        Category.HEALTH,
        ("doctor", "hospital", "pharmacy", "medical", "health", "gym", "fitness", "clinic"),
    ),
    (
        Category.UTILITIES,
        (
            "electricity",
            "electric",
            "water",
            "gas",
            "phone",
            "internet",
            "bill",
            "utility",
            "mobile",
            "broadband",
            "recharge",
            "bescom",
            "airtel",
            "bsnl",
        ),
    ),
    (
        Category.TRANSFER,
        ("transfer", "upi", "neft", "imps", "rtgs", "paytm", "phonepe", "gpay", "bajaj"),
    ),
)


class CategoryClassifier:
    def __init__(
        self,
        table: CategoryTable = DEFAULT_CATEGORY_TABLE,
        default: Optional[Category] = Category.OTHER,
    ):
        self.table = tuple(
            (category, tuple(keyword.lower() for keyword in keywords))
            for category, keywords in table
        )
        self.default = default

    def classify(self, description: Optional[str]) -> Optional[Category]:
        """Return the first category whose keyword appears in the description.

        Falls back to ``self.default`` (``Category.OTHER`` unless the
        classifier was built with ``default=None``).
        """
        if not description:
            return self.default

        text_lower = description.lower()
        for category, keywords in self.table:
            if any(keyword in text_lower for keyword in keywords):
                return category

        return self.default
