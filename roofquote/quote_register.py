"""
In-process quote register
Holds created quotes and hands out year-scoped quote numbers
"""

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from roofquote.models.roof import Quote
from roofquote.quote_engine import generate_quote_number


class QuoteNotFoundError(KeyError):
    """Raised when a quote number is not in the register"""


class QuoteRegister:
    """
    Stores quotes for the lifetime of one process

    Numbering is only unique within this register. A shared database
    needs its own unique constraint on quote numbers.
    """

    def __init__(self):
        self._quotes: Dict[str, Quote] = {}
        self._year_counts: Dict[int, int] = {}
        self._lock = threading.Lock()

    def count_for_year(self, year: int) -> int:
        with self._lock:
            return self._year_counts.get(year, 0)

    def reserve_number(self, year: Optional[int] = None) -> str:
        """Claim the next quote number for the year"""
        year = year or datetime.now().year
        with self._lock:
            sequence = self._year_counts.get(year, 0) + 1
            self._year_counts[year] = sequence
        return generate_quote_number(year, sequence)

    def create(self, build: Callable[[str], Quote], year: Optional[int] = None) -> Quote:
        """
        Number, build and store a quote in one step
        The year's sequence only advances when build succeeds, so a failed
        request never leaves a gap in the numbering
        """
        year = year or datetime.now().year
        with self._lock:
            sequence = self._year_counts.get(year, 0) + 1
            quote = build(generate_quote_number(year, sequence))
            if quote.quote_number in self._quotes:
                raise ValueError(f"Duplicate quote number: {quote.quote_number}")
            self._quotes[quote.quote_number] = quote
            self._year_counts[year] = sequence
        return quote

    def add(self, quote: Quote) -> Quote:
        with self._lock:
            if quote.quote_number in self._quotes:
                raise ValueError(f"Duplicate quote number: {quote.quote_number}")
            self._quotes[quote.quote_number] = quote
        return quote

    def get(self, quote_number: str) -> Quote:
        with self._lock:
            try:
                return self._quotes[quote_number]
            except KeyError:
                raise QuoteNotFoundError(quote_number) from None

    def all(self) -> List[Quote]:
        with self._lock:
            return sorted(self._quotes.values(), key=lambda quote: quote.created_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)
