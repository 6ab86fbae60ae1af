"""Extractor for listing pages that render offers as repeated card blocks.

Bank-bonus listing sites put one offer per card: a heading with the bank
name, a "$300 bonus" figure, a short description and a link. Markup differs
between sites, so a card is any container whose class list carries the card
marker, and the fields are looked up inside that element only.
"""

import re
from typing import List, Optional, Set
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from platform_monitor.domain.models import CanonicalRecord, RecordKind
from platform_monitor.logging import get_logger
from platform_monitor.normalization.service import normalize_name
from platform_monitor.transport.models import RawResponse
from platform_monitor.utils.text import parse_amount, truncate_text

from .base import BaseExtractor, ExtractionPath, ExtractionResult

logger = get_logger(__name__, component="extractor")

AMOUNT_PATTERN = r"\$\s?(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
AMOUNT_RE = re.compile(AMOUNT_PATTERN)

# "<Capitalized Name> Bonus $amount" in plain page text
TEXT_OFFER_RE = re.compile(
    r"([A-Z][\w&'.\-]*(?:\s+[A-Z0-9][\w&'.\-]*){0,5})\s+[Bb]onus:?\s+(?:of\s+)?" + AMOUNT_PATTERN
)

CARD_TAGS = ("div", "article", "li", "section")
HEADING_TAGS = ["h1", "h2", "h3", "h4"]
NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


def _element_text(element: Tag) -> str:
    """Visible text of an element, single-spaced."""
    return " ".join(element.get_text(" ").split())


def _is_title_class(css_class: Optional[str]) -> bool:
    if not css_class:
        return False
    css_class = css_class.lower()
    return css_class == "title" or css_class.endswith("-title")


class CardExtractor(BaseExtractor):
    """Extracts signup-bonus offers from card-style HTML.

    Pass 1 visits every card element (innermost when cards nest). A card
    yields a record only if it has both a title and an amount, the amount is
    at least min_bonus_amount, and no earlier offer had the same normalized
    name.

    Pass 2 removes the accepted cards and scans the rest of the page as plain
    text for "<Name> Bonus $<amount>", recovering offers whose markup did not
    form a usable card, under the same threshold and seen-name rules.
    """

    EXTRACTOR_NAME = "card-html"

    def __init__(
        self,
        source_name: str,
        max_records: int = 0,
        min_bonus_amount: float = 0.0,
        card_marker: str = "card",
    ) -> None:
        super().__init__(source_name, max_records=max_records)
        if min_bonus_amount < 0:
            raise ValueError(f"min_bonus_amount cannot be negative, got: {min_bonus_amount}")
        if not card_marker or not card_marker.strip():
            raise ValueError("card_marker cannot be empty")

        self.min_bonus_amount = min_bonus_amount
        self.card_marker = card_marker.strip().lower()

    def _extract(self, response: RawResponse) -> ExtractionResult:
        soup = BeautifulSoup(response.text or "", "html.parser")
        for element in soup.find_all(NON_CONTENT_TAGS):
            element.decompose()

        seen: Set[str] = set()
        records = self._extract_cards(soup, response.url, seen)
        card_count = len(records)
        records.extend(self._extract_text_offers(soup, response.url, seen))

        logger.debug(
            f"Extracted {card_count} card offers and {len(records) - card_count} text offers",
            extra={
                "event": "extraction.primary",
                "source": self.source_name,
                "card_count": card_count,
                "text_count": len(records) - card_count,
            },
        )
        return ExtractionResult(records=records, path=ExtractionPath.PRIMARY)

    def _is_card(self, tag: Tag) -> bool:
        """Card container: class token equal to the marker or ending in "-<marker>"."""
        if tag.name not in CARD_TAGS:
            return False
        for css_class in tag.get("class") or []:
            css_class = css_class.lower()
            if css_class == self.card_marker or css_class.endswith(f"-{self.card_marker}"):
                return True
        return False

    def _extract_cards(self, soup: BeautifulSoup, page_url: str, seen: Set[str]) -> List[CanonicalRecord]:
        records = []
        accepted = []

        for card in soup.find_all(self._is_card):
            # An outer wrapper's fields would belong to the cards inside it
            if card.find(self._is_card) is not None:
                continue

            name = self._find_title(card)
            amount_match = AMOUNT_RE.search(_element_text(card))
            if not name or not amount_match:
                continue

            amount = parse_amount(amount_match.group(1))
            if not self._accept(name, amount, seen):
                continue

            paragraph = card.find("p")
            tagline = _element_text(paragraph) if paragraph else ""

            record = self._build_record(
                name=name,
                tagline=truncate_text(tagline, max_length=200),
                url=self._find_link(card, page_url),
                kind=RecordKind.SIGNUP_BONUS,
                monetary_amount=amount,
            )
            if record is not None:
                seen.add(normalize_name(record.name))
                records.append(record)
                accepted.append(card)

        for card in accepted:
            card.decompose()

        return records

    def _extract_text_offers(self, soup: BeautifulSoup, page_url: str, seen: Set[str]) -> List[CanonicalRecord]:
        plain_text = _element_text(soup)
        records = []

        for match in TEXT_OFFER_RE.finditer(plain_text):
            name = match.group(1).strip()
            amount = parse_amount(match.group(2))
            if not self._accept(name, amount, seen):
                continue

            record = self._build_record(
                name=name,
                tagline="",
                url=page_url,
                kind=RecordKind.SIGNUP_BONUS,
                monetary_amount=amount,
            )
            if record is not None:
                seen.add(normalize_name(record.name))
                records.append(record)

        return records

    def _accept(self, name: str, amount: Optional[float], seen: Set[str]) -> bool:
        if amount is None or amount < self.min_bonus_amount:
            return False
        return normalize_name(name) not in seen

    @staticmethod
    def _find_title(card: Tag) -> str:
        for element in (card.find(HEADING_TAGS), card.find(class_=_is_title_class)):
            if element is not None:
                title = _element_text(element)
                if title:
                    return title
        return ""

    @staticmethod
    def _find_link(card: Tag, page_url: str) -> str:
        for anchor in card.find_all("a", href=True):
            href = anchor["href"].strip()
            if href and not href.startswith("#") and not href.lower().startswith("javascript:"):
                return urljoin(page_url, href)
        return page_url
