# eventhub/services/pricing_rules.py
"""
Display price derivation for booking targets.

Many listings carry no authoritative price, so the composite booking view
derives one from whatever the listing does carry. The policy is an ordered
tuple of ``PriceRule`` objects; the first rule that yields a value wins.
Every rule is a pure function of the target.
"""

from dataclasses import dataclass
import logging
import math
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import DEFAULT_PLACEHOLDER_CATEGORY
from .service_target import ServiceTarget

logger = logging.getLogger(__name__)

Price = Union[int, float]

FALLBACK_PRICE = 15000

# (keywords, [(title, price), ...]); first keyword hit wins
CATEGORY_PRICING_TABLES: Tuple[Tuple[Tuple[str, ...], Tuple[Tuple[str, int], ...]], ...] = (
    (
        ("catering", "food"),
        (("Veg Price Per Plate", 100), ("Non-Veg Price Per Plate", 300), ("Decor Setup", 400)),
    ),
    (
        ("photographer", "photography", "photo"),
        (("Drone Coverage", 2000), ("Pre Wedding Shoot", 5000), ("Portrait Shoot", 400)),
    ),
    (
        ("venue", "hall", "banquet", "wedding"),
        (("Venue Rental", 50000), ("Decor Setup", 15000), ("Sound System", 5000)),
    ),
    (
        ("makeup", "beauty", "bridal"),
        (("Bridal Makeup", 8000), ("Pre Wedding Makeup", 3000), ("Family Makeup", 1500)),
    ),
    (
        ("music", "dj", "sound"),
        (("DJ Service", 15000), ("Sound System", 8000), ("Live Music", 25000)),
    ),
    (
        ("decor", "decoration", "floral"),
        (("Stage Decor", 20000), ("Floral Arrangement", 12000), ("Lighting Setup", 8000)),
    ),
)

DEFAULT_CATEGORY_PRICING: Tuple[Tuple[str, int], ...] = (
    ("Basic Service", 5000),
    ("Premium Service", 15000),
    ("Custom Service", 25000),
)

# Title/name keyword defaults, checked in order
TITLE_KEYWORD_PRICES: Tuple[Tuple[str, int], ...] = (
    ("venue", 50000),
    ("photographer", 15000),
    ("catering", 5000),
)

RATING_LABELS: Tuple[Tuple[float, str], ...] = (
    (4.5, "superb"),
    (4.0, "excellent"),
    (3.5, "very good"),
    (3.0, "good"),
    (2.5, "average"),
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not (isinstance(value, float) and math.isnan(value))
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _parse_leading_int(value: Any) -> Optional[int]:
    """Integer prefix of ``value`` ("1500 INR" -> 1500, "12.9" -> 12); None if absent."""
    if _is_number(value):
        return int(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def generate_category_pricing(
    category_name: Optional[str], multiplier: float = 1.0
) -> List[Dict[str, Any]]:
    """
    Three-tier pricing table for a category, matched by keyword.

    Matching is a case-insensitive substring test on the trimmed name;
    unknown categories get a generic table.
    """
    normalized = (category_name or "").strip().lower()
    table = DEFAULT_CATEGORY_PRICING
    for keywords, candidate in CATEGORY_PRICING_TABLES:
        if any(keyword in normalized for keyword in keywords):
            table = candidate
            break

    if multiplier == 1:
        return [{"title": title, "price": price} for title, price in table]
    return [
        {"title": title, "price": _round_half_up(price * multiplier)} for title, price in table
    ]


def rating_label(rating: Optional[float]) -> str:
    """Human label for an average rating."""
    value = rating if _is_number(rating) else 0
    for threshold, label in RATING_LABELS:
        if value >= threshold:
            return label
    return "below average"


@dataclass(frozen=True)
class PriceRule:
    """One step of the derivation chain; ``evaluate`` returns None to pass."""

    name: str
    evaluate: Callable[[ServiceTarget], Optional[Price]]


def _direct_price(target: ServiceTarget) -> Optional[Price]:
    if _is_number(target.price) and target.price >= 0:
        return target.price
    return None


def _form_price(target: ServiceTarget) -> Optional[Price]:
    value = (target.form_data or {}).get("price")
    if _is_number(value) and value >= 0:
        return value
    return None


def _form_fields_price(target: ServiceTarget) -> Optional[Price]:
    fields = (target.form_data or {}).get("fields")
    if not isinstance(fields, Mapping):
        return None
    raw = fields.get("Price")
    if not raw:
        return None
    parsed = _parse_leading_int(raw)
    if parsed is not None and parsed > 0:
        return parsed
    return None


def _average_pricing(target: ServiceTarget) -> Optional[Price]:
    pricing = target.pricing
    if pricing is None:
        pricing = (target.form_data or {}).get("pricing")
    if not isinstance(pricing, Sequence) or isinstance(pricing, str) or not pricing:
        return None

    total = 0.0
    for item in pricing:
        value = item.get("price") if isinstance(item, Mapping) else None
        total += value if _is_number(value) else 0
    return _round_half_up(total / len(pricing))


def _category_price(target: ServiceTarget) -> Optional[Price]:
    if not (target.category_id or target.category_name):
        return None
    try:
        table = generate_category_pricing(target.category_name or DEFAULT_PLACEHOLDER_CATEGORY)
        if table:
            return table[0]["price"] or 0
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Category pricing failed for {target.category_name!r}: {e}")
    return None


def _title_keyword_price(target: ServiceTarget) -> Optional[Price]:
    haystacks = [text.lower() for text in (target.title, target.name) if isinstance(text, str)]
    for keyword, price in TITLE_KEYWORD_PRICES:
        if any(keyword in text for text in haystacks):
            return price
    return None


def _fallback_price(target: ServiceTarget) -> Price:
    return FALLBACK_PRICE


PRICE_RULES: Tuple[PriceRule, ...] = (
    PriceRule("direct_price", _direct_price),
    PriceRule("form_price", _form_price),
    PriceRule("form_fields_price", _form_fields_price),
    PriceRule("average_pricing", _average_pricing),
    PriceRule("category_pricing", _category_price),
    PriceRule("title_keyword", _title_keyword_price),
    PriceRule("fallback", _fallback_price),
)


def derive_price(target: ServiceTarget, rules: Sequence[PriceRule] = PRICE_RULES) -> Price:
    """Display price for ``target``: the value of the first rule that applies."""
    for rule in rules:
        value = rule.evaluate(target)
        if value is not None:
            logger.debug(f"Price for {target.id} from {rule.name}: {value}")
            return value
    return FALLBACK_PRICE
