"""Display price derivation and category pricing tables."""

import pytest

from eventhub.services.pricing_rules import (
    FALLBACK_PRICE,
    PRICE_RULES,
    PriceRule,
    derive_price,
    generate_category_pricing,
    rating_label,
)
from eventhub.services.service_target import PlaceholderTarget, VendorTarget, VenueTarget


class TestDerivePrice:
    def test_direct_price_wins(self):
        target = VenueTarget(id="v1", price=42000, pricing=[{"price": 10}])
        assert derive_price(target) == 42000

    def test_zero_direct_price_is_a_price(self):
        assert derive_price(VenueTarget(id="v1", price=0)) == 0

    def test_form_price_used_when_no_direct_price(self):
        target = VenueTarget(id="v1", form_data={"price": 7500})
        assert derive_price(target) == 7500

    def test_form_fields_price_parses_leading_integer(self):
        target = VendorTarget(id="v2", form_data={"fields": {"Price": "1500 INR"}})
        assert derive_price(target) == 1500

    def test_non_positive_form_fields_price_is_skipped(self):
        target = VendorTarget(id="v2", title="Studio", form_data={"fields": {"Price": "0"}})
        assert derive_price(target) == FALLBACK_PRICE

    def test_average_of_pricing_list(self):
        target = VenueTarget(id="v1", pricing=[{"price": 100}, {"price": 300}])
        assert derive_price(target) == 200

    def test_average_rounds_half_up(self):
        target = VenueTarget(id="v1", pricing=[{"price": 100}, {"price": 101}])
        assert derive_price(target) == 101

    def test_average_treats_missing_prices_as_zero(self):
        target = VenueTarget(id="v1", pricing=[{"price": 300}, {"title": "Free parking"}])
        assert derive_price(target) == 150

    def test_form_pricing_used_when_listing_pricing_missing(self):
        target = VenueTarget(id="v1", form_data={"pricing": [{"price": 500}, {"price": 700}]})
        assert derive_price(target) == 600

    def test_vendor_category_pricing_for_catering(self):
        target = VendorTarget(id="v2", category_id="c1", category_name="Catering")
        assert derive_price(target) == 100

    def test_vendor_category_pricing_for_photography(self):
        target = VendorTarget(id="v2", category_id="c1", category_name="Photography")
        assert derive_price(target) == 2000

    def test_title_keyword_price(self):
        assert derive_price(VenueTarget(id="v1", title="Grand Venue")) == 50000
        assert derive_price(VendorTarget(id="v2", name="Best Photographer")) == 15000

    def test_fallback_price_is_deterministic(self):
        target = VenueTarget(id="v1", title="Something else")
        assert derive_price(target) == FALLBACK_PRICE
        assert derive_price(target) == derive_price(target)

    def test_placeholder_price_is_zero(self):
        target = PlaceholderTarget(id=None, title="Unknown Vendor", price=0, pricing=[])
        assert derive_price(target) == 0

    def test_custom_rule_chain(self):
        rules = (PriceRule("always_one", lambda target: 1),) + PRICE_RULES
        assert derive_price(VenueTarget(id="v1", price=999), rules=rules) == 1


class TestCategoryPricing:
    @pytest.mark.parametrize(
        "category, first_price",
        [
            ("Catering", 100),
            ("  PHOTOGRAPHY ", 2000),
            ("Banquet Hall", 50000),
            ("Bridal Makeup", 8000),
            ("DJ", 15000),
            ("Floral decor", 20000),
            ("Tent rentals", 5000),
            (None, 5000),
        ],
    )
    def test_keyword_tables(self, category, first_price):
        table = generate_category_pricing(category)
        assert len(table) == 3
        assert table[0]["price"] == first_price

    def test_multiplier_scales_table(self):
        table = generate_category_pricing("catering", multiplier=1.5)
        assert [item["price"] for item in table] == [150, 450, 600]


class TestRatingLabel:
    @pytest.mark.parametrize(
        "rating, label",
        [
            (4.8, "superb"),
            (4.4, "excellent"),
            (3.5, "very good"),
            (3.2, "good"),
            (2.5, "average"),
            (1.0, "below average"),
            (None, "below average"),
        ],
    )
    def test_thresholds(self, rating, label):
        assert rating_label(rating) == label
