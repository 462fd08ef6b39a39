"""
Tests for search and filter predicates.
Run from project root: pytest tests/test_predicates.py -v
"""

import pytest
import numpy as np

from conftest import make_record
from sales_explorer.engine.predicates import (
    apply_predicate,
    build_filter_predicate,
    build_query_predicate,
    build_search_matcher,
)
from sales_explorer.models.query import CATEGORICAL_FILTERS, FilterSpec


def names(records):
    return [r.customer_name for r in records]


class TestSearchMatcher:
    def test_empty_search_is_identity(self, sample_records):
        assert build_search_matcher("") is None
        assert apply_predicate(sample_records, build_search_matcher("")) == sample_records

    def test_name_match_is_case_insensitive(self, sample_records):
        matcher = build_search_matcher("NAIR")
        assert names(apply_predicate(sample_records, matcher)) == ["priya nair"]

    def test_phone_substring(self, sample_records):
        matcher = build_search_matcher("98765")
        assert names(apply_predicate(sample_records, matcher)) == ["Neha Sharma", "Anita Rao"]

    def test_no_match(self, sample_records):
        assert apply_predicate(sample_records, build_search_matcher("zzz")) == []


class TestCategoricalFilters:
    def test_empty_filters_short_circuit(self, sample_records):
        assert build_filter_predicate(FilterSpec()) is None
        assert apply_predicate(sample_records, None) == sample_records

    def test_empty_list_means_no_constraint(self, sample_records):
        spec = FilterSpec.from_mapping({"customerRegion": [], "gender": ""})
        assert build_filter_predicate(spec) is None

    def test_case_and_whitespace_insensitive(self):
        record = make_record(Customer_Region=" mumbai ")
        spec = FilterSpec.from_mapping({"customerRegion": ["Mumbai"]})
        assert build_filter_predicate(spec)(record)

    def test_or_within_field(self, sample_records):
        spec = FilterSpec.from_mapping({"customerRegion": ["north", "EAST"]})
        result = apply_predicate(sample_records, build_filter_predicate(spec))
        assert names(result) == ["Neha Sharma", "Anita Rao"]

    def test_and_across_fields(self, sample_records):
        spec = FilterSpec.from_mapping({"gender": ["Female"], "productCategory": ["Clothing", "Beauty"]})
        result = apply_predicate(sample_records, build_filter_predicate(spec))
        assert names(result) == ["Neha Sharma", "priya nair"]

    def test_store_location_normalized(self, sample_records):
        spec = FilterSpec.from_mapping({"storeLocation": "Mumbai"})
        result = apply_predicate(sample_records, build_filter_predicate(spec))
        assert names(result) == ["priya nair", "Rohit Verma"]

    def test_missing_value_never_matches(self):
        record = make_record(Customer_Name="No Region")
        spec = FilterSpec.from_mapping({"customerRegion": ["North"]})
        assert not build_filter_predicate(spec)(record)

    def test_or_and_law_on_random_data(self):
        """predicate == AND over fields of (OR over values of normalized equality)."""
        rng = np.random.default_rng(42)
        pool = ["North", " north", "SOUTH ", "East", "west", ""]
        fields = ["customerRegion", "gender", "paymentMethod"]
        records = [
            make_record(
                Customer_Region=str(rng.choice(pool)),
                Gender=str(rng.choice(["Male", "female ", "FEMALE", ""])),
                Payment_Method=str(rng.choice(["UPI", "upi", "Cash", " cash"])),
            )
            for _ in range(60)
        ]
        for _ in range(40):
            filters = {}
            for name in fields:
                if rng.random() < 0.6:
                    choices = {"customerRegion": pool[:-1], "gender": ["Male", "Female"],
                               "paymentMethod": ["UPI", "Cash"]}[name]
                    filters[name] = list(rng.choice(choices, size=rng.integers(1, 3)))
            predicate = build_filter_predicate(FilterSpec.from_mapping(filters)) or (lambda r: True)
            for record in records:
                expected = all(
                    any(getattr(record, CATEGORICAL_FILTERS[name]).strip().lower() == v.strip().lower()
                        for v in values)
                    for name, values in filters.items()
                )
                assert predicate(record) == expected


class TestAgeFilter:
    def test_sixty_plus_includes_sixty(self):
        records = [make_record(Customer_Name=str(age), Age=str(age)) for age in (59, 60, 61)]
        spec = FilterSpec.from_mapping({"ageRange": ["60+"]})
        assert names(apply_predicate(records, build_filter_predicate(spec))) == ["60", "61"]

    @pytest.mark.parametrize("token,inside,outside", [
        ("below18", [0, 17], [18]),
        ("18-25", [18, 25], [17, 26]),
        ("26-35", [26, 35], [25, 36]),
        ("36-45", [36, 45], [35, 46]),
        ("46-60", [46, 60], [45, 61]),
    ])
    def test_bucket_bounds(self, token, inside, outside):
        predicate = build_filter_predicate(FilterSpec.from_mapping({"ageRange": [token]}))
        for age in inside:
            assert predicate(make_record(Age=str(age)))
        for age in outside:
            assert not predicate(make_record(Age=str(age)))

    def test_multiple_buckets_or(self, sample_records):
        spec = FilterSpec.from_mapping({"ageRange": "below18,60+"})
        assert names(apply_predicate(sample_records, build_filter_predicate(spec))) == ["priya nair", "Anita Rao"]

    def test_legacy_single_bucket(self, sample_records):
        spec = FilterSpec.from_mapping({"ageRange": "26-35"})
        assert names(apply_predicate(sample_records, build_filter_predicate(spec))) == ["Neha Sharma"]

    def test_unparseable_age_excluded(self, sample_records):
        spec = FilterSpec.from_mapping({"ageRange": ["below18", "18-25", "26-35", "36-45", "46-60", "60+"]})
        result = apply_predicate(sample_records, build_filter_predicate(spec))
        assert "Rohit Verma" not in names(result)
        assert len(result) == 4

    def test_unknown_tokens_ignored(self):
        assert build_filter_predicate(FilterSpec.from_mapping({"ageRange": ["teen"]})) is None


class TestDateRangeFilter:
    def test_single_year(self, sample_records):
        spec = FilterSpec.from_mapping({"dateRange": "2023"})
        assert names(apply_predicate(sample_records, build_filter_predicate(spec))) == ["Neha Sharma", "Anita Rao"]

    def test_multiple_years(self, sample_records):
        spec = FilterSpec.from_mapping({"dateRange": ["2021", "2022"]})
        assert names(apply_predicate(sample_records, build_filter_predicate(spec))) == ["Arjun Mehta", "priya nair"]

    def test_unparseable_date_excluded(self, sample_records):
        spec = FilterSpec.from_mapping({"dateRange": ["2021", "2022", "2023"]})
        assert "Rohit Verma" not in names(apply_predicate(sample_records, build_filter_predicate(spec)))


class TestQueryPredicate:
    def test_search_and_filters_combined(self, sample_records):
        predicate = build_query_predicate("a", FilterSpec.from_mapping({"gender": ["male"]}))
        assert names(apply_predicate(sample_records, predicate)) == ["Arjun Mehta", "Rohit Verma"]

    def test_nothing_requested(self, sample_records):
        assert build_query_predicate("", FilterSpec()) is None

    def test_source_not_modified(self, sample_records):
        before = list(sample_records)
        apply_predicate(sample_records, build_search_matcher("Neha"))
        assert sample_records == before
