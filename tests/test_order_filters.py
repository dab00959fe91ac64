from order_tracker.services.order_filters import (
    ALL, FilterValues, date_filter_options, filtered_orders, resolve_date_selection,
)

from conftest import SAMPLE_ORDERS


def ids(orders):
    return [o["id"] for o in orders]


def test_default_filters_return_every_order_in_order():
    result = filtered_orders(SAMPLE_ORDERS, ALL, FilterValues())
    assert result == SAMPLE_ORDERS
    assert ids(result) == [1, 2, 3]


def test_filtering_is_idempotent():
    filters = FilterValues(status="pending", query="wid")
    assert filtered_orders(SAMPLE_ORDERS, "jnt", filters) == filtered_orders(SAMPLE_ORDERS, "jnt", filters)


def test_tab_defaults_missing_delivery_to_jnt():
    assert ids(filtered_orders(SAMPLE_ORDERS, "jnt")) == [1, 3]
    assert ids(filtered_orders(SAMPLE_ORDERS, "walkin")) == [2]
    assert filtered_orders(SAMPLE_ORDERS, "lbc") == []


def test_status_filter_is_case_insensitive():
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(status="pending"))) == [1, 3]
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(status="shipped"))) == [2]


def test_missing_status_counts_as_pending():
    orders = [{"id": 9, "status": None}]
    assert filtered_orders(orders, ALL, FilterValues(status="pending")) == orders


def test_date_filter_matches_exactly():
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(date="2024-01-02"))) == [1, 3]
    assert filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(date="2024-01")) == []


def test_search_matches_details_case_insensitively():
    orders = [
        {"id": 1, "customer_name": "Ana", "order_details": "2x Widget Set"},
        {"id": 2, "customer_name": "Bo", "order_details": "1x Gadget"},
    ]
    assert ids(filtered_orders(orders, ALL, FilterValues(query="widget"))) == [1]


def test_search_covers_order_id_profile_and_notes_and_trims_query():
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(query="  so-002 "))) == [2]
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(query="CYLIM"))) == [3]
    assert ids(filtered_orders(SAMPLE_ORDERS, ALL, FilterValues(query="friday"))) == [2]


def test_search_skips_empty_fields():
    orders = [{"id": 1, "customer_name": "Ana", "notes": None}]
    assert filtered_orders(orders, ALL, FilterValues(query="none")) == []


def test_all_filters_apply_together():
    filters = FilterValues(status="pending", date="2024-01-02", query="gizmo")
    assert ids(filtered_orders(SAMPLE_ORDERS, "jnt", filters)) == [3]
    assert filtered_orders(SAMPLE_ORDERS, "walkin", filters) == []


def test_date_options_are_distinct_descending_with_sentinel_first():
    orders = [{"order_date": "2024-01-02"}, {"order_date": "2024-01-01"}, {"order_date": "2024-01-02"}]
    options = date_filter_options(orders)
    assert [label for _, label in options] == ["All Dates", "2024-01-02", "2024-01-01"]
    assert options[0][0] == ALL


def test_date_options_skip_empty_dates():
    orders = [{"order_date": None}, {"order_date": ""}, {}]
    assert date_filter_options(orders) == [(ALL, "All Dates")]


def test_date_selection_kept_only_when_still_offered():
    options = date_filter_options([{"order_date": "2024-03-01"}])
    assert resolve_date_selection("2024-03-01", options) == "2024-03-01"
    assert resolve_date_selection("2023-12-31", options) == ALL
