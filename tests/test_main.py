import pytest

pytest.importorskip("PySide6.QtWidgets")

from order_tracker.main import LOGIN, ORDERS, select_entry  # noqa: E402


def test_explicit_page_wins():
    assert select_entry("login", lambda: True) == LOGIN
    assert select_entry("orders", lambda: False) == ORDERS


def test_probe_decides_without_page():
    assert select_entry("", lambda: True) == ORDERS
    assert select_entry("", lambda: False) == LOGIN
    assert select_entry("dashboard", lambda: True) == ORDERS


def test_failing_probe_means_login():
    def probe():
        raise OSError("disk gone")

    assert select_entry("", probe) == LOGIN
