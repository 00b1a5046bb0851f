from pycabinetwiring.utils.utils import natural_sort_key


def test_natural_sort_key_orders_numbers():
    refs = ["X2:10", "X2:4", "A2", "X10:1", "A10"]
    assert sorted(refs, key=natural_sort_key) == ["A2", "A10", "X2:4", "X2:10", "X10:1"]


def test_natural_sort_key_plain_text():
    assert natural_sort_key("abc") == ["abc"]
