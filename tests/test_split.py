import pytest

from go_dutch.core.errors import InvalidExpense
from go_dutch.core.split import split_amount


def test_split_is_real_division():
    assert split_amount(3000, 3) == 1000
    assert split_amount(1000, 3) == pytest.approx(333.3333333)
    assert split_amount(5, 2) == 2.5


def test_split_times_count_gives_amount_back():
    for amount, n in [(1000, 3), (7, 6), (123457, 11), (1, 7)]:
        assert split_amount(amount, n) * n == pytest.approx(amount)


@pytest.mark.parametrize("amount, count", [(0, 2), (-100, 2), (100, 0)])
def test_split_rejects_bad_input(amount, count):
    with pytest.raises(InvalidExpense):
        split_amount(amount, count)


def test_split_rejects_non_integer_amounts():
    with pytest.raises(InvalidExpense):
        split_amount(10.5, 2)
    with pytest.raises(InvalidExpense):
        split_amount(True, 1)
