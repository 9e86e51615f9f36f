import logging

from go_dutch.core.transfers import Transfer, resolve_transfers, round_half_up


def _apply(balances, transfers):
    after = {name: round_half_up(b) for name, b in balances.items()}
    for t in transfers:
        after[t.from_name] += t.amount
        after[t.to_name] -= t.amount
    return after


def test_one_creditor_two_debtors_keeps_input_order_on_ties():
    balances = {"A": 2000, "B": -1000, "C": -1000}

    transfers = resolve_transfers(balances)

    assert transfers == [
        Transfer(from_name="B", to_name="A", amount=1000),
        Transfer(from_name="C", to_name="A", amount=1000),
    ]
    assert all(v == 0 for v in _apply(balances, transfers).values())


def test_tie_order_follows_input_order():
    assert resolve_transfers({"Y": -50, "X": -50, "Z": 100}) == [
        Transfer(from_name="Y", to_name="Z", amount=50),
        Transfer(from_name="X", to_name="Z", amount=50),
    ]


def test_partial_entries_stay_at_front_without_resorting():
    balances = {"A": 100, "B": 90, "C": -60, "D": -60, "E": -70}

    transfers = resolve_transfers(balances)

    # After E pays A 70, A has 30 left but stays ahead of B.
    assert transfers == [
        Transfer(from_name="E", to_name="A", amount=70),
        Transfer(from_name="C", to_name="A", amount=30),
        Transfer(from_name="C", to_name="B", amount=30),
        Transfer(from_name="D", to_name="B", amount=60),
    ]
    assert all(v == 0 for v in _apply(balances, transfers).values())


def test_transfer_count_is_below_non_zero_members():
    cases = [
        {"A": 500, "B": -300, "C": -200},
        {"A": 100, "B": 90, "C": -60, "D": -60, "E": -70},
        {"A": 10, "B": 20, "C": 30, "D": -25, "E": -35},
        {"A": 1, "B": -1, "C": 0},
    ]
    for balances in cases:
        non_zero = sum(1 for b in balances.values() if round_half_up(b) != 0)
        transfers = resolve_transfers(balances)
        assert len(transfers) <= non_zero - 1
        assert all(t.amount > 0 for t in transfers)


def test_zero_and_empty_balances_give_no_transfers():
    assert resolve_transfers({}) == []
    assert resolve_transfers({"A": 0, "B": 0.2, "C": -0.4}) == []


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(666.6666) == 667
    assert round_half_up(-333.3333) == -333
    assert round_half_up(-0.4) == 0


def test_fractional_balances_are_rounded_before_matching():
    balances = {"A": 1000 - 1000 / 3, "B": -1000 / 3, "C": -1000 / 3}

    assert resolve_transfers(balances) == [
        Transfer(from_name="B", to_name="A", amount=333),
        Transfer(from_name="C", to_name="A", amount=333),
    ]


def test_residual_is_dropped_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="go_dutch.core.transfers"):
        transfers = resolve_transfers({"A": 667, "B": -333, "C": -333})

    assert sum(t.amount for t in transfers) == 666
    assert "residual" in caplog.text
    assert "'A', 1" in caplog.text


def test_balanced_input_logs_nothing(caplog):
    with caplog.at_level(logging.WARNING, logger="go_dutch.core.transfers"):
        resolve_transfers({"A": 10, "B": -10})
    assert caplog.records == []
