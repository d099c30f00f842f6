from decimal import Decimal

import pytest

from conftest import make_expense
from settleup.models import Participant
from settleup.services.balances import ExpenseSplitError, calculate_balances


def _by_id(balances):
    return {b.participant_id: b.balance for b in balances}


def test_even_three_way_split(people):
    alice, bob, charlie = people
    balances = calculate_balances([make_expense(30, alice, people)])

    assert len(balances) == 3
    assert _by_id(balances) == {"1": Decimal("20"), "2": Decimal("-10"), "3": Decimal("-10")}


def test_multiple_expenses(people):
    alice, bob, charlie = people
    balances = calculate_balances([
        make_expense(30, alice, people),
        make_expense(60, bob, people),
    ])

    assert _by_id(balances) == {"1": 0, "2": 30, "3": -30}


def test_subset_split(people):
    alice, bob, _ = people
    balances = calculate_balances([make_expense(20, alice, [alice, bob])])

    assert _by_id(balances) == {"1": 10, "2": -10}


def test_empty_input():
    assert calculate_balances([]) == []


def test_payer_outside_split_group_is_not_debited(people):
    alice, bob, charlie = people
    balances = calculate_balances([make_expense(30, alice, [bob, charlie])])

    assert _by_id(balances) == {"1": 30, "2": -15, "3": -15}


def test_order_follows_first_encounter(people):
    alice, bob, charlie = people
    balances = calculate_balances([
        make_expense(10, bob, [charlie, alice]),
        make_expense(10, alice, [alice]),
    ])

    assert [b.participant_name for b in balances] == ["Bob", "Charlie", "Alice"]


def test_empty_split_group_raises_with_expense_id(people):
    alice, bob, _ = people
    bad = make_expense(10, alice, [])
    bad.id = "broken-expense"

    with pytest.raises(ExpenseSplitError, match="broken-expense") as exc_info:
        calculate_balances([make_expense(10, alice, [alice, bob]), bad])

    assert exc_info.value.expense_id == "broken-expense"
    assert isinstance(exc_info.value, ValueError)


def test_rounds_after_summation(people):
    alice, bob, charlie = people
    expenses = [make_expense("0.01", alice, people) for _ in range(300)]

    balances = _by_id(calculate_balances(expenses))

    assert balances["1"] == Decimal("2.00")
    assert balances["2"] == Decimal("-1.00")
    assert balances["3"] == Decimal("-1.00")


def test_uneven_split_rounds_to_cents(people):
    alice, _, _ = people
    balances = _by_id(calculate_balances([make_expense(10, alice, people)]))

    assert balances == {"1": Decimal("6.67"), "2": Decimal("-3.33"), "3": Decimal("-3.33")}


def test_conservation(people):
    alice, bob, charlie = people
    dave = Participant(id="4", name="Dave")
    balances = calculate_balances([
        make_expense(10, alice, people),
        make_expense(25, bob, [alice, bob]),
        make_expense(7, charlie, [alice, bob, charlie, dave]),
    ])

    assert len(balances) == 4
    assert abs(sum(b.balance for b in balances)) <= Decimal("0.01")


def test_same_name_different_ids_are_separate():
    first = Participant(id="a", name="Sam")
    second = Participant(id="b", name="Sam")
    balances = calculate_balances([make_expense(10, first, [first, second])])

    assert _by_id(balances) == {"a": 5, "b": -5}


def test_huge_amount_raises_value_error(people):
    alice, _, _ = people

    with pytest.raises(ValueError):
        calculate_balances([make_expense("1e30", alice, people)])
