from decimal import Decimal

from conftest import make_expense
from settleup.models import Balance, DebtSettlement
from settleup.services.balances import calculate_balances
from settleup.services.settlement import optimize_debts


def _balances(*pairs):
    return [
        Balance(participant_id=str(i), participant_name=name, balance=Decimal(str(amount)))
        for i, (name, amount) in enumerate(pairs, start=1)
    ]


def test_largest_debtor_settles_first():
    settlements = optimize_debts(_balances(("Alice", 30), ("Bob", -20), ("Charlie", -10)))

    assert settlements == [
        DebtSettlement(from_name="Bob", to_name="Alice", amount=Decimal("20.00")),
        DebtSettlement(from_name="Charlie", to_name="Alice", amount=Decimal("10.00")),
    ]
    assert sum(s.amount for s in settlements) == 30


def test_settle_zeroes_all_balances():
    balances = _balances(("Alice", 5), ("Bob", -3), ("Charlie", -2))

    settlements = optimize_debts(balances)

    after = {b.participant_name: b.balance for b in balances}
    for s in settlements:
        after[s.to_name] -= s.amount
        after[s.from_name] += s.amount

    assert all(value == 0 for value in after.values())


def test_empty_input():
    assert optimize_debts([]) == []


def test_balanced_accounts():
    assert optimize_debts(_balances(("Alice", 0), ("Bob", 0))) == []


def test_ignores_balances_within_a_cent():
    assert optimize_debts(_balances(("Alice", "0.005"), ("Bob", "-0.005"))) == []
    assert optimize_debts(_balances(("Alice", "0.01"), ("Bob", "-0.01"))) == []


def test_settled_participants_never_appear():
    settlements = optimize_debts(_balances(("Alice", 10), ("Dora", "0.01"), ("Bob", -10)))

    names = {s.from_name for s in settlements} | {s.to_name for s in settlements}
    assert "Dora" not in names


def test_does_not_mutate_caller_balances():
    balances = _balances(("Alice", 30), ("Bob", -20), ("Charlie", -10))

    optimize_debts(balances)

    assert [b.balance for b in balances] == [30, -20, -10]


def test_five_party_plan_is_bounded():
    balances = _balances(("A", 50), ("B", 30), ("C", -40), ("D", -25), ("E", -15))

    settlements = optimize_debts(balances)

    assert [(s.from_name, s.to_name, s.amount) for s in settlements] == [
        ("C", "A", Decimal("40")),
        ("D", "A", Decimal("10")),
        ("D", "B", Decimal("15")),
        ("E", "B", Decimal("15")),
    ]
    assert len(settlements) <= len(balances) - 1
    assert sum(s.amount for s in settlements) == sum(b.balance for b in balances if b.balance > 0)


def test_equal_creditors_keep_input_order():
    settlements = optimize_debts(_balances(("X", 10), ("Y", 10), ("Z", -20)))

    assert [(s.from_name, s.to_name) for s in settlements] == [("Z", "X"), ("Z", "Y")]


def test_accepts_float_balances():
    balances = [
        Balance(participant_id="1", participant_name="Alice", balance=20.0),
        Balance(participant_id="2", participant_name="Bob", balance=-20.0),
    ]

    assert optimize_debts(balances) == [DebtSettlement(from_name="Bob", to_name="Alice", amount=Decimal("20.00"))]


def test_settles_calculated_balances(people):
    alice, bob, _ = people
    balances = calculate_balances([
        make_expense(30, alice, people),
        make_expense(60, bob, people),
    ])

    assert optimize_debts(balances) == [
        DebtSettlement(from_name="Charlie", to_name="Bob", amount=Decimal("30.00")),
    ]


def test_subset_split_settlement(people):
    alice, bob, _ = people
    balances = calculate_balances([make_expense(20, alice, [alice, bob])])

    assert optimize_debts(balances) == [
        DebtSettlement(from_name="Bob", to_name="Alice", amount=Decimal("10.00")),
    ]


def test_core_writes_nothing_to_output(capsys, people):
    alice, _, _ = people

    optimize_debts(calculate_balances([make_expense(30, alice, people)]))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
