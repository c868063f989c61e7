from types import SimpleNamespace

import pytest

from lootcase.domain.leveling import level_for_xp, update_level, xp_for_level
from lootcase.domain.opening_rules import (
    check_exists,
    check_funds,
    check_has_items,
    normalize_quantity,
    round_money,
)
from lootcase.exceptions import (
    CaseNotFoundError,
    EmptyCaseError,
    InsufficientFundsError,
    InvalidQuantityError,
    UserNotFoundError,
)


def test_missing_case_takes_priority_over_missing_user():
    with pytest.raises(CaseNotFoundError):
        check_exists(None, None)
    with pytest.raises(UserNotFoundError):
        check_exists(SimpleNamespace(items=[]), None)
    check_exists(SimpleNamespace(items=[]), SimpleNamespace())


def test_case_without_items_is_rejected():
    with pytest.raises(EmptyCaseError):
        check_has_items(SimpleNamespace(items=[]))


@pytest.mark.parametrize("quantity", [0, -1, 3.5, "abc", "3", None, True, [2]])
def test_non_integer_or_too_small_quantity_is_rejected(quantity):
    with pytest.raises(InvalidQuantityError):
        normalize_quantity(quantity, 5)


@pytest.mark.parametrize("quantity", [6, 100])
def test_quantity_above_cap_is_rejected(quantity):
    with pytest.raises(InvalidQuantityError, match="up to 5"):
        normalize_quantity(quantity, 5)


@pytest.mark.parametrize("quantity, expected", [(1, 1), (5, 5), (2.0, 2)])
def test_valid_quantity_is_normalized(quantity, expected):
    assert normalize_quantity(quantity, 5) == expected


def test_quantity_messages_follow_check_order():
    with pytest.raises(InvalidQuantityError, match="integer"):
        normalize_quantity(7.5, 5)
    with pytest.raises(InvalidQuantityError, match="at least 1"):
        normalize_quantity(0, 5)


def test_funds_check():
    assert check_funds(100, 50, 2) == 100
    with pytest.raises(InsufficientFundsError):
        check_funds(49, 50, 1)


def test_level_curve():
    assert xp_for_level(1) == 0
    assert xp_for_level(2) == 100
    assert xp_for_level(3) == 282
    assert level_for_xp(0) == 1
    assert level_for_xp(99) == 1
    assert level_for_xp(100) == 2
    assert level_for_xp(300) == 3


def test_update_level_mutates_user_in_place():
    user = SimpleNamespace(xp=50, level=1)

    update_level(user, 100)

    assert user.xp == 150
    assert user.level == 2


def test_update_level_never_lowers_level():
    user = SimpleNamespace(xp=0, level=4)

    update_level(user, 10.9)

    assert user.xp == 10
    assert user.level == 4


def test_funds_check_ignores_float_noise():
    # 0.1 * 3 is 0.30000000000000004 in binary floating point.
    assert check_funds(0.3, 0.1, 3) == 0.3
    assert round_money(0.1 + 0.2) == 0.3
    with pytest.raises(InsufficientFundsError):
        check_funds(0.29, 0.1, 3)
