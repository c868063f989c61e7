"""Precondition checks for opening cases.

The checks run in a fixed order and the first failure wins; none of them
touch the user or the case.
"""

from numbers import Real
from typing import Any

from lootcase.exceptions import (
    CaseNotFoundError,
    EmptyCaseError,
    InsufficientFundsError,
    InvalidQuantityError,
    UserNotFoundError,
)


def check_exists(case_data: Any, user: Any) -> None:
    """A missing case is reported before a missing user."""
    if case_data is None:
        raise CaseNotFoundError("Case not found")
    if user is None:
        raise UserNotFoundError("User not found")


def check_has_items(case_data: Any) -> None:
    if not case_data.items:
        raise EmptyCaseError("This case has no items to open")


def normalize_quantity(quantity: Any, max_quantity: int) -> int:
    """Return quantity as an int or raise InvalidQuantityError.

    Integral floats such as 2.0 are accepted; bools and strings are not.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, Real):
        raise InvalidQuantityError("Quantity to open must be an integer")
    if isinstance(quantity, float) and not quantity.is_integer():
        raise InvalidQuantityError("Quantity to open must be an integer")
    quantity = int(quantity)

    if quantity > max_quantity:
        raise InvalidQuantityError(f"You can only open up to {max_quantity} cases at a time")
    if quantity < 1:
        raise InvalidQuantityError("You need to open at least 1 case")
    return quantity


MONEY_PLACES = 2


def round_money(amount: float) -> float:
    """Round to whole cents so float noise never decides a purchase."""
    return round(amount, MONEY_PLACES)


def total_price(price: float, quantity: int) -> float:
    return round_money(price * quantity)


def check_funds(wallet_balance: float, price: float, quantity: int) -> float:
    """Return the total cost when the balance covers it."""
    cost = total_price(price, quantity)
    if round_money(wallet_balance) < cost:
        raise InsufficientFundsError("Insufficient balance")
    return cost
