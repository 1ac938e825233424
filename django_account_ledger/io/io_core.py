"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

The io_core module holds the pure helper functions shared by the account ledger models: local clock access and the
currency conversion used to express an entry amount in the home currency of its account. None of these functions
touch the database.
"""
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from django.conf import settings as global_settings
from django.utils.timezone import localtime, localdate

__all__ = [
    'get_localtime',
    'get_localdate',
    'to_decimal',
    'convert_amount',
]

ZERO = Decimal('0')


def get_localtime(tz=None) -> datetime:
    """
    Retrieve the local time based on the specified timezone.

    Parameters
    ----------
    tz : timezone or None, optional
        The timezone to determine the local time. If `None`, defaults to the system
        timezone.

    Returns
    -------
    datetime
        A datetime object representing the calculated local time.
    """
    if global_settings.USE_TZ:
        return localtime(timezone=tz)
    return datetime.now(tz=tz)


def get_localdate() -> date:
    """
    Fetches the current local date, considering time zone settings.

    Returns
    -------
    date
        The current local date, adjusted for the time zone setting if applicable.
    """
    if global_settings.USE_TZ:
        return localdate()
    return datetime.today().date()


def to_decimal(value: Union[Decimal, float, int, str, None]) -> Optional[Decimal]:
    """
    Coerces a numeric value into a Decimal. Floats are converted through their string representation so 0.1 stays
    Decimal('0.1').

    Returns
    -------
    Decimal or None
        None if the value is missing or cannot be interpreted as a number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        value = repr(value)
    try:
        dec = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return dec if dec.is_finite() else None


def convert_amount(amount: Union[Decimal, float, int, str, None],
                   exchange_rate: Union[Decimal, float, int, str, None]) -> Decimal:
    """
    Converts an amount by an exchange rate.

    Parameters
    ----------
    amount
        The amount stated in the entry currency.
    exchange_rate
        The multiplicative factor into the home currency of the account.

    Returns
    -------
    Decimal
        amount * exchange_rate. Decimal('0') when either operand is missing or not a number.
    """
    dec_amount = to_decimal(amount)
    dec_rate = to_decimal(exchange_rate)
    if dec_amount is None or dec_rate is None:
        return ZERO
    return dec_amount * dec_rate
