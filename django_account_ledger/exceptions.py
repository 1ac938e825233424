"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
Miguel Sanda <msanda@arrobalytics.com>
"""

from django.core.exceptions import ValidationError


class AccountLedgerValidationError(ValidationError):
    pass


class AccountLedgerStateError(ValidationError):
    pass


class PaymentNotAllowedError(ValidationError):
    pass


class AmountExceedsBalanceError(ValidationError):
    pass


class CurrencyConfigurationError(ValidationError):
    pass
