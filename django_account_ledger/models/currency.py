"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

The CurrencyModel documents the currencies in which accounts, transactions and ledger entries are stated. It is only
used to compose descriptions and to decide whether a currency conversion applies.
"""
from uuid import uuid4

from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from django_account_ledger.models.mixins import CreateUpdateMixIn

__all__ = [
    'CurrencyModelValidationError',
    'CurrencyModelQuerySet',
    'CurrencyModelAbstract',
    'CurrencyModel',
]


class CurrencyModelValidationError(ValidationError):
    pass


class CurrencyModelQuerySet(models.QuerySet):

    def for_code(self, code: str):
        return self.filter(code__iexact=code)


class CurrencyModelAbstract(CreateUpdateMixIn):
    """
    Attributes
    ----------
    uuid : UUID
        The primary key of the currency.
    code: str
        The ISO 4217 code of the currency. Unique.
    name: str
        A human-readable name.
    symbol: str
        The symbol used when composing amounts, e.g. "$" or "Bs.".
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    code = models.CharField(max_length=3,
                            unique=True,
                            validators=[MinLengthValidator(limit_value=3)],
                            verbose_name=_('Currency Code'))
    name = models.CharField(max_length=50, verbose_name=_('Currency Name'))
    symbol = models.CharField(max_length=5, verbose_name=_('Currency Symbol'))

    objects = CurrencyModelQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['code']
        verbose_name = _('Currency')
        verbose_name_plural = _('Currencies')

    def __str__(self):
        return f'{self.code} ({self.symbol})'

    def clean(self):
        if self.code:
            self.code = self.code.upper()
            if not self.code.isalpha():
                raise CurrencyModelValidationError(
                    message={'code': _('Currency code must contain letters only.')}
                )


class CurrencyModel(CurrencyModelAbstract):
    """
    Base Currency Model from Abstract.
    """

    class Meta(CurrencyModelAbstract.Meta):
        abstract = False
