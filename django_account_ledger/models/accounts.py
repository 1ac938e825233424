"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

An AccountModel is one of the two sides of every AccountLedgerModel movement. Accounts are stated in a single currency
and carry an original type which determines how they behave on payments:

    * Money store accounts (Bank, Cash) hold the organization funds.
    * Contact accounts (Client, Supplier, Staff) track what third parties owe or are owed.
    * Organization accounts (Income, Expense, Buy) are the canonical counter accounts used when a payment is recorded
      against the same account that owns the transaction.

The original type also selects the conciliation policy of a payment: movements on a bank account must be reconciled
against a bank statement later, every other known account type is conciliated on creation.
"""
from typing import Optional
from uuid import uuid4

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Manager, QuerySet
from django.utils.translation import gettext_lazy as _

from django_account_ledger.models.mixins import CreateUpdateMixIn
from django_account_ledger.settings import (
    DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
    DJANGO_ACCOUNT_LEDGER_DEFAULT_CONCILIATION
)

__all__ = [
    'ACCOUNT_BANK',
    'ACCOUNT_CASH',
    'ACCOUNT_CLIENT',
    'ACCOUNT_SUPPLIER',
    'ACCOUNT_STAFF',
    'ACCOUNT_INCOME',
    'ACCOUNT_EXPENSE',
    'ACCOUNT_BUY',
    'ACCOUNT_TYPES',
    'CONTACT_TYPES',
    'MONEY_STORE_TYPES',
    'ORGANIZATION_TYPES',
    'ACCOUNTABLE_MONEY_STORE',
    'ACCOUNTABLE_CONTACT',
    'ACCOUNTABLE_ORGANIZATION',
    'get_accountable_type',
    'get_conciliation_for_account_type',
    'AccountModelValidationError',
    'AccountModelQuerySet',
    'AccountModelManager',
    'AccountModelAbstract',
    'AccountModel',
]

ACCOUNT_BANK = 'bank'
ACCOUNT_CASH = 'cash'
ACCOUNT_CLIENT = 'client'
ACCOUNT_SUPPLIER = 'supplier'
ACCOUNT_STAFF = 'staff'
ACCOUNT_INCOME = 'income'
ACCOUNT_EXPENSE = 'expense'
ACCOUNT_BUY = 'buy'

ACCOUNT_TYPES = [
    (_('Money Store'), (
        (ACCOUNT_BANK, _('Bank')),
        (ACCOUNT_CASH, _('Cash')),
    )),
    (_('Contact'), (
        (ACCOUNT_CLIENT, _('Client')),
        (ACCOUNT_SUPPLIER, _('Supplier')),
        (ACCOUNT_STAFF, _('Staff')),
    )),
    (_('Organization'), (
        (ACCOUNT_INCOME, _('Income')),
        (ACCOUNT_EXPENSE, _('Expense')),
        (ACCOUNT_BUY, _('Buy')),
    )),
]

MONEY_STORE_TYPES = (ACCOUNT_BANK, ACCOUNT_CASH)
CONTACT_TYPES = (ACCOUNT_CLIENT, ACCOUNT_SUPPLIER, ACCOUNT_STAFF)
ORGANIZATION_TYPES = (ACCOUNT_INCOME, ACCOUNT_EXPENSE, ACCOUNT_BUY)

ACCOUNTABLE_MONEY_STORE = 'money_store'
ACCOUNTABLE_CONTACT = 'contact'
ACCOUNTABLE_ORGANIZATION = 'organization'


def get_accountable_type(original_type: str) -> Optional[str]:
    if original_type in MONEY_STORE_TYPES:
        return ACCOUNTABLE_MONEY_STORE
    elif original_type in CONTACT_TYPES:
        return ACCOUNTABLE_CONTACT
    elif original_type in ORGANIZATION_TYPES:
        return ACCOUNTABLE_ORGANIZATION


def get_conciliation_for_account_type(original_type: str) -> bool:
    """
    Determines the conciliation flag of a payment recorded on an account of the given type.

    Parameters
    ----------
    original_type: str
        The original type of the account.

    Returns
    -------
    bool
        False for bank accounts, which are reconciled later against a bank statement. True for cash and contact
        accounts. DJANGO_ACCOUNT_LEDGER_DEFAULT_CONCILIATION for any other type.
    """
    if original_type == ACCOUNT_BANK:
        return False
    elif original_type == ACCOUNT_CASH:
        return True
    elif original_type in CONTACT_TYPES:
        return True
    return DJANGO_ACCOUNT_LEDGER_DEFAULT_CONCILIATION


class AccountModelValidationError(ValidationError):
    pass


class AccountModelQuerySet(QuerySet):
    """
    A custom defined QuerySet for the AccountModel.
    """

    def active(self):
        """
        Active accounts which can be used to record new movements.

        Returns
        -------
        AccountModelQuerySet
            A filtered AccountModelQuerySet of active accounts.
        """
        return self.filter(active=True)

    def for_original_type(self, original_type: str):
        return self.filter(original_type__exact=original_type)

    def money_stores(self):
        return self.filter(original_type__in=MONEY_STORE_TYPES)

    def contacts(self):
        return self.filter(original_type__in=CONTACT_TYPES)


class AccountModelManager(Manager):
    """
    Custom defined Model Manager for the AccountModel.
    """

    def canonical_for(self, tx_type: str):
        """
        Fetches the organization account used as counter account for payments of a given transaction type.

        Parameters
        ----------
        tx_type: str
            The transaction type (income, expense or buy).

        Returns
        -------
        AccountModel
            The oldest active organization account with the matching original type, None if not configured.
        """
        return self.get_queryset().active().filter(
            original_type__exact=tx_type,
            original_type__in=ORGANIZATION_TYPES
        ).order_by('created').first()


class AccountModelAbstract(CreateUpdateMixIn):
    """
    Abstract class representing an Account Model.

    Attributes
    ----------
    uuid : UUIDField
        Unique identifier for each account instance.
    name : CharField
        Name of the account, constrained by length.
    currency : ForeignKey
        The currency the account is stated in, its home currency.
    original_type : CharField
        The kind of account. Determines its accountable type and its conciliation policy.
    amount : DecimalField
        Informational running amount of the account.
    active : BooleanField
        Indicates whether the account is active.
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    name = models.CharField(max_length=100, verbose_name=_('Account Name'))
    currency = models.ForeignKey('django_account_ledger.CurrencyModel',
                                 on_delete=models.RESTRICT,
                                 related_name='accounts',
                                 verbose_name=_('Currency'))
    original_type = models.CharField(max_length=20, choices=ACCOUNT_TYPES, verbose_name=_('Account Type'))
    amount = models.DecimalField(max_digits=20,
                                 decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                 default=0,
                                 verbose_name=_('Amount'))
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    objects = AccountModelManager.from_queryset(queryset_class=AccountModelQuerySet)()

    class Meta:
        abstract = True
        ordering = ['-created']
        verbose_name = _('Account')
        verbose_name_plural = _('Accounts')
        indexes = [
            models.Index(fields=['original_type']),
            models.Index(fields=['active']),
        ]

    def __str__(self):
        return f'{self.get_original_type_display()}: {self.name}'

    @property
    def accountable_type(self) -> Optional[str]:
        return get_accountable_type(self.original_type)

    def is_contact(self) -> bool:
        return self.original_type in CONTACT_TYPES

    def is_money_store(self) -> bool:
        return self.original_type in MONEY_STORE_TYPES

    def is_bank(self) -> bool:
        return self.original_type == ACCOUNT_BANK

    def is_cash(self) -> bool:
        return self.original_type == ACCOUNT_CASH

    def get_conciliation(self) -> bool:
        return get_conciliation_for_account_type(self.original_type)

    def clean(self):
        if self.name is not None:
            self.name = self.name.strip()
        if not self.name:
            raise AccountModelValidationError(message={'name': _('Account name cannot be blank.')})


class AccountModel(AccountModelAbstract):
    """
    Base Account Model from Abstract.
    """

    class Meta(AccountModelAbstract.Meta):
        abstract = False
