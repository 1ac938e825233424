"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

An AccountLedgerModel records a single movement of money between two AccountModels, or between an AccountModel and a
TransactionModel when the movement is a payment. The amount of the movement is always stored as a positive magnitude
stated in the entry currency. The direction of the movement and its value are derived from the perspective of one of
the two accounts involved (see get_direction and get_signed_amount).

Every AccountLedgerModel goes through a small lifecycle:

    * Pending: active and not conciliated. The initial state.
    * Conciliated: active and conciliated. Terminal. The movement has been approved against an external record, such
      as a bank statement.
    * Nulled: inactive. Terminal. The movement has been reversed. Only pending movements can be nulled.

When an AccountLedgerModel belongs to a TransactionModel, conciliating or nulling it is delegated to the
TransactionModel, which decides how its own balance and state are affected.

An AccountLedgerModel owns its AccountLedgerDetailModels. Their state mirrors the state of the entry and they are
deleted together with it.
"""
import logging
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import uuid4, UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models, transaction
from django.db.models import Q, QuerySet, Manager
from django.utils.translation import gettext_lazy as _

from django_account_ledger.exceptions import AccountLedgerValidationError, AccountLedgerStateError
from django_account_ledger.io.io_core import get_localtime, get_localdate, convert_amount
from django_account_ledger.models.mixins import CreateUpdateMixIn, LoggingMixIn
from django_account_ledger.models.signals import account_ledger_conciliated, account_ledger_nulled
from django_account_ledger.settings import (
    DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
    DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES,
    DJANGO_ACCOUNT_LEDGER_REFERENCE_MIN_LENGTH,
    DJANGO_ACCOUNT_LEDGER_REFERENCE_MAX_LENGTH
)

__all__ = [
    'OperationEnum',
    'OPERATION_IN',
    'OPERATION_OUT',
    'OPERATION_TRANS',
    'OPERATIONS',
    'DETAIL_STATE_PENDING',
    'DETAIL_STATE_CONCILIATED',
    'DETAIL_STATE_NULLED',
    'FILTER_ALL',
    'FILTER_NULLED',
    'FILTER_CONCILIATED',
    'FILTER_PENDING',
    'is_operation',
    'AccountLedgerModelQuerySet',
    'AccountLedgerModelManager',
    'AccountLedgerModelAbstract',
    'AccountLedgerModel',
    'AccountLedgerDetailModelAbstract',
    'AccountLedgerDetailModel',
]

UserModel = settings.AUTH_USER_MODEL


class OperationEnum(Enum):
    """
    The kind of movement recorded by an AccountLedgerModel.

    Attributes
    ----------
    IN : str
        Money coming into the account.
    OUT : str
        Money leaving the account.
    TRANS : str
        A transfer between two accounts of the organization.
    """
    IN = 'in'
    OUT = 'out'
    TRANS = 'trans'


OPERATION_IN = OperationEnum.IN.value
OPERATION_OUT = OperationEnum.OUT.value
OPERATION_TRANS = OperationEnum.TRANS.value

OPERATIONS = [
    (OPERATION_IN, _('In')),
    (OPERATION_OUT, _('Out')),
    (OPERATION_TRANS, _('Transfer')),
]

DETAIL_STATE_PENDING = 'uncon'
DETAIL_STATE_CONCILIATED = 'con'
DETAIL_STATE_NULLED = 'nulled'

DETAIL_STATES = [
    (DETAIL_STATE_PENDING, _('Pending')),
    (DETAIL_STATE_CONCILIATED, _('Conciliated')),
    (DETAIL_STATE_NULLED, _('Nulled')),
]

FILTER_ALL = 'all'
FILTER_NULLED = 'nulled'
FILTER_CONCILIATED = 'conciliated'
FILTER_PENDING = 'pending'

FILTER_ALIASES = {
    'con': FILTER_CONCILIATED,
    'uncon': FILTER_PENDING,
}


def is_operation(account_ledger_model, kind: Union[OperationEnum, str]) -> bool:
    """
    Checks the operation of an AccountLedgerModel.

    Parameters
    ----------
    account_ledger_model: AccountLedgerModel
        The entry to check.
    kind: OperationEnum or str
        The operation to compare against.

    Returns
    -------
    bool
        True if the entry operation matches kind.
    """
    if isinstance(kind, OperationEnum):
        kind = kind.value
    return account_ledger_model.operation == kind


def get_account_uuid(account) -> Optional[UUID]:
    if account is None:
        return None
    if isinstance(account, UUID):
        return account
    if isinstance(account, str):
        return UUID(account)
    return account.uuid


class AccountLedgerModelQuerySet(QuerySet):
    """
    A custom defined QuerySet for the AccountLedgerModel. The pending, conciliated and nulled filters map to the three
    mutually exclusive states of an entry.
    """

    def active(self):
        return self.filter(active=True)

    def pending(self):
        """
        Entries which have not been conciliated nor nulled.

        Returns
        -------
        AccountLedgerModelQuerySet
            A filtered AccountLedgerModelQuerySet.
        """
        return self.filter(conciliation=False, active=True)

    def conciliated(self):
        """
        Entries approved against an external record.

        Returns
        -------
        AccountLedgerModelQuerySet
            A filtered AccountLedgerModelQuerySet.
        """
        return self.filter(conciliation=True)

    def nulled(self):
        """
        Entries which have been reversed.

        Returns
        -------
        AccountLedgerModelQuerySet
            A filtered AccountLedgerModelQuerySet.
        """
        return self.filter(active=False)

    def for_account(self, account):
        """
        Entries touching an account on either side.

        Parameters
        ----------
        account: AccountModel, UUID or str
            The account used as filter.

        Returns
        -------
        AccountLedgerModelQuerySet
            A filtered AccountLedgerModelQuerySet.
        """
        account_uuid = get_account_uuid(account)
        return self.filter(
            Q(account_id=account_uuid) |
            Q(counter_account_id=account_uuid)
        )

    def filtered(self, account, filter_by: str = FILTER_ALL):
        """
        Entries touching an account, restricted to a lifecycle state.

        Parameters
        ----------
        account: AccountModel, UUID or str
            The account used as filter.
        filter_by: str
            One of all, nulled, conciliated (con) or pending (uncon). Unknown values return all entries.

        Returns
        -------
        AccountLedgerModelQuerySet
            A filtered AccountLedgerModelQuerySet.
        """
        qs = self.for_account(account).select_related('account', 'counter_account')
        filter_by = FILTER_ALIASES.get(filter_by, filter_by)

        if filter_by == FILTER_NULLED:
            return qs.nulled()
        elif filter_by == FILTER_CONCILIATED:
            return qs.conciliated()
        elif filter_by == FILTER_PENDING:
            return qs.pending()
        return qs

    def has_pending(self) -> bool:
        return self.pending().exists()


class AccountLedgerModelManager(Manager):

    def ledgers_for(self, account, filter_by: str = FILTER_ALL) -> AccountLedgerModelQuerySet:
        return self.get_queryset().filtered(account=account, filter_by=filter_by)

    def create_entry(self, user_model, details: Optional[list] = None, **kwargs):
        """
        Creates a new AccountLedgerModel and its AccountLedgerDetailModels in a single database transaction.

        Parameters
        ----------
        user_model
            The user creating the entry.
        details: list
            An optional list of dictionaries with the AccountLedgerDetailModel fields.
        kwargs
            The AccountLedgerModel fields.

        Returns
        -------
        AccountLedgerModel
            The newly created entry.

        Raises
        ------
        AccountLedgerValidationError
            If the entry or any of its details is not valid.
        """
        account_ledger_model = self.model(**kwargs)
        account_ledger_model.creator = user_model

        with transaction.atomic():
            account_ledger_model.save()
            for detail_data in details or []:
                detail_model = AccountLedgerDetailModel(account_ledger=account_ledger_model, **detail_data)
                try:
                    detail_model.full_clean()
                except ValidationError as e:
                    raise AccountLedgerValidationError(e.message_dict)
                detail_model.save()
        return account_ledger_model


class AccountLedgerModelAbstract(CreateUpdateMixIn, LoggingMixIn):
    """
    Abstract base model for recording money movements between accounts.

    Attributes
    ----------
    uuid : UUID
        The primary key of the entry.
    date : date
        The date of the movement.
    operation : str
        One of in, out or trans.
    reference : str
        A mandatory reference of the movement, between 3 and 150 characters.
    description : str
        A free text description. Generated for payments.
    account : AccountModel
        The account recording the movement.
    counter_account : AccountModel
        The other side of the movement. Must be different than account.
    transaction : TransactionModel
        The TransactionModel this entry pays, if any.
    currency : CurrencyModel
        The currency the amount is stated in. Defaults to the currency of the account.
    exchange_rate : Decimal
        The factor converting the amount into the home currency of the account. Must be greater than zero.
    amount : Decimal
        The magnitude of the movement. Must be greater than zero on creation.
    interests_penalties : Decimal
        The part of a payment amount covering interests and penalties of a pay plan.
    active : bool
        False once the entry has been nulled.
    conciliation : bool
        True once the entry has been conciliated.
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    date = models.DateField(default=get_localdate, verbose_name=_('Date'))
    operation = models.CharField(max_length=5, choices=OPERATIONS, verbose_name=_('Operation'))
    reference = models.CharField(max_length=DJANGO_ACCOUNT_LEDGER_REFERENCE_MAX_LENGTH,
                                 validators=[
                                     MinLengthValidator(
                                         limit_value=DJANGO_ACCOUNT_LEDGER_REFERENCE_MIN_LENGTH,
                                         message=_('Reference must contain at least '
                                                   f'{DJANGO_ACCOUNT_LEDGER_REFERENCE_MIN_LENGTH} characters.'))
                                 ],
                                 verbose_name=_('Reference'))
    description = models.TextField(blank=True, null=True, verbose_name=_('Description'))

    account = models.ForeignKey('django_account_ledger.AccountModel',
                                on_delete=models.RESTRICT,
                                related_name='account_ledgers',
                                verbose_name=_('Account'))
    counter_account = models.ForeignKey('django_account_ledger.AccountModel',
                                        on_delete=models.RESTRICT,
                                        null=True,
                                        blank=True,
                                        related_name='counter_account_ledgers',
                                        verbose_name=_('Counter Account'))
    transaction = models.ForeignKey('django_account_ledger.TransactionModel',
                                    on_delete=models.RESTRICT,
                                    null=True,
                                    blank=True,
                                    related_name='account_ledgers',
                                    verbose_name=_('Transaction'))
    currency = models.ForeignKey('django_account_ledger.CurrencyModel',
                                 on_delete=models.RESTRICT,
                                 blank=True,
                                 verbose_name=_('Currency'))

    exchange_rate = models.DecimalField(max_digits=14,
                                        decimal_places=DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES,
                                        default=Decimal('1'),
                                        verbose_name=_('Exchange Rate'))
    amount = models.DecimalField(max_digits=20,
                                 decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                 verbose_name=_('Amount'))
    interests_penalties = models.DecimalField(max_digits=20,
                                              decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                              default=0,
                                              verbose_name=_('Interests & Penalties'))

    active = models.BooleanField(default=True, verbose_name=_('Active'))
    conciliation = models.BooleanField(default=False, verbose_name=_('Conciliation'))

    creator = models.ForeignKey(UserModel,
                                on_delete=models.SET_NULL,
                                null=True,
                                blank=True,
                                related_name='created_account_ledgers',
                                verbose_name=_('Creator'))
    approver = models.ForeignKey(UserModel,
                                 on_delete=models.SET_NULL,
                                 null=True,
                                 blank=True,
                                 related_name='approved_account_ledgers',
                                 verbose_name=_('Approver'))
    approver_timestamp = models.DateTimeField(null=True, blank=True, verbose_name=_('Approver Timestamp'))
    nuller = models.ForeignKey(UserModel,
                               on_delete=models.SET_NULL,
                               null=True,
                               blank=True,
                               related_name='nulled_account_ledgers',
                               verbose_name=_('Nuller'))
    nuller_timestamp = models.DateTimeField(null=True, blank=True, verbose_name=_('Nuller Timestamp'))

    objects = AccountLedgerModelManager.from_queryset(queryset_class=AccountLedgerModelQuerySet)()

    class Meta:
        abstract = True
        ordering = ['-date', '-created']
        verbose_name = _('Account Ledger')
        verbose_name_plural = _('Account Ledgers')
        indexes = [
            models.Index(fields=['account']),
            models.Index(fields=['counter_account']),
            models.Index(fields=['transaction']),
            models.Index(fields=['active', 'conciliation']),
            models.Index(fields=['date']),
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._payment = False
        self.payment_errors = dict()

    def __str__(self):
        return f'AccountLedger {self.reference}: {self.operation} {self.amount} ' \
               f'(active={self.active}, conciliation={self.conciliation})'

    # ## Logging ###
    def get_logger_name(self):
        return f'AccountLedgerModel {self.uuid}'

    # ## Payment ###
    def set_payment(self, is_payment: bool = True):
        self._payment = is_payment

    def is_payment(self) -> bool:
        return self._payment is True

    # ## State ###
    def is_pending(self) -> bool:
        return self.active is True and self.conciliation is False

    def is_conciliated(self) -> bool:
        return self.active is True and self.conciliation is True

    def is_nulled(self) -> bool:
        return self.active is False

    def can_conciliate(self) -> bool:
        """Determines if the entry can be conciliated."""
        return all([
            self.active,
            not self.conciliation
        ])

    def can_null(self) -> bool:
        """Determines if the entry can be nulled."""
        return all([
            self.active,
            not self.conciliation
        ])

    def can_destroy(self) -> bool:
        """Only pending entries can be deleted."""
        return self.can_null()

    def is_operation(self, kind: Union[OperationEnum, str]) -> bool:
        return is_operation(self, kind)

    def is_in(self) -> bool:
        return self.is_operation(OperationEnum.IN)

    def is_out(self) -> bool:
        return self.is_operation(OperationEnum.OUT)

    def is_trans(self) -> bool:
        return self.is_operation(OperationEnum.TRANS)

    # ## Amounts ###
    @property
    def amount_in_home_currency(self) -> Decimal:
        """
        The amount converted by the exchange rate. Zero if either is missing.
        """
        return convert_amount(self.amount, self.exchange_rate)

    def get_direction(self, account) -> Optional[str]:
        """
        Determines if the movement is incoming or outgoing from the perspective of an account.

        Parameters
        ----------
        account: AccountModel, UUID or str
            The perspective account.

        Returns
        -------
        str
            in or out. None if the account is not involved in the movement.
        """
        account_uuid = get_account_uuid(account)
        if account_uuid == self.account_id and self.amount > 0:
            return OPERATION_IN
        elif account_uuid == self.account_id and self.amount < 0:
            return OPERATION_OUT
        elif account_uuid == self.counter_account_id and self.amount > 0:
            return OPERATION_OUT
        # counter account movements never read as "in".
        return None

    def get_signed_amount(self, account) -> Decimal:
        """
        The value of the movement from the perspective of an account.

        Parameters
        ----------
        account: AccountModel, UUID or str
            The perspective account.

        Returns
        -------
        Decimal
            The amount for the entry account. The negated converted amount for any other account.
        """
        if get_account_uuid(account) == self.account_id:
            return self.amount
        return -self.amount * self.exchange_rate

    def get_related_account(self, account):
        """
        The other party of the movement from the perspective of an account.

        Returns
        -------
        TransactionModel or AccountModel
            The TransactionModel if the entry pays one, else the account on the other side of the movement.
        """
        if self.transaction_id:
            return self.transaction
        elif get_account_uuid(account) == self.account_id:
            return self.counter_account
        return self.account

    def get_selected_account(self, account):
        if get_account_uuid(account) == self.account_id:
            return self.account
        return self.counter_account

    def get_payment_link_account(self):
        """
        The account a payment link points to: the entry account when it is a money store, else the counter account.
        """
        if self.account.is_money_store():
            return self.account
        return self.counter_account

    def get_payment_link_account_id(self) -> Optional[UUID]:
        if self.account.is_money_store():
            return self.account_id
        return self.counter_account_id

    def show_exchange_rate(self) -> bool:
        if not self.counter_account_id or not self.account_id:
            return False
        return self.account.currency_id != self.counter_account.currency_id

    # ## State Transitions ###
    def get_details(self):
        return self.details.all()

    def lock_for_update(self):
        """
        Re-reads the entry state from the database, locking the row until the current database transaction ends.
        Must be called inside an atomic block.
        """
        locked_model = self.__class__.objects.select_for_update().only(
            'uuid', 'active', 'conciliation'
        ).get(uuid__exact=self.uuid)
        self.active = locked_model.active
        self.conciliation = locked_model.conciliation
        return locked_model

    def is_persisted(self) -> bool:
        return not self._state.adding

    def mark_as_conciliated(self, user_model, raise_exception: bool = False, **kwargs) -> bool:
        """
        Conciliated entries have been approved against an external record and cannot change state anymore.

        Parameters
        ----------
        user_model
            The user approving the entry.
        raise_exception: bool
            Raises AccountLedgerStateError if the entry cannot be conciliated. Defaults to False.
        kwargs: dict
            Additional keyword arguments passed to the signal.

        Returns
        -------
        bool
            True if the entry was conciliated.
        """
        if not self.is_persisted():
            self.send_log(msg=f'Account Ledger {self.uuid} must be saved before it is conciliated.',
                          level=logging.WARNING)
            if raise_exception:
                raise AccountLedgerStateError(
                    message=_(f'Account Ledger {self.uuid} must be saved before it is conciliated.'),
                    code='not_persisted'
                )
            return False

        with transaction.atomic():
            self.lock_for_update()

            if not self.can_conciliate():
                self.send_log(msg=f'Account Ledger {self.uuid} cannot be conciliated.', level=logging.WARNING)
                if raise_exception:
                    raise AccountLedgerStateError(
                        message=_(f'Account Ledger {self.uuid} cannot be conciliated. '
                                  f'Active: {self.active}, Conciliation: {self.conciliation}.'),
                        code='invalid_state'
                    )
                return False

            self.approver_timestamp = get_localtime()
            self.approver = user_model

            if self.transaction_id:
                self.transaction.conciliate_linked_entry(self, user_model)
            else:
                self.conciliation = True
                details = list(self.get_details())
                for detail_model in details:
                    detail_model.state = DETAIL_STATE_CONCILIATED
                self.save(validate=False)
                for detail_model in details:
                    detail_model.save(update_fields=['state', 'updated'])

        account_ledger_conciliated.send_robust(sender=self.__class__,
                                               instance=self,
                                               user_model=user_model,
                                               **kwargs)
        return True

    def conciliate(self, user_model, **kwargs) -> bool:
        """
        Proxy function for `mark_as_conciliated` method.
        """
        return self.mark_as_conciliated(user_model=user_model, **kwargs)

    def mark_as_nulled(self, user_model, raise_exception: bool = False, **kwargs) -> bool:
        """
        Nulled entries have been reversed. Only pending entries can be nulled.

        Parameters
        ----------
        user_model
            The user nulling the entry.
        raise_exception: bool
            Raises AccountLedgerStateError if the entry cannot be nulled. Defaults to False.
        kwargs: dict
            Additional keyword arguments passed to the signal.

        Returns
        -------
        bool
            True if the entry was nulled.
        """
        if not self.is_persisted():
            self.send_log(msg=f'Account Ledger {self.uuid} must be saved before it is nulled.',
                          level=logging.WARNING)
            if raise_exception:
                raise AccountLedgerStateError(
                    message=_(f'Account Ledger {self.uuid} must be saved before it is nulled.'),
                    code='not_persisted'
                )
            return False

        with transaction.atomic():
            self.lock_for_update()

            if not self.can_null():
                self.send_log(msg=f'Account Ledger {self.uuid} cannot be nulled.', level=logging.WARNING)
                if raise_exception:
                    raise AccountLedgerStateError(
                        message=_(f'Account Ledger {self.uuid} cannot be nulled. '
                                  f'Active: {self.active}, Conciliation: {self.conciliation}.'),
                        code='invalid_state'
                    )
                return False

            self.nuller_timestamp = get_localtime()
            self.nuller = user_model
            self.active = False

            details = list(self.get_details())
            for detail_model in details:
                detail_model.state = DETAIL_STATE_NULLED
                detail_model.active = False

            if self.transaction_id:
                self.transaction.null_linked_entry(self, user_model)
            else:
                self.save(validate=False)

            for detail_model in details:
                detail_model.save(update_fields=['state', 'active', 'updated'])

        account_ledger_nulled.send_robust(sender=self.__class__,
                                          instance=self,
                                          user_model=user_model,
                                          **kwargs)
        return True

    def null(self, user_model, **kwargs) -> bool:
        """
        Proxy function for `mark_as_nulled` method.
        """
        return self.mark_as_nulled(user_model=user_model, **kwargs)

    # ## Validation ###
    def clean(self):
        if not self.currency_id and self.account_id:
            self.currency_id = self.account.currency_id

        errors = dict()

        if not self.currency_id:
            errors['currency'] = [_('Currency is required.')]
        if not self.counter_account_id:
            errors['counter_account'] = [_('Counter account is required.')]
        elif self.counter_account_id == self.account_id:
            errors['counter_account'] = [_('Counter account must be different than the account.')]
        if self.amount is not None and self._state.adding and self.amount <= 0:
            errors['amount'] = [_('Amount must be greater than zero.')]
        if self.exchange_rate is None or self.exchange_rate <= 0:
            errors['exchange_rate'] = [_('Exchange rate must be greater than zero.')]
        if self.interests_penalties is not None and self.interests_penalties < 0:
            errors['interests_penalties'] = [_('Interests & penalties cannot be negative.')]

        if errors:
            raise AccountLedgerValidationError(errors)

    def validate(self, raise_exception: bool = True) -> bool:
        """
        Validates every field of the entry, including the lifecycle independent invariants.

        Parameters
        ----------
        raise_exception: bool
            Raises AccountLedgerValidationError with the errors keyed by field if not valid. Defaults to True.

        Returns
        -------
        bool
            True if the entry is valid.
        """
        try:
            self.full_clean(validate_unique=False)
        except ValidationError as e:
            if raise_exception:
                raise AccountLedgerValidationError(e.message_dict)
            return False
        return True

    def save(self, validate: bool = True, *args, **kwargs):
        if validate:
            self.validate(raise_exception=True)
        return super().save(*args, **kwargs)

    def delete(self, **kwargs):
        if not self.can_destroy():
            raise AccountLedgerStateError(
                message=_(f'Account Ledger {self.uuid} cannot be deleted because it is not pending.'),
                code='invalid_state'
            )
        return super().delete(**kwargs)


class AccountLedgerModel(AccountLedgerModelAbstract):
    """
    Account Ledger Model Base Class From Abstract
    """

    class Meta(AccountLedgerModelAbstract.Meta):
        abstract = False


class AccountLedgerDetailModelAbstract(CreateUpdateMixIn):
    """
    A detail line of an AccountLedgerModel. Its state mirrors the state of the owning entry.

    Attributes
    ----------
    uuid : UUID
        The primary key of the detail.
    account_ledger : AccountLedgerModel
        The owning entry.
    account : AccountModel
        The account affected by the line.
    currency : CurrencyModel
        The currency of the line.
    amount : Decimal
        The signed amount of the line.
    exchange_rate : Decimal
        The factor converting the amount into the home currency of the account.
    state : str
        One of uncon, con or nulled.
    active : bool
        False once the owning entry has been nulled.
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    account_ledger = models.ForeignKey('django_account_ledger.AccountLedgerModel',
                                       on_delete=models.CASCADE,
                                       related_name='details',
                                       verbose_name=_('Account Ledger'))
    account = models.ForeignKey('django_account_ledger.AccountModel',
                                on_delete=models.RESTRICT,
                                related_name='account_ledger_details',
                                verbose_name=_('Account'))
    currency = models.ForeignKey('django_account_ledger.CurrencyModel',
                                 on_delete=models.RESTRICT,
                                 null=True,
                                 blank=True,
                                 verbose_name=_('Currency'))
    amount = models.DecimalField(max_digits=20,
                                 decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                 verbose_name=_('Amount'))
    exchange_rate = models.DecimalField(max_digits=14,
                                        decimal_places=DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES,
                                        default=Decimal('1'),
                                        verbose_name=_('Exchange Rate'))
    state = models.CharField(max_length=10,
                             choices=DETAIL_STATES,
                             default=DETAIL_STATE_PENDING,
                             verbose_name=_('State'))
    active = models.BooleanField(default=True, verbose_name=_('Active'))

    class Meta:
        abstract = True
        ordering = ['created']
        verbose_name = _('Account Ledger Detail')
        verbose_name_plural = _('Account Ledger Details')

    def __str__(self):
        return f'AccountLedgerDetail {self.account_id}: {self.amount} ({self.state})'

    @property
    def amount_in_home_currency(self) -> Decimal:
        return convert_amount(self.amount, self.exchange_rate)


class AccountLedgerDetailModel(AccountLedgerDetailModelAbstract):
    """
    Account Ledger Detail Model Base Class From Abstract
    """

    class Meta(AccountLedgerDetailModelAbstract.Meta):
        abstract = False
