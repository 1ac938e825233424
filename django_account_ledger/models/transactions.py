"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

A TransactionModel is a financial transaction of the organization, an income, an expense or a buy, owed by or to a
contact account. Its outstanding balance is settled by payments, which are AccountLedgerModels linked to it (see
PaymentMixIn). Credit transactions may split their balance into an installment schedule of PayPlanModels.

A TransactionModel goes through the following states:

    * Draft: the transaction is being prepared and cannot receive payments.
    * Approved: the transaction is open and accepts payments until its balance reaches zero.
    * Paid: the balance has been fully settled.
    * Nulled: the transaction has been voided.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_DOWN
from typing import List, Optional
from uuid import uuid4

from dateutil.relativedelta import relativedelta
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Manager, QuerySet
from django.utils.translation import gettext_lazy as _

from django_account_ledger.io.io_core import get_localdate
from django_account_ledger.models.account_ledger import (
    OPERATION_IN,
    OPERATION_OUT,
    DETAIL_STATE_CONCILIATED
)
from django_account_ledger.models.mixins import CreateUpdateMixIn, MarkdownNotesMixIn, LoggingMixIn
from django_account_ledger.models.payments import PaymentMixIn
from django_account_ledger.settings import (
    DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
    DJANGO_ACCOUNT_LEDGER_PAY_PLAN_ALERT_DAYS
)

__all__ = [
    'TX_INCOME',
    'TX_EXPENSE',
    'TX_BUY',
    'TX_TYPES',
    'TransactionModelValidationError',
    'TransactionModelQuerySet',
    'TransactionModelManager',
    'TransactionModelAbstract',
    'TransactionModel',
]

TX_INCOME = 'income'
TX_EXPENSE = 'expense'
TX_BUY = 'buy'

TX_TYPES = [
    (TX_INCOME, _('Income')),
    (TX_EXPENSE, _('Expense')),
    (TX_BUY, _('Buy')),
]


class TransactionModelValidationError(ValidationError):
    pass


class TransactionModelQuerySet(QuerySet):
    """
    A custom defined QuerySet for the TransactionModel.
    """

    def draft(self):
        return self.filter(state__exact=TransactionModel.STATE_DRAFT)

    def approved(self):
        return self.filter(state__exact=TransactionModel.STATE_APPROVED)

    def paid(self):
        return self.filter(state__exact=TransactionModel.STATE_PAID)

    def credit(self):
        return self.filter(credit=True)

    def overdue(self, as_of: Optional[date] = None):
        """
        Approved transactions whose next payment date is in the past.

        Parameters
        ----------
        as_of: date
            The reference date. Defaults to the local date.

        Returns
        -------
        TransactionModelQuerySet
            A filtered TransactionModelQuerySet.
        """
        if not as_of:
            as_of = get_localdate()
        return self.approved().filter(payment_date__lt=as_of)


class TransactionModelManager(Manager):

    def for_account(self, account_model):
        return self.get_queryset().filter(account=account_model)


class TransactionModelAbstract(CreateUpdateMixIn, MarkdownNotesMixIn, PaymentMixIn, LoggingMixIn):
    """
    Abstract base model for financial transactions.

    Attributes
    ----------
    uuid : UUID
        The primary key of the transaction.
    ref_number : str
        The human readable reference of the transaction.
    tx_type : str
        One of income, expense or buy. Determines the operation of its payments and their canonical counter account.
    state : str
        One of draft, approved, paid or nulled.
    date : date
        The date of the transaction.
    account : AccountModel
        The contact account the transaction is owed by or to.
    currency : CurrencyModel
        The currency of the transaction.
    total : Decimal
        The total amount of the transaction.
    balance : Decimal
        The outstanding amount. Decremented by every committed payment.
    credit : bool
        Credit transactions are settled through an installment schedule of PayPlanModels.
    payment_date : date
        The due date of the next installment.
    description : str
        A free text description.
    """
    STATE_DRAFT = 'draft'
    STATE_APPROVED = 'approved'
    STATE_PAID = 'paid'
    STATE_NULLED = 'nulled'

    TX_STATES = [
        (STATE_DRAFT, _('Draft')),
        (STATE_APPROVED, _('Approved')),
        (STATE_PAID, _('Paid')),
        (STATE_NULLED, _('Nulled')),
    ]

    PAYMENT_DESCRIPTION_TYPES = {
        TX_INCOME: (_('Collection'), _('Income')),
        TX_EXPENSE: (_('Payment'), _('Expense')),
        TX_BUY: (_('Payment'), _('Buy')),
    }

    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    ref_number = models.CharField(max_length=20, verbose_name=_('Reference Number'))
    tx_type = models.CharField(max_length=10, choices=TX_TYPES, verbose_name=_('Transaction Type'))
    state = models.CharField(max_length=10, choices=TX_STATES, default=STATE_DRAFT, verbose_name=_('State'))
    date = models.DateField(default=get_localdate, verbose_name=_('Date'))
    account = models.ForeignKey('django_account_ledger.AccountModel',
                                on_delete=models.RESTRICT,
                                related_name='transactions',
                                verbose_name=_('Account'))
    currency = models.ForeignKey('django_account_ledger.CurrencyModel',
                                 on_delete=models.RESTRICT,
                                 verbose_name=_('Currency'))
    total = models.DecimalField(max_digits=20,
                                decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                default=0,
                                verbose_name=_('Total'))
    balance = models.DecimalField(max_digits=20,
                                  decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                  default=0,
                                  verbose_name=_('Balance'))
    credit = models.BooleanField(default=False, verbose_name=_('Credit'))
    payment_date = models.DateField(null=True, blank=True, verbose_name=_('Payment Date'))
    description = models.TextField(blank=True, null=True, verbose_name=_('Description'))

    objects = TransactionModelManager.from_queryset(queryset_class=TransactionModelQuerySet)()

    class Meta:
        abstract = True
        ordering = ['-date', '-created']
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        indexes = [
            models.Index(fields=['tx_type', 'state']),
            models.Index(fields=['account']),
            models.Index(fields=['payment_date']),
        ]

    def __str__(self):
        return f'{self.get_tx_type_display()} {self.ref_number}: {self.balance}/{self.total} ({self.state})'

    def get_logger_name(self):
        return f'TransactionModel {self.uuid}'

    # ## State ###
    def is_draft(self) -> bool:
        return self.state == self.STATE_DRAFT

    def is_approved(self) -> bool:
        return self.state == self.STATE_APPROVED

    def is_paid(self) -> bool:
        return self.state == self.STATE_PAID

    def is_nulled(self) -> bool:
        return self.state == self.STATE_NULLED

    def is_credit(self) -> bool:
        return self.credit is True

    def can_approve(self) -> bool:
        return self.is_draft()

    def can_pay(self) -> bool:
        """
        Determines if the transaction accepts payments.

        Returns
        -------
        bool
            True if the transaction is neither a draft, paid nor nulled.
        """
        return all([
            not self.is_draft(),
            not self.is_paid(),
            not self.is_nulled()
        ])

    def get_payment_operation(self) -> str:
        """
        Income transactions are collected, every other transaction type is paid out.
        """
        if self.tx_type == TX_INCOME:
            return OPERATION_IN
        return OPERATION_OUT

    def get_unpaid_pay_plans(self):
        return self.pay_plans.unpaid().in_payment_order()

    # ## State Transitions ###
    def mark_as_approved(self, commit: bool = False, raise_exception: bool = True, **kwargs) -> bool:
        """
        Approves a draft transaction, which opens it for payments. The balance is initialized to the total.

        Parameters
        ----------
        commit: bool
            Saves the transaction. Defaults to False.
        raise_exception: bool
            Raises TransactionModelValidationError if the transaction cannot be approved. Defaults to True.

        Returns
        -------
        bool
            True if the transaction was approved.
        """
        if not self.can_approve():
            if raise_exception:
                raise TransactionModelValidationError(
                    message=_(f'Transaction {self.ref_number} cannot be approved. State: {self.state}.'),
                    code='invalid_state'
                )
            return False

        self.state = self.STATE_APPROVED
        self.balance = self.total
        if commit:
            self.save(update_fields=['state', 'balance', 'updated'])
        self.send_log(msg=f'Transaction {self.uuid} approved.', level=logging.INFO)
        return True

    def conciliate_linked_entry(self, account_ledger_model, user_model) -> bool:
        """
        Conciliates a payment of this transaction. The transaction balance is not affected.
        """
        account_ledger_model.conciliation = True
        details = list(account_ledger_model.get_details())
        for detail_model in details:
            detail_model.state = DETAIL_STATE_CONCILIATED
        account_ledger_model.save(validate=False)
        for detail_model in details:
            detail_model.save(update_fields=['state', 'updated'])
        return True

    def null_linked_entry(self, account_ledger_model, user_model) -> bool:
        """
        Reverses a payment of this transaction. The payment amount is added back to the balance and a paid
        transaction is reopened. Pay plans covered by the payment keep their paid flag.
        Must be called inside an atomic block.
        """
        self.lock_for_update()
        self.balance += account_ledger_model.amount
        if self.is_paid() and self.balance > 0:
            self.state = self.STATE_APPROVED
        account_ledger_model.save(validate=False)
        self.save(update_fields=['balance', 'state', 'updated'])
        return True

    # ## Pay Plans ###
    def build_pay_plans(self,
                        n_payments: int,
                        start_date: Optional['date'] = None,
                        months_between: int = 1,
                        interests_penalties: Decimal = Decimal('0'),
                        email: Optional[str] = None,
                        commit: bool = True) -> List:
        """
        Splits the outstanding balance of a credit transaction into an installment schedule.

        Parameters
        ----------
        n_payments: int
            The number of installments. Must be at least 1.
        start_date: date
            The due date of the first installment. Defaults to the local date.
        months_between: int
            Months between consecutive due dates. Defaults to 1.
        interests_penalties: Decimal
            Interests & penalties charged on each installment. Defaults to zero.
        email: str
            The notification target of every installment.
        commit: bool
            Saves the installments and the next payment date of the transaction. Defaults to True.

        Returns
        -------
        list
            The PayPlanModels, in payment date order. Their amounts add up to the balance, the last installment
            absorbs the rounding remainder.
        """
        if not self.is_credit():
            raise TransactionModelValidationError(
                message=_(f'Transaction {self.ref_number} is not a credit transaction.'),
                code='not_credit'
            )
        if n_payments < 1 or months_between < 1:
            raise TransactionModelValidationError(
                message=_('At least one installment is required, spaced at least one month apart.'),
                code='invalid_schedule'
            )

        quantum = Decimal('1').scaleb(-DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES)
        installment = (self.balance / n_payments).quantize(quantum, rounding=ROUND_DOWN)
        if installment <= 0:
            raise TransactionModelValidationError(
                message=_(f'Balance {self.balance} cannot be split into {n_payments} installments.'),
                code='invalid_schedule'
            )

        if not start_date:
            start_date = get_localdate()

        pay_plan_model_class = self.pay_plans.model
        pay_plans = list()
        for i in range(n_payments):
            payment_date = start_date + relativedelta(months=i * months_between)
            amount = installment if i < n_payments - 1 else self.balance - installment * (n_payments - 1)
            pay_plans.append(pay_plan_model_class(
                transaction=self,
                amount=amount,
                interests_penalties=interests_penalties,
                payment_date=payment_date,
                alert_date=payment_date - timedelta(days=DJANGO_ACCOUNT_LEDGER_PAY_PLAN_ALERT_DAYS),
                currency_id=self.currency_id,
                email=email
            ))
        self.payment_date = pay_plans[0].payment_date

        if commit:
            with transaction.atomic():
                if self.pay_plans.unpaid().exists():
                    raise TransactionModelValidationError(
                        message=_(f'Transaction {self.ref_number} already has unpaid installments.'),
                        code='invalid_schedule'
                    )
                for pay_plan_model in pay_plans:
                    pay_plan_model.full_clean()
                pay_plan_model_class.objects.bulk_create(pay_plans)
                self.save(update_fields=['payment_date', 'updated'])
        return pay_plans

    def clean(self):
        if self.total is not None and self.total < 0:
            raise TransactionModelValidationError({'total': _('Total cannot be negative.')})
        if self.balance is not None and self.total is not None and self.balance > self.total:
            raise TransactionModelValidationError({'balance': _('Balance cannot be greater than the total.')})


class TransactionModel(TransactionModelAbstract):
    """
    Base Transaction Model from Abstract.
    """

    class Meta(TransactionModelAbstract.Meta):
        abstract = False
