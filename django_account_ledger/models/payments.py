"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

The PaymentMixIn implements the payment workflow of a TransactionModel in two explicit steps:

    1. create_payment builds an unsaved AccountLedgerModel for the transaction, with the amount defaulting to the next
       unpaid pay plan (credit transactions) or to the outstanding balance.
    2. commit_payment validates the entry against the outstanding balance, resolves its counter account and its
       conciliation policy, allocates the amount across the pay plans of credit transactions, decrements the balance
       and writes the entry, the pay plans and the transaction in a single database transaction.

Every guard is evaluated again against rows locked with select_for_update inside the database transaction, so two
concurrent payments cannot both be applied against the same outstanding balance.
"""
import logging
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError, NON_FIELD_ERRORS
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from django_account_ledger.exceptions import (
    AccountLedgerValidationError,
    AmountExceedsBalanceError,
    CurrencyConfigurationError,
    PaymentNotAllowedError
)
from django_account_ledger.io.allocation import allocate_pay_plans, PayPlanAllocation
from django_account_ledger.io.io_core import to_decimal
from django_account_ledger.models.signals import payment_committed, transaction_paid
from django_account_ledger.models.utils import lazy_loader
from django_account_ledger.settings import (
    DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES,
    DJANGO_ACCOUNT_LEDGER_RECORD_HISTORY
)

__all__ = [
    'PaymentMixIn',
]


class PaymentMixIn:
    """
    Implements the payment allocation functionality of a TransactionModel.
    The model using this mixin must define balance, state, tx_type, account, currency, ref_number, payment_date and
    the pay_plans reverse relation.
    """

    PAYMENT_DESCRIPTION_TYPES = dict()

    def get_current_payment(self):
        return getattr(self, '_current_payment', None)

    def is_payment(self) -> bool:
        return self.get_current_payment() is not None

    def get_payment_params(self, params: dict) -> dict:
        """
        Fills the amount and interests of a payment when not provided.

        Credit transactions default to the next unpaid pay plan, amount plus interests & penalties. Any other
        transaction defaults to its outstanding balance.
        """
        params = dict(params)
        if self.is_credit():
            pay_plan_model = self.get_unpaid_pay_plans().first()
            if pay_plan_model:
                if params.get('amount') is None:
                    params['amount'] = pay_plan_model.amount + pay_plan_model.interests_penalties
                if params.get('interests_penalties') is None:
                    params['interests_penalties'] = pay_plan_model.interests_penalties

        if params.get('amount') is None:
            params['amount'] = self.balance

        params['amount'] = to_decimal(params['amount'])
        if params.get('interests_penalties') is not None:
            params['interests_penalties'] = to_decimal(params['interests_penalties'])
        else:
            params.pop('interests_penalties', None)
        return params

    def set_payment_exchange_rate(self, account_ledger_model):
        """
        Home currency movements on organization accounts need no conversion.
        """
        if not account_ledger_model.account_id:
            return
        account_model = account_ledger_model.account
        if account_model.currency_id == self.currency_id and not account_model.is_contact():
            account_ledger_model.exchange_rate = Decimal('1')

    def get_payment_description(self, account_ledger_model) -> str:
        """
        Composes the description of a payment entry, e.g. "Collection of Income I-00001, account Main Bank".
        An exchange rate annotation is appended when the entry currency differs from the transaction currency.
        """
        pay_type, tx_class = self.PAYMENT_DESCRIPTION_TYPES.get(self.tx_type, (_('Payment'), _('Transaction')))
        account_name = account_ledger_model.account.name if account_ledger_model.account_id else ''

        description = _('%(pay_type)s of %(trans)s %(ref)s, account %(account)s') % {
            'pay_type': pay_type,
            'trans': tx_class,
            'ref': self.ref_number,
            'account': account_name
        }

        if account_ledger_model.currency_id and account_ledger_model.currency_id != self.currency_id:
            rate = account_ledger_model.exchange_rate
            description += ' ' + _('exchange rate %(cur1)s = %(cur2)s') % {
                'cur1': f'{self.currency.symbol} 1',
                'cur2': f'{account_ledger_model.currency.symbol} '
                        f'{rate:,.{DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES}f}'
            }
        return description

    def create_payment(self, user_model, raise_exception: bool = False, **params):
        """
        Builds a new payment AccountLedgerModel for the transaction. Nothing is saved.

        Parameters
        ----------
        user_model
            The user creating the payment.
        raise_exception: bool
            Raises PaymentNotAllowedError if the transaction cannot be paid. Defaults to False.
        params
            AccountLedgerModel fields. The counter account is always resolved on commit and is ignored here.

        Returns
        -------
        AccountLedgerModel
            The unsaved payment entry, None if the transaction is a draft or is already paid.
        """
        if not self.can_pay():
            self.send_log(msg=f'Transaction {self.uuid} cannot receive payments. State: {self.state}.',
                          level=logging.WARNING)
            if raise_exception:
                raise PaymentNotAllowedError(
                    message=_(f'Transaction {self.ref_number} cannot receive payments. State: {self.state}.'),
                    code='invalid_state'
                )
            return None

        params = self.get_payment_params(params)
        params.pop('counter_account', None)
        params.pop('counter_account_id', None)
        params.pop('transaction', None)
        params.pop('transaction_id', None)

        if not params.get('account') and not params.get('account_id'):
            params['account'] = self.account
        if not params.get('currency') and not params.get('currency_id'):
            params['currency'] = self.currency
        if not params.get('reference'):
            params['reference'] = self.ref_number

        account_ledger_model = lazy_loader.get_account_ledger_model()(
            transaction=self,
            operation=self.get_payment_operation(),
            **params
        )
        account_ledger_model.creator = user_model
        account_ledger_model.set_payment(True)
        self.set_payment_exchange_rate(account_ledger_model)
        self._current_payment = account_ledger_model
        return account_ledger_model

    def new_payment(self, user_model, **params):
        """
        Proxy function for `create_payment` method.
        """
        return self.create_payment(user_model=user_model, **params)

    def lock_for_update(self):
        """
        Re-reads balance, state and payment date from the database, locking the row until the current database
        transaction ends. Must be called inside an atomic block.
        """
        locked_model = self.__class__.objects.select_for_update().only(
            'uuid', 'balance', 'state', 'payment_date'
        ).get(uuid__exact=self.uuid)
        self.balance = locked_model.balance
        self.state = locked_model.state
        self.payment_date = locked_model.payment_date
        return locked_model

    def validate_payment_amount(self, account_ledger_model):
        if account_ledger_model.amount is None:
            raise AccountLedgerValidationError({'amount': [_('Amount is required.')]})
        if account_ledger_model.amount > self.balance:
            raise AmountExceedsBalanceError(
                {'amount': [
                    ValidationError(
                        _(f'Amount {account_ledger_model.amount} exceeds the balance {self.balance}.'),
                        code='amount_exceeds_balance'
                    )
                ]}
            )

    def resolve_payment_counter_account(self, account_ledger_model):
        if account_ledger_model.account_id == self.account_id:
            counter_account_model = lazy_loader.get_account_model().objects.canonical_for(tx_type=self.tx_type)
            if not counter_account_model:
                raise CurrencyConfigurationError({
                    'counter_account': [_(f'No active {self.tx_type} organization account configured.')]
                })
            account_ledger_model.counter_account = counter_account_model
        else:
            account_ledger_model.counter_account = self.account

    def allocate_payment(self, account_ledger_model) -> PayPlanAllocation:
        """
        Applies the full payment amount to the unpaid pay plans of the transaction in payment date order. Interests
        & penalties are informational and do not reduce the allocated amount. Pay plans are locked until the current
        database transaction ends.

        Every visited pay plan is marked as paid. When the payment falls short of the last visited pay plan, a new
        unpaid pay plan is created for the uncovered amount, keeping the due date, alert date, interests, email and
        currency of the partially covered pay plan.

        Returns
        -------
        PayPlanAllocation
            The allocation result.
        """
        pay_plans = list(self.pay_plans.select_for_update().unpaid().in_payment_order())
        allocation = allocate_pay_plans(pay_plans, account_ledger_model.amount)

        if allocation.payment_date:
            self.payment_date = allocation.payment_date

        for pay_plan_model in allocation.paid_rows:
            pay_plan_model.save(update_fields=['paid', 'updated'])

        if allocation.has_leftover():
            current_pay_plan = allocation.current_row
            self.pay_plans.create(
                payment_date=current_pay_plan.payment_date,
                alert_date=current_pay_plan.alert_date,
                amount=allocation.leftover_amount,
                interests_penalties=current_pay_plan.interests_penalties,
                email=current_pay_plan.email,
                currency_id=current_pay_plan.currency_id or self.currency_id,
                paid=False
            )
        return allocation

    def commit_payment(self, account_ledger_model=None, user_model=None, raise_exception: bool = False) -> bool:
        """
        Validates and writes a payment built by create_payment.

        Parameters
        ----------
        account_ledger_model: AccountLedgerModel
            The payment entry. Defaults to the last entry built by create_payment.
        user_model
            The user committing the payment.
        raise_exception: bool
            Raises the validation error if the payment cannot be committed. Defaults to False. When False, the errors
            keyed by field are available on account_ledger_model.payment_errors.

        Returns
        -------
        bool
            True if the payment was committed. On failure nothing is written.
        """
        if account_ledger_model is None:
            account_ledger_model = self.get_current_payment()

        if account_ledger_model is None or not account_ledger_model.is_payment():
            if raise_exception:
                raise PaymentNotAllowedError(
                    message=_('No payment has been created for this transaction.'),
                    code='no_payment'
                )
            return False

        try:
            with transaction.atomic():
                allocation = self._commit_payment(account_ledger_model, user_model)
        except ValidationError as e:
            self.refresh_from_db(fields=['balance', 'state', 'payment_date'])
            account_ledger_model.payment_errors = e.message_dict if hasattr(e, 'error_dict') else {
                NON_FIELD_ERRORS: e.messages
            }
            self.send_log(msg=f'Payment on transaction {self.uuid} failed: {e.messages}', level=logging.WARNING)
            if raise_exception:
                raise e
            return False

        self.send_log(msg=f'Payment of {account_ledger_model.amount} committed on transaction {self.uuid}.',
                      level=logging.INFO)
        payment_committed.send_robust(sender=self.__class__,
                                      instance=self,
                                      account_ledger_model=account_ledger_model,
                                      allocation=allocation,
                                      user_model=user_model)
        if self.is_paid():
            transaction_paid.send_robust(sender=self.__class__,
                                         instance=self,
                                         user_model=user_model)
        account_ledger_model.set_payment(False)
        self._current_payment = None
        return True

    def save_payment(self, user_model, **kwargs) -> bool:
        """
        Proxy function for `commit_payment` method.
        """
        return self.commit_payment(user_model=user_model, **kwargs)

    def _commit_payment(self, account_ledger_model, user_model) -> Optional[PayPlanAllocation]:
        self.lock_for_update()

        if account_ledger_model.is_persisted() or account_ledger_model.transaction_id != self.uuid:
            raise PaymentNotAllowedError(
                message=_(f'Payment {account_ledger_model.uuid} is not a new payment of transaction {self.ref_number}.'),
                code='invalid_payment'
            )

        if not self.can_pay():
            raise PaymentNotAllowedError(
                message=_(f'Transaction {self.ref_number} cannot receive payments. State: {self.state}.'),
                code='invalid_state'
            )

        self.set_payment_exchange_rate(account_ledger_model)
        self.validate_payment_amount(account_ledger_model)
        self.resolve_payment_counter_account(account_ledger_model)
        account_ledger_model.conciliation = account_ledger_model.account.get_conciliation()
        account_ledger_model.description = self.get_payment_description(account_ledger_model)
        if user_model is not None and not account_ledger_model.creator_id:
            account_ledger_model.creator = user_model
        account_ledger_model.validate(raise_exception=True)

        history_model = lazy_loader.get_history_model()
        before = history_model.snapshot(self)
        before_pay_plans = history_model.snapshot_rows(self.pay_plans.all())

        allocation = None
        if self.is_credit():
            allocation = self.allocate_payment(account_ledger_model)

        self.balance -= account_ledger_model.amount
        if self.balance <= 0:
            self.state = self.STATE_PAID

        account_ledger_model.save(validate=False)
        self.save(update_fields=['balance', 'state', 'payment_date', 'updated'])

        if DJANGO_ACCOUNT_LEDGER_RECORD_HISTORY:
            history_model.objects.record(
                instance=self,
                before=before,
                user_model=user_model,
                nested={
                    'pay_plans': (before_pay_plans, list(self.pay_plans.in_payment_order()))
                }
            )
        return allocation
