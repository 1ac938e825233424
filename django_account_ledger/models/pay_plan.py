"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

A PayPlanModel is one scheduled installment of a credit transaction. The pay plans of a transaction are walked in
payment date order when a payment is committed (see TransactionModel.commit_payment), so the ordering of this model is
the allocation order.
"""
from uuid import uuid4

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _

from django_account_ledger.models.mixins import CreateUpdateMixIn
from django_account_ledger.settings import DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES

__all__ = [
    'PayPlanModelValidationError',
    'PayPlanModelQuerySet',
    'PayPlanModelAbstract',
    'PayPlanModel',
]


class PayPlanModelValidationError(ValidationError):
    pass


class PayPlanModelQuerySet(QuerySet):

    def paid(self):
        return self.filter(paid=True)

    def unpaid(self):
        return self.filter(paid=False)

    def in_payment_order(self):
        return self.order_by('payment_date', 'created')


class PayPlanModelAbstract(CreateUpdateMixIn):
    """
    Attributes
    ----------
    uuid : UUID
        The primary key of the installment.
    transaction: TransactionModel
        The credit transaction owning the installment.
    amount: Decimal
        The scheduled principal of the installment. Must be greater than zero.
    interests_penalties: Decimal
        Interests and penalties charged on top of the amount. Zero or greater.
    payment_date: date
        The due date of the installment.
    alert_date: date
        The date a reminder should be sent to email.
    paid: bool
        Whether the installment has been covered by a payment.
    currency: CurrencyModel
        The currency of the installment.
    email: str
        The notification target of the installment.
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    transaction = models.ForeignKey('django_account_ledger.TransactionModel',
                                    on_delete=models.CASCADE,
                                    related_name='pay_plans',
                                    verbose_name=_('Transaction'))
    amount = models.DecimalField(max_digits=20,
                                 decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                 validators=[MinValueValidator(limit_value=0)],
                                 verbose_name=_('Amount'))
    interests_penalties = models.DecimalField(max_digits=20,
                                              decimal_places=DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES,
                                              default=0,
                                              validators=[MinValueValidator(limit_value=0)],
                                              verbose_name=_('Interests & Penalties'))
    payment_date = models.DateField(verbose_name=_('Payment Date'))
    alert_date = models.DateField(null=True, blank=True, verbose_name=_('Alert Date'))
    paid = models.BooleanField(default=False, verbose_name=_('Paid'))
    currency = models.ForeignKey('django_account_ledger.CurrencyModel',
                                 on_delete=models.RESTRICT,
                                 null=True,
                                 blank=True,
                                 verbose_name=_('Currency'))
    email = models.EmailField(null=True, blank=True, verbose_name=_('Email'))

    objects = PayPlanModelQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['payment_date', 'created']
        verbose_name = _('Pay Plan')
        verbose_name_plural = _('Pay Plans')
        indexes = [
            models.Index(fields=['transaction', 'paid']),
            models.Index(fields=['payment_date']),
        ]

    def __str__(self):
        return f'Pay Plan {self.payment_date}: {self.amount} (paid={self.paid})'

    def get_total(self):
        return self.amount + self.interests_penalties

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise PayPlanModelValidationError(
                {'amount': _('Pay plan amount must be greater than zero.')}
            )
        if self.alert_date and self.payment_date and self.alert_date > self.payment_date:
            raise PayPlanModelValidationError(
                {'alert_date': _('Alert date cannot be after the payment date.')}
            )


class PayPlanModel(PayPlanModelAbstract):
    """
    Base Pay Plan Model from Abstract.
    """

    class Meta(PayPlanModelAbstract.Meta):
        abstract = False
