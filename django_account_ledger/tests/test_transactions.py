from datetime import date, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError

from django_account_ledger.io.data_generator import AccountLedgerDataGenerator
from django_account_ledger.models import (
    PayPlanModel, TransactionModel, TransactionModelValidationError,
    PayPlanModelValidationError
)
from django_account_ledger.tests.base import DjangoAccountLedgerBaseTest


class TransactionModelTest(DjangoAccountLedgerBaseTest):

    def test_approve(self):
        transaction_model = self.create_transaction(total=Decimal('450.00'), approve=False)
        self.assertTrue(transaction_model.is_draft())
        self.assertFalse(transaction_model.can_pay())

        self.assertTrue(transaction_model.mark_as_approved(commit=True))
        transaction_model.refresh_from_db()

        self.assertTrue(transaction_model.is_approved())
        self.assertTrue(transaction_model.can_pay())
        self.assertEqual(transaction_model.balance, Decimal('450.00'))

        self.assertFalse(transaction_model.mark_as_approved(raise_exception=False))
        with self.assertRaises(TransactionModelValidationError):
            transaction_model.mark_as_approved()

    def test_invalid_total(self):
        transaction_model = self.create_transaction(approve=False)
        transaction_model.total = Decimal('-100.00')

        with self.assertRaises(ValidationError):
            transaction_model.full_clean()

    def test_querysets(self):
        self.create_transaction(ref_number='I-00001', approve=False)
        approved_model = self.create_transaction(ref_number='I-00002', credit=True)
        approved_model.payment_date = date(2024, 1, 1)
        approved_model.save(update_fields=['payment_date'])

        self.assertEqual(TransactionModel.objects.draft().count(), 1)
        self.assertEqual(TransactionModel.objects.approved().count(), 1)
        self.assertEqual(TransactionModel.objects.credit().get(), approved_model)
        self.assertEqual(TransactionModel.objects.overdue(as_of=date(2024, 1, 2)).get(), approved_model)
        self.assertFalse(TransactionModel.objects.overdue(as_of=date(2024, 1, 1)).exists())
        self.assertEqual(TransactionModel.objects.for_account(self.client_account_model).count(), 2)

    def test_notes_html(self):
        transaction_model = self.create_transaction(approve=False)
        transaction_model.markdown_notes = '**Due** on delivery'
        self.assertIn('<strong>Due</strong>', transaction_model.notes_html())


class PayPlanScheduleTest(DjangoAccountLedgerBaseTest):

    def test_build_pay_plans(self):
        transaction_model = self.create_transaction(total=Decimal('1000.00'), credit=True)
        pay_plans = transaction_model.build_pay_plans(n_payments=3,
                                                      start_date=date(2024, 1, 31),
                                                      email='client@djangoaccountledger.com')

        self.assertEqual([p.amount for p in pay_plans],
                         [Decimal('333.33'), Decimal('333.33'), Decimal('333.34')])
        self.assertEqual(sum(p.amount for p in pay_plans), transaction_model.balance)
        self.assertEqual([p.payment_date for p in pay_plans],
                         [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)])
        self.assertEqual([p.alert_date for p in pay_plans],
                         [d - timedelta(days=5) for d in [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]])

        transaction_model.refresh_from_db()
        self.assertEqual(transaction_model.payment_date, date(2024, 1, 31))
        self.assertEqual(transaction_model.pay_plans.unpaid().count(), 3)

    def test_build_pay_plans_months_between(self):
        transaction_model = self.create_transaction(total=Decimal('100.00'), credit=True)
        pay_plans = transaction_model.build_pay_plans(n_payments=2,
                                                      start_date=date(2024, 1, 15),
                                                      months_between=3,
                                                      commit=False)

        self.assertEqual([p.payment_date for p in pay_plans], [date(2024, 1, 15), date(2024, 4, 15)])
        self.assertFalse(PayPlanModel.objects.exists())

    def test_build_pay_plans_twice(self):
        transaction_model = self.create_transaction(total=Decimal('100.00'), credit=True)
        transaction_model.build_pay_plans(n_payments=2, start_date=date(2024, 1, 15))

        with self.assertRaises(TransactionModelValidationError):
            transaction_model.build_pay_plans(n_payments=2, start_date=date(2024, 1, 15))
        self.assertEqual(transaction_model.pay_plans.count(), 2)

    def test_build_pay_plans_invalid(self):
        cash_model = self.create_transaction(total=Decimal('100.00'), ref_number='I-00002')
        with self.assertRaises(TransactionModelValidationError):
            cash_model.build_pay_plans(n_payments=2)

        credit_model = self.create_transaction(total=Decimal('0.01'), credit=True)
        with self.assertRaises(TransactionModelValidationError):
            credit_model.build_pay_plans(n_payments=0)
        with self.assertRaises(TransactionModelValidationError):
            credit_model.build_pay_plans(n_payments=3)

    def test_pay_plan_validation(self):
        transaction_model = self.create_transaction(credit=True)
        pay_plan_model = PayPlanModel(transaction=transaction_model,
                                      amount=Decimal('0'),
                                      payment_date=date(2024, 2, 1))
        with self.assertRaises(PayPlanModelValidationError):
            pay_plan_model.clean()

        pay_plan_model.amount = Decimal('10.00')
        pay_plan_model.alert_date = date(2024, 2, 5)
        with self.assertRaises(PayPlanModelValidationError):
            pay_plan_model.clean()

        pay_plan_model.alert_date = date(2024, 1, 27)
        pay_plan_model.full_clean()
        self.assertEqual(pay_plan_model.get_total(), Decimal('10.00'))


class AccountLedgerDataGeneratorTest(DjangoAccountLedgerBaseTest):

    def test_populate(self):
        generator = AccountLedgerDataGenerator(user_model=self.user_model,
                                               start_date=date(2024, 1, 15),
                                               tx_quantity=8)
        generator.populate()

        self.assertEqual(TransactionModel.objects.count(), 8)
        for transaction_model in TransactionModel.objects.credit():
            self.assertTrue(transaction_model.is_approved())
            self.assertEqual(sum(p.amount for p in transaction_model.pay_plans.all()), transaction_model.balance)

        with self.assertRaises(ValidationError):
            generator.populate()
