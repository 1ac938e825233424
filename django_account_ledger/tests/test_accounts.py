from django.core.exceptions import ValidationError

from django_account_ledger.models import (
    AccountModel, CurrencyModel, AccountModelValidationError, CurrencyModelValidationError,
    ACCOUNT_BANK, ACCOUNT_CASH, ACCOUNT_CLIENT, ACCOUNT_INCOME, ACCOUNT_STAFF,
    ACCOUNTABLE_MONEY_STORE, ACCOUNTABLE_CONTACT, ACCOUNTABLE_ORGANIZATION,
    TX_INCOME, TX_EXPENSE, TX_BUY,
    get_conciliation_for_account_type
)
from django_account_ledger.tests.base import DjangoAccountLedgerBaseTest


class AccountModelTest(DjangoAccountLedgerBaseTest):

    def test_accountable_type(self):
        self.assertEqual(self.bank_account_model.accountable_type, ACCOUNTABLE_MONEY_STORE)
        self.assertEqual(self.staff_account_model.accountable_type, ACCOUNTABLE_CONTACT)
        self.assertEqual(self.buy_account_model.accountable_type, ACCOUNTABLE_ORGANIZATION)

        self.assertTrue(self.bank_account_model.is_bank())
        self.assertTrue(self.cash_account_model.is_cash())
        self.assertTrue(self.cash_account_model.is_money_store())
        self.assertTrue(self.supplier_account_model.is_contact())
        self.assertFalse(self.income_account_model.is_contact())

    def test_conciliation_policy(self):
        self.assertFalse(get_conciliation_for_account_type(ACCOUNT_BANK))
        self.assertTrue(get_conciliation_for_account_type(ACCOUNT_CASH))
        self.assertTrue(get_conciliation_for_account_type(ACCOUNT_CLIENT))
        self.assertTrue(get_conciliation_for_account_type(ACCOUNT_STAFF))
        self.assertFalse(get_conciliation_for_account_type(ACCOUNT_INCOME))

    def test_querysets(self):
        self.assertEqual(AccountModel.objects.money_stores().count(), 3)
        self.assertEqual(AccountModel.objects.contacts().count(), 3)
        self.assertEqual(AccountModel.objects.for_original_type(ACCOUNT_BANK).count(), 2)

        AccountModel.objects.filter(uuid=self.cash_account_model.uuid).update(active=False)
        self.assertEqual(AccountModel.objects.money_stores().active().count(), 2)

    def test_canonical_for(self):
        self.assertEqual(AccountModel.objects.canonical_for(TX_INCOME), self.income_account_model)
        self.assertEqual(AccountModel.objects.canonical_for(TX_EXPENSE), self.expense_account_model)
        self.assertEqual(AccountModel.objects.canonical_for(TX_BUY), self.buy_account_model)
        self.assertIsNone(AccountModel.objects.canonical_for(ACCOUNT_BANK))


class CurrencyModelTest(DjangoAccountLedgerBaseTest):

    def test_for_code(self):
        self.assertEqual(CurrencyModel.objects.for_code('usd').get(), self.usd_model)

    def test_code_is_normalized(self):
        currency_model = CurrencyModel(code='gbp', name='Pound Sterling', symbol='£')
        currency_model.full_clean()
        self.assertEqual(currency_model.code, 'GBP')

    def test_code_length(self):
        currency_model = CurrencyModel(code='US', name='Invalid', symbol='$')
        with self.assertRaises(ValidationError):
            currency_model.full_clean()

    def test_code_letters_only(self):
        currency_model = CurrencyModel(code='U5D', name='Invalid', symbol='$')
        with self.assertRaises(CurrencyModelValidationError):
            currency_model.clean()

    def test_blank_account_name(self):
        account_model = AccountModel(name='   ', currency=self.usd_model, original_type=ACCOUNT_CASH)
        with self.assertRaises(AccountModelValidationError):
            account_model.clean()
