"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
Miguel Sanda <msanda@arrobalytics.com>
"""

from datetime import date
from decimal import Decimal
from random import randint, random, choice
from typing import Optional

from django.core.exceptions import ImproperlyConfigured, ValidationError

from django_account_ledger.io.io_core import get_localdate
from django_account_ledger.models import (
    CurrencyModel, AccountModel, TransactionModel,
    ACCOUNT_BANK, ACCOUNT_CASH, ACCOUNT_CLIENT, ACCOUNT_SUPPLIER, ACCOUNT_STAFF,
    ACCOUNT_INCOME, ACCOUNT_EXPENSE, ACCOUNT_BUY,
    TX_INCOME, TX_EXPENSE, TX_BUY
)

try:
    from faker import Faker
    from faker.providers import company, bank

    FAKER_IMPORTED = True
except ImportError:
    FAKER_IMPORTED = False

CURRENCIES = {
    'USD': ('US Dollar', '$'),
    'EUR': ('Euro', '€'),
    'BOB': ('Boliviano', 'Bs'),
}


class AccountLedgerDataGenerator:
    """
    Populates random currencies, accounts and transactions. Used by the test suite and for demo databases.
    """

    def __init__(self,
                 user_model,
                 home_currency_code: str = 'USD',
                 start_date: Optional[date] = None,
                 tx_quantity: int = 10):

        assert home_currency_code in CURRENCIES, f'Currency must be one of {list(CURRENCIES)}'
        assert tx_quantity >= 0, 'Transaction quantity cannot be negative'

        if not FAKER_IMPORTED:
            raise ImproperlyConfigured('Must install Faker library to generate random data.')

        self.fk = Faker(['en_US'])
        self.fk.add_provider(company)
        self.fk.add_provider(bank)

        self.user_model = user_model
        self.home_currency_code = home_currency_code
        self.start_date = start_date or get_localdate()
        self.tx_quantity = tx_quantity

        self.is_credit_probability = 0.3
        self.is_approved_probability = 0.8

        self.currency_models = None
        self.home_currency_model: Optional[CurrencyModel] = None
        self.money_store_models = None
        self.contact_models = None
        self.organization_models = None
        self.transaction_models = None

        self.TOTAL_MIN = 100
        self.TOTAL_MAX = 5000
        self.PAY_PLANS_MAX = 6

    def populate(self):
        if TransactionModel.objects.exists():
            raise ValidationError('Cannot populate random data because there are existing Transactions')

        self.create_currencies()
        self.create_money_stores()
        self.create_contacts()
        self.create_organization_accounts()
        self.create_transactions()

    def create_currencies(self):
        self.currency_models = dict()
        for code, (name, symbol) in CURRENCIES.items():
            currency_model, _ = CurrencyModel.objects.get_or_create(code=code,
                                                                    defaults={'name': name, 'symbol': symbol})
            self.currency_models[code] = currency_model
        self.home_currency_model = self.currency_models[self.home_currency_code]

    def create_account(self, original_type: str, name: Optional[str] = None, currency_model=None) -> AccountModel:
        account_model = AccountModel(
            name=name or self.fk.company(),
            original_type=original_type,
            currency=currency_model or self.home_currency_model,
            active=True
        )
        account_model.full_clean()
        account_model.save()
        return account_model

    def create_money_stores(self):
        self.money_store_models = [
            self.create_account(original_type=ACCOUNT_BANK, name=f'{self.fk.company()} Checking Account'),
            self.create_account(original_type=ACCOUNT_CASH, name='Petty Cash'),
        ]

    def create_contacts(self):
        self.contact_models = [
            self.create_account(original_type=ACCOUNT_CLIENT, name=self.fk.name()),
            self.create_account(original_type=ACCOUNT_SUPPLIER, name=self.fk.company()),
            self.create_account(original_type=ACCOUNT_STAFF, name=self.fk.name()),
        ]

    def create_organization_accounts(self):
        self.organization_models = {
            tx_type: self.create_account(original_type=tx_type, name=f'{tx_type.title()} Account')
            for tx_type in (ACCOUNT_INCOME, ACCOUNT_EXPENSE, ACCOUNT_BUY)
        }

    def get_contact_for(self, tx_type: str) -> AccountModel:
        original_type = ACCOUNT_CLIENT if tx_type == TX_INCOME else ACCOUNT_SUPPLIER
        return next(a for a in self.contact_models if a.original_type == original_type)

    def create_transaction(self,
                           tx_type: str,
                           total: Decimal,
                           credit: bool = False,
                           approve: bool = True,
                           account_model: Optional[AccountModel] = None,
                           ref_number: Optional[str] = None) -> TransactionModel:
        transaction_model = TransactionModel(
            ref_number=ref_number or f'{tx_type[0].upper()}-{randint(10000, 99999)}',
            tx_type=tx_type,
            date=self.start_date,
            account=account_model or self.get_contact_for(tx_type),
            currency=self.home_currency_model,
            total=total,
            balance=Decimal('0'),
            credit=credit,
            markdown_notes=self.fk.paragraph() if random() > 0.5 else None
        )
        transaction_model.full_clean()
        transaction_model.save()

        if approve:
            transaction_model.mark_as_approved(commit=True)
        return transaction_model

    def create_transactions(self):
        self.transaction_models = list()
        for _ in range(self.tx_quantity):
            credit = random() < self.is_credit_probability
            approve = credit or random() < self.is_approved_probability
            transaction_model = self.create_transaction(
                tx_type=choice([TX_INCOME, TX_EXPENSE, TX_BUY]),
                total=Decimal(randint(self.TOTAL_MIN, self.TOTAL_MAX)),
                credit=credit,
                approve=approve
            )
            if credit:
                transaction_model.build_pay_plans(n_payments=randint(2, self.PAY_PLANS_MAX),
                                                  start_date=self.start_date,
                                                  email=self.fk.email())
            self.transaction_models.append(transaction_model)
