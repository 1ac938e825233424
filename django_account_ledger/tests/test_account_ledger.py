from decimal import Decimal

from django_account_ledger.exceptions import AccountLedgerStateError, AccountLedgerValidationError
from django_account_ledger.models import (
    AccountLedgerModel, AccountLedgerDetailModel,
    OperationEnum, is_operation,
    OPERATION_IN, OPERATION_OUT,
    DETAIL_STATE_CONCILIATED, DETAIL_STATE_NULLED, DETAIL_STATE_PENDING
)
from django_account_ledger.models.signals import account_ledger_conciliated
from django_account_ledger.tests.base import DjangoAccountLedgerBaseTest


class AccountLedgerModelStateTest(DjangoAccountLedgerBaseTest):

    def get_details(self):
        return [
            {'account': self.bank_account_model, 'amount': Decimal('100.00')},
            {'account': self.client_account_model, 'amount': Decimal('-100.00')},
        ]

    def test_new_entry_is_pending(self):
        entry = self.create_entry(details=self.get_details())

        self.assertTrue(entry.is_pending())
        self.assertFalse(entry.is_conciliated())
        self.assertFalse(entry.is_nulled())
        self.assertEqual(entry.currency_id, self.bank_account_model.currency_id)
        self.assertEqual(entry.creator, self.user_model)
        self.assertEqual(entry.details.filter(state=DETAIL_STATE_PENDING).count(), 2)

    def test_conciliate(self):
        entry = self.create_entry(details=self.get_details())

        self.assertTrue(entry.mark_as_conciliated(user_model=self.user_model))
        entry.refresh_from_db()

        self.assertTrue(entry.is_conciliated())
        self.assertEqual(entry.approver, self.user_model)
        self.assertIsNotNone(entry.approver_timestamp)
        self.assertEqual(entry.details.filter(state=DETAIL_STATE_CONCILIATED).count(), 2)

    def test_conciliate_twice_fails(self):
        entry = self.create_entry()
        self.assertTrue(entry.conciliate(user_model=self.user_model))
        entry.refresh_from_db()
        approver_timestamp = entry.approver_timestamp

        self.assertFalse(entry.conciliate(user_model=self.user_model))
        with self.assertRaises(AccountLedgerStateError):
            entry.mark_as_conciliated(user_model=self.user_model, raise_exception=True)

        entry.refresh_from_db()
        self.assertEqual(entry.approver_timestamp, approver_timestamp)
        self.assertEqual(entry.approver, self.user_model)

    def test_conciliated_entry_cannot_be_nulled(self):
        entry = self.create_entry()
        entry.conciliate(user_model=self.user_model)

        self.assertFalse(entry.null(user_model=self.user_model))
        with self.assertRaises(AccountLedgerStateError):
            entry.mark_as_nulled(user_model=self.user_model, raise_exception=True)

        entry.refresh_from_db()
        self.assertTrue(entry.active)
        self.assertIsNone(entry.nuller_id)

    def test_null(self):
        entry = self.create_entry(details=self.get_details())

        self.assertTrue(entry.mark_as_nulled(user_model=self.user_model))
        entry.refresh_from_db()

        self.assertTrue(entry.is_nulled())
        self.assertEqual(entry.nuller, self.user_model)
        self.assertIsNotNone(entry.nuller_timestamp)
        self.assertEqual(entry.details.filter(state=DETAIL_STATE_NULLED, active=False).count(), 2)

        self.assertFalse(entry.conciliate(user_model=self.user_model))
        self.assertFalse(entry.null(user_model=self.user_model))

    def test_guards_use_stored_state(self):
        entry = self.create_entry()
        stale_entry = AccountLedgerModel.objects.get(uuid=entry.uuid)

        self.assertTrue(entry.conciliate(user_model=self.user_model))
        self.assertFalse(stale_entry.null(user_model=self.user_model))

        entry.refresh_from_db()
        self.assertTrue(entry.is_conciliated())

    def test_unsaved_entry_cannot_change_state(self):
        entry = AccountLedgerModel(account=self.bank_account_model,
                                   counter_account=self.client_account_model,
                                   amount=Decimal('0.00'),
                                   exchange_rate=Decimal('0'),
                                   operation=OPERATION_IN,
                                   reference='REF-0001')

        self.assertFalse(entry.conciliate(user_model=self.user_model))
        self.assertFalse(entry.null(user_model=self.user_model))
        with self.assertRaises(AccountLedgerStateError):
            entry.mark_as_conciliated(user_model=self.user_model, raise_exception=True)
        with self.assertRaises(AccountLedgerStateError):
            entry.mark_as_nulled(user_model=self.user_model, raise_exception=True)

        self.assertTrue(entry.is_pending())
        self.assertFalse(AccountLedgerModel.objects.exists())

    def test_conciliated_signal(self):
        received = list()

        def receiver(sender, instance, **kwargs):
            received.append(instance.uuid)

        account_ledger_conciliated.connect(receiver)
        self.addCleanup(account_ledger_conciliated.disconnect, receiver)

        entry = self.create_entry()
        entry.conciliate(user_model=self.user_model)
        self.assertEqual(received, [entry.uuid])

    def test_delete(self):
        entry = self.create_entry(details=self.get_details())
        self.assertTrue(entry.can_destroy())
        entry_uuid = entry.uuid
        entry.delete()

        self.assertFalse(AccountLedgerModel.objects.filter(uuid=entry_uuid).exists())
        self.assertFalse(AccountLedgerDetailModel.objects.filter(account_ledger_id=entry_uuid).exists())

    def test_conciliated_entry_cannot_be_deleted(self):
        entry = self.create_entry()
        entry.conciliate(user_model=self.user_model)
        self.assertFalse(entry.can_destroy())

        with self.assertRaises(AccountLedgerStateError):
            entry.delete()
        self.assertTrue(AccountLedgerModel.objects.filter(uuid=entry.uuid).exists())


class AccountLedgerModelValidationTest(DjangoAccountLedgerBaseTest):

    def test_counter_account_must_differ(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(account_model=self.bank_account_model,
                              counter_account_model=self.bank_account_model)
        self.assertIn('counter_account', ctx.exception.message_dict)
        self.assertFalse(AccountLedgerModel.objects.exists())

    def test_counter_account_required(self):
        entry = AccountLedgerModel(account=self.bank_account_model,
                                   amount=Decimal('10.00'),
                                   operation=OPERATION_IN,
                                   reference='REF-0001')
        self.assertFalse(entry.validate(raise_exception=False))
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            entry.save()
        self.assertIn('counter_account', ctx.exception.message_dict)

    def test_amount_must_be_positive(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(amount=Decimal('0.00'))
        self.assertIn('amount', ctx.exception.message_dict)

        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(amount=Decimal('-5.00'))
        self.assertIn('amount', ctx.exception.message_dict)

    def test_exchange_rate_must_be_positive(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(exchange_rate=Decimal('0'))
        self.assertIn('exchange_rate', ctx.exception.message_dict)

    def test_reference_length(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(reference='ab')
        self.assertIn('reference', ctx.exception.message_dict)

        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(reference='x' * 151)
        self.assertIn('reference', ctx.exception.message_dict)

    def test_operation_choices(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(operation='loan')
        self.assertIn('operation', ctx.exception.message_dict)

    def test_several_errors_are_reported_together(self):
        with self.assertRaises(AccountLedgerValidationError) as ctx:
            self.create_entry(reference='ab', amount=Decimal('0'), exchange_rate=Decimal('0'))
        self.assertTrue({'reference', 'amount', 'exchange_rate'}.issubset(ctx.exception.message_dict.keys()))


class AccountLedgerModelAmountsTest(DjangoAccountLedgerBaseTest):

    def test_operation_predicates(self):
        entry = AccountLedgerModel(operation=OPERATION_OUT)

        self.assertTrue(entry.is_out())
        self.assertFalse(entry.is_in())
        self.assertFalse(entry.is_trans())
        self.assertTrue(entry.is_operation(OperationEnum.OUT))
        self.assertTrue(is_operation(entry, 'out'))
        self.assertFalse(is_operation(entry, OperationEnum.TRANS))

    def test_direction(self):
        entry = self.create_entry(account_model=self.bank_account_model,
                                  counter_account_model=self.client_account_model,
                                  amount=Decimal('50.00'))

        self.assertEqual(entry.get_direction(self.bank_account_model), OPERATION_IN)
        self.assertEqual(entry.get_direction(self.client_account_model), OPERATION_OUT)
        self.assertEqual(entry.get_direction(str(self.client_account_model.uuid)), OPERATION_OUT)
        self.assertIsNone(entry.get_direction(self.cash_account_model))

    def test_direction_negative_amount(self):
        entry = AccountLedgerModel(account=self.bank_account_model,
                                   counter_account=self.client_account_model,
                                   amount=Decimal('-50.00'))

        self.assertEqual(entry.get_direction(self.bank_account_model), OPERATION_OUT)
        self.assertIsNone(entry.get_direction(self.client_account_model))

    def test_signed_amount(self):
        entry = self.create_entry(account_model=self.bank_account_model,
                                  counter_account_model=self.client_account_model,
                                  amount=Decimal('50.00'),
                                  exchange_rate=Decimal('2'))

        self.assertEqual(entry.get_signed_amount(self.bank_account_model), Decimal('50'))
        self.assertEqual(entry.get_signed_amount(self.client_account_model.uuid), Decimal('-100'))

    def test_amount_in_home_currency(self):
        entry = AccountLedgerModel(amount=Decimal('100.00'), exchange_rate=Decimal('6.96'))
        self.assertEqual(entry.amount_in_home_currency, Decimal('696'))

        entry.exchange_rate = None
        self.assertEqual(entry.amount_in_home_currency, Decimal('0'))

    def test_related_account(self):
        entry = self.create_entry(account_model=self.bank_account_model,
                                  counter_account_model=self.client_account_model)

        self.assertEqual(entry.get_related_account(self.bank_account_model), self.client_account_model)
        self.assertEqual(entry.get_related_account(self.client_account_model), self.bank_account_model)
        self.assertEqual(entry.get_selected_account(self.client_account_model), self.client_account_model)

    def test_show_exchange_rate(self):
        same_currency = self.create_entry(account_model=self.bank_account_model,
                                          counter_account_model=self.client_account_model)
        other_currency = self.create_entry(account_model=self.eur_bank_account_model,
                                           counter_account_model=self.bank_account_model,
                                           exchange_rate=Decimal('1.0850'))

        self.assertFalse(same_currency.show_exchange_rate())
        self.assertTrue(other_currency.show_exchange_rate())

    def test_payment_link_account(self):
        money_store_side = self.create_entry(account_model=self.bank_account_model,
                                             counter_account_model=self.client_account_model)
        contact_side = self.create_entry(account_model=self.client_account_model,
                                         counter_account_model=self.cash_account_model)

        self.assertEqual(money_store_side.get_payment_link_account(), self.bank_account_model)
        self.assertEqual(contact_side.get_payment_link_account(), self.cash_account_model)
        self.assertEqual(contact_side.get_payment_link_account_id(), self.cash_account_model.uuid)


class AccountLedgerModelQuerySetTest(DjangoAccountLedgerBaseTest):

    def setUp(self) -> None:
        self.pending_entry = self.create_entry(reference='PENDING')
        self.conciliated_entry = self.create_entry(reference='CONCILIATED',
                                                   account_model=self.client_account_model,
                                                   counter_account_model=self.bank_account_model)
        self.conciliated_entry.conciliate(user_model=self.user_model)
        self.nulled_entry = self.create_entry(reference='NULLED')
        self.nulled_entry.null(user_model=self.user_model)
        self.other_entry = self.create_entry(reference='OTHER',
                                             account_model=self.cash_account_model,
                                             counter_account_model=self.supplier_account_model)

    def get_references(self, account_model, filter_by):
        return set(AccountLedgerModel.objects.ledgers_for(account_model, filter_by).values_list('reference',
                                                                                                  flat=True))

    def test_all(self):
        self.assertEqual(self.get_references(self.bank_account_model, 'all'),
                         {'PENDING', 'CONCILIATED', 'NULLED'})

    def test_states(self):
        self.assertEqual(self.get_references(self.bank_account_model, 'pending'), {'PENDING'})
        self.assertEqual(self.get_references(self.bank_account_model, 'uncon'), {'PENDING'})
        self.assertEqual(self.get_references(self.bank_account_model, 'conciliated'), {'CONCILIATED'})
        self.assertEqual(self.get_references(self.bank_account_model, 'con'), {'CONCILIATED'})
        self.assertEqual(self.get_references(self.bank_account_model, 'nulled'), {'NULLED'})

    def test_counter_side_is_included(self):
        self.assertEqual(self.get_references(self.client_account_model, 'conciliated'), {'CONCILIATED'})
        self.assertEqual(self.get_references(self.supplier_account_model, 'all'), {'OTHER'})

    def test_unknown_filter_returns_all(self):
        self.assertEqual(self.get_references(self.bank_account_model, 'unknown'),
                         {'PENDING', 'CONCILIATED', 'NULLED'})

    def test_has_pending(self):
        self.assertTrue(AccountLedgerModel.objects.for_account(self.bank_account_model).has_pending())
        self.pending_entry.conciliate(user_model=self.user_model)
        self.assertFalse(AccountLedgerModel.objects.for_account(self.bank_account_model).has_pending())
