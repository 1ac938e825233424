from datetime import date
from decimal import Decimal

from django_account_ledger.models import (
    HistoryModel, FieldDiff, FieldKindEnum, NewRowDiff, RowDiff
)
from django_account_ledger.tests.base import DjangoAccountLedgerBaseTest


class HistoryModelTest(DjangoAccountLedgerBaseTest):

    def test_record(self):
        account_model = self.bank_account_model
        before = HistoryModel.snapshot(account_model)

        account_model.name = 'Main Bank Renamed'
        account_model.amount = Decimal('10.50')
        account_model.save()

        history_model = HistoryModel.objects.record(instance=account_model,
                                                    before=before,
                                                    user_model=self.user_model)

        self.assertEqual(history_model.history_data['name'],
                         {'type': 'string', 'from': 'Main Bank', 'to': 'Main Bank Renamed'})
        self.assertEqual(set(history_model.history_attributes()), {'name', 'amount'})
        self.assertEqual(history_model.get_history_data()['amount'],
                         FieldDiff(kind=FieldKindEnum.DECIMAL, from_value=Decimal('0'), to_value=Decimal('10.50')))
        self.assertEqual(HistoryModel.objects.for_instance(account_model).count(), 1)

    def test_record_without_changes(self):
        before = HistoryModel.snapshot(self.cash_account_model)
        self.assertIsNone(HistoryModel.objects.record(instance=self.cash_account_model,
                                                      before=before,
                                                      user_model=self.user_model))
        self.assertFalse(HistoryModel.objects.exists())

    def test_get_history_data(self):
        history_model = HistoryModel(history_data={
            'ref_number': {'type': 'string', 'from': 'I-1', 'to': 'I-2'},
            'total': {'type': 'decimal', 'from': '10.10', 'to': '20.20'},
            'credit': {'type': 'boolean', 'from': False, 'to': True},
            'count': {'type': 'integer', 'from': '3', 'to': 4},
            'rate': {'type': 'float', 'from': 1, 'to': '2.5'},
            'payment_date': {'type': 'date', 'from': None, 'to': '2024-02-29'},
            'pay_plans': [
                {'index': 2, 'new_record': True},
                {'paid': {'type': 'boolean', 'from': False, 'to': True}, 'id': 'a1b2'},
            ]
        })
        history_data = history_model.get_history_data()

        self.assertEqual(history_data['ref_number'], FieldDiff(FieldKindEnum.STRING, 'I-1', 'I-2'))
        self.assertEqual(history_data['total'], FieldDiff(FieldKindEnum.DECIMAL, Decimal('10.10'), Decimal('20.20')))
        self.assertEqual(history_data['credit'], FieldDiff(FieldKindEnum.BOOLEAN, False, True))
        self.assertEqual(history_data['count'], FieldDiff(FieldKindEnum.INTEGER, 3, 4))
        self.assertEqual(history_data['rate'], FieldDiff(FieldKindEnum.FLOAT, 1.0, 2.5))
        self.assertEqual(history_data['payment_date'], FieldDiff(FieldKindEnum.DATE, None, date(2024, 2, 29)))
        self.assertEqual(history_data['pay_plans'], [
            NewRowDiff(index=2),
            RowDiff(id='a1b2', fields={'paid': FieldDiff(FieldKindEnum.BOOLEAN, False, True)}),
        ])

    def test_unknown_kind(self):
        history_model = HistoryModel(history_data={'name': {'type': 'money', 'from': 'a', 'to': 'b'}})
        with self.assertRaises(ValueError):
            history_model.get_history_data()
