"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

The signals module provide the means to notify listeners about important events or states in the models,
such as an account ledger being conciliated or a transaction being paid.
"""

from django.dispatch import Signal

# Account Ledger Model Signals...
account_ledger_conciliated = Signal()
account_ledger_nulled = Signal()

# Transaction Model Signals...
payment_committed = Signal()
transaction_paid = Signal()
