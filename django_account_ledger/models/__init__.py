"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
Miguel Sanda <msanda@arrobalytics.com>
"""

from django_account_ledger.models.mixins import *
from django_account_ledger.models.currency import *
from django_account_ledger.models.accounts import *
from django_account_ledger.models.pay_plan import *
from django_account_ledger.models.account_ledger import *
from django_account_ledger.models.payments import *
from django_account_ledger.models.transactions import *
from django_account_ledger.models.history import *
