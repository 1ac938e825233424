"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.
"""
import logging

from django.conf import settings

logger = logging.getLogger('Django Account Ledger Logger')
logger.setLevel(logging.INFO)

## MODEL NAMES ##
DJANGO_ACCOUNT_LEDGER_ACCOUNT_MODEL = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_ACCOUNT_MODEL', 'accountmodel')
DJANGO_ACCOUNT_LEDGER_ENTRY_MODEL = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_ENTRY_MODEL', 'accountledgermodel')
DJANGO_ACCOUNT_LEDGER_HISTORY_MODEL = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_HISTORY_MODEL', 'historymodel')

## VALIDATION ##
DJANGO_ACCOUNT_LEDGER_REFERENCE_MIN_LENGTH = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_REFERENCE_MIN_LENGTH', 3)
DJANGO_ACCOUNT_LEDGER_REFERENCE_MAX_LENGTH = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_REFERENCE_MAX_LENGTH', 150)
DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_AMOUNT_DECIMAL_PLACES', 2)
DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES = getattr(settings,
                                                             'DJANGO_ACCOUNT_LEDGER_EXCHANGE_RATE_DECIMAL_PLACES', 4)

## PAYMENTS ##
DJANGO_ACCOUNT_LEDGER_PAY_PLAN_ALERT_DAYS = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_PAY_PLAN_ALERT_DAYS', 5)
DJANGO_ACCOUNT_LEDGER_DEFAULT_CONCILIATION = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_DEFAULT_CONCILIATION', False)
DJANGO_ACCOUNT_LEDGER_RECORD_HISTORY = getattr(settings, 'DJANGO_ACCOUNT_LEDGER_RECORD_HISTORY', True)

logger.info(f'Django Account Ledger History Enabled: {DJANGO_ACCOUNT_LEDGER_RECORD_HISTORY}')
