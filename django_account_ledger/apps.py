"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.
"""
from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class DjangoAccountLedgerConfig(AppConfig):
    name = 'django_account_ledger'
    label = 'django_account_ledger'
    verbose_name = _('Django Account Ledger')
    default_auto_field = 'django.db.models.BigAutoField'
