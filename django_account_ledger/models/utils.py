"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>
"""

from django.apps import apps

from django_account_ledger.settings import (
    DJANGO_ACCOUNT_LEDGER_ACCOUNT_MODEL,
    DJANGO_ACCOUNT_LEDGER_ENTRY_MODEL,
    DJANGO_ACCOUNT_LEDGER_HISTORY_MODEL
)


class LazyLoader:
    """
    A class that provides lazy-loading functionality for the django_account_ledger models, so model modules can
    reference each other without import cycles.

    Attributes:
        app_config (AppConfig): The AppConfig object for the django_account_ledger app.
    """

    app_config = apps.get_app_config(app_label='django_account_ledger')

    ACCOUNT_MODEL = DJANGO_ACCOUNT_LEDGER_ACCOUNT_MODEL
    ACCOUNT_LEDGER_MODEL = DJANGO_ACCOUNT_LEDGER_ENTRY_MODEL
    HISTORY_MODEL = DJANGO_ACCOUNT_LEDGER_HISTORY_MODEL

    def get_account_model(self):
        return self.app_config.get_model(self.ACCOUNT_MODEL)

    def get_account_ledger_model(self):
        return self.app_config.get_model(self.ACCOUNT_LEDGER_MODEL)

    def get_history_model(self):
        return self.app_config.get_model(self.HISTORY_MODEL)


lazy_loader = LazyLoader()
