"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.
"""

"""Django Account Ledger"""
__version__ = '0.1.0'
__license__ = 'GPLv3 License'

__author__ = 'Django Account Ledger Contributors'
