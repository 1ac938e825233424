from setuptools import setup, find_namespace_packages

import django_account_ledger

PACKAGES = find_namespace_packages(include=["django_account_ledger", "django_account_ledger.*"])

setup(
    extras_require={
        "dev": ["pytest>=7.0", "pytest-django>=4.5"]
    },
    dependency_links=[],
    name="django-account-ledger",
    version=django_account_ledger.__version__,
    packages=PACKAGES,
    license=django_account_ledger.__license__,
    keywords="django, finance, accounting, ledger, payments, installments, reconciliation, money",
    author=django_account_ledger.__author__,
    description="Account ledger backend for Django. Ledger entries, transaction payments, installment plans "
    + "and bank conciliation",
    include_package_data=True,
    install_requires=[
        "django>=4.2",
        "faker>=15.3.3",
        "markdown>=3.4.1",
        "python-dateutil>=2.8.2",
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Office/Business :: Financial :: Accounting",
        "Development Status :: 3 - Alpha",
        "Framework :: Django :: 4.2",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    ],
)
