"""
CBM Cash Book Store — App Configuration
=========================================
Relational backend for users, businesses, members, cash books and entries.
"""

from django.apps import AppConfig


class CoreCashBookStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.cashbook_store"
    label = "core_cashbook_store"
    verbose_name = "CBM Cash Book Store"
