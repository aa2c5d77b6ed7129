# costing/apps.py

"""
COSTING ENGINE CORE

No models live here. The app hosts the shared pieces every ledger uses:
- weighted-average valuation
- domain errors
- optimistic transaction runner
- decimal normalisers
"""

from django.apps import AppConfig


class CostingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "costing"
    verbose_name = "Costing Engine"
