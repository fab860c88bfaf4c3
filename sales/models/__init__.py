# sales/models/__init__.py

from sales.models.daily_sale import DailySale
from sales.models.safedrop_resolution import SafedropResolution

__all__ = ["DailySale", "SafedropResolution"]
