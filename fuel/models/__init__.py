# fuel/models/__init__.py

from fuel.models.fuel_price import PRICE_FIELDS, FuelPrice

__all__ = ["FuelPrice", "PRICE_FIELDS"]
