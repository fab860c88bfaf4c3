# banking/services/__init__.py
