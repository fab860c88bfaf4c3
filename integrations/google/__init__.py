# integrations/google/__init__.py
