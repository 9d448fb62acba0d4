# sfclient/core/__init__.py
