# sfclient/decode/__init__.py
