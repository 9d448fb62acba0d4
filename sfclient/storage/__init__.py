# sfclient/storage/__init__.py
