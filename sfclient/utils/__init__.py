# sfclient/utils/__init__.py
