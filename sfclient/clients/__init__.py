# sfclient/clients/__init__.py
