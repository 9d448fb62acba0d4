# sfclient/stream/__init__.py
