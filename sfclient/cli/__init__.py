# sfclient/cli/__init__.py
