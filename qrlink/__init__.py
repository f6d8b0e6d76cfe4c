# qrlink/__init__.py
