# qrlink/api/__init__.py
