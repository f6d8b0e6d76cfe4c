# qrlink/core/__init__.py
