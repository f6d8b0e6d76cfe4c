# qrlink/models/user.py

from dataclasses import dataclass


# -------------------------------
# User Model
# -------------------------------

@dataclass(frozen=True)
class User:
    """
    Application user.
    Stores username and hashed password for authentication.
    """
    id: str
    username: str
    hashed_password: str
