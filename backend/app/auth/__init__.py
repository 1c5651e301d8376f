"""
Tourlist Backend - Authentication & Authorization
==================================================

What:  Turns request credentials into an Identity and decides what that
       Identity may do.

    session.py:  SessionResolver (signed token → Identity)
    gate.py:     authorize() / enforce() (Identity × Operation → Decision)

Both are pure: no database access, no I/O. Ownership checks that need a row
(e.g. "is this review mine?") pass the row's owner id into the gate.
"""

from app.auth.gate import Decision, Operation, authorize, enforce
from app.auth.session import GUEST, Identity, Role, SessionResolver

__all__ = [
    "Decision",
    "GUEST",
    "Identity",
    "Operation",
    "Role",
    "SessionResolver",
    "authorize",
    "enforce",
]
