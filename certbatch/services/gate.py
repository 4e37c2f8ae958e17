from __future__ import annotations

import hmac

"""Shared-password admin gate. Not a security boundary; it only keeps casual users out."""


class AccessDenied(Exception):
    pass


def check_admin_password(supplied: str | None, expected: str | None) -> None:
    """Raise AccessDenied unless ``supplied`` matches ``expected``.

    No password configured (expected=None/"") means the gate is open.
    """
    if not expected:
        return
    if supplied is None or not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise AccessDenied("Invalid password. Please try again.")
