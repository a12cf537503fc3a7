from __future__ import annotations

import base64
import uuid


def new_arc_id() -> str:
    """Return a fresh 22-character URL-safe arc identifier.

    The identifier is a random UUID4 in URL-safe Base64 with the ``==``
    padding stripped.
    """
    return base64.urlsafe_b64encode(uuid.uuid4().bytes)[:-2].decode("ascii")
