# common/principal.py

"""
PRINCIPAL RESOLUTION

Identity is delegated to an external provider that issues JWTs.
SimpleJWT's stateless authentication verifies the token and exposes a
TokenUser whose `id` is the configured user-id claim (default: "sub").

That claim value is the principal: an opaque, stable string that owns
cart lines and orders. No local user table is involved.
"""

from __future__ import annotations

import logging

from common.exceptions import Unauthenticated

logger = logging.getLogger(__name__)


def get_principal(request) -> str:
    user = getattr(request, "user", None)
    if user is None or not getattr(user, "is_authenticated", False):
        logger.warning("Request without authenticated principal")
        raise Unauthenticated()

    try:
        principal = user.id
    except KeyError:
        # token verified but the user-id claim is missing
        principal = None

    principal = str(principal or "").strip()
    if not principal:
        logger.warning("Authenticated token carries no principal claim")
        raise Unauthenticated()

    return principal
