"""Pydantic models for data persisted by callers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

ENVELOPE_VERSION = 1
ENVELOPE_ALGORITHM = "A256GCM"


class Envelope(BaseModel):
    """An AES-256-GCM encrypted TOTP secret, as stored by the caller.

    ``model_dump()`` yields the ``{v, alg, iv, tag, ct}`` JSON shape; iv, tag
    and ct are standard base64.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    v: int
    alg: str
    iv: str
    tag: str
    ct: str
