"""Tests for the persisted Envelope model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from otpvault.models import ENVELOPE_ALGORITHM, ENVELOPE_VERSION, Envelope


def test_envelope_dump_shape():
    env = Envelope(v=ENVELOPE_VERSION, alg=ENVELOPE_ALGORITHM, iv="aXY=", tag="dGFn", ct="Y3Q=")
    assert env.model_dump() == {
        "v": 1,
        "alg": "A256GCM",
        "iv": "aXY=",
        "tag": "dGFn",
        "ct": "Y3Q=",
    }


def test_envelope_json_round_trip():
    env = Envelope(v=1, alg="A256GCM", iv="aXY=", tag="dGFn", ct="Y3Q=")
    assert Envelope.model_validate_json(env.model_dump_json()) == env


def test_envelope_is_frozen():
    env = Envelope(v=1, alg="A256GCM", iv="aXY=", tag="dGFn", ct="Y3Q=")
    with pytest.raises(ValidationError):
        env.v = 2


def test_envelope_requires_all_fields():
    with pytest.raises(ValidationError):
        Envelope.model_validate({"v": 1, "alg": "A256GCM", "iv": "aXY=", "tag": "dGFn"})


def test_envelope_strict_types():
    with pytest.raises(ValidationError):
        Envelope.model_validate({"v": "1", "alg": "A256GCM", "iv": "a", "tag": "b", "ct": "c"})
