"""Unit tests for core/security.py token encoding and decoding."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException

from core.security import create_access_token, decode_token


class TestAccessTokens:
    def test_round_trip_subject(self):
        sub = str(uuid4())
        token = create_access_token({"sub": sub})
        assert decode_token(token).sub == sub

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "x"}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(HTTPException) as excinfo:
            decode_token(token)
        assert excinfo.value.status_code == 401

    def test_garbage_token_rejected(self):
        with pytest.raises(HTTPException) as excinfo:
            decode_token("not-a-jwt")
        assert excinfo.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_missing_subject_rejected(self):
        token = create_access_token({"scopes": ["quiz"]})
        with pytest.raises(HTTPException, match="Token missing subject"):
            decode_token(token)
