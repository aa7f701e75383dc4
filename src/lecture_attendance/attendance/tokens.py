from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from cryptography.fernet import Fernet
from cryptography.fernet import InvalidToken as FernetInvalidToken

from ..core.constants import TOKEN_SCHEMA_VERSION
from ..core.exceptions import InvalidToken


@dataclass(frozen=True)
class AttendanceToken:
    """Decoded heartbeat credential: who, for which lecture, until when (unix seconds)."""

    lecture_id: int
    student_id: int
    exp: int
    version: int = TOKEN_SCHEMA_VERSION

    def to_payload(self) -> dict:
        return {
            "v": self.version,
            "lecture_id": self.lecture_id,
            "student_id": self.student_id,
            "exp": self.exp,
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "AttendanceToken":
        if not isinstance(payload, dict):
            raise InvalidToken("Invalid token.")
        if payload.get("v") != TOKEN_SCHEMA_VERSION:
            raise InvalidToken("Unsupported token version.")

        fields = {}
        for name in ("lecture_id", "student_id", "exp"):
            value = payload.get(name)
            # bool is an int subclass; reject it explicitly.
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidToken("Invalid token.")
            fields[name] = value
        return cls(version=TOKEN_SCHEMA_VERSION, **fields)


class AttendanceTokenCodec:
    """Authenticated encryption of attendance tokens (Fernet: AES-CBC + HMAC-SHA256)."""

    def __init__(self, key: Union[str, bytes]):
        self._fernet = Fernet(key)

    def encode(self, token: AttendanceToken) -> str:
        plaintext = json.dumps(token.to_payload(), separators=(",", ":")).encode("utf-8")
        return self._fernet.encrypt(plaintext).decode("ascii")

    def decode(self, token: str) -> AttendanceToken:
        if not isinstance(token, str) or not token:
            raise InvalidToken("Invalid token.")
        try:
            plaintext = self._fernet.decrypt(token)
            payload = json.loads(plaintext.decode("utf-8"))
        except (FernetInvalidToken, ValueError, TypeError):
            # ValueError covers non-ascii input, bad UTF-8 and bad JSON.
            raise InvalidToken("Invalid token.") from None
        return AttendanceToken.from_payload(payload)
