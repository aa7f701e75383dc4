import base64
import json

import pytest
from cryptography.fernet import Fernet

from lecture_attendance.attendance.tokens import AttendanceToken, AttendanceTokenCodec
from lecture_attendance.core.exceptions import InvalidToken


def test_decode_returns_what_was_encoded(token_key):
    codec = AttendanceTokenCodec(token_key)
    original = AttendanceToken(lecture_id=7, student_id=3, exp=1_770_000_000)

    assert codec.decode(codec.encode(original)) == original


def test_token_from_another_key_is_invalid(token_key):
    token = AttendanceTokenCodec(Fernet.generate_key()).encode(AttendanceToken(lecture_id=1, student_id=1, exp=1))

    with pytest.raises(InvalidToken):
        AttendanceTokenCodec(token_key).decode(token)


def test_any_single_corrupted_byte_is_invalid(token_key):
    codec = AttendanceTokenCodec(token_key)
    raw = base64.urlsafe_b64decode(codec.encode(AttendanceToken(lecture_id=1, student_id=2, exp=1_770_000_000)))

    for i in range(len(raw)):
        corrupted = raw[:i] + bytes([raw[i] ^ 0x01]) + raw[i + 1 :]
        with pytest.raises(InvalidToken):
            codec.decode(base64.urlsafe_b64encode(corrupted).decode("ascii"))


@pytest.mark.parametrize("garbage", ["", "not-a-token", "ééé", "gAAAAA"])
def test_garbage_is_invalid(token_key, garbage):
    with pytest.raises(InvalidToken):
        AttendanceTokenCodec(token_key).decode(garbage)


def test_non_string_is_invalid(token_key):
    with pytest.raises(InvalidToken):
        AttendanceTokenCodec(token_key).decode(None)


@pytest.mark.parametrize(
    "plaintext",
    [
        b"not json",
        b"[1, 2, 3]",
        json.dumps({"lecture_id": 1, "student_id": 2, "exp": 3}).encode(),
        json.dumps({"v": 2, "lecture_id": 1, "student_id": 2, "exp": 3}).encode(),
        json.dumps({"v": 1, "lecture_id": "1", "student_id": 2, "exp": 3}).encode(),
        json.dumps({"v": 1, "lecture_id": 1, "student_id": True, "exp": 3}).encode(),
        json.dumps({"v": 1, "lecture_id": 1, "student_id": 2}).encode(),
        json.dumps({"v": 1, "lecture_id": 1, "student_id": 2, "exp": 3.5}).encode(),
    ],
)
def test_decryptable_but_malformed_payload_is_invalid(token_key, plaintext):
    token = Fernet(token_key).encrypt(plaintext).decode("ascii")

    with pytest.raises(InvalidToken):
        AttendanceTokenCodec(token_key).decode(token)


def test_payload_carries_schema_version(token_key):
    token = AttendanceTokenCodec(token_key).encode(AttendanceToken(lecture_id=4, student_id=5, exp=6))
    payload = json.loads(Fernet(token_key).decrypt(token))

    assert payload == {"v": 1, "lecture_id": 4, "student_id": 5, "exp": 6}
