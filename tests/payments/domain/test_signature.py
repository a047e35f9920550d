"""Tests for gateway callback signature computation and verification."""

import hashlib
import hmac

from payments.gateway.signature import compute_signature, signature_matches

SECRET = "rzp_test_secret"


class TestComputeSignature:
    def test_hmac_sha256_of_order_and_payment(self):
        expected = hmac.new(SECRET.encode(), b"order_abc|pay_123", hashlib.sha256).hexdigest()
        assert compute_signature(SECRET, "order_abc", "pay_123") == expected

    def test_is_deterministic(self):
        assert compute_signature(SECRET, "order_abc", "pay_123") == compute_signature(SECRET, "order_abc", "pay_123")


class TestSignatureMatches:
    def test_valid_signature(self):
        signature = compute_signature(SECRET, "order_abc", "pay_123")
        assert signature_matches(SECRET, "order_abc", "pay_123", signature)

    def test_uppercase_hex_is_accepted(self):
        signature = compute_signature(SECRET, "order_abc", "pay_123").upper()
        assert signature_matches(SECRET, "order_abc", "pay_123", signature)

    def test_wrong_payment_id(self):
        signature = compute_signature(SECRET, "order_abc", "pay_123")
        assert not signature_matches(SECRET, "order_abc", "pay_999", signature)

    def test_wrong_secret(self):
        signature = compute_signature("other_secret", "order_abc", "pay_123")
        assert not signature_matches(SECRET, "order_abc", "pay_123", signature)

    def test_empty_signature(self):
        assert not signature_matches(SECRET, "order_abc", "pay_123", "")
        assert not signature_matches(SECRET, "order_abc", "pay_123", None)
