"""
Unit tests for signup and hook request validation.

Validation is a pure function of the parsed body: trimmed values on success,
a VALIDATION_ERROR naming the offending fields (never their values) on
failure.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

import pytest
from tiktrend_service_libs.error_handling import ErrorCode, TikTrendError

from services.early_access_service.validation import validate_hook_request, validate_signup


class TestValidateSignup:
    def test_valid_payload_returns_trimmed_request(self) -> None:
        payload = {
            "name": "  Ava  ",
            "email": " ava@example.com ",
            "niche": "\tfitness\n",
            "betaAccess": False,
        }

        signup = validate_signup(payload, uuid4())

        assert signup.name == "Ava"
        assert signup.email == "ava@example.com"
        assert signup.niche == "fitness"
        assert signup.beta_access is False

    def test_boundary_lengths_are_accepted(self, valid_signup_payload: dict[str, Any]) -> None:
        local_part = "a" * 64
        domain = ".".join(["b" * 60] * 3) + ".com"
        payload = {
            **valid_signup_payload,
            "name": "n" * 100,
            "niche": "x" * 200,
            "email": f"{local_part}@{domain}",
        }

        signup = validate_signup(payload, uuid4())

        assert len(signup.name) == 100
        assert len(signup.niche) == 200

    @pytest.mark.parametrize(
        "overrides, bad_field",
        [
            ({"name": ""}, "name"),
            ({"name": "   "}, "name"),
            ({"name": "n" * 101}, "name"),
            ({"niche": ""}, "niche"),
            ({"niche": "x" * 201}, "niche"),
            ({"email": "x"}, "email"),
            ({"email": "ava@"}, "email"),
            ({"email": "a" * 250 + "@b.com"}, "email"),
            ({"betaAccess": "true"}, "betaAccess"),
            ({"betaAccess": 1}, "betaAccess"),
            ({"name": 42}, "name"),
        ],
    )
    def test_invalid_field_is_reported(
        self, valid_signup_payload: dict[str, Any], overrides: dict[str, Any], bad_field: str
    ) -> None:
        payload = {**valid_signup_payload, **overrides}

        with pytest.raises(TikTrendError) as exc_info:
            validate_signup(payload, uuid4())

        detail = exc_info.value.error_detail
        assert detail.error_code == ErrorCode.VALIDATION_ERROR
        assert bad_field in detail.details["invalid_fields"]

    @pytest.mark.parametrize("key", ["beta_access", "BetaAccess", "betaaccess"])
    def test_beta_access_only_accepted_under_wire_name(
        self, valid_signup_payload: dict[str, Any], key: str
    ) -> None:
        payload = {k: v for k, v in valid_signup_payload.items() if k != "betaAccess"}
        payload[key] = True

        with pytest.raises(TikTrendError) as exc_info:
            validate_signup(payload, uuid4())

        detail = exc_info.value.error_detail
        assert detail.error_code == ErrorCode.VALIDATION_ERROR
        assert detail.details["invalid_fields"] == ["betaAccess"]

    def test_missing_fields_are_all_reported(self) -> None:
        with pytest.raises(TikTrendError) as exc_info:
            validate_signup({"name": "", "email": "x", "niche": "y", "betaAccess": True}, uuid4())

        assert exc_info.value.error_detail.details["invalid_fields"] == ["email", "name"]

    @pytest.mark.parametrize("payload", [None, [], "Ava", 7])
    def test_non_object_body_is_rejected(self, payload: Any) -> None:
        with pytest.raises(TikTrendError) as exc_info:
            validate_signup(payload, uuid4())

        assert exc_info.value.error_detail.details["field"] == "body"

    def test_submitted_values_never_appear_in_error(
        self, valid_signup_payload: dict[str, Any]
    ) -> None:
        payload = {**valid_signup_payload, "email": "secret-not-an-address"}

        with pytest.raises(TikTrendError) as exc_info:
            validate_signup(payload, uuid4())

        assert "secret-not-an-address" not in exc_info.value.error_detail.message
        assert "secret-not-an-address" not in str(exc_info.value.error_detail.details)

    def test_same_malformed_payload_fails_identically(self) -> None:
        payload = {"name": "", "email": "x", "niche": "y", "betaAccess": True}

        errors = []
        for _ in range(2):
            with pytest.raises(TikTrendError) as exc_info:
                validate_signup(payload, uuid4())
            errors.append(exc_info.value.error_detail)

        assert errors[0].message == errors[1].message
        assert errors[0].details == errors[1].details
        assert payload == {"name": "", "email": "x", "niche": "y", "betaAccess": True}


class TestValidateHookRequest:
    def test_topic_is_trimmed(self) -> None:
        assert validate_hook_request({"topic": "  home workouts "}, uuid4()).topic == (
            "home workouts"
        )

    @pytest.mark.parametrize("payload", [{}, {"topic": ""}, {"topic": "  "}, {"topic": "t" * 201}])
    def test_invalid_topic_is_rejected(self, payload: dict[str, Any]) -> None:
        with pytest.raises(TikTrendError) as exc_info:
            validate_hook_request(payload, uuid4())

        assert exc_info.value.error_detail.error_code == ErrorCode.VALIDATION_ERROR
