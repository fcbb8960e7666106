"""Unit tests for the error hierarchy."""

from __future__ import annotations

import json

import pytest

from metric_registry.config import ConfigError, InvalidSettingValueError
from metric_registry.errors import (
    BaseError,
    ConflictingRegistrationError,
    InfrastructureError,
    InvalidBucketsError,
    InvalidLabelNameError,
    InvalidMetricNameError,
    LabelCardinalityError,
    NegativeIncrementError,
    ServerStartError,
    ServerStateError,
    TLSConfigurationError,
    UsageError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_cause_sets_dunder_cause(self) -> None:
        cause = OSError("address in use")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause
        assert "address in use" in err.to_dict()["cause"]

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops", detail={"x": 1})))
        assert parsed["code"] == "oops"
        assert parsed["detail"] == {"x": 1}

    def test_repr(self) -> None:
        assert repr(UsageError("bad")) == "UsageError(code='usage_error', message='bad')"


class TestUsageErrors:
    @pytest.mark.parametrize(
        "err",
        [
            InvalidMetricNameError("test-counter"),
            InvalidLabelNameError("__x", "reserved"),
            LabelCardinalityError("m", ["a", "b"], ["x"]),
            ConflictingRegistrationError("m", "counter", "gauge"),
            InvalidBucketsError([2.0, 1.0], "not ascending"),
            NegativeIncrementError("m", -1.0),
            ServerStateError("already serving"),
            InvalidSettingValueError("port", -1, "negative"),
        ],
    )
    def test_all_are_usage_errors(self, err: BaseError) -> None:
        assert isinstance(err, UsageError)

    def test_config_error_is_usage_error(self) -> None:
        assert issubclass(ConfigError, UsageError)

    def test_invalid_metric_name_detail(self) -> None:
        err = InvalidMetricNameError("test-counter")
        assert err.code == "invalid_metric_name"
        assert err.detail == {"name": "test-counter"}
        assert "test-counter" in err.message

    def test_label_cardinality_message(self) -> None:
        err = LabelCardinalityError("requests", ["status", "app"], ["200"])
        assert "expects 2" in err.message
        assert "got 1" in err.message

    def test_conflicting_registration_names_both_sides(self) -> None:
        err = ConflictingRegistrationError("x", "counter(...)", "gauge(...)")
        assert err.detail["existing"] == "counter(...)"
        assert err.detail["requested"] == "gauge(...)"


class TestInfrastructureErrors:
    def test_server_start_error(self) -> None:
        cause = OSError(98, "Address already in use")
        err = ServerStartError("127.0.0.1", 9090, cause=cause)
        assert isinstance(err, InfrastructureError)
        assert err.port == 9090
        assert err.__cause__ is cause
        assert "127.0.0.1:9090" in err.message

    def test_tls_configuration_error(self) -> None:
        err = TLSConfigurationError("cannot load", path="/nope.crt")
        assert isinstance(err, InfrastructureError)
        assert err.detail == {"path": "/nope.crt"}
