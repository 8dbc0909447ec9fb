"""
TEST DOC: Value Models

WHAT: Tests for Message, SamplingOptions, ClientOptions and build_options
WHY: Messages must be immutable values and bad configuration must be
     rejected before the client ever talks to the service
HOW: Construct models directly and through build_options

CASES:
- Message constructors and wire form
- Default sampling options
- Every documented range boundary

EDGE CASES:
- Out-of-range values raise ConfigurationError
- Credential is hidden from repr
- Unknown option names are rejected
"""

import pytest
from pydantic import ValidationError

from chatgpt_client.errors import ConfigurationError
from chatgpt_client.models import (
    DEFAULT_ENDPOINT,
    ClientOptions,
    Message,
    Role,
    SamplingOptions,
    build_options,
)


class TestMessage:
    def test_constructors_set_role(self):
        assert Message.system("s").role == Role.SYSTEM
        assert Message.user("u").role == Role.USER
        assert Message.assistant("a").role == Role.ASSISTANT

    def test_wire_form(self):
        assert Message.user("hello").to_wire() == {"role": "user", "content": "hello"}

    def test_parses_from_wire(self):
        message = Message.model_validate({"role": "assistant", "content": "hi"})
        assert message == Message.assistant("hi")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Message.model_validate({"role": "tool", "content": "x"})

    def test_message_is_frozen(self):
        message = Message.user("hello")
        with pytest.raises(ValidationError):
            message.role = Role.ASSISTANT  # type: ignore[misc]

    def test_messages_compare_by_value(self):
        assert Message.user("a") == Message(role=Role.USER, content="a")
        assert Message.user("a") != Message.assistant("a")


class TestSamplingOptions:
    def test_defaults(self):
        sampling = SamplingOptions()
        assert sampling.temperature == 1.0
        assert sampling.top_p == 1.0
        assert sampling.n == 1
        assert sampling.stop is None
        assert sampling.max_tokens is None
        assert sampling.presence_penalty == 0.0
        assert sampling.frequency_penalty == 0.0
        assert sampling.logit_bias is None
        assert sampling.user is None

    def test_stop_is_stored_immutably(self):
        sampling = SamplingOptions(stop=["\n", "END"])
        assert sampling.stop == ("\n", "END")


class TestBuildOptions:
    def test_minimal(self):
        options = build_options(api_key="key", model="m")
        assert options.model == "m"
        assert options.endpoint == DEFAULT_ENDPOINT
        assert options.sampling == SamplingOptions()

    def test_sampling_keywords_routed(self):
        options = build_options(
            api_key="key",
            model="m",
            temperature=0.2,
            n=3,
            stop=["x"],
            logit_bias={"50256": -100},
            user="alice",
            timeout=5,
        )
        assert options.sampling.temperature == 0.2
        assert options.sampling.n == 3
        assert options.sampling.stop == ("x",)
        assert options.sampling.logit_bias == {"50256": -100.0}
        assert options.sampling.user == "alice"
        assert options.timeout == 5

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"temperature": 0.0},
            {"temperature": 2.0},
            {"top_p": 0.0},
            {"top_p": 1.0},
            {"n": 1},
            {"stop": ["a", "b", "c", "d"]},
            {"max_tokens": 1},
            {"presence_penalty": -2.0},
            {"frequency_penalty": 2.0},
            {"logit_bias": {"1": -100, "2": 100}},
        ],
    )
    def test_boundaries_accepted(self, kwargs):
        build_options(api_key="key", model="m", **kwargs)

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"temperature": -0.1}, "temperature"),
            ({"temperature": 2.1}, "temperature"),
            ({"top_p": 1.5}, "top_p"),
            ({"top_p": -0.5}, "top_p"),
            ({"n": 0}, "n"),
            ({"stop": ["a", "b", "c", "d", "e"]}, "stop"),
            ({"max_tokens": 0}, "max_tokens"),
            ({"presence_penalty": 2.5}, "presence_penalty"),
            ({"frequency_penalty": -3}, "frequency_penalty"),
            ({"logit_bias": {"1": 101}}, "logit_bias"),
            ({"logit_bias": {"1": -100.5}}, "logit_bias"),
            ({"timeout": 0}, "timeout"),
        ],
    )
    def test_out_of_range_rejected(self, kwargs, field):
        with pytest.raises(ConfigurationError, match=field):
            build_options(api_key="key", model="m", **kwargs)

    def test_empty_model_rejected(self):
        with pytest.raises(ConfigurationError, match="model"):
            build_options(api_key="key", model="")

    def test_unknown_option_rejected(self):
        with pytest.raises(ConfigurationError, match="bogus"):
            build_options(api_key="key", model="m", bogus=1)

    def test_api_key_hidden(self):
        options = build_options(api_key="sk-very-secret", model="m")
        assert "sk-very-secret" not in repr(options)
        assert "sk-very-secret" not in str(options)
        assert options.api_key.get_secret_value() == "sk-very-secret"

    def test_options_are_frozen(self):
        options = build_options(api_key="key", model="m")
        with pytest.raises(ValidationError):
            options.model = "other"  # type: ignore[misc]

    def test_options_roundtrip_through_constructor(self):
        options = ClientOptions(api_key="key", model="m", sampling={"n": 2})
        assert options.sampling.n == 2
