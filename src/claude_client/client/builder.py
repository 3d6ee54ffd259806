"""
Builder classes for the request and configuration DSL.

Builders live only inside a configuration callback: they are created,
handed to the callback, and frozen into an immutable value right after it
returns. A frozen builder rejects every further mutation.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, TypeVar

from claude_client.client.config import (
    BASE_URL_ENV,
    DEFAULT_ANTHROPIC_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    ClientConfig,
)
from claude_client.errors import ConfigurationError, IllegalStateError, ValidationError
from claude_client.telemetry import get_logger
from claude_client.transport.auth import API_KEY_ENV, resolve_api_key
from claude_client.types.content import CacheControl, ContentBlock, Text
from claude_client.types.message import (
    Message,
    MessageRequest,
    Metadata,
    Role,
    SystemPrompt,
)
from claude_client.types.model import Model, ModelSpec, find_spec

logger = get_logger(__name__)

_B = TypeVar("_B", bound="_ScopedBuilder")


class _ScopedBuilder:
    """Single-use builder; mutating methods must call _check_mutable()."""

    def __init__(self) -> None:
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise IllegalStateError(
                f"{type(self).__name__} is frozen and cannot be modified or rebuilt"
            )

    def _freeze(self) -> None:
        self._check_mutable()
        self._frozen = True


def _run_scope(builder: _B, configure: Callable[[_B], Any] | None) -> _B:
    if configure is not None:
        configure(builder)
    return builder


class MessageBuilder(_ScopedBuilder):
    """Builder for a single conversation turn.

    Example:
        >>> message = build_message(lambda m: m.role(Role.USER).text("Hello!"))
    """

    def __init__(self) -> None:
        super().__init__()
        self._role = Role.USER
        self._content: list[ContentBlock] = []

    def role(self, role: Role | str) -> MessageBuilder:
        """Set the role (defaults to USER)."""
        self._check_mutable()
        self._role = Role(role)
        return self

    def text(self, text: str, *, cache: bool = False) -> MessageBuilder:
        """Append a text block.

        Args:
            text: Text content
            cache: Mark the block as a prompt caching breakpoint
        """
        self._check_mutable()
        self._content.append(Text(text, cache_control=CacheControl() if cache else None))
        return self

    def content(self, *blocks: ContentBlock | str) -> MessageBuilder:
        """Append content blocks; strings become Text blocks."""
        self._check_mutable()
        for block in blocks:
            self._content.append(Text(block) if isinstance(block, str) else block)
        return self

    def build(self) -> Message:
        """Freeze into a Message.

        Raises:
            ValidationError: If no content was added
        """
        self._freeze()
        if not self._content:
            raise ValidationError("empty content in message", field="content")
        return Message(role=self._role, content=tuple(self._content))


def build_message(configure: Callable[[MessageBuilder], Any]) -> Message:
    """Run a message configuration callback and return the frozen Message."""
    return _run_scope(MessageBuilder(), configure).build()


class MessageRequestBuilder(_ScopedBuilder):
    """Builder for message requests.

    Example:
        >>> request = build_request(
        ...     lambda r: r.model("claude-3-5-haiku-latest")
        ...     .system("Answer briefly.")
        ...     .user("Hi Claude"),
        ...     model="claude-3-5-sonnet-latest",
        ...     max_tokens=1024,
        ... )
    """

    def __init__(self, default_model: str, default_max_tokens: int) -> None:
        super().__init__()
        self._model = default_model
        self._max_tokens = default_max_tokens
        self._messages: list[Message] = []
        self._system: list[SystemPrompt] = []
        self._temperature: float | None = None
        self._top_k: int | None = None
        self._top_p: float | None = None
        self._stop_sequences: list[str] = []
        self._metadata: Metadata | None = None

    def model(self, model: Model | str) -> MessageRequestBuilder:
        """Set the model, overriding the client default."""
        self._check_mutable()
        self._model = model.value if isinstance(model, Model) else model
        return self

    def max_tokens(self, value: int) -> MessageRequestBuilder:
        """Set maximum tokens to generate."""
        self._check_mutable()
        self._max_tokens = value
        return self

    def system(self, text: str) -> MessageRequestBuilder:
        """Add a system prompt block."""
        self._check_mutable()
        self._system.append(SystemPrompt(text=text))
        return self

    def temperature(self, value: float) -> MessageRequestBuilder:
        self._check_mutable()
        self._temperature = value
        return self

    def top_k(self, value: int) -> MessageRequestBuilder:
        self._check_mutable()
        self._top_k = value
        return self

    def top_p(self, value: float) -> MessageRequestBuilder:
        self._check_mutable()
        self._top_p = value
        return self

    def stop_sequences(self, *sequences: str) -> MessageRequestBuilder:
        """Append stop sequences."""
        self._check_mutable()
        self._stop_sequences.extend(sequences)
        return self

    def metadata(self, user_id: str) -> MessageRequestBuilder:
        self._check_mutable()
        self._metadata = Metadata(user_id=user_id)
        return self

    def message(self, configure: Callable[[MessageBuilder], Any]) -> MessageRequestBuilder:
        """Append a message built in a nested scope."""
        self._check_mutable()
        self._messages.append(build_message(configure))
        return self

    def messages(self, *messages: Message) -> MessageRequestBuilder:
        """Append already built messages, preserving order."""
        self._check_mutable()
        self._messages.extend(messages)
        return self

    def user(self, text: str) -> MessageRequestBuilder:
        """Append a user message with a single text block."""
        self._check_mutable()
        self._messages.append(Message.user(text))
        return self

    def assistant(self, text: str) -> MessageRequestBuilder:
        """Append an assistant message with a single text block."""
        self._check_mutable()
        self._messages.append(Message.assistant(text))
        return self

    def build(self) -> MessageRequest:
        """Validate and freeze into a MessageRequest.

        Raises:
            ValidationError: If there are no messages, a message has no
                content, or the model is empty
            IllegalStateError: If the builder was already frozen
        """
        self._freeze()

        if not self._model:
            raise ValidationError("model required", field="model")
        if not self._messages:
            raise ValidationError("messages required", field="messages")

        for i, message in enumerate(self._messages):
            if not message.content:
                raise ValidationError(
                    "empty content in message", field=f"messages[{i}].content"
                )
            for j, block in enumerate(message.content):
                if isinstance(block, Text) and block.is_empty:
                    logger.warning(
                        "Empty text block, likely a caller error",
                        field=f"messages[{i}].content[{j}]",
                    )

        if self._messages[0].role != Role.USER:
            logger.warning(
                "First message is not from the user",
                role=self._messages[0].role.value,
            )

        return MessageRequest(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=tuple(self._messages),
            system=tuple(self._system) or None,
            temperature=self._temperature,
            top_k=self._top_k,
            top_p=self._top_p,
            stop_sequences=tuple(self._stop_sequences) or None,
            metadata=self._metadata,
        )


def build_request(
    configure: Callable[[MessageRequestBuilder], Any],
    *,
    model: str,
    max_tokens: int,
) -> MessageRequest:
    """Run a request configuration callback and return the frozen request.

    Args:
        configure: Callback populating the builder
        model: Default model
        max_tokens: Default maximum tokens
    """
    return _run_scope(MessageRequestBuilder(model, max_tokens), configure).build()


class ClientConfigBuilder(_ScopedBuilder):
    """Builder for ClientConfig.

    Example:
        >>> config = build_config(
        ...     lambda c: c.api_key("sk-ant-...")
        ...     .default_model(Model.CLAUDE_3_5_HAIKU)
        ...     .timeout(30)
        ... )
    """

    def __init__(self) -> None:
        super().__init__()
        self._api_key: str | None = None
        self._base_url: str | None = None
        self._default_model: str = Model.default().value
        self._default_max_tokens: int | None = None
        self._timeout: float = DEFAULT_TIMEOUT
        self._anthropic_version = DEFAULT_ANTHROPIC_VERSION
        self._beta: list[str] = []
        self._proxy: str | None = None
        self._models: dict[str, ModelSpec] = {}

    def api_key(self, key: str) -> ClientConfigBuilder:
        """Set explicit API key, overriding ANTHROPIC_API_KEY."""
        self._check_mutable()
        self._api_key = key
        return self

    def base_url(self, url: str) -> ClientConfigBuilder:
        """Override the API base URL."""
        self._check_mutable()
        self._base_url = url
        return self

    def default_model(self, model: Model | str) -> ClientConfigBuilder:
        """Set the model used when a request does not name one."""
        self._check_mutable()
        self._default_model = model.value if isinstance(model, Model) else model
        return self

    def default_max_tokens(self, value: int) -> ClientConfigBuilder:
        """Set max tokens used when a request does not set them.

        Defaults to the default model's maximum output when known, else 4096.
        """
        self._check_mutable()
        self._default_max_tokens = value
        return self

    def timeout(self, value: float | timedelta) -> ClientConfigBuilder:
        """Set request timeout in seconds."""
        self._check_mutable()
        self._timeout = value.total_seconds() if isinstance(value, timedelta) else float(value)
        return self

    def anthropic_version(self, version: str) -> ClientConfigBuilder:
        self._check_mutable()
        self._anthropic_version = version
        return self

    def beta(self, *features: str) -> ClientConfigBuilder:
        """Enable beta features by id."""
        self._check_mutable()
        self._beta.extend(features)
        return self

    def proxy(self, url: str) -> ClientConfigBuilder:
        """Route requests through an HTTP proxy."""
        self._check_mutable()
        self._proxy = url
        return self

    def models(self, specs: Mapping[str, ModelSpec]) -> ClientConfigBuilder:
        """Register limits and pricing for model ids.

        Entries override the built-in catalogue and are used to price usage
        and to default max tokens.

        Example:
            >>> builder.models(
            ...     {"claude-sonnet-4-0": ModelSpec(200_000, 64_000, Cost.per_million("3", "15"))}
            ... )
        """
        self._check_mutable()
        self._models.update(specs)
        return self

    def build(self) -> ClientConfig:
        """Resolve defaults, validate and freeze.

        Raises:
            ConfigurationError: If no API key can be found, or a value is invalid
        """
        self._freeze()

        api_key = resolve_api_key(self._api_key)
        if not api_key:
            raise ConfigurationError(
                "missing API key",
                option="api_key",
                hint=f"call api_key(...) or set the {API_KEY_ENV} environment variable",
            )
        if self._timeout <= 0:
            raise ConfigurationError("timeout must be positive", option="timeout")

        max_tokens = self._default_max_tokens
        if max_tokens is None:
            known = find_spec(self._default_model, self._models)
            max_tokens = known.max_output if known else 4096
        if max_tokens <= 0:
            raise ConfigurationError("default_max_tokens must be positive", option="default_max_tokens")

        return ClientConfig(
            api_key=api_key,
            base_url=self._base_url or os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL,
            default_model=self._default_model,
            default_max_tokens=max_tokens,
            timeout=self._timeout,
            anthropic_version=self._anthropic_version,
            anthropic_beta=tuple(self._beta),
            proxy=self._proxy,
            models=dict(self._models),
        )


def build_config(configure: Callable[[ClientConfigBuilder], Any] | None = None) -> ClientConfig:
    """Run a configuration callback and return the frozen ClientConfig."""
    return _run_scope(ClientConfigBuilder(), configure).build()
