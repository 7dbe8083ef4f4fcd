"""Claude API client for Javadoc generation.

Wraps the Anthropic SDK to send documentation requests with a short
connect timeout and a longer request timeout, retries requests that
time out, treats error payloads as terminal, and extracts the Javadoc
body from the generated text.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import anthropic

from docwriter.generators.prompt_builder import DocumentationRequest
from docwriter.utils.config import APIConfig

logger = logging.getLogger(__name__)

OPEN_DELIMITER = "/**"
CLOSE_DELIMITER = "*/"


class GenerationError(Exception):
    """Raised when the backend fails to produce a usable response."""


@dataclass
class TokenUsage:
    """Token usage statistics for one or more API calls.

    Attributes:
        input_tokens: Number of tokens in the prompt.
        output_tokens: Number of tokens in the response.
    """

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Total tokens consumed."""
        return self.input_tokens + self.output_tokens

    def add(self, other: "TokenUsage") -> None:
        """Accumulate another usage record into this one."""
        self.input_tokens += other.input_tokens
        self.output_tokens += other.output_tokens


@dataclass
class DocumentationResult:
    """Outcome of a generation call.

    Attributes:
        body: Text between the first ``/**`` and the last ``*/`` of the
            response, or None when the response held no Javadoc block.
        content: Full generated text.
        usage: Token usage of the call.
    """

    body: Optional[str]
    content: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def found(self) -> bool:
        """Whether a Javadoc body was extracted."""
        return self.body is not None


def extract_documentation(content: str) -> Optional[str]:
    """Extract the Javadoc body from generated text.

    Uses the first opening delimiter and the last closing delimiter, so
    stray ``*/`` sequences inside the body do not truncate it.

    Args:
        content: Text generated by the model.

    Returns:
        The text between the delimiters, or None if either is missing.
    """
    start = content.find(OPEN_DELIMITER)
    end = content.rfind(CLOSE_DELIMITER)
    if start == -1 or end < start + len(OPEN_DELIMITER):
        return None
    return content[start + len(OPEN_DELIMITER) : end]


class LLMClient:
    """Client for the Anthropic Claude API with timeouts and bounded retries.

    Only timeouts are retried. Error responses indicate a problem with
    the request itself (quota, invalid input) and fail immediately.
    """

    def __init__(self, config: Optional[APIConfig] = None) -> None:
        """Initialize the LLM client.

        Args:
            config: API configuration, including the API key. Uses
                defaults if not provided.
        """
        self.config = config or APIConfig()
        self._client: Optional[anthropic.Anthropic] = None
        self._last_request_time: float = 0.0
        self._request_interval: float = 60.0 / max(self.config.rate_limit_rpm, 1)
        self._total_usage = TokenUsage()

    @property
    def client(self) -> anthropic.Anthropic:
        """Lazily initialize the Anthropic client.

        Returns:
            An authenticated Anthropic client instance.

        Raises:
            ValueError: If no API key is configured.
        """
        if self._client is None:
            if not self.config.api_key:
                raise ValueError(
                    "ANTHROPIC_API_KEY environment variable is not set. "
                    "Set it before making API calls."
                )
            self._client = anthropic.Anthropic(
                api_key=self.config.api_key,
                timeout=anthropic.Timeout(
                    self.config.request_timeout, connect=self.config.connect_timeout
                ),
                max_retries=0,
            )
        return self._client

    def generate(self, request: DocumentationRequest) -> DocumentationResult:
        """Generate Javadoc for a documentation request.

        Args:
            request: The request built for a declaration.

        Returns:
            A DocumentationResult. Its body is None when the response
            contained no Javadoc block.

        Raises:
            GenerationError: If the backend returns an error, times out
                on every attempt, or sends an unexpected response.
        """
        self._apply_rate_limit()

        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "system": request.instructions,
            "messages": _build_messages(request),
        }
        if request.stop_sequences:
            kwargs["stop_sequences"] = list(request.stop_sequences)

        logger.debug("Sending request for %s:\n%s", request.name, request.source)
        response = self._call_with_retry(**kwargs)

        content = _first_text(response)
        usage = TokenUsage(
            input_tokens=getattr(response.usage, "input_tokens", 0) or 0,
            output_tokens=getattr(response.usage, "output_tokens", 0) or 0,
        )
        self._total_usage.add(usage)

        logger.debug("Response received for %s:\n%s", request.name, content)
        logger.info(
            "Generated %d tokens for %s (input: %d, output: %d)",
            usage.total_tokens,
            request.name,
            usage.input_tokens,
            usage.output_tokens,
        )

        return DocumentationResult(
            body=extract_documentation(content),
            content=content,
            usage=usage,
        )

    @property
    def total_usage(self) -> TokenUsage:
        """Get the cumulative token usage across all calls."""
        return self._total_usage

    def _apply_rate_limit(self) -> None:
        """Apply rate limiting by sleeping if necessary."""
        now = time.monotonic()
        elapsed = now - self._last_request_time
        if elapsed < self._request_interval:
            sleep_time = self._request_interval - elapsed
            logger.debug("Rate limiting: sleeping %.2f seconds", sleep_time)
            time.sleep(sleep_time)
        self._last_request_time = time.monotonic()

    def _call_with_retry(self, **kwargs: Any) -> anthropic.types.Message:
        """Make an API call, retrying only when the request times out.

        Args:
            **kwargs: Arguments to pass to the Anthropic messages.create call.

        Returns:
            The API response Message.

        Raises:
            GenerationError: On an error response, a connection failure,
                or when every attempt timed out.
        """
        attempts = max(self.config.max_attempts, 1)
        for attempt in range(1, attempts + 1):
            try:
                return self.client.messages.create(**kwargs)
            except anthropic.APITimeoutError as e:
                if attempt == attempts:
                    raise GenerationError(
                        f"Request timed out after {attempts} attempts"
                    ) from e
                logger.warning(
                    "Request timed out (attempt %d/%d), retrying", attempt, attempts
                )
            except anthropic.APIStatusError as e:
                raise GenerationError(
                    f"Backend returned error {e.status_code}: {_error_detail(e)}"
                ) from e
            except anthropic.APIConnectionError as e:
                raise GenerationError(f"Could not reach backend: {e}") from e

        raise GenerationError("No request attempt was made")


def _build_messages(request: DocumentationRequest) -> list[dict[str, str]]:
    messages = []
    for example in request.examples:
        messages.append({"role": "user", "content": example.user})
        messages.append({"role": "assistant", "content": example.assistant})
    messages.append({"role": "user", "content": request.source})
    return messages


def _first_text(response: Any) -> str:
    """Return the text of the first content block of a response.

    Raises:
        GenerationError: If the response carries no text block.
    """
    blocks = getattr(response, "content", None)
    if not blocks:
        raise GenerationError("Response contains no content")
    text = getattr(blocks[0], "text", None)
    if not isinstance(text, str):
        raise GenerationError("First content block of the response is not text")
    return text


def _error_detail(error: anthropic.APIStatusError) -> str:
    body = error.body
    if isinstance(body, dict):
        detail = body.get("error", body)
        if isinstance(detail, dict):
            return str(detail.get("message", detail))
        return str(detail)
    return str(error)
