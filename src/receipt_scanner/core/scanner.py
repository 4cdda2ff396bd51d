"""Receipt scanner: vision model call plus the parsing pipeline."""

import logging
import os
from pathlib import Path
from typing import Any

from PIL import Image
from seeds_clients import Message, OpenAIClient
from seeds_clients.core.base_client import BaseClient
from seeds_clients.core.types import CumulativeTracking

from receipt_scanner.core.config import ScanConfig
from receipt_scanner.core.exceptions import ConfigurationError, ImageError, LLMError
from receipt_scanner.core.pipeline import ReceiptExtractor
from receipt_scanner.prompts.builder import ReceiptPromptBuilder
from receipt_scanner.results.types import ExtractionResult, ScanResult

# Type alias for image inputs
ImageInput = str | Path | Image.Image | bytes

_REMOTE_PREFIXES = ("http://", "https://", "data:")

logger = logging.getLogger(__name__)


class ReceiptScanner:
    """Scans receipt images with a vision-capable LLM.

    Uses seeds-clients for the model call and :class:`ReceiptExtractor` to
    turn whatever text comes back into a canonical receipt. Only failures
    outside the parsing pipeline raise: missing credentials, unreadable
    images and failed model calls.

    Example:
        ```python
        from receipt_scanner import ReceiptScanner

        scanner = ReceiptScanner(model="gpt-4.1")
        result = scanner.scan("./uploads/receipt-1.jpg", user_id="user-1")
        print(result.receipt.vendor_name, result.receipt.total_amount)

        # Any seeds-clients client works, e.g. an OpenRouter vision model
        from seeds_clients import OpenRouterClient
        client = OpenRouterClient(model="meta-llama/llama-3.2-11b-vision-instruct")
        scanner = ReceiptScanner(client=client)
        ```
    """

    _client: BaseClient

    def __init__(
        self,
        client: BaseClient | None = None,
        api_key: str | None = None,
        model: str = "gpt-4.1",
        cache_dir: str = "cache",
        cache_ttl_hours: float | None = 24.0,
        default_config: ScanConfig | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the receipt scanner.

        Args:
            client: Pre-configured LLM client from seeds-clients. If provided,
                api_key, model, cache_dir, and cache_ttl_hours are ignored.
            api_key: OpenAI API key. Only used if client is not provided.
                If not provided, uses OPENAI_API_KEY env var.
            model: LLM model to use. Only used if client is not provided.
            cache_dir: Directory for caching LLM responses. Only used if client is not provided.
            cache_ttl_hours: Cache TTL in hours. Only used if client is not provided.
            default_config: Default scan configuration.
            log: Logger receiving diagnostics. Defaults to this module's logger.

        Raises:
            ConfigurationError: If no client is given and no API key is available.
        """
        self.default_config = default_config or ScanConfig()
        self._log = log or logger

        if client is not None:
            self._client = client
            self.model = client.model
        else:
            resolved_key = api_key or os.getenv("OPENAI_API_KEY")
            if not resolved_key:
                raise ConfigurationError("OpenAI API key is not configured")
            self.model = model
            self._client = OpenAIClient(
                api_key=resolved_key,
                model=model,
                cache_dir=cache_dir,
                ttl_hours=cache_ttl_hours,
            )

        self._prompt_builder = ReceiptPromptBuilder()

    def scan(
        self,
        image: ImageInput,
        user_id: str,
        image_url: str | None = None,
        config: ScanConfig | None = None,
        use_cache: bool | None = None,
    ) -> ScanResult:
        """Extract a receipt from an image.

        Args:
            image: File path, URL, PIL Image or raw bytes of the receipt.
            user_id: Owner of the receipt.
            image_url: Location stored with the receipt. Defaults to the image
                path without its leading ``.`` (``./uploads/a.jpg`` -> ``/uploads/a.jpg``).
            config: Scan configuration (overrides default).
            use_cache: Override ``config.use_cache`` for this call.

        Returns:
            ScanResult with the receipt ready for persistence.

        Raises:
            ImageError: If the image file is missing or cannot be read.
            LLMError: If the model call keeps failing or returns no content.
        """
        resolved_config = config or self.default_config
        image_source = self._load_image(image)

        prompt = self._prompt_builder.build_prompt(
            custom_prompt=resolved_config.prompt,
            additional_context=resolved_config.additional_context,
        )
        content: list[dict[str, Any]] = [
            {"type": "text", "text": prompt},
            {"type": "image", "source": image_source},
        ]
        messages = [Message(role="user", content=content)]

        llm_kwargs: dict[str, Any] = {
            "temperature": resolved_config.temperature,
        }
        if resolved_config.max_tokens:
            llm_kwargs["max_tokens"] = resolved_config.max_tokens

        response = self._call_llm_with_retry(
            messages=messages,
            config=resolved_config,
            use_cache=use_cache,
            **llm_kwargs,
        )
        self._log.info("Model response: %s...", response.content[:100])

        extraction = self._extractor(resolved_config).extract(response.content)
        return ScanResult(
            receipt=extraction.record.to_stored(
                user_id=user_id,
                image_url=image_url if image_url is not None else _default_image_url(image),
            ),
            strategy=extraction.strategy,
            model_used=response.model,
            cached=response.cached,
            tokens_used=response.usage.total_tokens,
            cost_usd=response.tracking.cost_usd if response.tracking else None,
            raw_response=response.content,
        )

    def scan_text(
        self,
        raw_response: str,
        user_id: str,
        image_url: str | None = None,
        config: ScanConfig | None = None,
    ) -> ScanResult:
        """Re-process a stored model response without calling the model."""
        extraction: ExtractionResult = self._extractor(config or self.default_config).extract(
            raw_response
        )
        return ScanResult(
            receipt=extraction.record.to_stored(user_id=user_id, image_url=image_url),
            strategy=extraction.strategy,
            raw_response=raw_response,
        )

    def _extractor(self, config: ScanConfig) -> ReceiptExtractor:
        return ReceiptExtractor(config=config.parsing, log=self._log)

    def _call_llm_with_retry(
        self,
        messages: list[Message],
        config: ScanConfig,
        use_cache: bool | None = None,
        **llm_kwargs: Any,
    ) -> Any:
        """Call the model until it returns non-empty content.

        Returns:
            The LLM response if successful.

        Raises:
            LLMError: If every attempt failed or returned no content.
        """
        cache_enabled = config.use_cache if use_cache is None else use_cache
        last_error: LLMError | None = None

        for attempt in range(config.max_retries):
            try:
                self._log.debug(
                    "Scan attempt %d/%d (model=%s)",
                    attempt + 1,
                    config.max_retries,
                    self.model,
                )
                response = self._client.generate(
                    messages,
                    use_cache=cache_enabled,
                    **llm_kwargs,
                )
            except Exception as e:
                last_error = LLMError(
                    f"LLM call failed on attempt {attempt + 1}: {str(e)}",
                    last_error=e,
                )
                self._log.warning("LLM call failed on attempt %d: %s", attempt + 1, str(e))
                continue

            if isinstance(response.content, str) and response.content.strip():
                return response

            last_error = LLMError(
                "LLM returned an empty response",
                raw_response=response.content,
            )
            self._log.warning("Empty model response on attempt %d", attempt + 1)

        self._log.error("Scan failed after %d attempts: %s", config.max_retries, str(last_error))
        raise last_error or LLMError("No model call was attempted")

    def _load_image(self, image: ImageInput) -> str | bytes | Image.Image:
        """Check the image and normalize it to a source seeds-clients accepts.

        Raises:
            ImageError: If a local image is missing or not a readable image.
        """
        if isinstance(image, (bytes, Image.Image)):
            return image
        if isinstance(image, str) and image.startswith(_REMOTE_PREFIXES):
            return image

        path = Path(image)
        if not path.is_file():
            raise ImageError(f"Receipt image not found: {path}")
        try:
            with Image.open(path) as img:
                img.verify()
        except Exception as e:
            raise ImageError(f"Unreadable receipt image {path}: {e}", last_error=e) from e
        return str(path)

    # =========================================================================
    # Tracking
    # =========================================================================

    @property
    def cumulative_tracking(self) -> CumulativeTracking:
        """Cumulative request counts, token usage and costs of this scanner's client."""
        return self._client.cumulative_tracking

    def reset_cumulative_tracking(self) -> None:
        """Reset cumulative tracking to start fresh measurements."""
        self._client.reset_cumulative_tracking()


def _default_image_url(image: ImageInput) -> str | None:
    if isinstance(image, (bytes, Image.Image)):
        return None
    location = str(image)
    return location[1:] if location.startswith(".") else location
