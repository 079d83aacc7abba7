"""Ollama-based embedding provider.

Uses Ollama's local API to generate embeddings for normalized addresses.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull nomic-embed-text` (or let ensure_model() pull it)
    - Ollama running: `ollama serve`

Models available:
- nomic-embed-text (137M params, 768 dims) - default
- mxbai-embed-large (335M params, 1024 dims)
- all-minilm (22M params, 384 dims)
"""

import logging

import httpx

from geo_semantic_cache.config import settings
from geo_semantic_cache.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="nomic-embed-text",
            base_url="http://localhost:11434"
        )
        embedding = await provider.encode("mg road pune maharashtra")
        print(len(embedding))  # 768
        ```
    """

    # Known model dimensions (for common models)
    MODEL_DIMENSIONS = {
        "nomic-embed-text": 768,
        "embeddinggemma": 768,
        "mxbai-embed-large": 1024,
        "all-minilm": 384,
        "all-minilm:l6-v2": 384,
    }

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model. Defaults to settings.embedding_model.
            base_url: Ollama API base URL. Defaults to settings.ollama_base_url.
            timeout: Request timeout in seconds. Defaults to settings.embedding_timeout_seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.embedding_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                transport=self._transport,
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension.

        Known models report their own dimension; anything else falls back
        to settings.embedding_dimension.
        """
        return self.MODEL_DIMENSIONS.get(self._model_name, settings.embedding_dimension)

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingProviderError: If the Ollama request fails or the
                response has no embedding
        """
        url = f"{self._base_url}/api/embeddings"
        payload = {
            "model": self._model_name,
            "prompt": text,
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if isinstance(e, httpx.ConnectError):
                error_msg += " (is Ollama running? Try: ollama serve)"
            elif isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
                error_msg += f" (model not found? Try: ollama pull {self._model_name})"
            raise EmbeddingProviderError(error_msg) from e
        except ValueError as e:
            raise EmbeddingProviderError(f"Invalid JSON from Ollama: {e}") from e

        # /api/embeddings returns {"embedding": [...]}, /api/embed {"embeddings": [[...]]}
        if isinstance(data, dict):
            if data.get("embedding"):
                return [float(v) for v in data["embedding"]]
            if data.get("embeddings"):
                return [float(v) for v in data["embeddings"][0]]

        raise EmbeddingProviderError(f"Unexpected response format from Ollama: {data!r}")

    async def is_available(self) -> bool:
        """Check if the Ollama server answers.

        Returns:
            True if Ollama is reachable, False otherwise
        """
        try:
            response = await self.client.get(f"{self._base_url}/api/tags", timeout=3.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def ensure_model(self) -> bool:
        """Make sure the configured model is present, pulling it if needed.

        Returns:
            True if the model is (now) available, False otherwise
        """
        try:
            response = await self.client.get(f"{self._base_url}/api/tags")
            response.raise_for_status()
            models = response.json().get("models", [])
            if any(self._model_name in m.get("name", "") for m in models):
                return True

            logger.info("Model %s not found. Pulling...", self._model_name)
            # Pulling can take minutes; do not apply the request timeout
            pull = await self.client.post(
                f"{self._base_url}/api/pull",
                json={"name": self._model_name, "stream": False},
                timeout=None,
            )
            pull.raise_for_status()
            logger.info("Model %s pulled successfully", self._model_name)
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not verify Ollama model %s: %s", self._model_name, e)
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
