"""
Ollama-backed generation and remote embeddings.
Poems, roasts and image tagging go to the vision model through /api/generate
and /api/chat; remote embeddings go through /api/embed.
"""

import re
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import ollama

from ..core import config
from ..core.errors import ProviderError
from ..vector.types import TextEmbedding
from util.logging import logger

POEM_FROM_TEXT_PROMPT = (
    "Write a creative, evocative poem based on the following theme or idea. "
    "Output ONLY the poem, no explanations or titles.\n\nTheme: {theme}"
)

POEM_FROM_IMAGE_PROMPT = (
    "Look at this image carefully. Write a creative, evocative poem inspired by what you see. "
    "Output ONLY the poem, no explanations or titles."
)

ROAST_PROMPT = (
    "Look at this image carefully. Write a short, funny roast or comedic insult about what you see. "
    "Be playful and humorous like a comedy roast - gentle teasing, not mean-spirited. "
    "Keep it light-hearted and fun. Output ONLY the roast, no explanations or commentary. "
    "Make it punchy and memorable, 2-4 sentences max."
)

EXTRACT_WORDS_PROMPT = (
    "Look at this image carefully and choose EXACTLY 3 words from the following list "
    "that best describe its mood, character and style: {words}. "
    "Output ONLY the 3 words separated by commas, nothing else. "
    "Example: smug, confused, detective"
)

POEM_TEMPERATURE = 0.7
ROAST_TEMPERATURE = 0.9
TAGGING_TEMPERATURE = 0.2


class OllamaServiceError(ProviderError):
    """An Ollama request failed or returned an unusable response."""
    pass


def parse_word_list(raw: str) -> List[str]:
    """
    Split a model reply such as "1. Smug, confused\\n- detective." into
    lower-cased words.
    """
    words = []
    for part in re.split(r"[,\n]", raw or ""):
        word = part.strip()
        # Drop list markers and surrounding punctuation
        word = re.sub(r"^(\d+[.)]|[-*•])\s*", "", word)
        word = word.strip(" \t\"'`*.;:").lower()
        if word:
            words.append(word)
    return words


class OllamaService:
    """
    Client for the local Ollama server.

    Every failure is raised as OllamaServiceError with a message suitable
    for returning to API callers.
    """

    def __init__(self, base_url: str = None, model: str = None, embed_model: str = None,
                 client: Optional[ollama.Client] = None, timeout: float = None):
        self.base_url = base_url or config.OLLAMA_BASE_URL
        self.model = model or config.OLLAMA_MODEL
        self.embed_model = embed_model or config.OLLAMA_EMBED_MODEL
        self.client = client or ollama.Client(
            host=self.base_url,
            timeout=timeout if timeout is not None else config.OLLAMA_TIMEOUT_SEC,
        )

    def _call(self, operation: str, fn: Callable[[], Any]) -> Any:
        start_time = time.time()
        try:
            response = fn()
        except ollama.ResponseError as e:
            self._log_failure(operation, start_time, e)
            raise OllamaServiceError(f"Ollama error ({e.status_code}): {e.error}") from e
        except ConnectionError as e:
            self._log_failure(operation, start_time, e)
            raise OllamaServiceError(f"Failed to connect to Ollama: {e}") from e
        except Exception as e:
            self._log_failure(operation, start_time, e)
            raise OllamaServiceError(f"Ollama request failed: {e}") from e

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.log_provider_call("ollama", operation, duration_ms)
        return response

    @staticmethod
    def _log_failure(operation: str, start_time: float, error: Exception):
        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.log_provider_call("ollama", operation, duration_ms, status="failed", details={"error": str(error)[:200]})

    def _generate(self, prompt: str, temperature: float) -> str:
        response = self._call("generate", lambda: self.client.generate(
            model=self.model,
            prompt=prompt,
            stream=False,
            options={"temperature": temperature},
        ))
        try:
            return response["response"]
        except (KeyError, TypeError) as e:
            raise OllamaServiceError(f"Failed to parse Ollama response: {e}") from e

    def _chat_with_image(self, prompt: str, image_base64: str, temperature: float) -> str:
        messages = [{
            "role": "user",
            "content": prompt,
            "images": [image_base64],
        }]
        response = self._call("chat", lambda: self.client.chat(
            model=self.model,
            messages=messages,
            stream=False,
            options={"temperature": temperature},
        ))
        try:
            return response["message"]["content"]
        except (KeyError, TypeError) as e:
            raise OllamaServiceError(f"Failed to parse Ollama response: {e}") from e

    # Generation

    def generate_poem_from_text(self, prompt: str) -> str:
        return self._generate(POEM_FROM_TEXT_PROMPT.format(theme=prompt), POEM_TEMPERATURE)

    def generate_poem_from_image(self, image_base64: str, custom_prompt: Optional[str] = None) -> str:
        return self._chat_with_image(custom_prompt or POEM_FROM_IMAGE_PROMPT, image_base64, POEM_TEMPERATURE)

    def generate_roast_from_image(self, image_base64: str) -> str:
        return self._chat_with_image(ROAST_PROMPT, image_base64, ROAST_TEMPERATURE)

    def extract_words_from_image(self, image_base64: str, word_library: Sequence[str]) -> List[str]:
        """Ask the vision model to tag an image with three words from word_library."""
        prompt = EXTRACT_WORDS_PROMPT.format(words=", ".join(word_library))
        reply = self._chat_with_image(prompt, image_base64, TAGGING_TEMPERATURE)
        return parse_word_list(reply)

    # Embeddings

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        """Generate embeddings for multiple texts."""
        response = self._call("embed", lambda: self.client.embed(model=self.embed_model, input=list(texts)))
        try:
            embeddings = [list(e) for e in response["embeddings"]]
        except (KeyError, TypeError) as e:
            raise OllamaServiceError(f"Failed to parse embedding response: {e}") from e

        if len(embeddings) != len(texts):
            raise OllamaServiceError(f"Expected {len(texts)} embeddings, got {len(embeddings)}")
        return embeddings

    def embed_text(self, text: str) -> List[float]:
        """Generate embedding for a single text."""
        embeddings = self.embed_texts([text])
        if not embeddings:
            raise OllamaServiceError("No embedding returned")
        return embeddings[0]

    def create_text_embeddings(self, texts: Sequence[str]) -> List[TextEmbedding]:
        embeddings = self.embed_texts(texts)
        return [TextEmbedding(text=text, embedding=embedding) for text, embedding in zip(texts, embeddings)]

    def check_health(self) -> bool:
        """Check if the Ollama server answers."""
        try:
            self.client.list()
            return True
        except Exception:
            return False

    def get_status(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "model": self.model,
            "embed_model": self.embed_model,
            "available": self.check_health(),
        }
