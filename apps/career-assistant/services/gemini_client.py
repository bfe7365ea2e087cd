from typing import Optional
import logging
import requests

logger = logging.getLogger(__name__)

HARM_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


class GeminiAPIError(Exception):
    """A single generateContent attempt failed (network, HTTP status or body shape)"""


class GeminiClient:
    """Thin REST client for the Gemini generateContent endpoint.

    One call is one HTTP attempt; retrying is the caller's job.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        max_output_tokens: int = 2048,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.max_output_tokens = max_output_tokens

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def build_request_body(self, prompt: str) -> dict:
        return {
            "contents": [{
                "parts": [{"text": prompt}]
            }],
            "generationConfig": {
                "temperature": 0.7,
                "topK": 40,
                "topP": 0.95,
                "maxOutputTokens": self.max_output_tokens,
                "candidateCount": 1,
            },
            "safetySettings": [
                {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
                for category in HARM_CATEGORIES
            ],
        }

    def generate_content(self, prompt: str) -> dict:
        """POST the prompt and return the first candidate

        Args:
            prompt: Full prompt text

        Returns:
            candidates[0] from the response body, guaranteed to carry
            non-empty content.parts[0].text

        Raises:
            GeminiAPIError: on transport errors, non-2xx status, or a body
                without generated text
        """
        if not self.has_api_key:
            raise GeminiAPIError("Gemini API key is not configured")

        try:
            response = self.session.post(
                self.api_url,
                params={"key": self.api_key},
                json=self.build_request_body(prompt),
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": "AI-Career-Assistant/1.0",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            body = e.response.text[:500] if e.response is not None else ""
            raise GeminiAPIError(f"Gemini API returned an error status: {e} {body}") from e
        except requests.RequestException as e:
            raise GeminiAPIError(f"Gemini API request failed: {e}") from e
        except ValueError as e:
            raise GeminiAPIError(f"Gemini API returned invalid JSON: {e}") from e

        candidate = self._first_candidate(data)
        if candidate is None:
            raise GeminiAPIError("Invalid response structure from Gemini API")

        return candidate

    @staticmethod
    def _first_candidate(data) -> Optional[dict]:
        """candidates[0] if it has text at content.parts[0].text, else None"""
        if not isinstance(data, dict):
            return None

        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return None

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        if not parts or not isinstance(parts[0], dict) or not parts[0].get("text"):
            return None

        return candidate

    @staticmethod
    def candidate_text(candidate: dict) -> str:
        return candidate["content"]["parts"][0]["text"]
