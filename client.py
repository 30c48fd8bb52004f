"""HTTP client for the /api/v1 endpoints.

POST bodies automatically carry the AI settings saved in the learner's
store, so callers only pass task parameters.
"""
from typing import Any, List, Optional

import httpx

from storage import LearningStore

DEFAULT_BASE_URL = "http://localhost:3001"
API_BASE = "/api/v1"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EnglishLearningClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL,
                 store: Optional[LearningStore] = None,
                 transport: Optional[httpx.BaseTransport] = None,
                 timeout: float = 180):
        self.base_url = base_url.rstrip("/")
        self.store = store if store is not None else LearningStore()
        self._http = httpx.Client(base_url=self.base_url + API_BASE,
                                  transport=transport, timeout=timeout)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, url: str, body: Optional[dict] = None) -> Any:
        payload = None
        if method == "POST":
            payload = {k: v for k, v in (body or {}).items() if v is not None}
            if "aiConfig" not in payload:
                ai_config = self.store.ai_config()
                if ai_config:
                    payload["aiConfig"] = ai_config

        resp = self._http.request(method, url, json=payload)
        if not resp.is_success:
            try:
                message = resp.json().get("error")
            except (ValueError, AttributeError):
                message = None
            raise ApiError(message or resp.reason_phrase or "Request failed", resp.status_code)
        return resp.json()

    def health(self) -> dict:
        return self._request("GET", "/health")

    def test_ai(self, ai_config: dict) -> dict:
        return self._request("POST", "/ai/test", {"aiConfig": ai_config})

    def ai_providers(self) -> List[dict]:
        return self._request("GET", "/ai/providers")

    def use_provider(self, provider_id: str, api_key: str, model: Optional[str] = None,
                     base_url: Optional[str] = None) -> dict:
        """Save AI settings from a provider preset, as the settings form does.

        ``base_url`` is required for the custom provider; ``model`` defaults
        to the preset's first model.
        """
        preset = next((p for p in self.ai_providers() if p["id"] == provider_id), None)
        if preset is None:
            raise ValueError(f"Unknown AI provider: {provider_id}")
        base_url = base_url or preset["baseUrl"]
        model = model or (preset["models"][0] if preset["models"] else None)
        if not base_url or not model:
            raise ValueError("Base URL and model are required for this provider")
        self.store.save_ai_config(api_key, base_url, model)
        return self.store.ai_config()

    def extract_flashcards(self, text: str, max_words: Optional[int] = None,
                           level: Optional[str] = None) -> List[dict]:
        return self._request("POST", "/flashcards/extract",
                             {"text": text, "maxWords": max_words, "level": level})

    def analyze_sentence(self, sentence: str) -> dict:
        return self._request("POST", "/sentence/analyze", {"sentence": sentence})

    def generate_reading(self, text: str, language: Optional[str] = None) -> dict:
        return self._request("POST", "/reading/generate", {"text": text, "language": language})

    def reading_questions(self, reading: str, question_count: Optional[int] = None) -> List[dict]:
        return self._request("POST", "/quiz/reading-questions",
                             {"reading": reading, "questionCount": question_count})

    def vocabulary_questions(self, vocabulary: list, question_count: Optional[int] = None) -> List[dict]:
        return self._request("POST", "/quiz/vocabulary-questions",
                             {"vocabulary": vocabulary, "questionCount": question_count})

    def generate_report(self, report_type: str, learning_data: dict) -> dict:
        return self._request("POST", "/report/generate",
                             {"reportType": report_type, "learningData": learning_data})
