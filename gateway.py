"""AI gateway: validates caller-supplied endpoint settings and relays prompts
to an OpenAI-compatible chat-completion API."""
import ipaddress
import re as _re
import socket
import time
from typing import Any, List, Optional, Union
from urllib.parse import urlsplit

import httpx

from config import Settings
from errors import ConfigError, ParseError, UpstreamError
from json_extract import extract_json
from log import get_logger
from models import (
    AIConfig,
    validate_word_cards, validate_sentence_analysis, validate_reading_content,
    validate_quiz_questions, validate_learning_report,
)
from prompts import (
    build_extract_words_prompt, build_analyze_sentence_prompt,
    build_reading_content_prompt, build_reading_questions_prompt,
    build_vocabulary_questions_prompt, build_learning_report_prompt,
)

logger = get_logger("englearn.gateway")

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

_NUMERIC_HOST = _re.compile(r"^(0x[0-9a-f]*|\d+)(\.(0x[0-9a-f]*|\d+)){0,3}$")
_UNIQUE_LOCAL = ipaddress.IPv6Network("fc00::/7")

MISSING_CONFIG = "Please configure the AI service in settings first (API Key, Base URL, Model)"


def _numeric_ipv4(host: str) -> Optional[ipaddress.IPv4Address]:
    """Read a dotted, shortened, decimal, hex or octal IPv4 literal.

    ``127.1``, ``2130706433`` and ``0x7f000001`` all name 127.0.0.1 once the
    resolver sees them, so they are normalized before the range checks.
    """
    if not _NUMERIC_HOST.match(host):
        return None
    try:
        return ipaddress.IPv4Address(socket.inet_aton(host))
    except OSError:
        return None


def _is_private_ipv4(addr: ipaddress.IPv4Address) -> bool:
    a, b = addr.packed[:2]
    if a in (0, 10, 127):
        return True
    if a == 169 and b == 254:
        return True
    if a == 192 and b == 168:
        return True
    return a == 172 and 16 <= b <= 31


def is_private_or_localhost(hostname: str) -> bool:
    """Best-effort string check for loopback, private and link-local hosts.

    Only literal names and addresses are inspected; nothing is resolved.
    """
    host = hostname.lower().strip("[]").rstrip(".")

    if host in ("localhost", "::1") or host.endswith((".local", ".localhost")):
        return True

    addr = _numeric_ipv4(host)
    if addr is not None:
        return _is_private_ipv4(addr)

    if ":" in host:
        try:
            v6 = ipaddress.IPv6Address(host.split("%", 1)[0])
        except ValueError:
            return host.startswith(("fc", "fd", "fe80"))
        if v6.ipv4_mapped is not None:
            return _is_private_ipv4(v6.ipv4_mapped)
        return v6.is_loopback or v6.is_link_local or v6.is_unspecified or v6 in _UNIQUE_LOCAL

    return False


def validate_base_url(base_url: str, production: bool = False,
                      allowed_hosts: Optional[List[str]] = None) -> str:
    """Check a caller-supplied base URL and return its lowercased hostname.

    Raises ConfigError when the URL is malformed, embeds credentials, uses a
    scheme other than http(s), points at a local or private host in
    production, or is missing from a configured host allow-list.
    """
    try:
        parsed = urlsplit(base_url.strip())
        parsed.port  # raises on a malformed port
    except ValueError as e:
        raise ConfigError("Base URL is not a valid URL") from e

    scheme = parsed.scheme.lower()
    if not scheme or not parsed.hostname:
        raise ConfigError("Base URL is not a valid URL")

    if parsed.username or parsed.password:
        raise ConfigError("Base URL must not contain credentials")

    if scheme not in ("http", "https"):
        raise ConfigError("Base URL must use HTTP or HTTPS")

    if production and scheme != "https":
        raise ConfigError("Only HTTPS base URLs are allowed in production")

    host = parsed.hostname.lower()
    if production and is_private_or_localhost(host):
        raise ConfigError("Local or private network addresses are not allowed in production")

    allowed = [h.strip().lower() for h in (allowed_hosts or []) if h.strip()]
    if allowed and host not in allowed:
        raise ConfigError("Base URL host is not in the allowed list")

    return host


def build_completions_endpoint(base_url: str) -> str:
    return f"{base_url.strip().rstrip('/')}/chat/completions"


def _upstream_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class AIGateway:
    """Relays task prompts to the caller's chat-completion endpoint.

    One instance is created per app and handed to the routes; tests swap the
    network out through ``transport``. No retries are attempted.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self.transport = transport

    def validate_ai_config(self, ai_config: Union[AIConfig, dict, None]) -> AIConfig:
        if isinstance(ai_config, dict):
            ai_config = AIConfig.model_validate(ai_config)
        if ai_config is None or not (ai_config.apiKey and ai_config.baseUrl and ai_config.model):
            raise ConfigError(MISSING_CONFIG)
        validate_base_url(
            ai_config.baseUrl,
            production=self.settings.is_production,
            allowed_hosts=self.settings.allowed_ai_hosts,
        )
        return ai_config

    async def _post(self, cfg: AIConfig, payload: dict) -> httpx.Response:
        url = build_completions_endpoint(cfg.baseUrl)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {cfg.apiKey}",
        }
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.settings.ai_timeout,
                                         transport=self.transport) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.warning("AI request failed", extra={
                "component": "gateway", "model": cfg.model, "detail": type(e).__name__,
            })
            raise UpstreamError(f"API request failed: {str(e) or type(e).__name__}") from e
        logger.info("AI request finished", extra={
            "component": "gateway",
            "model": cfg.model,
            "host": urlsplit(url).hostname,
            "status_code": resp.status_code,
            "duration_ms": round((time.monotonic() - started) * 1000),
        })
        return resp

    async def call(self, prompt: str, ai_config: Union[AIConfig, dict, None],
                   temperature: Optional[float] = None,
                   max_tokens: Optional[int] = None) -> str:
        """Send ``prompt`` as a single user message and return the raw reply text."""
        cfg = self.validate_ai_config(ai_config)
        payload = {
            "model": cfg.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
            "max_tokens": DEFAULT_MAX_TOKENS if max_tokens is None else max_tokens,
        }
        resp = await self._post(cfg, payload)
        if not resp.is_success:
            raise UpstreamError(f"API request failed: {_upstream_detail(resp)}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamError("API returned an unexpected response") from e
        if not isinstance(content, str):
            raise UpstreamError("API returned an unexpected response")
        return content

    async def call_json(self, prompt: str, ai_config, **options) -> Any:
        text = await self.call(prompt, ai_config, **options)
        try:
            return extract_json(text)
        except ParseError:
            # never log the reply text itself
            logger.debug("Model reply is not JSON", extra={
                "component": "gateway", "count": len(text),
            })
            raise

    async def test_connection(self, ai_config: Union[AIConfig, dict, None]) -> dict:
        cfg = self.validate_ai_config(ai_config)
        payload = {
            "model": cfg.model,
            "messages": [{"role": "user", "content": "Hi"}],
            "max_tokens": 5,
        }
        resp = await self._post(cfg, payload)
        if not resp.is_success:
            raise UpstreamError(f"Connection failed: {_upstream_detail(resp)}")
        return {"success": True, "model": cfg.model}

    # --- Tasks ---

    async def extract_words(self, text: str, max_words: int = 10, level: str = "all",
                            ai_config=None) -> List[dict]:
        prompt = build_extract_words_prompt(text, max_words, level)
        data = await self.call_json(prompt, ai_config, temperature=0.7, max_tokens=1000)
        return validate_word_cards(data)

    async def analyze_sentence(self, sentence: str, ai_config=None) -> dict:
        prompt = build_analyze_sentence_prompt(sentence)
        data = await self.call_json(prompt, ai_config, temperature=0.6, max_tokens=2000)
        return validate_sentence_analysis(data)

    async def generate_reading_content(self, text: str, language: str = "en",
                                       ai_config=None) -> dict:
        prompt = build_reading_content_prompt(text, language)
        data = await self.call_json(prompt, ai_config, temperature=0.7, max_tokens=2000)
        return validate_reading_content(data)

    async def generate_reading_questions(self, reading: str, question_count: int = 5,
                                         ai_config=None) -> List[dict]:
        prompt = build_reading_questions_prompt(reading, question_count)
        data = await self.call_json(prompt, ai_config, temperature=0.6, max_tokens=1500)
        return validate_quiz_questions(data)

    async def generate_vocabulary_questions(self, vocabulary: list, question_count: int = 5,
                                            ai_config=None) -> List[dict]:
        prompt = build_vocabulary_questions_prompt(vocabulary, question_count)
        data = await self.call_json(prompt, ai_config, temperature=0.7, max_tokens=1500)
        return validate_quiz_questions(data)

    async def generate_learning_report(self, report_type: str, learning_data: Any,
                                       ai_config=None) -> dict:
        prompt = build_learning_report_prompt(report_type, learning_data)
        data = await self.call_json(prompt, ai_config, temperature=0.7, max_tokens=1500)
        return validate_learning_report(data)
