from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from .errors import ConfigurationError, MissingApiKeyError, TranslationError


SYSTEM_PROMPT_TEXT_TRANSLATION = """\
You are a professional localization engine. You translate short user interface strings.
Placeholders look like {{0123456789abcdef0123456789abcdef}}. You MUST copy every placeholder exactly once, unchanged, \
at the position where it belongs in the translated sentence.
Do not add quotes, notes or explanations. Return only the translated string."""

USER_PROMPT_TEMPLATE = """\
Translate the following text into the language with code "{target_language}".{source_hint}

Text:
{text}
"""


class BaseTranslator(Protocol):
    def translate(self, text: str, target_language: str) -> str:
        ...


@dataclass
class GoogleCloudConfig:
    project_id: str = ""
    location: str = "global"
    mime_type: str = "text/plain"


@dataclass
class OpenAIConfig:
    model: str = "gpt-4.1-mini"
    temperature: float = 0.1
    max_output_tokens: int = 2000


class GoogleCloudTranslator:
    """
    Google Cloud Translation (v3) client.

    Requires:
      - `google-cloud-translate` python package
      - a project id (config or GOOGLE_CLOUD_PROJECT_ID env) and application default credentials.
    """

    def __init__(
        self,
        cfg: Optional[GoogleCloudConfig] = None,
        source_language: Optional[str] = None,
        client: Any = None,
    ):
        self.cfg = cfg or GoogleCloudConfig()
        self.project_id = self.cfg.project_id or os.getenv("GOOGLE_CLOUD_PROJECT_ID", "")
        if not self.project_id:
            raise ConfigurationError(
                "Google Cloud project id missing: set translation.google.project_id or GOOGLE_CLOUD_PROJECT_ID."
            )
        self.source_language = source_language

        if client is None:
            from google.cloud import translate_v3  # type: ignore

            client = translate_v3.TranslationServiceClient()
        self._client = client

    @property
    def parent(self) -> str:
        return f"projects/{self.project_id}/locations/{self.cfg.location}"

    def translate(self, text: str, target_language: str) -> str:
        request: Dict[str, Any] = {
            "parent": self.parent,
            "contents": [text],
            "mime_type": self.cfg.mime_type,
            "target_language_code": target_language,
        }
        if self.source_language:
            request["source_language_code"] = self.source_language

        try:
            response = self._client.translate_text(request=request)
        except Exception as exc:  # noqa: BLE001 - every SDK failure is a provider failure
            raise TranslationError(f"Google Cloud Translation request failed: {exc}") from exc

        translations = list(getattr(response, "translations", None) or [])
        if not translations:
            raise TranslationError("Translation API returned an empty response.")
        translated = getattr(translations[0], "translated_text", "")
        if not translated:
            raise TranslationError("Translated text is empty.")
        return translated


class DeepLTranslator:
    """
    DeepL translator.

    Requires:
      - `deepl` python package
      - DEEPL_AUTH_KEY in env or provided.
    """

    def __init__(
        self,
        auth_key: Optional[str] = None,
        formality: str = "default",
        source_language: Optional[str] = None,
    ):
        self.auth_key = auth_key or os.getenv("DEEPL_AUTH_KEY", "")
        if not self.auth_key:
            raise MissingApiKeyError("DEEPL_AUTH_KEY missing: set the environment variable or add it to your .env.")
        self.formality = formality
        self.source_language = source_language

        import deepl  # type: ignore

        self._deepl = deepl
        self._translator = deepl.Translator(self.auth_key)

    def translate(self, text: str, target_language: str) -> str:
        try:
            result = self._translator.translate_text(
                text,
                source_lang=self.source_language.upper() if self.source_language else None,
                target_lang=target_language.upper(),
                formality=self.formality,
                preserve_formatting=True,
            )
        except self._deepl.DeepLException as exc:
            raise TranslationError(f"DeepL request failed: {exc}") from exc
        return str(result)


class OpenAITranslator:
    """
    OpenAI translator that uses a strict prompt to keep placeholder tokens intact.

    Requires:
      - `openai` python package
      - OPENAI_API_KEY in env or provided.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        cfg: Optional[OpenAIConfig] = None,
        source_language: Optional[str] = None,
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY", "")
        if not self.api_key:
            raise MissingApiKeyError("OPENAI_API_KEY missing: set the environment variable or add it to your .env.")
        self.cfg = cfg or OpenAIConfig()
        self.source_language = source_language

        from openai import OpenAI, OpenAIError  # type: ignore

        self._error_cls = OpenAIError
        self._client = OpenAI(api_key=self.api_key)

    def translate(self, text: str, target_language: str) -> str:
        source_hint = f' The source language code is "{self.source_language}".' if self.source_language else ""
        user_prompt = USER_PROMPT_TEMPLATE.format(
            target_language=target_language,
            source_hint=source_hint,
            text=text,
        )
        try:
            resp = self._client.chat.completions.create(
                model=self.cfg.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT_TEXT_TRANSLATION},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.cfg.temperature,
                max_tokens=self.cfg.max_output_tokens,
            )
        except self._error_cls as exc:
            raise TranslationError(f"OpenAI request failed: {exc}") from exc

        content = resp.choices[0].message.content or ""
        return _strip_code_fences(content).strip()


class DummyTranslator:
    """Offline translator for testing/dev. Returns the text it was given."""

    def translate(self, text: str, target_language: str) -> str:
        return text


def _strip_code_fences(s: str) -> str:
    fence = re.compile(r"^\s*```(?:\w+)?\s*([\s\S]*?)\s*```\s*$")
    m = fence.match(s.strip())
    return m.group(1) if m else s


def build_translator(provider: str, cfg: Dict[str, Any]) -> BaseTranslator:
    """Instantiate the provider named in the ``translation`` section of a config dict."""

    provider = (provider or "").lower()
    tcfg = cfg.get("translation", {})
    source_language = tcfg.get("source_language") or None
    if provider == "google":
        gcfg = tcfg.get("google", {})
        return GoogleCloudTranslator(
            cfg=GoogleCloudConfig(
                project_id=gcfg.get("project_id", ""),
                location=gcfg.get("location", "global"),
            ),
            source_language=source_language,
        )
    if provider == "deepl":
        dcfg = tcfg.get("deepl", {})
        return DeepLTranslator(formality=dcfg.get("formality", "default"), source_language=source_language)
    if provider == "openai":
        ocfg = tcfg.get("openai", {})
        return OpenAITranslator(
            cfg=OpenAIConfig(
                model=ocfg.get("model", "gpt-4.1-mini"),
                temperature=float(ocfg.get("temperature", 0.1)),
                max_output_tokens=int(ocfg.get("max_output_tokens", 2000)),
            ),
            source_language=source_language,
        )
    if provider == "dummy":
        return DummyTranslator()
    raise ConfigurationError(f"Unknown translation provider: {provider}")
