"""
AI Notice Service — черновик текста объявления через AI.

Поддерживаемые провайдеры:
  - gemini  (Google Gemini API)
  - deepseek (DeepSeek chat API)
  - openai  (OpenAI ChatCompletion API)
"""

import json
import logging

import requests
from django.conf import settings

from school_panel.sentry_config import capture_exception

logger = logging.getLogger(__name__)

# ─── system prompt (общий для всех провайдеров) ──────────────────────────────
SYSTEM_PROMPT = (
    "You are an expert assistant for school administrators, skilled at creating "
    "engaging and informative notices for various audiences."
)

USER_PROMPT_TEMPLATE = """Based on the title and target audience, generate content for a school notice.

Title: {title}
Target Audience: {target_audience}
Class Details: {class_details}

Content:"""

NOT_APPLICABLE = 'Not Applicable'


def _build_prompts(title: str, target_audience: str, class_details: str = ""):
    """Формирует system + user промпты."""
    user = USER_PROMPT_TEMPLATE.format(
        title=title,
        target_audience=target_audience,
        class_details=class_details or NOT_APPLICABLE,
    )
    return SYSTEM_PROMPT, user


def _clean_content(raw_text: str) -> str:
    """Убирает обрамление, которое AI иногда добавляет вокруг текста."""
    text = raw_text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    text = text.strip()
    if text.lower().startswith("content:"):
        text = text[len("content:"):].strip()
    return text


# ═══════════════════════════════════════════════════════════════════════════════
# ПРОВАЙДЕРЫ
# ═══════════════════════════════════════════════════════════════════════════════

def _call_gemini(system: str, user: str) -> str:
    """Вызов Google Gemini API (REST, без SDK)."""
    api_key = settings.GEMINI_API_KEY
    model = getattr(settings, 'GEMINI_MODEL', 'gemini-2.5-flash-lite')

    if not api_key:
        raise ValueError("GEMINI_API_KEY не настроен в settings / .env")

    url = f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent?key={api_key}"

    payload = {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": f"{system}\n\n{user}"}]
            }
        ],
        "generationConfig": {
            "temperature": 0.7,
            "maxOutputTokens": 1024,
        }
    }

    resp = requests.post(url, json=payload, timeout=60)
    resp.raise_for_status()
    data = resp.json()

    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError) as exc:
        logger.error("Gemini unexpected response: %s", json.dumps(data, ensure_ascii=False)[:500])
        raise ValueError(f"Gemini вернул неожиданный формат: {exc}") from exc


def _chat_completion(api_url: str, api_key: str, model: str, system: str, user: str) -> str:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "temperature": 0.7,
        "max_tokens": 1024,
    }

    resp = requests.post(api_url, headers=headers, json=payload, timeout=60)
    resp.raise_for_status()
    data = resp.json()
    return data["choices"][0]["message"]["content"]


def _call_deepseek(system: str, user: str) -> str:
    """Вызов DeepSeek Chat API."""
    api_key = settings.DEEPSEEK_API_KEY
    if not api_key:
        raise ValueError("DEEPSEEK_API_KEY не настроен в settings / .env")
    return _chat_completion(
        getattr(settings, 'DEEPSEEK_API_URL', 'https://api.deepseek.com/v1/chat/completions'),
        api_key,
        getattr(settings, 'DEEPSEEK_MODEL', 'deepseek-chat'),
        system,
        user,
    )


def _call_openai(system: str, user: str) -> str:
    """Вызов OpenAI ChatCompletion API."""
    api_key = settings.OPENAI_API_KEY
    if not api_key:
        raise ValueError("OPENAI_API_KEY не настроен в settings / .env")
    return _chat_completion(
        "https://api.openai.com/v1/chat/completions",
        api_key,
        getattr(settings, 'OPENAI_MODEL', 'gpt-4o-mini'),
        system,
        user,
    )


PROVIDER_MAP = {
    "gemini": _call_gemini,
    "deepseek": _call_deepseek,
    "openai": _call_openai,
}


# ═══════════════════════════════════════════════════════════════════════════════
# ПУБЛИЧНЫЙ API
# ═══════════════════════════════════════════════════════════════════════════════

def generate_notice_content(
    title: str,
    target_audience: str,
    class_details: str = "",
    provider: str = None,
) -> dict:
    """
    Генерирует текст объявления через AI.

    Возвращает dict:
        {"content": str, "error": str | None}
    """
    provider = provider or settings.AI_PROVIDER
    if provider not in PROVIDER_MAP:
        return {"content": "", "error": f"Неизвестный AI-провайдер: {provider}"}

    system, user = _build_prompts(title, target_audience, class_details)
    call_fn = PROVIDER_MAP[provider]

    try:
        raw = call_fn(system, user)
        logger.info("AI (%s) notice draft: %s", provider, raw[:300])
        content = _clean_content(raw)
        if not content:
            return {"content": "", "error": "AI вернул пустой текст"}
        return {"content": content, "error": None}
    except Exception as exc:
        logger.exception("AI notice generation failed (%s)", provider)
        capture_exception(exc, extra={"provider": provider, "title": title})
        return {"content": "", "error": str(exc)}
