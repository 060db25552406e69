"""Greeting message generation for MemoryKeeper.

Drafts a short congratulatory message for a record through the Gemini
``generateContent`` REST API.

The call is user-triggered and single-shot:
- No retry; a fixed timeout (settings.WISH_TIMEOUT)
- Any failure yields a fixed fallback message instead of an error
"""

from typing import Optional

import httpx

from config import settings
from logger_config import setup_logger
from schemas import Category, Record, WishResult

logger = setup_logger(__name__, 'wish.log')

EMPTY_RESPONSE_FALLBACK = "祝你一切顺利！(AI 生成暂时不可用)"
ERROR_FALLBACK = "祝你节日快乐，万事如意！\n(网络连接异常，使用了默认祝福)"


def build_prompt(record: Record) -> str:
    """Build the Chinese-language prompt for a record."""
    prompt = "请用温暖、真诚的语气，用中文写一段简短的祝福语（100字以内）。"

    if record.category == Category.BIRTHDAY:
        prompt += f"\n对象：{record.title}"
        prompt += "\n类型：生日祝福"
        if record.notes:
            prompt += f"\n备注信息：{record.notes}（请酌情结合这些信息）"
    elif record.category == Category.ANNIVERSARY:
        prompt += f"\n对象：{record.title}"
        prompt += "\n类型：纪念日祝福"
        if record.notes:
            prompt += f"\n备注信息：{record.notes}"
    else:
        prompt += f"\n对象：{record.title}"
        prompt += f"\n事件：{record.notes or '特别的日子'}"

    prompt += "\n要求：不要包含任何标题，直接输出祝福内容。"
    return prompt


def _extract_text(response_data: dict) -> str:
    """Join the text parts of the first candidate.

    A reply without candidates, content or parts (e.g. a blocked prompt)
    yields an empty string.
    """
    candidates = response_data.get("candidates") or []
    if not candidates:
        return ""
    content = candidates[0].get("content") or {}
    parts = content.get("parts") or []
    return "".join(part.get("text", "") for part in parts).strip()


async def _request_wish(client: httpx.AsyncClient, prompt: str) -> str:
    api_url = f"{settings.GEMINI_API_URL}/models/{settings.GEMINI_MODEL}:generateContent"
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        # Fast response needed
        "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
    }
    response = await client.post(
        api_url,
        json=payload,
        headers={"x-goog-api-key": settings.GEMINI_API_KEY},
    )
    response.raise_for_status()
    return _extract_text(response.json())


async def generate_wish(
    record: Record,
    client: Optional[httpx.AsyncClient] = None
) -> WishResult:
    """Generate a greeting for a record.

    Args:
        record: Record to write the greeting for
        client: Optional HTTP client to use (a short-lived one is created otherwise)

    Returns:
        WishResult: Generated text, or a fallback message with is_fallback=True
    """
    if not settings.GEMINI_API_KEY:
        logger.error("Wish generation unavailable: GEMINI_API_KEY is not set")
        return WishResult(text=ERROR_FALLBACK, is_fallback=True)

    prompt = build_prompt(record)
    logger.info(f"Generating wish for record {record.id} ({record.category.value})")

    try:
        if client is not None:
            text = await _request_wish(client, prompt)
        else:
            async with httpx.AsyncClient(timeout=settings.WISH_TIMEOUT) as owned_client:
                text = await _request_wish(owned_client, prompt)

    except httpx.TimeoutException:
        logger.error(f"Timeout while generating wish for record {record.id}")
        return WishResult(text=ERROR_FALLBACK, is_fallback=True)
    except httpx.HTTPStatusError as e:
        logger.error(
            f"Wish generation failed for record {record.id}. "
            f"Status: {e.response.status_code}, Response: {e.response.text}"
        )
        return WishResult(text=ERROR_FALLBACK, is_fallback=True)
    except httpx.RequestError as e:
        logger.error(f"Network error while generating wish for record {record.id}: {str(e)}")
        return WishResult(text=ERROR_FALLBACK, is_fallback=True)
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        logger.error(f"Unexpected response while generating wish for record {record.id}: {str(e)}")
        return WishResult(text=ERROR_FALLBACK, is_fallback=True)

    if not text:
        logger.warning(f"Empty wish returned for record {record.id}")
        return WishResult(text=EMPTY_RESPONSE_FALLBACK, is_fallback=True)

    return WishResult(text=text, is_fallback=False)
