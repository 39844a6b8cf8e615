"""
Screenshot classification with the OpenAI vision model.

classify_image() raises VisionError on any failure; callers decide on the
fallback (see services.upload_service.FALLBACK_ACTIVITY).
"""
import base64
import json
import re
from typing import Dict, Optional

from openai import OpenAI

from config import OPENAI_API_KEY, OPENAI_MODEL
from utils.logger import get_logger

logger = get_logger("vision")

PROMPT = (
    "Analyze this travel-related screenshot and extract activity information. Return JSON with:\n"
    "- name: A concise activity name (e.g., \"Louvre Museum Visit\")\n"
    "- description: Brief description of what this activity involves\n"
    "- activityType: Category like \"museum\", \"restaurant\", \"attraction\", \"hotel\", "
    "\"transport\", \"activity\", \"shopping\", \"entertainment\"\n\n"
    "Keep responses travel-focused and practical for itinerary planning."
)

_JSON_RE = re.compile(r"\{[\s\S]*\}")

_client: Optional[OpenAI] = None


class VisionError(Exception):
    pass


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        if not OPENAI_API_KEY:
            raise VisionError("OPENAI_API_KEY is not configured")
        _client = OpenAI(api_key=OPENAI_API_KEY)
    return _client


def to_data_url(data: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_activity_json(content: Optional[str]) -> Dict[str, str]:
    """Pull the first JSON object out of a model reply."""
    if not content:
        raise VisionError("No response from OpenAI")

    match = _JSON_RE.search(content)
    if not match:
        raise VisionError("No JSON found in OpenAI response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise VisionError(f"Malformed JSON in OpenAI response: {e}") from e
    if not isinstance(parsed, dict):
        raise VisionError("OpenAI response is not a JSON object")
    for field in ("name", "description", "activityType"):
        if parsed.get(field) is not None and not isinstance(parsed[field], str):
            raise VisionError(f"OpenAI response field {field!r} is not a string")

    return {
        "name": parsed.get("name") or "Untitled Activity",
        "description": parsed.get("description") or "No description available",
        "activityType": parsed.get("activityType") or "activity",
    }


def classify_image(data: bytes, content_type: str) -> Dict[str, str]:
    """Return {name, description, activityType} guessed from the image."""
    client = _get_client()
    try:
        response = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": PROMPT},
                        {"type": "image_url", "image_url": {"url": to_data_url(data, content_type)}},
                    ],
                }
            ],
            max_tokens=300,
            temperature=0.3,
        )
    except Exception as e:
        raise VisionError(f"OpenAI request failed: {e}") from e

    content = response.choices[0].message.content if response.choices else None
    return parse_activity_json(content)
