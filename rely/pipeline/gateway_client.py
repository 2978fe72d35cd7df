"""
Inference gateway client.

Sends content to an OpenAI-compatible chat-completions gateway with the
reliance-safety system prompt and turns the JSON reply into a
RelianceAnalysis. Modes (set via RELY_ANALYSIS_MODE env var):
  - "ai"        : call the gateway (requires RELY_API_KEY)
  - "heuristic" : never reaches this module, see analyze_pipeline
"""
import logging
import time
from pathlib import Path
from typing import Any

from huggingface_hub import InferenceClient
from huggingface_hub.errors import HfHubHTTPError

from rely import config
from rely.errors import (
    AnalysisFormatError,
    CreditsExhaustedError,
    GatewayConfigError,
    GatewayError,
    IncompleteAnalysisError,
    RateLimitError,
)
from rely.types import REASONING_CATEGORIES, ContentType, ReasoningPoint, RelianceAnalysis
from rely.util.files import read_text
from rely.util.validation import extract_json_from_text, load_schema, missing_analysis_fields, validate

logger = logging.getLogger(__name__)

MAX_REASONING_POINTS = 4
MAX_ACTIONS = 3
DEFAULT_DISCLOSURE = "Analysis uncertainty exists."

SCHEMA_PATH: Path = config.SCHEMAS_DIR / "reliance_analysis.schema.json"

_USER_TEMPLATES = {
    "url": "user_url",
    "image": "user_image",
}


# ─────────────────────────── Prompts ──────────────────────────────────────

def _load_prompt(name: str, **kwargs) -> str:
    template = read_text(config.PROMPTS_DIR / f"{name}.md")
    return template.format(**kwargs)


def system_prompt() -> str:
    return _load_prompt("system", max_reasoning=MAX_REASONING_POINTS, max_actions=MAX_ACTIONS).strip()


def build_user_message(content: str, content_type: ContentType) -> str:
    """URLs and images get a one-line framing, everything else is quoted as a block."""
    template = _USER_TEMPLATES.get(content_type, "user_text")
    return _load_prompt(template, content=content).strip()


# ─────────────────────────── Transport ────────────────────────────────────

def _client() -> InferenceClient:
    return InferenceClient(
        base_url=config.RELY_GATEWAY_URL,
        api_key=config.RELY_API_KEY,
        timeout=config.RELY_TIMEOUT,
    )


def _map_http_error(err: HfHubHTTPError) -> GatewayError:
    status = getattr(err.response, "status_code", None)
    if status == 429:
        return RateLimitError()
    if status == 402:
        return CreditsExhaustedError()
    logger.error("AI gateway error: %s %s", status, err)
    return GatewayError(f"AI gateway error: {status}")


def _raw_infer(system: str, user_message: str) -> str:
    if not config.RELY_API_KEY:
        raise GatewayConfigError("RELY_API_KEY is not configured")

    try:
        response = _client().chat_completion(
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
            model=config.RELY_MODEL_ID,
            max_tokens=config.RELY_MAX_TOKENS,
            response_format={"type": "json_object"},
        )
    except HfHubHTTPError as e:
        raise _map_http_error(e) from e

    choices = response.choices or []
    text = choices[0].message.content if choices else None
    if not text:
        raise GatewayError("No analysis content returned")
    return text


# ──────────────────────── Parsing / normalisation ─────────────────────────

def parse_analysis(raw_text: str, schema: dict | None = None) -> dict:
    """Extract and check the gateway JSON. Returns the camelCase payload."""
    parsed = extract_json_from_text(raw_text)
    if parsed is None:
        logger.error("Failed to parse AI response: %s", raw_text[:200])
        raise AnalysisFormatError()

    missing = missing_analysis_fields(parsed)
    if missing:
        logger.warning("Analysis reply missing %s", ", ".join(missing))
        raise IncompleteAnalysisError()

    errors = validate(parsed, schema if schema is not None else load_schema(SCHEMA_PATH))
    if errors:
        raise AnalysisFormatError(f"Invalid analysis format returned: {'; '.join(errors)}")
    return parsed


def _reasoning_point(item: Any) -> ReasoningPoint:
    if isinstance(item, str):
        return {"category": "uncertainty", "text": item}
    category = item.get("category", "uncertainty")
    if category not in REASONING_CATEGORIES:
        category = "uncertainty"
    return {"category": category, "text": str(item.get("text", ""))}


def normalize_analysis(data: dict) -> RelianceAnalysis:
    """Map a camelCase gateway payload onto RelianceAnalysis, filling defaults and clipping lists."""
    reasoning = [_reasoning_point(r) for r in (data.get("reasoning") or [])]
    return {
        "signal": data["signal"],
        "signal_label": data["signalLabel"],
        "reasoning": reasoning[:MAX_REASONING_POINTS],
        "safe_actions": [str(a) for a in (data.get("safeActions") or [])][:MAX_ACTIONS],
        "avoid_actions": [str(a) for a in (data.get("avoidActions") or [])][:MAX_ACTIONS],
        "delay_reduces_risk": bool(data.get("delayReducesRisk") or False),
        "uncertainty_disclosure": data.get("uncertaintyDisclosure") or DEFAULT_DISCLOSURE,
    }


# ──────────────────────── Structured inference ────────────────────────────

def infer_analysis(content: str, content_type: ContentType = "text") -> RelianceAnalysis:
    """
    Ask the gateway for a reliance verdict on `content`.

    Retries up to RELY_MAX_RETRIES times with a JSON reminder when the reply
    can't be parsed. Rate-limit, credit and configuration errors are raised
    immediately.
    """
    system = system_prompt()
    user_message = build_user_message(content, content_type)
    schema = load_schema(SCHEMA_PATH)
    max_retries = max(1, config.RELY_MAX_RETRIES)
    last_error: Exception | None = None

    for attempt in range(1, max_retries + 1):
        if attempt > 1 and isinstance(last_error, (AnalysisFormatError, IncompleteAnalysisError)):
            message = (
                f"{user_message}\n\nIMPORTANT: Your previous response was not valid. "
                f"Error: {last_error}. You MUST respond with ONLY a valid JSON object."
            )
        else:
            message = user_message

        try:
            raw_text = _raw_infer(system, message)
            return normalize_analysis(parse_analysis(raw_text, schema))
        except GatewayError as e:
            if not e.retryable:
                raise
            last_error = e
            logger.warning("Attempt %d/%d failed: %s", attempt, max_retries, e)
        except Exception as e:
            last_error = e
            logger.error("Attempt %d/%d exception: %s", attempt, max_retries, e)
            if attempt < max_retries:
                time.sleep(1)

    logger.error("All %d attempts failed. Last error: %s", max_retries, last_error)
    if isinstance(last_error, GatewayError):
        raise last_error
    raise GatewayError(str(last_error) or "Analysis failed") from last_error
