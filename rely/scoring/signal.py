"""
Reliance signal scoring for submitted content.

Computes a small integer risk score from keyword heuristics:
  - Urgency markers: +2
  - Authority claims: +1
  - Money / payment terms: +2
  - Emotional language: +1
  - Very short content (< 50 chars): +1

Signal classification: caution (>= 4), unclear (>= 2), safe (< 2).
"""
import re

from rely.types import ContentType, ReasoningPoint, RelianceAnalysis, SignalType

URGENCY_RE = re.compile(r"urgent|immediately|now|act fast|limited time|expires", re.IGNORECASE)
AUTHORITY_RE = re.compile(r"official|government|bank|police|verified|confirmed", re.IGNORECASE)
MONEY_RE = re.compile(r"\$|money|payment|transfer|wire|bitcoin|crypto|account", re.IGNORECASE)
EMOTIONAL_RE = re.compile(r"amazing|incredible|shocking|unbelievable|you won't believe", re.IGNORECASE)

SHORT_CONTENT_CHARS = 50
LIMITED_CONTENT_CHARS = 100

WEIGHTS = {
    "urgency": 2,
    "authority": 1,
    "money": 2,
    "emotional": 1,
    "short": 1,
}

SIGNAL_LABELS: dict[str, str] = {
    "safe": "Safe to rely on",
    "unclear": "Unclear — delay or verify",
    "caution": "Use caution — high reliance risk",
}

SAFE_ACTIONS: dict[str, list[str]] = {
    "caution": [
        "Cross-reference claims through independent sources",
        "Verify identity of sender through known channels",
        "Consult with trusted parties before proceeding",
    ],
    "unclear": [
        "Use as preliminary information only",
        "Seek additional verification before major decisions",
        "Consider the content as one data point among many",
    ],
    "safe": [
        "Proceed with normal caution",
        "Use information for intended purpose",
        "Make decisions within your risk tolerance",
    ],
}

AVOID_ACTIONS: dict[str, list[str]] = {
    "caution": [
        "Making immediate financial commitments",
        "Sharing sensitive personal information",
        "Acting under time pressure without verification",
    ],
    "unclear": [
        "Treating information as fully verified",
        "Making irreversible decisions based solely on this",
        "Forwarding without noting uncertainty",
    ],
    "safe": [
        "Over-relying without context awareness",
        "Ignoring future contradictory information",
    ],
}

DISCLOSURE_UNVERIFIABLE = (
    "The authenticity of authority claims and financial context cannot be verified. "
    "These elements require external validation before reliance."
)
DISCLOSURE_LIMITED = (
    "Limited content length reduces analytical confidence. "
    "More context would enable better assessment."
)
DISCLOSURE_STANDARD = (
    "Standard analytical limitations apply. "
    "No system can determine absolute truth from content alone."
)


def compute_risk(content: str) -> tuple[int, dict[str, bool]]:
    """
    Args:
        content: raw submitted content
    Returns:
        (risk_score, flags) where flags maps each heuristic name to whether it fired
    """
    flags = {
        "urgency": bool(URGENCY_RE.search(content)),
        "authority": bool(AUTHORITY_RE.search(content)),
        "money": bool(MONEY_RE.search(content)),
        "emotional": bool(EMOTIONAL_RE.search(content)),
        "short": len(content) < SHORT_CONTENT_CHARS,
    }
    score = sum(WEIGHTS[name] for name, fired in flags.items() if fired)
    return score, flags


def signal_for_score(score: int) -> tuple[SignalType, str]:
    if score >= 4:
        signal = "caution"
    elif score >= 2:
        signal = "unclear"
    else:
        signal = "safe"
    return signal, SIGNAL_LABELS[signal]


def actions_for_signal(signal: str) -> tuple[list[str], list[str]]:
    """Return copies of the (safe_actions, avoid_actions) lists for a signal."""
    return list(SAFE_ACTIONS[signal]), list(AVOID_ACTIONS[signal])


def _reasoning(flags: dict[str, bool]) -> list[ReasoningPoint]:
    points: list[ReasoningPoint] = []

    if flags["urgency"]:
        points.append({
            "category": "constraints",
            "text": "Content contains urgency markers that may pressure rapid decision-making "
                    "without adequate verification.",
        })
    if flags["authority"]:
        points.append({
            "category": "coherence",
            "text": "Claims of authority or official status cannot be independently verified "
                    "from the content alone.",
        })
    if flags["money"]:
        points.append({
            "category": "context-density",
            "text": "Financial implications are present, requiring higher verification standards "
                    "before action.",
        })
    if flags["short"]:
        points.append({
            "category": "context-density",
            "text": "Insufficient context provided to establish a reliable basis for action.",
        })

    if not points:
        points.append({
            "category": "coherence",
            "text": "Content appears internally consistent without obvious contradictions.",
        })
        points.append({
            "category": "constraints",
            "text": "No violations of known logical or practical constraints detected.",
        })

    points.append({
        "category": "uncertainty",
        "text": "Origin and creation context of this content cannot be determined from analysis alone.",
    })
    return points


def _disclosure(content: str, flags: dict[str, bool]) -> str:
    if flags["money"] or flags["authority"]:
        return DISCLOSURE_UNVERIFIABLE
    if len(content) < LIMITED_CONTENT_CHARS:
        return DISCLOSURE_LIMITED
    return DISCLOSURE_STANDARD


def analyze_content(content: str, content_type: ContentType = "text") -> RelianceAnalysis:
    """
    Classify content with the local keyword heuristics.

    The content type is accepted for parity with the gateway path; the
    heuristics only look at the text itself.
    """
    score, flags = compute_risk(content)
    signal, signal_label = signal_for_score(score)
    safe_actions, avoid_actions = actions_for_signal(signal)

    return {
        "signal": signal,
        "signal_label": signal_label,
        "reasoning": _reasoning(flags),
        "safe_actions": safe_actions,
        "avoid_actions": avoid_actions,
        "delay_reduces_risk": flags["urgency"] or score >= 3,
        "uncertainty_disclosure": _disclosure(content, flags),
    }


def signal_badge(signal: str) -> str:
    dots = {
        "safe": '<span class="rely-dot rely-dot-green"></span>',
        "unclear": '<span class="rely-dot rely-dot-amber"></span>',
        "caution": '<span class="rely-dot rely-dot-red"></span>',
    }
    return dots.get(signal, '<span class="rely-dot" style="background:#9aa0a6;"></span>')
