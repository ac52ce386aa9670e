"""
Response repair helpers for LLM-backed providers.

Models are asked for {"summary": ..., "tags": [...]} but frequently wrap the
JSON in Markdown fences, add prose around it, or ignore the format entirely.
These helpers recover a usable EnrichResult or raise ProviderError.
"""

import json
import re
from collections import Counter
from typing import Any

from quicknotes.models.note import EnrichResult
from quicknotes.utils.exceptions import ProviderError

MAX_TAGS = 5

ENRICH_PROMPT = (
    "Summarize in ≤25 words and propose 1-5 short keyword tags for:\n\n"
    "{text}\n\n"
    "Return JSON with keys: summary, tags."
)

STOP_WORDS = frozenset(
    """
    the and for are but not you all can had her was one our out day get has him his how man
    new now old see two way who boy did its let put say she too use this that with from they
    have will been were said each which their time would there could other into very what know
    just first also after back work well year come make good much where through when down
    should because long think take being before here over want only need going about more some
    most many such even still like look find give part place right great little world public
    same different away move try kind hand high every tell does set three state never become
    between important often during without again something fact though water less might far
    along those both remember until power another while learn around usually form meat air
    number read keep start field large once available fish human local sure better general
    process heat thanks specific enough lot popular small experience include job believe bad
    news official national week media big fail despite eat face fill full force hot however
    item itself join later life may mean miss must name none nor note nothing occur off oil ok
    open order own people point possible probably problem program provide quite rather really
    room run school seem several shall show side since someone sometimes sound system than
    them then these thing thus today together toward turn under upon used using why within
    write yes yet young your
    """.split()
)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_SUMMARY_PREFIX = re.compile(r"^\W*summary\W*:\s*", re.IGNORECASE)
_QUOTED_SUMMARY = re.compile(r'"summary"\s*:\s*"([^"]+)"', re.IGNORECASE)
_TAGS_PREFIX = re.compile(r"^\W*(?:tags|keywords)\W*:\s*", re.IGNORECASE)
_WORD = re.compile(r"\b\w+\b")
_LABEL_WORDS = {"summary", "tags", "keywords"}


def build_prompt(text: str) -> str:
    """Render the enrichment prompt for a note."""
    return ENRICH_PROMPT.format(text=text)


def strip_code_fences(content: str) -> str:
    """
    Remove a surrounding Markdown code fence (``` or ```json).

    Args:
        content: Raw model output

    Returns:
        Content without the fence, stripped
    """
    cleaned = content.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned)
        cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def extract_json_object(content: str) -> str | None:
    """Return the outermost {...} span in content, if any."""
    match = _JSON_OBJECT.search(content)
    return match.group(0) if match else None


def normalise_tags(tags: Any) -> list[str]:
    """
    Clean model-produced tags.

    Args:
        tags: List of tags or a single comma-separated string

    Returns:
        Up to MAX_TAGS distinct, stripped, lowercase tags in original order
        (stray brackets and quotes from broken JSON are dropped)
    """
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, (list, tuple)):
        return []

    cleaned = []
    for tag in tags:
        value = str(tag).strip().strip("[]\"'").lstrip("#").strip().lower()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned[:MAX_TAGS]


def parse_json_result(content: str) -> EnrichResult | None:
    """
    Parse the structured JSON answer.

    Tries the fence-stripped content first, then the first {...} block.

    Returns:
        EnrichResult, or None if no valid {"summary", "tags"} object was found
    """
    cleaned = strip_code_fences(content)
    candidates = [cleaned]
    embedded = extract_json_object(cleaned)
    if embedded and embedded != cleaned:
        candidates.append(embedded)

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(parsed, dict):
            continue
        summary = parsed.get("summary")
        tags = parsed.get("tags")
        if isinstance(summary, str) and summary.strip() and isinstance(tags, (list, str)):
            return EnrichResult(summary=summary.strip(), tags=normalise_tags(tags))
    return None


def scan_lines_result(content: str) -> EnrichResult | None:
    """
    Recover a result from unstructured text.

    Summary is a quoted "summary" field from truncated JSON if one is present,
    otherwise the first line with words in it, without a "summary:" prefix.
    Tags come from a "tags:" line when present, otherwise from the words of
    the text.

    Returns:
        EnrichResult, or None if no summary line could be found
    """
    # Lines made only of punctuation (stray braces, fences) carry nothing
    lines = [line.strip() for line in content.splitlines() if _WORD.search(line)]
    if not lines:
        return None

    quoted = _QUOTED_SUMMARY.search(content)
    if quoted:
        summary = quoted.group(1).strip()
    else:
        summary = _SUMMARY_PREFIX.sub("", lines[0]).strip().strip('"').strip()
    if not summary:
        return None

    tag_line = next((line for line in lines[1:] if _TAGS_PREFIX.match(line)), None)
    if tag_line is not None:
        tags = normalise_tags(_TAGS_PREFIX.sub("", tag_line))
    else:
        words = [w for w in _WORD.findall(content.lower()) if w not in _LABEL_WORDS]
        tags = normalise_tags(words)

    return EnrichResult(summary=summary, tags=tags)


def repair_response(content: Any) -> EnrichResult:
    """
    Turn raw model output into an EnrichResult.

    Args:
        content: Model output text

    Returns:
        Parsed or heuristically recovered result

    Raises:
        ProviderError: If neither JSON parsing nor the line heuristic succeeds
    """
    if not isinstance(content, str) or not content.strip():
        raise ProviderError("No content in response")

    result = parse_json_result(content)
    if result is not None:
        return result

    result = scan_lines_result(strip_code_fences(content))
    if result is not None:
        return result

    raise ProviderError("Invalid response format", context={"content": content[:200]})


def extract_keywords(text: str, limit: int = MAX_TAGS) -> list[str]:
    """
    Rank keywords by frequency.

    Drops tokens of 3 characters or fewer and stop words; ties keep
    first-occurrence order.

    Args:
        text: Source text
        limit: Maximum keywords

    Returns:
        Most frequent keywords
    """
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    counts = Counter(w for w in words if len(w) > 3 and w not in STOP_WORDS)
    return [word for word, _ in counts.most_common(limit)]


def truncate_summary(text: str, limit: int = 100) -> str:
    """Trim text and cut it to at most limit characters, marking the cut with '...'."""
    trimmed = text.strip()
    if len(trimmed) > limit:
        return trimmed[: limit - 3] + "..."
    return trimmed
