import re
from typing import Any


JUDGEMENT_OPTIONS = {
    "trueFalseNotGiven": ["TRUE", "FALSE", "NOT GIVEN"],
    "yesNoNotGiven": ["YES", "NO", "NOT GIVEN"],
}

_JUDGEMENT_ALIASES = {
    "t": "TRUE",
    "true": "TRUE",
    "f": "FALSE",
    "false": "FALSE",
    "y": "YES",
    "yes": "YES",
    "n": "NO",
    "no": "NO",
    "ng": "NOT GIVEN",
    "not given": "NOT GIVEN",
    "notgiven": "NOT GIVEN",
}


def normalize_option_text(value: Any) -> str:
    text = str(value or "").strip()
    if not text:
        return ""

    labeled = re.match(r"^(?:option|choice)\s*[0-9A-Da-d]+(?:\s*[:.)-]\s*|\s+)(.+)$", text, re.IGNORECASE)
    if labeled:
        return str(labeled.group(1)).strip()

    numbered = re.match(r"^\s*(?:\(?[1-9]\)?[.)]|\(?[A-Da-d]\)?[.)])\s*(.+)$", text)
    if numbered:
        return str(numbered.group(1)).strip()

    return text


def normalize_options(options: list[str]) -> list[str]:
    # Length is preserved so answer indices keep pointing at the same option.
    return [normalize_option_text(option) or option for option in options]


def clamp_answer_index(index: int, option_count: int) -> int:
    if option_count <= 0:
        return 0
    return max(0, min(option_count - 1, int(index)))


def extract_enumerated_options(*sources: Any, max_options: int = 4) -> list[str]:
    extracted: list[str] = []
    for source in sources:
        text = str(source or "")
        if not text.strip():
            continue
        for line in text.splitlines():
            match = re.match(r"^\s*(?:\(?[1-9]\)?[.)]|\(?[A-Da-d]\)?[.)])\s*(.+?)\s*$", line.strip())
            if not match:
                continue
            candidate = normalize_option_text(match.group(1))
            if candidate and candidate not in extracted:
                extracted.append(candidate)
            if len(extracted) >= max_options:
                return extracted
    return extracted


def normalize_judgement_answer(value: Any) -> str:
    raw = " ".join(str(value or "").split())
    return _JUDGEMENT_ALIASES.get(raw.lower(), raw)
