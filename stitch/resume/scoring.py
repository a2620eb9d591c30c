# stitch/resume/scoring.py
# Keyword match scoring of resume JSON against a job description (ATS-style re-scoring)

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from ..core.exceptions import ScoringError
from ..core.validation import validate_score

# tokens keep tech punctuation: c++, c#, ci/cd, node.js
_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#./-]*[a-z0-9+#]|[a-z0-9]{2,}")

STOP_WORDS = frozenset(
    """
    a about above after again all also am an and any are as at be because been
    before being below between both but by can could did do does doing down during
    each etc few for from further had has have having he her here hers him his how
    i if in into is it its itself just may me more most must my no nor not now of
    off on once only or other our ours out over own per plus same she should so some
    such than that the their them then there these they this those through to too
    under until up us very via was we were what when where which while who whom why
    will with within without would you your yours
    ability able across apply candidate candidates experience including join looking
    position preferred required requirements responsibilities role strong team work
    working years year
    """.split()
)


# * Keyword coverage of a resume against a job description
@dataclass
class KeywordScore:
    score: float
    matched: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        ok, err = validate_score(self.score)
        if not ok:
            raise ValueError(err)

    @property
    def percent(self) -> int:
        return round(self.score * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "matched": list(self.matched),
            "missing": list(self.missing),
        }


# * Lower-cased keyword set (>= 2 chars, stop words removed), in first-seen order
def extract_keywords(text: str) -> List[str]:
    seen: dict[str, None] = {}
    for token in _TOKEN_RE.findall((text or "").lower()):
        token = token.rstrip(".")
        if len(token) < 2 or token in STOP_WORDS or token.isdigit():
            continue
        seen.setdefault(token, None)
    return list(seen)


def _string_leaves(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for child in value.values():
            yield from _string_leaves(child)
    elif isinstance(value, list):
        for child in value:
            yield from _string_leaves(child)


# * Flatten every string leaf of the resume into one text blob
def resume_text(resume: Any) -> str:
    return "\n".join(_string_leaves(resume))


# * Fraction of job keywords present in the resume (raises ScoringError on empty job text)
def score_resume(resume: Any, job_text: str) -> KeywordScore:
    if not job_text or not job_text.strip():
        raise ScoringError("Job description is empty")

    job_keywords = extract_keywords(job_text)
    if not job_keywords:
        raise ScoringError("Job description has no scorable keywords")

    resume_keywords = set(extract_keywords(resume_text(resume)))
    matched = [k for k in job_keywords if k in resume_keywords]
    missing = [k for k in job_keywords if k not in resume_keywords]
    score = round(len(matched) / len(job_keywords), 4)
    return KeywordScore(score=score, matched=matched, missing=missing)
