# stitch/assistant/intent_parser.py
# Rule-based parser turning chat messages ("add Senior to my title") into modification intents

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..core.exceptions import ModificationError
from ..resume.field_path import MISSING
from ..resume.modifications import ModificationOperation, OperationType


MODIFICATION_KEYWORDS = (
    "add",
    "change",
    "update",
    "modify",
    "remove",
    "delete",
    "replace",
    "set",
    "make",
    "insert",
)

# * Keywords that classify a skill as technical (everything else is soft)
TECHNICAL_KEYWORDS = (
    "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "go", "rust",
    "react", "angular", "vue", "node", "express", "django", "flask", "spring",
    "sql", "mongodb", "postgresql", "redis", "elasticsearch",
    "aws", "azure", "gcp", "docker", "kubernetes", "ci/cd",
    "git", "github", "gitlab", "jenkins", "terraform",
    "html", "css", "sass", "tailwind", "bootstrap",
    "api", "rest", "graphql", "websocket", "grpc",
    "testing", "jest", "cypress", "selenium", "junit",
)

ORDINALS = {
    "first": 0,
    "second": 1,
    "third": 2,
    "fourth": 3,
    "fifth": 4,
    "latest": 0,
    "most recent": 0,
}

_ORDINAL_RE = re.compile(r"\b(first|second|third|fourth|fifth|\d+)(?:st|nd|rd|th)?\b")

# generational & numeral title suffixes ("Engineer II", "John Smith Jr")
_TITLE_SUFFIX_RE = re.compile(r"^(?:i{1,3}|iv|v|vi{1,3}|ix|x|jr\.?|sr\.?)$", re.IGNORECASE)

_SKILL_SPLIT_RE = re.compile(r"\s+and\s+|,\s*(?:and\s+)?")

DEFAULT_TITLE_PATH = "experiences[latest].title"
ACHIEVEMENTS_PATH = "experiences[latest].achievements"


# * Parsed meaning of one chat message
@dataclass
class ModificationIntent:
    is_modification: bool
    operation: str = "replace"
    field_path: str = ""
    new_value: Any = MISSING
    target_value: Optional[str] = None
    values: Optional[List[Any]] = None
    confidence: float = 0.0
    requires_clarification: bool = False
    clarification_question: Optional[str] = None
    suggested_fields: Optional[List[str]] = None
    warnings: List[str] = field(default_factory=list)
    should_skip: bool = False
    context_used: bool = False
    modifications: Optional[List["ModificationIntent"]] = None
    error: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.is_modification and not self.requires_clarification

    # * Convert to applicable operations (none for clarification/skip intents)
    def to_operations(self) -> List[ModificationOperation]:
        if not self.resolved or self.should_skip:
            return []
        if self.modifications:
            ops: List[ModificationOperation] = []
            for sub in self.modifications:
                ops.extend(sub.to_operations())
            return ops
        if not self.field_path:
            return []

        op_type = OperationType(self.operation)
        if self.values:
            return [
                ModificationOperation(OperationType.APPEND, self.field_path, value)
                for value in self.values
                if value not in ("", None)
            ]
        if op_type is OperationType.REMOVE:
            if self.target_value:
                return [
                    ModificationOperation(
                        op_type, self.field_path, old_value=self.target_value
                    )
                ]
            return [ModificationOperation(op_type, self.field_path)]
        if self.new_value is MISSING or self.new_value in ("", None):
            return []
        return [ModificationOperation(op_type, self.field_path, self.new_value)]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "is_modification": self.is_modification,
            "operation": self.operation,
            "field_path": self.field_path,
            "confidence": self.confidence,
        }
        if self.new_value is not MISSING:
            out["new_value"] = self.new_value
        optional = {
            "target_value": self.target_value,
            "values": self.values,
            "clarification_question": self.clarification_question,
            "suggested_fields": self.suggested_fields,
            "error": self.error,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        if self.requires_clarification:
            out["requires_clarification"] = True
        if self.warnings:
            out["warnings"] = list(self.warnings)
        if self.should_skip:
            out["should_skip"] = True
        if self.context_used:
            out["context_used"] = True
        if self.modifications:
            out["modifications"] = [m.to_dict() for m in self.modifications]
        return out


def _clarify(
    operation: str,
    field_path: str,
    question: str,
    confidence: float = 0.4,
    suggested: Optional[List[str]] = None,
) -> ModificationIntent:
    return ModificationIntent(
        is_modification=True,
        operation=operation,
        field_path=field_path,
        confidence=confidence,
        requires_clarification=True,
        clarification_question=question,
        suggested_fields=suggested,
    )


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return value.strip()


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


# * Convert an ordinal word or 1-based number to a 0-based index
def parse_ordinal(word: str) -> int:
    lower = word.strip().lower()
    if lower in ORDINALS:
        return ORDINALS[lower]
    digits = re.match(r"\d+", lower)
    if digits:
        return max(int(digits.group(0)) - 1, 0)
    return 0


def _find_ordinal(lower_message: str) -> Optional[int]:
    match = _ORDINAL_RE.search(lower_message)
    return parse_ordinal(match.group(1)) if match else None


def _resolve_title_path(lower_message: str, context: Optional[dict]) -> str:
    experiences = (context or {}).get("experiences") or []
    if "previous" in lower_message and len(experiences) > 1:
        return "experiences[1].title"
    return "experiences[0].title" if context else DEFAULT_TITLE_PATH


def _is_modification_message(lower_message: str) -> bool:
    return any(_has_word(lower_message, kw) for kw in MODIFICATION_KEYWORDS)


def _is_technical(skill: str) -> bool:
    lower = skill.lower()
    return any(
        re.search(rf"(?<![a-z0-9]){re.escape(kw)}(?![a-z0-9+#])", lower)
        for kw in TECHNICAL_KEYWORDS
    )


# =============================================================================
# Field-specific parsers
# =============================================================================


def _parse_title(message: str, lower: str, context: Optional[dict]) -> ModificationIntent:
    path = _resolve_title_path(lower, context)
    used = context is not None

    make_me = re.search(r"make\s+me\s+(?:(?:a|an|the)\s+)?(.+?)(?:\s+title)?\s*$", message, re.I)
    if make_me:
        return ModificationIntent(
            is_modification=True,
            operation="replace",
            field_path=path,
            new_value=_strip_quotes(make_me.group(1)),
            confidence=0.9,
            context_used=used,
        )

    add_to = re.search(r"add\s+(.+?)\s+to\b.*title", message, re.I)
    if add_to:
        raw = _strip_quotes(add_to.group(1))
        at_end = bool(re.search(r"\b(end|suffix)\b", lower))
        is_suffix = at_end or bool(_TITLE_SUFFIX_RE.match(raw))
        return ModificationIntent(
            is_modification=True,
            operation="suffix" if is_suffix else "prefix",
            field_path=path,
            new_value=f" {raw}" if is_suffix else f"{raw} ",
            confidence=0.9,
            context_used=used,
        )

    at_end = re.search(r"add\s+(.+?)\s+(?:at the end|to end|at end)\b", message, re.I)
    if at_end:
        return ModificationIntent(
            is_modification=True,
            operation="suffix",
            field_path=path,
            new_value=f" {_strip_quotes(at_end.group(1))}",
            confidence=0.9,
            context_used=used,
        )

    change_to = re.search(
        r"(?:change|update|make|set|replace)\b.*title\s+(?:to|as|with)\s+(.+?)\s*$",
        message,
        re.I,
    )
    if change_to:
        value = re.sub(r"^(?:a|an|the)\s+", "", _strip_quotes(change_to.group(1)), flags=re.I)
        return ModificationIntent(
            is_modification=True,
            operation="replace",
            field_path=path,
            new_value=value,
            confidence=0.85,
            context_used=used,
        )

    return _clarify(
        "replace",
        path,
        "Would you like to add text, replace the entire title, or make another change?",
        confidence=0.5,
        suggested=[path],
    )


def _parse_contact(message: str, field_name: str) -> ModificationIntent:
    path = f"contact.{field_name}"
    pattern = rf"{field_name}(?:\s+(?:number|address))?\s+(?:to|is|as)\s+(.+?)\s*$"
    match = re.search(pattern, message, re.I)
    value = _strip_quotes(match.group(1)) if match else ""
    if value:
        return ModificationIntent(
            is_modification=True,
            operation="replace",
            field_path=path,
            new_value=value,
            confidence=0.95,
        )
    return _clarify(
        "replace",
        path,
        f"What would you like to change your {field_name} to?",
        suggested=[path],
    )


def _parse_skill(message: str, lower: str, context: Optional[dict]) -> ModificationIntent:
    if _has_word(lower, "add"):
        match = re.search(r"add\s+(.+?)\s+(?:to|in|under)\b", message, re.I)
        if match:
            skills_text = match.group(1).strip()
            skills = [_strip_quotes(s) for s in _SKILL_SPLIT_RE.split(skills_text)]
            skills = [s for s in skills if s]
            if not skills or skills_text.lower() == "to":
                return _clarify(
                    "append", "skills.technical", "Which skill would you like to add?"
                )

            first = skills[0]
            path = "skills.technical" if _is_technical(first) else "skills.soft"

            if context and isinstance(context.get("skills"), dict):
                existing = {
                    str(s).strip().lower()
                    for group in ("technical", "soft")
                    for s in (context["skills"].get(group) or [])
                }
                duplicates = [s for s in skills if s.lower() in existing]
                if duplicates and len(duplicates) == len(skills):
                    return ModificationIntent(
                        is_modification=True,
                        operation="append",
                        field_path=path,
                        new_value=first,
                        confidence=0.9,
                        warnings=[f"{s} already exists in skills" for s in duplicates],
                        should_skip=True,
                        context_used=True,
                    )
                if duplicates:
                    fresh = [s for s in skills if s.lower() not in existing]
                    return ModificationIntent(
                        is_modification=True,
                        operation="append",
                        field_path=path,
                        values=fresh,
                        confidence=0.85,
                        warnings=[f"{s} already exists in skills" for s in duplicates],
                        context_used=True,
                    )

            if len(skills) > 1:
                return ModificationIntent(
                    is_modification=True,
                    operation="append",
                    field_path=path,
                    values=skills,
                    confidence=0.85,
                )
            return ModificationIntent(
                is_modification=True,
                operation="append",
                field_path=path,
                new_value=first,
                confidence=0.9,
            )

    if _has_word(lower, "remove") or _has_word(lower, "delete"):
        match = re.search(r"(?:remove|delete)\s+(.+?)\s+from\b", message, re.I)
        target = _strip_quotes(match.group(1)) if match else ""
        ordinal = re.fullmatch(
            r"(?:the\s+|my\s+)?(first|second|third|fourth|fifth|\d+)(?:st|nd|rd|th)?(?:\s+skill)?",
            target.lower(),
        )
        if ordinal:
            return ModificationIntent(
                is_modification=True,
                operation="remove",
                field_path=f"skills.technical[{parse_ordinal(ordinal.group(1))}]",
                confidence=0.85,
            )
        if target:
            return ModificationIntent(
                is_modification=True,
                operation="remove",
                field_path="skills.technical",
                target_value=target,
                confidence=0.85,
            )

    return _clarify(
        "append", "skills.technical", "Which skill would you like to add or remove?"
    )


def _parse_summary(message: str, lower: str) -> ModificationIntent:
    if _has_word(lower, "change") or _has_word(lower, "update") or _has_word(lower, "replace"):
        match = re.search(r"summary\s+(?:to|with)\s+(.+?)\s*$", message, re.I)
        value = _strip_quotes(match.group(1)) if match else ""
        if not value:
            return _clarify(
                "replace", "summary", "What would you like your summary to say?", 0.5
            )
        return ModificationIntent(
            is_modification=True,
            operation="replace",
            field_path="summary",
            new_value=value,
            confidence=0.9,
        )

    if _has_word(lower, "add"):
        match = re.search(r"add\s+(?:to\s+)?(?:my\s+)?summary:?\s*(.+?)\s*$", message, re.I)
        if not match:
            # "add <text> to my summary"
            match = re.search(r"add\s+(.+?)\s+to\s+(?:my\s+|the\s+)?summary\s*$", message, re.I)
        value = _strip_quotes(match.group(1)) if match else ""
        if not value:
            return _clarify(
                "suffix", "summary", "What would you like to add to your summary?"
            )
        return ModificationIntent(
            is_modification=True,
            operation="suffix",
            field_path="summary",
            new_value=f" {value}",
            confidence=0.85,
        )

    return _clarify(
        "replace", "summary", "What would you like to change about your summary?"
    )


def _parse_achievement(message: str, lower: str) -> ModificationIntent:
    if _has_word(lower, "add"):
        match = re.search(r"achievements?\b.*?:\s*(.+?)\s*$", message, re.I)
        value = _strip_quotes(match.group(1)) if match else ""
        if not value:
            return _clarify(
                "append", ACHIEVEMENTS_PATH, "What achievement would you like to add?", 0.5
            )
        return ModificationIntent(
            is_modification=True,
            operation="append",
            field_path=ACHIEVEMENTS_PATH,
            new_value=value,
            confidence=0.9,
        )

    if _has_word(lower, "remove") or _has_word(lower, "delete"):
        index = _find_ordinal(lower)
        return ModificationIntent(
            is_modification=True,
            operation="remove",
            field_path=f"{ACHIEVEMENTS_PATH}[{index or 0}]",
            confidence=0.85,
        )

    if _has_word(lower, "change") or _has_word(lower, "update"):
        index = _find_ordinal(lower) or 0
        match = re.search(r"achievements?\b.*?(?:\bto\b|:)\s*(.+?)\s*$", message, re.I)
        value = _strip_quotes(match.group(1)) if match else ""
        if not value:
            return _clarify(
                "replace",
                f"{ACHIEVEMENTS_PATH}[{index}]",
                "What should this achievement say instead?",
                0.5,
            )
        return ModificationIntent(
            is_modification=True,
            operation="replace",
            field_path=f"{ACHIEVEMENTS_PATH}[{index}]",
            new_value=value,
            confidence=0.85,
        )

    return _clarify(
        "append",
        ACHIEVEMENTS_PATH,
        "What achievement would you like to add, change, or remove?",
    )


# * Parse a chat message into a modification intent (raises ModificationError on empty input)
def parse_modification_intent(
    message: str, resume_context: Optional[dict] = None
) -> ModificationIntent:
    if not message or not message.strip():
        raise ModificationError("Empty message is not allowed")

    # common typos
    normalized = re.sub(r"^ad\s+", "add ", message.strip(), flags=re.I)
    normalized = re.sub(r"skillz", "skills", normalized, flags=re.I)
    lower = normalized.lower()

    if not _is_modification_message(lower):
        return ModificationIntent(
            is_modification=False,
            error="Message does not appear to be a modification request",
        )

    # "change my title to X and add Y to summary"
    if "title" in lower and "summary" in lower and " and " in lower:
        title_match = re.search(r"title\s+to\s+(.+?)(?:\s+and\b|$)", normalized, re.I)
        summary_match = re.search(r"add\s+(.+?)\s+to\s+(?:my\s+)?summary", normalized, re.I)
        title_text = (
            f"change my title to {title_match.group(1)}" if title_match else normalized
        )
        summary_text = (
            f"add {summary_match.group(1)} to summary" if summary_match else normalized
        )
        first = _parse_title(title_text, title_text.lower(), resume_context)
        second = _parse_summary(summary_text, summary_text.lower())
        return ModificationIntent(
            is_modification=True,
            operation=first.operation,
            field_path=first.field_path,
            new_value=first.new_value,
            confidence=min(first.confidence, second.confidence),
            requires_clarification=first.requires_clarification
            and second.requires_clarification,
            context_used=first.context_used,
            modifications=[first, second],
        )

    if "title" not in lower and re.search(r"make me\s+", lower):
        return _parse_title(normalized, lower, resume_context)

    if (
        ("latest job" in lower or "most recent job" in lower)
        and "title" not in lower
        and "achievement" not in lower
    ):
        path = _resolve_title_path(lower, resume_context)
        return _clarify(
            "replace",
            path,
            "What would you like to change about your latest job?",
            confidence=0.6,
            suggested=[path],
        )

    if "title" in lower:
        return _parse_title(normalized, lower, resume_context)
    if "email" in lower:
        return _parse_contact(normalized, "email")
    if "emial" in lower:
        return _clarify(
            "replace",
            "contact.email",
            "Did you want to change your email address?",
            suggested=["contact.email"],
        )
    if "phone" in lower:
        return _parse_contact(normalized, "phone")
    if "location" in lower:
        return _parse_contact(normalized, "location")
    if "skill" in lower:
        return _parse_skill(normalized, lower, resume_context)
    if "summary" in lower:
        return _parse_summary(normalized, lower)
    if "achievement" in lower:
        return _parse_achievement(normalized, lower)

    if "experience" in lower:
        index = _find_ordinal(lower) or 0
        path = "experiences[latest]" if index == 0 else f"experiences[{index}]"
        return _clarify(
            "replace",
            path,
            "What would you like to change about this experience?",
            confidence=0.5,
        )

    if lower.startswith("add senior"):
        return _clarify(
            "prefix",
            "",
            f"What would you like to add Senior to? (e.g., {DEFAULT_TITLE_PATH})",
            suggested=[DEFAULT_TITLE_PATH],
        )

    return _clarify(
        "replace",
        "",
        "What would you like to modify? (job title, email, skills, summary, etc.)",
        confidence=0.3,
        suggested=[DEFAULT_TITLE_PATH, "contact.email", "skills.technical"],
    )
