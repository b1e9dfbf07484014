"""Parsing of GIAC help text into structured HelpResult values.

The native help database returns blocks like::

    Description: Factorizes a polynomial.
    Related: ifactor, partfrac, normal
    Examples: factor(x^4-1);factor(x^4-4,sqrt(2))
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DESCRIPTION_PREFIX = "Description: "
RELATED_PREFIX = "Related: "
EXAMPLES_PREFIX = "Examples:"


class HelpResult(BaseModel):
    """Structured help for a single command."""

    model_config = ConfigDict(frozen=True)

    command: str
    description: str = ""
    related: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.description or self.related or self.examples)


def clean_help_string(raw: str) -> str:
    """Strip one pair of outer quotes and unescape ``\\n``, ``\\"``, ``\\\\``."""
    text = raw
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    text = text.replace("\\n", "\n").replace('\\"', '"').replace("\\\\", "\\")
    return text


def _split_clean(text: str, sep: str) -> list[str]:
    return [part.strip() for part in text.split(sep) if part.strip()]


def parse_help(raw: str, command: str) -> HelpResult:
    """Parse raw help text for *command*.

    Examples may continue on the lines after ``Examples:``; they are
    joined with ``;`` and split into individual expressions.
    """
    description = ""
    related: list[str] = []
    examples: list[str] = []
    if not raw:
        return HelpResult(command=command)

    lines = raw.split("\n")
    for index, line in enumerate(lines):
        if line.startswith(DESCRIPTION_PREFIX):
            description = line[len(DESCRIPTION_PREFIX) :].strip()
        elif line.startswith(RELATED_PREFIX):
            related = _split_clean(line[len(RELATED_PREFIX) :], ",")
        elif line.startswith(EXAMPLES_PREFIX):
            chunks = [line[len(EXAMPLES_PREFIX) :].strip()]
            for following in lines[index + 1 :]:
                following = following.strip()
                if following.startswith(("Description:", "Related:")):
                    continue
                chunks.append(following)
            examples = _split_clean(";".join(chunks), ";")
            break

    return HelpResult(command=command, description=description, related=related, examples=examples)
