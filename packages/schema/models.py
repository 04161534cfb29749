# Contract-only models. Keep names/fields stable.
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Severity = Literal["vulnerability", "warning", "safe"]


class GeneratorId(str, Enum):
    """Candidate provenance. Each member carries its ensemble weight."""

    TEMPLATE_TRIGGER = "TemplateTrigger"
    ADJACENT_LINE = "AdjacentLine"
    CONTEXT_AWARE = "ContextAware"
    PREFIX_KEYWORD = "PrefixKeyword"
    FALLBACK = "Fallback"

    @property
    def weight(self) -> float:
        return _GENERATOR_WEIGHTS[self]


_GENERATOR_WEIGHTS: Dict[GeneratorId, float] = {
    GeneratorId.TEMPLATE_TRIGGER: 0.35,
    GeneratorId.ADJACENT_LINE: 0.25,
    GeneratorId.CONTEXT_AWARE: 0.25,
    GeneratorId.PREFIX_KEYWORD: 0.15,
    GeneratorId.FALLBACK: 1.0,
}


class Position(BaseModel):
    line: int = Field(ge=0)
    column: int = Field(ge=0)


class Suggestion(BaseModel):
    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    security_score: float = Field(ge=0.0, le=1.0)
    model: GeneratorId
    description: Optional[str] = None

    @property
    def composite_score(self) -> float:
        return self.confidence * 0.7 + self.security_score * 0.3


class CodeContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    in_function: bool = False
    in_class: bool = False


class SecurityIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    severity: Severity
    line: int = Field(ge=1)


class SecurityReport(BaseModel):
    overall_score: float = Field(ge=0.0, le=1.0)
    issues: List[SecurityIssue] = Field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)
