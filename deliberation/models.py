"""Pure dataclasses for the deliberation and debate pipeline. No logic, no deps."""

from dataclasses import dataclass, field
from datetime import datetime


def _now() -> datetime:
    return datetime.now()


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class Completion:
    """Raw result of one backend call."""

    text: str
    model: str                     # actual model string used
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_sec: float = 0.0


@dataclass
class ModelQuery:
    query: str
    models: list[str]              # participant ids, in dispatch order
    system_prompt: str | None = None
    temperature: float | None = None
    timeout_sec: float | None = None  # per-call, applied independently


@dataclass
class ModelResponse:
    model: str                     # participant id that produced it
    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_sec: float = 0.0


@dataclass
class DeliberationResult:
    query: str
    models: list[str]              # subset of requested ids that succeeded
    responses: list[ModelResponse]
    parallel_duration_sec: float
    timestamp: datetime = field(default_factory=_now)


@dataclass
class Position:
    model: str
    position: str


@dataclass
class Disagreement:
    topic: str
    positions: list[Position] = field(default_factory=list)


@dataclass
class AgreementDetection:
    agreement_score: float         # 0..1
    common_points: list[str]
    disagreements: list[Disagreement]
    confidence: float              # 0..1


@dataclass
class QuorumResponse:
    query: str
    responses: list[ModelResponse]
    agreement: float
    threshold: float
    consensus: str | None          # None means "no reliable answer", not failure
    common_points: list[str] = field(default_factory=list)
    disagreements: list[Disagreement] = field(default_factory=list)
    timestamp: datetime = field(default_factory=_now)

    @property
    def models(self) -> list[str]:
        return [r.model for r in self.responses]


@dataclass
class SynthesisResult:
    original_responses: list[ModelResponse]
    synthesis: str
    agreement_analysis: AgreementDetection
    recommendations: list[str]
    synthesizer: str | None = None  # model id, None when rule-based
    timestamp: datetime = field(default_factory=_now)


@dataclass
class DebateTurn:
    model: str
    round_number: int
    content: str
    timestamp: datetime = field(default_factory=_now)
    referenced_turns: list[int] = field(default_factory=list)  # same-round indices


@dataclass
class DebateRound:
    round_number: int
    turns: list[DebateTurn] = field(default_factory=list)
    summary: str = ""
    key_points: list[str] = field(default_factory=list)


@dataclass
class DebateConfig:
    topic: str
    models: list[str]
    rounds: int = 3
    judge_model: str | None = None
    round_duration_sec: float | None = None


@dataclass
class ConfigValidation:
    valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class DebateResult:
    topic: str
    models: list[str]
    rounds: list[DebateRound]
    final_synthesis: str
    duration_sec: float
    winner: str | None = None
    judge_reasoning: str | None = None
    timestamp: datetime = field(default_factory=_now)
