"""Arbitration between DOM and vision navigator proposals."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from navforge.runtime.events import PerfEvent, PerformanceLogger, now_ms
from navforge.state import DirectorDecision, DirectorProposal, NavigatorMode
from navforge.util.logging import get_logger, log_event

NEAR_TIE_EPSILON = 0.01


class NoProposalsError(ValueError):
    """Raised when the director is asked to arbitrate an empty proposal list."""


class DirectorCtlOptions(BaseModel):
    vision_score_offset: float = 0.05
    """Bonus added to vision scores before comparing against DOM."""
    hysteresis_margin: float = 0.08
    """Minimum score delta required before switching away from the previous mode."""
    prefer_dom_on_tie: bool = True
    """Prefer DOM when scores are tied or extremely close."""


DEFAULT_CTL = DirectorCtlOptions()


@dataclass(frozen=True)
class DirectorContextMeta:
    task_id: str
    step: int


def merge_ctl_options(
    ctl_options: DirectorCtlOptions | Mapping[str, Any] | None,
) -> DirectorCtlOptions:
    if ctl_options is None:
        return DEFAULT_CTL
    if isinstance(ctl_options, DirectorCtlOptions):
        return ctl_options
    return DirectorCtlOptions.model_validate({**DEFAULT_CTL.model_dump(), **dict(ctl_options)})


class DirectorService:
    """Chooses which navigator's proposal to execute for a step.

    One instance per task: it remembers the last chosen mode and uses it as the
    hysteresis anchor for the next decision.
    """

    def __init__(
        self,
        recorder: PerformanceLogger | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.recorder = recorder
        self.logger = logger or get_logger("navforge.director")
        self.last_mode: NavigatorMode | None = None

    def choose(
        self,
        proposals: Sequence[DirectorProposal],
        meta: DirectorContextMeta,
        ctl_options: DirectorCtlOptions | Mapping[str, Any] | None = None,
    ) -> DirectorDecision:
        if not proposals:
            raise NoProposalsError("DirectorService received no proposals to arbitrate")

        ctl = merge_ctl_options(ctl_options)
        scores: dict[NavigatorMode, float] = {NavigatorMode.DOM: 0.0, NavigatorMode.VISION: 0.0}
        adjusted: list[DirectorProposal] = []
        for proposal in proposals:
            score = proposal.score
            if proposal.mode == NavigatorMode.VISION:
                score += ctl.vision_score_offset
            scores[proposal.mode] = score
            adjusted.append(proposal.model_copy(update={"score": score}))

        ranked = sorted(adjusted, key=lambda candidate: candidate.score, reverse=True)
        top = ranked[0]
        rationale = top.rationale
        reason = "top"

        if len(ranked) > 1:
            second = ranked[1]
            diff = top.score - second.score
            if (
                self.last_mode is not None
                and self.last_mode != top.mode
                and diff < ctl.hysteresis_margin
            ):
                previous = _first_with_mode(ranked, self.last_mode)
                if previous is not None:
                    top = previous
                    reason = "hysteresis"
                    rationale = (
                        f"Maintained {_label(previous.mode)} navigator due to hysteresis "
                        f"({diff:.2f} delta)."
                    )
            elif diff < NEAR_TIE_EPSILON and ctl.prefer_dom_on_tie:
                dom_candidate = _first_with_mode(ranked, NavigatorMode.DOM)
                if dom_candidate is not None:
                    top = dom_candidate
                    reason = "near_tie"
                    rationale = (
                        "Scores nearly tied; defaulting to DOM navigator to reduce "
                        f"vision churn (Δ {diff:.2f})."
                    )
            elif diff >= ctl.hysteresis_margin:
                reason = "decisive"
                rationale = (
                    f"Selected {_label(top.mode)} navigator "
                    f"(score {top.score:.2f} vs {second.score:.2f})."
                )
        else:
            reason = "only_option"
            rationale = f"Only {_label(top.mode)} navigator proposal available."

        self.last_mode = top.mode
        log_event(
            self.logger,
            logging.INFO,
            "director.selected",
            task=meta.task_id,
            step=meta.step,
            mode=top.mode,
            score=top.score,
            reason=reason,
        )
        self._record(top.mode, rationale, meta)
        return DirectorDecision(proposal=top, rationale=rationale, scores=scores)

    def reset(self) -> None:
        self.last_mode = None

    def _record(self, mode: NavigatorMode, rationale: str, meta: DirectorContextMeta) -> None:
        if self.recorder is None:
            return
        event = PerfEvent(
            timestamp=now_ms(),
            task_id=meta.task_id,
            step=meta.step,
            actor="navigator",
            modality=mode,
            action="navigator.proposal-select",
            origin="director",
            outcome="success",
            session_id=meta.task_id,
            note=rationale,
        )
        try:
            self.recorder.add_event(event)
        except Exception as exc:
            log_event(
                self.logger,
                logging.WARNING,
                "director.record_failed",
                task=meta.task_id,
                step=meta.step,
                error=exc,
            )


def _first_with_mode(
    candidates: Sequence[DirectorProposal], mode: NavigatorMode
) -> DirectorProposal | None:
    for candidate in candidates:
        if candidate.mode == mode:
            return candidate
    return None


def _label(mode: NavigatorMode) -> str:
    return mode.value.upper()
