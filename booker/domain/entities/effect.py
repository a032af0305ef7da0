from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ManualTriggerOffer(str, Enum):
    none = "none"
    primary = "primary"
    secondary = "secondary"


class EffectKind(str, Enum):
    cancel_all = "cancel_all"  # deadlines, tickers and any in-flight phase
    arm_deadlines = "arm_deadlines"
    start_ticker = "start_ticker"
    refresh_countdown = "refresh_countdown"
    run_preparation = "run_preparation"
    run_commit = "run_commit"
    schedule_manual_commit = "schedule_manual_commit"
    report = "report"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind
    message: str | None = None
    offer: ManualTriggerOffer = ManualTriggerOffer.none


CANCEL_ALL = Effect(EffectKind.cancel_all)
ARM_DEADLINES = Effect(EffectKind.arm_deadlines)
START_TICKER = Effect(EffectKind.start_ticker)
REFRESH_COUNTDOWN = Effect(EffectKind.refresh_countdown)
RUN_PREPARATION = Effect(EffectKind.run_preparation)
RUN_COMMIT = Effect(EffectKind.run_commit)
SCHEDULE_MANUAL_COMMIT = Effect(EffectKind.schedule_manual_commit)


def report(message: str, offer: ManualTriggerOffer = ManualTriggerOffer.none) -> Effect:
    return Effect(EffectKind.report, message=message, offer=offer)
