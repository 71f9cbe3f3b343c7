# additive_trainer/training/engines/prior_engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from additive_trainer import logs
from additive_trainer.core.model import AdditiveModel
from additive_trainer.core.types import FeatureKey


@dataclass(frozen=True)
class Prior:
    family: str
    name: str
    params: Tuple[float, float]

    @property
    def key(self) -> FeatureKey:
        return self.family, self.name


@dataclass(frozen=True)
class PriorParseError:
    entry: str
    reason: str


@dataclass(frozen=True)
class PriorParseResult:
    """Either prior or error is set."""
    prior: Optional[Prior] = None
    error: Optional[PriorParseError] = None

    @property
    def ok(self) -> bool:
        return self.prior is not None


@dataclass
class PriorSeedReport:
    applied: List[FeatureKey] = field(default_factory=list)
    missing: List[FeatureKey] = field(default_factory=list)
    failures: List[PriorParseError] = field(default_factory=list)


def parse_prior(entry: str) -> PriorParseResult:
    """Parse one "family,name,v0,v1" entry; never raises."""
    tokens = entry.split(",")
    if len(tokens) != 4:
        return PriorParseResult(
            error=PriorParseError(entry, f"expected 4 tokens, got {len(tokens)}")
        )

    family, name, v0, v1 = tokens
    try:
        params = (float(v0), float(v1))
    except ValueError as e:
        return PriorParseResult(error=PriorParseError(entry, str(e)))

    return PriorParseResult(prior=Prior(family, name, params))


def seed_priors(priors: Sequence[str], model: AdditiveModel) -> PriorSeedReport:
    """
    Overwrite weights of existing functions from prior entries.

    Malformed entries are reported per entry and skipped; keys absent from
    the model are skipped.
    """
    report = PriorSeedReport()
    for entry in priors:
        result = parse_prior(entry)
        if not result.ok:
            logs.error(
                f"[Prior] skip malformed prior {result.error.entry!r}: "
                f"{result.error.reason}"
            )
            report.failures.append(result.error)
            continue

        prior = result.prior
        func = model.get(prior.family, prior.name)
        if func is None:
            report.missing.append(prior.key)
            continue

        logs.info(
            f"[Prior] Setting prior {prior.family}:{prior.name} "
            f"<- {prior.params[0]:f} to {prior.params[1]:f}"
        )
        func.set_priors(prior.params)
        report.applied.append(prior.key)

    return report
