"""Public API for RouteProof."""

from __future__ import annotations

import time
from dataclasses import dataclass

from routeproof.config import RouteProofConfig, SolverConfig
from routeproof.core.state import State
from routeproof.logging import get_logger
from routeproof.networks.annotated import AnnotatedNetwork

MODES = ("modular", "monolithic")


@dataclass
class VerificationResult:
    """Outcome of verifying an annotated network.
    Attributes:
        mode: ``"modular"`` or ``"monolithic"``.
        counterexample: ``None`` when the properties were proved.
        time_seconds: Wall-clock time of the run.
        network: Short description of the verified network.
    """

    mode: str
    counterexample: State | None
    time_seconds: float
    network: str = ""

    @property
    def proved(self) -> bool:
        return self.counterexample is None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "proved": self.proved,
            "time_seconds": self.time_seconds,
            "network": self.network,
            "counterexample": None if self.counterexample is None else self.counterexample.to_dict(),
        }


def verify(
    network: AnnotatedNetwork,
    mode: str = "modular",
    config: SolverConfig | RouteProofConfig | None = None,
) -> VerificationResult:
    """
    Verify an annotated network.
    Args:
        network: The annotated network to check.
        mode: ``"modular"`` runs the base, inductive and safety checks;
              ``"monolithic"`` checks every stable state at once.
        config: Solver settings, or a whole loaded configuration.
    Returns:
        VerificationResult holding the counterexample, if any.
    Raises:
        ValueError: If ``mode`` is unknown.
        SolverError: If the solver cannot decide some query.
    Example:
        >>> result = verify(annotated, mode="modular")
        >>> print(result.proved)
    """
    if mode not in MODES:
        raise ValueError(f"unknown verification mode {mode!r}; expected one of {MODES}")
    if isinstance(config, RouteProofConfig):
        config = config.solver
    logger = get_logger()
    logger.header(f"RouteProof {mode} verification")
    logger.verbose(repr(network.network))
    start = time.perf_counter()
    if mode == "modular":
        counterexample = network.check_annotations(config)
    else:
        counterexample = network.check_monolithic(config)
    elapsed = time.perf_counter() - start
    return VerificationResult(
        mode=mode,
        counterexample=counterexample,
        time_seconds=elapsed,
        network=repr(network.network),
    )


__all__ = [
    "VerificationResult",
    "verify",
]
