# version 0.2
"""
Handle bookkeeping for one run: a halo, a WIMP and a set of detectors created
up front, evaluated once per input line, and freed together at the end.
"""
from dataclasses import dataclass, field
from typing import List

from config import Config
from constants import InputMode
from engine import Couplings, Handle, PhysicsEngine, get_detector
from params import CouplingSet


@dataclass
class DetectorReport:
    """Results for one detector at the current WIMP point."""

    name: str
    label: str
    events: int
    background: float
    signal: float
    log_likelihood: float
    scale_to_pvalue: float


@dataclass
class WimpState:
    """WIMP parameters as read back from the engine in both representations."""

    mG: Couplings
    mfa: Couplings

    @property
    def mass(self) -> float:
        return self.mfa[0]


@dataclass
class Session:
    engine: PhysicsEngine
    halo: Handle
    wimp: Handle
    detectors: List[Handle] = field(default_factory=list)
    names: List[str] = field(default_factory=list)

    @classmethod
    def open(cls, engine: PhysicsEngine, cfg: Config) -> "Session":
        """Create halo, WIMP and detectors, then apply the optional setters."""
        halo = engine.init_halo()
        wimp = engine.init_wimp()
        session = cls(engine, halo, wimp)
        for name in cfg.detectors:
            session.detectors.append(engine.init_detector(name))
            session.names.append(name)

        if cfg.emin is not None:
            for d in session.detectors:
                engine.set_emin(d, cfg.emin)

        if cfg.custom_halo:
            engine.set_shm(halo, *cfg.halo_params())

        return session

    def set_wimp(self, mode: InputMode, params: CouplingSet) -> WimpState:
        """Push ``params`` in the representation of ``mode``; read both back."""
        if mode is InputMode.MG:
            self.engine.set_wimp_mg(self.wimp, *params.as_tuple())
        else:
            self.engine.set_wimp_mfa(self.wimp, *params.as_tuple())
        return WimpState(
            mG=self.engine.get_wimp_mg(self.wimp),
            mfa=self.engine.get_wimp_mfa(self.wimp),
        )

    def evaluate(self) -> List[DetectorReport]:
        """Compute rates for every detector, then collect the per-detector results."""
        for d in self.detectors:
            self.engine.calc_rates(d, self.wimp, self.halo)

        reports = []
        for d, name in zip(self.detectors, self.names):
            reports.append(DetectorReport(
                name=name,
                label=get_detector(name).label,
                events=self.engine.events(d),
                background=self.engine.background(d),
                signal=self.engine.signal(d),
                log_likelihood=self.engine.log_likelihood(d),
                scale_to_pvalue=self.engine.scale_to_pvalue(d),
            ))
        return reports
