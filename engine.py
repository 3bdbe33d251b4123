# version 0.2
"""
Physics engine interface and detector registry.

Everything physical (halo integrals, detector response, likelihoods, maximum
gap statistics) is done by an engine.  The program only holds the integer
handles the engine gives out and sequences calls against them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Tuple

Handle = int
Couplings = Tuple[float, float, float, float, float]


class EngineError(RuntimeError):
    """Raised when the physics library cannot be loaded or a call fails."""


# -----------------------------------------------------------------------------
# Detector registry
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DetectorSpec:
    name: str
    label: str   # column header in the results table
    symbol: str  # C entry point that builds the detector


DETECTOR_REGISTRY: Dict[str, DetectorSpec] = {}


def register_detector(name: str, label: str, symbol: str = None) -> DetectorSpec:
    """
    Register an experiment under a given name.

    ``symbol`` defaults to ``C_DDCalc_<name lowercased>_init``, which is how
    the library exports its analysis initialisers.
    """
    spec = DetectorSpec(name, label, symbol or f"C_DDCalc_{name.lower()}_init")
    DETECTOR_REGISTRY[name] = spec
    return spec


def get_detector(name: str) -> DetectorSpec:
    """
    Retrieve a registered detector by name.

    Raises:
        ValueError: If the detector name is not found in the registry.
    """
    try:
        return DETECTOR_REGISTRY[name]
    except KeyError:
        valid = ", ".join(DETECTOR_REGISTRY.keys()) or "<none>"
        raise ValueError(f"Detector '{name}' not found. Available: {valid}")


def available_detectors() -> List[str]:
    return list(DETECTOR_REGISTRY.keys())


register_detector("XENON100_2012", " XENON 2012")
register_detector("LUX_2013", " LUX 2013  ")
register_detector("SuperCDMS_2014", "SuCDMS 2014")
register_detector("SIMPLE_2014", "SIMPLE 2014")
register_detector("LUX_2015", " LUX 2015  ")
register_detector("LUX_2016", " LUX 2016  ")
register_detector("PandaX_2016", "PandaX 2016")
register_detector("PandaX_2017", "PandaX 2017")
register_detector("Xenon1T_2017", "XENON1T 17 ")
register_detector("PICO_2L", "  PICO-2L  ")
register_detector("PICO_60_F", " PICO-60 F ")
register_detector("PICO_60_I", " PICO-60 I ")
register_detector("PICO_60", "  PICO-60  ")
register_detector("PICO_60_2017", "PICO-60 17 ")
register_detector("CRESST_II", " CRESST-II ")
register_detector("Darwin_Ar", "DARWIN Ar  ")
register_detector("Darwin_Xe", "DARWIN Xe  ")
register_detector("DummyExp", " Dummy Exp ", "C_DDCalc_dummyexp_60_init")


# -----------------------------------------------------------------------------
# Engine interface
# -----------------------------------------------------------------------------

class PhysicsEngine(ABC):
    """Operations the explorer consumes from a direct-detection library.

    Units follow DDCalc: masses in GeV, G and f couplings in GeV^-2, a
    couplings unitless, energies in keV, speeds in km/s, density in GeV/cm^3.
    """

    # factories ---------------------------------------------------------------
    @abstractmethod
    def init_halo(self) -> Handle:
        """Create a Standard Halo Model with default parameters."""

    @abstractmethod
    def init_wimp(self) -> Handle:
        """Create a WIMP with default mass and couplings."""

    @abstractmethod
    def init_detector(self, name: str) -> Handle:
        """Create the named experiment (see :data:`DETECTOR_REGISTRY`)."""

    # configuration -----------------------------------------------------------
    @abstractmethod
    def set_emin(self, detector: Handle, emin: float) -> None:
        """Set the minimum recoil energy [keV] included in rate calculations."""

    @abstractmethod
    def set_shm(self, halo: Handle, rho: float, vrot: float, v0: float, vesc: float) -> None:
        """Set density [GeV/cm^3], disk rotation, most probable and escape speeds [km/s]."""

    # WIMP --------------------------------------------------------------------
    @abstractmethod
    def set_wimp_mg(self, wimp: Handle, m: float, GpSI: float, GnSI: float,
                    GpSD: float, GnSD: float) -> None: ...

    @abstractmethod
    def set_wimp_mfa(self, wimp: Handle, m: float, fp: float, fn: float,
                     ap: float, an: float) -> None: ...

    @abstractmethod
    def get_wimp_mg(self, wimp: Handle) -> Couplings: ...

    @abstractmethod
    def get_wimp_mfa(self, wimp: Handle) -> Couplings: ...

    # rates & statistics --------------------------------------------------------
    @abstractmethod
    def calc_rates(self, detector: Handle, wimp: Handle, halo: Handle) -> None: ...

    @abstractmethod
    def events(self, detector: Handle) -> int: ...

    @abstractmethod
    def background(self, detector: Handle) -> float: ...

    @abstractmethod
    def signal(self, detector: Handle) -> float: ...

    @abstractmethod
    def log_likelihood(self, detector: Handle) -> float:
        """Poisson log-likelihood of the current rates (not multiplied by -2)."""

    @abstractmethod
    def scale_to_pvalue(self, detector: Handle) -> float:
        """Factor x such that sigma -> x*sigma gives p = 0.1."""

    # teardown ------------------------------------------------------------------
    @abstractmethod
    def free_all(self) -> None:
        """Release every halo, WIMP and detector held by the library."""
