# version 0.3
"""
ctypes binding to the DDCalc shared library.

DDCalc is written in Fortran and exports a C interface through ``BIND(C)``
wrappers.  Those wrappers take every argument by reference (no ``VALUE``
attribute), so scalars are passed with :func:`ctypes.byref` and results of the
``GetWIMP`` routines come back through ``c_double`` buffers.

The library keeps halos, WIMPs and detectors in internal caches and hands out
1-based integer indices.  Passing an index it never issued makes the Fortran
side ``STOP`` the whole process, so indices are checked here first.
"""

import ctypes
from pathlib import Path
from typing import Callable, Dict, Optional, Set, Union

import numpy as np

from constants import LIBRARY_NAME
from engine import Couplings, EngineError, Handle, PhysicsEngine, get_detector

c_int_p = ctypes.POINTER(ctypes.c_int)
c_double_p = ctypes.POINTER(ctypes.c_double)

# symbol -> (restype, argtypes)
SIGNATURES: Dict[str, tuple] = {
    "C_DDHalo_ddcalc_inithalo": (ctypes.c_int, []),
    "C_DDWIMP_ddcalc_initwimp": (ctypes.c_int, []),
    "C_DDHalo_ddcalc_setshm": (None, [c_int_p] + [c_double_p] * 4),
    "C_DDDetectors_ddcalc_setemin": (None, [c_int_p, c_double_p]),
    "C_DDWIMP_ddcalc_setwimp_mg": (None, [c_int_p] + [c_double_p] * 5),
    "C_DDWIMP_ddcalc_setwimp_mfa": (None, [c_int_p] + [c_double_p] * 5),
    "C_DDWIMP_ddcalc_getwimp_mg": (None, [c_int_p] + [c_double_p] * 5),
    "C_DDWIMP_ddcalc_getwimp_mfa": (None, [c_int_p] + [c_double_p] * 5),
    "C_DDRates_ddcalc_calcrates": (None, [c_int_p] * 3),
    "C_DDRates_ddcalc_events": (ctypes.c_int, [c_int_p]),
    "C_DDRates_ddcalc_background": (ctypes.c_double, [c_int_p]),
    "C_DDRates_ddcalc_signal": (ctypes.c_double, [c_int_p]),
    "C_DDStats_ddcalc_loglikelihood": (ctypes.c_double, [c_int_p]),
    "C_DDStats_ddcalc_scaletopvalue": (ctypes.c_double, [c_int_p]),
    "C_DDUtils_ddcalc_freeall": (None, []),
}


def load_ddcalc(path: Optional[Union[str, Path]] = None) -> ctypes.CDLL:
    """
    Load the DDCalc shared library.

    Args:
        path: Library file, or a directory holding ``libDDCalc``.  Defaults to
              ``./lib`` which is where a DDCalc build puts it.

    Raises:
        EngineError: If the library cannot be loaded.
    """
    if path is None:
        name, where = LIBRARY_NAME, Path.cwd() / "lib"
    else:
        path = Path(path)
        if path.is_dir():
            name, where = LIBRARY_NAME, path
        else:
            name, where = path.name, path.parent

    try:
        return np.ctypeslib.load_library(name, str(where))
    except OSError as e:
        raise EngineError(f"Could not load DDCalc from {where / name}: {e}")


def _ref_int(value: int) -> ctypes.c_int:
    return ctypes.c_int(int(value))


def _ref_double(value: float) -> ctypes.c_double:
    return ctypes.c_double(float(value))


class DDCalcEngine(PhysicsEngine):
    """:class:`PhysicsEngine` backed by the real DDCalc library."""

    def __init__(self, lib: Optional[ctypes.CDLL] = None, path: Optional[Union[str, Path]] = None):
        self.lib = lib if lib is not None else load_ddcalc(path)
        self._fns: Dict[str, Callable] = {}
        self.halos: Set[Handle] = set()
        self.wimps: Set[Handle] = set()
        self.detectors: Dict[Handle, str] = {}

    # -----------------------------------------------------------------------
    # Low-level helpers
    # -----------------------------------------------------------------------

    def _fn(self, symbol: str, restype=None, argtypes=None) -> Callable:
        """Resolve ``symbol`` once and attach its ctypes signature."""
        if symbol in self._fns:
            return self._fns[symbol]
        try:
            fn = getattr(self.lib, symbol)
        except AttributeError:
            raise EngineError(f"DDCalc library does not export '{symbol}'")
        if restype is None and argtypes is None and symbol in SIGNATURES:
            restype, argtypes = SIGNATURES[symbol]
        fn.restype = restype
        fn.argtypes = argtypes or []
        self._fns[symbol] = fn
        return fn

    def _call(self, symbol: str, *args):
        return self._fn(symbol)(*[ctypes.byref(a) for a in args])

    @staticmethod
    def _check(handle: Handle, known, kind: str) -> None:
        if handle not in known:
            raise EngineError(f"Invalid {kind} index {handle}")

    # -----------------------------------------------------------------------
    # Factories
    # -----------------------------------------------------------------------

    def init_halo(self) -> Handle:
        h = int(self._fn("C_DDHalo_ddcalc_inithalo")())
        self.halos.add(h)
        return h

    def init_wimp(self) -> Handle:
        h = int(self._fn("C_DDWIMP_ddcalc_initwimp")())
        self.wimps.add(h)
        return h

    def init_detector(self, name: str) -> Handle:
        try:
            spec = get_detector(name)
        except ValueError as e:
            raise EngineError(str(e))
        h = int(self._fn(spec.symbol, ctypes.c_int, [])())
        self.detectors[h] = name
        return h

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    def set_emin(self, detector: Handle, emin: float) -> None:
        self._check(detector, self.detectors, "detector")
        self._call("C_DDDetectors_ddcalc_setemin", _ref_int(detector), _ref_double(emin))

    def set_shm(self, halo: Handle, rho: float, vrot: float, v0: float, vesc: float) -> None:
        self._check(halo, self.halos, "halo")
        self._call("C_DDHalo_ddcalc_setshm", _ref_int(halo),
                   *[_ref_double(x) for x in (rho, vrot, v0, vesc)])

    # -----------------------------------------------------------------------
    # WIMP
    # -----------------------------------------------------------------------

    def _set_wimp(self, symbol: str, wimp: Handle, values) -> None:
        self._check(wimp, self.wimps, "WIMP")
        self._call(symbol, _ref_int(wimp), *[_ref_double(x) for x in values])

    def _get_wimp(self, symbol: str, wimp: Handle) -> Couplings:
        self._check(wimp, self.wimps, "WIMP")
        out = [ctypes.c_double() for _ in range(5)]
        self._call(symbol, _ref_int(wimp), *out)
        return tuple(x.value for x in out)

    def set_wimp_mg(self, wimp, m, GpSI, GnSI, GpSD, GnSD) -> None:
        self._set_wimp("C_DDWIMP_ddcalc_setwimp_mg", wimp, (m, GpSI, GnSI, GpSD, GnSD))

    def set_wimp_mfa(self, wimp, m, fp, fn, ap, an) -> None:
        self._set_wimp("C_DDWIMP_ddcalc_setwimp_mfa", wimp, (m, fp, fn, ap, an))

    def get_wimp_mg(self, wimp) -> Couplings:
        return self._get_wimp("C_DDWIMP_ddcalc_getwimp_mg", wimp)

    def get_wimp_mfa(self, wimp) -> Couplings:
        return self._get_wimp("C_DDWIMP_ddcalc_getwimp_mfa", wimp)

    # -----------------------------------------------------------------------
    # Rates & statistics
    # -----------------------------------------------------------------------

    def calc_rates(self, detector: Handle, wimp: Handle, halo: Handle) -> None:
        self._check(detector, self.detectors, "detector")
        self._check(wimp, self.wimps, "WIMP")
        self._check(halo, self.halos, "halo")
        self._call("C_DDRates_ddcalc_calcrates",
                   _ref_int(detector), _ref_int(wimp), _ref_int(halo))

    def _detector_query(self, symbol: str, detector: Handle):
        self._check(detector, self.detectors, "detector")
        return self._call(symbol, _ref_int(detector))

    def events(self, detector: Handle) -> int:
        return int(self._detector_query("C_DDRates_ddcalc_events", detector))

    def background(self, detector: Handle) -> float:
        return float(self._detector_query("C_DDRates_ddcalc_background", detector))

    def signal(self, detector: Handle) -> float:
        return float(self._detector_query("C_DDRates_ddcalc_signal", detector))

    def log_likelihood(self, detector: Handle) -> float:
        return float(self._detector_query("C_DDStats_ddcalc_loglikelihood", detector))

    def scale_to_pvalue(self, detector: Handle) -> float:
        return float(self._detector_query("C_DDStats_ddcalc_scaletopvalue", detector))

    # -----------------------------------------------------------------------
    # Teardown
    # -----------------------------------------------------------------------

    def free_all(self) -> None:
        self._fn("C_DDUtils_ddcalc_freeall")()
        self.halos.clear()
        self.wimps.clear()
        self.detectors.clear()
