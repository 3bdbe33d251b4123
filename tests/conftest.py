# version 0.1
"""
Shared fixtures: an in-memory stand-in for the DDCalc library.
"""

import math
import os
import sys

import pytest
from scipy.constants import physical_constants

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine import EngineError, PhysicsEngine, get_detector

G_FERMI = physical_constants["Fermi coupling constant"][0]  # GeV^-2
SD_FACTOR = 2 * math.sqrt(2) * G_FERMI


class FakeEngine(PhysicsEngine):
    """Records every call; converts couplings with GpSI = 2 fp, GpSD = 2√2 G_F ap."""

    def __init__(self, fail_on: str = None):
        self.calls = []
        self.fail_on = fail_on
        self.next_handle = 1
        self.wimps = {}
        self.kinds = {}
        self.rates = {}
        self.freed = 0

    def _log(self, name, *args):
        self.calls.append((name,) + args)
        if name == self.fail_on:
            raise EngineError(f"{name} failed")

    def _new(self, kind):
        h = self.next_handle
        self.next_handle += 1
        self.kinds[h] = kind
        return h

    def init_halo(self):
        self._log("init_halo")
        return self._new("halo")

    def init_wimp(self):
        self._log("init_wimp")
        h = self._new("wimp")
        self.wimps[h] = (100.0, 0.0, 0.0, 0.0, 0.0)
        return h

    def init_detector(self, name):
        self._log("init_detector", name)
        get_detector(name)
        return self._new(name)

    def set_emin(self, detector, emin):
        self._log("set_emin", detector, emin)

    def set_shm(self, halo, rho, vrot, v0, vesc):
        self._log("set_shm", halo, rho, vrot, v0, vesc)

    def set_wimp_mfa(self, wimp, m, fp, fn, ap, an):
        self._log("set_wimp_mfa", wimp, m, fp, fn, ap, an)
        self.wimps[wimp] = (m, fp, fn, ap, an)

    def set_wimp_mg(self, wimp, m, GpSI, GnSI, GpSD, GnSD):
        self._log("set_wimp_mg", wimp, m, GpSI, GnSI, GpSD, GnSD)
        self.wimps[wimp] = (m, GpSI / 2, GnSI / 2, GpSD / SD_FACTOR, GnSD / SD_FACTOR)

    def get_wimp_mfa(self, wimp):
        self._log("get_wimp_mfa", wimp)
        return self.wimps[wimp]

    def get_wimp_mg(self, wimp):
        self._log("get_wimp_mg", wimp)
        m, fp, fn, ap, an = self.wimps[wimp]
        return (m, 2 * fp, 2 * fn, SD_FACTOR * ap, SD_FACTOR * an)

    def calc_rates(self, detector, wimp, halo):
        self._log("calc_rates", detector, wimp, halo)
        m, fp, fn, ap, an = self.wimps[wimp]
        self.rates[detector] = 1e16 * (abs(fp) + abs(fn)) + 10 * (abs(ap) + abs(an))

    def events(self, detector):
        return detector

    def background(self, detector):
        return 0.5 * detector

    def signal(self, detector):
        return self.rates[detector]

    def log_likelihood(self, detector):
        mu = self.background(detector) + self.signal(detector)
        n = self.events(detector)
        return n * math.log(mu) - mu - math.lgamma(n + 1)

    def scale_to_pvalue(self, detector):
        s = self.signal(detector)
        return 2.3 / s if s > 0 else sys.float_info.max

    def free_all(self):
        self._log("free_all")
        self.freed += 1

    def names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def engine():
    return FakeEngine()
