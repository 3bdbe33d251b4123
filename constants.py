# version 0.3
"""
Shared constants for the DDCalc WIMP rate explorer.
"""
from enum import Enum


class InputMode(Enum):
    """Form in which the WIMP-nucleon couplings are entered."""

    MG = 1   # four-fermion effective couplings G
    MFA = 2  # effective couplings f (SI), a (SD)


DEFAULT_MODE = InputMode.MFA

# Standard Halo Model defaults
DEFAULT_RHO = 0.4     # GeV/cm^3
DEFAULT_VROT = 235.0  # km/s
DEFAULT_V0 = 235.0    # km/s
DEFAULT_VESC = 550.0  # km/s

DEFAULT_DETECTORS = ("XENON100_2012", "LUX_2013", "SuperCDMS_2014", "SIMPLE_2014")

LIBRARY_ENV = "DDCALC_LIBRARY"
LIBRARY_NAME = "libDDCalc"

PROMPT_RULE = "-" * 60

USAGE = """\
Usage:
  ./ddcalc_example [--mG|--mfa]
where the optional flag specifies the form in which the WIMP-
nucleon couplings will be provided (default: --mfa).

Further options:
  --rho=<x>         Local dark matter density [GeV/cm^3] (default 0.4)
  --vrot=<x>        Local disk rotation speed [km/s] (default 235)
  --v0=<x>          Most probable speed [km/s] (default 235)
  --vesc=<x>        Galactic escape speed [km/s] (default 550)
  --emin=<x>        Minimum recoil energy for every detector [keV]
  --detectors=<a,b> Comma-separated experiments to evaluate
  --output=<file>   Append each report to a CSV results log
  --ddcalc-lib=<p>  Path to the DDCalc shared library
"""
