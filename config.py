# version 0.5
"""
Configuration for the DDCalc WIMP rate explorer.

Mirrors the flags understood by the DDCalc C++ example program (``--mG``,
``--mfa``, ``--help``) plus pass-through options for the halo and detector
setters.  Unknown tokens are reported and otherwise ignored.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import argparse
import os
import sys

from constants import (
    DEFAULT_DETECTORS,
    DEFAULT_MODE,
    DEFAULT_RHO,
    DEFAULT_V0,
    DEFAULT_VESC,
    DEFAULT_VROT,
    LIBRARY_ENV,
    USAGE,
    InputMode,
)
from engine import available_detectors


@dataclass
class Config:
    """Container for everything selected on the command line."""

    # Input ------------------------------------------------------------------
    mode: InputMode = DEFAULT_MODE

    # Halo (None means leave the library default alone) -----------------------
    rho: Optional[float] = None
    vrot: Optional[float] = None
    v0: Optional[float] = None
    vesc: Optional[float] = None

    # Detectors --------------------------------------------------------------
    detectors: List[str] = field(default_factory=lambda: list(DEFAULT_DETECTORS))
    emin: Optional[float] = None

    # I/O --------------------------------------------------------------------
    output: Optional[Path] = None
    library: Optional[Path] = None

    @property
    def custom_halo(self) -> bool:
        return any(v is not None for v in (self.rho, self.vrot, self.v0, self.vesc))

    def halo_params(self) -> Tuple[float, float, float, float]:
        """Return (rho, vrot, v0, vesc), filling unset entries with SHM defaults."""
        return (
            DEFAULT_RHO if self.rho is None else self.rho,
            DEFAULT_VROT if self.vrot is None else self.vrot,
            DEFAULT_V0 if self.v0 is None else self.v0,
            DEFAULT_VESC if self.vesc is None else self.vesc,
        )

    # -----------------------------------------------------------------------
    # Validation helpers
    # -----------------------------------------------------------------------
    def validate(self) -> None:
        for name in ("rho", "vrot", "v0", "vesc"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.emin is not None and self.emin < 0:
            raise ValueError(f"emin must be non-negative, got {self.emin}")

        if not self.detectors:
            raise ValueError("at least one detector is required")

        known = available_detectors()
        unknown = [d for d in self.detectors if d not in known]
        if unknown:
            raise ValueError(
                f"Unknown detector(s): {', '.join(unknown)}. Available: {', '.join(known)}"
            )


# ----------------------------------------------------------------------------
# CLI argument parsing
# ----------------------------------------------------------------------------

SWITCHES = ("--mG", "--mfa", "--help")


def _detector_list(text: str) -> List[str]:
    return [d.strip() for d in text.split(",") if d.strip()]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("ddcalc_example", add_help=False, allow_abbrev=False)

    # input mode - last flag wins
    p.add_argument("--mG", dest="mode", action="store_const", const=InputMode.MG)
    p.add_argument("--mfa", dest="mode", action="store_const", const=InputMode.MFA)
    p.add_argument("--help", action="store_true")

    # Standard Halo Model overrides
    p.add_argument("--rho", type=float)
    p.add_argument("--vrot", type=float)
    p.add_argument("--v0", type=float)
    p.add_argument("--vesc", type=float)

    # detectors
    p.add_argument("--detectors", type=_detector_list)
    p.add_argument("--emin", type=float)

    # misc
    p.add_argument("--output", type=Path)
    p.add_argument("--ddcalc-lib", dest="library", type=Path)

    p.set_defaults(mode=DEFAULT_MODE)
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> Config:
    """Parse ``argv`` into a validated :class:`Config`.

    ``--help`` prints the usage text and exits with status 0.  Tokens the
    parser does not recognise are reported on stderr and skipped.
    """
    if argv is None:
        argv = sys.argv[1:]

    # switches only count on an exact match; "--mG=yes" and the like are unknown
    rejected = [t for t in argv if t.split("=", 1)[0] in SWITCHES and t not in SWITCHES]
    a, unknown = build_parser().parse_known_args([t for t in argv if t not in rejected])
    unknown = rejected + unknown

    if a.help:
        print(USAGE, end="")
        sys.exit(0)

    for token in unknown:
        print(f"WARNING:  Ignoring unknown argument '{token}'.", file=sys.stderr)

    library = a.library
    if library is None and os.environ.get(LIBRARY_ENV):
        library = Path(os.environ[LIBRARY_ENV])

    cfg = Config(
        mode=a.mode,
        rho=a.rho,
        vrot=a.vrot,
        v0=a.v0,
        vesc=a.vesc,
        emin=a.emin,
        output=a.output,
        library=library,
    )
    if a.detectors is not None:
        cfg.detectors = a.detectors

    cfg.validate()
    return cfg


if __name__ == "__main__":  # simple smoke
    print(parse_args())
