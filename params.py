# version 0.2
"""
WIMP parameter input: mass plus four couplings read from one text line.

Only the mass and the first coupling are required; omitted trailing fields are
filled in by the cascading rule in :func:`parse_wimp_line`.
"""
from dataclasses import dataclass
import re
from typing import IO, List, Optional, Tuple

from constants import PROMPT_RULE, InputMode


@dataclass(frozen=True)
class CouplingSet:
    """Mass [GeV] and proton/neutron SI/SD couplings in either representation."""

    mass: float
    p_si: float
    n_si: float
    p_sd: float
    n_sd: float

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.mass, self.p_si, self.n_si, self.p_sd, self.n_sd)


# Field names and descriptions per input mode
FIELD_NAMES = {
    InputMode.MG: ("M", "GpSI", "GnSI", "GpSD", "GnSD"),
    InputMode.MFA: ("M", "fp", "fn", "ap", "an"),
}

DESCRIPTIONS = {
    InputMode.MG: [
        "  M     WIMP mass [GeV]",
        "  GpSI  Spin-independent WIMP-proton effective coupling [GeV^-2]",
        "  GnSI  Spin-independent WIMP-neutron effective coupling [GeV^-2]",
        "  GpSD  Spin-dependent WIMP-proton effective coupling [GeV^-2]",
        "  GnSD  Spin-dependent WIMP-neutron effective coupling [GeV^-2]",
    ],
    InputMode.MFA: [
        "  M     WIMP mass [GeV]",
        "  fp    Spin-independent WIMP-proton effective coupling [GeV^-2]",
        "  fn    Spin-independent WIMP-neutron effective coupling [GeV^-2]",
        "  ap    Spin-dependent WIMP-proton effective coupling [unitless]",
        "  an    Spin-dependent WIMP-neutron effective coupling [unitless]",
    ],
}


# plain decimal or exponent notation only; float() would also take nan, inf and 1_00
NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _leading_floats(line: str, limit: int = 5) -> List[float]:
    """Return the numeric fields up to the first token that is not a number."""
    values: List[float] = []
    for token in line.split()[:limit]:
        if not NUMBER.match(token):
            break
        values.append(float(token))
    return values


def parse_wimp_line(line: str) -> Optional[CouplingSet]:
    """Turn one input line into a complete :class:`CouplingSet`.

    Fill-in rules for omitted trailing fields::

        M x          -> (M, x, x, 0, 0)
        M x y        -> (M, x, y, 0, 0)
        M x y z      -> (M, x, y, z, z)
        M x y z w    -> (M, x, y, z, w)

    A malformed token counts as the end of the line.  Returns ``None`` when
    fewer than two numbers could be read.
    """
    v = _leading_floats(line)
    if len(v) < 2:
        return None
    if len(v) == 2:
        return CouplingSet(v[0], v[1], v[1], 0.0, 0.0)
    if len(v) == 3:
        return CouplingSet(v[0], v[1], v[2], 0.0, 0.0)
    if len(v) == 4:
        return CouplingSet(v[0], v[1], v[2], v[3], v[3])
    return CouplingSet(*v)


def write_description(mode: InputMode, out: IO[str]) -> None:
    """Describe the expected input fields for ``mode``."""
    print(file=out)
    print("Enter WIMP parameters below.  Only the first two are necessary.", file=out)
    print("A blank line terminates input.  The parameters are:", file=out)
    print(file=out)
    for line in DESCRIPTIONS[mode]:
        print(line, file=out)


def prompt_text(mode: InputMode) -> str:
    return f"Enter values <{' '.join(FIELD_NAMES[mode])}>:"


def read_wimp_params(mode: InputMode, stream: IO[str], out: IO[str]) -> Optional[CouplingSet]:
    """Prompt on ``out``, read one line from ``stream`` and parse it.

    Returns ``None`` at end of stream or when the line does not hold at least
    a mass and one coupling.
    """
    print(file=out)
    print(PROMPT_RULE, file=out)
    print(prompt_text(mode), file=out)
    out.flush()

    try:
        line = stream.readline()
    except UnicodeDecodeError:
        return None
    if not line:
        return None
    return parse_wimp_line(line)
