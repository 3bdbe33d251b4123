# version 0.2
"""
Formatting of per-point results and the optional CSV results log.

The text layout follows the printf formats of the DDCalc C++ example
program so output can be compared line by line.
"""
from pathlib import Path
import sys
from typing import List, Sequence

import pandas as pd

from constants import InputMode
from session import DetectorReport, WimpState

FOOTNOTE = (" * This is the factor by which the cross section must be rescaled "
            "to give the desired p-value")


def _g(x: float, width: int = 11) -> str:
    """C ``%- #<width>.5g``: left-aligned, blank for sign, trailing zeros kept."""
    return "%- #*.5g" % (width, x)


def format_wimp_block(state: WimpState) -> List[str]:
    """Mass plus the couplings in both representations."""
    lines = ["%s %s" % ("WIMP mass [GeV]     ", _g(state.mass, 12)), ""]
    lines.append("%-28s %11s %11s %11s %11s" % (
        "WIMP-nucleon couplings", " proton-SI ", " neutron-SI", " proton-SD ", " neutron-SD"))
    lines.append("%-28s %s" % ("  G [GeV^-2]", " ".join(_g(x) for x in state.mG[1:])))
    lines.append("%-28s %s" % ("  f & a [GeV^-2,unitless]", " ".join(_g(x) for x in state.mfa[1:])))
    lines.append("")
    return lines


def format_detector_table(reports: Sequence[DetectorReport]) -> List[str]:
    """One column per detector, one row per metric, then the rescaling footnote."""
    header = "%-20s" % "" + "".join("  %11s" % r.label for r in reports)

    def row(title: str, cells: List[str]) -> str:
        return "%-20s  " % title + "".join(cells)

    lines = [
        header,
        row("Observed events     ", ["% 6i       " % r.events for r in reports]),
        row("Expected background ", [_g(r.background) + "  " for r in reports]),
        row("Expected signal     ", [_g(r.signal) + "  " for r in reports]),
        row("Log-likelihood      ", [_g(r.log_likelihood) + "  " for r in reports]),
        row("Rescaling for 90% CL", [_g(r.scale_to_pvalue) + "  " for r in reports]),
        FOOTNOTE,
    ]
    return lines


def format_report(state: WimpState, reports: Sequence[DetectorReport]) -> str:
    return "\n".join([""] + format_wimp_block(state) + format_detector_table(reports))


# -----------------------------------------------------------------------------
# Results log
# -----------------------------------------------------------------------------

def reports_frame(point: int, mode: InputMode, state: WimpState,
                  reports: Sequence[DetectorReport]) -> pd.DataFrame:
    """Return one row per detector for the WIMP point numbered ``point``."""
    m, GpSI, GnSI, GpSD, GnSD = state.mG
    _, fp, fn, ap, an = state.mfa
    rows = []
    for r in reports:
        rows.append({
            "point": point,
            "mass": m,
            "mode": mode.name,
            "GpSI": GpSI, "GnSI": GnSI, "GpSD": GpSD, "GnSD": GnSD,
            "fp": fp, "fn": fn, "ap": ap, "an": an,
            "detector": r.name,
            "events": r.events,
            "background": r.background,
            "signal": r.signal,
            "logL": r.log_likelihood,
            "scale_90CL": r.scale_to_pvalue,
        })
    return pd.DataFrame(rows)


def save_results(path: Path, frame: pd.DataFrame) -> None:
    """Append ``frame`` to the CSV at ``path``, creating it if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists():
        try:
            existing = pd.read_csv(path)
            combined = pd.concat([existing, frame], ignore_index=True)
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            print(f"Warning: Could not read existing results in {path}: {e}", file=sys.stderr)
            combined = frame
    else:
        combined = frame

    combined.to_csv(path, index=False)
