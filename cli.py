# version 0.4
"""
Command-line interface for the DDCalc WIMP rate explorer.

Parses flags (via `config.parse_args`), creates the halo, WIMP and detector
handles, then loops: read WIMP parameters from stdin, compute rates for every
detector, print the table.  A blank line or end of input ends the loop and all
library objects are freed.
"""
import sys
from typing import Callable, IO, Optional, Sequence

from config import Config, parse_args
from ddcalc import DDCalcEngine
from engine import EngineError, PhysicsEngine
from params import read_wimp_params, write_description
from report import format_report, reports_frame, save_results
from session import Session


def run_loop(session: Session, cfg: Config, stream: IO[str], out: IO[str]) -> int:
    """Process input lines until a blank/short line or end of stream.

    Returns the number of WIMP points evaluated.
    """
    write_description(cfg.mode, out)

    n = 0
    while True:
        params = read_wimp_params(cfg.mode, stream, out)
        if params is None:
            break
        n += 1

        state = session.set_wimp(cfg.mode, params)
        reports = session.evaluate()
        print(format_report(state, reports), file=out)

        if cfg.output is not None:
            save_results(cfg.output, reports_frame(n, cfg.mode, state, reports))

    return n


def main_cli(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
    engine_factory: Optional[Callable[[Config], PhysicsEngine]] = None,
) -> int:
    """Entry point: parse args, set up handles, run the input loop, free everything."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        cfg = parse_args(argv)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if engine_factory is None:
        engine_factory = lambda c: DDCalcEngine(path=c.library)

    try:
        engine = engine_factory(cfg)
    except EngineError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    status = 0
    try:
        session = Session.open(engine, cfg)
        run_loop(session, cfg, stdin, stdout)
    except EngineError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        status = 1
    finally:
        try:
            engine.free_all()
        except EngineError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            status = 1

    return status


if __name__ == "__main__":
    sys.exit(main_cli())
