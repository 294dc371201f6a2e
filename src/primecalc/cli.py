# src/primecalc/cli.py

"""
Prime Calculator - primality check and neighbouring primes

Description:
    Decides whether an unsigned integer (up to 128 bits) is prime, or finds
    the previous / next prime, with either the big-number checker or the
    Sieve of Eratosthenes.

usage: primecalc [-h] [-p] [-n] [--profile NAME] [--init] [--debug] [--version] number [algorithm]
"""

from __future__ import annotations

import argparse
import sys
import textwrap

from colorama import Fore, Style
from colorama import init as colorama_init

from primecalc import __version__ as _ver
from primecalc.config import load_settings
from primecalc.fmt import group_digits, parse_number
from primecalc.oracle import Outcome, PrimeCalc
from primecalc.runtime import APPLY, CFG, ensure_runtime_deps
from primecalc.runtime import debug as _debug
from primecalc.runtime import reset as _rt_reset
from primecalc.solvers import Algorithm
from primecalc.utility import (
    UserInputError,
    configure_text_streams,
    flatten_dotted,
    typename,
)
from primecalc.workspace import ensure_workspace_seeded


# ---- rendering ----

def render_is_prime(n: int, outcome: Outcome) -> str:
    num = group_digits(n)
    if outcome is Outcome.PRIME:
        return f"{num} is a prime"
    if outcome is Outcome.NOT_PRIME:
        return f"{num} is NOT a prime"
    return f"Cannot calculate whether {num} is a prime"


def render_previous_prime(n: int, prime: int | None) -> str:
    if prime is None:
        return f"There is no prime before {group_digits(n)}"
    return f"Previous prime before {group_digits(n)} is: {group_digits(prime)}"


def render_next_prime(n: int, prime: int | None) -> str:
    if prime is None:
        return f"There is no prime calculateable after {group_digits(n)}"
    return f"Next prime after {group_digits(n)} is: {group_digits(prime)}"


def run_query(n: int, solver: PrimeCalc, *, previous: bool = False, next_: bool = False) -> str:
    """Ask the solver once and return the rendered line (previous wins over next)."""
    if previous:
        return render_previous_prime(n, solver.previous_prime(n))
    if next_:
        return render_next_prime(n, solver.next_prime(n))
    return render_is_prime(n, solver.is_prime(n))


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _parse_algorithm(text: str) -> Algorithm:
    try:
        return Algorithm.parse(text)
    except ValueError:
        choices = ", ".join(a.value for a in Algorithm)
        raise argparse.ArgumentTypeError(f"invalid choice: '{text}' (choose from {choices})") from None


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    algorithms:
      big-num
          Default. Trial division for small square roots, fixed-base strong
          probable prime certificate below 3.3e24, indeterminate above.

      eratosthenes
          Odd-only Sieve of Eratosthenes, grown on demand up to SIEVE.MAX_BOUND.

    profiles:
      Settings live in <workspace>/profiles/<name>.toml ($PRIMECALC_HOME or
      ~/Documents/Primecalc). Run with --init to copy the default profile.
    """)

    p = argparse.ArgumentParser(
        prog="primecalc",
        description="Prime Calculator - primality check and neighbouring primes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("number", nargs="?", help="number to check; allows _ and digit grouping as separator")
    p.add_argument("algorithm", nargs="?", type=_parse_algorithm, default=Algorithm.BIG_NUM,
                   help="which algorithm is used: big-num (default) or eratosthenes")
    p.add_argument("-p", "--previous", action="store_true", help="search for the previous prime instead")
    p.add_argument("-n", "--next", action="store_true", help="search for the next prime instead")
    p.add_argument("--profile", default=None, help="settings profile from the workspace (default: 'default')")
    p.add_argument("--init", action="store_true", help="copy the packaged profiles into the workspace and exit")
    p.add_argument("--debug", action="store_true", help="show [debug] traces and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init()
    configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.init:
        ws, _seeded, copied = ensure_workspace_seeded()
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    if args.number is None:
        parser.error("the following arguments are required: number")

    if not ensure_runtime_deps(strict=True):
        return 1

    rt = _rt_reset()
    selected = load_settings(args.profile)
    APPLY(selected)
    if args.debug:
        rt.debug = True

    if rt.debug:
        _debug(f"active profile: {selected.name}")
        if selected._source:
            _debug(f"profile file: {selected._source}")
        for k, v in sorted(flatten_dotted(selected.as_dict()).items(), key=lambda kv: kv[0].lower()):
            _debug(f"  {k:.<40} {CFG(k)!r} ({typename(v)})")

    n = parse_number(args.number)
    solver = args.algorithm.solver()
    _debug(f"n = {n} ({len(str(n))} digits, {n.bit_length()} bits), solver = {solver!r}")

    print(run_query(n, solver, previous=args.previous, next_=args.next))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
