# src/limbnum/cli.py

"""
limbnum - arbitrary-precision unsigned arithmetic from the command line

Description:
    Evaluates unsigned integer expressions with the limbnum engine, runs the
    message-encoding demo, and benchmarks the two multiplication strategies
    so the crossover can be re-tuned per machine.

usage: see limbnum -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import textwrap
import threading
import time
import traceback
from importlib.resources import files as pkg_files
from typing import NamedTuple

from colorama import Fore, Style
from colorama import init as colorama_init

from limbnum import __version__ as _ver
from limbnum import config as CONFIG
from limbnum.bench import run_bench, suggest_crossover
from limbnum.demo import DemoConfig, make_rng, read_demo_input, run_demo
from limbnum.expreval import evaluate, try_evaluate
from limbnum.fmt import render_result
from limbnum.multiply import DEFAULT_CROSSOVER_FACTOR
from limbnum.output_manager import OutputManager
from limbnum.runtime import APPLY, CFG, ensure_runtime_deps
from limbnum.runtime import current as _rt_current
from limbnum.utility import (
    UserInputError,
    clear_screen,
    flatten_dotted,
    get_terminal_height,
    get_terminal_width,
    typename,
    validate_output_setting,
)
from limbnum.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("encode", "bench", "profiles", "where", "init")
DEFAULT_BENCH_SIZES = "4,16,64,256,1024"


# In memory session history
class HistoryItem(NamedTuple):
    expr: str
    digits: int
    profile: str | None
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(expr: str, digits: int, profile: str | None = None) -> None:
    _HISTORY.append(HistoryItem(expr=expr, digits=digits, profile=profile, timestamp=time.time()))


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    # Always show full Python tracebacks
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _print_warning(msg: str) -> None:
    print(f"{Fore.YELLOW}Warning:{Style.RESET_ALL} {msg}", file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent(f"""\
    commands:
      EXPR
          Evaluate an unsigned integer expression, e.g. "2**521 - 1" or
          "pow(7, 10**20, 10**9+7)". Operators: + - * // % ** and gcd(a, b).

      encode [MESSAGE] [--prime P --generator G --key K] [--seed S]
          Encode MESSAGE as (g^b mod p, key^b * digit mod p) pairs. Without
          --prime/--generator/--key, reads "P G K" and the message from stdin.

      bench [--sizes {DEFAULT_BENCH_SIZES}] [--repeat N] [--seed S]
          Time schoolbook vs transform multiplication, cross-check with gmpy2
          and suggest a MULTIPLICATION.CROSSOVER_FACTOR for this machine.

      profiles
          List available profiles.

      where
          Show the workspace and package paths.

      init [overwrite]
          Copy packaged profiles into the workspace (overwrite needs LIMBNUM_DEV=1).
    """)

    p = argparse.ArgumentParser(
        prog="limbnum",
        description="limbnum — arbitrary-precision unsigned integer arithmetic",
        usage=(
            "limbnum [EXPR | command ...] [--profile NAME] [--output FILE] [--quiet] [--no-details] [--debug]\n"
            "       limbnum -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="EXPR|command",
                   help="expression to evaluate, or one of: " + ", ".join(COMMANDS))
    p.add_argument("--profile", default=None, help="Profile to apply (default: last used, else 'default')")
    p.add_argument("--output", default=None, help="Append results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Suppress screen output and progress bars")
    p.add_argument("--no-details", action="store_true", help="Print bare results only")
    p.add_argument("--debug", action="store_true", help="Show dispatcher choices and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    demo = p.add_argument_group("encode")
    demo.add_argument("--prime", type=int, default=None, help="Modulus p (>= 5, should be prime)")
    demo.add_argument("--generator", type=int, default=None, help="Generator g")
    demo.add_argument("--key", type=int, default=None, help="Public key value")
    demo.add_argument("--seed", type=int, default=None, help="Seed for random exponents / operands")

    bench = p.add_argument_group("bench")
    bench.add_argument("--sizes", default=DEFAULT_BENCH_SIZES, help="Comma-separated operand sizes in limbs")
    bench.add_argument("--repeat", type=int, default=3, help="Timing repetitions per size (best is kept)")

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


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, *, debug: bool) -> None:
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if not debug:
        return
    print(f"[debug] active profile: {selected.name}", file=sys.stderr)
    if selected._source:
        print(f"[debug] profile file: {selected._source}", file=sys.stderr)
    flat = flatten_dotted(selected.as_dict())
    for k in sorted(flat.keys(), key=str.lower):
        v = CFG(k, None)
        print(f"        {k:.<50} {v!r} ({typename(v)})", file=sys.stderr)
    print(file=sys.stderr)


# ---- commands ----

def _cmd_eval(expr: str, om: OutputManager, *, show_details: bool) -> None:
    value = evaluate(expr)
    for line in render_result(expr, value, show_details=show_details):
        om.write(line)
    add_to_history(expr, len(str(value)), _rt_current().profile_name)


def _cmd_encode(args, om: OutputManager) -> None:
    flags = (args.prime, args.generator, args.key)
    message_args = args.items[1:]
    if all(f is None for f in flags):
        cfg, message = read_demo_input(sys.stdin)
        if message_args:
            raise UserInputError("give the message either on the command line or on stdin, not both")
    elif any(f is None for f in flags):
        raise UserInputError("--prime, --generator and --key must be given together")
    else:
        cfg = DemoConfig(prime=args.prime, generator=args.generator, key=args.key)
        message = " ".join(message_args) if message_args else sys.stdin.readline().rstrip("\r\n")

    if not cfg.prime_is_prime:
        _print_warning(f"{cfg.prime} is not prime; the pairs cannot be decoded reliably.")

    run_demo(cfg, message, rng=make_rng(args.seed), out=om.write)


def _cmd_bench(args, om: OutputManager, *, show_details: bool) -> None:
    try:
        sizes = [int(s) for s in args.sizes.split(",") if s.strip()]
    except ValueError:
        raise UserInputError(f"--sizes must be comma-separated integers, got {args.sizes!r}") from None
    if not sizes or any(s < 1 for s in sizes):
        raise UserInputError("--sizes must list positive limb counts")

    rows = run_bench(sizes, repeat=args.repeat, seed=args.seed, progress=not args.quiet)

    om.write(f"{Fore.CYAN}{Style.BRIGHT}{'limbs':>8} {'schoolbook':>12} {'transform':>12} "
             f"{'gmpy2':>10} {'faster':>11} {'chosen':>11} {'ok':>4}{Style.RESET_ALL}")
    for r in rows:
        ok = f"{Fore.GREEN}yes{Style.RESET_ALL}" if r.agree else f"{Fore.RED}NO{Style.RESET_ALL}"
        om.write(f"{r.limbs:>8} {r.schoolbook_s:>11.5f}s {r.transform_s:>11.5f}s "
                 f"{r.reference_s:>9.6f}s {r.faster:>11} {r.chosen:>11} {ok:>4}")

    if not all(r.agree for r in rows):
        raise UserInputError("multiplication strategies disagree; transform precision exceeded?")

    if show_details:
        current = CFG("MULTIPLICATION.CROSSOVER_FACTOR", DEFAULT_CROSSOVER_FACTOR)
        suggested = suggest_crossover(rows)
        om.write(f"Current CROSSOVER_FACTOR: {current}")
        if suggested is None:
            om.write("Schoolbook was faster at every size; try larger --sizes.")
        else:
            om.write(f"Suggested CROSSOVER_FACTOR: {Fore.YELLOW}{suggested:.2f}{Style.RESET_ALL}")


def _cmd_profiles(om: OutputManager) -> None:
    active = _rt_current().profile_name
    for name, desc in CONFIG.list_profiles_with_descriptions():
        mark = f"{Fore.GREEN}*{Style.RESET_ALL}" if name == active else " "
        om.write(f"{mark} {name:<16} {desc}")


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_intermixed_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return 1

    ensure_workspace_seeded()

    profile_name = _select_profile_name(args.profile)
    if args.profile and not CONFIG.has_profile(args.profile):
        print(f"Unknown profile: '{args.profile}'", file=sys.stderr)
        print("Available profiles:", ", ".join(n for n, _ in CONFIG.list_profiles_with_descriptions()),
              file=sys.stderr)
        return 2
    _apply_profile(profile_name, debug=args.debug)
    if args.debug:
        rt.debug = True

    try:
        cli_output = validate_output_setting(args.output)
    except ValueError as e:
        print(f"Fatal error in --output: {e}", file=sys.stderr)
        return 1

    def make_output_manager() -> OutputManager:
        # read OUTPUT_FILE from runtime each time so profile switches take effect
        target = cli_output if cli_output else (CFG("OUTPUT.OUTPUT_FILE", None) or None)
        return OutputManager(output_file=target, quiet=args.quiet)

    command = args.items[0] if args.items else None

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('limbnum')}")
        print(f"Terminal {get_terminal_width()}x{get_terminal_height()}")
        return 0

    if command == "init":
        if args.items[1:] == ["overwrite"]:
            if os.environ.get("LIMBNUM_DEV") != "1":
                print("Refusing to overwrite: set LIMBNUM_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
        else:
            ws, _, copied = ensure_workspace_seeded()
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    if command in ("encode", "bench", "profiles"):
        om = make_output_manager()
        try:
            if command == "encode":
                _cmd_encode(args, om)
            elif command == "bench":
                _cmd_bench(args, om, show_details=not args.no_details)
            else:
                _cmd_profiles(om)
        finally:
            om.close()
        return 0

    # --- one-shot expression ---
    if args.items:
        om = make_output_manager()
        try:
            _cmd_eval(" ".join(args.items), om, show_details=not args.no_details)
        finally:
            om.close()
        return 0

    return _repl(profile_name, make_output_manager, show_details=not args.no_details)


def _repl(profile_name: str, make_output_manager, *, show_details: bool) -> int:
    if not _rt_current().debug:
        clear_screen()
    print(f"{Fore.YELLOW}{Style.BRIGHT}limbnum v{_ver} — arbitrary-precision unsigned arithmetic{Style.RESET_ALL}")

    current_profile = profile_name
    while True:
        try:
            prompt = f"\nProfile: {current_profile} — Enter an expression, command or profile (h=Help, q=Quit): "
            user_input = input(prompt).strip()

            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break

            if low in {"h", "help"}:
                print(_build_parser().epilog)
                print("REPL only: hist, debug [on|off|status], p (list profiles), <profile name>")
                continue

            if low in {"p", "profiles"}:
                om = OutputManager(output_file=None)
                _cmd_profiles(om)
                continue

            if low in {"hist", "history"}:
                hist = get_history()
                if not hist:
                    print("History is empty.")
                    continue
                for item in hist:
                    ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
                    print(f"{ts}  digits={item.digits:<8}  profile={item.profile or '-'}  {item.expr}")
                continue

            if low.startswith("debug"):
                parts = low.split()
                rt = _rt_current()
                if len(parts) == 1 or parts[1] == "status":
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif parts[1] == "on":
                    rt.debug = True
                    print("Debug mode enabled for this session.")
                elif parts[1] == "off":
                    rt.debug = False
                    print("Debug mode disabled for this session.")
                else:
                    print("Usage: DEBUG [on|off|status]")
                continue

            # profile switch?
            if CONFIG.has_profile(user_input):
                _apply_profile(user_input, debug=_rt_current().debug)
                CONFIG.write_current_profile(user_input)
                current_profile = user_input
                print(f"Applied profile: {current_profile}")
                continue

            # expression?
            value = try_evaluate(user_input)
            if value is None:
                print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
                continue

            om = make_output_manager()
            try:
                for line in render_result(user_input, value, show_details=show_details):
                    om.write(line)
                add_to_history(user_input, len(str(value)), current_profile)
            finally:
                om.close()

        except UserInputError as e:
            _print_user_error(str(e))
        except (EOFError, KeyboardInterrupt):
            print()
            break
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
