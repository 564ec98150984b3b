"""
Command line front end.

    ccl-frontend program.ccl --tokens --symbols
    ccl-frontend --pattern "(a|b)*abb"
    ccl-frontend --automata IDENTIFIER
    echo "global integer max = 100" | ccl-frontend --symbols

Exit codes: 0 clean run, 1 configuration or pattern error, 2 unreadable
source file, 3 the source produced diagnostics.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import ConfigError, default_config_path, load_config
from .determinize import nfa_to_dfa
from .diagnostics import PatternSyntaxError
from .language import FILE_EXTENSION, TokenKind
from .regex_compiler import compile_pattern, postfix_notation
from .tables import format_dfa, format_diagnostics, format_nfa, format_symbols, format_tokens
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_IO = 2
EXIT_DIAGNOSTICS = 3


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ccl-frontend",
        description="Tokenize CCL source with regex-compiled DFAs and build its symbol table.",
    )
    p.add_argument("source", nargs="?", help="Path to a .ccl source file (default: stdin)")
    p.add_argument("--config", help="Path to a TOML configuration file (default: ./ccl_frontend.toml if present)")
    p.add_argument("--tokens", action="store_true", help="Print the token table")
    p.add_argument("--symbols", action="store_true", help="Print the symbol table after the run")
    p.add_argument("--automata", metavar="KIND", help="Print the DFA registered for a token kind")
    p.add_argument("--pattern", metavar="REGEX", help="Print NFA and DFA tables for an ad-hoc pattern")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def _show_pattern(pattern: str) -> int:
    try:
        nfa = compile_pattern(pattern)
    except PatternSyntaxError as ex:
        print(f"PATTERN ERROR: {ex}", file=sys.stderr)
        return EXIT_CONFIG
    dfa = nfa_to_dfa(nfa)
    print(f"Pattern: {pattern}")
    print(f"Postfix: {postfix_notation(pattern)}")
    print(f"\nNFA ({len(nfa)} states):")
    print(format_nfa(nfa))
    print(f"\nDFA ({len(dfa)} states):")
    print(format_dfa(dfa))
    return EXIT_OK


def _show_automaton(tokenizer: Tokenizer, name: str) -> int:
    try:
        kind = TokenKind[name.upper()]
    except KeyError:
        print(f"Unknown token kind: {name}", file=sys.stderr)
        return EXIT_CONFIG
    dfa = tokenizer.automaton(kind)
    if dfa is None:
        print(f"No pattern registered for {kind.name}", file=sys.stderr)
        return EXIT_CONFIG
    print(f"DFA for {kind.name} ({len(dfa)} states):")
    print(format_dfa(dfa))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_path = args.config if args.config is not None else default_config_path()
    try:
        config = load_config(config_path)
    except (ConfigError, OSError) as ex:
        print(f"CONFIG ERROR: {ex}", file=sys.stderr)
        return EXIT_CONFIG

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.logging_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.pattern is not None:
        return _show_pattern(args.pattern)

    tokenizer = Tokenizer.from_config(config)
    if args.automata is not None:
        return _show_automaton(tokenizer, args.automata)

    try:
        if args.source:
            if not args.source.endswith(FILE_EXTENSION):
                logger.warning("%s does not have the %s extension", args.source, FILE_EXTENSION)
            with open(args.source, "r", encoding="utf-8") as f:
                source = f.read()
        else:
            source = sys.stdin.read()
    except (OSError, UnicodeDecodeError) as ex:
        print(f"IO ERROR: {ex}", file=sys.stderr)
        return EXIT_IO

    tokens, diagnostics = tokenizer.tokenize(source)

    if args.tokens:
        print("Tokens:")
        print(format_tokens(tokens))
        print()
    if args.symbols:
        print("Symbol table:")
        print(format_symbols(tokenizer.symbols))
        print()
    print(format_diagnostics(diagnostics))

    return EXIT_DIAGNOSTICS if diagnostics else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
