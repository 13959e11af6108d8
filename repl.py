import argparse
import logging
import sys

from rdcalc import config
from rdcalc.session import EXIT_CALC_ERROR, EXIT_OK, EXIT_UNKNOWN_ERROR, calculate
from rdcalc.source import ChainedStream, CharSource
from rdcalc.tokenizer import TokenKind, TokenStream
from rdcalc.utils import CalcError

logger = logging.getLogger("repl")


def at_least(minimum: int):
    def parse(text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
        if value < minimum:
            raise argparse.ArgumentTypeError(f"must be at least {minimum}, got {value}")
        return value

    return parse


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Floating-point calculator: + - * / % ! () {}, ';' prints, 'q' quits")
    parser.add_argument(
        "files",
        nargs="*",
        type=argparse.FileType("r"),
        help="read statements from these files in turn instead of stdin",
    )
    parser.add_argument(
        "--precision", type=at_least(0), default=config.PRECISION, help="significant digits in results"
    )
    parser.add_argument("--max-depth", type=at_least(1), default=config.MAX_DEPTH, help="deepest allowed nesting")
    parser.add_argument("--prompt", default=config.PROMPT)
    parser.add_argument("--no-banner", action="store_true", help="skip the welcome text")
    parser.add_argument("--tokens", action="store_true", help="print tokens instead of evaluating")
    parser.add_argument(
        "--log-level",
        default=config.LOGGING_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def print_tokens(ts: TokenStream) -> None:
    while True:
        token = ts.get()
        if token.kind is TokenKind.END:
            return
        print(token)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=config.LOGGING_FORMAT)

    if not args.no_banner and not args.tokens:
        print(config.BANNER)

    ts = TokenStream(CharSource(ChainedStream(args.files or [sys.stdin])))
    try:
        if args.tokens:
            print_tokens(ts)
            return EXIT_OK
        session = calculate(
            ts,
            sys.stdout,
            prompt=args.prompt,
            precision=args.precision,
            max_depth=args.max_depth,
        )
    except CalcError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CALC_ERROR
    except Exception:
        logger.debug("Unexpected failure", exc_info=True)
        print("Oops: unknown exception!", file=sys.stderr)
        return EXIT_UNKNOWN_ERROR
    finally:
        for f in args.files:
            f.close()

    if session.error is not None:
        print(f"error: {session.error}", file=sys.stderr)
    return session.exit_status


if __name__ == "__main__":
    sys.exit(main())
