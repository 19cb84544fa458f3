import argparse
import asyncio
import sys

from playwright.async_api import Error as PlaywrightError

from framecheck.core.browser import PlaywrightFrameHost
from framecheck.core.config import Config, DEFAULT_TIMEOUT_MS
from framecheck.core.engine import Engine
from framecheck.core.fetcher import HeaderFetcher, RemoteHeaderFetcher
from framecheck.core.probe import FrameProbe
from framecheck.parsers.target import normalize_target
from framecheck.reporters.console import Log
from framecheck.reporters.pdf import PdfSink, render


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Clickjacking Test")
    p.add_argument("--url", required=True, help="Target (ej: example.com)")
    p.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_MS,
                   help="Frame load budget in ms (default: 3000)")
    p.add_argument("--proxy", help="Proxy (ej: http://127.0.0.1:8080)")
    p.add_argument("--user-agent", help="User-Agent for fetch and browser")
    p.add_argument("--header-service",
                   help="check-headers endpoint to use instead of a direct fetch")
    p.add_argument("--pdf", metavar="PATH", help="Export the report as PDF")
    p.add_argument("--watermark", metavar="PNG", help="Watermark image for the PDF")
    p.add_argument("--headed", action="store_true", help="Show the browser window")
    p.add_argument("-v", "--verbose", action="count", default=1,
                   help="-v, -vv")
    return p


def config_from_args(args) -> Config:
    kwargs = dict(timeout_ms=args.timeout, proxy=args.proxy,
                  header_service=args.header_service,
                  headless=not args.headed, watermark=args.watermark)
    if args.user_agent:
        kwargs["user_agent"] = args.user_agent
    return Config(**kwargs)


def exit_code(verdict) -> int:
    if verdict.is_vulnerable is None:
        return 2
    return 1 if verdict.is_vulnerable else 0


async def run(url: str, config: Config, log: Log):
    if config.header_service:
        fetcher = RemoteHeaderFetcher(config.header_service, config, logger=log)
    else:
        fetcher = HeaderFetcher(config, logger=log)

    async with fetcher, PlaywrightFrameHost(config) as host:
        engine = Engine(fetcher, FrameProbe(host, logger=log), config, logger=log)
        return await engine.run(url)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        url = normalize_target(args.url)
    except ValueError as exc:
        parser.error(str(exc))

    config = config_from_args(args)
    log = Log(verbose=args.verbose)
    try:
        verdict = asyncio.run(run(url, config, log))
    except PlaywrightError as exc:
        log.fail(f"Browser unavailable: {exc}")
        sys.exit(2)
    log.verdict(verdict)

    if args.pdf:
        doc = render(verdict, brand=config.brand, watermark=config.watermark)
        PdfSink().write(doc, args.pdf)
        log.ok(f"Report written to {args.pdf}")

    sys.exit(exit_code(verdict))


if __name__ == "__main__":
    main()
