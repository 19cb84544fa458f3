from typing import Optional

from framecheck.checkers.framing import FramingHeaders, analyze
from framecheck.core.config import Config
from framecheck.core.fetcher import FetchError, HeaderFetcher
from framecheck.core.models import TestSession, TestVerdict
from framecheck.core.probe import NOT_RENDERED, FrameProbe
from framecheck.core.verdict import snapshot_headers, synthesize


class Engine:
    """
    Runs one clickjacking test at a time: fetch headers, analyze them,
    probe the live frame, synthesize the verdict.

    ``session`` always holds the latest TestSession; it is replaced, never
    patched, and a run that was superseded by a newer one (or by
    ``reset()``) does not get to write it.
    """

    def __init__(self, fetcher: HeaderFetcher, probe: FrameProbe,
                 config: Optional[Config] = None, logger=None,
                 checker: Optional[FramingHeaders] = None):
        self.name = "framecheck"
        self.version = "1.0.0"
        self.config = config or Config()
        self.fetcher = fetcher
        self.probe = probe
        self.logger = logger
        self.checker = checker or FramingHeaders()
        self.session = TestSession()

    def reset(self) -> TestSession:
        """Drop the current test; late results from it are discarded."""
        generation = self.probe.reset()
        self.session = TestSession(generation=generation)
        return self.session

    async def run(self, url: str) -> TestVerdict:
        generation = self.reset().generation
        self.session = TestSession(generation=generation, target_url=url,
                                   loading=True)
        if self.logger:
            self.logger.info(f"Testing {self.checker.name} on {url}")
            for rule in self.checker.get_rules():
                self.logger.debug(f"Rule {rule.protection}: {rule.header} "
                                  f"~ /{rule.pattern.pattern}/i")

        # Headers first; the probe only starts once they are in.
        try:
            fetched = await self.fetcher.fetch(url)
        except FetchError as exc:
            if self.logger:
                self.logger.fail(f"Header fetch failed: {exc.message}")
            verdict = synthesize(analyze({}), None, url)
            return self._commit(generation, verdict, error=exc.message)

        protection = self.checker.check(fetched.headers)
        if self.logger:
            self.logger.debug(f"IP {fetched.ip}, missing: "
                              f"{', '.join(protection.missing) or 'none'}")

        if self.probe.is_current(generation):
            outcome = await self.probe.probe(url, self.config.timeout_ms,
                                             generation=generation)
        else:
            # Superseded while fetching; the frame slot belongs to the newer run.
            outcome = NOT_RENDERED
        if self.logger:
            self.logger.debug(f"Probe: rendered={outcome.rendered} "
                              f"interactive={outcome.interactive} "
                              f"timed_out={outcome.timed_out}")

        verdict = synthesize(protection, outcome, url, fetched.ip,
                             raw_headers=snapshot_headers(fetched.headers))
        return self._commit(generation, verdict)

    def _commit(self, generation: int, verdict: TestVerdict,
                error: Optional[str] = None) -> TestVerdict:
        if self.probe.is_current(generation):
            self.session = TestSession(
                generation=generation, target_url=verdict.target_url,
                loading=False, verdict=verdict, error=error)
        elif self.logger:
            self.logger.debug(
                f"Discarding stale result for {verdict.target_url} "
                f"(generation {generation})")
        return verdict
