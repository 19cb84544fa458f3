import asyncio

from framecheck.core.probe import NOT_RENDERED, TIMED_OUT, FrameHost, FrameProbe

URL = "https://a.example/"


def run(coro):
    return asyncio.run(coro)


def test_load_and_access_is_interactive(make_host):
    host = make_host()
    out = run(FrameProbe(host).probe(URL, 1000))
    assert out.rendered and out.interactive and not out.timed_out
    assert host.resets == 1
    assert host.started == [URL]


def test_access_undefined_is_not_interactive(make_host):
    out = run(FrameProbe(make_host(access=False)).probe(URL, 1000))
    assert out.rendered and not out.interactive


def test_access_denied_is_recovered(make_host, log):
    host = make_host(access_error=PermissionError("cross-origin"))
    out = run(FrameProbe(host, logger=log).probe(URL, 1000))
    assert out.rendered and not out.interactive
    assert log.has("Frame access denied")


def test_load_error_event(make_host):
    out = run(FrameProbe(make_host(loads=False)).probe(URL, 1000))
    assert out == NOT_RENDERED


def test_load_exception_never_reaches_caller(make_host, log):
    host = make_host(load_error=RuntimeError("net::ERR_BLOCKED"))
    out = run(FrameProbe(host, logger=log).probe(URL, 1000))
    assert out == NOT_RENDERED
    assert log.has("Frame load error")


def test_timeout_wins_and_late_load_is_ignored(make_host, log):
    host = make_host(delay=0.2)
    probe = FrameProbe(host, logger=log)

    async def scenario():
        outcome = await probe.probe(URL, 20)
        # Let the straggling load finish after the race is over.
        await asyncio.sleep(0.3)
        return outcome

    out = run(scenario())
    assert out == TIMED_OUT
    assert not out.rendered
    assert host.finished == [URL]
    assert log.has("Ignoring late frame event")


def test_host_reset_failure_is_not_rendered(make_host):
    class BrokenHost(make_host):
        async def reset(self):
            raise RuntimeError("page crashed")

    out = run(FrameProbe(BrokenHost()).probe(URL, 1000))
    assert out == NOT_RENDERED


def test_generations_increase_and_reset_invalidates(make_host, log):
    host = make_host(delay=0.05)
    probe = FrameProbe(host, logger=log)
    assert probe.generation == 0

    async def scenario():
        task = asyncio.ensure_future(probe.probe(URL, 1000))
        await asyncio.sleep(0.01)
        newer = probe.reset()
        outcome = await task
        return newer, outcome

    newer, outcome = run(scenario())
    assert newer == 2
    assert not probe.is_current(1)
    assert probe.is_current(2)
    # The stale run still returns a record; callers decide to drop it.
    assert outcome.rendered
    assert log.has("Probe generation 1 went stale")


def test_explicit_generation_is_kept(make_host):
    probe = FrameProbe(make_host())
    gen = probe.reset()
    run(probe.probe(URL, 1000, generation=gen))
    assert probe.generation == gen


def test_stale_generation_leaves_host_untouched(make_host, log):
    host = make_host()
    p = FrameProbe(host, logger=log)
    old = p.reset()
    p.reset()

    out = run(p.probe(URL, 1000, generation=old))

    assert out == NOT_RENDERED
    assert host.resets == 0
    assert host.started == []
    assert log.has(f"Skipping stale generation {old}")


def test_superseded_during_reset_skips_load():
    class SupersedingHost(FrameHost):
        prober = None
        started = []

        async def reset(self):
            self.prober.reset()

        async def load(self, url):
            self.started.append(url)
            return True

        async def can_access(self):
            return True

    host = SupersedingHost()
    p = FrameProbe(host)
    host.prober = p

    assert run(p.probe(URL, 1000)) == NOT_RENDERED
    assert host.started == []
