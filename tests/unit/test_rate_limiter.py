"""レート制限のテスト"""

import threading
import time

import pytest

from src.shared.http import rate_limiter as rate_limiter_module
from src.shared.http.rate_limiter import RateLimiter


class FakeClock:
    """monotonic / sleep の代わりに使う時計"""

    def __init__(self) -> None:
        self.now = 1000.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(rate_limiter_module, "time", fake)
    return fake


def test_first_request_does_not_wait(clock: FakeClock) -> None:
    limiter = RateLimiter(min_interval=1.0)

    limiter.wait()

    assert clock.sleeps == []
    assert limiter.last_request_time == 1000.0


def test_waits_for_remaining_interval(clock: FakeClock) -> None:
    """前回から最小間隔が経過していなければ残り時間だけスリープ"""
    limiter = RateLimiter(min_interval=1.0)
    limiter.wait()

    clock.now += 0.25
    limiter.wait()

    assert clock.sleeps == [pytest.approx(0.75)]
    assert limiter.last_request_time == pytest.approx(1001.0)


def test_no_wait_after_interval_elapsed(clock: FakeClock) -> None:
    limiter = RateLimiter(min_interval=1.0)
    limiter.wait()

    clock.now += 1.5
    limiter.wait()

    assert clock.sleeps == []


def test_negative_interval_is_clamped() -> None:
    limiter = RateLimiter(min_interval=-1.0)

    assert limiter.min_interval == 0.0


def test_reset_clears_last_request(clock: FakeClock) -> None:
    limiter = RateLimiter(min_interval=1.0)
    limiter.wait()

    limiter.reset()
    limiter.wait()

    assert clock.sleeps == []


def test_concurrent_callers_are_serialized() -> None:
    """複数スレッドから呼ばれても最小間隔が守られる"""
    limiter = RateLimiter(min_interval=0.05)
    started = time.monotonic()

    threads = [threading.Thread(target=limiter.wait) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    # 2回目以降の3回はそれぞれ最小間隔を待つ
    assert time.monotonic() - started >= 0.149
