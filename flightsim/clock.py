"""
Real-time scheduler for FlightSimulator.

Fires tick() every tick_interval_ms. A tick that overruns its slot makes the
clock skip the missed firings instead of running them back to back, so the
simulation never fast-forwards.
"""

import logging
import math
import time

logger = logging.getLogger(__name__)


class SimulationClock:

    def __init__(self, simulator, interval_ms=None, sleep=time.sleep, monotonic=time.monotonic):
        self.simulator = simulator
        ms = interval_ms if interval_ms is not None else simulator.settings.tick_interval_ms
        if ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {ms}")
        self.interval = ms / 1000.0
        self._sleep = sleep
        self._monotonic = monotonic
        self._running = False
        self._next_fire = 0.0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._running

    def stop(self):
        self._running = False

    def run(self, max_ticks=None) -> int:
        """
        Tick until the autopilot is off, the flight ends, stop() is called or
        max_ticks ticks have run. Returns the number of ticks run.
        """
        ticks = 0
        self._running = True
        self._next_fire = self._monotonic()
        try:
            while self._running and self.simulator.engaged:
                if max_ticks is not None and ticks >= max_ticks:
                    break
                self._wait_for_slot()
                # stop() may have been called from a listener or another thread
                if not (self._running and self.simulator.engaged):
                    break
                self.simulator.tick()
                ticks += 1
        finally:
            self._running = False
        return ticks

    def _wait_for_slot(self):
        self._next_fire += self.interval
        now = self._monotonic()
        if now > self._next_fire:
            missed = math.ceil((now - self._next_fire) / self.interval)
            self.skipped += missed
            self._next_fire += missed * self.interval
            logger.debug("Tick overran, skipped %d firing(s)", missed)
        self._sleep(max(0.0, self._next_fire - now))
