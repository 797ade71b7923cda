# engine.py - Event-Driven Simulation Engine

import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


class Event:
    """Simulation event with proper ordering."""

    def __init__(self, time, event_type, data=None, order=0):
        self.time = time
        self.type = event_type
        self.data = data
        self._order = order

    def __lt__(self, other):
        if self.time == other.time:
            return self._order < other._order
        return self.time < other.time

    def __repr__(self):
        return f"Event({self.time:.6f}, {self.type!r})"


class SimulationEngine:
    """Single-threaded event loop owning one run's timeline."""

    def __init__(self):
        # Event queue
        self.events = []
        self.current_time = 0.0
        self.handlers = {}
        self.processed = 0

        # Per-engine counter so equal-time events keep insertion order
        self._counter = itertools.count()

    @property
    def now(self):
        return self.current_time

    def on(self, event_type, handler):
        """Registers the handler called with each event of ``event_type``."""
        self.handlers[event_type] = handler

    def schedule(self, delay, event_type, data=None):
        """Schedules a new event ``delay`` seconds from now."""
        if delay < 0:
            raise ValueError(f"cannot schedule {event_type!r} in the past (delay={delay})")
        event = Event(self.current_time + delay, event_type, data, next(self._counter))
        heapq.heappush(self.events, event)
        return event

    def schedule_at(self, time, event_type, data=None):
        return self.schedule(time - self.current_time, event_type, data)

    def pending(self):
        return len(self.events)

    def run(self, stop_time):
        """Main simulation loop: processes events in time order until ``stop_time``."""
        while self.events and self.events[0].time <= stop_time:
            event = heapq.heappop(self.events)
            self.current_time = event.time

            handler = self.handlers.get(event.type)
            if handler is None:
                raise KeyError(f"no handler registered for event type {event.type!r}")
            handler(event.data)
            self.processed += 1

        # Clock always ends at the stop time, even if the queue emptied early
        self.current_time = stop_time
        logger.debug("Event loop stopped at t=%.3fs after %d events (%d left)",
                     stop_time, self.processed, len(self.events))
        return self.current_time

    def destroy(self):
        """Drops every pending event and handler so nothing leaks into the next run."""
        self.events.clear()
        self.handlers.clear()
