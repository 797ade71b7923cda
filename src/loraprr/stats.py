# stats.py - Per-run reception counting and cross-run PRR reporting

import logging

import numpy as np
import pandas as pd

from .config import ConfigurationError

logger = logging.getLogger(__name__)


class ReceptionCounter:
    """Packets sent and received during one run."""

    def __init__(self):
        self.sent = 0
        self.received = 0

    def record_sent(self):
        self.sent += 1

    def record_received(self):
        if self.received >= self.sent:
            raise RuntimeError(
                f"received count would exceed sent count ({self.received + 1} > {self.sent})")
        self.received += 1

    def prr(self):
        """Returns 100 * received / sent; a run that sent nothing is a configuration error."""
        if self.sent == 0:
            raise ConfigurationError("num_devices: no packets were sent, PRR is undefined")
        return 100.0 * self.received / self.sent


def mean_prr(prr_values):
    """Arithmetic mean of the per-run PRRs."""
    if len(prr_values) == 0:
        raise ConfigurationError("num_runs: no run results to average")
    return float(np.sum(prr_values) / len(prr_values))


class StatsReporter:
    def __init__(self, output_path, summary_path=None):
        self.output_path = output_path
        self.summary_path = summary_path

    def report(self, prr_values, runs=None):
        """
        Prints each run's PRR and the average, then persists the raw values.
        Returns the average PRR.
        """
        average = mean_prr(prr_values)

        for i, prr in enumerate(prr_values):
            print(f"Run {i + 1}: Packet Reception Ratio (PRR): {format_prr(prr)}%")
        print(f"Average Packet Reception Ratio (PRR) over {len(prr_values)} runs: "
              f"{format_prr(average)}%")

        self.write_results(prr_values)
        if self.summary_path is not None and runs is not None:
            self.write_summary(runs)
        return average

    def write_results(self, prr_values):
        """One PRR per line, in run order, replacing any previous file."""
        with open(self.output_path, "w") as f:
            for prr in prr_values:
                f.write(f"{format_prr(prr)}\n")
        logger.info("Wrote %d PRR values to %s", len(prr_values), self.output_path)

    def write_summary(self, runs):
        df = pd.DataFrame([run.as_dict() for run in runs])
        df.to_csv(self.summary_path, index=False)
        logger.info("Wrote run summary to %s", self.summary_path)


def format_prr(value):
    # Six significant digits, trailing zeros dropped (100, 83.3333, 0)
    return f"{value:.6g}"
