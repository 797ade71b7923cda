# experiment.py - Runs one simulated network per seed and collects PRR results

import logging
import random
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from .config import PATH_LOSS_EXPONENT, REFERENCE_DISTANCE, REFERENCE_LOSS, ConfigurationError
from .engine import SimulationEngine
from .layers.link import assign_data_rate
from .layers.mobility import linear_positions
from .layers.physical import DELIVERED, LossModel
from .models import Packet
from .network import ED, GW, LoraNetwork
from .stats import ReceptionCounter, mean_prr

logger = logging.getLogger(__name__)


class RunResult:
    """Outcome of one completed run."""

    def __init__(self, index, seed, sent, received, prr):
        self.index = index
        self.seed = seed
        self.sent = sent
        self.received = received
        self.prr = prr

    def as_dict(self):
        return {
            "run": self.index + 1,
            "seed": self.seed,
            "sent": self.sent,
            "received": self.received,
            "prr": self.prr,
        }

    def __repr__(self):
        return f"RunResult(index={self.index}, seed={self.seed}, prr={self.prr})"


class ExperimentResult:
    """Per-run results in run order plus their mean."""

    def __init__(self, runs):
        self.runs = list(runs)

    @property
    def prr_values(self):
        return [run.prr for run in self.runs]

    @property
    def mean(self):
        return mean_prr(self.prr_values)

    def __len__(self):
        return len(self.runs)


def _build_topology(network, config):
    """Creates the devices, then the gateway, for the configured variant."""
    mobile = config.topology == "random-walk"
    if mobile:
        device_positions = [(0.0, 0.0)] * config.num_devices
    else:
        device_positions = linear_positions(config.num_devices)

    devices = [network.create_node(pos, mobile=mobile) for pos in device_positions]
    gateway = network.create_node((0.0, 0.0), mobile=mobile)
    return devices, gateway


def execute_run(config, seed, run_index=0):
    """
    Builds a fresh network, sends one packet per device and returns the run's RunResult.
    Nothing created here outlives the call.
    """
    config.validate()
    check_seed(seed)

    # 1. Per-run state: event loop, random sources, counter
    engine = SimulationEngine()
    loss_model = LossModel(config.drop_probability, random.Random(seed))
    network = LoraNetwork(engine, np.random.default_rng(seed))
    counter = ReceptionCounter()

    try:
        # 2. Channel and nodes
        channel = network.create_channel(PATH_LOSS_EXPONENT, REFERENCE_DISTANCE, REFERENCE_LOSS)
        logger.info("Creating the end devices...")
        devices, gateway_node = _build_topology(network, config)
        device_radios = [network.attach_radio(node, channel, ED) for node in devices]
        logger.info("Creating the gateway...")
        gateway_radio = network.attach_radio(gateway_node, channel, GW)

        # 3. Loss-gated reception at the gateway
        def on_reception(event):
            if loss_model.decide() == DELIVERED:
                counter.record_received()
                logger.debug("Packet received successfully from node %d", event.sender.node.id)

        network.on_reception_attempt(gateway_radio, on_reception)

        # 4. Data rates and one-shot transmissions; sent is counted at scheduling time
        for i, radio in enumerate(device_radios):
            radio.mac.set_data_rate(assign_data_rate(i, config.num_devices))
            network.schedule_transmission(radio, config.send_time,
                                          Packet(radio.node.id, size=config.payload_size))
            counter.record_sent()

        # 5. Event loop
        engine.run(config.stop_time)
    finally:
        engine.destroy()

    # 6. PRR
    prr = counter.prr()
    logger.debug("Run %d (seed %d): %d/%d packets received", run_index, seed,
                 counter.received, counter.sent)
    return RunResult(run_index, seed, counter.sent, counter.received, prr)


def check_seed(seed):
    """Seeds must be non-negative integers; numpy rejects anything else."""
    if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
        raise ConfigurationError(f"seed: must be a non-negative integer, got {seed!r}")
    return seed


def run_seeds(base_seed, num_runs):
    """Seed of run ``i`` is ``base_seed + i``."""
    return [base_seed + i for i in range(num_runs)]


def _execute_task(task):
    config, seed, run_index = task
    try:
        return execute_run(config, seed, run_index)
    except Exception:
        logger.error("Run %d (seed %d) failed, aborting experiment", run_index + 1, seed)
        raise


def run_experiment(config, base_seed, workers=1):
    """
    Validates ``config`` and executes ``config.num_runs`` independent runs.
    Results keep run order whether or not runs execute in parallel.
    """
    config.validate()
    if workers < 1:
        raise ConfigurationError(f"workers: must be at least 1, got {workers!r}")
    check_seed(base_seed)

    seeds = run_seeds(base_seed, config.num_runs)
    tasks = [(config, seed, i) for i, seed in enumerate(seeds)]

    if workers == 1:
        runs = []
        for task in tasks:
            logger.info("Starting run %d/%d (seed %d)", task[2] + 1, config.num_runs, task[1])
            runs.append(_execute_task(task))
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            runs = list(executor.map(_execute_task, tasks))

    return ExperimentResult(runs)
