# config.py - Radio constants and experiment configuration

# Channel Parameters (log-distance path loss)
PATH_LOSS_EXPONENT = 3.76
REFERENCE_DISTANCE = 1.0    # m
REFERENCE_LOSS = 7.7        # dB
SPEED_OF_LIGHT = 299792458.0  # m/s

# Radio Parameters (single channel region)
FREQUENCY = 868.1e6  # Hz
BANDWIDTH = 125000   # Hz
CODING_RATE = 1      # 4/5
PREAMBLE_SYMBOLS = 8
TX_POWER = 14        # dBm

# Gateway sensitivity per spreading factor (dBm, 125 kHz)
GATEWAY_SENSITIVITY = {
    7: -130.0,
    8: -132.5,
    9: -135.0,
    10: -137.5,
    11: -140.0,
    12: -142.5,
}

# Frame Layout
APP_PAYLOAD_SIZE = 10    # Byte
MAC_HEADER_SIZE = 9      # MHDR + DevAddr + FCtrl + FCnt + FPort
MIC_SIZE = 4             # Byte

# Mobility Parameters
WALK_BOUNDS = (-5000.0, 5000.0, -5000.0, 5000.0)  # xmin, xmax, ymin, ymax
WALK_SPEED = 1.0        # m/s
WALK_INTERVAL = 2.0     # s
LINEAR_START = 1000.0   # m
LINEAR_SPACING = 50.0   # m

# Loss Profiles (drop probability in percent)
LOSS_PROFILES = {
    "low-loss": 10,
    "high-loss": 90,
}

TOPOLOGIES = ("random-walk", "linear")

# Experiment Parameters
NUM_RUNS = 10
NUM_DEVICES = 6
NUM_GATEWAYS = 1
DROP_PROBABILITY = LOSS_PROFILES["low-loss"]
TOPOLOGY = "random-walk"
SEND_TIME = 1.0    # s
STOP_TIME = 10.0   # s
RESULTS_FILE = "prr_results.txt"


class ConfigurationError(ValueError):
    """Raised when an experiment cannot be run with the given parameters."""


class ExperimentConfig:
    """Fixed parameters of one experiment; shared read-only by all runs."""

    def __init__(self, num_runs=NUM_RUNS, num_devices=NUM_DEVICES,
                 num_gateways=NUM_GATEWAYS, drop_probability=DROP_PROBABILITY,
                 topology=TOPOLOGY, send_time=SEND_TIME, stop_time=STOP_TIME,
                 payload_size=APP_PAYLOAD_SIZE, output_path=RESULTS_FILE):
        self.num_runs = num_runs
        self.num_devices = num_devices
        self.num_gateways = num_gateways
        self.drop_probability = drop_probability
        self.topology = topology
        self.send_time = send_time
        self.stop_time = stop_time
        self.payload_size = payload_size
        self.output_path = output_path

    @classmethod
    def from_profile(cls, profile, **kwargs):
        """Build a config whose drop probability comes from a named loss profile."""
        if profile not in LOSS_PROFILES:
            raise ConfigurationError(
                f"profile: unknown loss profile {profile!r} "
                f"(expected one of {', '.join(sorted(LOSS_PROFILES))})"
            )
        return cls(drop_probability=LOSS_PROFILES[profile], **kwargs)

    def validate(self):
        """Check every parameter; raises ConfigurationError naming the first bad one."""
        if isinstance(self.num_runs, bool) or not isinstance(self.num_runs, int) or self.num_runs <= 0:
            raise ConfigurationError(f"num_runs: must be a positive integer, got {self.num_runs!r}")
        if (isinstance(self.num_devices, bool) or not isinstance(self.num_devices, int)
                or self.num_devices <= 0):
            raise ConfigurationError(f"num_devices: must be a positive integer, got {self.num_devices!r}")
        if self.num_gateways != 1:
            raise ConfigurationError(f"num_gateways: exactly one gateway is supported, got {self.num_gateways!r}")
        if (isinstance(self.drop_probability, bool) or not isinstance(self.drop_probability, int)
                or not 0 <= self.drop_probability <= 100):
            raise ConfigurationError(
                f"drop_probability: must be an integer percentage in [0, 100], got {self.drop_probability!r}"
            )
        if self.topology not in TOPOLOGIES:
            raise ConfigurationError(
                f"topology: unknown variant {self.topology!r} (expected one of {', '.join(TOPOLOGIES)})"
            )
        if self.stop_time <= 0:
            raise ConfigurationError(f"stop_time: must be positive, got {self.stop_time!r}")
        if not 0 <= self.send_time < self.stop_time:
            raise ConfigurationError(
                f"send_time: must lie in [0, stop_time={self.stop_time}), got {self.send_time!r}"
            )
        if not isinstance(self.payload_size, int) or not 0 <= self.payload_size <= 222:
            raise ConfigurationError(f"payload_size: must be an integer in [0, 222], got {self.payload_size!r}")
        return self

    def __repr__(self):
        return (f"ExperimentConfig(num_runs={self.num_runs}, num_devices={self.num_devices}, "
                f"drop_probability={self.drop_probability}, topology={self.topology!r}, "
                f"send_time={self.send_time}, stop_time={self.stop_time})")
