# link.py - LoRaWAN MAC: data rates, time on air and uplink framing

import logging
import math

from ..config import BANDWIDTH, CODING_RATE, PREAMBLE_SYMBOLS
from ..models import Frame

logger = logging.getLogger(__name__)

# SingleChannel region: DR0..DR5 map to SF12..SF7 at 125 kHz
DATA_RATES = {0: 12, 1: 11, 2: 10, 3: 9, 4: 8, 5: 7}
MIN_DATA_RATE = min(DATA_RATES)
MAX_DATA_RATE = max(DATA_RATES)


def clamp_data_rate(data_rate):
    return max(MIN_DATA_RATE, min(MAX_DATA_RATE, data_rate))


def assign_data_rate(index, num_devices):
    """Device ``index`` gets DR (num_devices - 1) - index, clamped to the region's range."""
    return clamp_data_rate((num_devices - 1) - index)


def spreading_factor(data_rate):
    return DATA_RATES[clamp_data_rate(data_rate)]


def time_on_air(payload_size, sf, bw=BANDWIDTH, cr=CODING_RATE,
                n_preamble=PREAMBLE_SYMBOLS, explicit_header=True, crc=True):
    """
    Airtime of a LoRa frame in seconds (Semtech AN1200.13).
    Low data rate optimisation is on for SF11 and SF12 at 125 kHz.
    """
    t_sym = (2.0 ** sf) / bw
    t_preamble = (n_preamble + 4.25) * t_sym

    de = 1 if sf >= 11 and bw == 125000 else 0
    h = 0 if explicit_header else 1
    num = 8 * payload_size - 4 * sf + 28 + (16 if crc else 0) - 20 * h
    payload_symbols = 8 + max(math.ceil(num / (4.0 * (sf - 2 * de))) * (cr + 4), 0)

    return t_preamble + payload_symbols * t_sym


class EndDeviceMac:
    """Class A end-device MAC on a single channel."""

    def __init__(self, dev_addr, data_rate=MAX_DATA_RATE):
        self.dev_addr = dev_addr
        self.data_rate = clamp_data_rate(data_rate)
        self.fcnt = 0

    def set_data_rate(self, data_rate):
        clamped = clamp_data_rate(data_rate)
        if clamped != data_rate:
            logger.debug("DR%d out of range for device %08x, using DR%d",
                         data_rate, self.dev_addr, clamped)
        self.data_rate = clamped

    @property
    def sf(self):
        return DATA_RATES[self.data_rate]

    def create_frame(self, packet):
        """Wraps an application packet into the next uplink frame."""
        frame = Frame(self.dev_addr, self.fcnt, packet)
        self.fcnt += 1
        return frame

    def airtime(self, frame):
        return time_on_air(frame.size, self.sf)
