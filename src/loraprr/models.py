import struct
import zlib

from .config import APP_PAYLOAD_SIZE, MAC_HEADER_SIZE, MIC_SIZE

UNCONFIRMED_DATA_UP = 0x40
DEFAULT_FPORT = 1


class Packet:
    """Application payload handed to the end-device MAC"""
    def __init__(self, sender_id, payload=None, size=APP_PAYLOAD_SIZE):
        self.sender_id = sender_id
        self.data = payload if payload is not None else bytes(size)

    def __len__(self):
        return len(self.data)


class Frame:
    """LoRaWAN unconfirmed uplink"""
    def __init__(self, dev_addr, fcnt, packet, fport=DEFAULT_FPORT):
        self.dev_addr = dev_addr
        self.fcnt = fcnt
        self.fport = fport
        self.packet = packet
        self.header_size = MAC_HEADER_SIZE + MIC_SIZE

    @property
    def size(self):
        return len(self.pack())

    def pack(self):
        # MHDR(1) + DevAddr(4, LE) + FCtrl(1) + FCnt(2, LE) + FPort(1) = 9 byte header
        header = struct.pack('<BIBHB', UNCONFIRMED_DATA_UP, self.dev_addr, 0x00,
                             self.fcnt & 0xFFFF, self.fport)
        body = header + self.packet.data
        # CRC32 stands in for the AES-CMAC MIC; no keys are modelled
        mic = struct.pack('<I', zlib.crc32(body) & 0xFFFFFFFF)
        return body + mic


class ReceptionEvent:
    """One frame physically arriving at a gateway radio."""
    def __init__(self, frame, sender, rx_power, time):
        self.frame = frame
        self.sender = sender
        self.rx_power = rx_power
        self.time = time
