# network.py - One-hop LoRa network: nodes, radios and the uplink path to the gateway

import logging

import numpy as np

from .config import TX_POWER
from .layers.link import EndDeviceMac
from .layers.mobility import ConstantPositionMobility, RandomWalk2dMobility
from .layers.physical import Channel
from .models import Packet, ReceptionEvent

logger = logging.getLogger(__name__)

ED = "ED"
GW = "GW"


class Node:
    def __init__(self, node_id, mobility):
        self.id = node_id
        self.mobility = mobility

    def position(self, current_time):
        return self.mobility.position_at(current_time)

    def distance_to(self, other, current_time):
        return float(np.linalg.norm(self.position(current_time) - other.position(current_time)))


class Radio:
    def __init__(self, node, channel, role, tx_power=TX_POWER):
        self.node = node
        self.channel = channel
        self.role = role
        self.tx_power = tx_power
        self.mac = EndDeviceMac(dev_addr=node.id) if role == ED else None
        self.callback = None


class LoraNetwork:
    """
    Nodes and radios of a single run, driven by that run's SimulationEngine.
    Frames are never lost here except below gateway sensitivity; any other
    loss is up to the reception callback.
    """

    def __init__(self, engine, rng):
        self.engine = engine
        self.rng = rng
        self.nodes = []
        self.radios = []

        engine.on('TX', self._handle_tx)
        engine.on('RX_ARRIVE', self._handle_rx_arrive)
        engine.on('WALK', self._handle_walk)

    def create_channel(self, path_loss_exponent, reference_distance, reference_loss):
        logger.info("Creating the channel...")
        return Channel(path_loss_exponent, reference_distance, reference_loss)

    def create_node(self, position=(0.0, 0.0), mobile=False):
        x, y = position
        if mobile:
            mobility = RandomWalk2dMobility(self.rng, x, y)
            # First heading is drawn at t=0, then every interval
            self.engine.schedule_at(0.0, 'WALK', mobility)
        else:
            mobility = ConstantPositionMobility(x, y)
        node = Node(len(self.nodes), mobility)
        self.nodes.append(node)
        return node

    def attach_radio(self, node, channel, role):
        if role not in (ED, GW):
            raise ValueError(f"unknown radio role {role!r}")
        radio = Radio(node, channel, role)
        self.radios.append(radio)
        return radio

    def gateways(self):
        return [r for r in self.radios if r.role == GW]

    def on_reception_attempt(self, gateway_radio, callback):
        """Subscribes the single handler for frames reaching ``gateway_radio``."""
        if gateway_radio.role != GW:
            raise ValueError("reception handlers can only be attached to gateway radios")
        if gateway_radio.callback is not None:
            raise ValueError(f"gateway {gateway_radio.node.id} already has a reception handler")
        gateway_radio.callback = callback

    def schedule_transmission(self, radio, at_time, packet=None):
        if radio.role != ED:
            raise ValueError("only end-device radios transmit uplinks")
        if packet is None:
            packet = Packet(radio.node.id)
        return self.engine.schedule_at(at_time, 'TX', (radio, packet))

    # === EVENT HANDLERS ===

    def _handle_tx(self, data):
        radio, packet = data
        now = self.engine.now
        frame = radio.mac.create_frame(packet)
        airtime = radio.mac.airtime(frame)
        logger.debug("t=%.3fs node %d sends %d-byte frame at DR%d (SF%d, %.3fs on air)",
                     now, radio.node.id, frame.size, radio.mac.data_rate, radio.mac.sf, airtime)

        for gw in self.gateways():
            if gw.channel is not radio.channel:
                continue
            distance = radio.node.distance_to(gw.node, now)
            rx_power = radio.channel.rx_power(radio.tx_power, distance)
            if not radio.channel.reaches(rx_power, radio.mac.sf):
                logger.debug("Frame from node %d below sensitivity at gateway %d (%.1f dBm)",
                             radio.node.id, gw.node.id, rx_power)
                continue
            delay = airtime + radio.channel.propagation_delay(distance)
            self.engine.schedule(delay, 'RX_ARRIVE', (gw, frame, radio, rx_power))

    def _handle_rx_arrive(self, data):
        gw, frame, sender, rx_power = data
        if gw.callback is not None:
            gw.callback(ReceptionEvent(frame, sender, rx_power, self.engine.now))

    def _handle_walk(self, mobility):
        mobility.change_direction(self.engine.now)
        self.engine.schedule(mobility.interval, 'WALK', mobility)
