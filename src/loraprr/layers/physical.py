import logging
import math

from ..config import (GATEWAY_SENSITIVITY, PATH_LOSS_EXPONENT, REFERENCE_DISTANCE,
                      REFERENCE_LOSS, SPEED_OF_LIGHT)

logger = logging.getLogger(__name__)

DELIVERED = "delivered"
DROPPED = "dropped"


class Channel:
    def __init__(self, path_loss_exponent=PATH_LOSS_EXPONENT,
                 reference_distance=REFERENCE_DISTANCE, reference_loss=REFERENCE_LOSS,
                 propagation_speed=SPEED_OF_LIGHT):
        """
        Log-distance path loss with a constant-speed propagation delay.
        """
        self.path_loss_exponent = path_loss_exponent
        self.reference_distance = reference_distance
        self.reference_loss = reference_loss
        self.propagation_speed = propagation_speed

    def path_loss(self, distance):
        """
        L(d) = L0 + 10 * n * log10(d / d0); distances inside d0 get L0.
        """
        if distance <= self.reference_distance:
            return self.reference_loss
        return self.reference_loss + 10 * self.path_loss_exponent * math.log10(
            distance / self.reference_distance)

    def rx_power(self, tx_power, distance):
        return tx_power - self.path_loss(distance)

    def propagation_delay(self, distance):
        return distance / self.propagation_speed

    def reaches(self, rx_power, sf):
        """
        True if a frame at ``rx_power`` dBm is above the gateway sensitivity for ``sf``.
        """
        return rx_power >= GATEWAY_SENSITIVITY[sf]


class LossModel:
    def __init__(self, drop_probability, rng):
        """
        Random packet loss applied at the receiver.
        ``rng`` is the run's own random.Random, seeded by the caller.
        """
        self.drop_probability = drop_probability
        self.rng = rng

    def decide(self, drop_probability=None):
        """
        Draws an integer in [0, 100); the packet is dropped if the draw is below the drop probability.
        """
        if drop_probability is None:
            drop_probability = self.drop_probability

        if self.rng.randrange(100) < drop_probability:
            logger.debug("Packet dropped due to simulated packet loss")
            return DROPPED
        return DELIVERED
