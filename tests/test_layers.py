import math
import random

import numpy as np
import pytest

from loraprr.layers.link import (EndDeviceMac, assign_data_rate, clamp_data_rate,
                                 spreading_factor, time_on_air)
from loraprr.layers.mobility import ConstantPositionMobility, RandomWalk2dMobility, linear_positions
from loraprr.layers.physical import DELIVERED, DROPPED, Channel, LossModel
from loraprr.models import Frame, Packet


@pytest.mark.parametrize("p", [0, 10, 50, 90, 100])
def test_empirical_drop_rate_matches_probability(p):
    model = LossModel(p, random.Random(1234))
    samples = 10000
    dropped = sum(model.decide() == DROPPED for _ in range(samples))
    assert abs(100.0 * dropped / samples - p) <= 3.0


def test_extreme_probabilities_are_deterministic():
    model = LossModel(0, random.Random(5))
    assert all(model.decide() == DELIVERED for _ in range(500))
    assert all(model.decide(100) == DROPPED for _ in range(500))


def test_same_seed_gives_same_decisions():
    a = LossModel(50, random.Random(42))
    b = LossModel(50, random.Random(42))
    assert [a.decide() for _ in range(100)] == [b.decide() for _ in range(100)]


def test_path_loss_follows_log_distance():
    channel = Channel(3.76, 1.0, 7.7)
    assert channel.path_loss(0.0) == 7.7
    assert channel.path_loss(1.0) == 7.7
    assert math.isclose(channel.path_loss(1000.0), 7.7 + 37.6 * 3)
    assert math.isclose(channel.rx_power(14, 10.0), 14 - 7.7 - 37.6)


def test_sensitivity_threshold():
    channel = Channel()
    assert channel.reaches(-110.0, 7)
    assert not channel.reaches(-131.0, 7)
    assert channel.reaches(-131.0, 12)


def test_propagation_delay():
    channel = Channel()
    assert math.isclose(channel.propagation_delay(299792458.0), 1.0)


def test_data_rate_formula_and_clamp():
    assert [assign_data_rate(i, 6) for i in range(6)] == [5, 4, 3, 2, 1, 0]
    assert assign_data_rate(0, 1) == 0
    assert assign_data_rate(0, 9) == 5
    assert assign_data_rate(8, 9) == 0
    assert clamp_data_rate(-3) == 0
    assert spreading_factor(5) == 7
    assert spreading_factor(0) == 12


def test_time_on_air_known_value_and_monotonic():
    assert math.isclose(time_on_air(23, 7), 0.061696, rel_tol=1e-3)
    airtimes = [time_on_air(23, sf) for sf in range(7, 13)]
    assert airtimes == sorted(airtimes)


def test_frame_layout():
    mac = EndDeviceMac(dev_addr=3)
    first = mac.create_frame(Packet(3))
    second = mac.create_frame(Packet(3))

    assert (first.fcnt, second.fcnt) == (0, 1)
    assert first.size == 23
    assert len(first.pack()) == first.size
    assert first.pack()[0] == 0x40


def test_airtime_follows_packed_frame_length():
    mac = EndDeviceMac(dev_addr=1)
    short = mac.create_frame(Packet(1, size=10))
    long = mac.create_frame(Packet(1, size=60))

    assert long.size == len(long.pack()) == long.header_size + 60
    assert mac.airtime(long) > mac.airtime(short)


def test_mac_clamps_out_of_range_rates():
    mac = EndDeviceMac(dev_addr=1)
    mac.set_data_rate(-1)
    assert mac.data_rate == 0
    assert mac.sf == 12
    assert mac.airtime(Frame(1, 0, Packet(1))) > time_on_air(23, 7)


def test_constant_position_mobility():
    mobility = ConstantPositionMobility(1000.0, 0.0)
    assert list(mobility.position_at(5.0)) == [1000.0, 0.0]


def test_random_walk_moves_at_constant_speed():
    mobility = RandomWalk2dMobility(np.random.default_rng(3), speed=1.0)
    mobility.change_direction(0.0)
    position = mobility.position_at(1.5)
    assert math.isclose(float(np.linalg.norm(position)), 1.5)


def test_random_walk_stays_in_bounds():
    bounds = (-1.0, 1.0, -1.0, 1.0)
    mobility = RandomWalk2dMobility(np.random.default_rng(7), speed=1.0, interval=0.5,
                                    bounds=bounds)
    t = 0.0
    for _ in range(400):
        mobility.change_direction(t)
        t += mobility.interval
        x, y = mobility.position_at(t)
        assert -1.0 <= x <= 1.0
        assert -1.0 <= y <= 1.0


def test_linear_positions():
    assert linear_positions(3) == [(1000.0, 0.0), (1050.0, 0.0), (1100.0, 0.0)]
