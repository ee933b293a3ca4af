"""
DatacenterNetwork integration tests
"""

import os

import pytest

from dcsimpy.api.config_parser import DatacenterConfig, ThresholdPolicy
from dcsimpy.api.datacenter_network import DatacenterNetwork
from dcsimpy.core.config import SimulationConfig
from dcsimpy.core.errors import ConfigError, UnresolvableDestinationError


@pytest.fixture
def config():
    return DatacenterConfig(
        edge_switches_per_aggregate=2,
        hosts_per_edge=2,
        simulation=SimulationConfig(simulation_time=2000.0, monitoring_interval=300.0),
    )


def test_invalid_config_rejected():
    with pytest.raises(ConfigError):
        DatacenterNetwork(DatacenterConfig(hosts_per_edge=0))


def test_packets_delivered_without_monitoring(config):
    net = DatacenterNetwork(config, monitoring=False)
    hosts = net.topology.hosts()
    net.place_vm(0, hosts[0].host_id)
    net.place_vm(1, hosts[3].host_id)

    pkt = net.send(0, 1, size=1500)
    net.run()

    assert hosts[3].received_packets() == [pkt]
    assert pkt.sender_host_id == hosts[0].host_id
    assert net.get_stats()['pending_events'] == 0
    assert net.report().summary()['packets_delivered'] == 1


def test_send_to_unplaced_vm_fails(config):
    net = DatacenterNetwork(config, monitoring=False)
    net.place_vm(0, net.topology.hosts()[0].host_id)
    net.send(0, 99, size=100)

    with pytest.raises(UnresolvableDestinationError):
        net.run()


def test_monitor_migrates_from_overloaded_host(config):
    net = DatacenterNetwork(config)
    h0, h1 = net.topology.hosts()[:2]
    net.place_vm(0, h0.host_id, mips=100)
    net.place_vm(1, h0.host_id, mips=800)
    net.record_utilization(h0.host_id, 0.95)
    net.record_utilization(h1.host_id, 0.2)

    net.run(until=300.0)

    assert net.monitor.tick_count() == 1
    assert net.placement.host_id_for_vm(0) == h1.host_id
    assert net.get_stats()['migrations'] == 1
    summary = net.report().summary()
    assert summary['overloaded_decisions'] == 1
    assert summary['monitor_decisions'] == len(net.topology.hosts())


def test_monitoring_stops_at_simulation_time(config):
    net = DatacenterNetwork(config)
    net.run()

    assert net.monitor.tick_count() == 6
    assert net.get_sim_time() == 1800.0


def test_static_threshold_policy(config):
    config.threshold_policy = ThresholdPolicy.STATIC
    config.static_threshold = 0.5
    net = DatacenterNetwork(config)
    h0 = net.topology.hosts()[0]
    for _ in range(12):
        net.record_utilization(h0.host_id, 0.6)

    net.run(until=300.0)
    decision = net.monitor.decisions()[0]
    assert decision.static_fallback
    assert decision.threshold == 0.5
    assert decision.overloaded


def test_logfile_written(config, tmp_path):
    path = str(tmp_path / "sim.log")
    net = DatacenterNetwork(config, logfile=path, sample_period=100.0)
    net.run(until=300.0)
    net.close()

    with open(path) as f:
        lines = f.read().splitlines()
    names = [line for line in lines if line.startswith("#")]
    assert len(names) == len(net.topology.switches())
    assert any(line.split()[1] == "3" for line in lines if not line.startswith("#"))
    assert os.path.getsize(path) > 0
