"""
DatacenterTopology Unit Tests

测试覆盖：
1. 从配置构建三层树
2. 主机注册和利用率历史
3. 端到端的数据包投递和延迟
"""

import unittest

from dcsimpy.api.config_parser import DatacenterConfig
from dcsimpy.core.errors import TopologyError
from dcsimpy.core.eventlist import EventList
from dcsimpy.datacenter.constants import (
    AGGREGATE_SWITCHING_DELAY, EDGE_SWITCHING_DELAY, MEGA, GIGA, ROOT_SWITCHING_DELAY, SwitchLevel,
)
from dcsimpy.datacenter.host import NetworkHost
from dcsimpy.datacenter.placement import VmPlacement
from dcsimpy.datacenter.topology import DatacenterTopology
from dcsimpy.datacenter.uplink_selection import RoundRobinUplinkSelector, UplinkPolicy
from dcsimpy.packets.network_packet import NetworkPacket


class TestTopologyBuild(unittest.TestCase):

    def setUp(self):
        self.eventlist = EventList()
        self.config = DatacenterConfig(root_switches=2, aggregate_switches=2,
                                       edge_switches_per_aggregate=2, hosts_per_edge=3)
        self.topo = DatacenterTopology.from_config(self.config, self.eventlist)

    def test_counts(self):
        self.assertEqual(len(self.topo.root_switches()), 2)
        self.assertEqual(len(self.topo.aggregate_switches()), 2)
        self.assertEqual(len(self.topo.edge_switches()), 4)
        self.assertEqual(len(self.topo.hosts()), 12)
        self.assertEqual(self.config.host_count, 12)

    def test_aggregates_connect_to_every_root(self):
        roots = self.topo.root_switches()
        for agg in self.topo.aggregate_switches():
            self.assertEqual(agg.uplink_switches(), roots)
        for root in roots:
            self.assertEqual(len(root.downlink_switches()), 2)

    def test_each_host_has_one_edge(self):
        for host in self.topo.hosts():
            edge = self.topo.edge_switch_of(host.host_id)
            self.assertEqual(edge.level, SwitchLevel.EDGE)
            self.assertTrue(edge.has_host(host.host_id))

    def test_entities_registered_with_eventlist(self):
        for switch in self.topo.switches():
            self.assertIs(self.eventlist.entity(switch.get_id()), switch)
        self.assertEqual(len(self.topo), 12 + 8)

    def test_unknown_ids(self):
        with self.assertRaises(TopologyError):
            self.topo.get_host(-1)
        with self.assertRaises(TopologyError):
            self.topo.switch(-1)

    def test_utilization_history(self):
        host = self.topo.hosts()[0]
        host.record_utilization(0.4)
        host.record_utilization(0.6)

        self.assertEqual(self.topo.utilization_history(host.host_id), (0.4, 0.6))
        self.assertEqual(host.current_utilization(), 0.6)

    def test_uplink_policy_from_config(self):
        config = DatacenterConfig(root_switches=2, uplink_policy=UplinkPolicy.ROUND_ROBIN)
        topo = DatacenterTopology.from_config(config, EventList())
        for switch in topo.switches():
            self.assertIsInstance(switch.uplink_selector, RoundRobinUplinkSelector)

    def test_port_exhaustion(self):
        config = DatacenterConfig(hosts_per_edge=5)
        with self.assertRaises(TopologyError):
            DatacenterTopology.from_config(config, EventList())


class TestPacketDelivery(unittest.TestCase):

    def setUp(self):
        self.eventlist = EventList()
        self.placement = VmPlacement()
        config = DatacenterConfig(root_switches=1, aggregate_switches=2,
                                  edge_switches_per_aggregate=1, hosts_per_edge=2)
        self.topo = DatacenterTopology.from_config(config, self.eventlist, self.placement)
        self.h0, self.h1, self.h2, self.h3 = self.topo.hosts()
        for vm, host in enumerate((self.h0, self.h1, self.h2, self.h3)):
            self.placement.place(vm, host.host_id)

    def send(self, sender_vm, receiver_vm, size=1500.0):
        host = self.topo.get_host(self.placement.host_id_for_vm(sender_vm))
        pkt = NetworkPacket(sender_vm, receiver_vm, size, self.eventlist.now(), host.host_id)
        host.send_packet(pkt)
        return pkt

    def test_same_edge_delivery(self):
        pkt = self.send(0, 1)
        self.eventlist.run()

        self.assertEqual(self.h1.received_packets(), [pkt])
        self.assertAlmostEqual(pkt.latency(), EDGE_SWITCHING_DELAY + 1500 / (100 * MEGA))
        self.assertEqual(self.topo.edge_switch_of(self.h0.host_id).get_local_deliveries(), 1)

    def test_cross_aggregate_delivery(self):
        pkt = self.send(0, 3)
        self.eventlist.run()

        expected = (
            EDGE_SWITCHING_DELAY + 1500 / (100 * MEGA)          # edge up
            + AGGREGATE_SWITCHING_DELAY + 1500 / (40 * GIGA)    # aggregate up
            + ROOT_SWITCHING_DELAY + 1500 / (40 * GIGA)         # root down
            + AGGREGATE_SWITCHING_DELAY + 1500 / (100 * MEGA)   # aggregate down
            + EDGE_SWITCHING_DELAY + 1500 / (100 * MEGA)        # edge down
        )
        self.assertEqual(self.h3.received_packets(), [pkt])
        self.assertEqual(pkt.receiver_host_id, self.h3.host_id)
        self.assertAlmostEqual(pkt.latency(), expected)
        self.assertEqual(self.topo.root_switches()[0].get_packets_forwarded(), 1)

    def test_packets_to_same_host_are_batched(self):
        first = self.send(0, 1, size=1000)
        second = self.send(0, 1, size=3000)
        self.eventlist.run()

        self.assertEqual(first.receive_time, second.receive_time)
        self.assertAlmostEqual(first.latency(), EDGE_SWITCHING_DELAY + 4000 / (100 * MEGA))

    def test_unconnected_host_cannot_send(self):
        host = NetworkHost(self.eventlist, "floating")
        with self.assertRaises(TopologyError):
            host.send_packet(NetworkPacket(0, 1, 10.0, 0.0))


if __name__ == '__main__':
    unittest.main()
