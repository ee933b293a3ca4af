"""
OverloadMonitor Unit Tests
"""

import unittest
from unittest.mock import Mock

from dcsimpy.api.config_parser import DatacenterConfig
from dcsimpy.core.eventlist import EventKind, EventList
from dcsimpy.core.logger.migration import MigrationLogger
from dcsimpy.datacenter.placement import VmPlacement
from dcsimpy.datacenter.topology import DatacenterTopology
from dcsimpy.power.migration_trigger import MigrationTrigger, StaticThreshold
from dcsimpy.power.monitor import OverloadMonitor
from dcsimpy.power.policies import FirstFitFallback, MinimumUtilizationSelection


class TestOverloadMonitor(unittest.TestCase):

    def setUp(self):
        self.eventlist = EventList()
        self.placement = VmPlacement()
        config = DatacenterConfig(edge_switches_per_aggregate=1, hosts_per_edge=3)
        self.topo = DatacenterTopology.from_config(config, self.eventlist, self.placement)
        self.h0, self.h1, self.h2 = self.topo.hosts()

        self.placement.place(1, self.h0.host_id, mips=200)
        self.placement.place(2, self.h0.host_id, mips=500)
        self.placement.place(3, self.h1.host_id, mips=300)

        self.trigger = MigrationTrigger(MinimumUtilizationSelection(self.placement),
                                        FirstFitFallback(self.placement))
        self.monitor = OverloadMonitor(self.eventlist, self.topo, self.placement, self.trigger,
                                       interval=300.0)

    def decision_for(self, decisions, host):
        return next(d for d in decisions if d.host_id == host.host_id)

    def test_short_history_uses_static_threshold(self):
        self.h0.record_utilization(0.95)
        self.h1.record_utilization(0.3)
        self.h2.record_utilization(0.1)

        decisions = self.monitor.check_hosts()

        d0 = self.decision_for(decisions, self.h0)
        self.assertTrue(d0.static_fallback)
        self.assertEqual(d0.threshold, 0.9)
        self.assertTrue(d0.overloaded)
        self.assertEqual(d0.migrations, [(1, self.h1.host_id)])
        self.assertEqual(self.placement.host_id_for_vm(1), self.h1.host_id)
        self.assertFalse(self.decision_for(decisions, self.h2).overloaded)

    def test_dynamic_threshold_from_history(self):
        for t in range(12):
            self.h0.history.append(float(t), 0.5 + (t % 2) * 0.2)
        threshold, static = self.monitor.threshold_for(self.h0.host_id)

        self.assertFalse(static)
        self.assertAlmostEqual(threshold, 1.0 - 1.5 * 0.2)

    def test_static_only_monitor(self):
        monitor = OverloadMonitor(self.eventlist, self.topo, self.placement, self.trigger,
                                  static_threshold=StaticThreshold(0.7), dynamic_threshold=False)
        for t in range(12):
            self.h0.history.append(float(t), 0.5)

        self.assertEqual(monitor.threshold_for(self.h0.host_id), (0.7, True))

    def test_ticks_reschedule(self):
        self.monitor.start()
        self.eventlist.run(until=1000.0)

        self.assertEqual(self.monitor.tick_count(), 3)
        self.assertEqual(self.eventlist.next_event_time(), 1200.0)
        self.assertEqual(len(self.monitor.decisions()), 9)

    def test_decisions_are_logged(self):
        migration_logger = Mock(spec=MigrationLogger)
        monitor = OverloadMonitor(self.eventlist, self.topo, self.placement, self.trigger,
                                  migration_logger=migration_logger)
        monitor.check_hosts()

        self.assertEqual(migration_logger.log_decision.call_count, 3)

    def test_rejects_other_events(self):
        with self.assertRaises(ValueError):
            self.monitor.process_event(Mock(kind=EventKind.NETWORK_EVENT_UP))


class TestMonitorCapacity(unittest.TestCase):

    def setUp(self):
        self.eventlist = EventList()
        self.placement = VmPlacement()
        config = DatacenterConfig(edge_switches_per_aggregate=1, hosts_per_edge=3)
        self.topo = DatacenterTopology.from_config(config, self.eventlist, self.placement)
        self.a, self.b, self.c = self.topo.hosts()
        self.placement.place(1, self.a.host_id, mips=400)
        self.placement.place(2, self.b.host_id, mips=400)
        self.placement.place(3, self.c.host_id, mips=100)
        self.a.record_utilization(0.95)
        self.b.record_utilization(0.95)
        self.c.record_utilization(0.5)

        trigger = MigrationTrigger(MinimumUtilizationSelection(self.placement),
                                   FirstFitFallback(self.placement))
        self.monitor = OverloadMonitor(self.eventlist, self.topo, self.placement, trigger)

    def test_overloaded_hosts_do_not_share_one_target(self):
        self.monitor.check_hosts()

        # c takes VM 1 (0.5 + 0.4); VM 2 no longer fits there
        self.assertEqual(self.placement.vms_on_host(self.c.host_id), [1, 3])
        self.assertEqual(self.placement.host_id_for_vm(2), self.a.host_id)
        for host in self.topo.hosts():
            load = host.current_utilization() + self.placement.pending_mips(host.host_id) / host.mips
            self.assertLessEqual(load, 1.0)

    def test_pending_load_cleared_each_tick(self):
        self.monitor.check_hosts()
        self.a.record_utilization(0.55)
        self.b.record_utilization(0.55)
        self.c.record_utilization(0.85)
        self.monitor.check_hosts()

        self.assertEqual(self.placement.pending_mips(self.c.host_id), 0.0)
        self.assertEqual(self.placement.migration_count(), 2)


if __name__ == '__main__':
    unittest.main()
