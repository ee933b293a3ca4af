"""
Logger Unit Tests

测试 Logfile 记录格式、交换机日志和迁移决策日志
"""

import unittest
import tempfile
import os

from dcsimpy.core.eventlist import EventKind, EventList
from dcsimpy.core.logger.base import Logger
from dcsimpy.core.logger.core import Logged
from dcsimpy.core.logger.logfile import Logfile
from dcsimpy.core.logger.migration import MigrationLogger
from dcsimpy.core.logger.switch import SwitchLogger, SwitchLoggerFactory, SwitchLoggerSimple
from dcsimpy.datacenter.host import NetworkHost
from dcsimpy.datacenter.placement import VmPlacement
from dcsimpy.datacenter.switch_node import edge_switch
from dcsimpy.datacenter.topology import DatacenterTopology
from dcsimpy.packets.network_packet import NetworkPacket
from dcsimpy.power.migration_trigger import MigrationDecision


class LoggerTestBase(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.eventlist = EventList()
        self.logfile = Logfile(os.path.join(self.tmpdir.name, "logs", "sim.log"), self.eventlist)

    def tearDown(self):
        self.logfile.close()
        self.tmpdir.cleanup()

    def records(self):
        with open(os.path.join(self.tmpdir.name, "logs", "sim.log")) as f:
            return [line.split() for line in f if not line.startswith("#")]


class TestLogfile(LoggerTestBase):

    def test_record_format(self):
        self.logfile.writeRecord(Logger.EventType.SWITCH_EVENT, 5, 1, 1.0, 2.0, 3.0)

        self.assertEqual(self.records(), [["0.0", "0", "5", "1", "1.0", "2.0", "3.0"]])
        self.assertEqual(self.logfile.record_count(), 1)

    def test_records_before_start_time_skipped(self):
        self.logfile.setStartTime(10.0)
        self.logfile.writeRecord(Logger.EventType.SWITCH_EVENT, 5, 1, 1.0, 2.0, 3.0)

        self.assertEqual(self.records(), [])

    def test_write_name(self):
        item = Logged("edge_0_0")
        self.logfile.writeName(item)
        self.logfile.close()

        with open(os.path.join(self.tmpdir.name, "logs", "sim.log")) as f:
            self.assertEqual(f.read().strip(), f"# {item.get_id()} edge_0_0")


class TestSwitchLoggers(LoggerTestBase):

    def setUp(self):
        super().setUp()
        self.placement = VmPlacement()
        self.topo = DatacenterTopology(self.eventlist, self.placement)
        self.edge = edge_switch(self.eventlist, "edge", self.placement, self.topo)
        self.h0 = self.topo.add_host(NetworkHost(self.eventlist, "h0"), self.edge)
        self.h1 = self.topo.add_host(NetworkHost(self.eventlist, "h1"), self.edge)
        self.placement.place(1, self.h0.host_id)
        self.placement.place(2, self.h1.host_id)

    def test_simple_logger_records_each_event(self):
        factory = SwitchLoggerFactory(self.logfile, SwitchLoggerFactory.SwitchLoggerType.LOGGER_SIMPLE,
                                      self.eventlist)
        switch_logger = factory.create_switch_logger(self.edge)
        self.assertIsInstance(switch_logger, SwitchLoggerSimple)
        self.edge.set_switch_logger(switch_logger)

        self.edge.process_packet_up(NetworkPacket(1, 2, 64, 0.0))

        events = [int(r[3]) for r in self.records()]
        self.assertEqual(events, [SwitchLogger.SwitchEvent.PKT_ARRIVE, SwitchLogger.SwitchEvent.ROUTE_LOCAL])

    def test_sampling_logger_writes_periodic_counts(self):
        sampler = self.edge.add_logger(self.logfile, sample_period=1.0)

        self.h0.send_packet(NetworkPacket(1, 2, 64, 0.0))
        self.h0.send_packet(NetworkPacket(1, 2, 36, 0.0))
        self.eventlist.run(until=0.5)
        self.assertEqual(sampler.counters(), {'pkt_count': 2, 'byte_count': 100, 'forward_count': 2})

        self.eventlist.run(until=1.0)
        rows = self.records()
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0][1:4], [str(int(Logger.EventType.SWITCH_RECORD)), str(self.edge.get_id()), "0"])
        self.assertEqual(float(rows[0][4]), 2.0)
        self.assertEqual(float(rows[1][4]), 100.0)
        self.assertEqual(sampler.counters()['pkt_count'], 0)

        sample_events = [ev for ev in self.eventlist.pending_events() if ev.kind == EventKind.LOGGER_SAMPLE]
        self.assertEqual([ev.time for ev in sample_events], [2.0])


class TestMigrationLogger(LoggerTestBase):

    def test_decisions_written_and_kept(self):
        migration_logger = MigrationLogger()
        self.logfile.addLogger(migration_logger)

        migration_logger.log_decision(MigrationDecision(1, 0.5, 0.85, overloaded=False))
        migration_logger.log_decision(MigrationDecision(2, 0.95, 0.9, overloaded=True,
                                                        migrations=[(3, 1)], static_fallback=True))
        migration_logger.log_decision(MigrationDecision(3, 0.95, 0.85, overloaded=True))

        events = [int(r[3]) for r in self.records()]
        self.assertEqual(events, [
            MigrationLogger.MigrationEvent.HOST_OK,
            MigrationLogger.MigrationEvent.HOST_OVERLOADED,
            MigrationLogger.MigrationEvent.STATIC_FALLBACK,
            MigrationLogger.MigrationEvent.NO_FEASIBLE_TARGET,
        ])
        self.assertEqual(len(migration_logger.decisions()), 3)

    def test_without_logfile(self):
        migration_logger = MigrationLogger()
        migration_logger.log_decision(MigrationDecision(1, 0.5, 0.85, overloaded=False))
        self.assertEqual(len(migration_logger.decisions()), 1)


if __name__ == '__main__':
    unittest.main()
