"""
Unit tests for report.py
"""

import pandas as pd
import pytest
from rich.console import Console

from dcsimpy.api.report import DECISION_COLUMNS, PACKET_COLUMNS, SimulationReport
from dcsimpy.packets.network_packet import NetworkPacket
from dcsimpy.power.migration_trigger import MigrationDecision


def delivered(size, created, received):
    pkt = NetworkPacket(1, 2, size, created)
    pkt.send_time = created
    pkt.receive_time = received
    return pkt


@pytest.fixture
def report():
    packets = [delivered(100, 0.0, 1.0), delivered(300, 1.0, 4.0)]
    decisions = [
        MigrationDecision(host_id=1, utilization=0.95, threshold=0.9, overloaded=True,
                          migrations=[(7, 2)], static_fallback=True, time=300.0),
        MigrationDecision(host_id=2, utilization=0.2, threshold=0.85, overloaded=False, time=300.0),
    ]
    return SimulationReport(packets=packets, decisions=decisions)


def test_packets_frame(report):
    frame = report.packets_frame()
    assert list(frame.columns) == PACKET_COLUMNS
    assert frame['latency'].tolist() == [1.0, 3.0]


def test_decisions_frame(report):
    frame = report.decisions_frame()
    assert list(frame.columns) == DECISION_COLUMNS
    assert frame['migrations'].tolist() == [1, 0]
    assert frame['static_fallback'].tolist() == [True, False]


def test_summary(report):
    summary = report.summary()
    assert summary['packets_delivered'] == 2
    assert summary['bytes_delivered'] == 400.0
    assert summary['mean_latency'] == pytest.approx(2.0)
    assert summary['max_latency'] == pytest.approx(3.0)
    assert summary['overloaded_decisions'] == 1
    assert summary['migrations'] == 1


def test_empty_report():
    summary = SimulationReport().summary()
    assert summary['packets_delivered'] == 0
    assert summary['mean_latency'] == 0.0
    assert summary['migrations'] == 0


def test_write_csv(report, tmp_path):
    paths = report.write_csv(str(tmp_path / "out"), prefix="run1_")

    assert [p.rsplit("/", 1)[-1] for p in paths] == [
        "run1_packets.csv", "run1_switches.csv", "run1_migrations.csv",
    ]
    packets = pd.read_csv(paths[0])
    assert len(packets) == 2
    assert packets['size'].sum() == 400


def test_print_summary(report):
    console = Console(record=True, width=80)
    report.print_summary(console)
    text = console.export_text()
    assert "packets_delivered" in text
    assert "Simulation summary" in text
