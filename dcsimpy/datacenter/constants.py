"""
Constants and enumerations for datacenter module

Default switch parameters per topology level. Bandwidths are in bytes per
simulated second, delays in simulated seconds.
"""

from enum import Enum, IntEnum, auto

from ..core.config import GIGA, MEGA


class SwitchLevel(IntEnum):
    """Switch levels in the tree topology (root at the top)"""
    ROOT = 0
    AGGREGATE = 1
    EDGE = 2


class LinkDirection(Enum):
    """Link direction in datacenter networks"""
    UPLINK = auto()
    DOWNLINK = auto()


# Root switch
ROOT_PORTS = 4
ROOT_DOWNLINK_BW = 40 * GIGA
ROOT_SWITCHING_DELAY = 0.00285

# Aggregate switch
AGGREGATE_PORTS = 4
AGGREGATE_DOWNLINK_BW = 100 * MEGA
AGGREGATE_UPLINK_BW = ROOT_DOWNLINK_BW
AGGREGATE_SWITCHING_DELAY = 0.00245

# Edge switch: downlink ports are connected to hosts, not switches
EDGE_PORTS = 4
EDGE_DOWNLINK_BW = 100 * MEGA
EDGE_UPLINK_BW = AGGREGATE_DOWNLINK_BW
EDGE_SWITCHING_DELAY = 0.00157

LEVEL_DEFAULTS = {
    SwitchLevel.ROOT: {
        'ports': ROOT_PORTS,
        'uplink_bandwidth': 0.0,
        'downlink_bandwidth': ROOT_DOWNLINK_BW,
        'switching_delay': ROOT_SWITCHING_DELAY,
    },
    SwitchLevel.AGGREGATE: {
        'ports': AGGREGATE_PORTS,
        'uplink_bandwidth': AGGREGATE_UPLINK_BW,
        'downlink_bandwidth': AGGREGATE_DOWNLINK_BW,
        'switching_delay': AGGREGATE_SWITCHING_DELAY,
    },
    SwitchLevel.EDGE: {
        'ports': EDGE_PORTS,
        'uplink_bandwidth': EDGE_UPLINK_BW,
        'downlink_bandwidth': EDGE_DOWNLINK_BW,
        'switching_delay': EDGE_SWITCHING_DELAY,
    },
}
