"""
Reference VM selection and fallback allocation policies.

Both move at most one VM per evaluation and only look at the candidate hosts
they are given. A candidate's projected utilization is its current
utilization plus the MIPS already migrated onto it in this monitoring round
plus the VM's MIPS demand, all over the candidate's capacity.
"""

from typing import List, Optional, Sequence, TYPE_CHECKING

from ..core.config import DEFAULT_STATIC_THRESHOLD
from .migration_trigger import FallbackAllocationPolicy, Migration, VmSelectionPolicy

if TYPE_CHECKING:
    from ..datacenter.host import NetworkHost
    from ..datacenter.placement import VmPlacement


def projected_utilization(host: 'NetworkHost', vm_mips: float, pending_mips: float = 0.0) -> float:
    return host.current_utilization() + (pending_mips + vm_mips) / host.mips


def first_fitting_host(candidates: Sequence['NetworkHost'], exclude_id: int,
                       vm_mips: float, limit: float,
                       placement: Optional['VmPlacement'] = None) -> Optional['NetworkHost']:
    for candidate in candidates:
        if candidate.host_id == exclude_id:
            continue
        pending = placement.pending_mips(candidate.host_id) if placement else 0.0
        if projected_utilization(candidate, vm_mips, pending) <= limit:
            return candidate
    return None


class MinimumUtilizationSelection(VmSelectionPolicy):
    """
    Move the VM with the smallest MIPS demand to the first candidate host
    that can take it without exceeding full capacity.
    """

    def __init__(self, placement: 'VmPlacement'):
        self._placement = placement

    def select_migrations(self, host: 'NetworkHost',
                          candidates: Sequence['NetworkHost']) -> List[Migration]:
        vms = self._placement.vms_on_host(host.host_id)
        if not vms:
            return []
        vm = min(vms, key=self._placement.vm_mips)
        target = first_fitting_host(candidates, host.host_id, self._placement.vm_mips(vm), 1.0,
                                    self._placement)
        return [(vm, target.host_id)] if target else []


class FirstFitFallback(FallbackAllocationPolicy):
    """
    Move the largest VM to the first candidate host that stays at or below
    ``threshold`` after taking it.
    """

    def __init__(self, placement: 'VmPlacement', threshold: float = DEFAULT_STATIC_THRESHOLD):
        self._placement = placement
        self._threshold = threshold

    def select_migrations(self, host: 'NetworkHost',
                          candidates: Sequence['NetworkHost']) -> List[Migration]:
        vms = self._placement.vms_on_host(host.host_id)
        if not vms:
            return []
        vm = max(vms, key=self._placement.vm_mips)
        target = first_fitting_host(candidates, host.host_id,
                                    self._placement.vm_mips(vm), self._threshold, self._placement)
        return [(vm, target.host_id)] if target else []
