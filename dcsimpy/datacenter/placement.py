"""
VM placement map and the placement oracle interface used by routing.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import logging

from ..core.errors import UnresolvableDestinationError

logger = logging.getLogger(__name__)


class VmHostOracle(ABC):
    """Resolves a VM id to the id of the host running it."""

    @abstractmethod
    def host_id_for_vm(self, vm_id: int) -> int:
        """
        Raises:
            UnresolvableDestinationError: The VM is not placed anywhere
        """


class VmPlacement(VmHostOracle):
    """
    VM id -> host id map

    Migrations only update this map; no VM state is moved. The net MIPS
    moved onto or off each host since the last ``clear_pending()`` is tracked
    apart from the hosts' utilization samples.
    """

    def __init__(self):
        self._vm_to_host: Dict[int, int] = {}
        self._vm_mips: Dict[int, float] = {}
        self._pending_mips: Dict[int, float] = {}
        self._migrations = 0

    def place(self, vm_id: int, host_id: int, mips: float = 0.0) -> None:
        if vm_id in self._vm_to_host:
            raise ValueError(f"VM {vm_id} is already placed on host {self._vm_to_host[vm_id]}")
        if mips < 0:
            raise ValueError(f"VM mips cannot be negative, got {mips}")
        self._vm_to_host[vm_id] = host_id
        self._vm_mips[vm_id] = mips

    def migrate(self, vm_id: int, target_host_id: int) -> int:
        """
        Move a VM to another host.

        Returns:
            The id of the host the VM left
        """
        source = self.host_id_for_vm(vm_id)
        self._vm_to_host[vm_id] = target_host_id
        mips = self._vm_mips[vm_id]
        self._pending_mips[source] = self._pending_mips.get(source, 0.0) - mips
        self._pending_mips[target_host_id] = self._pending_mips.get(target_host_id, 0.0) + mips
        self._migrations += 1
        logger.info("VM %d migrated from host %d to host %d", vm_id, source, target_host_id)
        return source

    def remove(self, vm_id: int) -> None:
        self._vm_to_host.pop(vm_id, None)
        self._vm_mips.pop(vm_id, None)

    def host_id_for_vm(self, vm_id: int) -> int:
        try:
            return self._vm_to_host[vm_id]
        except KeyError:
            raise UnresolvableDestinationError(vm_id) from None

    def vms_on_host(self, host_id: int) -> List[int]:
        return [vm for vm, host in self._vm_to_host.items() if host == host_id]

    def vm_mips(self, vm_id: int) -> float:
        """MIPS demand of a placed VM."""
        self.host_id_for_vm(vm_id)
        return self._vm_mips[vm_id]

    def allocated_mips(self, host_id: int) -> float:
        return sum(self._vm_mips[vm] for vm in self.vms_on_host(host_id))

    def pending_mips(self, host_id: int) -> float:
        """Net MIPS migrated onto ``host_id`` since the last clear_pending()."""
        return self._pending_mips.get(host_id, 0.0)

    def clear_pending(self) -> None:
        self._pending_mips.clear()

    def migration_count(self) -> int:
        return self._migrations

    def __contains__(self, vm_id: int) -> bool:
        return vm_id in self._vm_to_host

    def __len__(self) -> int:
        return len(self._vm_to_host)
