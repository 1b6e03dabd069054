"""
Stats Service

Aggregate counts across both collections. The four counts are independent
and run concurrently.
"""
import asyncio
import logging
from typing import Dict

from fastapi import Depends

from neoride.core.database import ConnectionManager
from neoride.core.dependencies import get_connection_manager
from neoride.models.driver import DriverStatus
from neoride.repositories.customer_repository import CustomerRepository
from neoride.repositories.driver_repository import DriverRepository

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, connections: ConnectionManager):
        self.connections = connections

    async def get_stats(self) -> Dict[str, int]:
        await self.connections.connect()
        customers = CustomerRepository()
        drivers = DriverRepository()

        total_customers, total_drivers, approved_drivers, pending_drivers = await asyncio.gather(
            customers.count(),
            drivers.count(),
            drivers.count_by_status(DriverStatus.APPROVED),
            drivers.count_by_status(DriverStatus.PENDING),
        )

        stats = {
            "totalCustomers": total_customers,
            "totalDrivers": total_drivers,
            "approvedDrivers": approved_drivers,
            "pendingDrivers": pending_drivers,
        }
        logger.debug(f"Stats computed: {stats}")
        return stats


def get_stats_service(
    connections: ConnectionManager = Depends(get_connection_manager),
) -> StatsService:
    return StatsService(connections)
