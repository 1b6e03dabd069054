from neoride.models.driver import Driver, DriverStatus
from neoride.repositories.base import DocumentRepository


class DriverRepository(DocumentRepository[Driver]):
    """Driver persistence (MongoDB "drivers" collection)."""

    entity = "Driver"
    model = Driver
    unique_fields = ("externalId", "email", "licenseNumber", "vehiclePlate")

    async def count_by_status(self, status: DriverStatus) -> int:
        return await self.count(Driver.status == DriverStatus(status).value)
