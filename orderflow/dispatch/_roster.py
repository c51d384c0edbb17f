"""
DriverRoster — driver sign-up and approval.

New drivers start as pending; only approved drivers can claim or be
assigned deliveries.
"""

from __future__ import annotations

import logging
import uuid

from orderflow._errors import Errors, OrderflowError
from orderflow._types import Error, Ok, Result
from orderflow.dispatch._types import DeliveryDriver, DriverStatus
from orderflow.store import RecordStore, Tables


logger = logging.getLogger(__name__)


class DriverRoster:
    __slots__ = ("_store",)

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def drivers(self) -> Result[list[DeliveryDriver], OrderflowError]:
        match await self._store.list_all(Tables.DRIVERS):
            case Ok(records):
                return Ok([DeliveryDriver.from_record(r) for r in records])
            case Error(e):
                return Error(e)

    async def get(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        match await self._store.get(Tables.DRIVERS, driver_id):
            case Ok(None):
                return Error(Errors.unknown("driver", driver_id))
            case Ok(record):
                return Ok(DeliveryDriver.from_record(record))
            case Error(e):
                return Error(e)

    async def approved(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        match await self.get(driver_id):
            case Ok(driver) if driver.is_approved:
                return Ok(driver)
            case Ok(_):
                return Error(Errors.driver_not_approved(driver_id))
            case Error(e):
                return Error(e)

    async def register(self, name: str, whatsapp: str = "") -> Result[DeliveryDriver, OrderflowError]:
        name = name.strip()
        if not name:
            return Error(Errors.missing_field("name"))
        match await self.drivers():
            case Ok(existing):
                if any(d.name.casefold() == name.casefold() for d in existing):
                    return Error(Errors.duplicate_driver(name))
            case Error(e):
                return Error(e)

        driver = DeliveryDriver(uuid.uuid4().hex, name, DriverStatus.PENDING, whatsapp)
        match await self._store.insert(Tables.DRIVERS, driver.to_record()):
            case Ok(record):
                logger.info("driver %s registered, pending approval", name)
                return Ok(DeliveryDriver.from_record(record))
            case Error(e):
                return Error(e)

    async def set_status(
        self, driver_id: str, status: DriverStatus
    ) -> Result[DeliveryDriver, OrderflowError]:
        match await self._store.update(Tables.DRIVERS, driver_id, {"status": status.value}):
            case Ok(None):
                return Error(Errors.unknown("driver", driver_id))
            case Ok(record):
                logger.info("driver %s is now %s", driver_id, status.value)
                return Ok(DeliveryDriver.from_record(record))
            case Error(e):
                return Error(e)

    async def approve(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        return await self.set_status(driver_id, DriverStatus.APPROVED)

    async def decline(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        return await self.set_status(driver_id, DriverStatus.DECLINED)

    async def block(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        return await self.set_status(driver_id, DriverStatus.BLOCKED)

    async def unblock(self, driver_id: str) -> Result[DeliveryDriver, OrderflowError]:
        return await self.set_status(driver_id, DriverStatus.APPROVED)


__all__ = ("DriverRoster",)
