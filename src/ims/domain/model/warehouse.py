"""Warehouse aggregate.

A warehouse is the parent of inventory rows, purchase orders and sales
orders. The children carry ``warehouse_id``; the warehouse holds no
in-memory collection of them.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.domain.exceptions import ValidationError
from ims.domain.model.common import new_id


@dataclass
class Warehouse:

    id: str
    name: str
    location: str = ""
    contact_details: str = ""

    @staticmethod
    def create(name: str, location: str = "", contact_details: str = "") -> Warehouse:
        warehouse = Warehouse(id=new_id(), name="")
        warehouse.update_details(name, location, contact_details)
        return warehouse

    def update_details(self, name: str, location: str, contact_details: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Warehouse name is required")
        self.name = name.strip()
        self.location = location
        self.contact_details = contact_details
