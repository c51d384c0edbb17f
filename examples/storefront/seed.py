"""
Demo data — one shop, a short menu, two customers, two drivers.

Loaded into a MemoryStore by default, or into ORDERFLOW_DATABASE_URL when
that is set (environment or .env).
"""

import os
from typing import Any

from dotenv import load_dotenv
from kungfu import Error, Ok

from orderflow.api import DATABASE_URL_ENV, database_url
from orderflow.shop import WEEKDAYS
from orderflow.store import MemoryStore, RecordStore, SQLAlchemyStore, Tables, create_database


RECORDS: dict[str, list[dict[str, Any]]] = {
    Tables.SETTINGS: [
        {
            "id": "shop",
            "name": "Açaí da Praça",
            "delivery": {
                "type": "neighborhood",
                "neighborhoods": [
                    {"name": "Centro", "fee": "3.00"},
                    {"name": "Jardim América", "fee": "6.50"},
                ],
            },
            "loyalty_program": {
                "enabled": True,
                "points_per_real": 1,
                "points_for_reward": 100,
                "reward_type": "free_shipping",
                "reward_value": "0",
            },
            "opening_hours": {
                day: {"is_open": True, "start": "10:00", "end": "23:00"} for day in WEEKDAYS
            },
        }
    ],
    Tables.PRODUCTS: [
        {
            "id": "acai",
            "name": "Açaí na tigela",
            "price_type": "sized",
            "sizes": [
                {"name": "300ml", "price": "14.00"},
                {"name": "500ml", "price": "19.00"},
                {"name": "700ml", "price": "24.00"},
            ],
            "addon_categories": ["toppings"],
            "order": 1,
        },
        {
            "id": "burger",
            "name": "X-Salada",
            "price_type": "fixed",
            "price": "22.00",
            "addon_categories": ["sauce"],
            "order": 2,
        },
        {"id": "juice", "name": "Suco de laranja", "price_type": "fixed", "price": "8.00", "order": 3},
    ],
    Tables.ADDON_CATEGORIES: [
        {
            "id": "toppings",
            "name": "Coberturas",
            "addons": [
                {"id": "rules", "__selection_rules__": True, "min": 0, "max": 3},
                {"id": "granola", "name": "Granola", "price": "2.00"},
                {"id": "banana", "name": "Banana", "price": "1.50"},
                {"id": "leite", "name": "Leite em pó", "price": "2.50"},
                {"id": "nutella", "name": "Nutella", "price": "5.00"},
            ],
        },
        {
            "id": "sauce",
            "name": "Molho",
            "required": True,
            "max_selection": 1,
            "addons": [
                {"id": "maionese", "name": "Maionese da casa", "price": "0"},
                {"id": "barbecue", "name": "Barbecue", "price": "1.00"},
            ],
        },
    ],
    Tables.COUPONS: [
        {
            "id": "bemvindo",
            "code": "BEMVINDO",
            "description": "R$ 5 na primeira compra",
            "discount_type": "fixed",
            "discount_value": "5",
            "minimum_order_value": "25",
        },
    ],
    Tables.CUSTOMERS: [
        {"id": "1", "name": "Ana", "loyalty_points": 130, "used_coupons": []},
        {"id": "2", "name": "Bruno", "loyalty_points": 20, "used_coupons": ["BEMVINDO"]},
    ],
    Tables.DRIVERS: [
        {"id": "carlos", "name": "Carlos", "status": "approved", "whatsapp": "11999990001"},
        {"id": "diego", "name": "Diego", "status": "approved", "whatsapp": "11999990002"},
    ],
}


async def open_store() -> RecordStore:
    load_dotenv()
    if DATABASE_URL_ENV not in os.environ:
        return MemoryStore(RECORDS)

    session_factory, _ = await create_database(database_url())
    store = SQLAlchemyStore(session_factory)
    for table, records in RECORDS.items():
        for record in records:
            match await store.get(table, record["id"]):
                case Ok(None):
                    pass
                case Ok(_):
                    continue
                case Error(e):
                    raise e
            match await store.insert(table, record):
                case Ok(_):
                    pass
                case Error(e):
                    raise e
    return store
