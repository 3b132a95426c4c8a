from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import inspect

from rms.domain.common.ids import DishId, TableId, UserId
from rms.domain.common.money import Money
from rms.domain.dish.entities import Dish
from rms.domain.table.entities import Table, TableStatus
from rms.domain.user.entities import Role, User
from rms.infrastructure.db.session import get_engine
from rms.infrastructure.db.unit_of_work import SqlAlchemyUnitOfWork
from rms.infrastructure.security.passwords import WerkzeugPasswordHasher

SEED_USERS = [
    ("usr_admin00001", "Alex Admin", "admin@rms.local", Role.ADMIN, "admin-pass-123"),
    ("usr_waiter0001", "Wendy Waiter", "waiter@rms.local", Role.WAITER, "waiter-pass-123"),
    ("usr_cook000001", "Casey Cook", "cook@rms.local", Role.COOK, "cook-pass-123"),
]

SEED_TABLES = [
    ("tbl_000000001", 1, 2),
    ("tbl_000000002", 2, 4),
    ("tbl_000000003", 3, 4),
    ("tbl_000000004", 4, 6),
]

SEED_DISHES = [
    ("dsh_margherita", "Margherita Pizza", "Tomato, mozzarella, basil", "14.50", True),
    ("dsh_alfredo001", "Chicken Alfredo", "Fettuccine, creamy parmesan sauce", "16.90", True),
    ("dsh_caesar0001", "Caesar Salad", "Romaine, croutons, parmesan", "9.90", True),
    ("dsh_tiramisu01", "Tiramisu", "Espresso-soaked ladyfingers", "8.50", False),
]


def main() -> None:
    engine = get_engine()
    required_tables = {"users", "dishes", "tables", "orders", "order_items"}
    if not required_tables.issubset(set(inspect(engine).get_table_names())):
        print("no schema yet")
        return

    hasher = WerkzeugPasswordHasher()
    uow = SqlAlchemyUnitOfWork(engine)
    created = 0

    with uow:
        for user_id, name, email, role, password in SEED_USERS:
            if uow.users.get_by_email(email) is None:
                uow.users.add(
                    User(
                        user_id=UserId(user_id),
                        name=name,
                        email=email,
                        role=role,
                        is_active=True,
                        password_hash=hasher.hash(password),
                    )
                )
                created += 1

        for table_id, number, capacity in SEED_TABLES:
            if uow.tables.get_by_number(number) is None:
                uow.tables.add(
                    Table(
                        table_id=TableId(table_id),
                        number=number,
                        capacity=capacity,
                        status=TableStatus.AVAILABLE,
                    )
                )
                created += 1

        for dish_id, name, description, price, is_available in SEED_DISHES:
            if uow.dishes.get(DishId(dish_id)) is None:
                uow.dishes.add(
                    Dish(
                        dish_id=DishId(dish_id),
                        name=name,
                        description=description,
                        price=Money.from_decimal(Decimal(price)),
                        is_available=is_available,
                        created_at=datetime.now(timezone.utc),
                    )
                )
                created += 1

        uow.commit()

    print(f"seed complete ({created} rows created)")


if __name__ == "__main__":
    main()
