# storefront/repos/cart_repo.py
from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_line import CartLineModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_line(self, line_id: int) -> CartLineModel | None:
        return self.db.get(CartLineModel, line_id)

    def get_line_for_product(self, user_id: int, product_id: int) -> CartLineModel | None:
        return self.db.execute(
            select(CartLineModel).where(
                CartLineModel.user_id == user_id,
                CartLineModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_lines(self, user_id: int) -> list[CartLineModel]:
        return list(
            self.db.execute(
                select(CartLineModel)
                .where(CartLineModel.user_id == user_id)
                .order_by(CartLineModel.id)
            ).scalars().all()
        )

    def add_line(self, line: CartLineModel) -> CartLineModel:
        self.db.add(line)
        self.db.flush()
        return line

    def change_quantity(self, line_id: int, delta: int) -> int:
        # atomowo po stronie bazy: update set quantity = quantity + delta
        result = self.db.execute(
            update(CartLineModel)
            .where(CartLineModel.id == line_id)
            .values(quantity=CartLineModel.quantity + delta)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_line(self, line_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.id == line_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_lines(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartLineModel)
            .where(CartLineModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, line: CartLineModel) -> CartLineModel:
        self.db.refresh(line)
        return line

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
