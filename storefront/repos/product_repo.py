# storefront/repos/product_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.utils.retry import db_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SORTABLE_COLUMNS = {
    "created_at": ProductModel.created_at,
    "price": ProductModel.price,
    "name": ProductModel.name,
    "stock": ProductModel.stock,
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products_by_ids(self, product_ids) -> dict[int, ProductModel]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(
        self,
        offset: int,
        limit: int,
        sort_by: str = "created_at",
        descending: bool = True,
        category: str | None = None,
        featured: bool | None = None,
    ) -> list[ProductModel]:
        column = SORTABLE_COLUMNS.get(sort_by, ProductModel.created_at)
        stmt = select(ProductModel)
        if category is not None:
            stmt = stmt.where(ProductModel.category == category)
        if featured is not None:
            stmt = stmt.where(ProductModel.is_featured == featured)
        #id jako drugi klucz zeby paginacja byla stabilna
        stmt = stmt.order_by(
            column.desc() if descending else column.asc(),
            ProductModel.id.desc() if descending else ProductModel.id.asc(),
        )
        return self.db.execute(stmt.offset(offset).limit(limit)).scalars().all()

    def search(self, query: str, offset: int, limit: int) -> list[ProductModel]:
        pattern = f"%{query.lower()}%"
        stmt = (
            select(ProductModel)
            .where(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(ProductModel.description).like(pattern),
                )
            )
            .order_by(ProductModel.name.asc(), ProductModel.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return self.db.execute(stmt).scalars().all()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: ProductModel, fields: dict) -> ProductModel:
        for key, value in fields.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    # ---- stock

    @db_retry()
    def get_current_stock(self, product_id: int) -> int:
        try:
            stock = self.db.execute(
                select(ProductModel.stock).where(ProductModel.id == product_id)
            ).scalar_one_or_none()
        except OperationalError:
            self.db.rollback()
            raise

        if stock is None:
            raise NotFoundError("Product not found")
        return stock

    @db_retry()
    def decrement_stock_if_available(self, product_id: int, quantity: int) -> bool:
        """
        Atomowy compare-and-decrement jednym UPDATE z warunkiem stock >= quantity.
        Commit od razu, nie ma transakcji obejmujacej kilka produktow.
        False gdy wiersz nie spelnil warunku (brak stanu albo brak produktu).
        """
        try:
            result = self.db.execute(
                update(ProductModel)
                .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
                .values(stock=ProductModel.stock - quantity)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except OperationalError:
            self.db.rollback()
            raise

        return result.rowcount == 1

    def adjust_stock(self, product_id: int, delta: int) -> bool:
        # ten sam trik co przy checkout - warunek w WHERE pilnuje stock >= 0
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock + delta >= 0)
            .values(stock=ProductModel.stock + delta)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1
