"""Tests for SqlProductRepository on in-memory SQLite."""

from product_api.models import Product


def add(repo, name, price):
    return repo.save(repo.create({"name": name, "price": price}))


class TestSqlProductRepository:
    def test_create_does_not_persist(self, sql_repository, session):
        product = sql_repository.create({"name": "Laptop", "price": 10.0})

        assert product.id is None
        assert session.query(Product).count() == 0

    def test_save_assigns_id(self, sql_repository):
        product = add(sql_repository, "Laptop", 10.0)

        assert product.id is not None
        assert sql_repository.find_one(product.id).name == "Laptop"

    def test_save_updates_existing(self, sql_repository):
        product = add(sql_repository, "Laptop", 10.0)
        product.price = 12.5

        sql_repository.save(product)

        assert sql_repository.find_one(product.id).price == 12.5

    def test_find_one_missing_returns_none(self, sql_repository):
        assert sql_repository.find_one(999) is None

    def test_find_and_count_pages_in_id_order(self, sql_repository):
        ids = [add(sql_repository, f"p{i}", float(i)).id for i in range(7)]

        rows, total = sql_repository.find_and_count(skip=3, take=3)

        assert total == 7
        assert [r.id for r in rows] == ids[3:6]

    def test_find_and_count_beyond_end(self, sql_repository):
        add(sql_repository, "only", 1.0)

        rows, total = sql_repository.find_and_count(skip=10, take=10)

        assert rows == []
        assert total == 1

    def test_delete_reports_affected_rows(self, sql_repository):
        product = add(sql_repository, "Laptop", 10.0)

        assert sql_repository.delete(product.id).affected == 1
        assert sql_repository.find_one(product.id) is None
        assert sql_repository.delete(product.id).affected == 0
