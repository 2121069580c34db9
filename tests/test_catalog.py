from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from models.log import Log
from models.product import Product
from models.stock import MovementType, StockMovement
from services import catalog
from services.ledger import post_movement
from services.results import ErrorCode
from utils.invalidation import View


def test_create_applies_defaults_and_surfaces_price_as_float(db, company, user):
    result = catalog.create_product(db, company.id, {"name": "Hammer", "sku": "HM-1", "price": "12.50"}, user_id=user.id)

    assert result.ok
    assert result.value.price == 12.5
    assert isinstance(result.value.price, float)
    assert result.value.min_stock == 0
    assert result.value.current_stock == 0
    assert View.PRODUCTS in result.invalidated

    stored = db.get(Product, result.value.id)
    assert stored.price == Decimal("12.50")
    assert stored.company_id == company.id
    assert db.query(Log).filter(Log.action == "PRODUCT_CREATE").count() == 1


def test_create_rejects_invalid_payload(db, company):
    result = catalog.create_product(db, company.id, {"name": "", "price": -3})

    assert result.error == ErrorCode.VALIDATION_FAILED
    assert db.query(Product).count() == 0


def test_list_search_is_case_insensitive_over_name_and_sku(db, company, make_product):
    make_product(name="Claw Hammer", sku="HM-1")
    make_product(name="Saw", sku="ham-22")
    make_product(name="Drill", sku="DR-9")

    result = catalog.list_products(db, company.id, search="HAM")

    assert sorted(p.name for p in result.value) == ["Claw Hammer", "Saw"]


def test_list_low_stock_filter_is_strict(db, company, make_product):
    make_product(name="A", current_stock=2, min_stock=5)
    make_product(name="B", current_stock=5, min_stock=5)
    make_product(name="C", current_stock=6, min_stock=5)

    result = catalog.list_products(db, company.id, filter="low-stock")

    assert [p.name for p in result.value] == ["A"]


def test_list_is_scoped_to_the_company(db, company, other_company, make_product):
    make_product(name="Ours")
    make_product(name="Theirs", company_id=other_company.id)

    result = catalog.list_products(db, company.id)

    assert [p.name for p in result.value] == ["Ours"]


def test_get_includes_recent_movements(db, user, company, make_product):
    product = make_product(current_stock=0)
    for qty in range(1, 13):
        post_movement(db, {"productId": product.id, "type": "IN", "quantity": qty},
                      user_id=user.id, company_id=company.id)

    result = catalog.get_product(db, product.id, company.id)

    assert result.value.current_stock == sum(range(1, 13))
    assert len(result.value.stock_movements) == 10
    assert result.value.stock_movements[0].user_name == "Olivia Owner"


def test_other_company_product_behaves_as_missing(db, company, other_company, make_product):
    foreign = make_product(name="Theirs", company_id=other_company.id, min_stock=1)

    assert catalog.get_product(db, foreign.id, company.id).error == ErrorCode.NOT_FOUND
    assert catalog.update_product(db, foreign.id, company.id, {"name": "Hijacked"}).error == ErrorCode.NOT_FOUND
    assert catalog.delete_product(db, foreign.id, company.id).error == ErrorCode.NOT_FOUND

    db.expire_all()
    untouched = db.get(Product, foreign.id)
    assert untouched.name == "Theirs"


def test_update_patches_fields_but_never_stock(db, company, make_product):
    product = make_product(name="Old", current_stock=8, min_stock=1, description="keep me")

    result = catalog.update_product(db, product.id, company.id, {"name": "New", "minStock": 3, "currentStock": 500})

    assert result.ok
    assert result.value.name == "New"
    assert result.value.min_stock == 3
    assert result.value.current_stock == 8
    assert result.value.description == "keep me"


def test_update_rejects_invalid_patch(db, company, make_product):
    product = make_product(name="Old")

    result = catalog.update_product(db, product.id, company.id, {"price": 0})

    assert result.error == ErrorCode.VALIDATION_FAILED
    assert result.field == "price"


def test_delete_without_history(db, company, make_product):
    product = make_product()

    result = catalog.delete_product(db, product.id, company.id)

    assert result.ok
    assert db.query(Product).filter(Product.id == product.id).count() == 0


def test_delete_is_refused_once_the_product_has_movements(db, user, company, make_product):
    product = make_product(current_stock=3)
    db.add(StockMovement(product_id=product.id, user_id=user.id, type=MovementType.IN, quantity=3))
    db.commit()

    result = catalog.delete_product(db, product.id, company.id)

    assert result.error == ErrorCode.CONFLICT
    assert db.query(Product).filter(Product.id == product.id).count() == 1


def test_search_treats_like_wildcards_literally(db, company, make_product):
    make_product(name="Widget")
    make_product(name="Bolt 50% off", sku="BOLT_50")
    make_product(name="Back\\slash")

    assert [p.name for p in catalog.list_products(db, company.id, search="%").value] == ["Bolt 50% off"]
    assert [p.name for p in catalog.list_products(db, company.id, search="_").value] == ["Bolt 50% off"]
    assert [p.name for p in catalog.list_products(db, company.id, search="\\").value] == ["Back\\slash"]


def test_delete_reads_the_product_under_a_row_lock():
    stmt = catalog.locked_product_stmt("p-1", "c-1")

    assert "FOR UPDATE" in str(stmt.compile(dialect=postgresql.dialect()))


def test_delete_loses_to_a_movement_committed_after_the_product_was_read(
    engine, session_factory, db, user, company, make_product,
):
    product = make_product(current_stock=0)
    product_id, user_id = product.id, user.id

    def movement_from_another_request(conn, cursor, statement, parameters, context, executemany):
        if not statement.lstrip().upper().startswith("DELETE FROM PRODUCTS"):
            return
        other = session_factory()
        try:
            other.add(StockMovement(product_id=product_id, user_id=user_id, type=MovementType.IN, quantity=1))
            other.commit()
        finally:
            other.close()

    event.listen(engine, "before_cursor_execute", movement_from_another_request)
    try:
        result = catalog.delete_product(db, product_id, company.id)
    finally:
        event.remove(engine, "before_cursor_execute", movement_from_another_request)

    assert result.error == ErrorCode.CONFLICT
    assert db.query(Product).filter(Product.id == product_id).count() == 1
    assert db.query(StockMovement).filter(StockMovement.product_id == product_id).count() == 1
