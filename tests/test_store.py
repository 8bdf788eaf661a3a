import sqlite3

import pytest

from retail import Session

ADMIN = Session(1, "admin")
MANAGER = Session(2, "mia")
CUSTOMER = Session(3, "cal")


def units(db, store_id, product_name):
    row = db.conn.execute(
        "SELECT numberOfUnits FROM Product WHERE storeID=? AND productName=?;", (store_id, product_name)
    ).fetchone()
    return row[0] if row else None


def count(db, sql, params=()):
    return db.execute_query(sql, params)


def test_stores_in_range_excludes_exactly_thirty(seeded, store):
    rows = store.stores_in_range(3)
    assert [r[:2] for r in rows] == [[1, "Riverside"]]
    assert rows[0][2] == pytest.approx(4.4721, abs=1e-4)


def test_store_just_inside_range_is_included(seeded, store):
    seeded.execute_update(
        "INSERT INTO Store(name, managerID, latitude, longitude) VALUES('Corner', 2, 39.9, 10);"
    )
    assert [r[0] for r in store.stores_in_range(3)] == [1, 4]


def test_view_stores_prints_total(seeded, store, capsys):
    store.view_stores(CUSTOMER)
    out = capsys.readouterr().out
    assert "storeID\tname\tdist" in out
    assert "total row(s): 1" in out


def test_order_example_scenario(seeded, store):
    assert store.create_order(3, 1, "Widget", 5) is not None
    assert units(seeded, 1, "Widget") == 3
    assert count(seeded, "SELECT * FROM Orders WHERE unitsOrdered=5;") == 1

    assert store.create_order(3, 1, "Widget", 10) is None
    assert units(seeded, 1, "Widget") == 3
    assert count(seeded, "SELECT * FROM Orders;") == 1


def test_order_for_entire_stock(seeded, store):
    assert store.create_order(3, 1, "Widget", 8) is not None
    assert units(seeded, 1, "Widget") == 0


def test_place_order_interactive(seeded, store, answers, capsys):
    answers("1", "Widget", "5")
    store.place_order(CUSTOMER)
    assert "order #1 placed: 5 x Widget" in capsys.readouterr().out

    answers("1", "Widget", "10")
    store.place_order(CUSTOMER)
    assert "not enough inventory in store!" in capsys.readouterr().out
    assert units(seeded, 1, "Widget") == 3


def test_place_order_reprompts_bad_units(seeded, store, answers, capsys):
    answers("1", "Widget", "0", "two", "2")
    store.place_order(CUSTOMER)
    out = capsys.readouterr().out
    assert out.count("Your input is invalid!") == 2
    assert units(seeded, 1, "Widget") == 6


def test_place_order_rejects_staff(seeded, store, answers, capsys):
    answers()
    store.place_order(MANAGER)
    store.place_order(ADMIN)
    assert capsys.readouterr().out.count("must be logged in as a customer!") == 2
    assert count(seeded, "SELECT * FROM Orders;") == 0


def test_place_order_store_out_of_range(seeded, store, answers, capsys):
    answers("2", "Widget", "1")
    store.place_order(CUSTOMER)
    assert "store not in range" in capsys.readouterr().out
    assert units(seeded, 2, "Widget") == 4


def test_place_order_unknown_product(seeded, store, answers, capsys):
    answers("1", "Gizmo", "1")
    store.place_order(CUSTOMER)
    assert "does not sell 'Gizmo'" in capsys.readouterr().out
    assert count(seeded, "SELECT * FROM Orders;") == 0


def test_view_recent_orders_caps_at_five(seeded, store, capsys):
    for _ in range(6):
        store.create_order(3, 1, "Gadget", 1)
    store.view_recent_orders(CUSTOMER)
    out = capsys.readouterr().out
    assert "total row(s): 5" in out
    assert "storeID\tname\tproductName\tunitsOrdered\torderTime" in out


def test_update_product_writes_audit_row(seeded, store, answers):
    answers("1", "2", "1", "Widget", "50", "3.25")
    store.update_product(MANAGER)
    row = seeded.conn.execute(
        "SELECT numberOfUnits, pricePerUnit FROM Product WHERE storeID=1 AND productName='Widget';"
    ).fetchone()
    assert tuple(row) == (50, 3.25)
    assert seeded.execute_query_and_return_result(
        "SELECT managerID, storeID, productName FROM ProductUpdates;"
    ) == [[2, 1, "Widget"]]


def test_update_unknown_product_changes_nothing(seeded, store, answers, capsys):
    answers("2", "1", "3", "Widget", "50", "3")
    store.update_product(ADMIN)
    assert "does not sell 'Widget'" in capsys.readouterr().out
    assert count(seeded, "SELECT * FROM ProductUpdates;") == 0


def test_update_product_needs_a_valid_claim(seeded, store, answers, capsys):
    answers("1", "2", "3")
    store.update_product(MANAGER)
    assert "invalid store id" in capsys.readouterr().out
    assert count(seeded, "SELECT * FROM ProductUpdates;") == 0


def test_view_recent_updates(seeded, store, answers, capsys):
    for price in (1, 2, 3):
        store.update_product_record(2, 1, "Gadget", 10, price)
    answers("1", "2", "1")
    store.view_recent_updates(MANAGER)
    assert "total row(s): 3" in capsys.readouterr().out


def test_supply_request_restocks_immediately(seeded, store, answers, capsys):
    answers("1", "2", "1", "Gadget", "5", "7")
    store.place_supply_request(MANAGER)
    assert "requested 5 x Gadget from warehouse #7" in capsys.readouterr().out
    assert units(seeded, 1, "Gadget") == 25
    assert seeded.execute_query_and_return_result(
        "SELECT managerID, warehouseID, storeID, productName, unitsRequested FROM ProductSupplyRequests;"
    ) == [[2, 7, 1, "Gadget", 5]]


def test_supply_request_unknown_product(seeded, store):
    assert not store.create_supply_request(2, 7, 1, "Gizmo", 5)
    assert count(seeded, "SELECT * FROM ProductSupplyRequests;") == 0


def test_supply_requests_visible_per_role(seeded, store, answers, capsys):
    store.create_supply_request(2, 7, 1, "Gadget", 5)
    store.create_supply_request(1, 7, 3, "Gizmo", 5)
    answers("1", "2", "1")
    store.view_all_supply_requests(MANAGER)
    assert "total row(s): 1" in capsys.readouterr().out
    answers("2", "1")
    store.view_all_supply_requests(ADMIN)
    assert "total row(s): 2" in capsys.readouterr().out


def test_popular_products_ordered_by_count(seeded, store, answers, capsys):
    store.create_order(3, 1, "Widget", 1)
    store.create_order(4, 1, "Widget", 1)
    store.create_order(3, 1, "Gadget", 1)
    answers("1", "2", "1")
    store.view_popular_products(MANAGER)
    out = capsys.readouterr().out
    assert "productName\tOrders_Made\nWidget\t2\nGadget\t1\n" in out


def test_popular_customers_ordered_by_count(seeded, store, answers, capsys):
    store.create_order(4, 1, "Widget", 1)
    store.create_order(3, 1, "Gadget", 1)
    store.create_order(4, 1, "Gadget", 1)
    answers("1", "2", "1")
    store.view_popular_customers(MANAGER)
    out = capsys.readouterr().out
    assert "1\tdee\t4\t2\n1\tcal\t3\t1\n" in out


def test_view_all_orders_for_store(seeded, store, answers, capsys):
    store.create_order(3, 1, "Widget", 1)
    store.create_order(4, 1, "Gadget", 2)
    answers("2", "1", "1")
    store.view_all_orders(ADMIN)
    assert "total row(s): 2" in capsys.readouterr().out


def test_admin_views(seeded, store, answers, capsys):
    answers("1")
    store.view_all_users(ADMIN)
    out = capsys.readouterr().out
    assert "total row(s): 4" in out
    assert "password" not in out
    answers("1")
    store.view_all_products(ADMIN)
    assert "total row(s): 4" in capsys.readouterr().out


def test_admin_views_reject_non_admin(seeded, store, answers, capsys):
    answers("2")
    store.view_all_users(MANAGER)
    out = capsys.readouterr().out
    assert "not an admin id" in out
    assert "total row(s)" not in out


def test_delete_user_removes_orders_first(seeded, store):
    store.create_order(3, 1, "Widget", 1)
    store.create_order(3, 1, "Gadget", 1)
    store.create_order(4, 1, "Gadget", 1)
    assert store.delete_user(3)
    assert count(seeded, "SELECT * FROM Orders WHERE customerID=3;") == 0
    assert count(seeded, "SELECT * FROM Users WHERE userID=3;") == 0
    assert count(seeded, "SELECT * FROM Orders;") == 1


def test_failed_user_delete_keeps_orders(seeded, store):
    store.create_order(3, 1, "Widget", 1)
    seeded.execute_update(
        "INSERT INTO ProductUpdates(managerID, storeID, productName) VALUES(3, 1, 'Widget');"
    )
    with pytest.raises(sqlite3.IntegrityError):
        store.delete_user(3)
    assert count(seeded, "SELECT * FROM Orders WHERE customerID=3;") == 1
    assert count(seeded, "SELECT * FROM Users WHERE userID=3;") == 1


def test_delete_unknown_user(seeded, store):
    assert not store.delete_user(99)


def test_delete_product_spans_every_store(seeded, store):
    store.create_order(3, 1, "Widget", 1)
    seeded.execute_update("INSERT INTO Orders(customerID, storeID, productName, unitsOrdered) VALUES(4, 2, 'Widget', 1);")
    store.update_product_record(2, 2, "Widget", 9, 2.0)
    store.create_supply_request(2, 5, 1, "Widget", 3)

    assert store.delete_product("Widget") == 2
    for table in ("Product", "Orders", "ProductUpdates", "ProductSupplyRequests"):
        assert count(seeded, f"SELECT * FROM {table} WHERE productName='Widget';") == 0
    assert units(seeded, 1, "Gadget") == 20


def test_update_user_info(seeded, store, answers, capsys):
    answers("1", "1", "3", "carl", "pw", "12", "12", "Manager")
    store.update_user_info(ADMIN)
    assert "user #3 updated" in capsys.readouterr().out
    row = seeded.conn.execute("SELECT name, password, latitude, type FROM Users WHERE userID=3;").fetchone()
    assert tuple(row) == ("carl", "pw", 12.0, "manager")


def test_update_user_info_rejects_unknown_type(seeded, store, answers, capsys):
    answers("1", "1", "3", "carl", "pw", "12", "12", "boss")
    store.update_user_info(ADMIN)
    assert "type must be one of" in capsys.readouterr().out
    assert seeded.conn.execute("SELECT name FROM Users WHERE userID=3;").fetchone()[0] == "cal"


def test_remove_user_interactive(seeded, store, answers, capsys):
    answers("1", "2", "4")
    store.update_user_info(ADMIN)
    assert "user #4 and their orders removed" in capsys.readouterr().out


def test_add_and_remove_product_interactive(seeded, store, answers, capsys):
    answers("1", "1", "Doohickey", "1", "3", "4.5")
    store.update_product_info(ADMIN)
    assert units(seeded, 1, "Doohickey") == 3
    answers("1", "2", "Doohickey")
    store.update_product_info(ADMIN)
    assert "Doohickey removed from 1 store(s)" in capsys.readouterr().out
    assert units(seeded, 1, "Doohickey") is None
