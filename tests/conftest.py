import pytest

import retail


@pytest.fixture
def db():
    database = retail.DatabaseManager(":memory:")
    yield database
    database.conn.close()


@pytest.fixture
def accounts(db):
    return retail.AccountManager(db)


@pytest.fixture
def store(db, accounts):
    return retail.StoreManager(db, accounts)


@pytest.fixture
def seeded(db):
    """admin #1 (auto), manager mia #2, customers cal #3 at (10, 10) and dee #4

    store #1 is 4.47 away from cal, store #2 exactly 30, store #3 far away
    """
    users = [
        ("mia", "mia", 20.0, 20.0, "manager"),
        ("cal", "cal", 10.0, 10.0, "customer"),
        ("dee", "dee", 11.0, 11.0, "customer"),
    ]
    db.conn.executemany(
        "INSERT INTO Users(name, password, latitude, longitude, type) VALUES(?,?,?,?,?);", users
    )
    stores = [
        ("Riverside", 2, 12.0, 14.0),
        ("Hilltop", 2, 40.0, 10.0),
        ("Faraway", 1, 50.0, 50.0),
    ]
    db.conn.executemany(
        "INSERT INTO Store(name, managerID, latitude, longitude) VALUES(?,?,?,?);", stores
    )
    products = [
        (1, "Widget", 8, 2.5),
        (1, "Gadget", 20, 10.0),
        (2, "Widget", 4, 2.5),
        (3, "Gizmo", 5, 1.0),
    ]
    db.conn.executemany(
        "INSERT INTO Product(storeID, productName, numberOfUnits, pricePerUnit) VALUES(?,?,?,?);",
        products
    )
    return db


@pytest.fixture
def answers(monkeypatch):
    """script the console: each call to input() returns the next value, then eof"""
    def feed(*values):
        queue = iter(values)

        def fake_input(prompt=""):
            try:
                return next(queue)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr("builtins.input", fake_input)
    return feed
