#!/usr/bin/env python3.13

#           _        _ _
#  _ __ ___| |_ __ _(_) |
# | '__/ _ \ __/ _` | | |
# | | |  __/ || (_| | | |
# |_|  \___|\__\__,_|_|_|  store console 🛒
#
# --sql is used for syntax highlighting inline sql queries

import logging
import logging.handlers
import math
import os
import signal
import sqlite3
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation

# fix windows terminal misinterpreting ansi escape sequences
enable_windows_ansi_interpretation()

logger = logging.getLogger("retail")

# constants
SQLITE_INT_MIN = -2 ** 63
SQLITE_INT_MAX = 2 ** 63 - 1
STORE_RANGE = 30.0
RECENT_LIMIT = 5
POPULAR_LIMIT = 5
DEFAULT_ADMIN = ("admin", "admin")
MAIN_MENU_EXIT = 9
USER_MENU_EXIT = 20
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# helpers
def safe_int(value: str, minimum: int | None = None):
    """return int value or none if invalid, out of sqlite range or below minimum"""
    try:
        v = int(value)
        if not SQLITE_INT_MIN <= v <= SQLITE_INT_MAX:
            return None
        if minimum is not None and v < minimum:
            return None
        return v
    except ValueError:
        return None

def safe_float(value: str, minimum: float | None = None):
    """return float value or none if invalid / below minimum"""
    try:
        v = float(value)
        if math.isnan(v) or (minimum is not None and v < minimum):
            return None
        return v
    except ValueError:
        return None

def ask(label: str) -> str:
    """prompt for a single free-text field"""
    return input(colored(f"\t{label}: ", "magenta")).strip()

def ask_int(label: str, minimum: int | None = None) -> int:
    """prompt until an integer (>= minimum) is entered"""
    while True:
        value = safe_int(ask(label), minimum)
        if value is not None:
            return value
        cprint("Your input is invalid!", "red")

def ask_float(label: str, minimum: float | None = None) -> float:
    """prompt until a decimal number (>= minimum) is entered"""
    while True:
        value = safe_float(ask(label), minimum)
        if value is not None:
            return value
        cprint("Your input is invalid!", "red")

def read_choice() -> int:
    """read a menu number; re-prompts on anything that is not an integer"""
    while True:
        choice = safe_int(input("please make your choice: ").strip())
        if choice is not None:
            return choice
        cprint("Your input is invalid!", "red")

def calculate_distance(lat1, long1, lat2, long2):
    """planar euclidean distance between two coordinate pairs (null in, null out)"""
    if None in (lat1, long1, lat2, long2):
        return None
    return math.sqrt((lat1 - lat2) ** 2 + (long1 - long2) ** 2)

def configure_logging(log_dir: str = "logs", level: int | str = logging.INFO) -> None:
    """send the retail logger to a rotating file; the console belongs to the menus"""
    os.makedirs(log_dir, exist_ok=True)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, "retail.log"),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(file_handler)
    logger.propagate = False

def resolve_db_path(dbname: str, db_dir: str = ".") -> Path:
    """map the cli database name onto an sqlite file"""
    path = Path(db_dir) / dbname
    if not path.suffix:
        path = path.with_suffix(".db")
    return path

# database layer
class DatabaseManager:
    """manage sqlite connection, schema and the statement executors"""
    def __init__(self, path: str | os.PathLike = ":memory:", seed_script: str | None = None):
        self.path = str(path)
        self.conn = sqlite3.connect(self.path)
        self.conn.row_factory = sqlite3.Row
        self.conn.autocommit = True
        self.conn.execute("--sql\nPRAGMA foreign_keys=ON;")
        self.conn.create_function("calculate_distance", 4, calculate_distance, deterministic=True)
        self._create_schema()
        self._seed_default_admin()
        if seed_script:
            self._apply_seed(seed_script)
        logger.info("connected to %s", self.path)

    def _create_schema(self):
        """create tables if missing"""
        self.conn.executescript(
            """--sql
            CREATE TABLE IF NOT EXISTS Users (
                userID INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                password TEXT NOT NULL,
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                type TEXT NOT NULL DEFAULT 'customer'
                    CHECK (type IN ('customer', 'manager', 'admin'))
            );
            CREATE TABLE IF NOT EXISTS Store (
                storeID INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                managerID INTEGER REFERENCES Users(userID),
                latitude REAL NOT NULL,
                longitude REAL NOT NULL,
                dateEstablished TEXT DEFAULT CURRENT_DATE
            );
            CREATE TABLE IF NOT EXISTS Product (
                storeID INTEGER NOT NULL REFERENCES Store(storeID),
                productName TEXT NOT NULL,
                numberOfUnits INTEGER NOT NULL CHECK (numberOfUnits >= 0),
                pricePerUnit REAL NOT NULL,
                PRIMARY KEY (storeID, productName)
            );
            CREATE TABLE IF NOT EXISTS Orders (
                orderNumber INTEGER PRIMARY KEY AUTOINCREMENT,
                customerID INTEGER NOT NULL REFERENCES Users(userID),
                storeID INTEGER NOT NULL,
                productName TEXT NOT NULL,
                unitsOrdered INTEGER NOT NULL,
                orderTime TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now')),
                FOREIGN KEY(storeID, productName) REFERENCES Product(storeID, productName)
            );
            CREATE TABLE IF NOT EXISTS ProductUpdates (
                updateNumber INTEGER PRIMARY KEY AUTOINCREMENT,
                managerID INTEGER NOT NULL REFERENCES Users(userID),
                storeID INTEGER NOT NULL,
                productName TEXT NOT NULL,
                updatedOn TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%f', 'now')),
                FOREIGN KEY(storeID, productName) REFERENCES Product(storeID, productName)
            );
            CREATE TABLE IF NOT EXISTS ProductSupplyRequests (
                requestNumber INTEGER PRIMARY KEY AUTOINCREMENT,
                managerID INTEGER NOT NULL REFERENCES Users(userID),
                warehouseID INTEGER NOT NULL,
                storeID INTEGER NOT NULL,
                productName TEXT NOT NULL,
                unitsRequested INTEGER NOT NULL,
                FOREIGN KEY(storeID, productName) REFERENCES Product(storeID, productName)
            );
            """
        )

    def _seed_default_admin(self):
        """create the default admin if missing"""
        name, password = DEFAULT_ADMIN
        self.conn.execute(
            """--sql
            INSERT INTO Users(name, password, latitude, longitude, type)
            SELECT ?, ?, 0, 0, 'admin'
            WHERE NOT EXISTS (SELECT 1 FROM Users WHERE name=? AND type='admin');
            """,
            (name, password, name)
        )

    def _apply_seed(self, script_path: str):
        """run a seed script once per database file"""
        (version,) = self.conn.execute("PRAGMA user_version;").fetchone()
        if version > 0:
            return
        sql = Path(script_path).read_text(encoding="utf-8")
        self.conn.executescript(sql)
        self.conn.execute("PRAGMA user_version = 1;")
        logger.info("applied seed script %s", script_path)

    @contextmanager
    def transaction(self):
        """all-or-nothing scope; takes the write lock up front"""
        self.conn.execute("BEGIN IMMEDIATE;")
        try:
            yield self.conn
        except BaseException:
            self.conn.execute("ROLLBACK;")
            raise
        self.conn.execute("COMMIT;")

    # executors
    def execute_update(self, sql: str, params: Sequence = ()) -> int:
        """run a statement with no result set, return affected rows"""
        return self.conn.execute(sql, params).rowcount

    def execute_query_and_print_result(self, sql: str, params: Sequence = ()) -> int:
        """print header + tab separated rows, return row count"""
        cur = self.conn.execute(sql, params)
        count = 0
        for row in cur:
            if count == 0:
                print("\t".join(col[0] for col in cur.description))
            print("\t".join(str(value) for value in row))
            count += 1
        return count

    def execute_query_and_return_result(self, sql: str, params: Sequence = ()) -> list[list]:
        """rows as lists of column values, no header"""
        return [list(row) for row in self.conn.execute(sql, params)]

    def execute_query(self, sql: str, params: Sequence = ()) -> int:
        """count result rows without keeping them"""
        return sum(1 for _ in self.conn.execute(sql, params))

    def close(self):
        self.conn.close()
        logger.info("disconnected from %s", self.path)

# accounts/auth
class Role(Enum):
    """stored value of Users.type"""
    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"

@dataclass(frozen=True)
class Session:
    """the logged in user, handed to every menu handler"""
    user_id: int
    name: str

@dataclass(frozen=True)
class Authorization:
    """outcome of a successful role claim"""
    actor_id: int
    role: Role
    store_id: int | None = None

class AccountManager:
    """user creation, login and role checks (plain text passwords, as stored)"""
    def __init__(self, db: DatabaseManager):
        self.db = db

    def create_user(self, name: str, password: str, latitude: float, longitude: float) -> int:
        """insert a customer row and return its id"""
        cur = self.db.conn.execute(
            "INSERT INTO Users(name, password, latitude, longitude, type) VALUES(?,?,?,?,?);",
            (name, password, latitude, longitude, Role.CUSTOMER.value)
        )
        logger.info("created user #%s (%s)", cur.lastrowid, name)
        return cur.lastrowid

    def register(self):
        """interactive user creation"""
        name = ask("enter name")
        password = ask("enter password")
        if not name or not password:
            cprint("name and password are required", "red"); return
        latitude = ask_float("enter latitude")
        longitude = ask_float("enter longitude")
        uid = self.create_user(name, password, latitude, longitude)
        cprint(f"user successfully created! your user id is {colored(str(uid), 'yellow', attrs=['bold'])}", "green")

    def authenticate(self, name: str, user_id: int, password: str) -> Session | None:
        """exact match on name, id and password"""
        row = self.db.conn.execute(
            "SELECT userID, name FROM Users WHERE name=? AND userID=? AND password=?;",
            (name, user_id, password)
        ).fetchone()
        if not row:
            return None
        return Session(user_id=row["userID"], name=row["name"])

    def login(self) -> Session | None:
        """interactive login"""
        name = ask("enter name")
        user_id = safe_int(ask("enter user id"))
        password = ask("enter password")
        session = self.authenticate(name, user_id, password) if user_id is not None else None
        if session is None:
            logger.warning("failed login for %r", name)
            cprint("user not found", "red")
            return None
        logger.info("user #%s logged in", session.user_id)
        cprint(f"logged in as {colored(session.name, 'yellow', attrs=['bold'])}", "green")
        return session

    def _has_role(self, user_id: int, *roles: Role) -> bool:
        marks = ",".join("?" for _ in roles)
        return self.db.execute_query(
            f"SELECT type FROM Users WHERE userID=? AND type IN ({marks});",
            (user_id, *(r.value for r in roles))
        ) > 0

    def check_manager(self, claimed_id: int) -> bool:
        """true if the id belongs to a manager or an admin"""
        return self._has_role(claimed_id, Role.MANAGER, Role.ADMIN)

    def check_admin(self, claimed_id: int) -> bool:
        return self._has_role(claimed_id, Role.ADMIN)

    def store_belongs_manager(self, store_id: int, manager_id: int) -> bool:
        return self.db.execute_query(
            "SELECT storeID FROM Store WHERE storeID=? AND managerID=?;",
            (store_id, manager_id)
        ) > 0

    def claim_admin(self, session: Session) -> int | None:
        """ask for an admin id and confirm it is the session's own"""
        claimed = ask_int("enter admin id")
        if not self.check_admin(claimed):
            logger.warning("user #%s failed admin claim with id %s", session.user_id, claimed)
            cprint("error: not an admin id", "red"); return None
        if claimed != session.user_id:
            logger.warning("user #%s claimed admin id %s", session.user_id, claimed)
            cprint("error: not correct admin id", "red"); return None
        return claimed

    def claim_role(self, session: Session, store_for_admin: bool = True) -> Authorization | None:
        """manager/admin option prompt; managers must also own the store they pick"""
        print("\noptions\n-------\n1. manager\n2. admin\n3. cancel")
        choice = read_choice()
        if choice == 1:
            claimed = ask_int("enter manager id")
            if not self.check_manager(claimed):
                logger.warning("user #%s failed manager claim with id %s", session.user_id, claimed)
                cprint("error: not a manager id", "red"); return None
            if claimed != session.user_id:
                logger.warning("user #%s claimed manager id %s", session.user_id, claimed)
                cprint("error: not correct manager id", "red"); return None
            store_id = ask_int("enter store id")
            if not self.store_belongs_manager(store_id, session.user_id):
                cprint("error: invalid store id", "red"); return None
            return Authorization(claimed, Role.MANAGER, store_id)
        if choice == 2:
            claimed = self.claim_admin(session)
            if claimed is None:
                return None
            store_id = ask_int("enter store id") if store_for_admin else None
            return Authorization(claimed, Role.ADMIN, store_id)
        if choice == 3:
            return None
        cprint("Unrecognized choice!", "red")
        return None

# store operations
STORES_IN_RANGE_SQL = """--sql
    SELECT s.storeID, s.name,
           calculate_distance(u.latitude, u.longitude, s.latitude, s.longitude) AS dist
    FROM Users u, Store s
    WHERE u.userID=?
      AND calculate_distance(u.latitude, u.longitude, s.latitude, s.longitude) < ?
    ORDER BY dist, s.storeID;
"""

class StoreManager:
    """orders, inventory, supply requests, reports and admin maintenance"""
    def __init__(self, db: DatabaseManager, account_manager: AccountManager):
        self.db = db
        self.account_manager = account_manager

    # db ops
    def stores_in_range(self, user_id: int) -> list[list]:
        """[storeID, name, dist] rows strictly inside STORE_RANGE"""
        return self.db.execute_query_and_return_result(STORES_IN_RANGE_SQL, (user_id, STORE_RANGE))

    def store_in_range(self, user_id: int, store_id: int) -> bool:
        return any(row[0] == store_id for row in self.stores_in_range(user_id))

    def fetch_units(self, store_id: int, product_name: str) -> int | None:
        row = self.db.conn.execute(
            "SELECT numberOfUnits FROM Product WHERE storeID=? AND productName=?;",
            (store_id, product_name)
        ).fetchone()
        return row["numberOfUnits"] if row else None

    def create_order(self, customer_id: int, store_id: int, product_name: str, units: int) -> int | None:
        """decrement stock and record the order; none if stock is short"""
        with self.db.transaction() as conn:
            cur = conn.execute(
                """--sql
                UPDATE Product SET numberOfUnits = numberOfUnits - ?
                WHERE storeID=? AND productName=? AND numberOfUnits >= ?;
                """,
                (units, store_id, product_name, units)
            )
            if cur.rowcount == 0:
                return None
            cur = conn.execute(
                "INSERT INTO Orders(customerID, storeID, productName, unitsOrdered) VALUES(?,?,?,?);",
                (customer_id, store_id, product_name, units)
            )
        logger.info("order #%s: user #%s bought %s x %r at store #%s",
                    cur.lastrowid, customer_id, units, product_name, store_id)
        return cur.lastrowid

    def update_product_record(self, actor_id: int, store_id: int, product_name: str,
                              units: int, price: float) -> bool:
        """overwrite stock + price and audit it; false if no such product"""
        with self.db.transaction() as conn:
            cur = conn.execute(
                "UPDATE Product SET numberOfUnits=?, pricePerUnit=? WHERE storeID=? AND productName=?;",
                (units, price, store_id, product_name)
            )
            if cur.rowcount == 0:
                return False
            conn.execute(
                "INSERT INTO ProductUpdates(managerID, storeID, productName) VALUES(?,?,?);",
                (actor_id, store_id, product_name)
            )
        logger.info("user #%s updated %r at store #%s", actor_id, product_name, store_id)
        return True

    def create_supply_request(self, actor_id: int, warehouse_id: int, store_id: int,
                              product_name: str, units: int) -> bool:
        """record the request and restock right away; false if no such product"""
        with self.db.transaction() as conn:
            cur = conn.execute(
                "UPDATE Product SET numberOfUnits = numberOfUnits + ? WHERE storeID=? AND productName=?;",
                (units, store_id, product_name)
            )
            if cur.rowcount == 0:
                return False
            conn.execute(
                """--sql
                INSERT INTO ProductSupplyRequests(managerID, warehouseID, storeID, productName, unitsRequested)
                VALUES(?,?,?,?,?);
                """,
                (actor_id, warehouse_id, store_id, product_name, units)
            )
        logger.info("user #%s requested %s x %r for store #%s from warehouse #%s",
                    actor_id, units, product_name, store_id, warehouse_id)
        return True

    def update_user_record(self, user_id: int, name: str, password: str,
                           latitude: float, longitude: float, role: Role) -> bool:
        updated = self.db.execute_update(
            "UPDATE Users SET name=?, password=?, latitude=?, longitude=?, type=? WHERE userID=?;",
            (name, password, latitude, longitude, role.value, user_id)
        )
        if updated:
            logger.info("user #%s updated (type %s)", user_id, role.value)
        return updated > 0

    def delete_user(self, user_id: int) -> bool:
        """remove the user's orders, then the user"""
        with self.db.transaction() as conn:
            conn.execute("DELETE FROM Orders WHERE customerID=?;", (user_id,))
            deleted = conn.execute("DELETE FROM Users WHERE userID=?;", (user_id,)).rowcount
        if deleted:
            logger.info("user #%s deleted", user_id)
        return deleted > 0

    def add_product(self, store_id: int, product_name: str, units: int, price: float):
        self.db.execute_update(
            "INSERT INTO Product(storeID, productName, numberOfUnits, pricePerUnit) VALUES(?,?,?,?);",
            (store_id, product_name, units, price)
        )
        logger.info("product %r added to store #%s", product_name, store_id)

    def delete_product(self, product_name: str) -> int:
        """remove a product name from every store along with everything that references it"""
        with self.db.transaction() as conn:
            for table in ("Orders", "ProductUpdates", "ProductSupplyRequests"):
                conn.execute(f"DELETE FROM {table} WHERE productName=?;", (product_name,))
            deleted = conn.execute("DELETE FROM Product WHERE productName=?;", (product_name,)).rowcount
        logger.info("product %r deleted from %s store(s)", product_name, deleted)
        return deleted

    def _print_rows(self, sql: str, params: Sequence = ()):
        count = self.db.execute_query_and_print_result(sql, params)
        print(f"total row(s): {count}")

    # customer actions
    def view_stores(self, session: Session):
        """stores within range of the session user"""
        self._print_rows(STORES_IN_RANGE_SQL, (session.user_id, STORE_RANGE))

    def view_products(self, session: Session):
        store_id = ask_int("enter store id")
        self._print_rows(
            "SELECT * FROM Product WHERE storeID=? ORDER BY productName;",
            (store_id,)
        )

    def place_order(self, session: Session):
        """customer order against a nearby store"""
        if self.account_manager.check_manager(session.user_id):
            cprint("must be logged in as a customer!", "red"); return
        store_id = ask_int("enter store id")
        product_name = ask("enter product name")
        units = ask_int("enter # of units", minimum=1)
        if not self.store_in_range(session.user_id, store_id):
            cprint("store not in range", "red"); return
        if self.fetch_units(store_id, product_name) is None:
            cprint(f"store #{store_id} does not sell {product_name!r}", "red"); return
        order_number = self.create_order(session.user_id, store_id, product_name, units)
        if order_number is None:
            cprint("not enough inventory in store!", "red"); return
        cprint(f"order #{order_number} placed: {units} x {product_name}", "green")

    def view_recent_orders(self, session: Session):
        if self.account_manager.check_manager(session.user_id):
            cprint("must be logged in as a customer!", "red"); return
        self._print_rows(
            """--sql
            SELECT O.storeID, S.name, O.productName, O.unitsOrdered, O.orderTime
            FROM Orders O
            JOIN Store S ON S.storeID = O.storeID
            WHERE O.customerID=?
            ORDER BY O.orderTime DESC, O.orderNumber DESC
            LIMIT ?;
            """,
            (session.user_id, RECENT_LIMIT)
        )

    # manager actions
    def update_product(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        product_name = ask("enter product name")
        units = ask_int("enter # of units", minimum=0)
        price = ask_float("enter cost", minimum=0)
        if self.update_product_record(auth.actor_id, auth.store_id, product_name, units, price):
            cprint(f"{product_name} updated", "green")
        else:
            cprint(f"store #{auth.store_id} does not sell {product_name!r}", "red")

    def view_recent_updates(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        self._print_rows(
            """--sql
            SELECT P.updateNumber, P.managerID, P.storeID, P.productName, P.updatedOn
            FROM ProductUpdates P
            JOIN Users U ON U.userID = P.managerID
            WHERE P.storeID=?
            ORDER BY P.updatedOn DESC, P.updateNumber DESC
            LIMIT ?;
            """,
            (auth.store_id, RECENT_LIMIT)
        )

    def view_popular_products(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        self._print_rows(
            """--sql
            SELECT productName, COUNT(*) AS Orders_Made
            FROM Orders
            WHERE storeID=?
            GROUP BY productName
            ORDER BY Orders_Made DESC, productName
            LIMIT ?;
            """,
            (auth.store_id, POPULAR_LIMIT)
        )

    def view_popular_customers(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        self._print_rows(
            """--sql
            SELECT O.storeID, U.name, O.customerID, COUNT(*) AS Orders_Made
            FROM Orders O
            JOIN Users U ON U.userID = O.customerID
            WHERE O.storeID=?
            GROUP BY O.customerID, O.storeID, U.name
            ORDER BY Orders_Made DESC, O.customerID
            LIMIT ?;
            """,
            (auth.store_id, POPULAR_LIMIT)
        )

    def place_supply_request(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        product_name = ask("enter product name")
        units = ask_int("enter # of units", minimum=1)
        warehouse_id = ask_int("enter warehouse id", minimum=1)
        if self.create_supply_request(auth.actor_id, warehouse_id, auth.store_id, product_name, units):
            cprint(f"requested {units} x {product_name} from warehouse #{warehouse_id}", "green")
        else:
            cprint(f"store #{auth.store_id} does not sell {product_name!r}", "red")

    def view_all_orders(self, session: Session):
        auth = self.account_manager.claim_role(session)
        if auth is None:
            return
        self._print_rows(
            """--sql
            SELECT O.orderNumber, U.name, O.storeID, O.productName, O.orderTime
            FROM Orders O
            JOIN Users U ON U.userID = O.customerID
            WHERE O.storeID=?
            ORDER BY O.orderNumber;
            """,
            (auth.store_id,)
        )

    def view_all_supply_requests(self, session: Session):
        """managers see their store, admins see everything"""
        auth = self.account_manager.claim_role(session, store_for_admin=False)
        if auth is None:
            return
        if auth.role is Role.ADMIN:
            self._print_rows("SELECT * FROM ProductSupplyRequests ORDER BY requestNumber;")
        else:
            self._print_rows(
                "SELECT * FROM ProductSupplyRequests WHERE storeID=? ORDER BY requestNumber;",
                (auth.store_id,)
            )

    # admin actions
    def view_all_users(self, session: Session):
        if self.account_manager.claim_admin(session) is None:
            return
        self._print_rows("SELECT userID, name, latitude, longitude, type FROM Users ORDER BY userID;")

    def view_all_products(self, session: Session):
        if self.account_manager.claim_admin(session) is None:
            return
        self._print_rows("SELECT * FROM Product ORDER BY storeID, productName;")

    def update_user_info(self, session: Session):
        """admin: overwrite or remove a user"""
        if self.account_manager.claim_admin(session) is None:
            return
        print("\noptions\n-------\n1. update user info\n2. remove user\n3. cancel")
        choice = read_choice()
        if choice == 1:
            user_id = ask_int("input user id to update")
            name = ask("input name")
            password = ask("input password")
            latitude = ask_float("input latitude")
            longitude = ask_float("input longitude")
            try:
                role = Role(ask("input type").lower())
            except ValueError:
                cprint(f"type must be one of: {', '.join(r.value for r in Role)}", "red"); return
            if self.update_user_record(user_id, name, password, latitude, longitude, role):
                cprint(f"user #{user_id} updated", "green")
            else:
                cprint(f"user #{user_id} not found", "red")
        elif choice == 2:
            user_id = ask_int("input user id to delete")
            if self.delete_user(user_id):
                cprint(f"user #{user_id} and their orders removed", "green")
            else:
                cprint(f"user #{user_id} not found", "red")
        elif choice != 3:
            cprint("Unrecognized choice!", "red")

    def update_product_info(self, session: Session):
        """admin: add a product to a store or remove a product name everywhere"""
        if self.account_manager.claim_admin(session) is None:
            return
        print("\noptions\n-------\n1. add product\n2. remove product\n3. cancel")
        choice = read_choice()
        if choice == 1:
            product_name = ask("input new product name")
            store_id = ask_int("input store id")
            units = ask_int("input number of units", minimum=0)
            price = ask_float("input price per unit", minimum=0)
            self.add_product(store_id, product_name, units, price)
            cprint(f"{product_name} added to store #{store_id}", "green")
        elif choice == 2:
            product_name = ask("input product name to delete")
            deleted = self.delete_product(product_name)
            if deleted:
                cprint(f"{product_name} removed from {deleted} store(s)", "green")
            else:
                cprint(f"no product named {product_name!r}", "red")
        elif choice != 3:
            cprint("Unrecognized choice!", "red")

# command infrastructure
class Command:
    """bind a menu number to a function"""
    def __init__(self, number: int, function: Callable, description: str):
        self.number = number
        self._fn = function
        self.description = description

    def execute(self, *args):
        """invoke the handler; database errors end the command, not the program"""
        try:
            return self._fn(*args)
        except sqlite3.Error as e:
            logger.error("%s failed: %s", self.description.lower(), e)
            cprint(f"database error: {e}", "red")

class Menu:
    """numbered menu loop"""
    def __init__(self, title: str, commands: list[Command], exit_number: int, exit_label: str):
        self.title = title
        self.commands = commands
        self.exit_number = exit_number
        self.exit_label = exit_label

    def show(self):
        cprint(f"\n{self.title}", "green", attrs=["bold"])
        print("-" * len(self.title))
        for cmd in self.commands:
            print(f"{colored(str(cmd.number), 'blue')}. {cmd.description}")
        print(".........................")
        print(f"{colored(str(self.exit_number), 'blue')}. {self.exit_label}")

    def run(self, *args):
        """loop until the exit number; args are passed to every handler"""
        while True:
            self.show()
            choice = read_choice()
            if choice == self.exit_number:
                return
            cmd = next((c for c in self.commands if c.number == choice), None)
            if cmd is None:
                cprint("Unrecognized choice!", "red")
                continue
            cmd.execute(*args)

# application wiring
class Application:
    """bootstrap managers & menus around an open database"""
    def __init__(self, db: DatabaseManager):
        self.db = db
        self.account_manager = AccountManager(db)
        self.store_manager = StoreManager(db, self.account_manager)
        store = self.store_manager

        self.main_menu = Menu("main menu", [
            Command(1, self.account_manager.register, "Create user"),
            Command(2, self.log_in, "Log in"),
        ], MAIN_MENU_EXIT, "< EXIT")

        self.user_menu = Menu("user menu", [
            Command(1, store.view_stores, f"View stores within {STORE_RANGE:g} miles"),
            Command(2, store.view_products, "View product list"),
            Command(3, store.place_order, "Place an order"),
            Command(4, store.view_recent_orders, f"View {RECENT_LIMIT} recent orders"),
            # manager commands
            Command(5, store.update_product, "Update product"),
            Command(6, store.view_recent_updates, f"View {RECENT_LIMIT} recent product updates"),
            Command(7, store.view_popular_products, f"View {POPULAR_LIMIT} popular items"),
            Command(8, store.view_popular_customers, f"View {POPULAR_LIMIT} popular customers"),
            Command(9, store.place_supply_request, "Place product supply request to warehouse"),
            Command(10, store.view_all_orders, "View all order information"),
            Command(11, store.view_all_supply_requests, "View all product supply requests"),
            # admin commands
            Command(12, store.view_all_users, "View all user information"),
            Command(13, store.view_all_products, "View all product information"),
            Command(14, store.update_user_info, "Update user information"),
            Command(15, store.update_product_info, "Update product information"),
        ], USER_MENU_EXIT, "Log out")

    def log_in(self):
        """login, then serve the user menu until logout"""
        session = self.account_manager.login()
        if session is None:
            return
        self.user_menu.run(session)
        logger.info("user #%s logged out", session.user_id)
        cprint(f"logged out user #{session.user_id}", "green")

    def run(self):
        """main loop; the connection is closed however it ends"""
        cprint("""
*******************************************************
                  retail store console 🛒
*******************************************************""", "green", attrs=["bold"])
        try:
            self.main_menu.run()
        except EOFError:
            print()
        finally:
            print("disconnecting from database...", end=" ")
            self.db.close()
            cprint("done\n\nbye!", "green")

# entry point
def main(argv: list[str] | None = None) -> int:
    """entrypoint: retail <dbname> <port> <user>"""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 3:
        cprint("usage: retail <dbname> <port> <user>", "red", file=sys.stderr)
        return 2
    dbname, port, user = args
    log_dir = os.environ.get("RETAIL_LOG_DIR", "logs")
    try:
        configure_logging(log_dir, os.environ.get("RETAIL_LOG_LEVEL", "INFO").upper())
    except OSError as e:
        cprint(f"error - unable to open log directory {log_dir}: {e}", "red", file=sys.stderr)
        return 1
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    path = resolve_db_path(dbname, os.environ.get("RETAIL_DB_DIR", "."))
    print(f"connecting to database... sqlite:///{path} (port {port}, user {user})")
    logger.info("opening %s for %s (port %s)", path, user, port)
    try:
        db = DatabaseManager(path, seed_script=os.environ.get("RETAIL_SEED_SQL"))
    except (sqlite3.Error, OSError) as e:
        logger.critical("unable to open %s: %s", path, e)
        cprint(f"error - unable to connect to database: {e}", "red", file=sys.stderr)
        return 1
    cprint("done", "green")
    Application(db).run()
    return 0

# signal handler
class SignalHandler:
    """ctrl+c leaves through the normal shutdown path"""
    @staticmethod
    def sigint(_, __):
        """handle ctrl+c"""
        cprint("\nnext time, use exit!", "yellow")
        sys.exit(0)

if __name__ == "__main__":
    sys.exit(main())
