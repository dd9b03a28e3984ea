"""
Test configuration and fixtures for pytest.

MongoDB is replaced by an in-memory mock that speaks the subset of the Motor
API the repositories use, including sessions whose transactions roll back
every collection except the id counters on abort.
"""
import copy
import os
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from restaurant_app.config import settings  # noqa: E402
from restaurant_app.database import Collections, Database  # noqa: E402
from restaurant_app.main import app  # noqa: E402
from restaurant_app.repositories import (  # noqa: E402
    EmployeeRepository,
    MenuRepository,
    RestaurantEmployeeRepository,
    RestaurantRepository
)
from restaurant_app.services import EmployeeService, RestaurantService  # noqa: E402

READ_OPERATIONS = {"find", "find_one", "count_documents"}
# Written only outside sessions, so aborts never roll them back
SESSIONLESS_COLLECTIONS = {Collections.COUNTERS}


class MockInsertOneResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class MockDeleteResult:
    def __init__(self, deleted_count):
        self.deleted_count = deleted_count


class MockCursor:
    """Mock Motor cursor"""

    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction=1):
        self.documents.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self.documents if length is None else self.documents[:length]


class MockCollection:
    """Mock Motor collection"""

    def __init__(self, name, database):
        self.name = name
        self.database = database
        self.documents = []
        self.unique_indexes = []

    def _log(self, operation):
        self.database.operations.append((self.name, operation))

    @staticmethod
    def _matches(doc, query):
        for key, condition in (query or {}).items():
            value = doc.get(key)
            if isinstance(condition, dict):
                for op, arg in condition.items():
                    if op == "$in":
                        if value not in arg:
                            return False
                    elif op == "$ne":
                        if value == arg:
                            return False
                    else:
                        raise NotImplementedError(op)
            elif value != condition or key not in doc:
                return False
        return True

    @staticmethod
    def _apply(doc, update):
        for op, fields in update.items():
            if op == "$set":
                doc.update(copy.deepcopy(fields))
            elif op == "$unset":
                for key in fields:
                    doc.pop(key, None)
            elif op == "$inc":
                for key, amount in fields.items():
                    doc[key] = doc.get(key, 0) + amount
            else:
                raise NotImplementedError(op)
        return doc

    def _check_unique(self, candidate, exclude=None):
        indexes = [(["_id"], False)] + self.unique_indexes
        for keys, sparse in indexes:
            if sparse and any(key not in candidate for key in keys):
                continue
            key_value = tuple(candidate.get(key) for key in keys)
            for doc in self.documents:
                if doc is exclude:
                    continue
                if sparse and any(key not in doc for key in keys):
                    continue
                if tuple(doc.get(key) for key in keys) == key_value:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name}",
                        code=11000,
                        details={"keyValue": dict(zip(keys, key_value))}
                    )

    async def create_index(self, keys, unique=False, sparse=False, **kwargs):
        self._log("create_index")
        fields = [key for key, _ in keys]
        if unique and (fields, sparse) not in self.unique_indexes:
            self.unique_indexes.append((fields, sparse))
        return "_".join(f"{key}_1" for key in fields)

    async def insert_one(self, document, session=None):
        self._log("insert_one")
        document.setdefault("_id", ObjectId())
        doc = copy.deepcopy(document)
        self._check_unique(doc)
        self.documents.append(doc)
        return MockInsertOneResult(doc["_id"])

    async def find_one(self, query, session=None):
        self._log("find_one")
        for doc in self.documents:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None, session=None):
        self._log("find")
        return MockCursor([
            copy.deepcopy(doc) for doc in self.documents if self._matches(doc, query)
        ])

    async def count_documents(self, query, limit=0, session=None):
        self._log("count_documents")
        count = sum(1 for doc in self.documents if self._matches(doc, query))
        return min(count, limit) if limit else count

    async def find_one_and_update(
        self,
        query,
        update,
        upsert=False,
        return_document=ReturnDocument.BEFORE,
        session=None
    ):
        self._log("find_one_and_update")
        for doc in self.documents:
            if self._matches(doc, query):
                before = copy.deepcopy(doc)
                after = self._apply(copy.deepcopy(doc), update)
                self._check_unique(after, exclude=doc)
                doc.clear()
                doc.update(after)
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

        if not upsert:
            return None

        new_doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        new_doc = self._apply(new_doc, update)
        new_doc.setdefault("_id", ObjectId())
        self._check_unique(new_doc)
        self.documents.append(new_doc)
        return copy.deepcopy(new_doc) if return_document == ReturnDocument.AFTER else None

    async def find_one_and_delete(self, query, session=None):
        self._log("find_one_and_delete")
        for doc in self.documents:
            if self._matches(doc, query):
                self.documents.remove(doc)
                return doc
        return None

    async def delete_one(self, query, session=None):
        self._log("delete_one")
        for doc in self.documents:
            if self._matches(doc, query):
                self.documents.remove(doc)
                return MockDeleteResult(1)
        return MockDeleteResult(0)

    async def delete_many(self, query, session=None):
        self._log("delete_many")
        kept = [doc for doc in self.documents if not self._matches(doc, query)]
        deleted = len(self.documents) - len(kept)
        self.documents[:] = kept
        return MockDeleteResult(deleted)


class MockDatabase:
    """Mock Motor database"""

    def __init__(self, name):
        self.name = name
        self.collections = {}
        self.operations = []

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = MockCollection(name, self)
        return self.collections[name]

    async def command(self, name):
        return {"ok": 1.0}

    def snapshot(self):
        return {name: copy.deepcopy(coll.documents) for name, coll in self.collections.items()}

    def restore(self, snapshot):
        for name, coll in self.collections.items():
            if name not in SESSIONLESS_COLLECTIONS:
                coll.documents[:] = snapshot.get(name, [])

    def reads(self):
        return [op for op in self.operations if op[1] in READ_OPERATIONS]


class MockTransaction:
    def __init__(self, client):
        self.client = client
        self.snapshots = {}

    async def __aenter__(self):
        self.snapshots = {name: db.snapshot() for name, db in self.client.databases.items()}
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.client.transactions.append("commit")
            return False
        for name, db in self.client.databases.items():
            db.restore(self.snapshots.get(name, {}))
        self.client.transactions.append("abort")
        return False


class MockSession:
    def __init__(self, client):
        self.client = client

    def start_transaction(self):
        return MockTransaction(self.client)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class MockClient:
    """Mock AsyncIOMotorClient"""

    def __init__(self):
        self.databases = {}
        self.transactions = []
        self.closed = False

    def __getitem__(self, name):
        if name not in self.databases:
            self.databases[name] = MockDatabase(name)
        return self.databases[name]

    async def start_session(self):
        return MockSession(self)

    def close(self):
        self.closed = True


def make_token(subject="tester", roles=("USER",), expires_in=timedelta(minutes=5), **claims):
    payload = {
        "sub": subject,
        "roles": list(roles),
        "exp": datetime.now(timezone.utc) + expires_in,
        **claims
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mongo_client():
    return MockClient()


@pytest.fixture
def db(mongo_client):
    """Connected mock database, transactions on."""
    Database.connect(client=mongo_client, transactions=True)
    yield mongo_client[settings.DB_NAME]
    Database.close()


@pytest.fixture
def client(db):
    """HTTP client for API testing."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Factory of Authorization headers: auth_headers(roles=..., **claims)."""
    def factory(**kwargs):
        return bearer(make_token(**kwargs))
    return factory


@pytest.fixture
def user_headers():
    return bearer(make_token(roles=("USER",)))


@pytest.fixture
def admin_headers():
    return bearer(make_token(subject="admin", roles=("ADMIN",)))


@pytest.fixture
def guest_headers():
    return bearer(make_token(subject="guest", roles=("GUEST",)))


@pytest.fixture
def employee_repo(db):
    return EmployeeRepository(db[Collections.EMPLOYEES], db[Collections.COUNTERS])


@pytest.fixture
def link_repo(db):
    return RestaurantEmployeeRepository(db[Collections.RESTAURANT_EMPLOYEES])


@pytest.fixture
def menu_repo(db):
    return MenuRepository(db[Collections.MENUS], db[Collections.COUNTERS])


@pytest.fixture
def restaurant_repo(db, menu_repo, employee_repo, link_repo):
    return RestaurantRepository(
        db[Collections.RESTAURANTS],
        db[Collections.COUNTERS],
        menu_repo,
        employee_repo,
        link_repo
    )


@pytest.fixture
def employee_service(employee_repo, link_repo):
    return EmployeeService(employee_repo, link_repo)


@pytest.fixture
def restaurant_service(restaurant_repo, employee_repo, link_repo):
    return RestaurantService(restaurant_repo, employee_repo, link_repo)
