"""Tests for the compensation transaction scope."""

import pytest

from compensation.core import database as db_module
from compensation.core.database import compensation_session, get_compensation_db
from compensation.models.party import Customer
from compensation.repositories.party_repository import CustomerRepository


class TestCompensationSession:
    def test_commits_on_success(self):
        with compensation_session() as db:
            db.add(Customer(name="Committed"))

        check = db_module.SessionLocal()
        try:
            assert check.query(Customer).filter(Customer.name == "Committed").count() == 1
        finally:
            check.close()

    def test_rolls_back_on_error(self):
        with pytest.raises(RuntimeError):
            with compensation_session() as db:
                db.add(Customer(name="Rolled Back"))
                db.flush()
                raise RuntimeError("boom")

        check = db_module.SessionLocal()
        try:
            assert check.query(Customer).filter(Customer.name == "Rolled Back").count() == 0
        finally:
            check.close()

    def test_dependency_yields_session(self):
        gen = get_compensation_db()
        db = next(gen)
        CustomerRepository(db).create("From Dependency")
        for _ in gen:
            pass

        check = db_module.SessionLocal()
        try:
            assert check.query(Customer).filter(Customer.name == "From Dependency").count() == 1
        finally:
            check.close()
