"""Tests for the transactional session scope."""

import logging

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from assetvault.core.database_utils import check_database_connection, get_db_session
from assetvault.core.exceptions import NotFoundError
from assetvault.models import Client

from conftest import TENANT_ID


def client_names(session_factory):
    with session_factory() as session:
        return [client.name for client in session.query(Client).all()]


class TestGetDbSession:
    def test_commits_on_success(self, session_factory):
        with get_db_session(session_factory) as db:
            db.add(Client(name="Acme Corp", tenant_id=TENANT_ID))

        assert client_names(session_factory) == ["Acme Corp"]

    def test_store_error_rolls_back_without_logging(self, session_factory, caplog):
        with caplog.at_level(logging.ERROR, logger="assetvault.core.database_utils"):
            with pytest.raises(NotFoundError):
                with get_db_session(session_factory) as db:
                    db.add(Client(name="Acme Corp", tenant_id=TENANT_ID))
                    db.flush()
                    raise NotFoundError("Client")

        assert client_names(session_factory) == []
        assert caplog.records == []

    def test_database_error_rolls_back_and_logs(self, session_factory, caplog):
        with caplog.at_level(logging.ERROR, logger="assetvault.core.database_utils"):
            with pytest.raises(OperationalError):
                with get_db_session(session_factory) as db:
                    db.add(Client(name="Acme Corp", tenant_id=TENANT_ID))
                    db.flush()
                    db.execute(text("SELECT * FROM no_such_table"))

        assert client_names(session_factory) == []
        assert "transaction rolled back" in caplog.text


def test_check_database_connection(session_factory):
    assert check_database_connection(session_factory) is True
