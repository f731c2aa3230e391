"""
Tests for the unit of work lifecycle.
"""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from bookstore.core.exceptions import ConflictError, StateError, StoreError
from bookstore.models import Author, Book
from bookstore.models.user import User
from bookstore.repositories import GenericRepository
from bookstore.services.common.unit_of_work import UnitOfWork


def test_commit_returns_keys_grouped_in_staging_order(uow_factory):
    with uow_factory() as uow:
        authors = uow.repository(Author)
        first = authors.add(Author(firstname="Ted", lastname="Chiang"))
        second = authors.add(Author(firstname="Ken", lastname="Liu"))
        uow.flush()
        book = uow.repository(Book).add(
            Book(title="Exhalation", isbn="9781101947883", author_id=first.id)
        )
        keys = uow.commit()

    assert keys == {"Author": [first.id, second.id], "Book": [book.id]}
    assert first.id < second.id


def test_commit_closes_scope_and_scope_can_be_reopened(session_factory):
    uow = UnitOfWork(session_factory)
    uow.begin()
    assert uow.is_active
    uow.commit()
    assert not uow.is_active

    uow.begin()
    assert uow.is_active
    uow.rollback()
    assert not uow.is_active


def test_begin_twice_raises_state_error(session_factory):
    uow = UnitOfWork(session_factory)
    uow.begin()
    with pytest.raises(StateError):
        uow.begin()
    uow.rollback()


@pytest.mark.parametrize("operation", ["commit", "flush"])
def test_operations_outside_scope_raise_state_error(session_factory, operation):
    uow = UnitOfWork(session_factory)
    with pytest.raises(StateError):
        getattr(uow, operation)()


def test_repository_outside_scope_raises_state_error(session_factory):
    with pytest.raises(StateError):
        UnitOfWork(session_factory).repository(Author)


def test_rollback_outside_scope_is_a_no_op(session_factory):
    UnitOfWork(session_factory).rollback()


def test_repository_is_cached_per_scope(uow_factory):
    uow = uow_factory()
    with uow:
        assert uow.repository(Author) is uow.repository(Author)
        first = uow.repository(Author)
    with uow:
        assert uow.repository(Author) is not first


def test_unregistered_entity_gets_generic_repository(session_factory):
    with UnitOfWork(session_factory, repositories={}) as uow:
        repo = uow.repository(Author)
        assert type(repo) is GenericRepository
        assert repo.model is Author


def test_rollback_restores_store_after_add_update_and_remove(uow_factory, seeded, snapshot):
    before = snapshot()
    uow = uow_factory().begin()
    uow.repository(Author).add(Author(firstname="N. K.", lastname="Jemisin"))
    uow.repository(Book).update(
        Book(id=seeded["books"][0], title="Changed", isbn="9780061054884", author_id=seeded["author"])
    )
    uow.repository(Book).remove(seeded["books"][1])
    uow.rollback()

    assert not uow.is_active
    assert snapshot() == before


def test_clean_exit_commits_when_auto_commit(uow_factory):
    with uow_factory() as uow:
        uow.repository(Author).add(Author(firstname="Ann", lastname="Leckie"))

    with uow_factory() as uow:
        assert uow.repository(Author).count() == 1


def test_clean_exit_rolls_back_without_auto_commit(session_factory, uow_factory):
    with UnitOfWork(session_factory, auto_commit=False) as uow:
        uow.repository(Author).add(Author(firstname="Ann", lastname="Leckie"))

    with uow_factory() as uow:
        assert uow.repository(Author).count() == 0


def test_error_exit_rolls_back_and_propagates(uow_factory):
    with pytest.raises(RuntimeError):
        with uow_factory() as uow:
            uow.repository(Author).add(Author(firstname="Ann", lastname="Leckie"))
            uow.flush()
            raise RuntimeError("boom")

    with uow_factory() as uow:
        assert uow.repository(Author).count() == 0


def test_dispose_after_explicit_commit_does_nothing(uow_factory):
    uow = uow_factory()
    with uow:
        uow.commit()
        assert not uow.is_active
    assert not uow.is_active


def test_commit_integrity_failure_raises_conflict_and_leaves_store_unchanged(uow_factory, seeded, snapshot):
    before = snapshot()
    uow = uow_factory().begin()
    uow.repository(Book).add(Book(title="Orphan", isbn="0000000000", author_id=999))

    with pytest.raises(ConflictError):
        uow.commit()

    assert not uow.is_active
    assert snapshot() == before


def test_commit_driver_failure_raises_store_error(uow_factory):
    uow = uow_factory().begin()
    uow.repository(Author).add(Author(firstname="Ann", lastname="Leckie"))
    uow.session.commit = Mock(
        side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))
    )

    with pytest.raises(StoreError) as exc_info:
        uow.commit()

    assert isinstance(exc_info.value.original_error, OperationalError)
    assert not uow.is_active

    with uow_factory() as check:
        assert check.repository(Author).count() == 0


def test_rollback_never_raises_when_driver_fails(uow_factory):
    uow = uow_factory().begin()
    session = uow.session
    session.rollback = Mock(side_effect=OperationalError("ROLLBACK", {}, Exception("gone")))

    uow.rollback()

    session.rollback.assert_called_once()
    assert not uow.is_active


def test_flush_translates_integrity_error(uow_factory, seeded):
    with pytest.raises(ConflictError):
        with uow_factory() as uow:
            uow.repository(Book).add(
                Book(title="Duplicate", isbn="9780061054884", author_id=seeded["author"])
            )
            uow.flush()


def test_added_then_removed_entity_is_not_reported(uow_factory):
    with uow_factory() as uow:
        users = uow.repository(User)
        user = users.add(User(email="temp@bookstore.io", password_hash="x"))
        uow.flush()
        users.remove(user.id)
        keys = uow.commit()

    assert keys == {}
