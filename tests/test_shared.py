"""Test cases for the process-wide store and logger."""

import threading
from typing import Iterator

import pytest
from inisupport import reset_shared, shared_logger, shared_store


@pytest.fixture(autouse=True)
def fresh_shared() -> Iterator[None]:
    reset_shared()
    yield
    reset_shared()


def test_shared_instances_are_wired_together():
    store = shared_store()
    logger = shared_logger()

    assert shared_store() is store
    assert logger.store is store
    assert store.logger is logger
    assert not store.is_initialized  # Initialization stays explicit


def test_concurrent_first_use_yields_one_store():
    stores = []

    def grab():
        stores.append(shared_store())

    threads = [threading.Thread(target=grab) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(s) for s in stores}) == 1


def test_reset_shared_drops_instances():
    store = shared_store()
    reset_shared()

    assert shared_store() is not store
