from __future__ import annotations

import pytest

from pdf_signer.components import ResourceScope


def test_release_in_reverse_order():
    released = []
    scope = ResourceScope("t")
    scope.acquire("a", released.append)
    scope.acquire("b", released.append)
    assert len(scope) == 2
    scope.close()
    assert released == ["b", "a"]
    assert scope.released


def test_close_is_idempotent():
    released = []
    scope = ResourceScope()
    scope.acquire(1, released.append)
    scope.close()
    scope.close()
    assert released == [1]


def test_acquire_after_close_releases_immediately():
    released = []
    scope = ResourceScope()
    scope.close()
    with pytest.raises(RuntimeError):
        scope.acquire("late", released.append)
    assert released == ["late"]


def test_failing_release_does_not_block_others():
    released = []

    def boom(_):
        raise OSError("busy")

    scope = ResourceScope()
    scope.acquire("ok", released.append)
    scope.acquire("bad", boom)
    scope.close()
    assert released == ["ok"]


def test_temp_file_removed_on_exit(tmp_path):
    with ResourceScope("tmp") as scope:
        path = scope.temp_file(suffix=".png", directory=tmp_path)
        assert path.exists()
    assert not path.exists()
