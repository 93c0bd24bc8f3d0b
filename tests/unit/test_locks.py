"""Unit tests for the per-root lock registry."""

import threading

from dotstore.core.storage.locks import RootLockRegistry


class TestRootLockRegistry:
    """Tests for RootLockRegistry."""

    def test_entry_dropped_after_release(self) -> None:
        """Test that a root is tracked only while its lock is held."""
        registry = RootLockRegistry()

        with registry.hold("articles"):
            assert registry.active_roots() == ["articles"]

        assert registry.active_roots() == []

    def test_entry_dropped_when_block_raises(self) -> None:
        """Test that an exception inside the block still releases the root."""
        registry = RootLockRegistry()

        try:
            with registry.hold("articles"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert registry.active_roots() == []
        with registry.hold("articles"):
            pass

    def test_different_roots_do_not_block(self) -> None:
        """Test that holding one root leaves other roots free."""
        registry = RootLockRegistry()
        entered = threading.Event()

        def hold_other() -> None:
            with registry.hold("profile"):
                entered.set()

        with registry.hold("articles"):
            thread = threading.Thread(target=hold_other)
            thread.start()
            assert entered.wait(timeout=5)
            thread.join()

    def test_same_root_is_exclusive(self) -> None:
        """Test that a waiter keeps the entry alive and runs after the holder."""
        registry = RootLockRegistry()
        order: list[str] = []
        waiting = threading.Event()

        def second() -> None:
            waiting.set()
            with registry.hold("articles"):
                order.append("second")

        with registry.hold("articles"):
            thread = threading.Thread(target=second)
            thread.start()
            assert waiting.wait(timeout=5)
            order.append("first")

        thread.join(timeout=5)

        assert order == ["first", "second"]
        assert registry.active_roots() == []
