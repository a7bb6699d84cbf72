"""
Tests for the internal helpers.

This module verifies semantic guarantees of the `Unset` sentinel and its siblings:
- Singleton identity, falsy semantics and representation.
- Copying, deep copying, pickling and thread safety properties.
- Finality (type cannot be subclassed).
- coalesce(), dashcase(), mirror() and maybe_await() contracts.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import IsolatedAsyncioTestCase, TestCase

from capstan.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(Unset, self.unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(self.unset), "Unset")
        self.assertEqual(str(self.unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(self.unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)

    def testPickleRoundTrip(self) -> None:
        restored: UnsetType = pickle.loads(pickle.dumps(self.unset))
        self.assertIs(restored, self.unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, self.unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """coalesce / dashcase / mirror / rename."""

    def testCoalesceReplacesOnlyUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testDashcase(self):
        self.assertEqual(dashcase("isAdmin"), "is-admin")
        self.assertEqual(dashcase("is_admin"), "is-admin")
        self.assertEqual(dashcase("HTTPPort"), "http-port")
        self.assertEqual(dashcase("admin"), "admin")

    def testDashcaseRejectsNonString(self):
        with self.assertRaises(TypeError):
            dashcase(42)

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")

            def __init__(self):
                self._items = ["a", "b"]
                self._mapping = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(TypeError):
            holder.mapping["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testRenameForms(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")

        @rename("decorated")
        def second():
            pass

        self.assertEqual(second.__qualname__, "decorated")

        with self.assertRaises(TypeError):
            rename()


class MaybeAwaitTest(IsolatedAsyncioTestCase):

    async def testPlainValue(self):
        self.assertEqual(await maybe_await(42), 42)

    async def testCoroutine(self):
        async def compute():
            return 42

        self.assertEqual(await maybe_await(compute()), 42)


if __name__ == '__main__':
    unittest.main()
