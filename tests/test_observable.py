"""
Tests for observable.py module.

Tests:
- ObservableValue set/reset/notification
- subscribe vs link semantics
- DerivedValue read-only contract
- publish_all consistency
"""

import pytest

from ph_simulator.core.observable import DerivedValue, ObservableValue, publish_all


# =============================================================================
# ObservableValue
# =============================================================================

class TestObservableValue:
    """Tests for ObservableValue."""

    def test_initial_value(self):
        value = ObservableValue(3, "x")
        assert value.value == 3
        assert value.get() == 3
        assert value.initial_value == 3

    def test_set_notifies_new_and_old(self):
        value = ObservableValue(1, "x")
        seen = []
        value.subscribe(lambda new, old: seen.append((new, old)))
        value.set(2)
        assert seen == [(2, 1)]

    def test_equal_value_does_not_notify(self):
        value = ObservableValue(1.0, "x")
        seen = []
        value.subscribe(lambda new, old: seen.append(new))
        value.set(1.0)
        assert seen == []

    def test_subscribe_waits_for_next_change(self):
        value = ObservableValue("a")
        seen = []
        value.subscribe(lambda new, old: seen.append(new))
        assert seen == []

    def test_link_fires_immediately(self):
        value = ObservableValue("a")
        seen = []
        value.link(lambda new, old: seen.append((new, old)))
        assert seen == [("a", None)]

    def test_reset(self):
        value = ObservableValue(5)
        value.set(9)
        value.reset()
        assert value.value == 5

    def test_unsubscribe(self):
        value = ObservableValue(0)
        seen = []
        listener = value.subscribe(lambda new, old: seen.append(new))
        value.unsubscribe(listener)
        value.set(1)
        assert seen == []
        assert value.listener_count == 0

    def test_listener_may_unsubscribe_itself(self):
        value = ObservableValue(0)
        seen = []

        def once(new, old):
            seen.append(new)
            value.unsubscribe(once)

        value.subscribe(once)
        value.set(1)
        value.set(2)
        assert seen == [1]

    def test_repr(self):
        assert repr(ObservableValue(1, "x")) == "ObservableValue('x', 1)"


# =============================================================================
# DerivedValue
# =============================================================================

class TestDerivedValue:
    """Tests for DerivedValue."""

    def test_set_rejected(self):
        derived = DerivedValue(1, "total")
        with pytest.raises(AttributeError):
            derived.set(2)
        assert derived.value == 1

    def test_reset_rejected(self):
        with pytest.raises(AttributeError):
            DerivedValue(1, "total").reset()

    def test_publish_notifies(self):
        derived = DerivedValue(1, "total")
        seen = []
        derived.subscribe(lambda new, old: seen.append((new, old)))
        derived._publish(4)
        assert seen == [(4, 1)]


# =============================================================================
# publish_all
# =============================================================================

class TestPublishAll:
    """Tests for publish_all()."""

    def test_listeners_see_all_new_values(self):
        a = DerivedValue(0, "a")
        b = DerivedValue(0, "b")
        seen = []
        a.subscribe(lambda new, old: seen.append(("a", new, b.value)))
        b.subscribe(lambda new, old: seen.append(("b", new, a.value)))

        publish_all((a, 1), (b, 2))

        assert seen == [("a", 1, 2), ("b", 2, 1)]

    def test_unchanged_values_not_notified(self):
        a = DerivedValue(0, "a")
        b = DerivedValue(5, "b")
        seen = []
        b.subscribe(lambda new, old: seen.append(new))
        publish_all((a, 1), (b, 5))
        assert seen == []
        assert a.value == 1
