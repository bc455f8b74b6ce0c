"""Unit tests for override, restore and the hook composition engine."""

import pytest

from mage import After, Around, Base, Before, HookTargetError, MageWarning, layers


def goodbye():
    """Replacement greeting."""
    return "Goodbye"


class TestOverride:
    """Test replacing existing functions."""

    def test_override_and_restore(self, greeter):
        """Test the greet/Goodbye/restore scenario."""
        assert greeter.call("greeter", "greet") == "Hello"

        assert greeter.override("greeter", "greet", goodbye) is True
        assert greeter.call("greeter", "greet") == "Goodbye"

        assert greeter.restore("greeter", "greet") is True
        assert greeter.call("greeter", "greet") == "Hello"

    def test_override_missing_function_warns(self, grimoire):
        """Test overriding a function that does not exist is a no-op."""
        with pytest.warns(MageWarning, match="doesn't exist"):
            assert grimoire.override("greeter", "greet", goodbye) is False

        assert not grimoire.registry.resolves("greeter", "greet")
        assert grimoire.snapshot("greeter", "greet") is None

    def test_restore_goes_back_to_original_after_many_overrides(self, greeter):
        """Test restore skips intermediate overrides."""
        greeter.override("greeter", "greet", lambda: "first")
        greeter.override("greeter", "greet", lambda: "second")
        greeter.override("greeter", "greet", lambda: "third")
        assert greeter.call("greeter", "greet") == "third"

        greeter.restore("greeter", "greet")
        assert greeter.call("greeter", "greet") == "Hello"

    def test_restore_can_be_repeated(self, greeter):
        """Test the snapshot survives a restore."""
        greeter.override("greeter", "greet", goodbye)
        greeter.restore("greeter", "greet")
        greeter.override("greeter", "greet", lambda: "again")
        greeter.restore("greeter", "greet")
        assert greeter.call("greeter", "greet") == "Hello"
        assert greeter.snapshot("greeter", "greet") is not None

    def test_restore_without_history_fails(self, greeter):
        """Test restoring an untouched function reports failure."""
        original = greeter.implementation("greeter", "greet")

        with pytest.warns(MageWarning, match="no recollection"):
            assert greeter.restore("greeter", "greet") is False

        assert greeter.implementation("greeter", "greet") is original
        assert greeter.call("greeter", "greet") == "Hello"

    def test_override_passes_arguments_through(self, greeter):
        """Test the replacement receives the caller's arguments unchanged."""
        greeter.override("greeter", "shout", lambda text, suffix="!": text + suffix)
        assert greeter.call("greeter", "shout", "hi") == "hi!"
        assert greeter.call("greeter", "shout", "hi", suffix="?") == "hi?"

    def test_override_keeps_receiver_convention(self, grimoire):
        """Test instance methods still get the receiver first."""
        grimoire.install("Counter", class_mode=True)
        grimoire.create("Counter", "label", lambda self: "counter", receiver=True)
        grimoire.override("Counter", "label", lambda self: f"{self.namespace}!")

        counter = grimoire.new("Counter")
        assert counter.label() == "Counter!"

    def test_override_inherited_function(self, greeter):
        """Test overriding a name that only resolves through a parent."""
        greeter.augment("greeter.polite", "greeter")
        greeter.override("greeter.polite", "greet", lambda: "Good day")

        assert greeter.call("greeter.polite", "greet") == "Good day"
        assert greeter.call("greeter", "greet") == "Hello"

        greeter.restore("greeter.polite", "greet")
        assert greeter.call("greeter.polite", "greet") == "Hello"


class TestBefore:
    """Test before hooks."""

    def test_before_output_order(self, grimoire, capsys):
        """Test the 'Good Bye!' scenario."""
        grimoire.create("main", "bye", lambda: print("Bye!"))
        grimoire.before("main", "bye", lambda: print("Good ", end=""))

        grimoire.call("main", "bye")
        assert capsys.readouterr().out == "Good Bye!\n"

    def test_before_keeps_original_result(self, greeter):
        """Test the hook's return value is discarded."""
        calls = []
        greeter.before("greeter", "greet", lambda: calls.append("hook") or "ignored")

        assert greeter.call("greeter", "greet") == "Hello"
        assert calls == ["hook"]

    def test_before_receives_arguments(self, greeter):
        """Test the hook sees the same arguments as the function."""
        seen = []
        greeter.before("greeter", "shout", lambda text: seen.append(text))

        assert greeter.call("greeter", "shout", "hey") == "HEY"
        assert seen == ["hey"]

    def test_before_many_names(self, greeter):
        """Test one call can hook several names."""
        calls = []
        hooked = greeter.before("greeter", ["greet", "shout"], lambda *a: calls.append(a))

        assert hooked == ["greet", "shout"]
        greeter.call("greeter", "greet")
        greeter.call("greeter", "shout", "x")
        assert calls == [(), ("x",)]

    def test_before_missing_name_is_fatal(self, greeter):
        """Test hooking an unknown name raises."""
        with pytest.raises(HookTargetError, match="Could not find wave in the hierarchy for greeter"):
            greeter.before("greeter", "wave", lambda: None)

    def test_before_missing_name_in_list_changes_nothing(self, greeter):
        """Test a bad name aborts the whole call."""
        original = greeter.implementation("greeter", "greet")

        with pytest.raises(HookTargetError):
            greeter.before("greeter", ["greet", "wave"], lambda: None)

        assert greeter.implementation("greeter", "greet") is original
        assert greeter.snapshot("greeter", "greet") is None

    def test_hooks_stack_in_call_order(self, greeter):
        """Test later hooks wrap earlier ones."""
        calls = []
        greeter.before("greeter", "greet", lambda: calls.append("first"))
        greeter.before("greeter", "greet", lambda: calls.append("second"))

        greeter.call("greeter", "greet")
        assert calls == ["second", "first"]


class TestAfter:
    """Test after hooks."""

    def test_after_returns_hook_result(self, greeter):
        """Test the composed result is the hook's."""
        calls = []

        def original():
            calls.append("original")
            return "Hello"

        greeter.override("greeter", "greet", original)
        greeter.after("greeter", "greet", lambda: calls.append("hook") or "After")

        assert greeter.call("greeter", "greet") == "After"
        assert calls == ["original", "hook"]

    def test_after_missing_name_is_fatal(self, grimoire):
        """Test after on an unknown name raises."""
        with pytest.raises(HookTargetError):
            grimoire.after("greeter", "greet", lambda: None)


class TestAround:
    """Test around hooks."""

    def test_around_receives_original(self, greeter):
        """Test the hook gets the previous implementation first."""
        greeter.around("greeter", "shout", lambda original, text: f"<{original(text)}>")
        assert greeter.call("greeter", "shout", "hi") == "<HI>"

    def test_around_can_skip_original(self, grimoire):
        """Test the original never runs when the hook ignores it."""
        calls = []
        grimoire.create("jobs", "launch", lambda: calls.append("launched"))
        grimoire.around("jobs", "launch", lambda original: "blocked")

        assert grimoire.call("jobs", "launch") == "blocked"
        assert calls == []

    def test_around_then_restore(self, greeter):
        """Test restore removes every layer at once."""
        greeter.around("greeter", "greet", lambda original: original() * 2)
        greeter.before("greeter", "greet", lambda: None)
        greeter.after("greeter", "greet", lambda: "after")
        assert greeter.call("greeter", "greet") == "after"

        greeter.restore("greeter", "greet")
        assert greeter.call("greeter", "greet") == "Hello"


class TestChain:
    """Test the implementation chain built by hooks."""

    def test_chain_layers(self, greeter):
        """Test hooks produce inspectable nodes."""
        greeter.before("greeter", "greet", lambda: None)
        greeter.after("greeter", "greet", lambda: None)
        greeter.around("greeter", "greet", lambda original: original())

        kinds = [type(node) for node in layers(greeter.implementation("greeter", "greet"))]
        assert kinds == [Around, After, Before, Base]

    def test_snapshot_is_first_implementation(self, greeter):
        """Test later hooks do not move the snapshot."""
        original = greeter.implementation("greeter", "greet")
        greeter.before("greeter", "greet", lambda: None)
        greeter.override("greeter", "greet", goodbye)

        assert greeter.snapshot("greeter", "greet").impl is original
