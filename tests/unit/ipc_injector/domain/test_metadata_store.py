"""Unit tests for MetadataStore."""

import gc

from ipc_injector.domain.metadata import MetadataStore


class TestMetadataStore:
    """Test cases for the metadata store."""

    def test_define_and_get(self):
        """Test that values are stored per subject and key."""
        store = MetadataStore()

        class Subject:
            pass

        store.define("key", "value", Subject)

        assert store.get("key", Subject) == "value"
        assert store.has("key", Subject)
        assert store.get("other", Subject) is None

    def test_default_value(self):
        """Test that get returns the given default when missing."""
        store = MetadataStore()

        def subject():
            pass

        assert store.get("key", subject, []) == []
        assert not store.has("key", subject)

    def test_redefine_overwrites(self):
        """Test that defining a key twice keeps the last value."""
        store = MetadataStore()

        def subject():
            pass

        store.define("key", 1, subject)
        store.define("key", 2, subject)

        assert store.get("key", subject) == 2

    def test_subjects_are_independent(self):
        """Test that two subjects do not share values."""
        store = MetadataStore()

        def first():
            pass

        def second():
            pass

        store.define("key", "first", first)

        assert store.get("key", second) is None

    def test_non_weakrefable_subject_reads_default(self):
        """Test that lookups on plain values return the default."""
        store = MetadataStore()

        assert store.get("key", 42, "default") == "default"
        assert not store.has("key", "text")

    def test_delete(self):
        """Test that delete removes a single key."""
        store = MetadataStore()

        def subject():
            pass

        store.define("a", 1, subject)
        store.define("b", 2, subject)
        store.delete("a", subject)

        assert not store.has("a", subject)
        assert store.get("b", subject) == 2

    def test_subjects_held_weakly(self):
        """Test that the store does not keep subjects alive."""
        store = MetadataStore()

        class Subject:
            pass

        store.define("key", "value", Subject)
        assert len(store._entries) == 1

        del Subject
        gc.collect()

        assert len(store._entries) == 0


class TestMetadataInheritance:
    """Test cases for class metadata inherited through the MRO."""

    def test_subclass_inherits_value(self):
        """Test that a subclass reads the value defined on its base."""
        store = MetadataStore()

        class Base:
            pass

        class Derived(Base):
            pass

        store.define("guards", ["auth"], Base)

        assert store.get("guards", Derived) == ["auth"]
        assert store.has("guards", Derived)
        assert store.get_own("guards", Derived) is None

    def test_nearest_definition_wins(self):
        """Test that the closest class in the MRO provides the value."""
        store = MetadataStore()

        class Base:
            pass

        class Middle(Base):
            pass

        class Leaf(Middle):
            pass

        store.define("prefix", "base", Base)
        store.define("prefix", "middle", Middle)

        assert store.get("prefix", Leaf) == "middle"
        assert store.owner("prefix", Leaf) is Middle

    def test_base_does_not_see_subclass_values(self):
        """Test that inheritance only flows from bases to subclasses."""
        store = MetadataStore()

        class Base:
            pass

        class Derived(Base):
            pass

        store.define("prefix", "derived", Derived)

        assert store.get("prefix", Base) is None
        assert store.owner("prefix", Base) is None

    def test_functions_do_not_inherit(self):
        """Test that function subjects are looked up on their own."""
        store = MetadataStore()

        def handler():
            pass

        assert store.owner("key", handler) is None
        store.define("key", 1, handler)
        assert store.owner("key", handler) is handler
