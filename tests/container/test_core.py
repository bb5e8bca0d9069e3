"""Tests for Thing container storage and accessors."""

import pytest as _pytest

import thing
import thing.container as container


class TestConstruct:
    """Construction from initial data."""

    def test_construct_normal(self, sample: dict) -> None:
        """Values given to the constructor are readable by index."""
        t = container.Thing(sample)

        assert t["a"] == sample["a"]

    def test_get_matches_every_source_key(self, sample: dict) -> None:
        """get(k) returns M[k] for every key of the source mapping."""
        t = container.Thing(sample)

        for key, value in sample.items():
            assert t.get(key) == value

    def test_iteration_order_matches_source(self) -> None:
        """Keys iterate in insertion order, including int keys."""
        source = {"z": 1, 3: "three", "a": 2, 0: "zero"}
        t = container.Thing(source)

        assert list(t) == ["z", 3, "a", 0]
        assert t.keys() == ["z", 3, "a", 0]

    def test_construct_empty(self) -> None:
        """No arguments gives an empty container."""
        t = container.Thing()

        assert len(t) == 0
        assert t.all() == {}

    def test_construct_from_pairs(self) -> None:
        """An iterable of pairs is accepted as initial data."""
        t = container.Thing([("a", 1), ("b", 2)])

        assert t.all() == {"a": 1, "b": 2}

    def test_construct_invalid_input_raises(self) -> None:
        """A non-iterable, non-scalar object is rejected."""
        with _pytest.raises(thing.InvalidInputError):
            container.Thing(object())

    def test_construct_is_lazy(self) -> None:
        """Construction alone does not initialize."""
        t = container.Thing({"a": 1})

        assert t.is_initialized is False
        assert t.get("a") == 1
        assert t.is_initialized is True


class TestSet:
    """set() single and bulk forms."""

    def test_setter_bulk(self, sample: dict) -> None:
        """set(mapping) stores every entry."""
        t = container.Thing()
        t.set(sample)

        assert t["a"] == sample["a"]
        assert t.all() == sample

    def test_set_returns_self(self) -> None:
        """set() can be chained."""
        t = container.Thing()

        assert t.set("a", 1).set("b", 2) is t
        assert t.all() == {"a": 1, "b": 2}

    def test_set_scalar_without_value_stores_none(self) -> None:
        """A lone scalar is a key with a None value."""
        t = container.Thing()
        t.set("a")

        assert t.has("a")
        assert t.get("a") is None

    @_pytest.mark.parametrize("empty", [None, [], {}, ()])
    def test_set_empty_is_noop(self, empty: object) -> None:
        """Empty non-scalar input does nothing."""
        t = container.Thing({"a": 1})
        t.set(empty)

        assert t.all() == {"a": 1}

    def test_set_invalid_type_raises(self) -> None:
        """A non-empty object that is not iterable raises InvalidInputError."""
        t = container.Thing()

        with _pytest.raises(thing.InvalidInputError, match="Invalid type"):
            t.set(object())

    def test_set_invalid_input_is_a_type_error(self) -> None:
        """InvalidInputError can be caught as TypeError."""
        t = container.Thing()

        with _pytest.raises(TypeError):
            t.set(3 + 4j)

    def test_set_bad_pairs_raises(self) -> None:
        """An iterable whose items are not pairs raises InvalidInputError."""
        t = container.Thing()

        with _pytest.raises(thing.InvalidInputError, match="pair"):
            t.set([1, 2, 3])

    def test_set_from_another_thing(self, sample: dict) -> None:
        """A Thing is a mapping and can be bulk-copied."""
        t = container.Thing()
        t.set(container.Thing(sample))

        assert t.all() == sample

    def test_overwrite_keeps_position(self) -> None:
        """Overwriting a key does not move it."""
        t = container.Thing({"a": 1, "b": 2})
        t.set("a", 10)

        assert t.keys() == ["a", "b"]


class TestAccessors:
    """get, has, remove, keys, values, all, clear."""

    def test_get_default(self) -> None:
        """Missing keys return the default."""
        t = container.Thing({"a": 1})

        assert t.get("missing") is None
        assert t.get("missing", "fallback") == "fallback"

    def test_has(self, sample: dict) -> None:
        """has() reports presence, including None values."""
        t = container.Thing({**sample, "n": None})

        assert t.has("a")
        assert t.has("n")
        assert not t.has("missing")

    def test_remove(self, sample: dict) -> None:
        """remove() deletes a key and ignores absent keys."""
        t = container.Thing(sample)
        t.remove("a")
        t.remove("missing")

        assert not t.has("a")
        assert t.keys() == ["b", "c"]

    def test_keys_values(self, sample: dict) -> None:
        """keys() and values() are ordered lists."""
        t = container.Thing(sample)

        assert t.keys() == list(sample.keys())
        assert t.values() == list(sample.values())

    def test_keys_with_search(self) -> None:
        """keys(search) returns only keys holding that value."""
        t = container.Thing({"a": 1, "b": "1", "c": 1, "d": True})

        assert t.keys(1) == ["a", "c", "d"]
        assert t.keys(1, strict=True) == ["a", "c"]

    def test_none_is_a_value_not_a_missing_argument(self) -> None:
        """None can be searched for and is_empty() tells it apart from absence."""
        t = container.Thing({"a": None, "b": 1})

        assert t.keys(None) == ["a"]
        assert t.is_empty("a")
        assert t.has("a")
        assert not t.has("z")
        assert t.is_empty("z")

    def test_all_is_defensive_copy(self, sample: dict) -> None:
        """Mutating the result of all() does not touch the container."""
        t = container.Thing(sample)

        copy = t.all()
        copy["a"] = "changed"
        copy["b"]["bb"] = "changed"

        assert t["a"] == "aa"
        assert t["b"]["bb"] == "bbb"

    def test_to_array_is_all(self, sample: dict) -> None:
        """to_array() is an alias of all()."""
        t = container.Thing(sample)

        assert t.to_array() == t.all()

    def test_clear(self, sample: dict) -> None:
        """clear() empties the data."""
        t = container.Thing(sample)
        t.clear()

        assert len(t) == 0
        assert t.all() == {}

    def test_has_child(self, sample: dict) -> None:
        """has_child() is true only for nested containers."""
        t = container.Thing({**sample, "list": [1, 2], "s": "text"})

        assert t.has_child("b")
        assert t.has_child("list")
        assert not t.has_child("a")
        assert not t.has_child("s")
        assert not t.has_child("missing")

    def test_exchange(self) -> None:
        """exchange() swaps in new data and returns the old."""
        t = container.Thing({"a": 1})

        old = t.exchange({"b": 2})

        assert old == {"a": 1}
        assert t.all() == {"b": 2}


class TestContains:
    """contains() value scan."""

    def test_loose(self) -> None:
        """Loose comparison uses ==."""
        t = container.Thing({"a": 1, "b": "x"})

        assert t.contains(1)
        assert t.contains(1.0)
        assert t.contains(True)
        assert t.contains("x")
        assert not t.contains("1")

    def test_strict(self) -> None:
        """Strict comparison also requires the same type."""
        t = container.Thing({"a": 1})

        assert t.contains(1, strict=True)
        assert not t.contains(1.0, strict=True)
        assert not t.contains(True, strict=True)

    def test_strict_default_from_settings(self, clean_settings) -> None:
        """Settings.strict_contains sets the default mode."""
        settings = clean_settings.model_copy(update={"strict_contains": True})
        t = container.Thing({"a": 1}, settings=settings)

        assert not t.contains(True)
        assert t.contains(True, strict=False)


class TestIsEmpty:
    """is_empty() semantics."""

    @_pytest.mark.parametrize("value", ["", None, False])
    def test_empty_values(self, value: object) -> None:
        """Empty string, None and False count as empty."""
        t = container.Thing({"k": value})

        assert t.is_empty("k")

    def test_absent_key(self) -> None:
        """An absent key is empty."""
        assert container.Thing().is_empty("missing")

    @_pytest.mark.parametrize("value", [0, "0", 0.0, [], "text", True])
    def test_non_empty_values(self, value: object) -> None:
        """0, "0" and other values are not empty."""
        t = container.Thing({"k": value})

        assert not t.is_empty("k")


class TestContainerProtocol:
    """Index syntax and Mapping protocol."""

    def test_index_read_write_delete(self) -> None:
        """[] get/set/delete map onto get/set/remove."""
        t = container.Thing()
        t["a"] = 1

        assert t["a"] == 1
        assert "a" in t

        del t["a"]

        assert "a" not in t

    def test_index_missing_raises_keyerror(self) -> None:
        """Reading a missing key by index raises KeyError."""
        t = container.Thing()

        with _pytest.raises(KeyError):
            _ = t["missing"]

    def test_delete_missing_raises_keyerror(self) -> None:
        """Deleting a missing key by index raises KeyError."""
        t = container.Thing()

        with _pytest.raises(KeyError):
            del t["missing"]

    def test_equality_with_mapping(self, sample: dict) -> None:
        """A Thing equals any mapping with the same content."""
        assert container.Thing(sample) == sample
        assert container.Thing(sample) == container.Thing(sample)
        assert container.Thing(sample) != {"a": "other"}

    def test_items_snapshot(self) -> None:
        """items() is a restartable snapshot of pairs."""
        t = container.Thing({"a": 1, "b": 2})

        items = t.items()
        t["c"] = 3

        assert items == [("a", 1), ("b", 2)]
        assert list(items) == list(items)

    def test_iterator_snapshot(self) -> None:
        """An iterator sees the keys present when it was created."""
        t = container.Thing({"a": 1, "b": 2})

        it = iter(t)
        t["c"] = 3
        del t["a"]

        assert list(it) == ["a", "b"]

    def test_dict_conversion(self, sample: dict) -> None:
        """dict(thing) produces the data."""
        assert dict(container.Thing(sample)) == sample

    def test_mutable_mapping_mixins(self) -> None:
        """update/pop/setdefault come from MutableMapping."""
        t = container.Thing({"a": 1})
        t.update({"b": 2})

        assert t.pop("a") == 1
        assert t.setdefault("c", 3) == 3
        assert t.all() == {"b": 2, "c": 3}

    def test_repr_does_not_initialize(self) -> None:
        """repr() of an uninitialized container leaves the loader alone."""
        t = container.Thing(loader=lambda: {"a": 1})

        assert "uninitialized" in repr(t)
        assert t.is_initialized is False

    def test_repr_shows_data(self) -> None:
        """repr() of an initialized container shows its data."""
        t = container.Thing({"a": 1})
        t.initialize()

        assert repr(t) == "Thing({'a': 1})"
