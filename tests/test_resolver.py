"""Tests for type resolution precedence and memoization."""

from wsdldoc.kernel.cache import MemoCache, is_uncomputed
from wsdldoc.kernel.resolver import (
    PRIORITY_CONTEXT_NAMESPACE,
    PRIORITY_OTHER_NAMESPACE,
    PRIORITY_TYPE_SUFFIX,
    TypeResolver,
)
from wsdldoc.kernel.type_index import SchemaTypeIndex


NAMESPACES = {
    "xmlns:one": "urn:one",
    "xmlns:two": "urn:two",
    "one": "urn:one",
    "two": "urn:two",
    "xs": "http://www.w3.org/2001/XMLSchema",
}


def _field(type_name="s:string"):
    return {"type": type_name}


def make_resolver(raw):
    return TypeResolver(SchemaTypeIndex.build(raw), NAMESPACES)


def test_literal_match_in_context_namespace_wins():
    resolver = make_resolver(
        {
            "urn:one": {"Foo": {"namespace": "urn:one", "a": _field()}},
            "urn:two": {"Foo": {"namespace": "urn:two", "b": _field()}},
        }
    )

    assert resolver.resolve("Foo", "urn:two").namespace == "urn:two"
    assert resolver.resolve("Foo", "urn:one").namespace == "urn:one"


def test_without_context_first_namespace_in_index_order_wins():
    resolver = make_resolver(
        {
            "urn:one": {"Foo": {"namespace": "urn:one"}},
            "urn:two": {"Foo": {"namespace": "urn:two"}},
        }
    )

    assert resolver.resolve("Foo").namespace == "urn:one"


def test_literal_match_elsewhere_beats_suffix_match_in_context():
    resolver = make_resolver(
        {
            "urn:one": {"FooType": {"namespace": "urn:one"}},
            "urn:two": {"Foo": {"namespace": "urn:two"}},
        }
    )

    record = resolver.resolve("Foo", "urn:one")
    assert record.name == "Foo"
    assert record.namespace == "urn:two"


def test_suffix_convention_used_when_no_literal_match():
    resolver = make_resolver({"urn:one": {"UserType": {"namespace": "urn:one", "id": _field()}}})

    record = resolver.resolve("User")
    assert record.name == "UserType"
    assert list(record.fields) == ["id"]


def test_unknown_name_resolves_to_none():
    resolver = make_resolver({"urn:one": {"Foo": {"namespace": "urn:one"}}})

    assert resolver.resolve("Bar") is None
    assert resolver.resolve("Bar", "urn:one") is None
    assert resolver.resolve("") is None
    assert resolver.resolve(None) is None


def test_qualified_name_looks_only_in_prefix_namespace():
    resolver = make_resolver(
        {
            "urn:one": {"Foo": {"namespace": "urn:one"}},
            "urn:two": {"Foo": {"namespace": "urn:two"}, "Bar": {"namespace": "urn:two"}},
        }
    )

    assert resolver.resolve("two:Foo").namespace == "urn:two"
    assert resolver.resolve("one:Foo", "urn:two").namespace == "urn:one"
    # Known prefix, missing local name: no fallback to other namespaces
    assert resolver.resolve("one:Bar") is None


def test_qualified_name_does_not_apply_suffix_convention():
    resolver = make_resolver({"urn:one": {"OrderType": {"namespace": "urn:one"}}})

    assert resolver.resolve("one:Order") is None
    assert resolver.resolve("one:OrderType").name == "OrderType"


def test_unknown_prefix_falls_through_to_scan_with_full_name():
    resolver = make_resolver({"urn:one": {"zz:Foo": {"namespace": "urn:one"}}})

    assert resolver.resolve("zz:Foo").name == "zz:Foo"


def test_prefix_for_namespace_without_types_falls_through():
    resolver = make_resolver({"urn:one": {"Foo": {"namespace": "urn:one"}}})

    # "xs" maps to a namespace that has no index entry
    assert resolver.resolve("xs:string") is None


def test_candidates_lists_every_tier_best_first():
    resolver = make_resolver(
        {
            "urn:one": {"Foo": {"namespace": "urn:one"}, "FooType": {"namespace": "urn:one"}},
            "urn:two": {"Foo": {"namespace": "urn:two"}},
        }
    )

    candidates = resolver.candidates("Foo", "urn:two")

    assert [(c.priority, c.namespace, c.name) for c in candidates] == [
        (PRIORITY_CONTEXT_NAMESPACE, "urn:two", "Foo"),
        (PRIORITY_OTHER_NAMESPACE, "urn:one", "Foo"),
        (PRIORITY_TYPE_SUFFIX, "urn:one", "FooType"),
    ]


def test_results_and_misses_are_memoized():
    raw = {"urn:one": {"Foo": {"namespace": "urn:one"}}}
    cache = MemoCache("resolution")
    resolver = TypeResolver(SchemaTypeIndex.build(raw), NAMESPACES, cache=cache)

    first = resolver.resolve("Foo")
    second = resolver.resolve("Foo")
    assert first is second

    assert resolver.resolve("Missing") is None
    assert resolver.resolve("Missing") is None

    stats = cache.stats()
    assert stats.misses == 2
    assert stats.hits == 2
    assert stats.size == 2
    assert ("Missing", None) in cache
    assert cache.lookup(("Missing", None)) is None


def test_cache_key_includes_context_namespace():
    resolver = make_resolver(
        {
            "urn:one": {"Foo": {"namespace": "urn:one"}},
            "urn:two": {"Foo": {"namespace": "urn:two"}},
        }
    )

    assert resolver.resolve("Foo", "urn:two").namespace == "urn:two"
    assert resolver.resolve("Foo").namespace == "urn:one"
    assert len(resolver.cache) == 2
    assert is_uncomputed(resolver.cache.lookup(("Foo", "urn:three")))
