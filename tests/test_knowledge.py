import pytest
from pcx.knowledge import Knowledge


def test_empty_knowledge():
    knowledge = Knowledge()
    assert knowledge.is_empty()
    assert not knowledge.is_forbidden("a", "b")
    assert not knowledge.is_required("a", "b")
    assert knowledge.tier_of("a") is None


def test_forbidden_and_required():
    knowledge = Knowledge().set_forbidden("a", "b").set_required("c", "d")
    assert knowledge.is_forbidden("a", "b")
    assert not knowledge.is_forbidden("b", "a")
    assert knowledge.is_required("c", "d")
    assert list(knowledge.required_edges()) == [("c", "d")]
    assert not knowledge.is_empty()


def test_conflicting_knowledge_is_rejected():
    knowledge = Knowledge().set_forbidden("a", "b")
    with pytest.raises(ValueError):
        knowledge.set_required("a", "b")
    knowledge.set_required("c", "d")
    with pytest.raises(ValueError):
        knowledge.set_forbidden("c", "d")
    with pytest.raises(ValueError):
        knowledge.set_required("d", "c")


def test_tiers_forbid_backwards_edges():
    knowledge = Knowledge.from_tiers([["a", "b"], ["c"]])
    assert knowledge.tier_of("c") == 1
    assert knowledge.is_forbidden("c", "a")
    assert not knowledge.is_forbidden("a", "c")
    assert not knowledge.is_forbidden("a", "b")
    knowledge.set_tier_forbidden_within(0)
    assert knowledge.is_forbidden("a", "b")
    assert knowledge.is_forbidden_adjacency("a", "b")
    with pytest.raises(ValueError):
        knowledge.set_required("c", "a")


def test_untiered_variables_are_unconstrained():
    knowledge = Knowledge().add_to_tier(1, "b")
    assert not knowledge.is_forbidden("b", "z")
    assert not knowledge.is_forbidden("z", "b")
