"""
Testy bazy wiedzy w pamięci.

Weryfikują:
1. Flagi ElementType: dopasowanie do filtra, as_const, nazwy w JSON
2. Tworzenie i kaskadowe usuwanie elementów
3. Unikalność identyfikatorów systemowych
4. Iteratory iterator3 / iterator5 i check_arc
5. Zbiory: przynależność, relacje, następnik w zbiorze uporządkowanym
6. Keynodes.resolve jest idempotentne
"""

import pytest

from graph_model import INVALID, ElementType, Keynodes
from kb import InvalidElementError, KnowledgeBase
from kb.utils import (
    add_to_set,
    get_all_with_type,
    get_any_by_out_relation,
    get_next_from_set,
    is_in_set,
)


ACCESS = ElementType.ARC_ACCESS_CONST_POS_PERM


# =============================================================================
# ElementType
# =============================================================================

class TestElementType:

    def test_matches_requires_all_filter_bits(self):
        assert ACCESS.matches(ElementType.ARC_ACCESS)
        assert ACCESS.matches(ElementType.ANY)
        assert not ElementType.ARC_ACCESS_VAR_POS_PERM.matches(ACCESS)

    def test_as_const_maps_var_types(self):
        assert ElementType.NODE_VAR.as_const() == ElementType.NODE_CONST
        assert ElementType.ARC_ACCESS_VAR_POS_PERM.as_const() == ACCESS
        assert ElementType.NODE_CONST.as_const() == ElementType.NODE_CONST

    def test_node_and_arc_predicates(self):
        assert ElementType.NODE_CONST_STRUCT.is_node
        assert not ElementType.NODE_CONST_STRUCT.is_arc
        assert ElementType.ARC_COMMON_VAR.is_arc
        assert ElementType.ARC_COMMON_VAR.is_var

    def test_from_name_parses_named_combination(self):
        assert ElementType.from_name("arc_access_const_pos_perm") == ACCESS
        assert ElementType.from_name("NODE_VAR") == ElementType.NODE_VAR

    def test_from_name_parses_joined_flags(self):
        assert ElementType.from_name("arc_access|const") == ElementType.ARC_ACCESS | ElementType.CONST

    def test_from_name_rejects_unknown(self):
        with pytest.raises(ValueError, match="Nieznany typ"):
            ElementType.from_name("node_konst")

    def test_to_name_inverts_from_name(self):
        for name in ("node_const", "arc_common_var", "arc_access_const_neg_temp"):
            assert ElementType.from_name(name).to_name() == name
        unnamed = ElementType.ARC_ACCESS | ElementType.CONST
        assert ElementType.from_name(unnamed.to_name()) == unnamed


# =============================================================================
# KnowledgeBase
# =============================================================================

class TestKnowledgeBase:

    def test_handles_are_never_invalid(self):
        kb = KnowledgeBase()
        node = kb.create_node()
        assert node != INVALID
        assert kb.is_valid(node)
        assert not kb.is_valid(INVALID)

    def test_create_node_rejects_arc_type(self):
        with pytest.raises(ValueError):
            KnowledgeBase().create_node(ACCESS)

    def test_create_arc_requires_existing_ends(self):
        kb = KnowledgeBase()
        node = kb.create_node()
        with pytest.raises(InvalidElementError):
            kb.create_arc(ACCESS, node, 999)

    def test_arc_can_target_arc(self):
        kb = KnowledgeBase()
        a, b, rel = kb.create_node(), kb.create_node(), kb.create_node()
        arc  = kb.create_arc(ElementType.ARC_COMMON_CONST, a, b)
        attr = kb.create_arc(ACCESS, rel, arc)
        assert kb.get_source(attr) == rel
        assert kb.get_target(attr) == arc

    def test_erase_cascades_to_incident_arcs(self):
        kb = KnowledgeBase()
        a, b, rel = kb.create_node(), kb.create_node(), kb.create_node()
        arc  = kb.create_arc(ElementType.ARC_COMMON_CONST, a, b)
        attr = kb.create_arc(ACCESS, rel, arc)

        assert kb.erase_element(b)
        assert not kb.is_valid(arc)
        assert not kb.is_valid(attr)
        assert kb.is_valid(a) and kb.is_valid(rel)
        assert kb.iterator3(a, ElementType.ANY, ElementType.ANY) == []

    def test_erase_missing_returns_false(self):
        assert KnowledgeBase().erase_element(42) is False

    def test_idtf_is_unique(self):
        kb = KnowledgeBase()
        kb.create_node(idtf="socrates")
        with pytest.raises(ValueError, match="zajęty"):
            kb.create_node(idtf="socrates")

    def test_erase_releases_idtf(self):
        kb = KnowledgeBase()
        node = kb.create_node(idtf="socrates")
        kb.erase_element(node)
        assert kb.find_by_idtf("socrates") == INVALID
        kb.create_node(idtf="socrates")

    def test_resolve_node_creates_once(self):
        kb = KnowledgeBase()
        first = kb.resolve_node("concept_greek")
        assert kb.resolve_node("concept_greek") == first
        assert len(kb) == 1

    def test_system_idtf_falls_back_to_handle(self):
        kb = KnowledgeBase()
        node = kb.create_node()
        assert kb.system_idtf(node) == f"#{node}"

    def test_get_source_of_node_raises(self):
        kb = KnowledgeBase()
        node = kb.create_node(idtf="n")
        with pytest.raises(InvalidElementError, match="nie jest łukiem"):
            kb.get_source(node)

    def test_get_type_of_missing_raises(self):
        with pytest.raises(InvalidElementError):
            KnowledgeBase().get_type(7)


class TestIterators:

    @pytest.fixture
    def kb(self):
        kb = KnowledgeBase()
        greek = kb.create_node(idtf="concept_greek")
        for name in ("socrates", "plato"):
            kb.create_arc(ACCESS, greek, kb.create_node(idtf=name))
        var = kb.create_node(ElementType.NODE_VAR, "_x")
        kb.create_arc(ElementType.ARC_ACCESS_VAR_POS_PERM, greek, var)
        return kb

    def test_iterator3_fixed_source_filters_types(self, kb):
        greek = kb.find_by_idtf("concept_greek")
        found = kb.iterator3(greek, ACCESS, ElementType.NODE_CONST)
        assert [kb.get_idtf(t) for _, _, t in found] == ["socrates", "plato"]

    def test_iterator3_fixed_target(self, kb):
        plato = kb.find_by_idtf("plato")
        found = kb.iterator3(ElementType.NODE, ElementType.ARC_ACCESS, plato)
        assert [kb.get_idtf(s) for s, _, _ in found] == ["concept_greek"]

    def test_iterator3_all_free(self, kb):
        found = kb.iterator3(ElementType.NODE, ElementType.ARC_ACCESS, ElementType.NODE_VAR)
        assert [kb.get_idtf(t) for _, _, t in found] == ["_x"]

    def test_iterator5_returns_attribute(self, kb):
        greek, plato = kb.find_by_idtf("concept_greek"), kb.find_by_idtf("plato")
        rel = kb.create_node(idtf="rrel_example")
        arc = kb.iterator3(greek, ACCESS, plato)[0][1]
        attr = kb.create_arc(ACCESS, rel, arc)

        found = kb.iterator5(greek, ACCESS, ElementType.ANY, ACCESS, rel)
        assert found == [(greek, arc, plato, attr, rel)]

    def test_check_arc(self, kb):
        greek, plato = kb.find_by_idtf("concept_greek"), kb.find_by_idtf("plato")
        assert kb.check_arc(greek, plato, ACCESS)
        assert not kb.check_arc(plato, greek)
        assert not kb.check_arc(greek, INVALID)


# =============================================================================
# kb.utils
# =============================================================================

class TestSetUtils:

    def test_add_to_set_is_idempotent(self):
        kb = KnowledgeBase()
        s, e = kb.create_node(), kb.create_node()
        first = add_to_set(kb, s, e)
        assert add_to_set(kb, s, e) == first
        assert is_in_set(kb, s, e)

    def test_get_all_with_type_keeps_insertion_order(self):
        kb = KnowledgeBase()
        s = kb.create_node()
        nodes = [kb.create_node() for _ in range(3)]
        for node in reversed(nodes):
            add_to_set(kb, s, node)
        arc = kb.create_arc(ElementType.ARC_COMMON_CONST, nodes[0], nodes[1])
        add_to_set(kb, s, arc)

        assert get_all_with_type(kb, s) == list(reversed(nodes)) + [arc]
        assert get_all_with_type(kb, s, ElementType.NODE) == list(reversed(nodes))

    def test_get_any_by_out_relation(self):
        kb = KnowledgeBase()
        rule, key, other, role = (kb.create_node() for _ in range(4))
        add_to_set(kb, rule, other)
        arc = add_to_set(kb, rule, key)
        add_to_set(kb, role, arc)

        assert get_any_by_out_relation(kb, rule, role) == key
        assert get_any_by_out_relation(kb, key, role) == INVALID

    def test_get_next_from_set_follows_sequence(self):
        kb = KnowledgeBase()
        s, a, b, seq = (kb.create_node() for _ in range(4))
        arc_a = add_to_set(kb, s, a)
        arc_b = add_to_set(kb, s, b)
        add_to_set(kb, seq, kb.create_arc(ElementType.ARC_COMMON_CONST, arc_a, arc_b))

        assert get_next_from_set(kb, s, a, seq) == b
        assert get_next_from_set(kb, s, b, seq) == INVALID
        assert get_next_from_set(kb, s, seq, seq) == INVALID


class TestKeynodes:

    def test_resolve_creates_missing_nodes(self):
        kb = KnowledgeBase()
        k = Keynodes.resolve(kb)
        assert kb.get_idtf(k.rrel_main_key_element) == "rrel_main_key_element"
        assert kb.get_idtf(k.knowledge_base) == "knowledge_base"

    def test_resolve_is_idempotent(self):
        kb = KnowledgeBase()
        first = Keynodes.resolve(kb)
        size  = len(kb)
        assert Keynodes.resolve(kb) == first
        assert len(kb) == size

    def test_resolve_reuses_existing_node(self):
        kb = KnowledgeBase()
        existing = kb.create_node(idtf="rrel_1")
        assert Keynodes.resolve(kb).rrel_1 == existing
