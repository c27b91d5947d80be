"""
Testy wczytywania bazy wiedzy z JSON.

Weryfikują:
1. Przykładowa baza (data/example_kb.json) wczytuje się poprawnie
2. Naruszenia schematu (jsonschema) są zgłaszane jako KnowledgeBaseFormatError
3. Referencje w przód między łukami są rozwiązywane, nierozwiązane są błędem
4. Zdublowane identyfikatory i nieznane typy są odrzucane
5. dump_kb_dict daje dane, które load_kb_dict wczytuje ponownie
"""

import json

import pytest

from graph_model import INVALID, ElementType
from kb import KnowledgeBaseFormatError, dump_kb_dict, load_kb_dict, load_kb_json
from kb.utils import get_all_with_type, is_in_set


def load(*elements):
    return load_kb_dict({"elements": list(elements)})


class TestExampleFile:

    def test_example_loads(self, example_kb_path):
        kb = load_kb_json(example_kb_path)
        greek, socrates = kb.find_by_idtf("concept_greek"), kb.find_by_idtf("socrates")
        assert is_in_set(kb, greek, socrates)

    def test_example_structures_keep_member_order(self, example_kb_path):
        kb = load_kb_json(example_kb_path)
        case = kb.find_by_idtf("case")
        assert [kb.get_idtf(h) for h in get_all_with_type(kb, case)] == ["socrates", "xerxes"]
        assert kb.get_type(case) == ElementType.NODE_CONST_STRUCT

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{\"elements\": [", encoding="utf-8")
        with pytest.raises(KnowledgeBaseFormatError, match="Błąd parsowania JSON"):
            load_kb_json(path)


class TestLoadDict:

    def test_defaults_node_const_and_access_arc(self):
        kb = load({"id": "a"}, {"id": "b"}, {"id": "ab", "src": "a", "tgt": "b"})
        assert kb.get_type(kb.find_by_idtf("a")) == ElementType.NODE_CONST
        assert kb.get_type(kb.find_by_idtf("ab")) == ElementType.ARC_ACCESS_CONST_POS_PERM

    def test_anonymous_arc(self):
        kb = load({"id": "a"}, {"id": "b"}, {"src": "a", "tgt": "b"})
        assert kb.check_arc(kb.find_by_idtf("a"), kb.find_by_idtf("b"))

    def test_forward_reference_between_arcs(self):
        kb = load(
            {"id": "rel"},
            {"src": "rel", "tgt": "ab"},
            {"id": "ab", "type": "arc_common_const", "src": "a", "tgt": "b"},
            {"id": "a"},
            {"id": "b"},
        )
        assert is_in_set(kb, kb.find_by_idtf("rel"), kb.find_by_idtf("ab"))

    def test_members_create_access_arcs(self):
        kb = load({"id": "s", "type": "node_const_struct", "members": ["x", "y"]}, {"id": "x"}, {"id": "y"})
        s = kb.find_by_idtf("s")
        assert [kb.get_idtf(h) for h in get_all_with_type(kb, s)] == ["x", "y"]

    def test_schema_violation_reports_path(self):
        with pytest.raises(KnowledgeBaseFormatError, match="/elements/0"):
            load({"type": "node_const"})

    def test_missing_elements_key(self):
        with pytest.raises(KnowledgeBaseFormatError, match="Naruszenie schematu"):
            load_kb_dict({"nodes": []})

    def test_src_without_tgt(self):
        with pytest.raises(KnowledgeBaseFormatError):
            load({"id": "a"}, {"id": "arc", "src": "a"})

    def test_unresolved_reference(self):
        with pytest.raises(KnowledgeBaseFormatError, match="nope"):
            load({"id": "a"}, {"src": "a", "tgt": "nope"})

    def test_duplicate_node_id(self):
        with pytest.raises(KnowledgeBaseFormatError, match="Zdublowany"):
            load({"id": "a"}, {"id": "a"})

    def test_duplicate_arc_id(self):
        with pytest.raises(KnowledgeBaseFormatError, match="Zdublowany"):
            load({"id": "a"}, {"id": "b"}, {"id": "a", "src": "a", "tgt": "b"})

    def test_unknown_type(self):
        with pytest.raises(KnowledgeBaseFormatError, match="Nieznany typ"):
            load({"id": "a", "type": "node_bogus"})

    def test_node_with_arc_type(self):
        with pytest.raises(KnowledgeBaseFormatError, match="musi być węzłem"):
            load({"id": "a", "type": "arc_common_const"})

    def test_unknown_member(self):
        with pytest.raises(KnowledgeBaseFormatError, match="Nieznany element"):
            load({"id": "s", "members": ["ghost"]})


class TestDump:

    def test_dump_reloads(self, example_kb_path):
        kb = load_kb_json(example_kb_path)
        data = dump_kb_dict(kb)
        json.dumps(data)

        again = load_kb_dict(data)
        assert len(again) == len(kb)
        plato = again.find_by_idtf("plato")
        assert plato != INVALID
        assert is_in_set(again, again.find_by_idtf("concept_greek"), plato)

    def test_dump_names_anonymous_elements(self):
        kb = load({"id": "a"}, {"id": "b"}, {"src": "a", "tgt": "b"})
        arcs = [e for e in dump_kb_dict(kb)["elements"] if "src" in e]
        assert arcs[0]["id"].startswith("_")
        assert arcs[0]["type"] == "arc_access_const_pos_perm"
