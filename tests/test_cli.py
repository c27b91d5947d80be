"""
Testy CLI pgr.

Weryfikują:
1. infer na przykładowej bazie: cel osiągnięty, tabela prób, --dump, --record
2. Błędy wejścia (brak pliku, nieznany identyfikator) kończą się SystemExit(1)
3. rules i validate-rules na przykładowej bazie
4. apply-schema i reset raportują tabele historii (atrapa połączenia)
"""

import json
from unittest.mock import MagicMock

import pytest

from kb import load_kb_json
from kb.utils import is_in_set
from pgr import cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda verbose=False: None)
    monkeypatch.delenv("PGR_MAX_RESTARTS", raising=False)
    monkeypatch.delenv("PGR_PERSIST_SATISFIABILITY", raising=False)


def run_cli(*argv):
    cli.main(list(argv))


# =============================================================================
# infer
# =============================================================================

class TestInfer:

    def test_target_achieved(self, example_kb_path, capsys):
        run_cli("infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates")
        out = capsys.readouterr().out
        assert "OSIĄGNIĘTY" in out
        assert "NIEOSIĄGNIĘTY" not in out
        assert "rule_human" in out
        assert "powrotów do warstwy 0: 1" in out

    def test_with_input_structure(self, example_kb_path, capsys):
        run_cli(
            "infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates",
            "--input", "case", "--output", "output",
        )
        out = capsys.readouterr().out
        assert "NIEOSIĄGNIĘTY" not in out
        assert "wejście=case" in out

    def test_unreachable_target(self, example_kb_path, capsys):
        run_cli(
            "infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates",
            "--max-restarts", "0",
        )
        assert "NIEOSIĄGNIĘTY" in capsys.readouterr().out

    def test_dump_writes_inferred_facts(self, example_kb_path, tmp_path):
        dump = tmp_path / "after.json"
        run_cli(
            "infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates",
            "--dump", str(dump),
        )
        json.loads(dump.read_text(encoding="utf-8"))
        kb = load_kb_json(dump)
        assert is_in_set(kb, kb.find_by_idtf("concept_mortal"), kb.find_by_idtf("socrates"))

    def test_record_inserts_run(self, example_kb_path, monkeypatch, capsys):
        conn = MagicMock()
        insert_run = MagicMock(return_value=11)
        monkeypatch.setattr("pgr._db.get_connection", lambda: conn)
        monkeypatch.setattr("history.insert_run", insert_run)

        run_cli("infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates", "--record")

        record = insert_run.call_args.args[1]
        assert record.achieved is True
        assert record.target == "target_mortal_socrates"
        assert [a.idtf for a in record.attempts] == ["rule_mortal", "rule_human", "rule_mortal"]
        conn.close.assert_called_once()
        assert "id=11" in capsys.readouterr().out

    def test_missing_kb_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("infer", "--kb", str(tmp_path / "missing.json"), "--target", "t")
        assert exc_info.value.code == 1

    def test_unknown_target(self, example_kb_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("infer", "--kb", str(example_kb_path), "--target", "no_such_target")
        assert exc_info.value.code == 1
        assert "no_such_target" in capsys.readouterr().out

    def test_invalid_env_config(self, example_kb_path, monkeypatch):
        monkeypatch.setenv("PGR_MAX_RESTARTS", "dużo")
        with pytest.raises(SystemExit):
            run_cli("infer", "--kb", str(example_kb_path), "--target", "target_mortal_socrates")


# =============================================================================
# rules / validate-rules
# =============================================================================

class TestRuleCommands:

    def test_rules_lists_tiers(self, example_kb_path, capsys):
        run_cli("rules", "--kb", str(example_kb_path), "--detail")
        out = capsys.readouterr().out
        for name in ("rule_mortal", "rule_human", "rule_philosopher"):
            assert name in out
        assert "3 reguły w 2 warstwach" in out

    def test_validate_rules_ok(self, example_kb_path, capsys):
        run_cli("validate-rules", "--kb", str(example_kb_path))
        assert "OK" in capsys.readouterr().out

    def test_validate_rules_json(self, example_kb_path, capsys):
        run_cli("validate-rules", "--kb", str(example_kb_path), "--json-output")
        out = capsys.readouterr().out
        report = json.loads(out[out.index("{"):])
        assert report == {"is_valid": True, "errors": [], "warnings": []}

    def test_validate_unknown_rule_set_exits(self, example_kb_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli("validate-rules", "--kb", str(example_kb_path), "--rules", "nothing")
        assert exc_info.value.code == 1
        assert "E_RULE_SET_INVALID" in capsys.readouterr().out

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            run_cli()


# =============================================================================
# apply-schema / reset
# =============================================================================

class TestSchemaCommands:

    @pytest.fixture
    def conn(self, monkeypatch):
        connection = MagicMock()
        connection.__enter__.return_value = connection
        connection.cur = connection.cursor.return_value.__enter__.return_value
        monkeypatch.setattr("pgr.commands.apply_schema.get_connection", lambda: connection)
        monkeypatch.setattr("pgr.commands.reset.get_connection", lambda: connection)
        return connection

    def test_apply_schema_reports_created_tables(self, conn, capsys):
        conn.cur.fetchall.side_effect = [[("inference_run",)], [("inference_run",), ("rule_attempt",)]]
        run_cli("apply-schema")
        out = capsys.readouterr().out
        assert "Utworzono tabelę rule_attempt" in out
        assert "Tabela inference_run już istniała" in out
        conn.close.assert_called_once()

    def test_apply_schema_missing_table_exits(self, conn, capsys):
        conn.cur.fetchall.side_effect = [[], [("inference_run",)]]
        with pytest.raises(SystemExit) as exc_info:
            run_cli("apply-schema")
        assert exc_info.value.code == 1
        assert "rule_attempt" in capsys.readouterr().out

    def test_apply_schema_error_closes_connection(self, conn, capsys):
        conn.cur.fetchall.side_effect = RuntimeError("brak uprawnień")
        with pytest.raises(SystemExit):
            run_cli("apply-schema")
        assert "brak uprawnień" in capsys.readouterr().out
        conn.close.assert_called_once()

    def test_reset_schema_drops_existing_tables(self, conn, capsys):
        conn.cur.fetchall.return_value = [("inference_run",)]
        run_cli("reset", "schema")
        statements = [c.args[0] for c in conn.cur.execute.call_args_list]
        assert "DROP TABLE inference_run" in statements
        assert "DROP TABLE rule_attempt" not in statements
        assert "Tabela rule_attempt nie istnieje" in capsys.readouterr().out
