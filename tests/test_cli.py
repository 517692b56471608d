import json

import pytest

from fern.__main__ import main


def write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_and_prints_values(tmp_path, capsys):
    path = write(tmp_path, 'sum.fern', "let a = 4\na * a\na == 4")
    main([str(path)])
    assert capsys.readouterr().out == "16\ntrue\n"


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nope.fern')])
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_parse_error_is_rendered(tmp_path, capsys):
    path = write(tmp_path, 'bad.fern', "let x = \n")
    with pytest.raises(SystemExit):
        main([str(path)])
    err = capsys.readouterr().err
    assert err.startswith(f"error in {path}: Ran out of tokens while parsing expression")


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write(tmp_path, 'prog.fern', "function sq(n): n * n end\nsq(7)")
    main(['--emit-ast', str(path)])
    out_path = capsys.readouterr().out.strip()
    assert out_path == str(path) + '.ast.json'
    with open(out_path, encoding='utf-8') as f:
        assert json.load(f)["type"] == "Program"

    main(['--ast', out_path])
    assert capsys.readouterr().out == "49\n"


def test_verbose_flag_writes_debug_file(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'dbg.fern', "function id(x): x end\nid(3)")
    main(['-vv', str(path)])
    assert capsys.readouterr().out == "3\n"
    debug = (tmp_path / 'debug.txt').read_text().splitlines()
    assert debug == ["call id(x=3) depth 1", "value 3"]
