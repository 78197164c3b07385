import pytest

from seqlang.__main__ import main


def write(tmp_path, text, name='prog.sq'):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_runs_program(tmp_path, capsys):
    path = write(tmp_path, 'x = [1,2,3];\npush(x, 4);\nprint len(x);\n')
    main([str(path)])
    captured = capsys.readouterr()
    assert captured.out == '4'
    assert captured.err == ''


def test_runtime_error_exits_nonzero(tmp_path, capsys):
    path = write(tmp_path, 'print 5 / 0;\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err == 'Divide by zero\n'


def test_output_before_a_syntax_error_is_kept(tmp_path, capsys):
    path = write(tmp_path, 'print "ok\\n";\nprint ;\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'ok\n'
    assert captured.err == 'line 2: syntax error\n'


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.sq')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_missing_program_argument():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_emit_and_run_ast(tmp_path, capsys):
    path = write(tmp_path, 's = "hey";\ns[0] = 72;\nprint s;\n')
    main(['--emit-ast', str(path)])
    ast_path = capsys.readouterr().out.strip()
    assert ast_path.endswith('prog.sq.ast.json')
    main(['--ast', ast_path])
    assert capsys.readouterr().out == 'Hey'


def test_verbose_writes_debug_trace(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'a = 1;\n')
    main(['-vv', str(path)])
    assert 'assign a = 1 (Int)' in (tmp_path / 'debug.txt').read_text()
