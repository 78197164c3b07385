from pathlib import Path
from seqlang.interpreter import Interpreter
from seqlang.parser import parse_program


def test_program_2_push_then_len(capsys):
    with open(Path(__file__).parent.parent / 'examples' / 'program_2.sq', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out
    assert out == '4'
