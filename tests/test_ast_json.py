import json

from seqlang.ast_json import ast_from_obj, ast_to_obj
from seqlang.parser import parse_program


SOURCE = '''
s = "ab";
push(s, 'c');
i = 0;
while (i < len s) {
    if (s[i] == 98 || 0) s[i] = 66;
    i = i + 1;
}
print s;
'''


def test_program_survives_json():
    program = parse_program(SOURCE)
    obj = ast_to_obj(program)
    assert obj['type'] == 'Program'
    assert obj['body'][1] == {
        'type': 'Push',
        'sequence': {'type': 'Variable', 'name': 's'},
        'value': {'type': 'LiteralInt', 'value': 99},
    }
    assert ast_from_obj(json.loads(json.dumps(obj))) == program


def test_plain_assignment_has_no_index():
    obj = ast_to_obj(parse_program('x = 1;').body[0])
    assert obj == {'type': 'Assignment', 'name': 'x', 'index': None, 'expr': {'type': 'LiteralInt', 'value': 1}}
