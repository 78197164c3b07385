"""CLI entry point for the seqlang interpreter.

Usage:
    python -m seqlang [-v|-vv|-vvv|-vvvv] <program_file>
    python -m seqlang [-v...] --emit-ast <program_file>
    python -m seqlang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given program and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Source programs are parsed and executed one
statement at a time; the first error stops the run with exit status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import ast_to_obj, ast_from_obj
from .errors import SeqLangError
from .interpreter import Interpreter
from .parser import parse_program


def read_existing(path: Path) -> Path:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    return path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='seqlang', description="seqlang interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file to execute')
    args = parser.parse_args(argv)

    try:
        # Emit AST mode
        if args.emit_ast:
            program_file = read_existing(Path(args.emit_ast))
            with open(program_file, 'r', encoding='utf-8') as f:
                ast_program = parse_program(f)
            obj = ast_to_obj(ast_program)
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(obj, out, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = read_existing(Path(args.ast))
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            Interpreter(debug_level=args.v).run(ast_from_obj(data))
            return

        # Default: execute source file
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast')
        program_file = read_existing(Path(args.program))
        with open(program_file, 'r', encoding='utf-8') as f:
            Interpreter(debug_level=args.v).run_source(f)
    except SeqLangError as e:
        sys.stdout.flush()
        print(e.message, file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
