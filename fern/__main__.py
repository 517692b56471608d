"""CLI entry point for the Fern interpreter.

Usage:
    python -m fern [-v|-vv|-vvv] <program_file>
    python -m fern [-v...] --emit-ast <program_file>
    python -m fern [-v...] --ast <ast_json_file>
    python -m fern

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .fern file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

The value of every top-level expression is printed on its own line.
Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Without a program file an interactive
session is started.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import program_to_obj, program_from_obj
from .diagnostics import render_exception
from .errors import FernError
from .interpreter import Interpreter
from .parser import parse_source
from .repl import Shell
from .types import to_string


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program, interpreter: Interpreter, source: str, name: str) -> None:
    try:
        values = interpreter.run(program)
    except FernError as e:
        print(render_exception(e, source, name), file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()
    for value in values:
        print(to_string(value))


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='fern', description="Fern language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='FERN_FILE', help='emit AST JSON for the given .fern file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Fern program file (.fern) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            program = parse_source(source)
        except FernError as e:
            print(render_exception(e, source, str(program_file)), file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON; the original source is not available for excerpts
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        program = program_from_obj(data)
        interpreter = Interpreter(debug_level=args.v, debug_file='debug.txt')
        try:
            values = interpreter.run(program)
        except FernError as e:
            print(f"Runtime error: {e.message}", file=sys.stderr)
            sys.exit(1)
        finally:
            interpreter.close()
        for value in values:
            print(to_string(value))
        return

    # Interactive mode
    if not args.program:
        Shell(Interpreter(debug_level=args.v, debug_file='debug.txt')).cmdloop()
        return

    # Default: execute source file
    program_file = Path(args.program)
    source = read_source(program_file)
    try:
        program = parse_source(source)
    except FernError as e:
        print(render_exception(e, source, str(program_file)), file=sys.stderr)
        sys.exit(1)
    execute(program, Interpreter(debug_level=args.v, debug_file='debug.txt'), source, str(program_file))


if __name__ == '__main__':
    main()
