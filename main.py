import sys

from rich.console import Console
from rich.pretty import pprint
from rich.table import Table

from argline import *

__prog__ = "argline-demo"

parser = Parser(escape_char="\\")
parser.add_matcher(name="verbose", arg_type=ArgType.OPTION, codes=("v", "verbose"), has_value=OptionHasValue.NEVER, option_tag="verbose")
parser.add_matcher(name="output", arg_type=ArgType.OPTION, codes=("o", "output"), option_tag="output")
parser.add_matcher(name="file", arg_type=ArgType.PARAM, param_tag="file")


if __name__ == '__main__':
    line = " ".join(sys.argv[1:]) or 'copy "my file.txt" -v -o out.txt > log.txt'
    pprint(parser)

    table = Table("arg", "kind", "offset", "tag", "code", "value", title=line)
    for arg in parser.parse(line, shell=True, colorful=True):
        table.add_row(
            str(arg.arg_index),
            arg.kind.value,
            str(arg.offset),
            repr(arg.tag),
            getattr(arg, "code", ""),
            repr(arg.value),
        )
    Console().print(table)
