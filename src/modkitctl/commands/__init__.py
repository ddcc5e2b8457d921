"""Package of mostly self-contained commands.

The CLI loads the modules in this package dynamically at startup.
Valid command modules in this package should implement an interface like the following:

    def get_help() -> str:
        return "Say hello."

    def setup_parser(parser: argparse.ArgumentParser) -> None:
        # Optional additions to this command's argparse subparser.
        parser.add_argument("--dry-run", action="store_true", help="Only pretend")

    def run(args: argparse.Namespace) -> bool:
        # Implementation of this command's functionality.
        # Return False to make the CLI exit with a non-zero status.
        return True

The module's name will be the CLI's positional argument to invoke the command.
While `run` executes, the CLI registers a call frame named after the command
holding its explicit `--debug`/`--verbose` choice and the raw argument tokens.
Helpers decorated with `tracing.traced` (or `diagnostics.command`) called from
`run` resolve their diagnostic channels against that frame.

If the module has attribute `NOT_A_COMMAND=True` set, it will not be included
by argparse as a valid positional argument.
"""
