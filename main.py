import asyncio
import sys
from pathlib import Path

from rich.pretty import pprint

from capstan import BaseCommand, CapstanException, Kernel, Manifest, args, flags, report


class Greet(BaseCommand):
    command_name = "greet"
    description = "Greet someone"

    # optional so that "greet -h" binds and reaches the help flag
    name = args.string(required=False, description="who to greet (defaults to world)")
    admin = flags.boolean(alias="a", description="greet as an administrator")

    async def handle(self):
        self.logger.success("hello %s%s", self.name or "world", " (admin)" if self.admin else "")


class Inspect(BaseCommand):
    command_name = "inspect"
    description = "Print the parsed argument vector"

    files = args.spread(required=False)
    tags = flags.array(alias="t")
    retries = flags.number(default=3)

    def handle(self):
        pprint(self.parsed)


def main(argv=None):
    """
    Run the demo kernel; returns the process exit status.

    Global flags fire once arguments are bound, so "<command> -h" shows that
    command's usage only when its required arguments are present.
    """
    kernel = Kernel().register([Greet, Inspect]).use_manifest(Manifest(Path(__file__).parent))

    def show_help(value, parsed, command):
        if value:
            kernel.print_help(command)
            raise SystemExit(0)

    kernel.flag("help", show_help, alias="h", description="show help")

    async def run():
        await kernel.preload_manifest()
        return await kernel.handle(sys.argv[1:] if argv is None else argv)

    try:
        asyncio.run(run())
    except CapstanException as fault:
        report(fault)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
