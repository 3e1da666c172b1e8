"""
Command-line interface for Chat Formatter.

Runs the formatter against an in-process chat host, which is handy for
trying out a format before deploying it.

Commands:
- render: Format a single chat message and print the final line
- console: Read chat lines from stdin; ``/chatformatter reload`` reloads
- show-template: Print the compiled format template
- init-config: Write the default config file

Usage:
    chat-formatter render --name Ray --message "hello" [--prefix "&c[Admin] "]
    chat-formatter console --name Ray
    chat-formatter show-template [--format "{name}: {message}"]
    chat-formatter init-config [--config PATH]

Environment Variables:
    CHAT_FORMATTER_CONFIG: Config file (default: config/config.yml)
    CHAT_FORMAT: Overrides the configured format
    CHAT_FORMATTER_LOG_LEVEL: Overrides the configured log level
"""

import argparse
import sys

from chat_formatter import __version__
from chat_formatter.config import configure_logging, load_config, save_default_config
from chat_formatter.core.bus import ChatBus
from chat_formatter.core.chat import Player, publish_chat
from chat_formatter.core.services import ServiceDirectory
from chat_formatter.formatting.colors import strip_colors
from chat_formatter.formatting.template import compile_template
from chat_formatter.plugin import ChatFormatterPlugin
from chat_formatter.providers import (
    ChatMetaProvider,
    InMemoryChatMeta,
    InMemoryLinkedAccounts,
    InMemoryVerifierPrefixes,
    LinkedAccount,
    LinkedAccountLookup,
    VerifierPrefixRegistry,
)

COMMAND_PREFIXES = ("/chatformatter", "/cf")


class _ConsoleSender:
    """Command sender that prints acknowledgements to stdout."""

    def send_message(self, message: str) -> None:
        print(message)


def _build_plugin(
    args: argparse.Namespace, player: Player
) -> tuple[ChatFormatterPlugin, ChatBus]:
    """
    Create a plugin on the process bus, with providers from the arguments.

    Providers are registered after the plugin is enabled so they reach it
    through service notifications, the same way a late-starting service
    would on a live server.
    """
    bus = ChatBus()
    services = ServiceDirectory(bus)
    plugin = ChatFormatterPlugin(
        config_path=getattr(args, "config", None),
        bus=bus,
        services=services,
        save_default=False,
    )
    plugin.enable(getattr(args, "settings", None))

    fmt = getattr(args, "format", None)
    if fmt is not None:
        plugin.store.reload(fmt)

    prefix = getattr(args, "prefix", None)
    suffix = getattr(args, "suffix", None)
    if prefix is not None or suffix is not None:
        meta = InMemoryChatMeta(name="cli")
        if prefix is not None:
            meta.prefixes[player.unique_id] = prefix
        if suffix is not None:
            meta.suffixes[player.unique_id] = suffix
        services.register(ChatMetaProvider, meta)

    verifier = getattr(args, "verifier", None)
    badge = getattr(args, "badge", None)
    if verifier is not None:
        accounts = InMemoryLinkedAccounts({player.unique_id: LinkedAccount(verifier)})
        services.register(LinkedAccountLookup, accounts)
        prefixes = InMemoryVerifierPrefixes({verifier: badge} if badge is not None else {})
        services.register(VerifierPrefixRegistry, prefixes)

    return plugin, bus


def _print_line(line: str, plain: bool) -> None:
    print(strip_colors(line) if plain else line)


def cmd_render(args: argparse.Namespace) -> int:
    """
    Format one message and print it.

    Returns:
        0 on success, 1 on error
    """
    player = Player.offline(args.name, args.display_name)
    try:
        _, bus = _build_plugin(args, player)
        event = publish_chat(bus, player, args.message)
    except Exception as e:
        print(f"Error formatting message: {e}", file=sys.stderr)
        return 1

    _print_line(event.render(), args.plain)
    return 0


def cmd_console(args: argparse.Namespace) -> int:
    """
    Interactive chat loop.

    Every input line is sent as a chat message from ``--name``. Lines
    starting with ``/chatformatter`` or ``/cf`` are passed to the plugin's
    command handler instead.

    Returns:
        0 on end of input or Ctrl+C
    """
    player = Player.offline(args.name, args.display_name)
    plugin, bus = _build_plugin(args, player)
    sender = _ConsoleSender()

    try:
        for raw_line in sys.stdin:
            line = raw_line.rstrip("\n")
            words = line.split()
            if not words:
                continue

            label, *command_args = words
            if label.lower() in COMMAND_PREFIXES:
                if not plugin.on_command(sender, command_args):
                    print(f"Usage: {label} reload")
                continue

            event = publish_chat(bus, player, line)
            _print_line(event.render(), args.plain)
    except KeyboardInterrupt:
        print()

    plugin.disable()
    return 0


def cmd_show_template(args: argparse.Namespace) -> int:
    """Print the compiled form of the configured (or given) format."""
    raw = args.format if args.format is not None else args.settings.format
    template = compile_template(raw)
    print(f"Raw:      {template.raw}")
    print(f"Compiled: {template.text}")
    return 0


def cmd_init_config(args: argparse.Namespace) -> int:
    """
    Write the default config file.

    Returns:
        0 on success (including when the file already exists), 1 on error
    """
    try:
        written = save_default_config(args.config)
    except OSError as e:
        print(f"Error writing config: {e}", file=sys.stderr)
        return 1

    if written:
        print("Default config written.")
    else:
        print("Config file already exists, left unchanged.")
    return 0


def _add_chat_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", "-n", required=True, help="Player name")
    parser.add_argument("--display-name", help="Display name (default: the player name)")
    parser.add_argument(
        "--format",
        "-f",
        help="Format to use instead of the configured one (until the next reload)",
    )
    parser.add_argument("--prefix", help="Player prefix, e.g. '&c[Admin] '")
    parser.add_argument("--suffix", help="Player suffix")
    parser.add_argument("--verifier", help="Verifier of the player's linked account")
    parser.add_argument("--badge", help="Badge shown for --verifier, e.g. '&#5865F2[D]'")
    parser.add_argument(
        "--plain", action="store_true", help="Strip color codes from the printed line"
    )


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="chat-formatter",
        description="Chat Formatter - template-based chat line formatting",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        "-c",
        help="Config file (default: CHAT_FORMATTER_CONFIG or config/config.yml)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser(
        "render",
        help="Format a single chat message",
        description="Format one message through the full two-pass pipeline and print it.",
    )
    _add_chat_arguments(render_parser)
    render_parser.add_argument("--message", "-m", required=True, help="Message text")
    render_parser.set_defaults(func=cmd_render)

    console_parser = subparsers.add_parser(
        "console",
        help="Chat interactively from stdin",
        description="Send each stdin line as chat. '/chatformatter reload' reloads the config.",
    )
    _add_chat_arguments(console_parser)
    console_parser.set_defaults(func=cmd_console)

    template_parser = subparsers.add_parser(
        "show-template",
        help="Print the compiled format template",
    )
    template_parser.add_argument("--format", "-f", help="Format to compile instead of the config")
    template_parser.set_defaults(func=cmd_show_template)

    init_parser = subparsers.add_parser(
        "init-config",
        help="Write the default config file if none exists",
    )
    init_parser.set_defaults(func=cmd_init_config)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    # Commands read the loaded config from args.settings.
    args.settings = load_config(args.config)
    configure_logging(args.settings.logging)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
