"""Command-line interface for morsekey package."""

import sys
import argparse
import logging
import signal
from typing import List, Optional

from . import __version__
from .config import MorseKeyConfig, load_config, save_config
from .decoder import SequenceDecoder, normalize_sequence
from .errors import MorseKeyError
from .events import CharacterDecoded, InvalidPress, WordCompleted
from .store import JsonMappingStore
from .timing import TimingClassifier


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="morsekey",
        description="morsekey - decode Morse keyed on a single keyboard key",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode presses of the space bar at 10 WPM
  morsekey

  # Key faster on the right control key, with sidetone
  morsekey --wpm 18 --key ctrl_r --audio

  # Manage custom characters
  morsekey --add-mapping '[' '-.--.-.'
  morsekey --remove-mapping '-.--.-.'
  morsekey --list-mappings

  # Show the timing thresholds for a speed
  morsekey --wpm 15 --thresholds
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (default: ~/.morsekey/settings.json)",
    )
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Write the effective settings back to the settings file",
    )
    parser.add_argument("--wpm", type=int, default=None, help="Words per minute (default: 10)")
    parser.add_argument(
        "--key", type=str, default=None, help="Key to listen to, e.g. space, ctrl_r, k (default: space)"
    )
    parser.add_argument(
        "--no-custom",
        action="store_false",
        dest="custom_lookup_enabled",
        default=None,
        help="Ignore custom mappings while decoding",
    )
    parser.add_argument(
        "--no-unknown",
        action="store_false",
        dest="represent_unknown_enabled",
        default=None,
        help="Drop unknown sequences instead of printing a placeholder",
    )
    parser.add_argument(
        "--custom-map", type=str, default=None, help="Custom mapping file (JSON)"
    )
    parser.add_argument(
        "--audio", action="store_true", default=None, help="Enable sidetone for dots and dashes"
    )

    parser.add_argument(
        "--add-mapping",
        nargs=2,
        metavar=("CHAR", "SEQUENCE"),
        help="Add a custom mapping and exit",
    )
    parser.add_argument(
        "--remove-mapping", metavar="SEQUENCE", help="Remove a custom mapping and exit"
    )
    parser.add_argument(
        "--list-mappings", action="store_true", help="Print custom mappings and exit"
    )
    parser.add_argument(
        "--thresholds", action="store_true", help="Print timing thresholds and exit"
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_config(args: argparse.Namespace) -> MorseKeyConfig:
    """Load settings and apply command-line overrides."""
    config = load_config(args.config)
    if args.wpm is not None:
        config.set_wpm(args.wpm)
    for name in ("key", "custom_lookup_enabled", "represent_unknown_enabled", "audio"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    if args.custom_map is not None:
        config.custom_map_path = args.custom_map
    return config


def print_thresholds(config: MorseKeyConfig) -> None:
    """Print the timing profile for the configured speed."""
    profile = TimingClassifier(config.wpm).get_thresholds()
    print(f"Speed: {profile.wpm} WPM (unit {profile.unit_ms:.1f}ms)")
    print(f"  dot:               {profile.dot_min}-{profile.dot_max}ms")
    print(f"  dash:              {profile.dash_min}-{profile.dash_max}ms")
    print(f"  element separator: {profile.element_separator_min}-{profile.element_separator_max}ms")
    print(f"  letter separator:  {profile.letter_separator_min}-{profile.letter_separator_max}ms")
    print(f"  word separator:    {profile.word_separator_min}ms+")


def manage_mappings(args: argparse.Namespace, config: MorseKeyConfig) -> None:
    """Run the mapping management options."""
    decoder = SequenceDecoder(store=JsonMappingStore(config.custom_map_path))

    if args.add_mapping:
        character, sequence = args.add_mapping
        sequence = normalize_sequence(sequence)
        decoder.add_custom_mapping(character.upper(), sequence)
        print(f"Added {character.upper()} = {sequence}")
    if args.remove_mapping:
        sequence = normalize_sequence(args.remove_mapping)
        if decoder.remove_custom_mapping(sequence):
            print(f"Removed {sequence}")
        else:
            print(f"No custom mapping for {sequence}", file=sys.stderr)
    if args.list_mappings:
        table = decoder.custom_table
        if not table:
            print("No custom mappings")
        for sequence, character in sorted(table.items()):
            print(f"{character}  {sequence}")


def run_live(config: MorseKeyConfig) -> None:
    """Decode keyboard input until interrupted."""
    # pynput is only needed for live decoding
    from .listener import is_valid_key_name
    from .stream import DecodedStream

    if not is_valid_key_name(config.key):
        raise MorseKeyError(f"Unknown key name {config.key!r}")

    def on_character(event: CharacterDecoded) -> None:
        print(event.character, end="", flush=True)

    def on_word(event: WordCompleted) -> None:
        print(" ", end="", flush=True)

    def on_invalid(event: InvalidPress) -> None:
        print(f"\n[invalid press: {event.duration_ms:.0f}ms]", file=sys.stderr)

    stream = DecodedStream(
        config=config,
        char_callback=on_character,
        word_callback=on_word,
        invalid_callback=on_invalid,
    )

    if config.audio:
        try:
            from .audio import Sidetone
        except (ImportError, OSError) as e:
            print(f"Audio unavailable: {e}", file=sys.stderr)
        else:
            Sidetone.for_speed(config.wpm, config.sidetone_hz).attach(stream.bus)

    print("morsekey", file=sys.stderr)
    print(f"Key: {config.key}", file=sys.stderr)
    print(f"Speed: {config.wpm} WPM", file=sys.stderr)
    print(f"Custom mappings: {'Enabled' if config.custom_lookup_enabled else 'Disabled'}", file=sys.stderr)
    print("", file=sys.stderr)
    print("Ready to receive Morse input (Ctrl+C to exit)...", file=sys.stderr)
    print("=" * 50, file=sys.stderr)

    with stream:
        while stream.is_running():
            signal.pause()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = build_config(args)
        if args.save_settings:
            path = save_config(config, args.config)
            print(f"Settings saved to {path}", file=sys.stderr)

        if args.thresholds:
            print_thresholds(config)
            return 0
        if args.add_mapping or args.remove_mapping or args.list_mappings:
            manage_mappings(args, config)
            return 0

        run_live(config)

    except KeyboardInterrupt:
        print("\n\nStopping morsekey...", file=sys.stderr)
        return 0
    except MorseKeyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
