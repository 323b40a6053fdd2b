#!/usr/bin/env python3
"""
Basic usage example for morsekey package.

Decodes Morse code keyed on the space bar and prints characters and words
as they are completed.
"""

import time
from morsekey import DecodedStream, MorseKeyConfig


def main():
    """Main function."""
    config = MorseKeyConfig(key="space")
    config.set_wpm(12)

    print("morsekey Basic Usage Example")
    print(f"Key: {config.key}")
    print(f"Speed: {config.wpm} WPM (dot {config.dot_duration_ms:.0f}ms)")
    print("\nReady to receive Morse input (Ctrl+C to exit)...")
    print("=" * 50)
    print()

    def on_character(event):
        print(event.character, end="", flush=True)

    def on_word(event):
        print(f"  [{event.word}]")

    with DecodedStream(config=config, char_callback=on_character, word_callback=on_word) as stream:
        try:
            while stream.is_running():
                time.sleep(0.1)
        except KeyboardInterrupt:
            print("\n\nStopping...")

    stats = stream.pipeline.stats
    print(f"Words: {stats.words}, effective speed: {stats.effective_wpm:.1f} WPM")


if __name__ == "__main__":
    main()
