#!/usr/bin/env python3
"""
Offline decoding example.

Decodes recorded (mark, space) durations in milliseconds, and shows a custom
character layered over the standard table.
"""

from morsekey import MemoryMappingStore, SequenceDecoder, TimingClassifier, decode_timings

DOT = 100
DASH = 400
ELEMENT_GAP = 150
LETTER_GAP = 600
WORD_GAP = 2000


def key(sequence, gap):
    """Turn a dot/dash string into (mark, space) pairs ending with gap."""
    pairs = [(DOT if mark == "." else DASH, ELEMENT_GAP) for mark in sequence]
    pairs[-1] = (pairs[-1][0], gap)
    return pairs


def main():
    """Main function."""
    classifier = TimingClassifier(10)
    profile = classifier.get_thresholds()
    print(f"Dot {profile.dot_min}-{profile.dot_max}ms, dash {profile.dash_min}-{profile.dash_max}ms")

    timings = key("...", LETTER_GAP) + key("---", LETTER_GAP) + key("...", WORD_GAP)
    print("Decoded:", decode_timings(timings, classifier=classifier))

    decoder = SequenceDecoder(store=MemoryMappingStore())
    decoder.add_custom_mapping("[", "-.--.-.")
    timings = key("-.--.-.", LETTER_GAP) + key(".-", WORD_GAP)
    print("With custom mapping:", decode_timings(timings, classifier=classifier, decoder=decoder))


if __name__ == "__main__":
    main()
