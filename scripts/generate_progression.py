"""
Generate diatonic chord progressions from the command line.

Prints each example as a row of chords (context label, numeral, function,
symbol, voiced notes), optionally followed by the full chord-possibility
analysis of the first example, and optionally writes that example to a
MIDI file.

Usage:
    python scripts/generate_progression.py --key C --quality Major --length 4
    python scripts/generate_progression.py --key A --quality Minor --length 8 \
        --modulation --deceptive --examples 3 --seed 7 --analysis
    python scripts/generate_progression.py --key Eb --midi out/eb.mid --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import GenerationConfig, load_config  # noqa: E402
from core.music_theory.analysis import analyze_progression  # noqa: E402
from core.music_theory.progression import generate_examples  # noqa: E402
from core.music_theory.types import Progression, ProgressionRequest  # noqa: E402
from ingestion.midi_export import progression_to_midi  # noqa: E402

logger = logging.getLogger(__name__)


def _parse_args(config: GenerationConfig, argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate rule-based diatonic chord progressions."
    )
    parser.add_argument("--key", default=config.default_key, help="Tonic, e.g. C, F#, Bb.")
    parser.add_argument(
        "--quality",
        default=config.default_quality,
        choices=["Major", "Minor"],
        help="Key quality.",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=config.default_length,
        metavar="N",
        help=f"Chords per progression (1-{config.max_length}).",
    )
    parser.add_argument(
        "--modulation",
        action="store_true",
        help="Modulate to a related key at the midpoint.",
    )
    parser.add_argument(
        "--deceptive",
        action="store_true",
        help="Resolve a penultimate V or vii to vi.",
    )
    parser.add_argument(
        "--examples",
        type=int,
        default=1,
        metavar="N",
        help=f"Number of progressions (1-{config.max_examples}).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed,
        help="Seed for reproducible output.",
    )
    parser.add_argument(
        "--analysis",
        action="store_true",
        help="Print the chord-possibility analysis of the first example.",
    )
    parser.add_argument(
        "--midi",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the first example to this MIDI file.",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if not (1 <= args.length <= config.max_length):
        parser.error(f"--length must be between 1 and {config.max_length}")
    if not (1 <= args.examples <= config.max_examples):
        parser.error(f"--examples must be between 1 and {config.max_examples}")
    return args


def format_progression(progression: Progression, index: int) -> str:
    """Render one example as text, one chord per line."""
    lines = [f"Example {index}:"]
    for i, step in enumerate(progression):
        label = progression.context_label(i)
        prefix = f"{label} " if label else ""
        lines.append(
            f"  {prefix}{step.numeral} ({step.roman})  {step.function:<18} "
            f"{step.symbol:<12} {step.note_string}"
        )
    return "\n".join(lines)


def format_analysis(progression: Progression) -> str:
    """Render the full chord analysis of one progression as text."""
    lines = ["Full Chord Analysis & Possibilities"]
    for section in analyze_progression(progression):
        lines.append(section.header)
        for option in section.possibilities:
            lines.append(f"  {option.label}: {option.note_string}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    config = load_config()
    args = _parse_args(config, argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        request = ProgressionRequest(
            key=args.key,
            quality=args.quality,
            length=args.length,
            enable_modulation=args.modulation,
            deceptive_cadence=args.deceptive,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    progressions = generate_examples(request, args.examples, seed=args.seed)

    if args.json:
        payload: dict = {"examples": [p.to_dicts() for p in progressions]}
        if args.analysis:
            payload["analysis"] = [
                {
                    "header": s.header,
                    "possibilities": [
                        {"label": o.label, "type": o.chord_type, "notes": o.note_string}
                        for o in s.possibilities
                    ],
                }
                for s in analyze_progression(progressions[0])
            ]
        print(json.dumps(payload, indent=2))
    else:
        for i, progression in enumerate(progressions, start=1):
            print(format_progression(progression, i))
        if args.analysis:
            print()
            print(format_analysis(progressions[0]))

    if args.midi:
        path = Path(args.midi)
        path.parent.mkdir(parents=True, exist_ok=True)
        progression_to_midi(
            progressions[0],
            bpm=config.bpm,
            chord_duration_sec=config.chord_duration_sec,
            octave=config.octave,
            output_path=path,
        )
        logger.info("MIDI written to %s", path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
