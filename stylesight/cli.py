#!/usr/bin/env python3
"""
Command-line entry point for StyleSight garment analysis
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

EXIT_OK = 0
EXIT_DECODE_ERROR = 2
EXIT_REJECTED = 3
EXIT_ANALYSIS_FAILURE = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect garment features in a clothing photo")
    parser.add_argument("image", type=Path, help="Path to the image file")
    parser.add_argument("--env", help="Path to .env file")
    parser.add_argument("--max-dimension", type=int, help="Longer image side after scaling")
    parser.add_argument("--no-validate", action="store_true", help="Skip the clothing content gate")
    parser.add_argument("--validate-only", action="store_true", help="Only run the clothing content gate")
    parser.add_argument("--fallback", action="store_true", help="Return a labeled fallback record on analysis failure")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Environment must be loaded before the configuration is built
    if args.env:
        load_dotenv(args.env)

    from stylesight.analyzer import create_clothing_analyzer
    from stylesight.config import AnalyzerConfig, configure_logging
    from stylesight.errors import AnalysisFailure, ClothingRejectedError, ImageDecodeError

    settings = AnalyzerConfig()
    if args.max_dimension:
        settings.max_dimension = args.max_dimension
    if args.no_validate:
        settings.content_validation = False
    if args.fallback:
        settings.fallback_on_failure = True
    configure_logging(settings)

    try:
        image_bytes = args.image.read_bytes()
    except OSError as e:
        print(f"❌ Cannot read {args.image}: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR

    analyzer = create_clothing_analyzer(settings)

    try:
        if args.validate_only:
            result = analyzer.validate(image_bytes)
        else:
            result = analyzer.analyze(image_bytes)
    except ImageDecodeError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except ClothingRejectedError as e:
        print(json.dumps(e.result.model_dump(), indent=2))
        print(f"🚫 {e}", file=sys.stderr)
        return EXIT_REJECTED
    except AnalysisFailure as e:
        print(f"❌ Analysis failed: {e}", file=sys.stderr)
        return EXIT_ANALYSIS_FAILURE

    print(json.dumps(result.model_dump(), indent=2))
    if args.validate_only and not result.is_clothing:
        return EXIT_REJECTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
