#!/usr/bin/env python3
"""
Filename utilities for generating output filenames.
"""

import os
import logging

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 99


def _reserve(candidate: str) -> bool:
    """Create candidate exclusively; False if it already exists."""
    try:
        with open(candidate, "x"):
            pass
        return True
    except FileExistsError:
        return False
    except OSError as e:
        logger.error(f"Cannot create file {candidate}: {e}")
        raise ValueError(f"Cannot create file: {e}")


def generate_output_filename(input_filename: str) -> str:
    """
    Generates an output HTML filename and reserves it by creating an empty file.

    Strategy:
    1. If input ends with .gpx (case-insensitive), drop it
    2. Append " map.html"
    3. If that exists, try " map (1).html", " map (2).html", ... up to MAX_ATTEMPTS
    4. Exclusive open (`open(path, 'x')`) reserves the name without races

    Args:
        input_filename: Path to the input GPX file

    Returns:
        Output filename that has been created as an empty file

    Raises:
        RuntimeError: If no available filename is found
        ValueError: If a file cannot be created (permissions, invalid name)
    """
    input_dir = os.path.dirname(input_filename)
    input_base = os.path.basename(input_filename)

    if input_base.lower().endswith(".gpx"):
        base_name = input_base[:-4]
    else:
        base_name = input_base

    base_output = os.path.join(input_dir, base_name + " map")

    candidate = base_output + ".html"
    if _reserve(candidate):
        return candidate

    for i in range(1, MAX_ATTEMPTS + 1):
        candidate = f"{base_output} ({i}).html"
        if _reserve(candidate):
            return candidate

    logger.error(
        f"Could not find an available filename after {MAX_ATTEMPTS} attempts. "
        f"Please clean up your output directory or specify --output explicitly."
    )
    raise RuntimeError(f"No available filename found after {MAX_ATTEMPTS} attempts")
