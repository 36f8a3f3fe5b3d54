import argparse
from dataclasses import dataclass
from typing import Optional


@dataclass
class GreatCircleConfig:
    """Configuration for the greatcircle CLI."""

    max_distance: float = 25.0
    bbox_buffer: float = 10.0
    log_level: str = "WARNING"
    open_browser: bool = True
    output: Optional[str] = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "GreatCircleConfig":
        return cls(
            max_distance=args.max_distance,
            bbox_buffer=args.bbox_buffer,
            log_level=args.log_level,
            open_browser=not args.no_open,
            output=args.output,
        )
