"""Solver configuration."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WFCConfig:
    """
    Parameters of one overlapping WFC run.
    Args:
        pattern_size: Pattern size N (NxN), at least 2
        include_symmetries: If True, adds rotated/reflected patterns
        output_width, output_height: output cell grid size
        max_retries: number of restarts allowed after a contradiction
        random_seed: seed for reproducibility, None for fresh entropy
    """
    pattern_size: int = 3
    include_symmetries: bool = False
    output_width: int = 48
    output_height: int = 48
    max_retries: int = 10
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.pattern_size < 2:
            raise ValueError("pattern_size must be >= 2, got {}".format(self.pattern_size))
        if self.output_width < 1 or self.output_height < 1:
            raise ValueError(
                "output size must be positive, got {}x{}".format(self.output_height, self.output_width)
            )
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0, got {}".format(self.max_retries))

    @classmethod
    def from_args(cls, args):
        """Build a config from the parsed command line namespace."""
        out_h, out_w = args.out_size
        return cls(
            pattern_size=args.pattern_size,
            include_symmetries=args.augment_rot_reflect,
            output_width=out_w,
            output_height=out_h,
            max_retries=args.max_retries,
            random_seed=args.seed,
        )
