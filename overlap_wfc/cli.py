"""Command line entry point: run overlapping WFC on a sample image."""
import argparse
import hashlib
import logging
import os
from time import time

import numpy as np
import pandas as pd

from .config import WFCConfig
from .errors import WFCError
from .imaging import load_indexed, save_indexed
from .logging_config import setup_logging
from .model import OverlappingWFC


def build_parser():
    parse = argparse.ArgumentParser(prog="overlap-wfc", description="Run Overlapping WFC on a sample image.")
    parse.add_argument("input_png_file", type=str, help="Path to input sample image.")
    parse.add_argument('--pattern-size', type=int, help="Size of the patterns (NxN).", default=3)
    parse.add_argument('--out-size', type=int, nargs=2, help="Output size (height width).", default=[48, 48])
    parse.add_argument('--seed', type=int, help="Random seed for reproducibility.", default=None)
    parse.add_argument('--num-trials', type=int, help="Number of synthesis trials (unique seeds each).", default=1)
    parse.add_argument('--max-retries', type=int, help="Restarts allowed after a contradiction.", default=10)
    parse.add_argument('--augment-rot-reflect', action='store_true', help="Use data augmentation (rotation/reflection).")
    parse.add_argument('--convert-grayscale', action='store_true', help="Convert input image to grayscale.")
    parse.add_argument('--output-dir', type=str, default=None, help="Directory for outputs (default: <input>_WFC_outputs).")
    parse.add_argument('--show', action='store_true', help="Plot the sample and the last output.")
    parse.add_argument('-v', '--verbose', action='count', default=0, help="-v for progress, -vv for debug logging.")
    return parse


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging([logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)])
    try:
        if args.num_trials < 1:
            raise ValueError("num_trials must be >= 1, got {}".format(args.num_trials))
        config = WFCConfig.from_args(args)
    except ValueError as exc:
        print("Invalid arguments: {}".format(exc))
        return 2

    sample, palette = load_indexed(args.input_png_file, convert_grayscale=args.convert_grayscale)
    print("sample input", sample.shape, "colors", len(palette))
    try:
        wfc = OverlappingWFC(sample, config, palette=palette)
    except WFCError as exc:
        print("Cannot build patterns: {}".format(exc))
        return 1
    print("Extracted {} unique patterns, {} placeable.".format(wfc.K, int(wfc.rules.viable.sum())))

    N = config.pattern_size
    out_H, out_W = config.output_height, config.output_width
    output_dir = args.output_dir or os.path.splitext(os.path.basename(args.input_png_file))[0] + "_WFC_outputs"
    os.makedirs(output_dir, exist_ok=True)
    output_fn = os.path.join(output_dir, "overlapN{}_out{}x{}".format(N, out_H, out_W))

    rng_trials = np.random.default_rng(args.seed)
    total_start = time()
    trial_records = []
    last = None
    grids = []
    for trial in range(args.num_trials):
        trial_seed = int(rng_trials.integers(0, 2**32 - 1, dtype=np.uint32))
        start_time = time()
        try:
            result = wfc.run(seed=trial_seed)
        except WFCError as exc:
            trial_records.append({
                "trial": trial + 1,
                "seed": trial_seed,
                "status": "fail",
                "attempts": getattr(exc, "retries", 0) + 1,
                "kl_divergence": "",
                "missing_patterns": "",
                "elapsed_sec": time() - start_time,
                "error": str(exc),
            })
            print(f"[trial {trial+1}/{args.num_trials}] wfc FAILED (seed={trial_seed}): {exc}")
            continue
        analysis = wfc.analyze(result, use_augmented_counts=config.include_symmetries)
        trial_base = f"{output_fn}_trial{trial+1}_seed{trial_seed}"
        out_img = save_indexed(result.colors, palette, trial_base + ".png")
        np.savez_compressed(trial_base + "_collapsed_grid.npz", collapsed_grid=result.pattern_grid)
        missing = analysis["missing_in_output"]
        trial_records.append({
            "trial": trial + 1,
            "seed": trial_seed,
            "status": "success",
            "attempts": result.attempts,
            "kl_divergence": analysis["kl_divergence"],
            "missing_patterns": ";".join(map(str, missing.tolist())),
            "elapsed_sec": time() - start_time,
            "error": "",
        })
        last = (result, analysis, out_img)
        grids.append(result.pattern_grid)
        print(f"[trial {trial+1}/{args.num_trials}] wfc succeeded in {time() - start_time:.2f}s "
              f"(seed={trial_seed}, attempts={result.attempts})")

    print(f"Total synthesis wall time: {time() - total_start:.2f}s")
    trial_df = pd.DataFrame(trial_records)
    success = int((trial_df["status"] == "success").sum())
    print(f"WFC success: {success}/{args.num_trials} ({success/args.num_trials:.2%})")
    if len(grids) > 1:
        hashes = {hashlib.sha1(g.tobytes()).hexdigest() for g in grids}
        print(f"WFC similarity (token grids): unique={len(hashes)}/{len(grids)}")
    trials_csv = os.path.join(
        output_dir,
        f"trials_N{N}_out{out_H}x{out_W}_{args.num_trials}_runs_seed{args.seed if args.seed is not None else 'rng'}.csv",
    )
    trial_df.to_csv(trials_csv, index=False)
    print("Saved trial log to", trials_csv)

    if last is not None:
        result, analysis, out_img = last
        print("Pattern KL-divergence (sample||output): {:.6f}".format(analysis["kl_divergence"]))
        print("patterns used:", np.unique(result.pattern_grid).size, "/", wfc.K)
        if args.show:
            import matplotlib.pyplot as plt
            from .plotting import plot_distribution_bars, plot_sample_and_output

            plot_distribution_bars(analysis["sample_distribution"], analysis["output_distribution"],
                                   title="Pattern distribution (sample vs output)")
            plot_sample_and_output(sample, result.colors, palette=palette, N=N)
            plt.show()
    return 0 if success else 1
