"""
Batch-run demo across multiple images.

Each image is loaded as grayscale, fitted to a SIZE x SIZE grid and pushed
through the transform pipeline once per origin convention. Saves magnitude
and phase PNGs, a comparison figure and a CSV log with diagnostics:
- input_path, center, dc_real, max_magnitude, roundtrip_max_error, magnitude_path, phase_path

Usage (from project root):
python -m scripts.batch_demo [image ...]

Edit the IMAGES list below to point to your files if no paths are given.
"""

import os
import sys
import csv
import logging
from datetime import datetime
import numpy as np

from fftcore.origin import CenterConvention
from fftcore.pipeline import FFTPipeline
from fftcore.settings import DEFAULT_SETTINGS
from fftcore.transform import inverse_transform
from io_utils.image_handler import read_grayscale
from visuals.colormap import magnitude_values
from visuals.plots import compare_and_save, save_magnitude_png, save_phase_png

logger = logging.getLogger("scripts.batch_demo")

# CONFIG: list image paths (the data/ directory in the project) you want to test (edit as needed)
IMAGES = [
    "data/Checkerboard_1.tif",
    "data/Checkerboard_2.jpg",
]

# transform params
SIZE = 64
UPSCALE = 4
CENTERS = (CenterConvention.TOP_LEFT, CenterConvention.CENTER_PIXEL, CenterConvention.CENTER_BETWEEN)

csv_fields = [
    "input_path", "center", "dc_real", "max_magnitude", "roundtrip_max_error",
    "magnitude_path", "phase_path", "compare_path",
]


def record_for(img_path, samples, response, settings, run_dir):
    tag = settings.center.value
    mag_path = save_magnitude_png(response, os.path.join(run_dir, f"magnitude_{tag}.png"),
                                  scale="log", upscale=UPSCALE)
    phase_path = save_phase_png(response, os.path.join(run_dir, f"phase_{tag}.png"), upscale=UPSCALE)
    cmp_path = compare_and_save(samples, response, out_path=os.path.join(run_dir, f"compare_{tag}.png"))

    # reconstruct and compare with the normalized input
    re, _im = inverse_transform(
        response.real, response.imag, response.width, response.height,
        normalization=settings.normalization,
        origin_convention=settings.center,
        is_shifted=settings.apply_display_shift,
    )
    err = float(np.max(np.abs(re - samples.astype(np.float64) / 255.0)))

    dc = response.real.reshape(response.height, response.width)[
        (response.height // 2, response.width // 2) if settings.apply_display_shift else (0, 0)
    ]
    return {
        "input_path": img_path,
        "center": tag,
        "dc_real": float(dc),
        "max_magnitude": float(magnitude_values(response.real, response.imag, response.width, response.height).max()),
        "roundtrip_max_error": err,
        "magnitude_path": mag_path,
        "phase_path": phase_path,
        "compare_path": cmp_path,
    }


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    images = list(argv if argv else IMAGES)

    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    outdir = os.path.join("results", f"batch_demo_{timestamp}")
    os.makedirs(outdir, exist_ok=True)
    csv_path = os.path.join(outdir, "results.csv")

    jobs = []
    with FFTPipeline() as pipeline:
        for img in images:
            if not os.path.exists(img):
                logger.warning("Skipping missing: %s", img)
                continue
            arr, _meta = read_grayscale(img, size=SIZE)
            samples = arr.reshape(-1)
            for center in CENTERS:
                settings = DEFAULT_SETTINGS.updated(center=center)
                request = settings.make_request(samples.copy(), SIZE)
                jobs.append((img, samples, settings, pipeline.submit(request)))
            logger.info("Queued: %s", img)

        with open(csv_path, "w", newline="", encoding="utf-8") as csvf:
            writer = csv.DictWriter(csvf, fieldnames=csv_fields)
            writer.writeheader()
            # single worker: futures finish in submission order
            for img, samples, settings, future in jobs:
                response = future.result()
                run_dir = os.path.join(outdir, os.path.splitext(os.path.basename(img))[0])
                os.makedirs(run_dir, exist_ok=True)
                rec = record_for(img, samples, response, settings, run_dir)
                writer.writerow(rec)
                csvf.flush()
                logger.info("%s [%s] roundtrip error %.3g", img, rec["center"], rec["roundtrip_max_error"])

    logger.info("Batch done. Results in: %s CSV: %s", outdir, csv_path)
    return csv_path


if __name__ == "__main__":
    main(sys.argv[1:])
