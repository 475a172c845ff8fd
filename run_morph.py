import argparse
import logging
import os
import sys
import time
import yaml
from typing import List, Optional

from _image_utils import load_image, prepare_image, save_image
from _landmark_utils import LandmarkError, add_boundary_landmarks, \
    normalize_landmarks, interpolate_landmarks
from _delaunay_utils import get_delaunay_triangles
from _morph_utils import MorphConfig, morph, generate_continuous_morphs, \
    draw_triangulation



# Defaults, overridden by the config file and then by the command line.
DEFAULT_CONFIG = {
    "output_width": 400,
    "output_height": 400,
    "ratio": 0.5,
    "num_frames": 1,
    "output_path": "morph.png",
    "log_level": "INFO",
}


def load_config(config_path : Optional[str]) -> dict:
    """
    Loads the YAML config file on top of the defaults.
    A missing default config file is not an error.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path is None:
        return config

    if not os.path.exists(config_path):
        logging.debug(f"No config file at {config_path}, using defaults")
        return config

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    config.update(loaded)

    return config


def parse_args(argv : Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Morph two faces together")
    parser.add_argument("image1")
    parser.add_argument("image2")
    parser.add_argument("-o", "--output", default=None)
    parser.add_argument("-r", "--ratio", type=float, default=None)
    parser.add_argument("-n", "--num-frames", type=int, default=None)
    parser.add_argument("-c", "--config", default="config.yaml")
    parser.add_argument("--debug", action="store_true",
                        help="Also write the triangulation overlay.")

    return parser.parse_args(argv)


def run(args : argparse.Namespace, config : dict):
    """
    Detects the faces, morphs them and writes the result.
    """
    morph_config = MorphConfig(
        output_width=config["output_width"],
        output_height=config["output_height"])

    ratio = args.ratio if args.ratio is not None else config["ratio"]
    num_frames = args.num_frames if args.num_frames is not None else config["num_frames"]
    output_path = args.output if args.output is not None else config["output_path"]

    # Read the images.
    image_1 = load_image(args.image1)
    image_2 = load_image(args.image2)

    # The detector pulls in mediapipe, so import it only when needed.
    from _detection_utils import get_face_landmarks

    # Get the landmarks on the original images.
    start = time.time()
    landmarks_1 = get_face_landmarks(image_1)
    landmarks_2 = get_face_landmarks(image_2)
    logging.info(f"Detecting landmarks: {time.time() - start:.3f}")

    if landmarks_1 is None:
        raise LandmarkError(f"No face detected in {args.image1}")
    if landmarks_2 is None:
        raise LandmarkError(f"No face detected in {args.image2}")

    # Original (width, height) used to normalize the landmarks.
    image_sizes = ((image_1.shape[1], image_1.shape[0]),
                   (image_2.shape[1], image_2.shape[0]))

    # Scale the images into the canvas.
    canvas_1 = prepare_image(image_1, morph_config.output_width, morph_config.output_height)
    canvas_2 = prepare_image(image_2, morph_config.output_width, morph_config.output_height)

    start = time.time()
    if num_frames > 1:
        frames = generate_continuous_morphs(
            canvas_1,
            canvas_2,
            landmarks_1,
            landmarks_2,
            num_frames=num_frames,
            config=morph_config,
            image_sizes=image_sizes)

        root, ext = os.path.splitext(output_path)
        for i, frame in enumerate(frames):
            save_image(f"{root}_{i:03d}{ext or '.png'}", frame)

    else:
        result = morph(
            canvas_1,
            canvas_2,
            landmarks_1,
            landmarks_2,
            ratio,
            config=morph_config,
            image_sizes=image_sizes)
        save_image(output_path, result)

    logging.info(f"Morphing: {time.time() - start:.3f}")

    # Draw the triangulation used for `ratio` on face 1.
    if args.debug:
        all_landmarks = [
            add_boundary_landmarks(
                normalize_landmarks(landmarks, w, h,
                                    morph_config.output_width,
                                    morph_config.output_height),
                morph_config.output_width,
                morph_config.output_height)
            for landmarks, (w, h) in zip((landmarks_1, landmarks_2), image_sizes)]

        average_landmarks = interpolate_landmarks(all_landmarks[0], all_landmarks[1], ratio)
        triangles = get_delaunay_triangles(average_landmarks)
        overlay = draw_triangulation(canvas_1, average_landmarks, triangles)

        root, ext = os.path.splitext(output_path)
        save_image(f"{root}_triangles{ext or '.png'}", overlay)


def main(argv : Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = load_config(args.config)

    # Set up logging.
    logging.basicConfig(
        level=config["log_level"],
        stream=sys.stdout,
        force=True,
        format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        run(args, config)

    except (LandmarkError, ValueError, OSError) as e:
        logging.error(e)
        return 1

    return 0



if __name__ == "__main__":
    sys.exit(main())
