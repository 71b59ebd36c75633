"""Image classifier implementations answering "is there a cat in this picture?"."""

import os
import random
import time
from typing import Any, List, Optional, Tuple

import cv2
import numpy as np

from .interfaces import ImageServiceInterface
from .error_handler import ClassifierError, InvalidInputError
from ..config.defaults import CLASSIFIER_SETTINGS
from ..utils import load_image
from ..logging_config import get_logger, log_performance

logger = get_logger("image_service")


class FakeImageService(ImageServiceInterface):
    """Classifier stand-in that answers at random. Seed it for repeatable runs."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        result = self._random.random() < 0.5
        logger.debug(f"Fake classification: cat={result}")
        return result


class OpenCVImageService(ImageServiceInterface):
    """Cat classifier using an OpenCV Haar cascade.

    Each detected box gets a confidence score between 0 and 100 built from
    its size and how close it sits to the frame centre. The image contains a
    cat when the best score reaches the requested threshold.
    """

    def __init__(self,
                 cascade_path: Optional[str] = None,
                 cascade: Any = None,
                 scale_factor: float = CLASSIFIER_SETTINGS["scale_factor"],
                 min_neighbors: int = CLASSIFIER_SETTINGS["min_neighbors"],
                 min_size: Tuple[int, int] = CLASSIFIER_SETTINGS["min_size"],
                 max_size: Tuple[int, int] = (300, 300)):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size
        self.max_size = max_size
        self.cascade = cascade if cascade is not None else self._load_cascade(cascade_path)

    def _load_cascade(self, cascade_path: Optional[str]) -> Any:
        """Load the configured cascade, or the ones bundled with OpenCV."""
        if cascade_path:
            candidates = [cascade_path]
        else:
            candidates = [
                os.path.join(cv2.data.haarcascades, CLASSIFIER_SETTINGS["cascade_file"]),
                os.path.join(cv2.data.haarcascades, CLASSIFIER_SETTINGS["fallback_cascade_file"])
            ]

        for path in candidates:
            if os.path.exists(path):
                cascade = cv2.CascadeClassifier(path)
                if not cascade.empty():
                    logger.info(f"Loaded Haar cascade from {path}")
                    return cascade
                logger.warning(f"Failed to load cascade from {path}")

        raise ClassifierError(f"No usable cat cascade found (tried: {', '.join(candidates)})")

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        if image is None:
            raise InvalidInputError("image must not be None")

        start_time = time.time()

        try:
            frame = load_image(image)
        except (FileNotFoundError, TypeError, OSError) as e:
            raise ClassifierError(f"Could not read image: {e}") from e

        gray = self._preprocess_frame(frame)
        boxes = self._detect(gray)
        scores = [self._score_detection(box, gray.shape) for box in boxes]
        best_score = max(scores, default=0.0)

        log_performance("Image classified", {
            "duration_ms": round((time.time() - start_time) * 1000, 2),
            "detections": len(boxes),
            "best_score": round(best_score, 1)
        })

        return bool(boxes) and best_score >= confidence_threshold

    def _preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        """Convert to grayscale and equalize the histogram."""
        if frame.ndim == 3:
            gray = cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
        else:
            gray = frame

        return cv2.equalizeHist(gray.astype(np.uint8))

    def _detect(self, gray: np.ndarray) -> List[Tuple[int, int, int, int]]:
        detections = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size
        )
        return [(int(x), int(y), int(w), int(h)) for x, y, w, h in detections]

    def _score_detection(self, box: Tuple[int, int, int, int],
                         frame_shape: Tuple[int, ...]) -> float:
        x, y, w, h = box
        frame_h, frame_w = frame_shape[:2]

        center_x = x + w // 2
        center_y = y + h // 2
        center_dist = ((center_x - frame_w // 2) ** 2 + (center_y - frame_h // 2) ** 2) ** 0.5
        max_dist = ((frame_w // 2) ** 2 + (frame_h // 2) ** 2) ** 0.5 or 1.0
        center_factor = max(0.0, 1.0 - center_dist / max_dist)

        max_area = self.max_size[0] * self.max_size[1]
        size_factor = min(1.0, (w * h) / max_area)

        confidence = 0.6 + 0.2 * center_factor + 0.2 * size_factor
        return max(0.0, min(1.0, confidence)) * 100.0
