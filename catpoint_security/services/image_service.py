"""Image services that decide whether a frame shows a cat."""

import os
import random
from typing import Any, Callable, Dict, List, Optional, Tuple

import cv2
import numpy as np

from ..config.defaults import CASCADE_FILES
from ..models.config import SystemConfig
from .interfaces import ImageServiceInterface, NDArray
from .error_handler import global_error_handler, ErrorSeverity, with_error_handling
from ..logging_config import get_logger

logger = get_logger("image_service")

COMPONENT_NAME = "image_service"


class FakeImageService(ImageServiceInterface):
    """Image service that answers at random, for demos without a camera."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, frame: NDArray, confidence_threshold: float) -> bool:
        return self._random.random() < 0.5


class OpenCVImageService(ImageServiceInterface):
    """Cat recognition using OpenCV Haar cascades.

    Each detected box is scored from 0 to 100 by its size and its distance
    to the frame centre; a frame contains a cat when any score reaches the
    requested confidence threshold.
    """

    def __init__(self,
                 cascade_path: Optional[str] = None,
                 scale_factor: float = 1.1,
                 min_neighbors: int = 3,
                 min_detection_size: int = 30):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_detection_size = (min_detection_size, min_detection_size)

        # Preprocessing parameters
        self.blur_kernel_size = 3

        self.frames_processed = 0
        self.cats_detected = 0
        self.detection_errors = 0

        global_error_handler.register_component(COMPONENT_NAME)

        self.cascade_path = cascade_path or self._find_builtin_cascade()
        try:
            self.cascade = cv2.CascadeClassifier(self.cascade_path)
        except cv2.error as e:
            raise ValueError(f"Failed to load cascade from {self.cascade_path}: {e}") from e
        if self.cascade.empty():
            raise ValueError(f"Failed to load cascade from {self.cascade_path}")

        logger.info(f"Loaded Haar cascade: {self.cascade_path}")

    def image_contains_cat(self, frame: NDArray, confidence_threshold: float) -> bool:
        if frame is None or getattr(frame, "size", 0) == 0:
            logger.debug("Empty frame - no cat")
            return False

        self.frames_processed += 1
        scores = self._score_frame(frame)
        if scores is None:
            self.detection_errors += 1
            return False

        found = any(score >= confidence_threshold for score in scores)
        if found:
            self.cats_detected += 1

        logger.debug(f"Scored {len(scores)} candidate boxes, best="
                     f"{max(scores) if scores else 0:.1f}, threshold={confidence_threshold}")
        return found

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.MEDIUM)
    def _score_frame(self, frame: NDArray) -> Optional[List[float]]:
        """Return a confidence score per detected box, None on OpenCV failure."""
        processed = self._preprocess_frame(frame)
        boxes = self._detect(processed)
        frame_h, frame_w = frame.shape[:2]
        return [self._score_box(box, frame_w, frame_h) for box in boxes]

    def _preprocess_frame(self, frame: NDArray) -> NDArray:
        """Grayscale, denoise and equalize the frame for the cascade."""
        frame = np.asarray(frame)
        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)

        if len(frame.shape) == 3:
            gray = cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
        else:
            gray = frame

        blurred = cv2.GaussianBlur(gray, (self.blur_kernel_size, self.blur_kernel_size), 0)
        return cv2.equalizeHist(blurred)

    def _detect(self, frame: NDArray) -> List[Tuple[int, int, int, int]]:
        detections = self.cascade.detectMultiScale(
            frame,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_detection_size,
            flags=cv2.CASCADE_SCALE_IMAGE
        )

        if len(detections) > 0:
            return [(int(x), int(y), int(w), int(h)) for x, y, w, h in detections]
        return []

    @staticmethod
    def _score_box(box: Tuple[int, int, int, int], frame_w: int, frame_h: int) -> float:
        """Score a box from 0 to 100; large, centred boxes score highest."""
        x, y, w, h = box

        center_x = x + w / 2
        center_y = y + h / 2
        center_dist = ((center_x - frame_w / 2) ** 2 + (center_y - frame_h / 2) ** 2) ** 0.5
        max_dist = ((frame_w / 2) ** 2 + (frame_h / 2) ** 2) ** 0.5
        center_factor = 1.0 - (center_dist / max_dist) if max_dist else 0.0

        # A cat filling a quarter of the frame counts as full size
        size_factor = min(1.0, (w * h) / (0.25 * frame_w * frame_h))

        confidence = 100.0 * (0.4 + 0.3 * center_factor + 0.3 * size_factor)
        return max(0.0, min(100.0, confidence))

    @staticmethod
    def _find_builtin_cascade() -> str:
        for filename in CASCADE_FILES:
            path = os.path.join(cv2.data.haarcascades, filename)
            if os.path.exists(path):
                return path
        raise FileNotFoundError(
            f"No bundled cat cascade in {cv2.data.haarcascades}; "
            f"set cascade_path to a haarcascade_frontalcatface XML file"
        )

    def get_detection_info(self) -> Dict[str, Any]:
        """Get image service parameters and counters."""
        return {
            "cascade_path": self.cascade_path,
            "detection_parameters": {
                "scale_factor": self.scale_factor,
                "min_neighbors": self.min_neighbors,
                "min_detection_size": self.min_detection_size
            },
            "frames_processed": self.frames_processed,
            "cats_detected": self.cats_detected,
            "detection_errors": self.detection_errors
        }


class LazyImageService(ImageServiceInterface):
    """Builds the real image service on the first frame.

    Commands that never process a frame do not need a working detector.
    """

    def __init__(self, factory: Callable[[], ImageServiceInterface]):
        self._factory = factory
        self._service: Optional[ImageServiceInterface] = None

    @property
    def service(self) -> ImageServiceInterface:
        if self._service is None:
            self._service = self._factory()
        return self._service

    def image_contains_cat(self, frame: NDArray, confidence_threshold: float) -> bool:
        return self.service.image_contains_cat(frame, confidence_threshold)


def create_image_service(config: SystemConfig) -> ImageServiceInterface:
    """Build the image service selected by the configuration."""
    if config.image_service == "fake":
        logger.info("Using fake image service")
        return FakeImageService(seed=config.fake_seed)
    if config.image_service == "opencv":
        return OpenCVImageService(
            cascade_path=config.cascade_path,
            scale_factor=config.scale_factor,
            min_neighbors=config.min_neighbors,
            min_detection_size=config.min_detection_size
        )
    raise ValueError(f"Unknown image service: {config.image_service}")
