# vision/eyes.py
import os

import cv2
import numpy as np
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision as mp_vision

from vision.samples import SourceUnavailableError, samples_from_result

FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


class EyeDetector:
    """
    Eyelid-closure sampling using the MediaPipe Face Landmarker (Tasks API)
    - Reads eyeBlinkLeft / eyeBlinkRight blendshape scores
    - Reads the nose tip landmark for head motion checks
    - Tracks a single face in VIDEO running mode
    """

    def __init__(self, config=None):
        """
        Initialize Eye Detector with configuration

        Args:
            config: Configuration dictionary with a 'face' section

        Raises:
            SourceUnavailableError: Model file missing or landmarker creation failed
        """
        self.config = config or {}
        face_config = self.config.get('face', {})

        self.model_path = face_config.get('model_path', 'models/face_landmarker.task')
        if not os.path.exists(self.model_path):
            raise SourceUnavailableError(
                f"Face landmarker model not found at {self.model_path}. "
                f"Download it from {FACE_LANDMARKER_MODEL_URL}"
            )

        try:
            base_options = mp_tasks.BaseOptions(model_asset_path=self.model_path)
            options = mp_vision.FaceLandmarkerOptions(
                base_options=base_options,
                running_mode=mp_vision.RunningMode.VIDEO,
                num_faces=1,
                min_face_detection_confidence=face_config.get('min_detection_confidence', 0.5),
                min_face_presence_confidence=face_config.get('min_presence_confidence', 0.5),
                min_tracking_confidence=face_config.get('min_tracking_confidence', 0.5),
                output_face_blendshapes=True,
                output_facial_transformation_matrixes=False
            )
            self.face_landmarker = mp_vision.FaceLandmarker.create_from_options(options)
        except Exception as e:
            raise SourceUnavailableError(f"Failed to initialize face landmarker: {e}") from e

        self.last_timestamp_ms = -1

    def read(self, frame, timestamp_ms):
        """
        Run the landmarker on one frame

        Args:
            frame: Input frame (BGR format)
            timestamp_ms: Frame timestamp in milliseconds

        Returns:
            tuple: (EyeSample or None, NosePosition or None)
        """
        # VIDEO mode rejects non-increasing timestamps
        timestamp_ms = max(int(timestamp_ms), self.last_timestamp_ms + 1)
        self.last_timestamp_ms = timestamp_ms

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb_frame))
        result = self.face_landmarker.detect_for_video(mp_image, timestamp_ms)
        return samples_from_result(result)

    def cleanup(self):
        """Clean up MediaPipe resources"""
        if hasattr(self, 'face_landmarker'):
            self.face_landmarker.close()
