# vision/samples.py
from typing import NamedTuple, Optional, Tuple

# Face Landmarker blendshape names and landmark index used for blink tracking
LEFT_BLINK_BLENDSHAPE = "eyeBlinkLeft"
RIGHT_BLINK_BLENDSHAPE = "eyeBlinkRight"
NOSE_TIP_INDEX = 1


class SourceUnavailableError(RuntimeError):
    """The camera or the face landmark model could not be initialized"""


class EyeSample(NamedTuple):
    left_score: float
    right_score: float


class NosePosition(NamedTuple):
    x: float
    y: float


def _blendshape_score(categories, name):
    for category in categories:
        if category.category_name == name:
            return category.score
    return None


def samples_from_result(result) -> Tuple[Optional[EyeSample], Optional[NosePosition]]:
    """
    Convert a FaceLandmarker result into the per-frame detector inputs

    Only the first face is used. A frame without blendshapes, or missing either
    eye blink score, yields no sample.

    Args:
        result: FaceLandmarkerResult (face_blendshapes, face_landmarks)

    Returns:
        tuple: (EyeSample or None, NosePosition or None)
    """
    sample = None
    nose = None

    blendshapes = getattr(result, 'face_blendshapes', None)
    if blendshapes:
        left = _blendshape_score(blendshapes[0], LEFT_BLINK_BLENDSHAPE)
        right = _blendshape_score(blendshapes[0], RIGHT_BLINK_BLENDSHAPE)
        if left is not None and right is not None:
            sample = EyeSample(left, right)

    landmarks = getattr(result, 'face_landmarks', None)
    if sample is not None and landmarks and len(landmarks[0]) > NOSE_TIP_INDEX:
        nose_tip = landmarks[0][NOSE_TIP_INDEX]
        nose = NosePosition(nose_tip.x, nose_tip.y)

    return sample, nose
