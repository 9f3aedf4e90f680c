from types import SimpleNamespace

from vision.samples import EyeSample, NosePosition, samples_from_result


def category(name, score):
    return SimpleNamespace(category_name=name, score=score)


def landmark(x, y):
    return SimpleNamespace(x=x, y=y, z=0.0)


def face_result(blendshapes, landmarks):
    return SimpleNamespace(face_blendshapes=blendshapes, face_landmarks=landmarks)


FACE_LANDMARKS = [[landmark(0.4, 0.4), landmark(0.51, 0.62), landmark(0.6, 0.4)]]


def test_reads_blink_scores_and_nose_tip():
    result = face_result(
        [[category("browDownLeft", 0.1), category("eyeBlinkLeft", 0.42), category("eyeBlinkRight", 0.38)]],
        FACE_LANDMARKS,
    )
    sample, nose = samples_from_result(result)
    assert sample == EyeSample(0.42, 0.38)
    assert nose == NosePosition(0.51, 0.62)


def test_no_face():
    assert samples_from_result(face_result([], [])) == (None, None)


def test_missing_blink_category_gives_no_sample():
    result = face_result([[category("eyeBlinkLeft", 0.4)]], FACE_LANDMARKS)
    assert samples_from_result(result) == (None, None)


def test_blendshapes_without_landmarks():
    result = face_result(
        [[category("eyeBlinkLeft", 0.1), category("eyeBlinkRight", 0.2)]],
        [],
    )
    sample, nose = samples_from_result(result)
    assert sample == EyeSample(0.1, 0.2)
    assert nose is None


def test_only_first_face_used():
    result = face_result(
        [
            [category("eyeBlinkLeft", 0.1), category("eyeBlinkRight", 0.2)],
            [category("eyeBlinkLeft", 0.9), category("eyeBlinkRight", 0.9)],
        ],
        FACE_LANDMARKS + [[landmark(0.0, 0.0), landmark(0.9, 0.9)]],
    )
    sample, nose = samples_from_result(result)
    assert sample == EyeSample(0.1, 0.2)
    assert nose == NosePosition(0.51, 0.62)
