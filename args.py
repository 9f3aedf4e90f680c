import argparse


def get_args(argv=None):
    p = argparse.ArgumentParser(description="Blink Counter (webcam + MediaPipe Face Landmarker)")
    p.add_argument("--config", type=str, default="configs/default.yaml")
    # Session
    p.add_argument("--duration", type=int, default=None, help="Measurement length in seconds (10-600)")
    # Detector
    p.add_argument("--threshold", type=float, default=None, help="Smoothed closure score that counts as closed")
    p.add_argument("--smoothing-window", type=int, default=None, help="Frames averaged per eye")
    # Runtime
    p.add_argument("--camera", type=int, default=None, help="Camera device index")
    p.add_argument("--no-preview", action="store_true", help="Start with the camera preview hidden")
    p.add_argument("--quiet", action="store_true", help="Do not echo session events to the console")
    return p.parse_args(argv)


def apply_overrides(config, args):
    """
    Apply command line overrides on top of the loaded configuration

    Args:
        config: Configuration dictionary (modified in place)
        args: Parsed arguments from get_args()

    Returns:
        dict: The updated configuration
    """
    if args.duration is not None:
        config.setdefault('session', {})['duration_s'] = args.duration
    if args.threshold is not None:
        config.setdefault('blinks', {})['threshold'] = args.threshold
    if args.smoothing_window is not None:
        config.setdefault('blinks', {})['smoothing_window'] = args.smoothing_window
    if args.camera is not None:
        config.setdefault('camera', {})['index'] = args.camera
    if args.no_preview:
        config.setdefault('display', {})['show_preview'] = False
    if args.quiet:
        config.setdefault('logging', {})['echo'] = False
    return config
