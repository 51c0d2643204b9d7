from .config import EngineConfig, fit_surface_size, load_config
from .frame_rate_controller import FrameRateController
from .playback import DEFAULT_LOOP_PAUSE_MS, PlaybackEngine, PlaybackState, PlaybackStatus
from .scheduler import FrameScheduler, ManualFrameScheduler, ScheduledHandle, ThreadedFrameScheduler
from .surface import AnimationSurface, FramePresented

__all__ = [
    "DEFAULT_LOOP_PAUSE_MS",
    "AnimationSurface",
    "EngineConfig",
    "FramePresented",
    "FrameRateController",
    "FrameScheduler",
    "ManualFrameScheduler",
    "PlaybackEngine",
    "PlaybackState",
    "PlaybackStatus",
    "ScheduledHandle",
    "ThreadedFrameScheduler",
    "fit_surface_size",
    "load_config",
]
