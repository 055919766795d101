from __future__ import annotations
from .analysis import summarize_decisions
from .binding import bind
from .browser import MenuNotFound, ZendriverEnvironment, bind_page
from .config import MenuAimOptions, cfg
from .environment import DOCUMENT, DomEvent, MenuEnvironment
from .geometry import Corners, Point, Region, compute_gradient, derive_corners
from .intent import AimState, should_switch
from .machine import MenuAim
from .render import save_aim_diagram_jpeg
from .scheduler import AsyncioScheduler, RetryTimer, Scheduler
from .telemetry import AimRecorder
from .tracker import PointerTracker, Sample, default_tracker

__all__ = [
    "bind",
    "bind_page",
    "MenuAim",
    "MenuAimOptions",
    "MenuEnvironment",
    "ZendriverEnvironment",
    "MenuNotFound",
    "DomEvent",
    "DOCUMENT",
    "Point",
    "Region",
    "Corners",
    "derive_corners",
    "compute_gradient",
    "AimState",
    "should_switch",
    "PointerTracker",
    "Sample",
    "default_tracker",
    "Scheduler",
    "AsyncioScheduler",
    "RetryTimer",
    "AimRecorder",
    "summarize_decisions",
    "save_aim_diagram_jpeg",
    "cfg",
]
