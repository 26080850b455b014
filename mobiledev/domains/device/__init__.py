from .service import DeviceService, clip_lines

__all__ = ["DeviceService", "clip_lines"]
