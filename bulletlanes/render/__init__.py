from bulletlanes.render.frame_renderer import FrameRenderer

__all__ = ['FrameRenderer']
