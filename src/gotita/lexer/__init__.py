"""Line splitting and block-start classification."""

from gotita.lexer.core import TAB_STOP, Lexer, Line

__all__ = ["TAB_STOP", "Lexer", "Line"]
