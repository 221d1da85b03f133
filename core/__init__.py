"""Shared runtime for the command-line raster filters."""
import os

# OpenCV reads this once, on first EXR access.
os.environ.setdefault("OPENCV_IO_ENABLE_OPENEXR", "1")
