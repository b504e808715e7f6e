"""Accelerated stepper motor control, a distance-driven motor pair and an RGB rainbow over a simulated board."""

__version__ = "0.1.0"
__all__ = ["board", "phases", "rainbow", "sonar_drive", "stepper"]