"""DroneYard: dispatch photogrammetry jobs from S3 uploads and report their lifecycle."""

__version__ = "0.1.0"
