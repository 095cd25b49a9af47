"""GreetMe - account registration, email verification and login API."""

__version__ = "0.1.0"
