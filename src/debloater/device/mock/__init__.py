"""Mock device backend for development and testing."""

from debloater.device.mock.mock_device import MockDevice

__all__ = ["MockDevice"]
