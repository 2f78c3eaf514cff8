"""
ActivateLicenseCommand.

Command to bind a license key to a machine.
"""
from dataclasses import dataclass


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license on one machine."""

    license_key: str
    email: str
    machine_id: str
